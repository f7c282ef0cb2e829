"""REPL with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import create_confirm_session

from common.logging_config import get_logger
from cli.commands import (
    handle_cancel,
    handle_copy,
    handle_delete,
    handle_fetch,
    handle_list,
    handle_logout,
    handle_notifications,
    handle_refresh,
    handle_set_privacy,
    handle_share,
    handle_token,
    handle_toggle,
    handle_upload,
    handle_view,
)
from cli.completer import ShareboxCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    NOT_LOGGED_IN,
    PROMPT_TEXT,
    SIGNED_OUT_PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    CancelCommand,
    CopyCommand,
    DeleteCommand,
    FetchCommand,
    ListCommand,
    LogoutCommand,
    NotificationsCommand,
    RefreshCommand,
    SetPrivacyCommand,
    ShareCommand,
    TokenCommand,
    ToggleCommand,
    UploadCommand,
    ViewCommand,
)
from cli.parser import ParseError, parse_command
from cli.utils import render_collection
from sharebox.exceptions import ShareboxError
from sharebox.manager import FileCollectionManager
from sharebox.session import SessionState
from sharebox.types import Notification

logger = get_logger(__name__)


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    """Display logo and welcome text."""
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def print_notification(notification: Notification) -> None:
    """Print a notification above the prompt."""
    style_class = "class:error" if notification.is_error else "class:success"
    print_formatted_text(
        FormattedText([(style_class, f"{notification.title}: "), ("", notification.description)]),
        style=STYLE,
    )


async def ask_confirmation(question: str) -> bool:
    """Ask a yes/no question; anything but an explicit yes declines."""
    return await create_confirm_session(question).prompt_async()


async def dispatch_command(cmd_obj, manager: FileCollectionManager) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, ListCommand):
        return handle_list(cmd_obj, manager)
    elif isinstance(cmd_obj, RefreshCommand):
        return await handle_refresh(cmd_obj, manager)
    elif isinstance(cmd_obj, UploadCommand):
        return await handle_upload(cmd_obj, manager)
    elif isinstance(cmd_obj, ToggleCommand):
        return await handle_toggle(cmd_obj, manager)
    elif isinstance(cmd_obj, SetPrivacyCommand):
        return await handle_set_privacy(cmd_obj, manager)
    elif isinstance(cmd_obj, DeleteCommand):
        return await handle_delete(cmd_obj, manager, ask_confirmation)
    elif isinstance(cmd_obj, ShareCommand):
        return handle_share(cmd_obj, manager)
    elif isinstance(cmd_obj, CopyCommand):
        return handle_copy(cmd_obj, manager)
    elif isinstance(cmd_obj, ViewCommand):
        return handle_view(cmd_obj, manager)
    elif isinstance(cmd_obj, FetchCommand):
        return await handle_fetch(cmd_obj, manager)
    elif isinstance(cmd_obj, CancelCommand):
        return handle_cancel(cmd_obj, manager)
    elif isinstance(cmd_obj, TokenCommand):
        return await handle_token(cmd_obj, manager)
    elif isinstance(cmd_obj, LogoutCommand):
        return handle_logout(cmd_obj, manager)
    elif isinstance(cmd_obj, NotificationsCommand):
        return handle_notifications(cmd_obj, manager)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def _prompt(manager: FileCollectionManager):
    if manager.state is SessionState.AUTHENTICATED:
        return [("class:prompt", PROMPT_TEXT)]
    return [("class:prompt.signed-out", SIGNED_OUT_PROMPT_TEXT)]


async def repl_loop(manager: FileCollectionManager) -> None:
    """Start interactive REPL with prompt_toolkit."""
    session: PromptSession = PromptSession(
        completer=ShareboxCompleter(manager), history=InMemoryHistory(), style=STYLE
    )
    manager.sink.subscribe(print_notification)

    clear_screen()
    show_welcome()

    with patch_stdout():
        if await manager.mount() is SessionState.UNAUTHENTICATED:
            print(NOT_LOGGED_IN)
        else:
            print(render_collection(manager))

        while True:
            try:
                user_input = await session.prompt_async(lambda: _prompt(manager))

                if not user_input.strip():
                    continue

                if user_input.strip() == "exit":
                    if manager.pending:
                        print(f"Waiting for {manager.pending} action(s) to finish...")
                        await manager.wait_idle()
                    print("Goodbye!")
                    break

                if user_input.strip() == "help":
                    print(HELP_TEXT)
                    continue

                if user_input.strip() == "clear":
                    clear_screen()
                    show_welcome()
                    continue

                cmd_obj = parse_command(user_input)
                result = await dispatch_command(cmd_obj, manager)
                if result:
                    print(result)

            except ParseError as e:
                print(f"Error: {e}")
            except ShareboxError as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\nGoodbye!")
                break
