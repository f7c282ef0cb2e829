"""Command handler functions for CLI operations."""

import webbrowser
from pathlib import Path
from typing import Awaitable, Callable

from common.logging_config import get_logger
from cli.constants import NOT_LOGGED_IN
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
from cli.utils import format_file_size, render_collection
from sharebox.exceptions import NotAuthenticatedError, RecordNotFoundError
from sharebox.locks import UPLOAD_LOCK
from sharebox.manager import FileCollectionManager
from sharebox.schemas import FileRecord
from sharebox.session import SessionState

logger = get_logger(__name__)

Confirm = Callable[[str], Awaitable[bool]]


def _require_login(manager: FileCollectionManager) -> None:
    if manager.state is SessionState.UNAUTHENTICATED:
        raise NotAuthenticatedError(NOT_LOGGED_IN)


def _resolve(manager: FileCollectionManager, file_id: str) -> FileRecord:
    """
    Find a held record by id or unique prefix.

    Raises:
        NotAuthenticatedError: If not logged in
        AmbiguousIdError: If the prefix matches several files
        RecordNotFoundError: If nothing matches
    """
    _require_login(manager)
    record = manager.store.find(file_id)
    if record is None:
        raise RecordNotFoundError(f"No file with id '{file_id}'. Run 'refresh' to reload.")
    return record


def handle_list(cmd: ListCommand, manager: FileCollectionManager) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand
        manager: Collection manager

    Returns:
        The rendered collection
    """
    _require_login(manager)
    return render_collection(manager)


async def handle_refresh(cmd: RefreshCommand, manager: FileCollectionManager) -> str:
    """Handle 'refresh' command: reload from the server, then render."""
    _require_login(manager)
    logger.info("Executing refresh command")
    await manager.reconcile()
    if manager.state is SessionState.UNAUTHENTICATED:
        return NOT_LOGGED_IN
    return render_collection(manager)


async def handle_upload(cmd: UploadCommand, manager: FileCollectionManager, wait: bool = False) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with the local path
        manager: Collection manager
        wait: Await the upload instead of leaving it in the background

    Returns:
        Status line; the outcome arrives as a notification
    """
    _require_login(manager)
    logger.info(f"Executing upload command: path={cmd.path}")
    task = manager.spawn(UPLOAD_LOCK, manager.upload(cmd.path))
    if wait:
        await task
    return f"Upload started: {cmd.path}"


async def handle_toggle(cmd: ToggleCommand, manager: FileCollectionManager, wait: bool = False) -> str:
    """Handle 'toggle' command."""
    record = _resolve(manager, cmd.file_id)
    task = manager.spawn(record.id, manager.toggle_privacy(record.id))
    if wait:
        await task
    return f"Updating privacy of {record.filename}..."


async def handle_set_privacy(cmd: SetPrivacyCommand, manager: FileCollectionManager, wait: bool = False) -> str:
    """Handle 'public' and 'private' commands."""
    record = _resolve(manager, cmd.file_id)
    task = manager.spawn(record.id, manager.set_privacy(record.id, cmd.public))
    if wait:
        await task
    target = "public" if cmd.public else "private"
    return f"Making {record.filename} {target}..."


async def handle_delete(
    cmd: DeleteCommand,
    manager: FileCollectionManager,
    confirm: Confirm,
    wait: bool = False
) -> str:
    """
    Handle 'delete' command.

    Args:
        cmd: DeleteCommand with the file id
        manager: Collection manager
        confirm: Asks the user a yes/no question; nothing is deleted unless it returns True
        wait: Await the delete instead of leaving it in the background

    Returns:
        Status line
    """
    record = _resolve(manager, cmd.file_id)
    confirmation = manager.request_delete(record.id)

    if not await confirm(confirmation.prompt):
        confirmation.cancel()
        logger.info(f"Delete of {record.id} cancelled by user")
        return "Delete cancelled."

    confirmation.confirm()
    task = manager.spawn(record.id, manager.delete(confirmation))
    if wait:
        await task
    return f"Deleting {record.filename}..."


def handle_share(cmd: ShareCommand, manager: FileCollectionManager) -> str:
    """Handle 'share' command: show the share link of a public file."""
    record = _resolve(manager, cmd.file_id)
    url = manager.share.resolve(record)
    if url is None:
        return f"{record.filename} is private. Run: public {cmd.file_id}"
    return f"Shareable link: {url}"


def handle_copy(cmd: CopyCommand, manager: FileCollectionManager) -> str:
    """Handle 'copy' command. The result is reported as a notification."""
    record = _resolve(manager, cmd.file_id)
    manager.copy_share_link(record.id)
    return ""


def handle_view(cmd: ViewCommand, manager: FileCollectionManager) -> str:
    """Handle 'view' command: open the file's content URL in a browser."""
    record = _resolve(manager, cmd.file_id)
    if not record.file_url:
        return f"Error: {record.filename} has no content URL"
    try:
        opened = webbrowser.open(record.file_url)
    except webbrowser.Error as e:
        logger.warning(f"Could not open browser: {e}")
        opened = False
    if not opened:
        return f"Open this URL to view the file: {record.file_url}"
    return f"Opening {record.filename}..."


async def handle_fetch(cmd: FetchCommand, manager: FileCollectionManager) -> str:
    """
    Handle 'fetch' command: download a public file through its share link.

    Args:
        cmd: FetchCommand with the file id and an optional destination
        manager: Collection manager

    Returns:
        Where the file was saved, or an error line
    """
    record = _resolve(manager, cmd.file_id)
    dest = Path(cmd.dest).expanduser() if cmd.dest else Path.cwd() / record.filename
    if dest.is_dir():
        dest = dest / record.filename
    if dest.exists():
        return f"Error: {dest} already exists"

    outcome = await manager.fetch_shared(record)
    if not outcome.ok:
        return f"Error: {outcome.message or outcome.status}"

    try:
        dest.write_bytes(outcome.data)
    except OSError as e:
        logger.error(f"Could not write {dest}: {e}")
        return f"Error: Cannot write {dest}: {e}"

    logger.info(f"Fetched {record.id} into {dest}")
    return f"Saved {record.filename} ({format_file_size(len(outcome.data))}) to {dest}"


def handle_cancel(cmd: CancelCommand, manager: FileCollectionManager) -> str:
    """Handle 'cancel' command."""
    if cmd.target.lower() == "upload":
        key, label = UPLOAD_LOCK, "upload"
    else:
        record = _resolve(manager, cmd.target)
        key, label = record.id, record.filename
    if manager.cancel(key):
        return f"Cancelling {label}..."
    return f"Nothing in progress for {label}."


async def handle_token(cmd: TokenCommand, manager: FileCollectionManager) -> str:
    """Handle 'token' command: adopt a bearer token and load the collection."""
    try:
        state = await manager.authenticate(cmd.token)
    except NotAuthenticatedError as e:
        return f"Error: {e}"
    if state is SessionState.UNAUTHENTICATED:
        return "Token rejected by the file service."
    return render_collection(manager)


def handle_logout(cmd: LogoutCommand, manager: FileCollectionManager) -> str:
    """Handle 'logout' command."""
    manager.logout()
    return "Logged out."


def handle_notifications(cmd: NotificationsCommand, manager: FileCollectionManager) -> str:
    """Handle 'notifications' command."""
    history = list(manager.sink.history)
    if not history:
        return "No notifications."
    return '\n'.join(
        f"[{n.created_at:%H:%M:%S}] {n.title}: {n.description}" for n in history
    )
