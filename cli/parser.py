"""Command parser for CLI input."""

import shlex

from cli.models import (
    CancelCommand,
    CommandRequest,
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


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0].lower()
    args = tokens[1:]

    if command_name == "list":
        _expect_no_args(command_name, args)
        return ListCommand()
    elif command_name == "refresh":
        _expect_no_args(command_name, args)
        return RefreshCommand()
    elif command_name == "logout":
        _expect_no_args(command_name, args)
        return LogoutCommand()
    elif command_name == "notifications":
        _expect_no_args(command_name, args)
        return NotificationsCommand()
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "token":
        return TokenCommand(token=_single_arg(command_name, args, "<bearer-token>"))
    elif command_name == "toggle":
        return ToggleCommand(file_id=_single_arg(command_name, args))
    elif command_name in ("public", "private"):
        return SetPrivacyCommand(
            file_id=_single_arg(command_name, args),
            public=command_name == "public",
            command=command_name,
        )
    elif command_name == "delete":
        return DeleteCommand(file_id=_single_arg(command_name, args))
    elif command_name == "share":
        return ShareCommand(file_id=_single_arg(command_name, args))
    elif command_name == "copy":
        return CopyCommand(file_id=_single_arg(command_name, args))
    elif command_name == "view":
        return ViewCommand(file_id=_single_arg(command_name, args))
    elif command_name == "fetch":
        return _parse_fetch(args)
    elif command_name == "cancel":
        return CancelCommand(target=_single_arg(command_name, args, "<file-id>|upload"))
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _expect_no_args(command_name: str, args: list[str]) -> None:
    if args:
        raise ParseError(f"{command_name} takes no arguments")


def _single_arg(command_name: str, args: list[str], placeholder: str = "<file-id>") -> str:
    """Return the only argument of a command."""
    if len(args) != 1:
        raise ParseError(f"{command_name} requires exactly 1 argument: {placeholder}")
    return args[0]


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path>' command.

    Unquoted paths containing spaces are joined back together.
    """
    if not args:
        raise ParseError("upload requires a file: upload <path>")
    return UploadCommand(path=" ".join(args))


def _parse_fetch(args: list[str]) -> FetchCommand:
    """Parse 'fetch <file-id> [dest]' command."""
    if len(args) not in (1, 2):
        raise ParseError("fetch requires a file id and an optional destination: fetch <file-id> [dest]")
    return FetchCommand(file_id=args[0], dest=args[1] if len(args) == 2 else None)
