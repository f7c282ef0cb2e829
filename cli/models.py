"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class ListCommand:
    """Show the held collection."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class RefreshCommand:
    """Reload the collection from the server."""

    command: Literal["refresh"] = "refresh"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file."""

    path: str
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ToggleCommand:
    """Toggle a file's privacy."""

    file_id: str
    command: Literal["toggle"] = "toggle"


@dataclass(frozen=True)
class SetPrivacyCommand:
    """Bring a file to a given access state."""

    file_id: str
    public: bool
    command: Literal["public", "private"] = "public"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete a file after confirmation."""

    file_id: str
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class ShareCommand:
    """Show a file's share link."""

    file_id: str
    command: Literal["share"] = "share"


@dataclass(frozen=True)
class CopyCommand:
    """Copy a file's share link to the clipboard."""

    file_id: str
    command: Literal["copy"] = "copy"


@dataclass(frozen=True)
class ViewCommand:
    """Open a file's content URL."""

    file_id: str
    command: Literal["view"] = "view"


@dataclass(frozen=True)
class FetchCommand:
    """Download a public file through its share link."""

    file_id: str
    dest: Optional[str] = None
    command: Literal["fetch"] = "fetch"


@dataclass(frozen=True)
class CancelCommand:
    """Cancel an in-flight action ('upload' or a file id)."""

    target: str
    command: Literal["cancel"] = "cancel"


@dataclass(frozen=True)
class TokenCommand:
    """Adopt a bearer token."""

    token: str
    command: Literal["token"] = "token"


@dataclass(frozen=True)
class LogoutCommand:
    """Forget the stored token."""

    command: Literal["logout"] = "logout"


@dataclass(frozen=True)
class NotificationsCommand:
    """Show recent notifications."""

    command: Literal["notifications"] = "notifications"


CommandRequest = (
    ListCommand
    | RefreshCommand
    | UploadCommand
    | ToggleCommand
    | SetPrivacyCommand
    | DeleteCommand
    | ShareCommand
    | CopyCommand
    | ViewCommand
    | FetchCommand
    | CancelCommand
    | TokenCommand
    | LogoutCommand
    | NotificationsCommand
)
