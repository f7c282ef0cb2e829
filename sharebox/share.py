"""Share link resolution and clipboard export."""

from typing import Optional

from prompt_toolkit.clipboard import Clipboard

from common.logging_config import get_logger
from sharebox.notifications import NotificationSink
from sharebox.schemas import FileRecord
from sharebox.transport import share_path

logger = get_logger(__name__)


def resolve_share_url(record: FileRecord, base_url: str) -> Optional[str]:
    """
    Build the public share URL for a record.

    Args:
        record: The record as currently held in the collection
        base_url: File service base URL

    Returns:
        ``<base>/api/files/share/<shareId>``, or None when the file is private
        or has no share id
    """
    if not record.share_link_available:
        return None
    return f"{base_url.rstrip('/')}{share_path(record.share_id)}"


def system_clipboard() -> Clipboard:
    """Clipboard backed by the operating system (through pyperclip)."""
    from prompt_toolkit.clipboard.pyperclip import PyperclipClipboard
    return PyperclipClipboard()


class ShareLinkResolver:
    """Resolves share links for held records and copies them to a clipboard."""

    def __init__(self, base_url: str, sink: NotificationSink, clipboard: Optional[Clipboard] = None):
        self.base_url = base_url
        self.sink = sink
        self._clipboard = clipboard

    @property
    def clipboard(self) -> Clipboard:
        if self._clipboard is None:
            self._clipboard = system_clipboard()
        return self._clipboard

    def resolve(self, record: FileRecord) -> Optional[str]:
        return resolve_share_url(record, self.base_url)

    def copy(self, record: FileRecord) -> bool:
        """
        Copy a record's share link to the clipboard.

        Failures are reported through the notification sink and never raised.

        Returns:
            True if the link was copied
        """
        url = self.resolve(record)
        if url is None:
            self.sink.failure(f'"{record.filename}" is private and has no share link')
            return False

        try:
            self.clipboard.set_text(url)
        except Exception as e:
            logger.warning(f"Clipboard export failed for {record.id}: {e}")
            self.sink.failure("Failed to copy link")
            return False

        self.sink.success("Share link copied to clipboard", title="Copied!")
        return True
