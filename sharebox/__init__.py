"""File collection synchronization core for the Sharebox client."""

from sharebox.config import Config
from sharebox.locks import UPLOAD_LOCK, ActionLockManager
from sharebox.manager import DeleteConfirmation, DeleteState, FileCollectionManager
from sharebox.notifications import NotificationSink
from sharebox.schemas import FileRecord
from sharebox.session import Session, SessionGuard, SessionState
from sharebox.share import ShareLinkResolver, resolve_share_url
from sharebox.store import CollectionStore
from sharebox.transport import FileServiceClient
from sharebox.types import Outcome, OutcomeKind

__all__ = [
    "Config",
    "UPLOAD_LOCK",
    "ActionLockManager",
    "DeleteConfirmation",
    "DeleteState",
    "FileCollectionManager",
    "NotificationSink",
    "FileRecord",
    "Session",
    "SessionGuard",
    "SessionState",
    "ShareLinkResolver",
    "resolve_share_url",
    "CollectionStore",
    "FileServiceClient",
    "Outcome",
    "OutcomeKind",
]
