"""Action orchestration for the file collection."""

import asyncio
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Set

from prompt_toolkit.clipboard import Clipboard

from common.logging_config import get_logger
from sharebox.config import Config
from sharebox.exceptions import ActionInProgressError, DeleteNotConfirmedError, ValidationError
from sharebox.locks import UPLOAD_LOCK, ActionLockManager
from sharebox.notifications import NotificationSink
from sharebox.schemas import FileRecord
from sharebox.session import Session, SessionGuard, SessionState
from sharebox.share import ShareLinkResolver
from sharebox.store import CollectionStore
from sharebox.transport import FileServiceClient
from sharebox.types import BUSY, CANCELLED, Outcome, OutcomeKind

logger = get_logger(__name__)


class DeleteState(str, Enum):
    IDLE = "idle"
    CONFIRM_PENDING = "confirm-pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class DeleteConfirmation:
    """
    Single-use confirmation for deleting one file.

    IDLE -> CONFIRM_PENDING -> CONFIRMED | CANCELLED. Only a CONFIRMED
    confirmation can be passed to FileCollectionManager.delete.
    """

    def __init__(self, file_id: str, filename: str):
        self.file_id = file_id
        self.filename = filename
        self.state = DeleteState.IDLE

    @property
    def prompt(self) -> str:
        return f'Delete "{self.filename}"? This action cannot be undone.'

    def request(self) -> "DeleteConfirmation":
        if self.state is not DeleteState.IDLE:
            raise DeleteNotConfirmedError(f"Delete of {self.file_id} is already {self.state.value}")
        self.state = DeleteState.CONFIRM_PENDING
        return self

    def confirm(self) -> None:
        if self.state is not DeleteState.CONFIRM_PENDING:
            raise DeleteNotConfirmedError(f"Cannot confirm delete of {self.file_id} from state {self.state.value}")
        self.state = DeleteState.CONFIRMED

    def cancel(self) -> None:
        if self.state is DeleteState.CONFIRMED:
            raise DeleteNotConfirmedError(f"Delete of {self.file_id} was already confirmed")
        self.state = DeleteState.CANCELLED

    @property
    def confirmed(self) -> bool:
        return self.state is DeleteState.CONFIRMED


class FileCollectionManager:
    """
    Coordinates session, transport, collection, locks and notifications.

    Every mutating action runs as: session check, lock acquire, remote call,
    reconcile (full refresh, whatever the call's outcome), lock release, then
    exactly one notification.
    """

    def __init__(
        self,
        config: Config,
        session: Optional[Session] = None,
        clipboard: Optional[Clipboard] = None
    ):
        self.config = config
        self.session = session or Session(config)
        self.guard = SessionGuard(self.session)
        self.client = FileServiceClient(config, self.guard)
        self.store = CollectionStore(self.client, self.guard)
        self.locks = ActionLockManager()
        self.sink = NotificationSink(config.get_notification_history())
        self.share = ShareLinkResolver(config.get_base_url(), self.sink, clipboard)
        self._tasks: Dict[str, Set[asyncio.Task]] = {}
        self.guard.on_invalidated(self._on_session_invalidated)

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def files(self):
        return self.store.files

    def is_busy(self, file_id: str) -> bool:
        return self.locks.is_busy(file_id)

    def _on_session_invalidated(self, reason: str) -> None:
        self.store.clear(reason)
        self.locks.abandon_all()
        self.sink.clear_error()

    async def mount(self) -> SessionState:
        """
        Initial load. Without a credential no request is made and the
        manager stays unauthenticated.
        """
        if not self.guard.authenticated:
            logger.info("No credential held; staying unauthenticated")
            self.store.loading = False
            return SessionState.UNAUTHENTICATED
        await self.reconcile()
        return self.state

    async def authenticate(self, token: str) -> SessionState:
        self.guard.authenticate(token)
        return await self.mount()

    def logout(self) -> None:
        self.guard.logout()

    async def reconcile(self) -> Outcome:
        """Refresh the collection and mirror its error into the error banner."""
        outcome = await self.store.refresh()
        if outcome.ok:
            self.sink.clear_error()
        elif self.store.error:
            self.sink.set_error(self.store.error)
        return outcome

    async def _run_action(
        self,
        key: str,
        operation: Callable[[], Awaitable[Outcome]],
        success_message: Optional[str],
        failure_message: str,
        record_error: bool = False
    ) -> Outcome:
        """
        Run one mutating action under the lock for ``key``.

        The lock is released on every exit path, including cancellation, and
        before the outcome is reported.
        """
        if not self.guard.authenticated:
            outcome = Outcome.failure(401, "Not logged in. Please run: token <bearer-token>")
            self._report(outcome, success_message, failure_message, record_error)
            return outcome

        try:
            with self.locks.hold(key):
                try:
                    outcome = await operation()
                    # A 401 for a credential replaced meanwhile leaves the session up.
                    if outcome.kind is not OutcomeKind.UNAUTHENTICATED or self.guard.authenticated:
                        await self.reconcile()
                except asyncio.CancelledError:
                    self.locks.release(key)
                    self._report(
                        Outcome.failure(CANCELLED, "Action cancelled; run 'refresh' to see the current state"),
                        success_message, failure_message, record_error
                    )
                    raise
        except ActionInProgressError:
            outcome = Outcome.failure(BUSY, "Another action is still in progress for this file")
            self._report(outcome, success_message, failure_message, record_error)
            return outcome

        self._report(outcome, success_message, failure_message, record_error)
        return outcome

    def _report(
        self,
        outcome: Outcome,
        success_message: Optional[str],
        failure_message: str,
        record_error: bool
    ) -> None:
        kind = outcome.kind
        if kind is OutcomeKind.OK:
            self.sink.success(success_message or outcome.message or "Done")
            return

        if kind is OutcomeKind.UNAUTHENTICATED and not self.guard.authenticated:
            description = outcome.message or "Session expired. Please log in again."
            self.sink.failure(description, title="Signed out")
            return

        if kind is OutcomeKind.NETWORK_FAILURE:
            description = f"Network error: {outcome.message}" if outcome.message else "Network error"
        elif kind is OutcomeKind.REMOTE_REJECTED:
            description = outcome.message or f"{failure_message}: {outcome.status}"
        else:
            description = outcome.message or failure_message

        if record_error:
            self.sink.set_error(description)
        self.sink.failure(description)

    def _read_upload(self, path: Optional[str]) -> tuple[Path, bytes]:
        if not path or not path.strip():
            raise ValidationError("Please select a file")

        file_path = Path(path.strip()).expanduser()
        if not file_path.exists():
            raise ValidationError(f"File not found: {path}")
        if not file_path.is_file():
            raise ValidationError(f"Not a file: {path}")

        try:
            content = file_path.read_bytes()
        except OSError as e:
            raise ValidationError(f"Cannot read {path}: {e}")
        if not content:
            raise ValidationError(f"File is empty: {path}")
        return file_path, content

    async def upload(self, path: Optional[str]) -> Outcome:
        """
        Upload a local file. Only one upload may be in flight at a time.

        Validation failures are reported locally and never reach the network.
        """
        if self.locks.upload_in_progress:
            outcome = Outcome.failure(BUSY, "An upload is already in progress")
            self._report(outcome, None, "Upload failed", record_error=False)
            return outcome

        try:
            file_path, content = self._read_upload(path)
        except ValidationError as e:
            outcome = Outcome.invalid(str(e))
            self._report(outcome, None, "Upload failed", record_error=True)
            return outcome

        self.sink.clear_error()
        return await self._run_action(
            UPLOAD_LOCK,
            lambda: self.client.upload_file(content, file_path.name),
            "File uploaded successfully!",
            "Upload failed",
            record_error=True,
        )

    async def toggle_privacy(self, file_id: str) -> Outcome:
        """
        Flip a file between private and public.

        Not idempotent: the server toggles its current state.
        """
        return await self._run_action(
            file_id,
            lambda: self.client.toggle_privacy(file_id),
            None,
            "Failed to update file privacy",
        )

    async def set_privacy(self, file_id: str, public: bool) -> Outcome:
        """
        Bring a file to the requested access state.

        The wire call can only toggle, so the toggle is skipped when the held
        record already has the requested state. Another client changing the
        file between our last refresh and the toggle can still defeat this.
        """
        record = self.store.get(file_id)
        if record is None:
            await self.reconcile()
            record = self.store.get(file_id)

        if record is not None and record.is_public == public:
            state = "public" if public else "private"
            self.sink.success(f'"{record.filename}" is already {state}')
            return Outcome.success(record)

        return await self.toggle_privacy(file_id)

    def request_delete(self, file_id: str) -> DeleteConfirmation:
        """Start the delete flow; nothing is sent until the confirmation is confirmed."""
        record = self.store.get(file_id)
        filename = record.filename if record is not None else file_id
        return DeleteConfirmation(file_id, filename).request()

    async def delete(self, confirmation: DeleteConfirmation) -> Outcome:
        """
        Delete a file after explicit confirmation.

        Raises:
            DeleteNotConfirmedError: If the confirmation was not confirmed
        """
        if not confirmation.confirmed:
            raise DeleteNotConfirmedError(
                f"Refusing to delete {confirmation.file_id} without confirmation"
            )
        return await self._run_action(
            confirmation.file_id,
            lambda: self.client.delete_file(confirmation.file_id),
            "File deleted successfully",
            "Failed to delete file",
        )

    def share_url(self, file_id: str) -> Optional[str]:
        record = self.store.get(file_id)
        if record is None:
            return None
        return self.share.resolve(record)

    def copy_share_link(self, file_id: str) -> bool:
        record = self.store.get(file_id)
        if record is None:
            self.sink.failure(f"File not found: {file_id}")
            return False
        return self.share.copy(record)

    async def fetch_shared(self, record: FileRecord) -> Outcome:
        """Download a public file through its share link, without credentials."""
        if not record.share_link_available:
            return Outcome.invalid(f'"{record.filename}" is not shared')
        return await self.client.fetch_shared(record.share_id)

    def spawn(self, key: str, action: Awaitable[Outcome]) -> asyncio.Task:
        """
        Run an action in the background so actions on different files overlap.

        Args:
            key: Lock key of the action (file id or UPLOAD_LOCK)
            action: The action coroutine, e.g. ``manager.toggle_privacy(id)``
        """
        task = asyncio.ensure_future(action)
        tasks = self._tasks.setdefault(key, set())
        tasks.add(task)

        def _done(finished: asyncio.Task) -> None:
            tasks.discard(finished)
            if not tasks:
                self._tasks.pop(key, None)
            if not finished.cancelled() and finished.exception() is not None:
                logger.error(f"Action for {key} failed", exc_info=finished.exception())

        task.add_done_callback(_done)
        return task

    def cancel(self, key: str) -> bool:
        """
        Cancel the in-flight action for ``key``.

        Returns:
            True if a running action was cancelled
        """
        tasks = [t for t in self._tasks.get(key, ()) if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info(f"Cancelled {len(tasks)} action(s) for {key}")
        return bool(tasks)

    @property
    def pending(self) -> int:
        return sum(len(tasks) for tasks in self._tasks.values())

    async def wait_idle(self) -> None:
        """Wait for every background action to settle."""
        while self._tasks:
            tasks = [t for group in self._tasks.values() for t in group]
            await asyncio.gather(*tasks, return_exceptions=True)

    async def close(self) -> None:
        for key in list(self._tasks):
            self.cancel(key)
        await self.wait_idle()
        await self.client.close()
