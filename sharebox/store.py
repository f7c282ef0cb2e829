"""Collection store: the locally held, server-authoritative list of files."""

from typing import Iterator, Optional, Tuple

from common.logging_config import get_logger
from sharebox.exceptions import AmbiguousIdError
from sharebox.schemas import FileRecord
from sharebox.session import SessionGuard
from sharebox.transport import FileServiceClient
from sharebox.types import Outcome

logger = get_logger(__name__)


class CollectionStore:
    """
    Holds the user's files as last reported by the list endpoint.

    ``refresh`` is the only writer. A successful refresh replaces the whole
    collection; a failed one keeps the previous collection and records the
    error so the view stays consistent rather than flashing empty.
    """

    def __init__(self, client: FileServiceClient, guard: SessionGuard):
        self.client = client
        self.guard = guard
        self.files: Tuple[FileRecord, ...] = ()
        self.error = ""
        self.loading = True

    async def refresh(self) -> Outcome:
        """
        Replace the collection with a fresh listing from the server.

        Returns:
            The list outcome; on success its data is the new collection
        """
        if not self.guard.authenticated:
            self.loading = False
            return Outcome.failure(401, "Not logged in")

        token = self.guard.session.token
        try:
            outcome = await self.client.list_files()
        finally:
            self.loading = False

        if self.guard.session.token != token:
            # Logged out or re-authenticated while the listing was in flight.
            logger.info("Session changed during refresh; discarding listing")
            return Outcome.failure(401, "Session changed during refresh")

        if outcome.ok:
            self.files = self._dedupe(outcome.data)
            self.error = ""
            logger.debug(f"Collection refreshed: {len(self.files)} file(s)")
            return Outcome.success(self.files, status=outcome.status)

        if outcome.status == 401:
            # The guard listener already cleared the collection.
            self.error = ""
        elif isinstance(outcome.status, int):
            self.error = f"Failed to fetch files: {outcome.status}"
        else:
            self.error = "Network error fetching files"
        logger.warning(f"Refresh failed, keeping {len(self.files)} cached file(s): {outcome.message}")
        return outcome

    def _dedupe(self, records) -> Tuple[FileRecord, ...]:
        seen = set()
        unique = []
        for record in records:
            if record.id in seen:
                logger.warning(f"Duplicate file id {record.id} in listing; keeping first")
                continue
            seen.add(record.id)
            unique.append(record)
        return tuple(unique)

    def clear(self, reason: str = "") -> None:
        """Discard the collection, e.g. when the session ends."""
        logger.info(f"Clearing collection ({reason or 'requested'})")
        self.files = ()
        self.error = ""

    def get(self, file_id: str) -> Optional[FileRecord]:
        for record in self.files:
            if record.id == file_id:
                return record
        return None

    def find(self, id_or_prefix: str) -> Optional[FileRecord]:
        """
        Look up a record by full id or unique id prefix.

        Raises:
            AmbiguousIdError: If the prefix matches several records
        """
        exact = self.get(id_or_prefix)
        if exact is not None:
            return exact
        matches = [r for r in self.files if r.id.startswith(id_or_prefix)]
        if len(matches) > 1:
            raise AmbiguousIdError(id_or_prefix, [r.id for r in matches])
        return matches[0] if matches else None

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)
