"""Per-record action locks."""

from contextlib import contextmanager
from typing import Iterator, Set

from common.logging_config import get_logger
from sharebox.exceptions import ActionInProgressError

logger = get_logger(__name__)

# Uploads have no record id yet, so they share one global key.
UPLOAD_LOCK = "__upload__"


class ActionLockManager:
    """
    Lock table allowing at most one in-flight mutating action per key.

    Keys are file ids, plus UPLOAD_LOCK for uploads. A busy key rejects new
    actions instead of queueing them.
    """

    def __init__(self):
        self._held: Set[str] = set()

    def try_acquire(self, key: str) -> bool:
        if key in self._held:
            logger.debug(f"Lock refused for {key}: already held")
            return False
        self._held.add(key)
        logger.debug(f"Lock acquired for {key}")
        return True

    def release(self, key: str) -> None:
        """Release a lock. Releasing a key that is not held is a no-op."""
        if key in self._held:
            self._held.discard(key)
            logger.debug(f"Lock released for {key}")

    def is_busy(self, key: str) -> bool:
        return key in self._held

    @property
    def upload_in_progress(self) -> bool:
        return UPLOAD_LOCK in self._held

    @property
    def busy_ids(self) -> frozenset:
        """File ids with an action in flight (the upload lock excluded)."""
        return frozenset(k for k in self._held if k != UPLOAD_LOCK)

    def abandon_all(self) -> None:
        """Drop every lock, used when the session is torn down."""
        if self._held:
            logger.info(f"Abandoning {len(self._held)} pending lock(s)")
        self._held.clear()

    @contextmanager
    def hold(self, key: str) -> Iterator[str]:
        """
        Hold the lock for ``key`` for the duration of the block.

        Raises:
            ActionInProgressError: If the key is already locked
        """
        if not self.try_acquire(key):
            raise ActionInProgressError(key)
        try:
            yield key
        finally:
            self.release(key)

    def __len__(self) -> int:
        return len(self._held)
