"""Client-side data type definitions (Outcome, OutcomeKind, Notification)."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

NETWORK = "network"
TIMEOUT = "timeout"
INVALID_RESPONSE = "invalid-response"
CANCELLED = "cancelled"
BUSY = "busy"

Status = Union[int, str]


class OutcomeKind(str, Enum):
    OK = "ok"
    UNAUTHENTICATED = "unauthenticated"
    VALIDATION = "validation"
    REMOTE_REJECTED = "remote-rejected"
    NETWORK_FAILURE = "network-failure"
    CANCELLED = "cancelled"
    BUSY = "busy"


@dataclass(frozen=True)
class Outcome:
    """
    Uniform result of a remote call.

    Successful calls carry ``data``; failed calls carry ``status`` (an HTTP
    status code, or one of ``network``/``timeout``/``invalid-response``/
    ``cancelled``/``busy``) and a user-facing ``message``.
    """
    ok: bool
    data: Any = None
    status: Optional[Status] = None
    message: str = ""
    validation: bool = False

    @classmethod
    def success(cls, data: Any = None, status: int = 200, message: str = "") -> "Outcome":
        return cls(ok=True, data=data, status=status, message=message)

    @classmethod
    def failure(cls, status: Status, message: str) -> "Outcome":
        return cls(ok=False, status=status, message=message)

    @classmethod
    def invalid(cls, message: str) -> "Outcome":
        return cls(ok=False, message=message, validation=True)

    @property
    def kind(self) -> OutcomeKind:
        if self.ok:
            return OutcomeKind.OK
        if self.validation:
            return OutcomeKind.VALIDATION
        if self.status == 401:
            return OutcomeKind.UNAUTHENTICATED
        if self.status == CANCELLED:
            return OutcomeKind.CANCELLED
        if self.status == BUSY:
            return OutcomeKind.BUSY
        if isinstance(self.status, int):
            return OutcomeKind.REMOTE_REJECTED
        return OutcomeKind.NETWORK_FAILURE


@dataclass(frozen=True)
class Notification:
    """A transient message for the user (a toast in a graphical front end)."""
    title: str
    description: str
    variant: str = "default"
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"
