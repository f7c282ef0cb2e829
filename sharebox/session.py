"""Session context and guard for the bearer credential."""

from enum import Enum
from typing import Callable, List, Optional

from common.logging_config import get_logger
from sharebox.config import Config
from sharebox.exceptions import NotAuthenticatedError

logger = get_logger(__name__)


class SessionState(str, Enum):
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class Session:
    """
    Holds the bearer token for the running client.

    The token is loaded from the config file when the session is created and
    written back whenever it changes, so a restarted REPL resumes the session.
    """

    def __init__(self, config: Config):
        self.config = config
        self.token: Optional[str] = config.get_token()

    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self.token else SessionState.UNAUTHENTICATED

    def set_token(self, token: str) -> None:
        self.token = token
        self.config.set_token(token)

    def clear(self) -> None:
        self.token = None
        self.config.clear_token()


class SessionGuard:
    """Validates the credential and tears the session down when it is rejected."""

    def __init__(self, session: Session):
        self.session = session
        self._listeners: List[Callable[[str], None]] = []

    @property
    def authenticated(self) -> bool:
        return self.session.state is SessionState.AUTHENTICATED

    def on_invalidated(self, callback: Callable[[str], None]) -> None:
        """
        Register a callback fired when the session goes from authenticated
        to unauthenticated.

        Args:
            callback: Called with the invalidation reason
        """
        self._listeners.append(callback)

    def require_session(self) -> str:
        """
        Return the bearer token for the current session.

        Raises:
            NotAuthenticatedError: If no token is held
        """
        if not self.session.token:
            raise NotAuthenticatedError("Not logged in. Please run: token <bearer-token>")
        return self.session.token

    def authenticate(self, token: str) -> None:
        """Adopt a token obtained from an external login flow."""
        token = token.strip()
        if not token:
            raise NotAuthenticatedError("Token must not be empty")
        self.session.set_token(token)
        logger.info("Session authenticated")

    def invalidate(self, reason: str = "unauthorized", token: Optional[str] = None) -> None:
        """
        Clear the credential and notify listeners.

        Safe to call from several in-flight requests at once: listeners only
        fire on the first call after the session was authenticated.

        Args:
            reason: Logged and passed to listeners
            token: The credential that was rejected. When given and no longer
                the current one, the call is ignored.
        """
        if token is not None and token != self.session.token:
            logger.debug(f"Ignoring rejection of a replaced credential (reason={reason})")
            return

        was_authenticated = self.authenticated
        self.session.clear()
        if not was_authenticated:
            logger.debug(f"Session already unauthenticated (reason={reason})")
            return

        logger.warning(f"Session invalidated (reason={reason})")
        for callback in list(self._listeners):
            callback(reason)

    def logout(self) -> None:
        self.invalidate("logout")
