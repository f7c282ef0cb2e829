"""Custom exception classes for the Sharebox client."""


class ShareboxError(Exception):
    """
    Base exception class for all client-side errors.
    """
    pass


class NotAuthenticatedError(ShareboxError):
    """
    Raised when no bearer token is held or the server rejected it.
    """
    pass


class ValidationError(ShareboxError):
    """
    Raised when a client-side precondition fails before any network call.
    """
    pass


class ActionInProgressError(ShareboxError):
    """
    Raised when a mutating action is already in flight for the same record.
    """

    def __init__(self, key: str):
        super().__init__(f"An action is already in progress for {key}")
        self.key = key


class DeleteNotConfirmedError(ShareboxError):
    """
    Raised when a delete is dispatched without an explicit confirmation.
    """
    pass


class RecordNotFoundError(ShareboxError):
    """
    Raised when a file id does not match any record in the collection.
    """
    pass


class AmbiguousIdError(ShareboxError):
    """
    Raised when an id prefix matches more than one record.
    """

    def __init__(self, prefix: str, matches: list[str]):
        super().__init__(f"'{prefix}' matches {len(matches)} files: {', '.join(matches)}")
        self.prefix = prefix
        self.matches = matches
