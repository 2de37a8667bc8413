"""Error taxonomy for the synchronization layer."""


class SyncError(Exception):
    """Base class for failures talking to the mount service."""


class SyncFailed(SyncError):
    """A refresh sub-call failed; nothing was committed."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Refresh failed: {cause}")
        self.cause = cause


class RemoteCallFailed(SyncError):
    """The mount service rejected a save, delete, mount, unmount or test call."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class InvariantViolation(AssertionError):
    """A registry or drive-letter pool constraint would be broken.

    Signals a bug in the caller or a desync between the backend and the
    local cache. Never published to the error channel and never wrapped.
    """
