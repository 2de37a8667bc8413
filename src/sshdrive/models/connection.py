"""Connection profile model for saved remote endpoints."""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Self

_MIN_PORT = 1
_MAX_PORT = 65535


class AuthType(StrEnum):
    """How a connection authenticates against the SSH server."""

    PASSWORD = "password"
    KEY = "key"


def normalize_drive_letter(value: str | None) -> str | None:
    """Reduce a drive letter to its first character, upper-cased.

    Empty strings and None both mean "no drive letter".
    """
    if not value:
        return None
    return value[0].upper()


@dataclass(frozen=True, slots=True)
class ConnectionProfile:
    """A saved description of a remote endpoint.

    Attributes:
        id: Backend-assigned identifier, empty for a profile never saved.
        name: Human-readable profile name.
        host: SSH server hostname or IP address.
        port: SSH port (1-65535).
        username: Login user.
        auth_type: Password or key authentication.
        key_path: Private key file, required iff auth_type is KEY.
        remote_path: Directory on the server to expose.
        preferred_drive_letter: Drive letter the user would like to mount at.
    """

    id: str
    name: str
    host: str
    port: int = 22
    username: str = ""
    auth_type: AuthType = AuthType.PASSWORD
    key_path: str | None = None
    remote_path: str = "/"
    preferred_drive_letter: str | None = None

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "auth_type", AuthType(self.auth_type))
        # A key path only means something for key authentication
        if self.auth_type is AuthType.PASSWORD or not self.key_path:
            object.__setattr__(self, "key_path", None)
        object.__setattr__(
            self, "preferred_drive_letter", normalize_drive_letter(self.preferred_drive_letter)
        )

        if not _MIN_PORT <= self.port <= _MAX_PORT:
            raise ValueError(f"Port must be within {_MIN_PORT}-{_MAX_PORT}, got {self.port}")
        if self.auth_type is AuthType.KEY and not self.key_path:
            raise ValueError("Key authentication requires a key path")

    @property
    def is_new(self) -> bool:
        """Return True if the backend has not assigned an id yet."""
        return not self.id

    @property
    def address(self) -> str:
        """Return user@host:port for display and logging."""
        return f"{self.username}@{self.host}:{self.port}"

    def with_id(self, profile_id: str) -> Self:
        """Return a copy carrying the given id."""
        return replace(self, id=profile_id)


def create_empty_profile() -> ConnectionProfile:
    """Return the draft a new-connection form starts from."""
    return ConnectionProfile(id="", name="", host="")
