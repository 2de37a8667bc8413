"""Mount status model for drives attached by the mount service."""

from dataclasses import dataclass
from enum import StrEnum

from sshdrive.models.connection import normalize_drive_letter


class MountState(StrEnum):
    """State of a drive as reported by the mount service."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"

    @classmethod
    def from_string(cls, value: str) -> "MountState":
        """Parse a wire value, mapping anything unknown to ERROR."""
        try:
            return cls(value.lower())
        except ValueError:
            return cls.ERROR


@dataclass(frozen=True, slots=True)
class MountStatus:
    """An active binding of a connection profile to a drive letter.

    Attributes:
        drive_letter: Single upper-case drive letter.
        connection_id: ID of the mounted connection profile.
        state: Connected, disconnected or error.
        error_message: Service-provided detail when state is ERROR.
    """

    drive_letter: str
    connection_id: str
    state: MountState = MountState.CONNECTED
    error_message: str | None = None

    def __post_init__(self) -> None:
        letter = normalize_drive_letter(self.drive_letter)
        if letter is None:
            raise ValueError("Mount status requires a drive letter")
        object.__setattr__(self, "drive_letter", letter)
        object.__setattr__(self, "state", MountState(self.state))

    @property
    def is_connected(self) -> bool:
        """Return True if the drive is currently attached."""
        return self.state is MountState.CONNECTED
