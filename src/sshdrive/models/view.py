"""Display record joining a connection profile with its mount."""

from dataclasses import dataclass

from sshdrive.models.connection import ConnectionProfile
from sshdrive.models.mount import MountStatus


@dataclass(frozen=True, slots=True)
class ConnectionView:
    """A connection profile as the UI shows it.

    Derived, never stored: recomputed from the connection and mount
    registries whenever either changes.

    Attributes:
        profile: The source profile.
        is_connected: True if a connected mount exists for the profile.
        mounted_drive_letter: Letter of the matching mount, if any.
    """

    profile: ConnectionProfile
    is_connected: bool = False
    mounted_drive_letter: str | None = None

    @property
    def id(self) -> str:
        """Return the source profile's id."""
        return self.profile.id

    @property
    def name(self) -> str:
        """Return the source profile's name."""
        return self.profile.name

    @classmethod
    def from_profile(
        cls, profile: ConnectionProfile, mount: MountStatus | None = None
    ) -> "ConnectionView":
        """Build the view for a profile and its mount (if any)."""
        if mount is None:
            return cls(profile=profile)
        return cls(
            profile=profile,
            is_connected=mount.is_connected,
            mounted_drive_letter=mount.drive_letter,
        )
