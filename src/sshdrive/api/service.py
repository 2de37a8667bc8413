"""Interface of the external mount-management service."""

from typing import Protocol

from sshdrive.models.connection import ConnectionProfile
from sshdrive.models.mount import MountStatus
from sshdrive.models.prerequisites import PrerequisiteState


class MountService(Protocol):
    """Calls offered by the mount service.

    The service owns the SSH/SFTP transport, credential storage and the
    virtual filesystem. Everything on this side of the boundary only
    caches what these calls return.
    """

    async def check_prerequisites(self) -> PrerequisiteState: ...

    async def get_connections(self) -> list[ConnectionProfile]: ...

    async def save_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> ConnectionProfile: ...

    async def delete_connection(self, connection_id: str) -> None: ...

    async def get_available_drive_letters(self) -> list[str]: ...

    async def mount_drive(self, connection_id: str, drive_letter: str) -> MountStatus: ...

    async def unmount_drive(self, drive_letter: str) -> None: ...

    async def get_mounted_drives(self) -> list[MountStatus]: ...

    async def test_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> bool: ...
