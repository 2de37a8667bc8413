"""Test fixtures for sshdrive tests."""

import asyncio
import os
import uuid
from dataclasses import replace

# Run Qt headless so the suite works without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from pytestqt.qtbot import QtBot

from sshdrive.api.protocol import ERROR_CONFLICT, ERROR_NOT_FOUND, JsonRpcError, ServiceError
from sshdrive.core.state import StateStore
from sshdrive.core.sync import SyncOrchestrator
from sshdrive.models.connection import AuthType, ConnectionProfile
from sshdrive.models.mount import MountState, MountStatus
from sshdrive.models.prerequisites import PrerequisiteState


class FakeMountService:
    """In-memory stand-in for the mount service.

    Behaves like the real backend: assigns ids on first save, refuses to
    mount a letter twice and reports unknown ids as not found. Any call
    can be made to fail with fail().
    """

    def __init__(
        self,
        connections: list[ConnectionProfile] | None = None,
        letters: str = "DEFGHIJKLMNOPQRSTUVWXYZ",
    ) -> None:
        self.connections: dict[str, ConnectionProfile] = {c.id: c for c in connections or []}
        self.mounts: dict[str, MountStatus] = {}
        self.all_letters = list(letters)
        self.prerequisites = PrerequisiteState(
            winfsp_installed=True,
            sshfs_installed=True,
            winfsp_path=r"C:\Program Files (x86)\WinFsp\bin\winfsp-x64.dll",
            sshfs_path="builtin",
        )
        self.check_conflicts = True
        # Report letters of broken mounts as free, like a drive whose path is gone
        self.free_unless_connected = False
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self._failures: dict[str, Exception] = {}

    def fail(self, method: str, error: Exception | None = None) -> None:
        """Make every later call to method raise."""
        self._failures[method] = error or ConnectionError(f"{method} unavailable")

    def recover(self, method: str) -> None:
        """Stop failing method."""
        self._failures.pop(method, None)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def _enter(self, method: str, *args: object) -> None:
        self.calls.append((method, args))
        # Every service call is a suspension point
        await asyncio.sleep(0)
        if method in self._failures:
            raise self._failures[method]

    @staticmethod
    def _error(method: str, code: int, message: str) -> ServiceError:
        return ServiceError(method, JsonRpcError(code, message))

    async def check_prerequisites(self) -> PrerequisiteState:
        await self._enter("check_prerequisites")
        return self.prerequisites

    async def get_connections(self) -> list[ConnectionProfile]:
        await self._enter("get_connections")
        return list(self.connections.values())

    async def save_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> ConnectionProfile:
        await self._enter("save_connection", profile, password)
        saved = profile if profile.id else profile.with_id(str(uuid.uuid4()))
        self.connections[saved.id] = saved
        return saved

    async def delete_connection(self, connection_id: str) -> None:
        await self._enter("delete_connection", connection_id)
        if self.connections.pop(connection_id, None) is None:
            raise self._error("delete_connection", ERROR_NOT_FOUND, "Connection not found")

    async def get_available_drive_letters(self) -> list[str]:
        await self._enter("get_available_drive_letters")
        if self.free_unless_connected:
            taken = {m.drive_letter for m in self.mounts.values() if m.is_connected}
        else:
            taken = set(self.mounts)
        return [letter for letter in self.all_letters if letter not in taken]

    async def mount_drive(self, connection_id: str, drive_letter: str) -> MountStatus:
        await self._enter("mount_drive", connection_id, drive_letter)
        if self.check_conflicts:
            if connection_id not in self.connections:
                raise self._error("mount_drive", ERROR_NOT_FOUND, "Connection not found")
            if drive_letter in self.mounts:
                raise self._error(
                    "mount_drive", ERROR_CONFLICT, f"Drive {drive_letter}: is already in use"
                )
        status = MountStatus(drive_letter, connection_id, MountState.CONNECTED)
        self.mounts[drive_letter] = status
        return status

    async def unmount_drive(self, drive_letter: str) -> None:
        await self._enter("unmount_drive", drive_letter)
        if self.mounts.pop(drive_letter, None) is None:
            raise self._error(
                "unmount_drive", ERROR_NOT_FOUND, f"Drive {drive_letter}: is not mounted"
            )

    async def get_mounted_drives(self) -> list[MountStatus]:
        await self._enter("get_mounted_drives")
        return list(self.mounts.values())

    async def test_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> bool:
        await self._enter("test_connection", profile, password)
        return True


def make_profile(profile_id: str = "c1", name: str = "dev", **kwargs: object) -> ConnectionProfile:
    """Return a password-auth profile with sensible defaults."""
    profile = ConnectionProfile(
        id=profile_id,
        name=name,
        host="10.0.0.1",
        port=22,
        username="u",
        auth_type=AuthType.PASSWORD,
        remote_path="/",
    )
    return replace(profile, **kwargs) if kwargs else profile


@pytest.fixture
def state(qtbot: QtBot) -> StateStore:
    """Return a fresh StateStore for each test."""
    return StateStore()


@pytest.fixture
def service() -> FakeMountService:
    """Return a fake service holding two saved connections."""
    return FakeMountService(
        connections=[make_profile("c1", "dev"), make_profile("c2", "prod", host="10.0.0.2")]
    )


@pytest.fixture
def sync(service: FakeMountService, state: StateStore) -> SyncOrchestrator:
    """Return an orchestrator wired to the fake service."""
    return SyncOrchestrator(service, state)
