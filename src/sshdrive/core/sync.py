"""Drives refreshes and mutations against the mount service.

Every mutation is confirm-then-commit: the remote call must succeed
before the StateStore changes. Failures are published to the store's
ErrorChannel and raised to the caller.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from sshdrive.api.service import MountService
from sshdrive.core.errors import RemoteCallFailed, SyncError, SyncFailed
from sshdrive.core.guards import KeyedLock
from sshdrive.core.result import OperationResult
from sshdrive.core.state import Snapshot, StateStore
from sshdrive.models.connection import ConnectionProfile, normalize_drive_letter
from sshdrive.models.mount import MountStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _drive_key(letter: str) -> str:
    return f"drive:{letter}"


def _connection_key(connection_id: str) -> str:
    return f"connection:{connection_id}"


def _letter(drive_letter: str) -> str:
    letter = normalize_drive_letter(drive_letter)
    if letter is None:
        raise ValueError("Drive letter must not be empty")
    return letter


class SyncOrchestrator:
    """Applies mount service results to a StateStore.

    All methods run on one event loop. Suspension only happens inside the
    service calls; commits to the store are synchronous. Operations on the
    same drive letter or connection id are serialized.

    Example:
        state = StateStore()
        sync = SyncOrchestrator(MountServiceClient("127.0.0.1"), state)
        await sync.refresh()
        await sync.mount_drive(state.connections[0].id, "E")
    """

    def __init__(self, service: MountService, state: StateStore) -> None:
        """Initialize the orchestrator.

        Args:
            service: The mount service to call.
            state: Store receiving committed results.
        """
        self._service = service
        self._state = state
        self._guard = KeyedLock()

    @property
    def state(self) -> StateStore:
        """Return the store this orchestrator commits to."""
        return self._state

    async def refresh(self) -> Snapshot:
        """Re-fetch everything from the service and commit it atomically.

        The four fetches run concurrently. If any fails, nothing is
        committed and the previous cache stays in place.

        Returns:
            The committed snapshot.

        Raises:
            SyncFailed: If any fetch failed.
        """
        self._state.errors.clear()
        with self._state.loading.active():
            try:
                prerequisites, connections, mounts, letters = await asyncio.gather(
                    self._service.check_prerequisites(),
                    self._service.get_connections(),
                    self._service.get_mounted_drives(),
                    self._service.get_available_drive_letters(),
                )
            except Exception as e:
                self._state.errors.publish(e)
                raise SyncFailed(e) from e

            snapshot = Snapshot(
                prerequisites=prerequisites,
                connections=connections,
                mounts=mounts,
                drive_letters=letters,
            )
            self._state.commit_snapshot(snapshot)
        logger.info(
            "Refreshed: %d connections, %d mounted drives", len(connections), len(mounts)
        )
        return snapshot

    async def save_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> ConnectionProfile:
        """Save a new or edited profile.

        Args:
            profile: The profile; an empty id marks a new one.
            password: Credential for password authentication.

        Returns:
            The canonical profile as stored by the service.

        Raises:
            RemoteCallFailed: If the service rejected the save.
        """
        keys = () if profile.is_new else (_connection_key(profile.id),)
        async with self._guard.hold(*keys):
            saved = await self._remote(
                "save_connection", self._service.save_connection(profile, password)
            )
            self._state.commit_connection(saved)
        logger.info("Saved connection %s (%s)", saved.id, saved.address)
        return saved

    async def delete_connection(self, connection_id: str) -> None:
        """Delete a saved profile.

        A mount belonging to the profile is left as it is; whether the
        backend tears it down is up to the backend.

        Raises:
            RemoteCallFailed: If the service rejected the delete.
        """
        async with self._guard.hold(_connection_key(connection_id)):
            await self._remote(
                "delete_connection", self._service.delete_connection(connection_id)
            )
            self._state.commit_connection_removed(connection_id)
        logger.info("Deleted connection %s", connection_id)

    async def mount_drive(self, connection_id: str, drive_letter: str) -> MountStatus:
        """Mount a saved connection at a drive letter.

        Raises:
            RemoteCallFailed: If the service could not mount.
            InvariantViolation: If the service reported success for a
                letter or connection the cache already shows as mounted.
        """
        letter = _letter(drive_letter)
        async with self._guard.hold(_drive_key(letter), _connection_key(connection_id)):
            status = await self._remote(
                "mount_drive", self._service.mount_drive(connection_id, letter)
            )
            self._state.commit_mount(status)
        logger.info("Mounted connection %s at %s:", connection_id, status.drive_letter)
        return status

    async def unmount_drive(self, drive_letter: str) -> None:
        """Unmount the drive at a letter.

        Raises:
            RemoteCallFailed: If the service could not unmount.
            InvariantViolation: If the letter is already in the free pool.
        """
        letter = _letter(drive_letter)
        async with self._guard.hold(_drive_key(letter)):
            await self._remote("unmount_drive", self._service.unmount_drive(letter))
            self._state.commit_unmount(letter)
        logger.info("Unmounted %s:", letter)

    async def test_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> bool:
        """Ask the service to try logging in with a profile. Commits nothing.

        Raises:
            RemoteCallFailed: If the login attempt failed.
        """
        return await self._remote(
            "test_connection", self._service.test_connection(profile, password)
        )

    async def attempt(self, operation: Awaitable[T]) -> OperationResult[T]:
        """Await an operation and capture its outcome instead of raising.

        InvariantViolation is a programming error and still propagates.

        Example:
            result = await sync.attempt(sync.mount_drive(conn_id, "E"))
            if not result.ok:
                keep_dialog_open(result.error)
        """
        try:
            return OperationResult.success(await operation)
        except SyncError as e:
            return OperationResult.failure(e)

    async def _remote(self, operation: str, call: Awaitable[T]) -> T:
        """Await a service call, publishing and wrapping any failure."""
        try:
            return await call
        except Exception as e:
            self._state.errors.publish(e)
            raise RemoteCallFailed(operation, e) from e
