"""Central state store with Qt signals for reactive UI updates.

The StateStore holds the cached remote truth (connection profiles,
mounted drives, free drive letters, prerequisites) and emits Qt signals
when it changes. UI widgets connect to these signals to update
themselves; the joined connection view is recomputed on every change.

Only the SyncOrchestrator calls the commit_* methods.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from PySide6.QtCore import QObject, Signal

from sshdrive.core.channels import ErrorChannel, LoadingFlag
from sshdrive.core.connections import ConnectionRegistry
from sshdrive.core.drive_letters import DriveLetterPool
from sshdrive.core.mounts import MountRegistry
from sshdrive.core.projector import project
from sshdrive.models.connection import ConnectionProfile
from sshdrive.models.mount import MountStatus
from sshdrive.models.prerequisites import PrerequisiteState
from sshdrive.models.view import ConnectionView

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Everything one refresh fetched from the mount service."""

    prerequisites: PrerequisiteState
    connections: Sequence[ConnectionProfile] = field(default_factory=list)
    mounts: Sequence[MountStatus] = field(default_factory=list)
    drive_letters: Sequence[str] = field(default_factory=list)


class StateStore(QObject):
    """Explicit state container emitting Qt signals on changes.

    Construct one per application; there is no module-level instance.

    Example:
        state = StateStore()
        state.views_changed.connect(lambda views: print(f"Views: {views}"))
        orchestrator = SyncOrchestrator(service, state)
    """

    # Note: Using object for complex types (PySide6 limitation)
    connections_changed = Signal(object)  # list[ConnectionProfile]
    mounts_changed = Signal(object)  # list[MountStatus]
    drive_letters_changed = Signal(object)  # list[str]
    prerequisites_changed = Signal(object)  # PrerequisiteState
    views_changed = Signal(object)  # list[ConnectionView]

    def __init__(self) -> None:
        """Initialize the store with empty state."""
        super().__init__()
        self._connections = ConnectionRegistry()
        self._mounts = MountRegistry()
        self._pool = DriveLetterPool()
        self._prerequisites: PrerequisiteState | None = None
        self.errors = ErrorChannel()
        self.loading = LoadingFlag()

    @property
    def connections(self) -> list[ConnectionProfile]:
        """Return saved profiles in registry order."""
        return self._connections.profiles

    @property
    def mounts(self) -> list[MountStatus]:
        """Return mounted drives."""
        return self._mounts.mounts

    @property
    def drive_letters(self) -> list[str]:
        """Return free drive letters, ascending."""
        return self._pool.letters

    @property
    def prerequisites(self) -> PrerequisiteState | None:
        """Return the last prerequisite snapshot, or None before the first refresh."""
        return self._prerequisites

    @property
    def views(self) -> list[ConnectionView]:
        """Return the connection views, joined fresh from both registries."""
        return project(self._connections.profiles, self._mounts.mounts)

    def get_connection(self, connection_id: str) -> ConnectionProfile | None:
        """Get a profile by ID."""
        return self._connections.get(connection_id)

    def get_mount(self, drive_letter: str) -> MountStatus | None:
        """Get the mount at a drive letter."""
        return self._mounts.get(drive_letter)

    def get_mount_for_connection(self, connection_id: str) -> MountStatus | None:
        """Get the connected mount of a profile."""
        return self._mounts.find_connected(connection_id)

    # -- Commit paths ----------------------------------------------------------

    def commit_snapshot(self, snapshot: Snapshot) -> None:
        """Replace all cached state with a refresh result.

        The incoming data is validated in full before anything is
        replaced, so an InvariantViolation leaves the store unchanged.
        Letters the snapshot shows as mounted are dropped from the pool.

        Raises:
            InvariantViolation: If the snapshot breaks a registry rule.
        """
        connections = ConnectionRegistry()
        connections.load(snapshot.connections)
        mounts = MountRegistry()
        mounts.load(snapshot.mounts)

        mounted = mounts.connected_letters
        overlap = mounted.intersection(snapshot.drive_letters)
        if overlap:
            logger.warning(
                "Service lists mounted drives as available, ignoring: %s", sorted(overlap)
            )
        pool = DriveLetterPool(letter for letter in snapshot.drive_letters if letter not in mounted)

        connections_changed = connections.profiles != self._connections.profiles
        mounts_changed = mounts.mounts != self._mounts.mounts
        letters_changed = pool.letters != self._pool.letters
        prerequisites_changed = snapshot.prerequisites != self._prerequisites

        self._connections = connections
        self._mounts = mounts
        self._pool = pool
        self._prerequisites = snapshot.prerequisites
        logger.debug(
            "Committed snapshot: %d connections, %d mounts, %d free letters",
            len(connections),
            len(mounts),
            len(pool),
        )

        if prerequisites_changed:
            self.prerequisites_changed.emit(snapshot.prerequisites)
        if connections_changed:
            self.connections_changed.emit(self.connections)
        if mounts_changed:
            self.mounts_changed.emit(self.mounts)
        if letters_changed:
            self.drive_letters_changed.emit(self.drive_letters)
        if connections_changed or mounts_changed:
            self.views_changed.emit(self.views)

    def commit_connection(self, profile: ConnectionProfile) -> None:
        """Insert or replace a saved profile."""
        added = self._connections.upsert(profile)
        logger.debug("%s connection %s", "Added" if added else "Updated", profile.id)
        self.connections_changed.emit(self.connections)
        self.views_changed.emit(self.views)

    def commit_connection_removed(self, connection_id: str) -> None:
        """Drop a deleted profile. Mounts are left alone."""
        if not self._connections.remove(connection_id):
            logger.debug("Deleted connection %s was not cached", connection_id)
            return
        self.connections_changed.emit(self.connections)
        self.views_changed.emit(self.views)

    def commit_mount(self, status: MountStatus) -> None:
        """Record a new mount and take its letter out of the pool.

        Raises:
            InvariantViolation: If the letter or connection is already mounted.
        """
        self._mounts.add(status)
        letter_taken = self._pool.reserve(status.drive_letter)
        self.mounts_changed.emit(self.mounts)
        if letter_taken:
            self.drive_letters_changed.emit(self.drive_letters)
        self.views_changed.emit(self.views)

    def commit_unmount(self, drive_letter: str) -> None:
        """Forget the mount at a letter and return the letter to the pool.

        A mount in error or disconnected state may already have its letter
        listed as free; its entry is removed and the pool is left as is.

        Raises:
            InvariantViolation: If the letter is already in the pool while
                no mount or a connected mount holds it.
        """
        mount = self._mounts.get(drive_letter)
        already_free = drive_letter in self._pool
        if already_free and (mount is None or mount.is_connected):
            self._pool.check_release(drive_letter)
        removed = self._mounts.remove(drive_letter)
        if not already_free:
            self._pool.release(drive_letter)
            self.drive_letters_changed.emit(self.drive_letters)
        if removed is not None:
            self.mounts_changed.emit(self.mounts)
            self.views_changed.emit(self.views)
