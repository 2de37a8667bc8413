"""Local cache of the drives currently mounted by the service."""

import logging
from collections.abc import Iterable

from sshdrive.core.errors import InvariantViolation
from sshdrive.models.mount import MountStatus

logger = logging.getLogger(__name__)


class MountRegistry:
    """Cache of MountStatus entries.

    Invariants: at most one entry per drive letter, and at most one
    connected entry per connection id.
    """

    def __init__(self) -> None:
        self._mounts: list[MountStatus] = []

    def __len__(self) -> int:
        return len(self._mounts)

    @property
    def mounts(self) -> list[MountStatus]:
        """Return a copy of all entries in insertion order."""
        return list(self._mounts)

    @property
    def connected_letters(self) -> set[str]:
        """Return the letters that host a connected mount."""
        return {m.drive_letter for m in self._mounts if m.is_connected}

    def get(self, drive_letter: str) -> MountStatus | None:
        """Return the entry for a drive letter, or None."""
        for mount in self._mounts:
            if mount.drive_letter == drive_letter:
                return mount
        return None

    def find_connected(self, connection_id: str) -> MountStatus | None:
        """Return the connected entry for a connection, or None."""
        for mount in self._mounts:
            if mount.connection_id == connection_id and mount.is_connected:
                return mount
        return None

    def load(self, statuses: Iterable[MountStatus]) -> None:
        """Replace the cache.

        The new entries are validated as a whole before anything is
        replaced.

        Raises:
            InvariantViolation: If the entries break a uniqueness rule.
        """
        loaded: list[MountStatus] = []
        for status in statuses:
            self._check_insert(loaded, status)
            loaded.append(status)
        self._mounts = loaded
        logger.debug("Loaded %d mounted drives", len(loaded))

    def check_add(self, status: MountStatus) -> None:
        """Raise InvariantViolation if add(status) would break a rule."""
        self._check_insert(self._mounts, status)

    def add(self, status: MountStatus) -> None:
        """Append an entry.

        Raises:
            InvariantViolation: If the letter is taken, or the connection
                already has a connected mount.
        """
        self._check_insert(self._mounts, status)
        self._mounts.append(status)

    def remove(self, drive_letter: str) -> MountStatus | None:
        """Delete the entry with the given letter.

        Returns:
            The removed entry, or None if no entry matched.
        """
        for index, mount in enumerate(self._mounts):
            if mount.drive_letter == drive_letter:
                return self._mounts.pop(index)
        return None

    @staticmethod
    def _check_insert(existing: list[MountStatus], status: MountStatus) -> None:
        for mount in existing:
            if mount.drive_letter == status.drive_letter:
                raise InvariantViolation(
                    f"Drive {status.drive_letter}: already hosts connection {mount.connection_id!r}"
                )
            if (
                status.is_connected
                and mount.is_connected
                and mount.connection_id == status.connection_id
            ):
                raise InvariantViolation(
                    f"Connection {status.connection_id!r} is already mounted at "
                    f"{mount.drive_letter}:"
                )
