"""Local cache of saved connection profiles."""

import logging
from collections.abc import Iterable

from sshdrive.core.errors import InvariantViolation
from sshdrive.models.connection import ConnectionProfile

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Ordered cache of connection profiles keyed by id.

    Mirrors what the mount service returned; it never calls the service
    itself. Insertion order is preserved and new entries go to the end.
    """

    def __init__(self) -> None:
        # dicts keep insertion order, and replacing a value keeps its slot
        self._profiles: dict[str, ConnectionProfile] = {}
        self._list_cache: list[ConnectionProfile] | None = None

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, profile_id: object) -> bool:
        return profile_id in self._profiles

    @property
    def profiles(self) -> list[ConnectionProfile]:
        """Return a copy of all profiles in registry order."""
        if self._list_cache is None:
            self._list_cache = list(self._profiles.values())
        return list(self._list_cache)

    def get(self, profile_id: str) -> ConnectionProfile | None:
        """Return the profile with the given id, or None."""
        return self._profiles.get(profile_id)

    def load(self, profiles: Iterable[ConnectionProfile]) -> None:
        """Replace the whole cache.

        Raises:
            InvariantViolation: If a profile has no id or two share one.
        """
        loaded: dict[str, ConnectionProfile] = {}
        for profile in profiles:
            self._check_id(profile)
            if profile.id in loaded:
                raise InvariantViolation(f"Duplicate connection id {profile.id!r}")
            loaded[profile.id] = profile
        self._profiles = loaded
        self._list_cache = None
        logger.debug("Loaded %d connection profiles", len(loaded))

    def upsert(self, profile: ConnectionProfile) -> bool:
        """Replace the entry with the same id or append a new one.

        Returns:
            True if the profile was appended, False if it replaced an entry.

        Raises:
            InvariantViolation: If the profile has no id.
        """
        self._check_id(profile)
        added = profile.id not in self._profiles
        self._profiles[profile.id] = profile
        self._list_cache = None
        return added

    def remove(self, profile_id: str) -> bool:
        """Delete the entry with the given id.

        Returns:
            True if an entry was removed, False if none matched.
        """
        if self._profiles.pop(profile_id, None) is None:
            return False
        self._list_cache = None
        return True

    @staticmethod
    def _check_id(profile: ConnectionProfile) -> None:
        if profile.is_new:
            raise InvariantViolation(f"Profile {profile.name!r} has no backend-assigned id")
