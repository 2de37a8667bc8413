"""Join of connection profiles and mounts into display records."""

from collections.abc import Iterable, Sequence

from sshdrive.models.connection import ConnectionProfile
from sshdrive.models.mount import MountStatus
from sshdrive.models.view import ConnectionView


def project(
    profiles: Sequence[ConnectionProfile], mounts: Iterable[MountStatus]
) -> list[ConnectionView]:
    """Build one ConnectionView per profile, in profile order.

    Pure: recomputed from both sources on every call. When a connection
    has several mount entries, the connected one wins; otherwise the
    first reported entry is used.

    Args:
        profiles: Profiles in registry order.
        mounts: Current mount entries.

    Returns:
        The display records.
    """
    by_connection: dict[str, MountStatus] = {}
    for mount in mounts:
        current = by_connection.get(mount.connection_id)
        if current is None or (mount.is_connected and not current.is_connected):
            by_connection[mount.connection_id] = mount

    return [ConnectionView.from_profile(p, by_connection.get(p.id)) for p in profiles]
