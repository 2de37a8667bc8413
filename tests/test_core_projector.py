"""Tests for the connection/mount join."""

from conftest import make_profile

from sshdrive.core.projector import project
from sshdrive.models.mount import MountState, MountStatus


class TestProject:
    """Test project()."""

    def test_empty(self) -> None:
        """Test that no profiles means no views."""
        assert project([], [MountStatus("E", "c1")]) == []

    def test_follows_profile_order(self) -> None:
        """Test that views keep the registry order."""
        profiles = [make_profile("c3"), make_profile("c1"), make_profile("c2")]
        assert [v.id for v in project(profiles, [])] == ["c3", "c1", "c2"]

    def test_connected_mount(self) -> None:
        """Test a profile with a connected mount."""
        views = project([make_profile("c1"), make_profile("c2")], [MountStatus("E", "c1")])
        assert views[0].is_connected
        assert views[0].mounted_drive_letter == "E"
        assert not views[1].is_connected
        assert views[1].mounted_drive_letter is None

    def test_error_mount_is_not_connected(self) -> None:
        """Test that an error mount shows its letter but is not connected."""
        views = project([make_profile("c1")], [MountStatus("E", "c1", MountState.ERROR, "lost")])
        assert not views[0].is_connected
        assert views[0].mounted_drive_letter == "E"

    def test_connected_entry_wins(self) -> None:
        """Test that a connected entry is preferred over a stale one."""
        mounts = [
            MountStatus("E", "c1", MountState.DISCONNECTED),
            MountStatus("F", "c1", MountState.CONNECTED),
        ]
        view = project([make_profile("c1")], mounts)[0]
        assert view.is_connected
        assert view.mounted_drive_letter == "F"

    def test_mount_for_unknown_profile_ignored(self) -> None:
        """Test that mounts without a profile produce no view."""
        views = project([make_profile("c1")], [MountStatus("E", "gone")])
        assert len(views) == 1
        assert not views[0].is_connected

    def test_is_connected_iff_connected_mount(self) -> None:
        """Test the join invariant over a mixed set."""
        profiles = [make_profile(f"c{i}") for i in range(5)]
        mounts = [
            MountStatus("D", "c0"),
            MountStatus("E", "c2", MountState.ERROR),
            MountStatus("F", "c4"),
        ]
        connected = {m.connection_id: m.drive_letter for m in mounts if m.is_connected}
        for view in project(profiles, mounts):
            assert view.is_connected == (view.id in connected)
            if view.is_connected:
                assert view.mounted_drive_letter == connected[view.id]
