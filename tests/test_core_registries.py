"""Tests for ConnectionRegistry, MountRegistry and DriveLetterPool."""

import pytest
from conftest import make_profile

from sshdrive.core.connections import ConnectionRegistry
from sshdrive.core.drive_letters import DriveLetterPool
from sshdrive.core.errors import InvariantViolation
from sshdrive.core.mounts import MountRegistry
from sshdrive.models.mount import MountState, MountStatus


class TestConnectionRegistry:
    """Test the connection profile cache."""

    def test_initially_empty(self) -> None:
        """Test that the registry starts empty."""
        registry = ConnectionRegistry()
        assert registry.profiles == []
        assert len(registry) == 0

    def test_load_replaces(self) -> None:
        """Test that load replaces the whole cache."""
        registry = ConnectionRegistry()
        registry.load([make_profile("a"), make_profile("b")])
        registry.load([make_profile("c")])
        assert [p.id for p in registry.profiles] == ["c"]

    def test_profiles_returns_copy(self) -> None:
        """Test that mutating the returned list leaves the registry intact."""
        registry = ConnectionRegistry()
        registry.load([make_profile("a"), make_profile("b")])
        registry.profiles.clear()
        registry.profiles.append(make_profile("x"))
        assert [p.id for p in registry.profiles] == ["a", "b"]

    def test_load_rejects_duplicate_ids(self) -> None:
        """Test that load refuses two profiles with one id and keeps the old cache."""
        registry = ConnectionRegistry()
        registry.load([make_profile("a")])
        with pytest.raises(InvariantViolation):
            registry.load([make_profile("b"), make_profile("b", name="again")])
        assert [p.id for p in registry.profiles] == ["a"]

    def test_upsert_appends_new(self) -> None:
        """Test that unknown ids are appended at the end."""
        registry = ConnectionRegistry()
        registry.load([make_profile("a"), make_profile("b")])
        assert registry.upsert(make_profile("c")) is True
        assert [p.id for p in registry.profiles] == ["a", "b", "c"]

    def test_upsert_replaces_in_place(self) -> None:
        """Test that a known id is replaced without moving."""
        registry = ConnectionRegistry()
        registry.load([make_profile("a"), make_profile("b"), make_profile("c")])
        assert registry.upsert(make_profile("b", name="renamed")) is False
        assert [p.id for p in registry.profiles] == ["a", "b", "c"]
        assert registry.profiles[1].name == "renamed"
        assert len(registry) == 3

    def test_upsert_rejects_unsaved_profile(self) -> None:
        """Test that a profile without backend id cannot be cached."""
        registry = ConnectionRegistry()
        with pytest.raises(InvariantViolation):
            registry.upsert(make_profile(""))

    def test_remove(self) -> None:
        """Test removing by id, and that unknown ids are a no-op."""
        registry = ConnectionRegistry()
        registry.load([make_profile("a"), make_profile("b")])
        assert registry.remove("a") is True
        assert registry.remove("missing") is False
        assert [p.id for p in registry.profiles] == ["b"]
        assert "a" not in registry
        assert registry.get("b") is not None


class TestMountRegistry:
    """Test the mounted drive cache."""

    def test_add_and_get(self) -> None:
        """Test adding a mount."""
        registry = MountRegistry()
        registry.add(MountStatus("E", "c1"))
        assert registry.get("E") == MountStatus("E", "c1")
        assert registry.find_connected("c1") == MountStatus("E", "c1")
        assert registry.connected_letters == {"E"}

    def test_add_rejects_taken_letter(self) -> None:
        """Test that a drive letter cannot host two mounts."""
        registry = MountRegistry()
        registry.add(MountStatus("E", "c1"))
        with pytest.raises(InvariantViolation, match="E:"):
            registry.add(MountStatus("E", "c2"))
        assert registry.mounts == [MountStatus("E", "c1")]

    def test_add_rejects_second_connected_mount(self) -> None:
        """Test that a connection cannot be connected twice."""
        registry = MountRegistry()
        registry.add(MountStatus("E", "c1"))
        with pytest.raises(InvariantViolation):
            registry.add(MountStatus("F", "c1"))
        assert len(registry) == 1

    def test_add_allows_disconnected_entry_for_same_connection(self) -> None:
        """Test that only connected entries count for the per-connection rule."""
        registry = MountRegistry()
        registry.add(MountStatus("E", "c1"))
        registry.add(MountStatus("F", "c1", MountState.ERROR, "timeout"))
        assert len(registry) == 2
        assert registry.connected_letters == {"E"}

    def test_load_validates_before_replacing(self) -> None:
        """Test that an invalid load keeps the previous entries."""
        registry = MountRegistry()
        registry.load([MountStatus("E", "c1")])
        with pytest.raises(InvariantViolation):
            registry.load([MountStatus("F", "c2"), MountStatus("F", "c3")])
        assert registry.mounts == [MountStatus("E", "c1")]

    def test_remove(self) -> None:
        """Test removing by letter, and that unknown letters are a no-op."""
        registry = MountRegistry()
        registry.load([MountStatus("E", "c1"), MountStatus("F", "c2")])
        assert registry.remove("E") == MountStatus("E", "c1")
        assert registry.remove("Q") is None
        assert registry.mounts == [MountStatus("F", "c2")]


class TestDriveLetterPool:
    """Test the free drive letter pool."""

    def test_load_sorts(self) -> None:
        """Test that load sorts and de-duplicates."""
        pool = DriveLetterPool()
        pool.load(["G", "E", "F", "E"])
        assert pool.letters == ["E", "F", "G"]

    def test_reserve(self) -> None:
        """Test reserving a letter."""
        pool = DriveLetterPool("EFG")
        assert pool.reserve("F") is True
        assert pool.letters == ["E", "G"]

    def test_reserve_is_idempotent(self) -> None:
        """Test that reserving twice equals reserving once."""
        pool = DriveLetterPool("EFG")
        pool.reserve("E")
        once = pool.letters
        assert pool.reserve("E") is False
        assert pool.letters == once == ["F", "G"]

    def test_release_keeps_order(self) -> None:
        """Test that a released letter is inserted in sorted position."""
        pool = DriveLetterPool("DG")
        pool.release("E")
        assert pool.letters == ["D", "E", "G"]

    def test_release_duplicate_is_violation(self) -> None:
        """Test that releasing an available letter is rejected."""
        pool = DriveLetterPool("EFG")
        with pytest.raises(InvariantViolation):
            pool.release("F")
        assert pool.letters == ["E", "F", "G"]

    def test_reserve_release_round_trip(self) -> None:
        """Test that reserve then release restores the pool."""
        pool = DriveLetterPool("EFG")
        pool.reserve("E")
        pool.release("E")
        assert pool.letters == ["E", "F", "G"]
