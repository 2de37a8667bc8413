"""Conversion between models and the mount service's wire format.

The service speaks snake_case JSON. Optional fields are omitted when
absent (the service distinguishes "no preference" from an empty string)
and drive letters always travel as a single character.
"""

from typing import Any, cast

from sshdrive.models.connection import AuthType, ConnectionProfile
from sshdrive.models.mount import MountState, MountStatus
from sshdrive.models.prerequisites import PrerequisiteState


def drive_letter_param(letter: str) -> str:
    """Return the single character sent for a drive letter parameter.

    Raises:
        ValueError: If the letter is empty.
    """
    if not letter:
        raise ValueError("Drive letter must not be empty")
    return letter[0]


def _require_dict(data: object, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected {what} object, got {type(data).__name__}")
    return cast(dict[str, Any], data)


def _require_list(data: object, what: str) -> list[Any]:
    if not isinstance(data, list):
        raise ValueError(f"Expected list of {what}, got {type(data).__name__}")
    return cast(list[Any], data)


def _optional_str(value: object) -> str | None:
    return str(value) if value else None


def profile_to_wire(profile: ConnectionProfile) -> dict[str, Any]:
    """Serialize a profile for save_connection / test_connection.

    New profiles go out with an empty id; the service assigns one.
    """
    data: dict[str, Any] = {
        "id": profile.id,
        "name": profile.name,
        "host": profile.host,
        "port": profile.port,
        "username": profile.username,
        "auth_type": profile.auth_type.value,
        "remote_path": profile.remote_path,
    }
    if profile.key_path:
        data["key_path"] = profile.key_path
    if profile.preferred_drive_letter:
        data["drive_letter"] = drive_letter_param(profile.preferred_drive_letter)
    return data


def profile_from_wire(data: object) -> ConnectionProfile:
    """Parse a connection profile returned by the service.

    Raises:
        ValueError: If required fields are missing or invalid.
    """
    item = _require_dict(data, "connection")
    try:
        return ConnectionProfile(
            id=str(item["id"]),
            name=str(item.get("name", "")),
            host=str(item["host"]),
            port=int(item.get("port", 22)),
            username=str(item.get("username", "")),
            auth_type=AuthType(item.get("auth_type", AuthType.PASSWORD.value)),
            key_path=_optional_str(item.get("key_path")),
            remote_path=str(item.get("remote_path", "/")),
            preferred_drive_letter=_optional_str(item.get("drive_letter")),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid connection payload: {e!r}") from e


def profiles_from_wire(data: object) -> list[ConnectionProfile]:
    """Parse the get_connections result."""
    return [profile_from_wire(item) for item in _require_list(data, "connections")]


def mount_from_wire(data: object) -> MountStatus:
    """Parse a drive status returned by the service.

    Raises:
        ValueError: If required fields are missing or invalid.
    """
    item = _require_dict(data, "drive status")
    try:
        return MountStatus(
            drive_letter=str(item["drive_letter"]),
            connection_id=str(item["connection_id"]),
            state=MountState.from_string(str(item.get("status", MountState.CONNECTED.value))),
            error_message=_optional_str(item.get("error_message")),
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid drive status payload: {e!r}") from e


def mounts_from_wire(data: object) -> list[MountStatus]:
    """Parse the get_mounted_drives result."""
    return [mount_from_wire(item) for item in _require_list(data, "drive statuses")]


def letters_from_wire(data: object) -> list[str]:
    """Parse the get_available_drive_letters result."""
    letters: list[str] = []
    for item in _require_list(data, "drive letters"):
        if not isinstance(item, str) or not item:
            raise ValueError(f"Invalid drive letter: {item!r}")
        letters.append(item[0].upper())
    return letters


def prerequisites_from_wire(data: object) -> PrerequisiteState:
    """Parse the check_prerequisites result."""
    item = _require_dict(data, "prerequisite status")
    return PrerequisiteState(
        winfsp_installed=bool(item.get("winfsp_installed", False)),
        sshfs_installed=bool(item.get("sshfs_installed", False)),
        winfsp_path=_optional_str(item.get("winfsp_path")),
        sshfs_path=_optional_str(item.get("sshfs_path")),
    )
