"""Data models for connection profiles, mounts and prerequisites."""

from sshdrive.models.connection import (
    AuthType,
    ConnectionProfile,
    create_empty_profile,
    normalize_drive_letter,
)
from sshdrive.models.mount import MountState, MountStatus
from sshdrive.models.prerequisites import PrerequisiteState
from sshdrive.models.view import ConnectionView

__all__ = [
    "AuthType",
    "ConnectionProfile",
    "ConnectionView",
    "MountState",
    "MountStatus",
    "PrerequisiteState",
    "create_empty_profile",
    "normalize_drive_letter",
]
