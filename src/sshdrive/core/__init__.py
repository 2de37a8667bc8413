"""Core synchronization layer.

This module caches the mount service's state locally, keeps the
drive-letter pool consistent and publishes changes via Qt signals.

Classes:
    StateStore: Central state container with Qt signals.
    SyncOrchestrator: Refreshes and confirm-then-commit mutations.
    ConfigManager: QSettings wrapper for configuration.
"""

from sshdrive.core.config import ConfigManager
from sshdrive.core.errors import InvariantViolation, RemoteCallFailed, SyncError, SyncFailed
from sshdrive.core.result import OperationResult
from sshdrive.core.state import Snapshot, StateStore
from sshdrive.core.sync import SyncOrchestrator

__all__ = [
    "ConfigManager",
    "InvariantViolation",
    "OperationResult",
    "RemoteCallFailed",
    "Snapshot",
    "StateStore",
    "SyncError",
    "SyncFailed",
    "SyncOrchestrator",
]
