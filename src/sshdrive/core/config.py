"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QSettings

from sshdrive.models.connection import normalize_drive_letter

logger = logging.getLogger(__name__)

# Settings keys
_KEY_SERVICE_HOST = "service/host"
_KEY_SERVICE_PORT = "service/port"
_KEY_SERVICE_TIMEOUT = "service/timeout"
_KEY_LAST_DRIVE_LETTER = "mount/last_drive_letter"

DEFAULT_SERVICE_HOST = "127.0.0.1"
DEFAULT_SERVICE_PORT = 7781
DEFAULT_SERVICE_TIMEOUT = 10


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\SSHDrive\\SSHDrive
    - macOS: ~/Library/Preferences/com.SSHDrive.SSHDrive.plist
    - Linux: ~/.config/SSHDrive/SSHDrive.conf

    Connection profiles are not stored here; the mount service owns them.

    Example:
        config = ConfigManager()
        client = MountServiceClient(config.get_service_host(), config.get_service_port())
    """

    def __init__(self, organization: str = "SSHDrive", application: str = "SSHDrive") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Mount service ---------------------------------------------------------

    def get_service_host(self) -> str:
        """Return the mount service host.

        Returns:
            Host string (default 127.0.0.1).
        """
        value = self._settings.value(_KEY_SERVICE_HOST, DEFAULT_SERVICE_HOST, str)
        return str(value) if value else DEFAULT_SERVICE_HOST

    def set_service_host(self, host: str) -> None:
        """Set the mount service host.

        Args:
            host: Hostname or IP.
        """
        self._settings.setValue(_KEY_SERVICE_HOST, host)

    def get_service_port(self) -> int:
        """Return the mount service port.

        Returns:
            Port number (default 7781).
        """
        value = self._settings.value(_KEY_SERVICE_PORT, DEFAULT_SERVICE_PORT, int)
        return max(1, min(65535, int(value)))  # type: ignore[arg-type]

    def set_service_port(self, port: int) -> None:
        """Set the mount service port.

        Args:
            port: Port number (1-65535).
        """
        self._settings.setValue(_KEY_SERVICE_PORT, max(1, min(65535, port)))

    def get_service_timeout(self) -> int:
        """Return the request timeout in seconds.

        Returns:
            Timeout in seconds (default 10).
        """
        value = self._settings.value(_KEY_SERVICE_TIMEOUT, DEFAULT_SERVICE_TIMEOUT, int)
        return max(1, min(120, int(value)))  # type: ignore[arg-type]

    def set_service_timeout(self, seconds: int) -> None:
        """Set the request timeout.

        Args:
            seconds: Timeout in seconds (1-120).
        """
        self._settings.setValue(_KEY_SERVICE_TIMEOUT, max(1, min(120, seconds)))

    # -- Mount preferences -----------------------------------------------------

    def get_last_drive_letter(self) -> str:
        """Return the letter of the last successful mount, or empty string."""
        value = self._settings.value(_KEY_LAST_DRIVE_LETTER, "", str)
        return normalize_drive_letter(str(value) if value else None) or ""

    def set_last_drive_letter(self, letter: str) -> None:
        """Remember the letter of a successful mount.

        Args:
            letter: Drive letter; only its first character is kept.
        """
        self._settings.setValue(_KEY_LAST_DRIVE_LETTER, normalize_drive_letter(letter) or "")

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
