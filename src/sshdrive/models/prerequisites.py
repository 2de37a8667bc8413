"""Snapshot of the native prerequisites the mount service relies on."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PrerequisiteState:
    """Installation state of the filesystem proxy driver and SSHFS layer.

    Read-only; replaced wholesale on every refresh.

    Attributes:
        winfsp_installed: Whether the WinFsp driver was found.
        sshfs_installed: Whether an SSHFS implementation is available.
        winfsp_path: Where WinFsp was found, if reported.
        sshfs_path: Where SSHFS was found, if reported.
    """

    winfsp_installed: bool = False
    sshfs_installed: bool = False
    winfsp_path: str | None = None
    sshfs_path: str | None = None

    @property
    def is_ready(self) -> bool:
        """Return True if everything needed for mounting is installed."""
        return self.winfsp_installed and self.sshfs_installed
