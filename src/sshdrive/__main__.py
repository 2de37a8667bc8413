"""Command line entry point for SSH Drive."""

import argparse
import asyncio
import getpass
import logging
import sys

from sshdrive.api.client import MountServiceClient
from sshdrive.core.config import ConfigManager
from sshdrive.core.errors import SyncError
from sshdrive.core.state import StateStore
from sshdrive.core.sync import SyncOrchestrator

logger = logging.getLogger(__name__)


def build_parser(config: ConfigManager) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults taken from saved settings."""
    parser = argparse.ArgumentParser(
        prog="sshdrive",
        description="SSH Drive - mount SSH/SFTP servers as drive letters",
    )
    parser.add_argument(
        "--host", default=config.get_service_host(), help="mount service hostname or IP",
    )
    parser.add_argument(
        "--port", type=int, default=config.get_service_port(), help="mount service TCP port",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(config.get_service_timeout()),
        help="request timeout in seconds",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("status", help="show prerequisites, connections and free drive letters")

    mount = commands.add_parser("mount", help="mount a saved connection")
    mount.add_argument("connection_id")
    mount.add_argument("drive_letter", nargs="?", default=None)

    unmount = commands.add_parser("unmount", help="unmount a drive letter")
    unmount.add_argument("drive_letter")

    delete = commands.add_parser("delete", help="delete a saved connection")
    delete.add_argument("connection_id")

    test = commands.add_parser("test", help="try logging in with a saved connection")
    test.add_argument("connection_id")
    test.add_argument("--ask-password", action="store_true", help="prompt for a password")
    return parser


def print_status(state: StateStore) -> None:
    """Print the cached state as a plain-text report."""
    prerequisites = state.prerequisites
    if prerequisites is not None:
        print(f"WinFsp: {'installed' if prerequisites.winfsp_installed else 'missing'}")
        print(f"SSHFS:  {'installed' if prerequisites.sshfs_installed else 'missing'}")
    print()
    if not state.views:
        print("No saved connections.")
    for view in state.views:
        mark = f"{view.mounted_drive_letter}:" if view.is_connected else "--"
        print(f"{mark:4} {view.id}  {view.name}  {view.profile.address}{view.profile.remote_path}")
    for mount in state.mounts:
        if mount.error_message:
            print(f"{mount.drive_letter}: {mount.state.value}: {mount.error_message}")
    print()
    print("Free drive letters:", " ".join(state.drive_letters) or "none")


async def run(args: argparse.Namespace, config: ConfigManager) -> int:
    """Execute one command against the mount service.

    Returns:
        Exit code (0 for success).
    """
    state = StateStore()
    async with MountServiceClient(args.host, args.port, args.timeout) as service:
        sync = SyncOrchestrator(service, state)
        try:
            await sync.refresh()

            if args.command == "status":
                print_status(state)
            elif args.command == "mount":
                letter = args.drive_letter
                if not letter:
                    last = config.get_last_drive_letter()
                    if last in state.drive_letters:
                        letter = last
                    elif state.drive_letters:
                        letter = state.drive_letters[0]
                if not letter:
                    print("No free drive letter available.", file=sys.stderr)
                    return 1
                status = await sync.mount_drive(args.connection_id, letter)
                config.set_last_drive_letter(status.drive_letter)
                print(f"Mounted {args.connection_id} at {status.drive_letter}:")
            elif args.command == "unmount":
                await sync.unmount_drive(args.drive_letter)
                print(f"Unmounted {args.drive_letter[0].upper()}:")
            elif args.command == "delete":
                await sync.delete_connection(args.connection_id)
                print(f"Deleted {args.connection_id}")
            elif args.command == "test":
                profile = state.get_connection(args.connection_id)
                if profile is None:
                    print(f"Unknown connection {args.connection_id}", file=sys.stderr)
                    return 1
                password = getpass.getpass() if args.ask_password else None
                await sync.test_connection(profile, password)
                print(f"Connection {profile.name} OK")
        except SyncError as e:
            print(f"Error: {state.errors.message or e}", file=sys.stderr)
            return 1
    return 0


def main() -> int:
    """Run the SSH Drive command line.

    Returns:
        Exit code (0 for success).
    """
    config = ConfigManager()
    args = build_parser(config).parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args, config))
    except ConnectionError as e:
        logger.error("Cannot reach mount service: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
