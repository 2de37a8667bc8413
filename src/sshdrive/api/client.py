"""Mount service JSON-RPC client over TCP.

Each message is a JSON-RPC request/response delimited by newlines.
Responses are matched to requests by id, so several calls may be in
flight at once (refresh issues four concurrently).
"""

import asyncio
import json
import logging
from contextlib import suppress
from typing import Any

from sshdrive.api.codec import (
    drive_letter_param,
    letters_from_wire,
    mount_from_wire,
    mounts_from_wire,
    prerequisites_from_wire,
    profile_from_wire,
    profile_to_wire,
    profiles_from_wire,
)
from sshdrive.api.protocol import JsonRpcError, JsonRpcRequest, JsonRpcResponse, ServiceError
from sshdrive.models.connection import ConnectionProfile
from sshdrive.models.mount import MountStatus
from sshdrive.models.prerequisites import PrerequisiteState

logger = logging.getLogger(__name__)


class MountServiceClient:
    """Async TCP client for the mount service's JSON-RPC API.

    Implements the MountService protocol.

    Example:
        async with MountServiceClient("127.0.0.1", 7781) as service:
            drives = await service.get_mounted_drives()
    """

    _DEFAULT_TIMEOUT: float = 10.0
    _BUFFER_LIMIT: int = 1024 * 1024

    def __init__(
        self,
        host: str,
        port: int = 7781,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            host: Service hostname or IP address.
            port: TCP port (default 7781).
            timeout: Connection/request timeout in seconds.
        """
        self._host = host
        self._port = port
        self._timeout = timeout
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._request_id: int = 0
        self._pending: dict[int, asyncio.Future[JsonRpcResponse]] = {}
        self._connected: bool = False
        self._receive_task: asyncio.Task[None] | None = None

    @property
    def host(self) -> str:
        """Return service host."""
        return self._host

    @property
    def port(self) -> int:
        """Return service port."""
        return self._port

    @property
    def is_connected(self) -> bool:
        """Return True if connected to the service."""
        return self._connected and self._reader is not None

    async def __aenter__(self) -> "MountServiceClient":
        """Enter async context (connect)."""
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context (disconnect)."""
        await self.disconnect()

    async def connect(self) -> None:
        """Connect to the mount service.

        Raises:
            ConnectionError: If the connection fails or times out.
        """
        if self._connected:
            return

        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self._host, self._port, limit=self._BUFFER_LIMIT),
                timeout=self._timeout,
            )
        except (OSError, TimeoutError) as e:
            self._reader = None
            self._writer = None
            raise ConnectionError(f"Failed to connect to {self._host}:{self._port}: {e}") from e

        self._connected = True
        self._receive_task = asyncio.create_task(self._receive_loop())
        logger.debug("Connected to mount service at %s:%d", self._host, self._port)

    async def disconnect(self) -> None:
        """Disconnect from the service, failing any calls still in flight."""
        self._connected = False

        if self._receive_task:
            self._receive_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._receive_task
            self._receive_task = None

        if self._writer:
            try:
                self._writer.close()
                await asyncio.wait_for(self._writer.wait_closed(), timeout=1.0)
            except (OSError, TimeoutError, asyncio.CancelledError):
                pass
            self._writer = None
        self._reader = None

        self._fail_pending(ConnectionError("Connection closed"))

    def _fail_pending(self, error: Exception) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(error)
        self._pending.clear()

    async def _receive_loop(self) -> None:
        """Background task reading responses and resolving pending calls."""
        if self._reader is None:
            return

        try:
            while self._connected:
                line = await self._reader.readline()
                if not line:
                    # Service closed connection
                    break

                message = line.decode("utf-8").strip()
                if not message:
                    continue

                try:
                    data = json.loads(message)
                except json.JSONDecodeError as e:
                    logger.warning("Discarding malformed message from mount service: %s", e)
                    continue
                if isinstance(data, dict):
                    self._handle_message(data)

        except asyncio.CancelledError:
            pass
        except (OSError, asyncio.IncompleteReadError, asyncio.LimitOverrunError) as e:
            logger.warning("Mount service connection failed: %s", e)
        finally:
            self._connected = False
            self._fail_pending(ConnectionError("Connection to mount service lost"))

    def _handle_message(self, data: dict[str, Any]) -> None:
        response = JsonRpcResponse.from_dict(data)
        if response.id is None:
            logger.debug("Ignoring message without request id: %s", data)
            return
        future = self._pending.pop(response.id, None)
        if future and not future.done():
            future.set_result(response)

    def _next_id(self) -> int:
        """Generate next request ID."""
        self._request_id += 1
        return self._request_id

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Call a service method and return its result.

        Args:
            method: Service call name.
            params: Named parameters.

        Returns:
            The method result.

        Raises:
            ConnectionError: If not connected or the request times out.
            ServiceError: If the service returns an error.
        """
        if not self.is_connected or self._writer is None:
            raise ConnectionError("Not connected to mount service")

        request = JsonRpcRequest(id=self._next_id(), method=method, params=params)
        future: asyncio.Future[JsonRpcResponse] = asyncio.get_running_loop().create_future()
        self._pending[request.id] = future

        try:
            message = json.dumps(request.to_dict()) + "\n"
            self._writer.write(message.encode("utf-8"))
            await asyncio.wait_for(self._writer.drain(), timeout=self._timeout)
            response = await asyncio.wait_for(future, timeout=self._timeout)
        except TimeoutError:
            raise ConnectionError(f"Request {request.id} ({method}) timed out") from None
        finally:
            self._pending.pop(request.id, None)

        if not response.is_success:
            raise ServiceError(method, response.error or JsonRpcError(-1, "Unknown error"))
        return response.result

    # Mount service calls

    async def check_prerequisites(self) -> PrerequisiteState:
        """Ask which native prerequisites are installed."""
        return prerequisites_from_wire(await self.call("check_prerequisites"))

    async def get_connections(self) -> list[ConnectionProfile]:
        """Return all saved connection profiles."""
        return profiles_from_wire(await self.call("get_connections"))

    async def save_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> ConnectionProfile:
        """Save a profile, returning the canonical stored version.

        Args:
            profile: Profile to save; an empty id asks the service for a new one.
            password: Credential to store alongside, for password auth.
        """
        params: dict[str, Any] = {"connection": profile_to_wire(profile)}
        if password is not None:
            params["password"] = password
        return profile_from_wire(await self.call("save_connection", params))

    async def delete_connection(self, connection_id: str) -> None:
        """Delete a saved profile and its stored credential."""
        await self.call("delete_connection", {"id": connection_id})

    async def get_available_drive_letters(self) -> list[str]:
        """Return drive letters that are currently free."""
        return letters_from_wire(await self.call("get_available_drive_letters"))

    async def mount_drive(self, connection_id: str, drive_letter: str) -> MountStatus:
        """Mount a saved connection at a drive letter.

        Args:
            connection_id: ID of the profile to mount.
            drive_letter: Target letter; only the first character is sent.
        """
        result = await self.call(
            "mount_drive",
            {"connection_id": connection_id, "drive_letter": drive_letter_param(drive_letter)},
        )
        return mount_from_wire(result)

    async def unmount_drive(self, drive_letter: str) -> None:
        """Unmount whatever is mounted at a drive letter."""
        await self.call("unmount_drive", {"drive_letter": drive_letter_param(drive_letter)})

    async def get_mounted_drives(self) -> list[MountStatus]:
        """Return the status of every mounted drive."""
        return mounts_from_wire(await self.call("get_mounted_drives"))

    async def test_connection(
        self, profile: ConnectionProfile, password: str | None = None
    ) -> bool:
        """Check that the service can log in with a profile."""
        params: dict[str, Any] = {"connection": profile_to_wire(profile)}
        if password is not None:
            params["password"] = password
        return bool(await self.call("test_connection", params))
