"""JSON-RPC protocol types for talking to the mount service."""

from dataclasses import dataclass
from typing import Any

# Error codes the mount service uses in JSON-RPC error replies
ERROR_NOT_FOUND = -32004
ERROR_CONFLICT = -32009
ERROR_METHOD_NOT_FOUND = -32601


@dataclass(frozen=True)
class JsonRpcRequest:
    """A JSON-RPC 2.0 request.

    Attributes:
        id: Request identifier.
        method: Service call name (e.g. "mount_drive").
        params: Named call parameters.
    """

    id: int
    method: str
    params: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        result: dict[str, Any] = {
            "jsonrpc": "2.0",
            "id": self.id,
            "method": self.method,
        }
        if self.params is not None:
            result["params"] = self.params
        return result


@dataclass(frozen=True)
class JsonRpcError:
    """A JSON-RPC 2.0 error.

    Attributes:
        code: Error code.
        message: Error message as reported by the service.
        data: Additional error data.
    """

    code: int
    message: str
    data: Any = None

    def __str__(self) -> str:
        """Return the service's message, which is what users get to see."""
        return self.message

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JsonRpcError":
        """Create error from the "error" member of a response."""
        return cls(
            code=data.get("code", -1),
            message=data.get("message", "Unknown error"),
            data=data.get("data"),
        )


@dataclass(frozen=True)
class JsonRpcResponse:
    """A JSON-RPC 2.0 response.

    Attributes:
        id: Request identifier matching the request.
        result: Result data (None if error or for void calls).
        error: Error data (None if success).
    """

    id: int | None = None
    result: Any = None
    error: JsonRpcError | None = None

    @property
    def is_success(self) -> bool:
        """Return True if response indicates success."""
        return self.error is None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JsonRpcResponse":
        """Create response from JSON dict."""
        error_data = data.get("error")
        response_id = data.get("id")
        return cls(
            id=response_id if isinstance(response_id, int) else None,
            result=data.get("result"),
            error=JsonRpcError.from_dict(error_data) if error_data is not None else None,
        )


class ServiceError(RuntimeError):
    """The mount service rejected a call."""

    def __init__(self, method: str, error: JsonRpcError) -> None:
        super().__init__(str(error))
        self.method = method
        self.error = error

    @property
    def code(self) -> int:
        """Return the JSON-RPC error code."""
        return self.error.code

    @property
    def is_not_found(self) -> bool:
        """Return True if the service reported an unknown id or letter."""
        return self.error.code == ERROR_NOT_FOUND
