"""Boundary to the external mount-management service."""

from sshdrive.api.client import MountServiceClient
from sshdrive.api.protocol import JsonRpcError, ServiceError
from sshdrive.api.service import MountService

__all__ = ["JsonRpcError", "MountService", "MountServiceClient", "ServiceError"]
