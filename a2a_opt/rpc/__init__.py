"""JSON-RPC binding of the OPT operations."""

from a2a_opt.rpc.handler import OPTHandler, StatusChangeHook, validation_details
from a2a_opt.rpc.models import (
    JSONRPC_VERSION,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    StatusChangeEvent,
)

__all__ = [
    "OPTHandler",
    "StatusChangeHook",
    "validation_details",
    "JSONRPC_VERSION",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "StatusChangeEvent",
]
