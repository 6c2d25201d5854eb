"""JSON-RPC envelope models and the status change event."""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from a2a_opt.core.models import StrictBaseModel

JSONRPC_VERSION = "2.0"

RequestId = Union[str, int, None]


class JsonRpcRequest(BaseModel):
    """JSON-RPC request envelope."""

    model_config = ConfigDict(extra="ignore")

    jsonrpc: Literal["2.0"] = Field(..., description="Protocol tag, always '2.0'")
    method: str = Field(..., min_length=1)
    id: RequestId = Field(default=None, description="Correlation id echoed in the response")
    params: Optional[Dict[str, Any]] = None


class JsonRpcError(BaseModel):
    """Error member of a response."""

    code: int
    message: str
    data: Optional[Any] = None


class JsonRpcResponse(BaseModel):
    """JSON-RPC response envelope carrying exactly one of result or error."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    result: Optional[Any] = None
    error: Optional[JsonRpcError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire dictionary.

        The id is always present (null when the request had none).
        """
        payload: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result
        return payload


class StatusChangeEvent(StrictBaseModel):
    """Emitted after an update that carried a status has been applied."""

    entity_type: Literal["objective", "plan"] = Field(..., description="Kind of entity updated")
    entity_id: str = Field(..., description="Id of the updated entity")
    from_status: str = Field(..., description="Status before the update")
    to_status: str = Field(..., description="Status after the update")
