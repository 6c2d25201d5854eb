"""Strict Pydantic models for error handling.

No fallbacks, no defaults, no optional fields unless explicitly required.
"""

from datetime import datetime
from enum import IntEnum

from pydantic import Field

from a2a_opt.core.models import StrictBaseModel


class ErrorCode(IntEnum):
    """JSON-RPC error codes, standard set plus the OPT domain codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    NOT_FOUND = -32000
    INVALID_STATE = -32001


class ErrorContextData(StrictBaseModel):
    """Strict error context data model.

    All fields are required except the timestamp.
    """

    error_type: str = Field(..., description="Type of error")
    error_location: str = Field(..., description="Location in code where error occurred")
    timestamp: datetime = Field(default_factory=datetime.now, description="When error occurred")
    component: str = Field(..., description="Component that raised the error")
    operation: str = Field(..., description="Operation being performed")


class ValidationErrorDetail(StrictBaseModel):
    """Strict validation error detail."""

    location: str = Field(..., description="Field or location of validation error")
    message: str = Field(..., description="Validation error message")
    error_type: str = Field(..., description="Type of validation error")


class ResourceErrorContext(StrictBaseModel):
    """Strict resource error context."""

    resource_id: str = Field(..., description="ID of the resource")
    resource_type: str = Field(..., description="Type of resource")
    operation: str = Field(..., description="Operation attempted on resource")


class StateErrorContext(StrictBaseModel):
    """Strict state error context."""

    state_name: str = Field(..., description="ID of the entity whose state was changing")
    state_type: str = Field(..., description="Type of the entity")
    transition_from: str = Field(..., description="Current state")
    transition_to: str = Field(..., description="Requested state")
