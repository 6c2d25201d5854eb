"""Structured errors and the JSON-RPC error taxonomy."""

from .errors import (
    BaseError,
    ErrorContext,
    InvalidParamsError,
    InvalidRequestError,
    InvalidStateError,
    MethodNotFoundError,
    NotFoundError,
    OPTError,
    ParseError,
)
from .models import (
    ErrorCode,
    ErrorContextData,
    ResourceErrorContext,
    StateErrorContext,
    ValidationErrorDetail,
)

__all__ = [
    "BaseError",
    "ErrorContext",
    "OPTError",
    "ParseError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "NotFoundError",
    "InvalidStateError",
    "ErrorCode",
    "ErrorContextData",
    "ResourceErrorContext",
    "StateErrorContext",
    "ValidationErrorDetail",
]
