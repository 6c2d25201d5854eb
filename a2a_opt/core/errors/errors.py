"""Base error classes with structured error context.

This module provides the foundation for the error handling system: a
framework-wide BaseError carrying an ErrorContext, and the OPT error family
that maps domain failures onto JSON-RPC error codes.
"""

import traceback
from datetime import datetime
from typing import Any, Dict, List, Optional

from .models import (
    ErrorCode,
    ErrorContextData,
    ResourceErrorContext,
    StateErrorContext,
    ValidationErrorDetail,
)


class ErrorContext:
    """Structured context information for errors.

    This class provides:
    1. Structured context information for errors
    2. Clean serialization for logging and reporting
    3. Strict typing with Pydantic models
    """

    def __init__(self, context_data: ErrorContextData):
        """Initialize error context.

        Args:
            context_data: Required error context data
        """
        self._data = context_data

    @classmethod
    def create(
        cls, error_type: str, error_location: str, component: str, operation: str
    ) -> "ErrorContext":
        """Create a new error context with required data.

        Args:
            error_type: Type of error
            error_location: Location in code
            component: Component raising error
            operation: Operation being performed

        Returns:
            New ErrorContext instance
        """
        context_data = ErrorContextData(
            error_type=error_type,
            error_location=error_location,
            component=component,
            operation=operation,
        )
        return cls(context_data)

    @property
    def data(self) -> ErrorContextData:
        """Get the context data."""
        return self._data

    @property
    def timestamp(self) -> datetime:
        """Get the context creation timestamp."""
        return self._data.timestamp

    def __str__(self) -> str:
        return f"ErrorContext({self._data.model_dump()})"


class BaseError(Exception):
    """Base class for all framework errors with context.

    This class provides:
    1. Structured error information with context
    2. Clean serialization for logging and reporting
    3. Cause tracking for nested errors
    """

    def __init__(self, message: str, context: ErrorContext, cause: Optional[Exception] = None):
        """Initialize error.

        Args:
            message: Error message
            context: Required error context
            cause: Optional cause exception
        """
        self.message = message
        self.context = context
        self.cause = cause
        self.timestamp = datetime.now()
        self.traceback = self._capture_traceback()

        super().__init__(message)

    def _capture_traceback(self) -> str:
        return traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary.

        Returns:
            Dictionary representation of error
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.data.model_dump(),
            "cause": str(self.cause) if self.cause else None,
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        cause_str = f" (caused by: {self.cause})" if self.cause else ""
        return f"{self.__class__.__name__}: {self.message}{cause_str}"


class OPTError(BaseError):
    """Error raised by OPT operations, tagged with a JSON-RPC error code.

    The dispatch layer reports these with their own code; anything that is
    not an OPTError becomes INTERNAL_ERROR.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        context: ErrorContext,
        data: Any = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize OPT error.

        Args:
            message: Error message reported to the caller
            context: Required error context
            data: Optional structured payload attached to the RPC error
            cause: Optional cause exception
        """
        self.data = data
        super().__init__(message, context, cause)

    def to_rpc_error(self) -> Dict[str, Any]:
        """Convert to the JSON-RPC error object shape."""
        result: Dict[str, Any] = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result

    def __str__(self) -> str:
        # Keep the plain message so it can be surfaced as-is.
        return self.message


class ParseError(OPTError):
    """Request body could not be decoded."""

    code = ErrorCode.PARSE_ERROR

    def __init__(self, message: str, cause: Optional[Exception] = None):
        context = ErrorContext.create(
            error_type="ParseError",
            error_location="decode_request",
            component="rpc",
            operation="parse",
        )
        super().__init__(f"Parse error: {message}", context, cause=cause)


class InvalidRequestError(OPTError):
    """Decoded request is not a valid JSON-RPC envelope."""

    code = ErrorCode.INVALID_REQUEST

    def __init__(self, message: str, data: Any = None):
        context = ErrorContext.create(
            error_type="InvalidRequestError",
            error_location="validate_envelope",
            component="rpc",
            operation="validate",
        )
        super().__init__(message, context, data=data)


class MethodNotFoundError(OPTError):
    """Requested method is not registered."""

    code = ErrorCode.METHOD_NOT_FOUND

    def __init__(self, method: str):
        context = ErrorContext.create(
            error_type="MethodNotFoundError",
            error_location="dispatch",
            component="rpc",
            operation=method,
        )
        super().__init__(f"Method not found: {method}", context)
        self.method = method


class InvalidParamsError(OPTError):
    """Caller omitted a required parameter or supplied an invalid one."""

    code = ErrorCode.INVALID_PARAMS

    def __init__(
        self,
        message: str,
        validation_errors: Optional[List[ValidationErrorDetail]] = None,
        operation: str = "validate_params",
    ):
        """Initialize params error.

        Args:
            message: Error message
            validation_errors: Optional list of validation error details
            operation: Operation whose params were rejected
        """
        self.validation_errors = validation_errors or []
        context = ErrorContext.create(
            error_type="InvalidParamsError",
            error_location=operation,
            component="rpc",
            operation=operation,
        )
        data = [detail.model_dump() for detail in self.validation_errors] or None
        super().__init__(message, context, data=data)

    @classmethod
    def missing(cls, param: str, operation: str = "validate_params") -> "InvalidParamsError":
        """Build the error for an omitted required parameter."""
        detail = ValidationErrorDetail(
            location=param,
            message="Field required",
            error_type="missing",
        )
        return cls(f"Missing required parameter: {param}", [detail], operation=operation)


class NotFoundError(OPTError):
    """Referenced entity does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity_type: str, entity_id: str, operation: str = "lookup"):
        """Initialize not-found error.

        Args:
            entity_type: Human readable entity name, e.g. "Objective"
            entity_id: The id that failed to resolve
            operation: Operation that performed the lookup
        """
        self.resource_context = ResourceErrorContext(
            resource_id=entity_id,
            resource_type=entity_type,
            operation=operation,
        )
        context = ErrorContext.create(
            error_type="NotFoundError",
            error_location=operation,
            component="hierarchy",
            operation=operation,
        )
        super().__init__(f"{entity_type} not found: {entity_id}", context)


class InvalidStateError(OPTError):
    """Requested status change is not a legal transition."""

    code = ErrorCode.INVALID_STATE

    def __init__(self, entity_type: str, entity_id: str, from_status: str, to_status: str):
        """Initialize state error.

        Args:
            entity_type: Human readable entity name, e.g. "Plan"
            entity_id: Entity whose status was to change
            from_status: Current status
            to_status: Requested status
        """
        self.state_context = StateErrorContext(
            state_name=entity_id,
            state_type=entity_type,
            transition_from=from_status,
            transition_to=to_status,
        )
        context = ErrorContext.create(
            error_type="InvalidStateError",
            error_location="validate_transition",
            component="transitions",
            operation="status_update",
        )
        super().__init__(
            f"Invalid status transition: {from_status} → {to_status}",
            context,
            data={"from": from_status, "to": to_status},
        )
