"""
Shared error handling for the permissions engine.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel
from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class PermissionsException(Exception):
    """Base exception for the permissions engine."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(PermissionsException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ConditionEvaluationError(PermissionsException):
    """Attribute condition could not be evaluated."""

    def __init__(self, message: str = "Condition evaluation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONDITION_EVALUATION_ERROR", message, details)


class RuleLoadError(PermissionsException):
    """Rules could not be fetched or parsed from a rule source."""

    def __init__(self, message: str = "Rule load failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("RULE_LOAD_ERROR", message, details)


class ResolverNotInitializedError(PermissionsException):
    """Resolver accessed before initialization."""

    def __init__(self, message: str = "PermissionResolver not initialized", details: Optional[Dict[str, Any]] = None):
        super().__init__("RESOLVER_NOT_INITIALIZED", message, details)


class ResolverAlreadyInitializedError(PermissionsException):
    """Resolver initialized more than once."""

    def __init__(self, message: str = "PermissionResolver already initialized", details: Optional[Dict[str, Any]] = None):
        super().__init__("RESOLVER_ALREADY_INITIALIZED", message, details)
