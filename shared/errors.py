"""
Shared error handling for the Dataspace Access Layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for Access Layer services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class PolicyConfigurationError(AccessLayerException):
    """Policy function bindings are missing or inconsistent."""

    status_code = 500

    def __init__(self, message: str = "Policy configuration error", details: Optional[Dict[str, Any]] = None):
        super().__init__("POLICY_CONFIGURATION_ERROR", message, details)
