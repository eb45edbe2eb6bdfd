"""
TrailMix Backend: Shared Response Schemas
===========================================

What:  Envelope, message, error and diagnostic models used by every router.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """`{"success": true, "data": ...}` envelope used by profile and trail creation."""
    success: bool = Field(default=True)
    data: T


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. `{"message": "Trail deleted successfully"}`."""
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Error format returned by every global exception handler.

    Fields:
        error: Machine-readable error code (e.g. "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (which field failed, allowed types)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class ConnectivityResponse(BaseModel):
    """Payload of GET /api/test, used by the mobile app to probe reachability."""
    success: bool = True
    message: str
    timestamp: str
    server: str
    host: Optional[str] = None
    ip: Optional[str] = None


class HealthResponse(BaseModel):
    """Service and database status for monitoring probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
