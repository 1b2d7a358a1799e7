"""
Common API models used across different endpoints.

These models represent shared concepts like errors, base responses and health.
"""

from pydantic import BaseModel, Field
from typing import Dict, Optional

class APIError(BaseModel):
    """Standard error response format."""
    error: str = Field(..., description="Error message")

class APIResponse(BaseModel):
    """Base response wrapper for write endpoints."""
    success: bool = Field(..., description="Whether the request was successful")
    message: Optional[str] = Field(None, description="Human-readable response message")

class HealthStatus(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    uptime: float = Field(..., description="Uptime in seconds")
    dependencies: Dict[str, str] = Field(..., description="Status of internal components")

#documented error shapes for the relay endpoints
ERROR_RESPONSES = {
    400: {"model": APIError, "description": "Missing or invalid input"},
    404: {"model": APIError, "description": "Unknown server, pool or index"},
    500: {"model": APIError, "description": "Backend request failed"},
}
