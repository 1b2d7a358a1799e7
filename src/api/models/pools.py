"""
API models for pool registration, listing and control.

Request fields are declared loosely on purpose: the relay checks missing
or unusable values itself and answers 400 rather than FastAPI's 422.
"""

from pydantic import BaseModel, Field
from typing import Any

from src.relay.types import PoolSummary

# API Request Models
class CreateServerRequest(BaseModel):
    """Register a pool-control backend."""
    username: Any = Field(None, description="Unique backend name")
    api_url: Any = Field(None, alias="apiUrl", description="Backend data endpoint (GET)")
    control_url: Any = Field(None, alias="controlUrl", description="Backend control endpoint (POST)")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "username": "user1",
                "apiUrl": "https://iaqualink.poolpilot.app/iapool1/data",
                "controlUrl": "https://iaqualink.poolpilot.app/iapool1/control"
            }
        }

class ControlRequest(BaseModel):
    """Control command to forward to the backend owning a pool."""
    system_id: Any = Field(None, alias="systemId", description="Pool identifier")
    action: Any = Field(None, description="Backend-specific action name")
    value: Any = Field(None, description="Optional action argument")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "systemId": "iapool1-0042",
                "action": "set_pump",
                "value": "on"
            }
        }

# API Response Models
class PoolSummaryModel(BaseModel):
    """One pool in the flattened `/poolList` output."""
    system_id: str = Field(..., alias="systemId")
    name: Any = None
    status: Any = None
    data_endpoint: str = Field(..., alias="dataEndpoint")
    control_endpoint: str = Field(..., alias="controlEndpoint")

    class Config:
        populate_by_name = True

    @classmethod
    def from_summary(cls, summary: PoolSummary) -> "PoolSummaryModel":
        return cls(
            system_id=summary.system_id,
            name=summary.name,
            status=summary.status,
            data_endpoint=summary.data_endpoint,
            control_endpoint=summary.control_endpoint,
        )

class PoolCountResponse(BaseModel):
    count: int

class ControlResponse(BaseModel):
    """Relayed backend answer to a control command."""
    success: bool = Field(..., description="Whether the backend accepted the command")
    response: Any = Field(None, description="Backend response body, verbatim")
