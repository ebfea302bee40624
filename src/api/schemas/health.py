"""Pydantic schemas for the health API."""

from typing import Literal

from pydantic import BaseModel, Field

from src.api.services.storage import ConnectorState


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Service health status")
    state: ConnectorState = Field(..., description="Bucket connector lifecycle state")
    bucket: str = Field(..., description="Configured bucket name")
    bucket_reachable: bool = Field(..., description="Bucket reachability")
    version: str = Field(default="0.1.0", description="API version")
