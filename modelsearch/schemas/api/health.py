from typing import Dict, Optional

from pydantic import BaseModel, Field


class ServiceStatus(BaseModel):
    """Individual service status."""

    status: str = Field(..., description="Service status")
    message: Optional[str] = Field(None, description="Status message")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall health status")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    service_name: str = Field(..., description="Service identifier")
    services: Optional[Dict[str, ServiceStatus]] = Field(None, description="Individual service statuses")
