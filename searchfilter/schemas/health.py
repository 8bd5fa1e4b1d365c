"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /_searchfilter/health (liveness)."""

    status: str = Field(default="ok", description="Service status")
