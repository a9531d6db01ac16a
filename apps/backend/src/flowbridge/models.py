"""API models for FlowBridge."""

from pydantic import BaseModel, Field


class EnabledToggle(BaseModel):
    """Request to activate or deactivate a workflow."""

    enabled: bool = Field(..., description="True activates the workflow, False deactivates it")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str = "FlowBridge Backend"

