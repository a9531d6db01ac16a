"""Pydantic models for the Unified Workflow Format (UWF)."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Trigger(BaseModel):
    """A node that starts a workflow run."""

    id: str
    type: str  # "webhook" | "schedule" | "manual"
    config: dict[str, Any] = {}
    next: list[str] = []


class Action(BaseModel):
    """A node that does work once the workflow is running."""

    id: str
    type: str  # "http" | "email" | "transform"
    config: dict[str, Any] = {}
    next: list[str] = []


class Workflow(BaseModel):
    """A platform-agnostic workflow.

    ``platform_data`` holds the untouched platform document the workflow was
    decoded from. When present it wins over ``triggers``/``actions`` on encode.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str
    enabled: bool = False
    triggers: list[Trigger] = []
    actions: list[Action] = []
    platform_data: Optional[dict[str, Any]] = Field(None, alias="platformData")


class WorkflowUpdate(BaseModel):
    """Partial update; only fields the caller set are merged."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = None
    enabled: Optional[bool] = None
    triggers: Optional[list[Trigger]] = None
    actions: Optional[list[Action]] = None
    platform_data: Optional[dict[str, Any]] = Field(None, alias="platformData")

    @field_validator("id", "name", "enabled", "triggers", "actions", mode="before")
    @classmethod
    def _reject_null(cls, value):
        # Only platformData may be cleared; the other fields are omitted instead.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ExecutionResult(BaseModel):
    """Synchronous answer to an execute call."""

    id: str
    status: Literal["success", "running"]
