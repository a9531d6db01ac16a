"""Pydantic models for the parts of an n8n workflow document we read."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class N8nNode(BaseModel):
    """A single node in an n8n workflow graph."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    name: str  # key into the connections map
    type: str  # "n8n-nodes-base.webhook" | "n8n-nodes-base.httpRequest" | etc.
    position: list[float] = []
    parameters: dict[str, Any] = {}


class N8nWorkflow(BaseModel):
    """An n8n workflow as returned by the public API."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    name: str
    active: bool = False
    nodes: list[N8nNode]
    connections: dict[str, Any] = {}
    settings: Optional[dict[str, Any]] = None
