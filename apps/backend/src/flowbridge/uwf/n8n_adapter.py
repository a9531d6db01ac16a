"""UWF adapter for n8n: lifecycle calls plus the two-way schema conversion."""

from __future__ import annotations

import copy
import logging
from collections import Counter
from typing import Any

from pydantic import ValidationError

from ..n8n.client import N8nClient
from ..n8n.schema import N8nNode, N8nWorkflow
from .base import WorkflowAdapter
from .schema import Action, ExecutionResult, Trigger, Workflow, WorkflowUpdate

logger = logging.getLogger(__name__)

WORKFLOWS_PATH = "/api/v1/workflows"

# UWF type -> n8n node type used when a workflow is built from scratch
N8N_NODE_TYPES: dict[str, str] = {
    "webhook": "n8n-nodes-base.webhook",
    "schedule": "n8n-nodes-base.scheduleTrigger",
    "manual": "n8n-nodes-base.manualTrigger",
    "http": "n8n-nodes-base.httpRequest",
    "email": "n8n-nodes-base.emailSend",
    "transform": "n8n-nodes-base.set",
}
FALLBACK_NODE_TYPE = "n8n-nodes-base.function"

TRIGGER_POSITION = [250, 300]
ACTION_POSITION = [450, 300]


class WorkflowConversionError(ValueError):
    """Raised when a workflow document cannot be converted."""


# ----------------------------------------------------------------------
# Classification
# ----------------------------------------------------------------------


def is_trigger_type(n8n_type: str) -> bool:
    """Return True if an n8n node type tag denotes a trigger node."""
    return "trigger" in n8n_type or "webhook" in n8n_type


def map_trigger_type(n8n_type: str) -> str:
    if "webhook" in n8n_type:
        return "webhook"
    if "schedule" in n8n_type:
        return "schedule"
    return "manual"


def map_action_type(n8n_type: str) -> str:
    if "http" in n8n_type:
        return "http"
    if "email" in n8n_type:
        return "email"
    return "transform"


def map_to_n8n_type(uwf_type: str) -> str:
    return N8N_NODE_TYPES.get(uwf_type, FALLBACK_NODE_TYPE)


def next_nodes(node_name: str, connections: dict[str, Any]) -> list[str]:
    """Target node names wired to the first output port of ``node_name``."""
    conn = connections.get(node_name)
    if not isinstance(conn, dict):
        return []
    ports = conn.get("main") or []
    if not ports or not ports[0]:
        return []
    return [edge["node"] for edge in ports[0] if isinstance(edge, dict) and "node" in edge]


# ----------------------------------------------------------------------
# Conversion
# ----------------------------------------------------------------------


def to_uwf(document: dict[str, Any]) -> Workflow:
    """Decode an n8n workflow document into UWF."""
    try:
        n8n = N8nWorkflow.model_validate(document)
    except ValidationError as e:
        raise WorkflowConversionError(f"Malformed n8n workflow document: {e}") from e

    # Edges are keyed by node name, so names must identify nodes uniquely.
    duplicates = sorted(name for name, count in Counter(n.name for n in n8n.nodes).items() if count > 1)
    if duplicates:
        raise WorkflowConversionError(
            f"Workflow {n8n.id} has duplicate node names: {', '.join(duplicates)}"
        )

    triggers: list[Trigger] = []
    actions: list[Action] = []
    for node in n8n.nodes:
        if is_trigger_type(node.type):
            triggers.append(_decode_node(Trigger, node, map_trigger_type(node.type), n8n.connections))
        else:
            actions.append(_decode_node(Action, node, map_action_type(node.type), n8n.connections))

    return Workflow(
        id=n8n.id,
        name=n8n.name,
        enabled=n8n.active,
        triggers=triggers,
        actions=actions,
        platform_data=copy.deepcopy(document),
    )


def _decode_node(model, node: N8nNode, uwf_type: str, connections: dict[str, Any]):
    return model(
        id=node.id,
        type=uwf_type,
        config=copy.deepcopy(node.parameters),
        next=next_nodes(node.name, connections),
    )


def from_uwf(workflow: Workflow) -> dict[str, Any]:
    """Encode a UWF workflow into an n8n create/update payload.

    The payload never carries ``active``; n8n only accepts state changes
    through the activate/deactivate endpoints.
    """
    if workflow.platform_data is not None:
        return _preserve(workflow)
    return _synthesize(workflow)


def _preserve(workflow: Workflow) -> dict[str, Any]:
    source = workflow.platform_data or {}
    if "nodes" not in source or "connections" not in source:
        raise WorkflowConversionError(
            f"platformData of workflow {workflow.id or workflow.name!r} has no nodes/connections"
        )
    payload: dict[str, Any] = {
        "name": workflow.name,
        "nodes": source["nodes"],
        "connections": source["connections"],
    }
    if source.get("settings") is not None:
        payload["settings"] = source["settings"]
    return payload


def _synthesize(workflow: Workflow) -> dict[str, Any]:
    nodes: list[dict[str, Any]] = []
    for records, position in ((workflow.triggers, TRIGGER_POSITION), (workflow.actions, ACTION_POSITION)):
        for record in records:
            nodes.append(
                {
                    # id doubles as name so decode's name-keyed lookup finds the edges
                    "id": record.id,
                    "name": record.id,
                    "type": map_to_n8n_type(record.type),
                    "position": list(position),
                    "parameters": copy.deepcopy(record.config),
                }
            )

    connections: dict[str, Any] = {}
    for record in [*workflow.triggers, *workflow.actions]:
        if record.next:
            connections[record.id] = {
                "main": [[{"node": target, "type": "main", "index": 0} for target in record.next]]
            }

    return {"name": workflow.name, "nodes": nodes, "connections": connections, "settings": {}}


# ----------------------------------------------------------------------
# Adapter
# ----------------------------------------------------------------------


class N8nAdapter(WorkflowAdapter):
    """Serves UWF workflows out of an n8n instance."""

    platform = "n8n"

    def __init__(self, client: N8nClient) -> None:
        self.client = client

    async def list(self) -> list[Workflow]:
        body = await self.client.request(WORKFLOWS_PATH)
        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            raise WorkflowConversionError("n8n workflow listing has no 'data' array")
        return [to_uwf(wf) for wf in body["data"]]

    async def get(self, workflow_id: str) -> Workflow:
        return to_uwf(await self.client.request(f"{WORKFLOWS_PATH}/{workflow_id}"))

    async def create(self, workflow: Workflow) -> Workflow:
        payload = from_uwf(workflow)
        payload.pop("active", None)
        created = await self.client.request(WORKFLOWS_PATH, method="POST", body=payload)

        if workflow.enabled:
            created_id = created.get("id") if isinstance(created, dict) else None
            if not created_id:
                raise WorkflowConversionError("n8n create response has no workflow id")
            logger.info("Activating newly created workflow %s", created_id)
            return await self.activate(str(created_id))

        return to_uwf(created)

    async def update(self, workflow_id: str, updates: WorkflowUpdate) -> Workflow:
        current = await self.get(workflow_id)
        try:
            merged = Workflow.model_validate(
                {**current.model_dump(), **updates.model_dump(exclude_unset=True)}
            )
        except ValidationError as e:
            raise WorkflowConversionError(f"Invalid update for workflow {workflow_id}: {e}") from e
        updated = await self.client.request(
            f"{WORKFLOWS_PATH}/{workflow_id}", method="PUT", body=from_uwf(merged)
        )
        return to_uwf(updated)

    async def delete(self, workflow_id: str) -> None:
        await self.client.request(f"{WORKFLOWS_PATH}/{workflow_id}", method="DELETE")

    async def activate(self, workflow_id: str) -> Workflow:
        return to_uwf(
            await self.client.request(f"{WORKFLOWS_PATH}/{workflow_id}/activate", method="POST")
        )

    async def deactivate(self, workflow_id: str) -> Workflow:
        return to_uwf(
            await self.client.request(f"{WORKFLOWS_PATH}/{workflow_id}/deactivate", method="POST")
        )

    async def execute(self, workflow_id: str, input_data: Any = None) -> ExecutionResult:
        result = await self.client.request(
            f"{WORKFLOWS_PATH}/{workflow_id}/execute",
            method="POST",
            body=input_data or {},
        )
        if not isinstance(result, dict):
            raise WorkflowConversionError("n8n execute response is not an object")
        return ExecutionResult(
            id=str(result.get("id", "")),
            status="success" if result.get("finished") else "running",
        )
