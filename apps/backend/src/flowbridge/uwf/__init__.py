"""Unified Workflow Format: platform-agnostic workflow models and adapters."""

from .base import WorkflowAdapter
from .n8n_adapter import N8nAdapter, WorkflowConversionError, from_uwf, to_uwf
from .schema import Action, ExecutionResult, Trigger, Workflow, WorkflowUpdate

__all__ = [
    "Action",
    "ExecutionResult",
    "N8nAdapter",
    "Trigger",
    "Workflow",
    "WorkflowAdapter",
    "WorkflowConversionError",
    "WorkflowUpdate",
    "from_uwf",
    "to_uwf",
]
