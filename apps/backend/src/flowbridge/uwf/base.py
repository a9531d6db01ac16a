"""Base interface for platform adapters that speak UWF."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .schema import ExecutionResult, Workflow, WorkflowUpdate


class WorkflowAdapter(ABC):
    """Abstract base for every platform adapter.

    Adapters translate between a platform's native workflow documents and UWF
    and own the lifecycle calls against that platform. The platform remains the
    only system of record; adapters keep no state between calls.
    """

    platform: str = ""

    @abstractmethod
    async def list(self) -> list[Workflow]: ...

    @abstractmethod
    async def get(self, workflow_id: str) -> Workflow: ...

    @abstractmethod
    async def create(self, workflow: Workflow) -> Workflow: ...

    @abstractmethod
    async def update(self, workflow_id: str, updates: WorkflowUpdate) -> Workflow: ...

    @abstractmethod
    async def delete(self, workflow_id: str) -> None: ...

    @abstractmethod
    async def activate(self, workflow_id: str) -> Workflow: ...

    @abstractmethod
    async def deactivate(self, workflow_id: str) -> Workflow: ...

    @abstractmethod
    async def execute(self, workflow_id: str, input_data: Any = None) -> ExecutionResult: ...
