"""n8n REST API access: client, error types and document models."""

from .client import N8nClient
from .errors import N8nConfigError, N8nError, N8nHTTPError, N8nTransportError, http_status_for
from .schema import N8nNode, N8nWorkflow

__all__ = [
    "N8nClient",
    "N8nConfigError",
    "N8nError",
    "N8nHTTPError",
    "N8nNode",
    "N8nTransportError",
    "N8nWorkflow",
    "http_status_for",
]
