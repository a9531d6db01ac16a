"""Error types raised by the n8n client."""

from __future__ import annotations

ERROR_PREFIX = "Failed to fetch from n8n: "


class N8nError(Exception):
    """Raised when a call to the n8n API cannot be completed.

    ``error_type`` is a short machine-readable tag; ``status_code`` is set only
    when n8n answered with a non-2xx response.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "n8n_error",
        status_code: int | None = None,
    ):
        self.error_type = error_type
        self.status_code = status_code
        super().__init__(message)


class N8nConfigError(N8nError):
    """Raised before any network call when the client is not configured."""

    def __init__(self, message: str):
        super().__init__(message, "config_error")


class N8nTransportError(N8nError):
    """Connection, DNS or timeout failure."""

    def __init__(self, message: str, error_type: str = "transport_error"):
        super().__init__(ERROR_PREFIX + message, error_type)


class N8nHTTPError(N8nError):
    """n8n answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, detail: str | None = None):
        self.reason = reason
        self.detail = detail
        message = f"n8n API error: {status_code} {reason}"
        if detail:
            message += f" - {detail}"
        super().__init__(ERROR_PREFIX + message, "http_error", status_code)


# Facade statuses that are passed through from n8n; everything else is a 500.
PASSTHROUGH_STATUSES = (400, 404)


def http_status_for(exc: Exception) -> int:
    """Pick the facade response status for a failed n8n call."""
    status = getattr(exc, "status_code", None)
    if isinstance(exc, N8nError) and status in PASSTHROUGH_STATUSES:
        return status
    return 500
