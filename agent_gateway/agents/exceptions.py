from __future__ import annotations

import json
from typing import Any, Optional


class AgentGatewayError(RuntimeError):
    """Base class for failures raised by the agent orchestration layer."""


class NotReady(AgentGatewayError):
    """Raised when a request arrives before bootstrap has completed."""


class InvalidArgument(AgentGatewayError, ValueError):
    """Raised for missing or malformed input, before any remote call."""


class AuthFailure(AgentGatewayError):
    """Raised when a caller needs a bearer token and none could be obtained."""


class RunFailed(AgentGatewayError):
    """Raised when a remote run reaches the `failed` terminal status."""

    def __init__(self, last_error: Any = None):
        self.last_error = last_error
        try:
            rendered = json.dumps(last_error, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            rendered = repr(last_error)
        super().__init__(f"run failed: {rendered}")


class RemoteUnavailable(AgentGatewayError):
    """Raised on transport errors or non-2xx answers from a remote service."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


__all__ = [
    "AgentGatewayError",
    "AuthFailure",
    "InvalidArgument",
    "NotReady",
    "RemoteUnavailable",
    "RunFailed",
]
