from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class AgentType(str, Enum):
    PARAMS = "params"
    SUMMARY = "summary"
    ROUTE = "route"


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"


# Statuses for which polling continues.
PENDING_RUN_STATUSES = frozenset({RunStatus.QUEUED.value, RunStatus.IN_PROGRESS.value})


class ConversationThread(BaseModel):
    id: str = Field(..., description="Opaque thread id issued by the remote service")


class Run(BaseModel):
    id: str
    status: str
    last_error: Optional[Any] = None

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_RUN_STATUSES


class RunResult(BaseModel):
    run_id: str
    status: str


class AgentInfo(BaseModel):
    id: str
    name: Optional[str] = None


__all__ = [
    "AgentInfo",
    "AgentType",
    "ConversationThread",
    "PENDING_RUN_STATUSES",
    "Run",
    "RunResult",
    "RunStatus",
]
