from .agent import (
    PENDING_RUN_STATUSES,
    AgentInfo,
    AgentType,
    ConversationThread,
    Run,
    RunResult,
    RunStatus,
)

__all__ = [
    "AgentInfo",
    "AgentType",
    "ConversationThread",
    "PENDING_RUN_STATUSES",
    "Run",
    "RunResult",
    "RunStatus",
]
