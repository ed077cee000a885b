from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    agent_type: Optional[str] = Field(
        default=None, alias="agentType", description="params | summary | route"
    )
    thread_id: Optional[str] = Field(
        default=None,
        alias="threadId",
        description="Existing thread to continue; a new thread is created when omitted",
    )
    message: Optional[str] = Field(default=None, description="User message text")


class SendMessageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(..., alias="threadId")
    run_id: str = Field(..., alias="runId")
    status: str
    last_assistant: Optional[Dict[str, Any]] = Field(default=None, alias="lastAssistant")


class MergeMessagesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thread_a_id: Optional[str] = Field(default=None, alias="threadAId")
    thread_b_id: Optional[str] = Field(default=None, alias="threadBId")
    limit: Optional[int] = Field(
        default=None, description="Keep only the most recent N merged messages"
    )

    def thread_ids(self) -> List[str]:
        ids: List[str] = []
        for raw in (self.thread_a_id, self.thread_b_id):
            value = (raw or "").strip()
            if value and value not in ids:
                ids.append(value)
        return ids


class MergeMessagesResponse(BaseModel):
    messages: List[Dict[str, Any]] = Field(default_factory=list)


__all__ = [
    "MergeMessagesRequest",
    "MergeMessagesResponse",
    "SendMessageRequest",
    "SendMessageResponse",
]
