from __future__ import annotations

import asyncio
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..agents.exceptions import AgentGatewayError
from ..agents.orchestrator import RunOrchestrator
from ..agents.reconcile import last_message_by_role, merge_threads, order_messages
from ..context import AppContext
from ..deps import get_app_context
from ..errors import bad_request, from_exception
from ..logging_config import logger
from ..models import AgentType
from ..schemas import (
    MergeMessagesRequest,
    MergeMessagesResponse,
    SendMessageRequest,
    SendMessageResponse,
)


router = APIRouter(prefix="/agent", tags=["agent"])

_AGENT_TYPE_ERROR = "agentType must be 'params' | 'summary' | 'route'"


def _parse_agent_type(raw: str | None) -> AgentType:
    try:
        return AgentType((raw or "").strip())
    except ValueError:
        raise bad_request(_AGENT_TYPE_ERROR) from None


async def _fetch_histories(
    svc: RunOrchestrator, thread_ids: List[str]
) -> List[List[Dict[str, Any]]]:
    """
    Fetch thread histories concurrently; the first failure cancels the rest.
    """
    tasks = [asyncio.create_task(svc.list_messages(tid)) for tid in thread_ids]
    try:
        return list(await asyncio.gather(*tasks))
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()


@router.post("/send", response_model=SendMessageResponse)
async def send_message(
    body: SendMessageRequest,
    ctx: AppContext = Depends(get_app_context),
) -> SendMessageResponse:
    """
    Append a user message to a thread (new or existing), run the selected
    agent to completion and return the latest assistant reply.
    """
    try:
        ctx.require_ready()
    except AgentGatewayError as exc:
        raise from_exception(exc) from exc

    agent_type = _parse_agent_type(body.agent_type)
    message = (body.message or "").strip()
    if not message:
        raise bad_request("Message required")

    thread_id = (body.thread_id or "").strip() or None
    try:
        svc = ctx.get_agent(agent_type)
        if thread_id is None:
            thread = await svc.create_thread()
            thread_id = thread.id
            logger.info("[send/%s] Created thread: %s", agent_type.value, thread_id)
        else:
            logger.info("[send/%s] Continue thread: %s", agent_type.value, thread_id)

        result = await svc.append_and_run(thread_id, message)
        messages = order_messages(await svc.list_messages(thread_id))
    except AgentGatewayError as exc:
        logger.error("POST /agent/send failed for thread %s: %s", thread_id, exc)
        raise from_exception(exc) from exc

    return SendMessageResponse(
        thread_id=thread_id,
        run_id=result.run_id,
        status=result.status,
        last_assistant=last_message_by_role(messages),
    )


@router.post("/messages", response_model=MergeMessagesResponse)
async def merge_messages(
    body: MergeMessagesRequest,
    ctx: AppContext = Depends(get_app_context),
) -> MergeMessagesResponse:
    """
    Fetch the history of up to two threads and return one time-ordered list.
    """
    try:
        ctx.require_ready()
    except AgentGatewayError as exc:
        raise from_exception(exc) from exc

    thread_ids = body.thread_ids()
    if not thread_ids:
        raise bad_request("threadAId or threadBId required")

    try:
        svc = ctx.get_agent(AgentType.PARAMS)
        histories = await _fetch_histories(svc, thread_ids)
    except AgentGatewayError as exc:
        logger.error("POST /agent/messages failed for threads %s: %s", thread_ids, exc)
        raise from_exception(exc) from exc

    return MergeMessagesResponse(messages=merge_threads(*histories, limit=body.limit))


__all__ = ["router"]
