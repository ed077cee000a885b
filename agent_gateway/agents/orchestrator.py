"""
Append-and-run protocol for a single remote agent.

One RunOrchestrator is bound to one agent id. `append_and_run` posts a user
message to a thread, starts a run and polls it until it leaves the pending
states or the time budget runs out. Polling is a small state machine:

    queued / in_progress --(read)--> completed | failed | other terminal
                         +--(deadline reached)--> returned as-is

The terminal check is evaluated before the deadline check on every step, so
a status observed exactly at the deadline is still reported as terminal.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from ..logging_config import logger
from ..models import AgentInfo, ConversationThread, Run, RunResult, RunStatus
from .exceptions import InvalidArgument, RunFailed

DEFAULT_POLL_INTERVAL_MS = 1000
DEFAULT_RUN_TIMEOUT_MS = 120_000


class AgentsAPI(Protocol):
    async def get_agent(self, agent_id: str) -> AgentInfo: ...

    async def create_thread(self) -> ConversationThread: ...

    async def append_message(self, thread_id: str, role: str, text: str) -> Any: ...

    async def create_run(self, thread_id: str, agent_id: str) -> Run: ...

    async def get_run(self, thread_id: str, run_id: str) -> Run: ...

    async def list_messages(self, thread_id: str, order: str = "asc") -> List[Dict[str, Any]]: ...


class RunOrchestrator:
    def __init__(
        self,
        api: AgentsAPI,
        agent_id: str,
        *,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        timeout_ms: int = DEFAULT_RUN_TIMEOUT_MS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._api = api
        self._agent_id = agent_id
        self._poll_interval_ms = poll_interval_ms
        self._timeout_ms = timeout_ms
        self._clock = clock
        self._sleep = sleep

    @property
    def agent_id(self) -> str:
        return self._agent_id

    @property
    def api(self) -> AgentsAPI:
        return self._api

    async def ensure_agent_ready(self) -> AgentInfo:
        """
        Check the agent exists and adopt the id reported by the service.
        """
        info = await self._api.get_agent(self._agent_id)
        self._agent_id = info.id
        return info

    async def create_thread(self) -> ConversationThread:
        return await self._api.create_thread()

    async def list_messages(self, thread_id: str) -> List[Dict[str, Any]]:
        return await self._api.list_messages(thread_id, order="asc")

    async def append_and_run(
        self,
        thread_id: str,
        message: str,
        poll_interval_ms: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> RunResult:
        if not isinstance(message, str) or not message.strip():
            raise InvalidArgument("message is empty")
        if not thread_id:
            raise InvalidArgument("thread_id is required")

        interval_ms = self._poll_interval_ms if poll_interval_ms is None else poll_interval_ms
        budget_ms = self._timeout_ms if timeout_ms is None else timeout_ms

        await self._api.append_message(thread_id, "user", message)
        run = await self._api.create_run(thread_id, self._agent_id)
        logger.info(
            "Started run %s on thread %s for agent %s", run.id, thread_id, self._agent_id
        )

        current = await self._poll(thread_id, run.id, interval_ms, budget_ms)

        if current.status == RunStatus.FAILED.value:
            logger.warning(
                "Run %s on thread %s failed: %s", current.id, thread_id, current.last_error
            )
            raise RunFailed(current.last_error)
        if current.is_pending:
            logger.warning(
                "Run %s on thread %s still %s after %sms",
                current.id,
                thread_id,
                current.status,
                budget_ms,
            )
        return RunResult(run_id=current.id, status=current.status)

    async def _poll(
        self, thread_id: str, run_id: str, interval_ms: int, budget_ms: int
    ) -> Run:
        deadline = self._clock() + budget_ms / 1000.0
        current = await self._api.get_run(thread_id, run_id)
        while True:
            if not current.is_pending:
                return current
            if self._clock() >= deadline:
                return current
            await self._sleep(interval_ms / 1000.0)
            current = await self._api.get_run(thread_id, run_id)


__all__ = [
    "AgentsAPI",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_RUN_TIMEOUT_MS",
    "RunOrchestrator",
]
