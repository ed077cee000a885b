from __future__ import annotations

from typing import Any, Dict, List, Optional

from agent_gateway.agents.orchestrator import RunOrchestrator
from agent_gateway.context import AppContext
from agent_gateway.models import AgentInfo, AgentType, ConversationThread, Run


class FakeClock:
    """
    Monotonic clock advanced only by `sleep`, so poll loops run instantly.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeAgentsAPI:
    """
    In-memory stand-in for the remote agents service.

    `run_statuses` is consumed one entry per `get_run`; the last entry
    repeats once the script is exhausted.
    """

    def __init__(
        self,
        *,
        run_statuses: Optional[List[str]] = None,
        last_error: Any = None,
        messages: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        agent_name: str = "fake-agent",
    ) -> None:
        self.run_statuses = list(run_statuses or ["completed"])
        self.last_error = last_error
        self.messages: Dict[str, List[Dict[str, Any]]] = messages or {}
        self.agent_name = agent_name
        self.calls: Dict[str, int] = {
            "get_agent": 0,
            "create_thread": 0,
            "append_message": 0,
            "create_run": 0,
            "get_run": 0,
            "list_messages": 0,
        }
        self.appended: List[tuple] = []
        self.runs_created: List[tuple] = []
        self._thread_seq = 0

    async def get_agent(self, agent_id: str) -> AgentInfo:
        self.calls["get_agent"] += 1
        return AgentInfo(id=agent_id, name=self.agent_name)

    async def create_thread(self) -> ConversationThread:
        self.calls["create_thread"] += 1
        self._thread_seq += 1
        thread_id = f"thread_{self._thread_seq}"
        self.messages.setdefault(thread_id, [])
        return ConversationThread(id=thread_id)

    async def append_message(self, thread_id: str, role: str, text: str) -> Dict[str, Any]:
        self.calls["append_message"] += 1
        self.appended.append((thread_id, role, text))
        history = self.messages.setdefault(thread_id, [])
        history.append(
            {
                "id": f"msg_{len(history) + 1:03d}",
                "role": role,
                "text": text,
                "created_at": 1_700_000_000 + len(history),
                "thread_id": thread_id,
            }
        )
        return {"id": history[-1]["id"]}

    async def create_run(self, thread_id: str, agent_id: str) -> Run:
        self.calls["create_run"] += 1
        self.runs_created.append((thread_id, agent_id))
        return Run(id=f"run_{len(self.runs_created)}", status="queued")

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        index = self.calls["get_run"]
        self.calls["get_run"] += 1
        status = self.run_statuses[min(index, len(self.run_statuses) - 1)]
        if status == "completed":
            self._reply(thread_id)
        return Run(
            id=run_id,
            status=status,
            last_error=self.last_error if status == "failed" else None,
        )

    async def list_messages(self, thread_id: str, order: str = "asc") -> List[Dict[str, Any]]:
        self.calls["list_messages"] += 1
        return list(self.messages.get(thread_id, []))

    def _reply(self, thread_id: str) -> None:
        history = self.messages.setdefault(thread_id, [])
        if history and history[-1]["role"] == "assistant":
            return
        history.append(
            {
                "id": f"msg_{len(history) + 1:03d}",
                "role": "assistant",
                "text": "ack",
                "created_at": 1_700_000_000 + len(history),
                "thread_id": thread_id,
            }
        )


def make_context(api: FakeAgentsAPI, *, ready: bool = True) -> AppContext:
    clock = FakeClock()
    agents = {
        agent_type: RunOrchestrator(
            api,
            f"asst_{agent_type.value}",
            poll_interval_ms=1000,
            timeout_ms=5000,
            clock=clock,
            sleep=clock.sleep,
        )
        for agent_type in AgentType
    }
    return AppContext(ready=ready, agents=agents)
