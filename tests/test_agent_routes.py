import asyncio

import pytest
from fastapi.testclient import TestClient

from agent_gateway.agents.exceptions import RemoteUnavailable
from agent_gateway.api.agent_routes import _fetch_histories
from agent_gateway.context import AppContext
from agent_gateway.models import AgentType
from agent_gateway.routes import create_app
from tests.utils import FakeAgentsAPI, make_context


def _client(api: FakeAgentsAPI, *, ready: bool = True) -> TestClient:
    return TestClient(create_app(make_context(api, ready=ready)))


def test_ping_is_always_ok():
    client = TestClient(create_app(AppContext()))
    resp = client.get("/ping")
    assert resp.status_code == 200
    assert "ts" in resp.json()


def test_readyz_reflects_bootstrap_state():
    api = FakeAgentsAPI()
    assert _client(api).get("/readyz").json() == {"ready": True}

    resp = _client(api, ready=False).get("/readyz")
    assert resp.status_code == 503
    assert resp.json() == {"ready": False}


def test_send_creates_thread_and_returns_last_assistant():
    api = FakeAgentsAPI(run_statuses=["in_progress", "completed"])
    client = _client(api)

    resp = client.post("/agent/send", json={"agentType": "summary", "message": " hello "})

    assert resp.status_code == 200
    data = resp.json()
    assert data["threadId"] == "thread_1"
    assert data["runId"] == "run_1"
    assert data["status"] == "completed"
    assert data["lastAssistant"]["role"] == "assistant"
    assert api.appended == [("thread_1", "user", "hello")]
    assert api.runs_created == [("thread_1", "asst_summary")]


def test_send_continues_existing_thread():
    api = FakeAgentsAPI(messages={"thread_9": []})
    client = _client(api)

    resp = client.post(
        "/agent/send",
        json={"agentType": "route", "threadId": "thread_9", "message": "next"},
    )

    assert resp.status_code == 200
    assert resp.json()["threadId"] == "thread_9"
    assert api.calls["create_thread"] == 0
    assert api.runs_created == [("thread_9", "asst_route")]


def test_send_rejects_unknown_agent_type():
    api = FakeAgentsAPI()
    resp = _client(api).post("/agent/send", json={"agentType": "chat", "message": "hi"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "bad_request"
    assert "agentType" in body["message"]
    assert all(count == 0 for count in api.calls.values())


def test_send_rejects_blank_message_before_remote_calls():
    api = FakeAgentsAPI()
    resp = _client(api).post("/agent/send", json={"agentType": "params", "message": "  "})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Message required"
    assert all(count == 0 for count in api.calls.values())


def test_send_rejects_malformed_body_with_400():
    api = FakeAgentsAPI()
    resp = _client(api).post("/agent/send", json={"agentType": "params", "message": ["x"]})

    assert resp.status_code == 400
    assert resp.json()["error"] == "bad_request"


def test_send_returns_503_when_not_ready():
    api = FakeAgentsAPI()
    resp = _client(api, ready=False).post(
        "/agent/send", json={"agentType": "params", "message": "hi"}
    )

    assert resp.status_code == 503
    assert resp.json()["error"] == "service_unavailable"


def test_send_surfaces_failed_run_as_500():
    api = FakeAgentsAPI(run_statuses=["failed"], last_error={"message": "quota exceeded"})
    resp = _client(api).post("/agent/send", json={"agentType": "params", "message": "hi"})

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "internal_error"
    assert "quota exceeded" in body["message"]


def test_send_surfaces_remote_errors_as_500():
    class BrokenAPI(FakeAgentsAPI):
        async def create_thread(self):
            raise RemoteUnavailable("POST /threads returned 502: bad gateway", status_code=502)

    resp = _client(BrokenAPI()).post(
        "/agent/send", json={"agentType": "params", "message": "hi"}
    )

    assert resp.status_code == 500
    assert "bad gateway" in resp.json()["message"]


def test_messages_merges_two_threads_in_time_order():
    api = FakeAgentsAPI(
        messages={
            "A": [
                {"id": "a1", "role": "user", "created_at": 1, "thread_id": "A"},
                {"id": "a2", "role": "assistant", "created_at": 4, "thread_id": "A"},
            ],
            "B": [
                {"id": "b1", "role": "user", "createdAt": "1970-01-01T00:00:02Z", "thread_id": "B"},
                {"id": "b2", "role": "assistant", "created_at": 3, "thread_id": "B"},
            ],
        }
    )
    client = _client(api)

    resp = client.post("/agent/messages", json={"threadAId": "A", "threadBId": "B"})
    assert resp.status_code == 200
    assert [m["id"] for m in resp.json()["messages"]] == ["a1", "b1", "b2", "a2"]

    limited = client.post(
        "/agent/messages", json={"threadAId": "A", "threadBId": "B", "limit": 1}
    )
    assert [m["id"] for m in limited.json()["messages"]] == ["a2"]


def test_messages_with_single_thread():
    api = FakeAgentsAPI(messages={"B": [{"id": "b1", "created_at": 1}]})
    resp = _client(api).post("/agent/messages", json={"threadBId": "B"})

    assert resp.status_code == 200
    assert resp.json()["messages"] == [{"id": "b1", "created_at": 1}]
    assert api.calls["list_messages"] == 1


def test_messages_requires_a_thread_id():
    api = FakeAgentsAPI()
    resp = _client(api).post("/agent/messages", json={"limit": 5})

    assert resp.status_code == 400
    assert api.calls["list_messages"] == 0


@pytest.mark.asyncio
async def test_history_fetch_failure_cancels_the_other_thread():
    class HalfBrokenAPI(FakeAgentsAPI):
        def __init__(self):
            super().__init__()
            self.cancelled = []

        async def list_messages(self, thread_id, order="asc"):
            if thread_id == "A":
                raise RemoteUnavailable("GET messages returned 404", status_code=404)
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled.append(thread_id)
                raise
            return []

    api = HalfBrokenAPI()
    svc = make_context(api).agents[AgentType.PARAMS]

    with pytest.raises(RemoteUnavailable):
        await _fetch_histories(svc, ["A", "B"])
    await asyncio.sleep(0)

    assert api.cancelled == ["B"]
