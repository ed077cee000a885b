"""
HTTP client for the remote thread-based agents API.

Every call carries a bearer token from the credential provider and the
configured `api-version`. Transport errors and non-2xx answers surface as
RemoteUnavailable; nothing is retried here.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx

from ..credentials import CredentialProvider
from ..logging_config import logger
from ..models import AgentInfo, ConversationThread, Run
from .exceptions import RemoteUnavailable


def _extract_text(content: Any) -> Optional[str]:
    """
    Return the value of the first `text` part of a message's content list.
    """
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return None
    for part in content:
        if not isinstance(part, dict) or part.get("type") != "text":
            continue
        text = part.get("text")
        if isinstance(text, dict):
            value = text.get("value")
            return value if isinstance(value, str) else None
        if isinstance(text, str):
            return text
    return None


def project_message(raw: Dict[str, Any], thread_id: str) -> Dict[str, Any]:
    """
    Flatten a remote message object into the plain shape handed to callers.
    """
    return {
        "id": raw.get("id"),
        "role": raw.get("role"),
        "text": _extract_text(raw.get("content")),
        "created_at": raw.get("created_at"),
        "thread_id": raw.get("thread_id") or thread_id,
    }


class AgentsClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        credentials: CredentialProvider,
        api_version: str = "v1",
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._api_version = api_version

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = await self._credentials.auth_headers()
        headers["Accept"] = "application/json"
        query: Dict[str, Any] = {"api-version": self._api_version}
        if params:
            query.update(params)
        url = f"{self._base_url}{path}"

        try:
            resp = await self._client.request(
                method, url, headers=headers, params=query, json=json_body
            )
        except httpx.HTTPError as exc:
            logger.warning("Agents API %s %s failed: %s", method, path, exc)
            raise RemoteUnavailable(f"{method} {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            text = resp.text
            logger.warning(
                "Agents API %s %s returned %s: %s", method, path, resp.status_code, text
            )
            raise RemoteUnavailable(
                f"{method} {path} returned {resp.status_code}: {text}",
                status_code=resp.status_code,
                body=text,
            )

        try:
            data = resp.json()
        except json.JSONDecodeError as exc:
            raise RemoteUnavailable(
                f"{method} {path} returned a non-JSON body",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc
        if not isinstance(data, dict):
            raise RemoteUnavailable(
                f"{method} {path} returned an unexpected payload",
                status_code=resp.status_code,
                body=resp.text,
            )
        return data

    async def get_agent(self, agent_id: str) -> AgentInfo:
        data = await self._request("GET", f"/assistants/{agent_id}")
        return AgentInfo(id=data.get("id") or agent_id, name=data.get("name"))

    async def create_thread(self) -> ConversationThread:
        data = await self._request("POST", "/threads", json_body={})
        return ConversationThread(id=data["id"])

    async def append_message(self, thread_id: str, role: str, text: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/threads/{thread_id}/messages",
            json_body={"role": role, "content": text},
        )

    async def create_run(self, thread_id: str, agent_id: str) -> Run:
        data = await self._request(
            "POST",
            f"/threads/{thread_id}/runs",
            json_body={"assistant_id": agent_id},
        )
        return Run(id=data["id"], status=data.get("status") or "queued")

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        data = await self._request("GET", f"/threads/{thread_id}/runs/{run_id}")
        return Run(
            id=data.get("id") or run_id,
            status=data.get("status") or "",
            last_error=data.get("last_error"),
        )

    async def list_messages(
        self, thread_id: str, order: str = "asc", page_size: int = 100
    ) -> List[Dict[str, Any]]:
        """
        Return every message of a thread, following `has_more` pagination.
        """
        out: List[Dict[str, Any]] = []
        after: Optional[str] = None
        while True:
            params: Dict[str, Any] = {"order": order, "limit": page_size}
            if after:
                params["after"] = after
            page = await self._request(
                "GET", f"/threads/{thread_id}/messages", params=params
            )
            items = page.get("data") or []
            out.extend(project_message(m, thread_id) for m in items if isinstance(m, dict))

            after = page.get("last_id")
            if not page.get("has_more") or not after or not items:
                break
        return out


__all__ = ["AgentsClient", "project_message"]
