"""
Search-context parameter catalogue.

The catalogue endpoint returns parameters grouped by context; callers only
need the flat list, so groups are unrolled in their original order.
"""

from __future__ import annotations

from typing import Any, Dict, List

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .agents.exceptions import RemoteUnavailable
from .credentials import CredentialProvider
from .logging_config import logger


class SearchContextItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    display_name: str = Field("", alias="displayName")
    parameter: str = ""
    is_post_body: bool = Field(False, alias="isPostBody")
    value: str = ""


def flatten_search_context(payload: Dict[str, Any]) -> List[SearchContextItem]:
    items: List[SearchContextItem] = []
    for group in payload.get("contextGroups") or []:
        if not isinstance(group, dict):
            continue
        for entry in group.get("searchContextGroupList") or []:
            if isinstance(entry, dict):
                items.append(SearchContextItem.model_validate(entry))
    return items


async def fetch_search_context(
    client: httpx.AsyncClient,
    credentials: CredentialProvider,
    url: str,
) -> List[SearchContextItem]:
    headers = await credentials.auth_headers()
    try:
        resp = await client.get(url, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("Search context request failed: %s", exc)
        raise RemoteUnavailable(f"GET {url} failed: {exc}") from exc

    if resp.status_code >= 400:
        logger.warning("Search context returned %s: %s", resp.status_code, resp.text)
        raise RemoteUnavailable(
            f"GET {url} returned {resp.status_code}",
            status_code=resp.status_code,
            body=resp.text,
        )
    try:
        payload = resp.json()
    except ValueError as exc:
        raise RemoteUnavailable(f"GET {url} returned a non-JSON body") from exc
    if not isinstance(payload, dict):
        raise RemoteUnavailable(f"GET {url} returned an unexpected payload")
    return flatten_search_context(payload)


__all__ = ["SearchContextItem", "fetch_search_context", "flatten_search_context"]
