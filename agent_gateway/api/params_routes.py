from __future__ import annotations

from typing import List

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..agents.exceptions import AgentGatewayError, NotReady
from ..context import AppContext
from ..deps import get_app_context, get_http_client
from ..errors import from_exception
from ..params import SearchContextItem, fetch_search_context
from ..settings import settings


router = APIRouter(prefix="/params", tags=["params"])


class SearchContextResponse(BaseModel):
    items: List[SearchContextItem] = Field(default_factory=list)


@router.get(
    "/search-context",
    response_model=SearchContextResponse,
    response_model_by_alias=True,
)
async def get_search_context(
    ctx: AppContext = Depends(get_app_context),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> SearchContextResponse:
    try:
        if ctx.params_credentials is None:
            raise NotReady("Parameter credentials not configured")
        items = await fetch_search_context(
            client, ctx.params_credentials, settings.params_search_context_url
        )
    except AgentGatewayError as exc:
        raise from_exception(exc) from exc
    return SearchContextResponse(items=items)


__all__ = ["router"]
