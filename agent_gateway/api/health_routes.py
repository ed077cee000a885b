from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..context import AppContext
from ..deps import get_app_context


router = APIRouter(tags=["health"])


class PingResponse(BaseModel):
    message: str = "Agent gateway OK"
    ts: str


class ReadyResponse(BaseModel):
    ready: bool


@router.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    """
    Liveness probe; always 200.
    """
    return PingResponse(ts=datetime.now(timezone.utc).isoformat())


@router.get("/readyz", response_model=ReadyResponse)
async def readyz(ctx: AppContext = Depends(get_app_context)) -> JSONResponse:
    ready = ctx.is_ready()
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ReadyResponse(ready=ready).model_dump(),
    )


__all__ = ["router"]
