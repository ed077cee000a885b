import httpx
from fastapi import Request

from .context import AppContext


def get_app_context(request: Request) -> AppContext:
    """
    FastAPI dependency returning the context built during startup.

    `create_app(ctx)` lets tests supply a context wired to fake agents.
    """
    return request.app.state.ctx


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Shared AsyncClient opened in the application lifespan.
    """
    return request.app.state.http_client
