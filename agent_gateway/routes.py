import uuid
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .api.agent_routes import router as agent_router
from .api.health_routes import router as health_router
from .api.params_routes import router as params_router
from .bootstrap import bootstrap, build_context
from .context import AppContext
from .errors import ErrorResponse
from .log_sanitizer import sanitize_headers_for_log
from .logging_config import logger
from .settings import settings


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Return ErrorResponse bodies at the top level instead of under "detail".
    """
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = ErrorResponse(
            error="http_error",
            message=str(exc.detail),
            code=exc.status_code,
        ).model_dump()
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    payload = ErrorResponse(
        error="bad_request",
        message="Invalid request body",
        code=status.HTTP_400_BAD_REQUEST,
        details={"errors": jsonable_errors(exc)},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload.model_dump())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """
    Global fallback: structured 500 body plus a traceback in the log.
    """
    error_id = uuid.uuid4().hex
    logger.exception(
        "Unhandled error %s %s (error_id=%s)",
        request.method,
        request.url.path,
        error_id,
    )
    payload = ErrorResponse(
        error="internal_error",
        message=str(exc) or "Internal Server Error",
        code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        details={"error_id": error_id},
    )
    return JSONResponse(status_code=500, content=payload.model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    startup: open the shared HTTP client and, unless a context was injected,
    build the service graph and verify every agent (failure aborts startup).
    shutdown: close the HTTP client.
    """
    owns_client = app.state.http_client is None
    if owns_client:
        app.state.http_client = httpx.AsyncClient(timeout=settings.upstream_timeout)
    try:
        if app.state.run_bootstrap:
            ctx = build_context(app.state.http_client, settings)
            app.state.ctx = ctx
            try:
                await bootstrap(ctx)
            except Exception:
                logger.exception("[start] bootstrap failed")
                raise
        yield
    finally:
        if owns_client:
            await app.state.http_client.aclose()
            app.state.http_client = None


def create_app(
    ctx: Optional[AppContext] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    When `ctx` is given it is used as-is and no bootstrap runs at startup.
    """
    app = FastAPI(title="Agent Gateway", version="0.1.0", lifespan=lifespan)
    app.state.ctx = ctx or AppContext()
    app.state.run_bootstrap = ctx is None
    app.state.http_client = http_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router)
    app.include_router(agent_router)
    app.include_router(params_router)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client_host = request.client.host if request.client else "-"
        logger.info(
            "HTTP %s %s from %s, headers=%s",
            request.method,
            request.url.path,
            client_host,
            sanitize_headers_for_log(request.headers),
        )
        response = await call_next(request)
        logger.info(
            "HTTP %s %s -> %s", request.method, request.url.path, response.status_code
        )
        return response

    return app


__all__ = ["create_app", "lifespan"]
