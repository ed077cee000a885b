"""
Startup wiring: credentials, agents client and one orchestrator per role.

Any failure here propagates and aborts application startup.
"""

from __future__ import annotations

import asyncio

import httpx

from .agents.client import AgentsClient
from .agents.exceptions import AgentGatewayError
from .agents.orchestrator import RunOrchestrator
from .context import AppContext
from .credentials import AuthConfig, CredentialProvider
from .logging_config import logger
from .models import AgentType
from .settings import Settings


class BootstrapError(AgentGatewayError):
    """Raised when required configuration is missing at startup."""


def build_context(client: httpx.AsyncClient, settings: Settings) -> AppContext:
    """
    Construct the service graph without contacting any remote service.
    """
    missing = settings.missing_bootstrap_fields()
    if missing:
        raise BootstrapError(f"Missing env: {', '.join(missing)}")

    agents_credentials = CredentialProvider(
        client,
        AuthConfig(
            tenant_id=settings.tenant_id,
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            scope=settings.agents_token_scope,
            authority_host=settings.authority_host,
        ),
    )
    params_credentials = CredentialProvider(
        client,
        AuthConfig(
            tenant_id=settings.tenant_id,
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            authority_host=settings.authority_host,
        ),
    )
    api = AgentsClient(
        client,
        base_url=settings.project_url,
        credentials=agents_credentials,
        api_version=settings.agents_api_version,
    )

    agent_ids = {
        AgentType.PARAMS: settings.params_agent_id,
        AgentType.SUMMARY: settings.summary_agent_id,
        AgentType.ROUTE: settings.routing_agent_id,
    }
    agents = {
        agent_type: RunOrchestrator(
            api,
            agent_id,
            poll_interval_ms=settings.agent_poll_interval_ms,
            timeout_ms=settings.agent_run_timeout_ms,
        )
        for agent_type, agent_id in agent_ids.items()
    }
    return AppContext(ready=False, agents=agents, params_credentials=params_credentials)


async def bootstrap(ctx: AppContext) -> AppContext:
    """
    Verify every configured agent concurrently, then mark the context ready.
    """
    agent_types = list(ctx.agents)
    infos = await asyncio.gather(
        *(ctx.agents[t].ensure_agent_ready() for t in agent_types)
    )
    for agent_type, info in zip(agent_types, infos):
        logger.info("[bootstrap] %s agent ready: %s (%s)", agent_type.value, info.name, info.id)

    ctx.ready = True
    logger.info("[bootstrap] done")
    return ctx


__all__ = ["BootstrapError", "bootstrap", "build_context"]
