"""
Client-credentials access tokens for the remote agent and parameter APIs.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

import httpx

from .agents.exceptions import AuthFailure
from .freshness_cache import FreshnessCache
from .logging_config import logger

TOKEN_REFRESH_MARGIN_SECONDS = 60
DEFAULT_TOKEN_TTL_SECONDS = 3600
DEFAULT_AUTHORITY_HOST = "https://login.microsoftonline.com"


@dataclass(frozen=True)
class AuthConfig:
    tenant_id: str
    client_id: str
    client_secret: str
    scope: Optional[str] = None
    authority_host: str = DEFAULT_AUTHORITY_HOST

    @property
    def resolved_scope(self) -> str:
        return self.scope or f"{self.client_id}/.default"

    @property
    def token_endpoint(self) -> str:
        host = self.authority_host.rstrip("/")
        return f"{host}/{self.tenant_id}/oauth2/v2.0/token"


@dataclass(frozen=True)
class AccessToken:
    access_token: str
    expires_at: int  # unix seconds


def _parse_expires_in(raw) -> int:
    if isinstance(raw, bool):
        return DEFAULT_TOKEN_TTL_SECONDS
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_TOKEN_TTL_SECONDS
    return value if value > 0 else DEFAULT_TOKEN_TTL_SECONDS


class CredentialProvider:
    """
    Holds one access token per instance and refreshes it through the
    identity endpoint when less than a minute of validity remains.

    `get_token()` never raises: any failure is logged and reported as None.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: AuthConfig,
        *,
        cache: Optional[FreshnessCache[str]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._config = config
        self._cache: FreshnessCache[str] = cache or FreshnessCache(clock=clock)

    @property
    def config(self) -> AuthConfig:
        return self._config

    async def _exchange(self) -> Optional[Tuple[str, int]]:
        form = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
            "scope": self._config.resolved_scope,
        }
        try:
            resp = await self._client.post(self._config.token_endpoint, data=form)
        except httpx.HTTPError as exc:
            logger.warning(
                "Token request to %s failed: %s", self._config.token_endpoint, exc
            )
            return None

        if resp.status_code >= 400:
            logger.warning(
                "Token request to %s returned %s: %s",
                self._config.token_endpoint,
                resp.status_code,
                resp.text,
            )
            return None

        try:
            payload = resp.json()
        except ValueError:
            logger.warning("Token response from %s is not JSON", self._config.token_endpoint)
            return None

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(access_token, str) or not access_token:
            logger.warning(
                "Token response from %s has no access_token", self._config.token_endpoint
            )
            return None

        return access_token, _parse_expires_in(payload.get("expires_in"))

    async def get_token(self) -> Optional[AccessToken]:
        refreshed = False

        async def _refresh() -> Optional[Tuple[str, int]]:
            nonlocal refreshed
            refreshed = True
            return await self._exchange()

        value = await self._cache.get_or_refresh(TOKEN_REFRESH_MARGIN_SECONDS, _refresh)
        entry = self._cache.current
        if value is None or entry is None:
            return None
        if refreshed:
            logger.info(
                "Fetched new access token for scope %s, expires at %s",
                self._config.resolved_scope,
                datetime.fromtimestamp(entry.expires_at, tz=timezone.utc).isoformat(),
            )
        return AccessToken(access_token=value, expires_at=entry.expires_at)

    async def auth_headers(self) -> Dict[str, str]:
        """
        Bearer header for outbound calls; raises AuthFailure when no token
        is available.
        """
        token = await self.get_token()
        if token is None:
            raise AuthFailure(
                f"Unable to obtain access token for scope {self._config.resolved_scope}"
            )
        return {"Authorization": f"Bearer {token.access_token}"}


__all__ = [
    "AccessToken",
    "AuthConfig",
    "CredentialProvider",
    "DEFAULT_TOKEN_TTL_SECONDS",
    "TOKEN_REFRESH_MARGIN_SECONDS",
]
