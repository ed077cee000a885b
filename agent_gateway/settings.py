from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Read from OS env and optional .env file in project root.
    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Remote agents service (project endpoint + one agent per role).
    project_url: str = Field(
        "",
        alias="AZURE_AI_PROJECT_URL",
        description="Project endpoint hosting the agents/threads/runs API",
    )
    params_agent_id: str = Field("", alias="AZURE_Params_AGENT_ID")
    summary_agent_id: str = Field("", alias="AZURE_Summary_AGENT_ID")
    routing_agent_id: str = Field("", alias="AZURE_Routing_AGENT_ID")
    agents_api_version: str = Field(
        "v1",
        alias="AGENTS_API_VERSION",
        description="api-version query parameter sent with every agents call",
    )
    agents_token_scope: str = Field(
        "https://ai.azure.com/.default",
        alias="AGENTS_TOKEN_SCOPE",
        description="OAuth scope requested for the agents API token",
    )

    # Client-credentials identity.
    tenant_id: str = Field("", alias="AZURE_TENANT_ID")
    client_id: str = Field("", alias="AZURE_CLIENT_ID")
    client_secret: str = Field("", alias="AZURE_CLIENT_SECRET")
    authority_host: str = Field(
        "https://login.microsoftonline.com",
        alias="AZURE_AUTHORITY_HOST",
    )

    # Run polling.
    agent_poll_interval_ms: int = Field(1000, alias="AGENT_POLL_INTERVAL_MS", ge=1)
    agent_run_timeout_ms: int = Field(120_000, alias="AGENT_RUN_TIMEOUT_MS", ge=0)

    # HTTP timeouts
    upstream_timeout: float = Field(60.0, alias="UPSTREAM_TIMEOUT")

    # Search-context parameter catalogue.
    params_search_context_url: str = Field(
        "https://adqueryprobet.trafficmanager.net/api/v1/context/searchcontext?mode=ta",
        alias="PARAMS_SEARCH_CONTEXT_URL",
    )

    port: int = Field(8080, alias="PORT")

    cors_allow_origins: str = Field(
        "*",
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of allowed origins",
    )

    # Can be overridden via LOG_LEVEL env var, e.g. "DEBUG" while debugging.
    log_level: str = Field(
        "INFO",
        alias="LOG_LEVEL",
        description="Application log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_timezone: Optional[str] = Field(
        default=None,
        alias="LOG_TIMEZONE",
        description="Timezone name for log timestamps, e.g. 'Asia/Shanghai'. Defaults to system local time.",
    )

    def missing_bootstrap_fields(self) -> List[str]:
        """
        Return env var names required at startup that are currently empty.
        """
        required = {
            "AZURE_AI_PROJECT_URL": self.project_url,
            "AZURE_Params_AGENT_ID": self.params_agent_id,
            "AZURE_Summary_AGENT_ID": self.summary_agent_id,
            "AZURE_Routing_AGENT_ID": self.routing_agent_id,
            "AZURE_TENANT_ID": self.tenant_id,
            "AZURE_CLIENT_ID": self.client_id,
            "AZURE_CLIENT_SECRET": self.client_secret,
        }
        return [name for name, value in required.items() if not value.strip()]

    def get_cors_origins(self) -> List[str]:
        if not self.cors_allow_origins:
            return []
        return [
            item.strip()
            for item in self.cors_allow_origins.split(",")
            if item.strip()
        ]


settings = Settings()  # Reads from environment if available
