"""
Agent gateway package.

This package contains:
- settings: configuration loaded from the environment / .env
- logging_config: shared logging setup
- freshness_cache / credentials: cached client-credentials tokens
- agents: remote agents client, run orchestration and message reconciliation
- params: search-context parameter catalogue
- routes: FastAPI app factory and HTTP endpoints
"""
