from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .agents.exceptions import NotReady
from .agents.orchestrator import RunOrchestrator
from .credentials import CredentialProvider
from .models import AgentType


@dataclass
class AppContext:
    """
    Process-local state built by bootstrap: one orchestrator per agent type.
    """

    ready: bool = False
    agents: Dict[AgentType, RunOrchestrator] = field(default_factory=dict)
    params_credentials: Optional[CredentialProvider] = None

    def is_ready(self) -> bool:
        return self.ready and all(t in self.agents for t in AgentType)

    def require_ready(self) -> None:
        if not self.is_ready():
            raise NotReady("Agent not ready")

    def get_agent(self, agent_type: AgentType) -> RunOrchestrator:
        self.require_ready()
        return self.agents[agent_type]


__all__ = ["AppContext"]
