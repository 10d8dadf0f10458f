# policyflow/agent/factory.py

from __future__ import annotations

from policyflow.agent.client import AgentBackend, HttpAgentClient
from policyflow.agent.mock import MockAgent
from policyflow.core.config import PolicyFlowConfig


def create_agent_from_config(cfg: PolicyFlowConfig) -> AgentBackend:
    """HTTP client when an agent URL is configured, otherwise the scripted mock."""
    if cfg.agent.mock_mode:
        return MockAgent(organization_name=cfg.organization.name)
    return HttpAgentClient(cfg.agent)
