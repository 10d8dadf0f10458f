# policyflow/core/config.py

from __future__ import annotations

import os

from pydantic import BaseModel


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class AgentConfig(BaseModel):
    """Agent endpoint and the opaque ids that route requests to each agent."""
    url: str = ""
    user_id: str = "policyflow-user"
    timeout_s: float = 120.0
    interview_id: str = "68f3a1c2e5b7d90a1f2c3b41"
    compliance_research_id: str = "68f3a1c2e5b7d90a1f2c3b42"
    drafting_coordinator_id: str = "68f3a1c2e5b7d90a1f2c3b43"
    finalization_id: str = "68f3a1c2e5b7d90a1f2c3b44"
    upstream_url: str = ""
    upstream_api_key: str = ""

    @property
    def mock_mode(self) -> bool:
        return not self.url.strip()


class OrganizationConfig(BaseModel):
    """Placeholder organization metadata sent along with the final draft."""
    name: str = "Acme Corporation"
    industry: str = "Technology"
    size: str = "250-500 employees"
    headquarters: str = "San Francisco, California"


class WizardConfig(BaseModel):
    draft_progress_threshold: int = 80
    default_progress: int = 50
    max_sessions: int = 500


class PolicyFlowConfig(BaseModel):
    agent: AgentConfig = AgentConfig()
    organization: OrganizationConfig = OrganizationConfig()
    wizard: WizardConfig = WizardConfig()
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "PolicyFlowConfig":
        """Loads configuration from environment variables."""
        defaults = AgentConfig()
        return cls(
            agent=AgentConfig(
                url=_env("POLICYFLOW_AGENT_URL", ""),
                user_id=_env("POLICYFLOW_AGENT_USER_ID", defaults.user_id),
                timeout_s=max(0.0, _env_float("POLICYFLOW_AGENT_TIMEOUT_S", defaults.timeout_s)),
                interview_id=_env("POLICYFLOW_AGENT_ID_INTERVIEW", defaults.interview_id),
                compliance_research_id=_env(
                    "POLICYFLOW_AGENT_ID_COMPLIANCE_RESEARCH", defaults.compliance_research_id
                ),
                drafting_coordinator_id=_env(
                    "POLICYFLOW_AGENT_ID_DRAFTING_COORDINATOR", defaults.drafting_coordinator_id
                ),
                finalization_id=_env("POLICYFLOW_AGENT_ID_FINALIZATION", defaults.finalization_id),
                upstream_url=_env("POLICYFLOW_AGENT_UPSTREAM_URL", ""),
                upstream_api_key=_env("POLICYFLOW_AGENT_UPSTREAM_API_KEY", ""),
            ),
            organization=OrganizationConfig(
                name=_env("POLICYFLOW_ORG_NAME", OrganizationConfig().name),
                industry=_env("POLICYFLOW_ORG_INDUSTRY", OrganizationConfig().industry),
                size=_env("POLICYFLOW_ORG_SIZE", OrganizationConfig().size),
                headquarters=_env("POLICYFLOW_ORG_HEADQUARTERS", OrganizationConfig().headquarters),
            ),
            wizard=WizardConfig(
                draft_progress_threshold=_env_int("POLICYFLOW_DRAFT_PROGRESS_THRESHOLD", 80),
                default_progress=_env_int("POLICYFLOW_DEFAULT_PROGRESS", 50),
                max_sessions=max(1, _env_int("POLICYFLOW_MAX_SESSIONS", 500)),
            ),
            api_host=_env("POLICYFLOW_API_HOST", "0.0.0.0"),
            api_port=_env_int("POLICYFLOW_API_PORT", 8000),
            debug=_env("POLICYFLOW_DEBUG", "false").lower() == "true",
            log_level=_env("POLICYFLOW_LOG_LEVEL", "info").strip().lower(),
        )


config = PolicyFlowConfig.from_env()
