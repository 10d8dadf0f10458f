# policyflow/agent/client.py

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from policyflow.core.config import AgentConfig

logger = logging.getLogger(__name__)

GENERIC_AGENT_ERROR = "Failed to get a response from the agent"


class AgentRole(str, Enum):
    INTERVIEW = "interview"
    COMPLIANCE_RESEARCH = "compliance_research"
    DRAFTING_COORDINATOR = "drafting_coordinator"
    FINALIZATION = "finalization"


class AgentCallError(RuntimeError):
    """Any failed agent call: transport error, non-2xx, bad envelope or ``success: false``."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message or GENERIC_AGENT_ERROR)
        self.status_code = status_code


def agent_ids(agent_config: AgentConfig) -> Dict[AgentRole, str]:
    return {
        AgentRole.INTERVIEW: agent_config.interview_id,
        AgentRole.COMPLIANCE_RESEARCH: agent_config.compliance_research_id,
        AgentRole.DRAFTING_COORDINATOR: agent_config.drafting_coordinator_id,
        AgentRole.FINALIZATION: agent_config.finalization_id,
    }


def role_for_agent_id(agent_config: AgentConfig, agent_id: str) -> Optional[AgentRole]:
    token = str(agent_id or "").strip()
    for role, configured_id in agent_ids(agent_config).items():
        if token and token == configured_id:
            return role
    return None


def build_agent_envelope(
    *,
    agent_id: str,
    user_id: str,
    session_id: str,
    payload: Dict[str, Any],
) -> Dict[str, str]:
    return {
        "message": json.dumps(payload, ensure_ascii=False),
        "agent_id": agent_id,
        "user_id": user_id,
        "session_id": session_id,
    }


def decode_agent_response(value: Any) -> Any:
    """Agents answer with plain text or with JSON serialized into a string."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text or text[0] not in "{[":
        return value
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return value


def _error_from_body(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        error = body.get("error") or body.get("detail")
        if error:
            return str(error)
    return None


class AgentBackend(ABC):
    """Something that can answer an agent request for a role."""
    mode: str

    @abstractmethod
    def call(self, role: AgentRole, payload: Dict[str, Any], *, session_id: str) -> Any:
        """Return the decoded ``response`` value or raise AgentCallError."""
        ...


class HttpAgentClient(AgentBackend):
    mode = "http"

    def __init__(self, agent_config: AgentConfig, *, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.url = agent_config.url.strip()
        self.user_id = agent_config.user_id
        self.agent_ids = agent_ids(agent_config)
        timeout = agent_config.timeout_s if agent_config.timeout_s > 0 else None
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "User-Agent": "PolicyFlow-Agent/1.0"},
        )

    def close(self) -> None:
        self._client.close()

    def call(self, role: AgentRole, payload: Dict[str, Any], *, session_id: str) -> Any:
        envelope = build_agent_envelope(
            agent_id=self.agent_ids[role],
            user_id=self.user_id,
            session_id=session_id,
            payload=payload,
        )
        try:
            response = self._client.post(self.url, json=envelope)
        except httpx.RequestError as exc:
            logger.warning("Agent request failed (role=%s session=%s): %s", role.value, session_id, exc)
            raise AgentCallError(f"Agent request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            message = _error_from_body(response) or f"Agent request failed with HTTP {response.status_code}"
            logger.warning(
                "Agent returned HTTP %s (role=%s session=%s): %s",
                response.status_code,
                role.value,
                session_id,
                message,
            )
            raise AgentCallError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise AgentCallError("Agent returned a non-JSON response", status_code=response.status_code) from exc
        if not isinstance(body, dict):
            raise AgentCallError("Agent returned an invalid response", status_code=response.status_code)
        if not body.get("success"):
            message = str(body.get("error") or GENERIC_AGENT_ERROR)
            logger.warning("Agent reported failure (role=%s session=%s): %s", role.value, session_id, message)
            raise AgentCallError(message, status_code=response.status_code)

        logger.info("Agent call succeeded (role=%s session=%s)", role.value, session_id)
        return decode_agent_response(body.get("response"))
