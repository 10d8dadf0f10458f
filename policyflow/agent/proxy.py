# policyflow/agent/proxy.py

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Tuple

import httpx

from policyflow.agent.client import GENERIC_AGENT_ERROR, AgentBackend, AgentCallError, role_for_agent_id
from policyflow.core.config import AgentConfig

logger = logging.getLogger(__name__)


def _failure(status_code: int, message: str) -> Tuple[int, Dict[str, Any]]:
    return status_code, {"success": False, "error": message}


def _serialize_response(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _forward_upstream(envelope: Dict[str, Any], agent_config: AgentConfig) -> Tuple[int, Dict[str, Any]]:
    headers = {"Content-Type": "application/json", "User-Agent": "PolicyFlow-Proxy/1.0"}
    if agent_config.upstream_api_key:
        headers["x-api-key"] = agent_config.upstream_api_key
    timeout = agent_config.timeout_s if agent_config.timeout_s > 0 else None

    try:
        response = httpx.post(agent_config.upstream_url, json=envelope, headers=headers, timeout=timeout)
    except httpx.RequestError as exc:
        logger.warning("Upstream agent unreachable (agent_id=%s): %s", envelope.get("agent_id"), exc)
        return _failure(502, f"Upstream agent request failed: {exc}")

    try:
        body = response.json()
    except ValueError:
        body = None

    if not 200 <= response.status_code < 300:
        detail = body.get("error") if isinstance(body, dict) else None
        logger.warning(
            "Upstream agent returned HTTP %s (agent_id=%s)", response.status_code, envelope.get("agent_id")
        )
        return _failure(502, str(detail or f"Upstream agent returned HTTP {response.status_code}"))

    if isinstance(body, dict):
        if body.get("success") is False:
            return _failure(502, str(body.get("error") or GENERIC_AGENT_ERROR))
        return 200, {"success": True, "response": _serialize_response(body.get("response", body))}
    if body is not None:
        return 200, {"success": True, "response": _serialize_response(body)}
    return 200, {"success": True, "response": response.text}


def _answer_from_backend(
    envelope: Dict[str, Any],
    agent_config: AgentConfig,
    backend: AgentBackend,
) -> Tuple[int, Dict[str, Any]]:
    role = role_for_agent_id(agent_config, envelope.get("agent_id", ""))
    if role is None:
        return _failure(400, f"Unknown agent_id: {envelope.get('agent_id')}")

    raw_message = envelope.get("message") or ""
    try:
        payload = json.loads(raw_message)
    except json.JSONDecodeError:
        payload = {"message": raw_message}
    if not isinstance(payload, dict):
        payload = {"message": payload}

    try:
        result = backend.call(role, payload, session_id=str(envelope.get("session_id") or ""))
    except AgentCallError as exc:
        return _failure(502, str(exc))
    return 200, {"success": True, "response": _serialize_response(result)}


def relay_agent_request(
    envelope: Dict[str, Any],
    agent_config: AgentConfig,
    fallback: AgentBackend,
) -> Tuple[int, Dict[str, Any]]:
    """Forwards the envelope upstream when one is configured, otherwise answers from ``fallback``."""
    if agent_config.upstream_url.strip():
        return _forward_upstream(envelope, agent_config)
    return _answer_from_backend(envelope, agent_config, fallback)
