# policyflow/agent/parsing.py

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from policyflow.agent.client import decode_agent_response
from policyflow.core.models import ComplianceItem, ComplianceStatus, GatheredInfo, RiskLevel

DEFAULT_AGENT_REPLY = "Thanks, I've noted that. Is there anything else this policy should cover?"

REPLY_TEXT_KEYS = ("response", "message", "question", "next_question", "reply", "text")
PROGRESS_KEYS = ("progress", "interview_progress", "completion_percentage")
GATHERED_KEYS = ("gathered_information", "gathered_info", "gatheredInformation", "gatheredInfo")
DRAFT_KEYS = ("policy_draft", "policyDraft", "draft")
COMPLIANCE_KEYS = ("compliance_highlights", "complianceHighlights", "compliance", "compliance_items")
FINAL_KEYS = ("final_policy", "finalPolicy", "formatted_policy", "formattedPolicy", "policy")

STATUS_ALIASES = {
    "compliant": ComplianceStatus.COMPLIANT,
    "pass": ComplianceStatus.COMPLIANT,
    "passed": ComplianceStatus.COMPLIANT,
    "needs-review": ComplianceStatus.NEEDS_REVIEW,
    "review": ComplianceStatus.NEEDS_REVIEW,
    "non-compliant": ComplianceStatus.NON_COMPLIANT,
    "noncompliant": ComplianceStatus.NON_COMPLIANT,
    "fail": ComplianceStatus.NON_COMPLIANT,
}
RISK_ALIASES = {
    "low": RiskLevel.LOW,
    "medium": RiskLevel.MEDIUM,
    "moderate": RiskLevel.MEDIUM,
    "high": RiskLevel.HIGH,
    "critical": RiskLevel.HIGH,
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class InterviewReply(BaseModel):
    text: str
    gathered: Dict[str, str] = {}
    progress: int


class DraftUpdate(BaseModel):
    content: str
    title: Optional[str] = None
    sections: Optional[List[str]] = None
    compliance: Optional[List[ComplianceItem]] = None


class FinalUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None

    @property
    def empty(self) -> bool:
        return self.title is None and self.content is None


def snake_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", str(key).strip()).lower().replace("-", "_").replace(" ", "_")


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first_text(payload: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        text = _text(payload.get(key))
        if text is not None:
            return text
    return None


def _first_present(payload: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _unwrap(raw: Any) -> Any:
    """Accepts ``{"response": {...}}`` wrappers and JSON strings one level deep."""
    value = decode_agent_response(raw)
    if isinstance(value, dict):
        inner = decode_agent_response(value.get("response"))
        if isinstance(inner, dict):
            return inner
    return value


def parse_progress(value: Any, default: int = 50) -> int:
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(str(value).strip().rstrip("%"))
    except ValueError:
        return default
    if math.isnan(number):
        return default
    return int(round(min(100.0, max(0.0, number))))


def parse_gathered_information(value: Any) -> Dict[str, str]:
    value = decode_agent_response(value)
    if not isinstance(value, dict):
        return {}
    fields = GatheredInfo.model_fields
    gathered: Dict[str, str] = {}
    for raw_key, raw_value in value.items():
        key = snake_key(raw_key)
        if key not in fields:
            continue
        if isinstance(raw_value, (list, tuple)):
            raw_value = ", ".join(str(item).strip() for item in raw_value if str(item).strip())
        elif isinstance(raw_value, (int, float)) and not isinstance(raw_value, bool):
            raw_value = str(raw_value)
        text = _text(raw_value)
        if text is not None:
            gathered[key] = text.strip()
    return gathered


def parse_interview_reply(raw: Any, *, default_progress: int = 50) -> InterviewReply:
    payload = _unwrap(raw)
    if isinstance(payload, str):
        return InterviewReply(text=payload.strip() or DEFAULT_AGENT_REPLY, progress=default_progress)
    if not isinstance(payload, dict):
        return InterviewReply(text=DEFAULT_AGENT_REPLY, progress=default_progress)

    return InterviewReply(
        text=_first_text(payload, REPLY_TEXT_KEYS) or DEFAULT_AGENT_REPLY,
        gathered=parse_gathered_information(_first_present(payload, GATHERED_KEYS)),
        progress=parse_progress(_first_present(payload, PROGRESS_KEYS), default=default_progress),
    )


def _normalize_status(value: Any) -> ComplianceStatus:
    token = re.sub(r"[\s_]+", "-", str(value or "").strip().lower())
    return STATUS_ALIASES.get(token, ComplianceStatus.NEEDS_REVIEW)


def _normalize_risk(value: Any) -> RiskLevel:
    token = str(value or "").strip().lower().replace(" risk", "")
    return RISK_ALIASES.get(token, RiskLevel.MEDIUM)


def parse_compliance_items(value: Any) -> Optional[List[ComplianceItem]]:
    """Returns None when the agent sent no list at all, so callers can keep what they have."""
    value = decode_agent_response(value)
    if not isinstance(value, list):
        return None
    items: List[ComplianceItem] = []
    for row in value:
        if not isinstance(row, dict):
            continue
        normalized = {snake_key(k): v for k, v in row.items()}
        regulation = _text(normalized.get("regulation")) or _text(normalized.get("name"))
        requirement = _text(normalized.get("requirement")) or _text(normalized.get("description"))
        if regulation is None and requirement is None:
            continue
        items.append(
            ComplianceItem(
                regulation=(regulation or "Unspecified regulation").strip(),
                requirement=(requirement or "").strip(),
                jurisdiction=(_text(normalized.get("jurisdiction")) or "Unspecified").strip(),
                status=_normalize_status(normalized.get("status")),
                risk_level=_normalize_risk(normalized.get("risk_level") or normalized.get("risk")),
            )
        )
    return items


def parse_draft_reply(raw: Any) -> Optional[DraftUpdate]:
    """Returns None unless the coordinator sent a draft object with text content."""
    payload = _unwrap(raw)
    if not isinstance(payload, dict):
        return None
    draft = decode_agent_response(_first_present(payload, DRAFT_KEYS))
    if not isinstance(draft, dict):
        return None
    content = _text(draft.get("content"))
    if content is None:
        return None

    sections = draft.get("sections")
    section_names: Optional[List[str]] = None
    if isinstance(sections, list):
        section_names = [name.strip() for name in sections if _text(name)]

    compliance = _first_present(payload, COMPLIANCE_KEYS)
    if compliance is None:
        compliance = _first_present(draft, COMPLIANCE_KEYS)

    return DraftUpdate(
        content=content,
        title=_text(draft.get("title")),
        sections=section_names,
        compliance=parse_compliance_items(compliance),
    )


def parse_final_reply(raw: Any) -> FinalUpdate:
    payload = _unwrap(raw)
    if isinstance(payload, str):
        return FinalUpdate(content=_text(payload))
    if not isinstance(payload, dict):
        return FinalUpdate()
    document = decode_agent_response(_first_present(payload, FINAL_KEYS))
    if isinstance(document, str):
        return FinalUpdate(title=_text(payload.get("title")), content=_text(document))
    source = document if isinstance(document, dict) else payload
    return FinalUpdate(title=_text(source.get("title")), content=_text(source.get("content")))
