# policyflow/agent/mock.py

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Tuple

from policyflow.agent.client import AgentBackend, AgentCallError, AgentRole
from policyflow.core.models import Sender
from policyflow.core.samples import SAMPLE_COMPLIANCE, SAMPLE_CONTENT, SAMPLE_CONVERSATION, SAMPLE_DRAFT

logger = logging.getLogger(__name__)

PROGRESS_START = 50
PROGRESS_STEP = 15

# (gathered field the previous question asked about, next question)
INTERVIEW_SCRIPT: List[Tuple[str, str]] = [
    (
        "specific_requirements",
        "Thank you for that information. Now, let me ask about work hours and flexibility requirements. "
        "What type of work hour arrangement would you like this policy to support?",
    ),
    (
        "work_hours",
        "Got it. What equipment or stipends will the company provide to employees working under this policy?",
    ),
    (
        "equipment",
        "Which jurisdictions are your affected employees located in? This drives the compliance research.",
    ),
    (
        "jurisdiction",
        "When should this policy take effect?",
    ),
    (
        "effective_date",
        "I have what I need for a first draft. Add anything else you want covered, or click Generate Draft.",
    ),
]
CLOSING_REPLY = "Noted. Click Generate Draft whenever you are ready to review the policy."


def _seed_user_turns() -> int:
    return sum(1 for message in SAMPLE_CONVERSATION if message.sender == Sender.USER)


class MockAgent(AgentBackend):
    """Scripted stand-in for the remote agents; used when no agent URL is configured."""
    mode = "mock"

    def __init__(self, organization_name: str = "Human Resources Department") -> None:
        self.organization_name = organization_name
        self.calls: List[Dict[str, Any]] = []

    def call(self, role: AgentRole, payload: Dict[str, Any], *, session_id: str) -> Any:
        self.calls.append({"role": role, "payload": payload, "session_id": session_id})
        logger.info("Mock agent answering (role=%s session=%s)", role.value, session_id)
        if role == AgentRole.INTERVIEW:
            return self._interview(payload)
        if role == AgentRole.COMPLIANCE_RESEARCH:
            return {"compliance_highlights": [item.model_dump(mode="json") for item in SAMPLE_COMPLIANCE]}
        if role == AgentRole.DRAFTING_COORDINATOR:
            return self._draft(payload)
        if role == AgentRole.FINALIZATION:
            return self._finalize(payload)
        raise AgentCallError(f"Unsupported agent role: {role}")

    def _interview(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        history = payload.get("conversation_history")
        history = history if isinstance(history, list) else []
        user_turns = sum(1 for item in history if isinstance(item, dict) and item.get("sender") == Sender.USER.value)
        # history excludes the message being answered
        step = max(0, user_turns - _seed_user_turns())
        message = str(payload.get("message") or "").strip()

        if step < len(INTERVIEW_SCRIPT):
            field, question = INTERVIEW_SCRIPT[step]
        else:
            field, question = "other_details", CLOSING_REPLY

        return {
            "response": question,
            "gathered_information": {field: message} if message else {},
            "progress": min(PROGRESS_START + PROGRESS_STEP * (step + 1), 100),
        }

    def _draft(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        requirements = payload.get("requirements")
        requirements = requirements if isinstance(requirements, dict) else {}
        policy_type = str(payload.get("policy_type") or requirements.get("policy_type") or "").strip()
        title = f"{policy_type} Policy" if policy_type else SAMPLE_DRAFT.title
        content = SAMPLE_CONTENT
        if policy_type:
            content = content.replace("REMOTE WORK POLICY", title.upper(), 1)
        return {
            "policy_draft": {
                "title": title,
                "content": content,
                "sections": list(SAMPLE_DRAFT.sections),
            },
            "compliance_highlights": [item.model_dump(mode="json") for item in SAMPLE_COMPLIANCE],
        }

    def _finalize(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        draft = payload.get("draft")
        draft = draft if isinstance(draft, dict) else {}
        organization = payload.get("organization")
        organization = organization if isinstance(organization, dict) else {}
        org_name = str(organization.get("name") or self.organization_name)
        content = str(draft.get("content") or "").rstrip()
        footer = f"Issued by {org_name} on {date.today().isoformat()}."
        return {
            "final_policy": {
                "title": str(draft.get("title") or SAMPLE_DRAFT.title),
                "content": f"{content}\n\n{footer}" if content else footer,
            }
        }
