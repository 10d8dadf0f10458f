# policyflow/api/public_views.py

from __future__ import annotations

from typing import Any, Dict, Optional

from policyflow.core.models import ComplianceStatus, PolicyDraft
from policyflow.wizard.final import FinalPolicyFlow
from policyflow.wizard.interview import InterviewFlow
from policyflow.wizard.review import DraftReviewFlow
from policyflow.wizard.session import WizardSession


def compliance_summary(draft: PolicyDraft) -> Dict[str, int]:
    summary = {status.value: 0 for status in ComplianceStatus}
    for item in draft.compliance:
        summary[item.status.value] += 1
    summary["total"] = len(draft.compliance)
    return summary


def public_draft_payload(draft: Optional[PolicyDraft]) -> Optional[Dict[str, Any]]:
    if draft is None:
        return None
    payload = draft.model_dump(mode="json")
    payload["compliance_summary"] = compliance_summary(draft)
    return payload


def public_interview_payload(flow: Optional[InterviewFlow]) -> Optional[Dict[str, Any]]:
    if flow is None:
        return None
    return {
        "messages": [message.model_dump(mode="json") for message in flow.messages],
        "gathered_information": flow.gathered.filled(),
        "progress": flow.progress,
        "questions_remaining": flow.questions_remaining,
        "loading": flow.loading,
        "can_generate_draft": flow.can_generate_draft,
        "error": flow.error,
    }


def public_review_payload(flow: Optional[DraftReviewFlow]) -> Optional[Dict[str, Any]]:
    if flow is None:
        return None
    return {
        "status": flow.status.value,
        "error": flow.error,
        "draft": public_draft_payload(flow.draft),
        "edit_mode": flow.edit_mode,
        "edited_content": flow.edited_content,
    }


def public_final_payload(flow: Optional[FinalPolicyFlow]) -> Optional[Dict[str, Any]]:
    if flow is None:
        return None
    return {
        "status": flow.status.value,
        "error": flow.error,
        "draft": public_draft_payload(flow.draft),
        "document_id": flow.document_id,
        "version": flow.version,
        "generated_on": flow.generated_on,
    }


def public_session_payload(session: WizardSession) -> Dict[str, Any]:
    with session.lock:
        return {
            "session_id": session.id,
            "screen": session.screen.value,
            "header_title": session.header_title,
            "sidebar_open": session.sidebar_open,
            "gathered_information": session.gathered.filled(),
            "draft": public_draft_payload(session.draft),
            "final_draft": public_draft_payload(session.final_draft),
            "interview": public_interview_payload(session.interview),
            "review": public_review_payload(session.review),
            "final": public_final_payload(session.final),
        }
