# policyflow/core/models.py

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class Screen(str, Enum):
    DASHBOARD = "dashboard"
    INTERVIEW = "interview"
    DRAFT_REVIEW = "draft-review"
    FINAL_POLICY = "final-policy"
    POLICIES = "policies"
    LIBRARY = "library"
    SETTINGS = "settings"


SIDEBAR_SCREENS = (Screen.DASHBOARD, Screen.POLICIES, Screen.LIBRARY, Screen.SETTINGS)

SCREEN_TITLES: Dict[Screen, str] = {
    Screen.DASHBOARD: "Dashboard",
    Screen.INTERVIEW: "Policy Interview",
    Screen.DRAFT_REVIEW: "Draft Review & Approval",
    Screen.FINAL_POLICY: "Final Policy",
    Screen.POLICIES: "Active Policies",
    Screen.LIBRARY: "Policy Library",
    Screen.SETTINGS: "Settings",
}


class PolicyStatus(str, Enum):
    INTERVIEWING = "interviewing"
    DRAFTING = "drafting"
    REVIEWING = "reviewing"
    COMPLETED = "completed"


class Sender(str, Enum):
    USER = "user"
    AGENT = "agent"


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    NEEDS_REVIEW = "needs-review"
    NON_COMPLIANT = "non-compliant"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FlowStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    SUCCESS = "success"
    ERROR = "error"


class PolicySession(BaseModel):
    id: str
    type: str
    status: PolicyStatus
    last_updated: str
    title: str


class ConversationMessage(BaseModel):
    id: str
    sender: Sender
    content: str
    timestamp: str


class GatheredInfo(BaseModel):
    policy_type: Optional[str] = None
    departments: Optional[str] = None
    employee_levels: Optional[str] = None
    jurisdiction: Optional[str] = None
    effective_date: Optional[str] = None
    specific_requirements: Optional[str] = None
    work_hours: Optional[str] = None
    equipment: Optional[str] = None
    other_details: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    def merged(self, update: Dict[str, str]) -> "GatheredInfo":
        """Returns a copy with non-empty values from ``update`` laid over the current fields."""
        patch = {
            key: value
            for key, value in update.items()
            if key in type(self).model_fields and isinstance(value, str) and value.strip()
        }
        return self.model_copy(update=patch)

    def filled(self) -> Dict[str, str]:
        return {key: value for key, value in self.model_dump().items() if value}


class ComplianceItem(BaseModel):
    regulation: str
    requirement: str
    jurisdiction: str
    status: ComplianceStatus
    risk_level: RiskLevel


class DraftMetadata(BaseModel):
    effective_date: str
    departments: str
    status: str


class PolicyDraft(BaseModel):
    title: str
    type: str
    content: str
    sections: List[str] = []
    metadata: DraftMetadata
    compliance: List[ComplianceItem] = []
    word_count: int = 0

    def agent_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


def count_words(text: str) -> int:
    return len(str(text or "").split())
