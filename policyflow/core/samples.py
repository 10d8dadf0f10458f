# policyflow/core/samples.py

from __future__ import annotations

from typing import Any, Dict, List

from policyflow.core.models import (
    ComplianceItem,
    ComplianceStatus,
    ConversationMessage,
    DraftMetadata,
    GatheredInfo,
    PolicyDraft,
    PolicySession,
    PolicyStatus,
    RiskLevel,
    Sender,
)

POLICY_TYPES: List[Dict[str, str]] = [
    {"name": "Remote Work Policy", "icon": "💼"},
    {"name": "PTO Policy", "icon": "🏖️"},
    {"name": "Code of Conduct", "icon": "📋"},
]

DASHBOARD_STATS: List[Dict[str, Any]] = [
    {"label": "Total Policies Created", "value": 24, "tone": "accent"},
    {"label": "Compliance Checks Passed", "value": 18, "tone": "good"},
    {"label": "Pending Reviews", "value": 2, "tone": "warn"},
]

SAMPLE_POLICIES: List[PolicySession] = [
    PolicySession(
        id="1",
        type="PTO Policy",
        status=PolicyStatus.REVIEWING,
        last_updated="2 hours ago",
        title="Paid Time Off Policy",
    ),
    PolicySession(
        id="2",
        type="Expense Policy",
        status=PolicyStatus.DRAFTING,
        last_updated="30 minutes ago",
        title="Employee Expense Reimbursement",
    ),
]

SAMPLE_CONTENT = """REMOTE WORK POLICY

1. PURPOSE
This policy establishes guidelines for remote work arrangements to ensure organizational productivity while supporting work-life balance for eligible employees.

2. SCOPE & APPLICABILITY
This policy applies to full-time employees in the Engineering and Product departments who meet eligibility requirements and have received prior approval.

3. ELIGIBILITY
- Full-time employees with minimum 6 months tenure
- Satisfactory performance review
- Roles suitable for remote work
- Manager approval required

4. GUIDELINES & REQUIREMENTS
Work Hours: Flexible hours with core collaboration time 10 AM - 3 PM
Communication: Daily standups and responsive communication expected
Equipment: Company-provided laptop and peripherals
Data Security: All work conducted with VPN and encrypted connections
Work Location: Must be professional, quiet environment

5. COMPLIANCE
This policy complies with California Labor Code §512, FLSA overtime requirements, and industry best practices for remote work arrangements.

EFFECTIVE DATE: January 1, 2025
APPROVED BY: Human Resources Department"""

SAMPLE_COMPLIANCE: List[ComplianceItem] = [
    ComplianceItem(
        regulation="California Labor Code §512",
        requirement="Meal breaks for shifts over 6 hours",
        jurisdiction="California",
        status=ComplianceStatus.COMPLIANT,
        risk_level=RiskLevel.LOW,
    ),
    ComplianceItem(
        regulation="FLSA - Fair Labor Standards Act",
        requirement="Overtime pay requirements",
        jurisdiction="Federal",
        status=ComplianceStatus.COMPLIANT,
        risk_level=RiskLevel.LOW,
    ),
    ComplianceItem(
        regulation="Data Protection Guidelines",
        requirement="Secure work environment and VPN usage",
        jurisdiction="Industry Standard",
        status=ComplianceStatus.COMPLIANT,
        risk_level=RiskLevel.LOW,
    ),
    ComplianceItem(
        regulation="Communication Standards",
        requirement="Core hours and availability expectations",
        jurisdiction="Organizational",
        status=ComplianceStatus.NEEDS_REVIEW,
        risk_level=RiskLevel.MEDIUM,
    ),
]

SAMPLE_DRAFT = PolicyDraft(
    title="Remote Work Policy",
    type="Remote Work",
    content=SAMPLE_CONTENT,
    sections=["Purpose", "Scope", "Eligibility", "Guidelines", "Compliance"],
    metadata=DraftMetadata(
        effective_date="2025-01-01",
        departments="Engineering, Product",
        status="Draft - Pending Approval",
    ),
    compliance=SAMPLE_COMPLIANCE,
    word_count=1850,
)

SAMPLE_CONVERSATION: List[ConversationMessage] = [
    ConversationMessage(
        id="1",
        sender=Sender.AGENT,
        content=(
            "Hi! I'll help you create a comprehensive, compliant HR policy. Let's start with the basics. "
            "What type of policy are you looking to create?"
        ),
        timestamp="10:00 AM",
    ),
    ConversationMessage(
        id="2",
        sender=Sender.USER,
        content="I want to create a Remote Work Policy for our company.",
        timestamp="10:01 AM",
    ),
    ConversationMessage(
        id="3",
        sender=Sender.AGENT,
        content=(
            "Great! Remote work policies need to address eligibility, work hours, and equipment. "
            "Which departments or employee levels will this policy apply to?"
        ),
        timestamp="10:02 AM",
    ),
    ConversationMessage(
        id="4",
        sender=Sender.USER,
        content="All full-time employees in Engineering and Product teams.",
        timestamp="10:03 AM",
    ),
]

INITIAL_GATHERED_INFO = GatheredInfo(
    policy_type="Remote Work",
    departments="Engineering, Product",
    employee_levels="Full-time employees",
)


def sample_draft() -> PolicyDraft:
    return SAMPLE_DRAFT.model_copy(deep=True)


def sample_conversation() -> List[ConversationMessage]:
    return [message.model_copy() for message in SAMPLE_CONVERSATION]


def dashboard_payload() -> Dict[str, Any]:
    return {
        "stats": [dict(stat) for stat in DASHBOARD_STATS],
        "policies": [policy.model_dump(mode="json") for policy in SAMPLE_POLICIES],
        "policy_types": [dict(item) for item in POLICY_TYPES],
    }
