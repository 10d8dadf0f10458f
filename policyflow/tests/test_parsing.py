import json

from policyflow.agent.parsing import (
    DEFAULT_AGENT_REPLY,
    parse_compliance_items,
    parse_draft_reply,
    parse_final_reply,
    parse_gathered_information,
    parse_interview_reply,
    parse_progress,
    snake_key,
)
from policyflow.core.models import ComplianceStatus, RiskLevel


def test_snake_key_accepts_camel_case():
    assert snake_key("policyType") == "policy_type"
    assert snake_key("employeeLevels") == "employee_levels"
    assert snake_key("work_hours") == "work_hours"


def test_parse_progress_clamps_and_defaults():
    assert parse_progress(85) == 85
    assert parse_progress("72%") == 72
    assert parse_progress(140) == 100
    assert parse_progress(-5) == 0
    assert parse_progress(None) == 50
    assert parse_progress("soon", default=60) == 60
    assert parse_progress(True) == 50
    assert parse_progress(float("nan")) == 50


def test_parse_gathered_information_keeps_known_fields_only():
    gathered = parse_gathered_information(
        {
            "policyType": "Remote Work",
            "jurisdiction": ["California", "New York"],
            "work_hours": "  Core hours 10-3  ",
            "equipment": "",
            "favourite_colour": "blue",
        }
    )
    assert gathered == {
        "policy_type": "Remote Work",
        "jurisdiction": "California, New York",
        "work_hours": "Core hours 10-3",
    }


def test_parse_gathered_information_decodes_json_string():
    assert parse_gathered_information(json.dumps({"departments": "Sales"})) == {"departments": "Sales"}
    assert parse_gathered_information("not json") == {}
    assert parse_gathered_information(None) == {}


def test_parse_interview_reply_reads_alternate_keys():
    reply = parse_interview_reply(
        {"next_question": "Which states?", "interview_progress": "90", "gatheredInformation": {"equipment": "Laptop"}}
    )
    assert reply.text == "Which states?"
    assert reply.progress == 90
    assert reply.gathered == {"equipment": "Laptop"}


def test_parse_interview_reply_handles_plain_text_and_json_string():
    plain = parse_interview_reply("What hours should employees keep?")
    assert plain.text == "What hours should employees keep?"
    assert plain.progress == 50

    encoded = parse_interview_reply(json.dumps({"response": "Got it.", "progress": 65}))
    assert encoded.text == "Got it."
    assert encoded.progress == 65


def test_parse_interview_reply_falls_back_on_unusable_payload():
    reply = parse_interview_reply(["unexpected"], default_progress=40)
    assert reply.text == DEFAULT_AGENT_REPLY
    assert reply.progress == 40
    assert reply.gathered == {}

    missing_text = parse_interview_reply({"progress": 30})
    assert missing_text.text == DEFAULT_AGENT_REPLY
    assert missing_text.progress == 30


def test_parse_compliance_items_normalizes_status_and_risk():
    items = parse_compliance_items(
        [
            {"regulation": "FLSA", "requirement": "Overtime", "jurisdiction": "Federal", "status": "Compliant", "riskLevel": "Low"},
            {"name": "CCPA", "description": "Data privacy", "status": "needs review", "risk": "High risk"},
            {"regulation": "Mystery", "status": "unknown", "risk_level": "extreme"},
            {"jurisdiction": "Nowhere"},
            "garbage",
        ]
    )
    assert len(items) == 3
    assert items[0].status == ComplianceStatus.COMPLIANT
    assert items[0].risk_level == RiskLevel.LOW
    assert items[1].regulation == "CCPA"
    assert items[1].requirement == "Data privacy"
    assert items[1].jurisdiction == "Unspecified"
    assert items[1].status == ComplianceStatus.NEEDS_REVIEW
    assert items[1].risk_level == RiskLevel.HIGH
    assert items[2].status == ComplianceStatus.NEEDS_REVIEW
    assert items[2].risk_level == RiskLevel.MEDIUM


def test_parse_compliance_items_returns_none_without_list():
    assert parse_compliance_items(None) is None
    assert parse_compliance_items({"regulation": "FLSA"}) is None
    assert parse_compliance_items([]) == []


def test_parse_draft_reply_reads_policy_draft_and_highlights():
    update = parse_draft_reply(
        {
            "policy_draft": {"title": "PTO Policy", "content": "1. PURPOSE\nRest.", "sections": ["Purpose"]},
            "compliance_highlights": [{"regulation": "FMLA", "requirement": "Leave", "status": "non-compliant"}],
        }
    )
    assert update is not None
    assert update.title == "PTO Policy"
    assert update.content == "1. PURPOSE\nRest."
    assert update.sections == ["Purpose"]
    assert update.compliance[0].status == ComplianceStatus.NON_COMPLIANT


def test_parse_draft_reply_accepts_wrapped_json_string():
    raw = {"response": json.dumps({"draft": {"content": "Body text", "compliance": []}})}
    update = parse_draft_reply(raw)
    assert update is not None
    assert update.content == "Body text"
    assert update.title is None
    assert update.compliance == []


def test_parse_draft_reply_rejects_mismatched_shapes():
    assert parse_draft_reply("just text") is None
    assert parse_draft_reply({"policy_draft": "not an object"}) is None
    assert parse_draft_reply({"policy_draft": {"title": "No content"}}) is None
    assert parse_draft_reply({"summary": "nothing useful"}) is None


def test_parse_final_reply_variants():
    nested = parse_final_reply({"final_policy": {"title": "Final", "content": "Text"}})
    assert (nested.title, nested.content) == ("Final", "Text")

    formatted = parse_final_reply({"formatted_policy": "Formatted text", "title": "Titled"})
    assert (formatted.title, formatted.content) == ("Titled", "Formatted text")

    top_level = parse_final_reply({"content": "Only content"})
    assert top_level.title is None
    assert top_level.content == "Only content"

    plain = parse_final_reply("Plain formatted policy")
    assert plain.content == "Plain formatted policy"

    assert parse_final_reply({"unrelated": 1}).empty is True
    assert parse_final_reply(42).empty is True


def test_parse_draft_reply_drops_blank_and_null_sections():
    update = parse_draft_reply({"policy_draft": {"content": "Body", "sections": ["Purpose", None, "  ", " Scope "]}})
    assert update is not None
    assert update.sections == ["Purpose", "Scope"]
