# policyflow/tests/test_integration.py

import io
import json
import zipfile
from datetime import date

from docx import Document
from fastapi.testclient import TestClient
from openpyxl import load_workbook

import policyflow.api.app as api_app_module
from policyflow.agent.client import AgentCallError
from policyflow.agent.mock import MockAgent
from policyflow.api.app import app

client = TestClient(app)


class ScriptedAgent:
    mode = "scripted"

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def call(self, role, payload, *, session_id):
        self.calls.append({"role": role.value, "payload": payload, "session_id": session_id})
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _new_session():
    response = client.post("/sessions")
    assert response.status_code == 200
    return response.json()["session_id"]


def _post(session_id, suffix, **kwargs):
    return client.post(f"/sessions/{session_id}{suffix}", **kwargs)


def _start_interview(session_id):
    response = _post(session_id, "/start")
    assert response.status_code == 200
    return response.json()["session"]


def _send(session_id, message):
    return _post(session_id, "/interview/messages", json={"message": message})


def test_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"]
    diagnostics = body["diagnostics"]
    assert diagnostics["agent"]["mode"] in {"mock", "http"}
    assert isinstance(diagnostics["agent"]["upstream_configured"], bool)
    assert diagnostics["sessions"]["max"] >= 1


def test_demo_console_served():
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "Start New Policy" in response.text


def test_dashboard_payload():
    body = client.get("/dashboard").json()
    assert [s["value"] for s in body["stats"]] == [24, 18, 2]
    assert [p["title"] for p in body["policies"]] == ["Paid Time Off Policy", "Employee Expense Reimbursement"]
    assert len(body["policy_types"]) == 3


def test_new_session_snapshot():
    session_id = _new_session()
    body = client.get(f"/sessions/{session_id}").json()
    assert body["screen"] == "dashboard"
    assert body["header_title"] == "Dashboard"
    assert body["sidebar_open"] is True
    assert body["interview"] is None
    assert body["draft"]["compliance_summary"] == {"compliant": 3, "needs-review": 1, "non-compliant": 0, "total": 4}


def test_unknown_session_returns_404():
    assert client.get("/sessions/does-not-exist").status_code == 404
    assert client.post("/sessions/does-not-exist/start").status_code == 404


def test_sidebar_and_navigation():
    session_id = _new_session()
    toggled = _post(session_id, "/sidebar/toggle").json()
    assert toggled["session"]["sidebar_open"] is False

    navigated = _post(session_id, "/navigate", json={"screen": "library"}).json()
    assert navigated["session"]["screen"] == "library"
    assert navigated["session"]["header_title"] == "Policy Library"

    blocked = _post(session_id, "/navigate", json={"screen": "final-policy"})
    assert blocked.status_code == 409

    invalid = _post(session_id, "/navigate", json={"target": "library"})
    assert invalid.status_code == 422


def test_interview_message_round_trip(monkeypatch):
    agent = ScriptedAgent({"response": "Which jurisdictions?", "progress": 72, "gathered_information": {"work_hours": "Core 10-3"}})
    monkeypatch.setattr(api_app_module, "AGENT", agent)
    session_id = _new_session()
    before = len(_start_interview(session_id)["interview"]["messages"])

    response = _send(session_id, "Core hours from 10 to 3")
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    interview = client.get(f"/sessions/{session_id}").json()["interview"]
    assert len(interview["messages"]) == before + 2
    assert interview["messages"][-1]["content"] == "Which jurisdictions?"
    assert interview["gathered_information"]["work_hours"] == "Core 10-3"
    assert interview["progress"] == 72
    assert interview["questions_remaining"] == 3
    assert interview["can_generate_draft"] is False
    assert interview["loading"] is False

    call = agent.calls[0]
    assert call["role"] == "interview"
    assert call["session_id"] == session_id
    assert call["payload"]["message"] == "Core hours from 10 to 3"


def test_blank_message_is_ignored(monkeypatch):
    agent = ScriptedAgent()
    monkeypatch.setattr(api_app_module, "AGENT", agent)
    session_id = _new_session()
    before = len(_start_interview(session_id)["interview"]["messages"])

    body = _send(session_id, "   ").json()
    assert body["status"] == "ignored"
    assert body["reason"] == "empty message"
    assert len(body["session"]["interview"]["messages"]) == before
    assert agent.calls == []


def test_message_while_pending_is_ignored(monkeypatch):
    agent = ScriptedAgent()
    monkeypatch.setattr(api_app_module, "AGENT", agent)
    session_id = _new_session()
    _start_interview(session_id)
    session = api_app_module.SESSION_STORE.get(session_id)
    pending = session.interview.submit("still thinking")
    assert pending is not None

    body = _send(session_id, "second message").json()
    assert body["status"] == "ignored"
    assert body["reason"] == "request already pending"
    assert body["session"]["interview"]["loading"] is True
    assert agent.calls == []


def test_message_outside_interview_returns_409():
    session_id = _new_session()
    assert _send(session_id, "hello").status_code == 409


def test_rate_limited_agent_sets_error_banner(monkeypatch):
    monkeypatch.setattr(api_app_module, "AGENT", ScriptedAgent(AgentCallError("rate limited")))
    session_id = _new_session()
    before = len(_start_interview(session_id)["interview"]["messages"])

    _send(session_id, "Three remote days")

    interview = client.get(f"/sessions/{session_id}").json()["interview"]
    assert interview["error"] == "rate limited"
    assert len(interview["messages"]) == before + 1
    assert interview["messages"][-1]["sender"] == "user"


def test_late_answer_at_85_stays_on_interview(monkeypatch):
    monkeypatch.setattr(
        api_app_module, "AGENT", ScriptedAgent({"response": "Contractors noted.", "progress": 88})
    )
    session_id = _new_session()
    _start_interview(session_id)
    api_app_module.SESSION_STORE.get(session_id).interview.progress = 85

    _send(session_id, "We need coverage for contractors too")

    body = client.get(f"/sessions/{session_id}").json()
    assert body["screen"] == "interview"
    assert body["interview"]["can_generate_draft"] is True


def test_generate_draft_blocked_below_threshold():
    session_id = _new_session()
    _start_interview(session_id)
    response = _post(session_id, "/interview/generate-draft")
    assert response.status_code == 409


def test_full_wizard_flow_with_mock_agent(monkeypatch):
    agent = MockAgent(organization_name="Acme Corporation")
    monkeypatch.setattr(api_app_module, "AGENT", agent)
    session_id = _new_session()
    _start_interview(session_id)

    assert _send(session_id, "Three remote days per week").json()["status"] == "accepted"
    assert _send(session_id, "Core hours 10 to 3").json()["status"] == "accepted"
    interview = client.get(f"/sessions/{session_id}").json()["interview"]
    assert interview["progress"] == 80
    assert interview["can_generate_draft"] is True

    review_session = _post(session_id, "/interview/generate-draft").json()["session"]
    assert review_session["screen"] == "draft-review"
    assert review_session["review"]["status"] == "idle"
    assert review_session["review"]["draft"]["title"] == f"Remote Work - {date.today().year}"

    first = _post(session_id, "/draft/initialize").json()
    assert first["status"] == "accepted"
    assert first["session"]["review"]["status"] == "generating"
    again = _post(session_id, "/draft/initialize").json()
    assert again["status"] == "ignored"
    assert again["reason"] == "already initialized"
    roles = [call["role"].value for call in agent.calls]
    assert roles.count("drafting_coordinator") == 1

    review = client.get(f"/sessions/{session_id}").json()["review"]
    assert review["status"] == "success"
    assert review["draft"]["title"] == "Remote Work Policy"

    assert _post(session_id, "/draft/edit-mode").json()["session"]["review"]["edit_mode"] is True
    edited = client.put(f"/sessions/{session_id}/draft/content", json={"content": "Edited remote work policy"})
    assert edited.status_code == 200
    assert edited.json()["session"]["review"]["edited_content"] == "Edited remote work policy"

    final_session = _post(session_id, "/draft/approve").json()["session"]
    assert final_session["screen"] == "final-policy"
    assert final_session["final"]["draft"]["content"] == "Edited remote work policy"
    assert final_session["final"]["version"] == "1.0"

    assert _post(session_id, "/final/initialize").json()["status"] == "accepted"
    assert _post(session_id, "/final/initialize").json()["status"] == "ignored"
    final = client.get(f"/sessions/{session_id}").json()["final"]
    assert final["status"] == "success"
    assert final["draft"]["content"].startswith("Edited remote work policy")
    assert f"Issued by {api_app_module.config.organization.name}" in final["draft"]["content"]

    finalize_payload = [c for c in agent.calls if c["role"].value == "finalization"][0]["payload"]
    assert finalize_payload["action"] == "finalize_policy"
    assert finalize_payload["organization"]["name"] == api_app_module.config.organization.name

    export = client.get(f"/sessions/{session_id}/export", params={"format": "docx"})
    assert export.status_code == 200
    doc = Document(io.BytesIO(export.content))
    texts = [p.text for p in doc.paragraphs]
    assert texts[-1].startswith(f"Document ID: {final['document_id']}")

    bundle = client.get(f"/sessions/{session_id}/export", params={"format": "both"})
    assert bundle.status_code == 200
    with zipfile.ZipFile(io.BytesIO(bundle.content)) as archive:
        assert sorted(archive.namelist()) == ["compliance.xlsx", "policy.docx"]

    home = _post(session_id, "/dashboard").json()["session"]
    assert home["screen"] == "dashboard"
    assert home["final"] is None
    assert home["final_draft"]["title"] == "Remote Work Policy"


def test_draft_failure_reports_error_status(monkeypatch):
    monkeypatch.setattr(api_app_module, "AGENT", ScriptedAgent(AgentCallError("coordinator down")))
    session_id = _new_session()
    _start_interview(session_id)
    api_app_module.SESSION_STORE.get(session_id).interview.progress = 90
    _post(session_id, "/interview/generate-draft")

    _post(session_id, "/draft/initialize")

    review = client.get(f"/sessions/{session_id}").json()["review"]
    assert review["status"] == "error"
    assert review["error"] == "coordinator down"
    assert review["draft"]["content"].startswith("REMOTE WORK POLICY")


def test_back_to_interview_keeps_conversation(monkeypatch):
    monkeypatch.setattr(api_app_module, "AGENT", ScriptedAgent({"response": "Noted.", "progress": 95}))
    session_id = _new_session()
    _start_interview(session_id)
    _send(session_id, "Contractors too")
    _post(session_id, "/interview/generate-draft")

    body = _post(session_id, "/draft/back").json()["session"]
    assert body["screen"] == "interview"
    assert body["review"] is None
    assert body["interview"]["messages"][-1]["content"] == "Noted."
    assert body["interview"]["progress"] == 95


def test_draft_edit_requires_edit_mode():
    session_id = _new_session()
    _start_interview(session_id)
    api_app_module.SESSION_STORE.get(session_id).interview.progress = 80
    _post(session_id, "/interview/generate-draft")

    response = client.put(f"/sessions/{session_id}/draft/content", json={"content": "x"})
    assert response.status_code == 409


def test_draft_endpoints_require_review_screen():
    session_id = _new_session()
    assert _post(session_id, "/draft/initialize").status_code == 409
    assert _post(session_id, "/draft/edit-mode").status_code == 409
    assert _post(session_id, "/draft/approve").status_code == 409
    assert _post(session_id, "/final/initialize").status_code == 409


def test_export_rejects_unknown_format():
    session_id = _new_session()
    response = client.get(f"/sessions/{session_id}/export", params={"format": "pdf"})
    assert response.status_code == 400


def test_export_xlsx_uses_current_draft_before_final():
    session_id = _new_session()
    response = client.get(f"/sessions/{session_id}/export", params={"format": "xlsx"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


def test_agent_proxy_answers_from_mock(monkeypatch):
    monkeypatch.setattr(api_app_module.config.agent, "upstream_url", "")
    envelope = {
        "message": json.dumps({"message": "Hybrid", "conversation_history": [], "gathered_information": {}}),
        "agent_id": api_app_module.config.agent.interview_id,
        "user_id": "u-1",
        "session_id": "s-1",
    }
    response = client.post("/api/agent", json=envelope)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert json.loads(body["response"])["progress"] == 65


def test_agent_proxy_unknown_agent(monkeypatch):
    monkeypatch.setattr(api_app_module.config.agent, "upstream_url", "")
    response = client.post("/api/agent", json={"message": "{}", "agent_id": "nobody"})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_second_policy_export_does_not_reuse_previous_final(monkeypatch):
    agent = ScriptedAgent(
        {"policy_draft": {"title": "First Policy", "content": "First body"}},
        {"final_policy": {"title": "First Final", "content": "First final body"}},
        {"policy_draft": {"title": "Second Policy", "content": "Second body"}},
    )
    monkeypatch.setattr(api_app_module, "AGENT", agent)
    session_id = _new_session()

    _start_interview(session_id)
    api_app_module.SESSION_STORE.get(session_id).interview.progress = 90
    _post(session_id, "/interview/generate-draft")
    _post(session_id, "/draft/initialize")
    _post(session_id, "/draft/approve")
    _post(session_id, "/final/initialize")
    home = _post(session_id, "/dashboard").json()["session"]
    assert home["final_draft"]["title"] == "First Final"

    restarted = _start_interview(session_id)
    assert restarted["final_draft"] is None
    api_app_module.SESSION_STORE.get(session_id).interview.progress = 90
    _post(session_id, "/interview/generate-draft")
    _post(session_id, "/draft/initialize")

    body = client.get(f"/sessions/{session_id}").json()
    assert body["final_draft"] is None
    assert body["review"]["draft"]["title"] == "Second Policy"

    export = client.get(f"/sessions/{session_id}/export", params={"format": "xlsx"})
    assert export.status_code == 200
    summary = load_workbook(io.BytesIO(export.content))["Summary"]
    assert summary["B1"].value == "Second Policy"
