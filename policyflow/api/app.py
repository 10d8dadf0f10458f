from __future__ import annotations

import io
import logging
import zipfile
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel, ConfigDict

from policyflow.agent.factory import create_agent_from_config
from policyflow.agent.mock import MockAgent
from policyflow.agent.proxy import relay_agent_request
from policyflow.api.demo_ui import render_demo_ui_html
from policyflow.api.public_views import public_draft_payload, public_session_payload
from policyflow.api.schemas import ActionPublicResponse, DashboardPublicResponse, SessionPublicResponse
from policyflow.core.config import config
from policyflow.core.models import Screen
from policyflow.core.samples import dashboard_payload
from policyflow.core.stores import create_session_store_from_config
from policyflow.core.version import __version__
from policyflow.exporters.excel_builder import build_xlsx_from_compliance
from policyflow.exporters.word_builder import build_docx_from_policy
from policyflow.wizard.flow import WizardStateError
from policyflow.wizard.session import WizardSession

logger = logging.getLogger(__name__)

app = FastAPI(
    title="PolicyFlow API",
    description="Conversational HR policy wizard: interview, draft review, final policy",
    version=__version__,
)

SESSION_STORE = create_session_store_from_config(config)
AGENT = create_agent_from_config(config)
PROXY_FALLBACK_AGENT = MockAgent(organization_name=config.organization.name)


class NavigateRequest(BaseModel):
    screen: str

    model_config = ConfigDict(extra="forbid")


class InterviewMessageRequest(BaseModel):
    message: str

    model_config = ConfigDict(extra="forbid")


class DraftContentRequest(BaseModel):
    content: str

    model_config = ConfigDict(extra="forbid")


class AgentProxyRequest(BaseModel):
    message: str
    agent_id: str
    user_id: str = ""
    session_id: str = ""

    model_config = ConfigDict(extra="allow")


def _get_session(session_id: str) -> WizardSession:
    session = SESSION_STORE.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _action_payload(session: WizardSession, status: str = "ok", reason: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"status": status, "session": public_session_payload(session)}
    if reason:
        payload["reason"] = reason
    return payload


def _wizard_action(session: WizardSession, action, *args: Any) -> Dict[str, Any]:
    try:
        action(*args)
    except WizardStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _action_payload(session)


@app.get("/", response_class=HTMLResponse)
def demo_console():
    return HTMLResponse(render_demo_ui_html())


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "version": __version__,
        "diagnostics": {
            "agent": {
                "mode": getattr(AGENT, "mode", "unknown"),
                "upstream_configured": bool(config.agent.upstream_url.strip()),
            },
            "sessions": {"count": len(SESSION_STORE), "max": SESSION_STORE.max_sessions},
        },
    }


@app.get("/dashboard", response_model=DashboardPublicResponse)
def get_dashboard():
    return dashboard_payload()


@app.post("/sessions", response_model=SessionPublicResponse)
def create_session():
    session = SESSION_STORE.create(config)
    logger.info("Created wizard session %s", session.id)
    return public_session_payload(session)


@app.get("/sessions/{session_id}", response_model=SessionPublicResponse)
def get_session(session_id: str):
    return public_session_payload(_get_session(session_id))


@app.post("/sessions/{session_id}/sidebar/toggle", response_model=ActionPublicResponse)
def toggle_sidebar(session_id: str):
    session = _get_session(session_id)
    return _wizard_action(session, session.toggle_sidebar)


@app.post("/sessions/{session_id}/navigate", response_model=ActionPublicResponse)
def navigate(session_id: str, req: NavigateRequest):
    session = _get_session(session_id)
    return _wizard_action(session, session.navigate, req.screen.strip())


@app.post("/sessions/{session_id}/start", response_model=ActionPublicResponse)
def start_policy(session_id: str):
    session = _get_session(session_id)
    return _wizard_action(session, session.start_policy)


@app.post("/sessions/{session_id}/interview/messages", response_model=ActionPublicResponse)
def submit_interview_message(session_id: str, req: InterviewMessageRequest, background_tasks: BackgroundTasks):
    session = _get_session(session_id)
    interview = session.interview
    if interview is None or session.screen != Screen.INTERVIEW:
        raise HTTPException(status_code=409, detail="Interview is not active")

    if not req.message.strip():
        return _action_payload(session, "ignored", "empty message")
    handle = interview.submit(req.message)
    if handle is None:
        return _action_payload(session, "ignored", "request already pending")

    background_tasks.add_task(interview.run, handle, AGENT)
    return _action_payload(session, "accepted")


@app.post("/sessions/{session_id}/interview/generate-draft", response_model=ActionPublicResponse)
def generate_draft(session_id: str):
    session = _get_session(session_id)
    return _wizard_action(session, session.generate_draft)


@app.post("/sessions/{session_id}/draft/initialize", response_model=ActionPublicResponse)
def initialize_draft(session_id: str, background_tasks: BackgroundTasks):
    session = _get_session(session_id)
    review = session.review
    if review is None:
        raise HTTPException(status_code=409, detail="Draft review is not active")

    handle = review.begin()
    if handle is None:
        return _action_payload(session, "ignored", "already initialized")
    background_tasks.add_task(review.run, handle, AGENT)
    return _action_payload(session, "accepted")


@app.post("/sessions/{session_id}/draft/edit-mode", response_model=ActionPublicResponse)
def toggle_draft_edit_mode(session_id: str):
    session = _get_session(session_id)
    review = session.review
    if review is None:
        raise HTTPException(status_code=409, detail="Draft review is not active")
    return _wizard_action(session, review.toggle_edit_mode)


@app.put("/sessions/{session_id}/draft/content", response_model=ActionPublicResponse)
def edit_draft_content(session_id: str, req: DraftContentRequest):
    session = _get_session(session_id)
    review = session.review
    if review is None:
        raise HTTPException(status_code=409, detail="Draft review is not active")
    return _wizard_action(session, review.edit_content, req.content)


@app.post("/sessions/{session_id}/draft/approve", response_model=ActionPublicResponse)
def approve_draft(session_id: str):
    session = _get_session(session_id)
    return _wizard_action(session, session.approve_draft)


@app.post("/sessions/{session_id}/draft/back", response_model=ActionPublicResponse)
def back_to_interview(session_id: str):
    session = _get_session(session_id)
    return _wizard_action(session, session.back_to_interview)


@app.post("/sessions/{session_id}/final/initialize", response_model=ActionPublicResponse)
def initialize_final(session_id: str, background_tasks: BackgroundTasks):
    session = _get_session(session_id)
    final = session.final
    if final is None:
        raise HTTPException(status_code=409, detail="Final policy is not active")

    handle = final.begin()
    if handle is None:
        return _action_payload(session, "ignored", "already initialized")
    background_tasks.add_task(final.run, handle, AGENT)
    return _action_payload(session, "accepted")


@app.post("/sessions/{session_id}/dashboard", response_model=ActionPublicResponse)
def back_to_dashboard(session_id: str):
    session = _get_session(session_id)
    return _wizard_action(session, session.back_to_dashboard)


@app.get("/sessions/{session_id}/export")
def export_policy(session_id: str, format: str = "docx"):
    session = _get_session(session_id)
    fmt = (format or "").strip().lower()
    if fmt not in {"docx", "xlsx", "both"}:
        raise HTTPException(status_code=400, detail="Unsupported format")

    with session.lock:
        draft = public_draft_payload(session.final_draft or session.draft) or {}
        final = session.final
        document_id = final.document_id if final is not None else None
        version = final.version if final is not None else None
        generated_on = final.generated_on if final is not None else None

    try:
        docx_bytes: Optional[bytes] = None
        xlsx_bytes: Optional[bytes] = None
        if fmt in {"docx", "both"}:
            docx_bytes = build_docx_from_policy(draft, document_id, version, generated_on)
        if fmt in {"xlsx", "both"}:
            xlsx_bytes = build_xlsx_from_compliance(draft)
    except Exception as exc:
        logger.exception("Export failed (session=%s format=%s)", session_id, fmt)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    if fmt == "docx" and docx_bytes is not None:
        return StreamingResponse(
            io.BytesIO(docx_bytes),
            media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            headers={"Content-Disposition": "attachment; filename=policy.docx"},
        )

    if fmt == "xlsx" and xlsx_bytes is not None:
        return StreamingResponse(
            io.BytesIO(xlsx_bytes),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": "attachment; filename=compliance.xlsx"},
        )

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("policy.docx", docx_bytes or b"")
        archive.writestr("compliance.xlsx", xlsx_bytes or b"")
    buf.seek(0)
    return StreamingResponse(
        buf,
        media_type="application/zip",
        headers={"Content-Disposition": "attachment; filename=policyflow_export.zip"},
    )


@app.post("/api/agent")
def agent_proxy(req: AgentProxyRequest):
    status_code, body = relay_agent_request(req.model_dump(), config.agent, PROXY_FALLBACK_AGENT)
    if status_code != 200:
        return JSONResponse(status_code=status_code, content=body)
    return body


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.api_host, port=config.api_port, reload=config.debug, log_level=config.log_level)
