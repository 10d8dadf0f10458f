# policyflow/api/schemas.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class ConversationMessagePublicResponse(BaseModel):
    id: str
    sender: str
    content: str
    timestamp: str


class InterviewPublicResponse(BaseModel):
    messages: List[ConversationMessagePublicResponse]
    gathered_information: Dict[str, str] = {}
    progress: int
    questions_remaining: int
    loading: bool
    can_generate_draft: bool
    error: Optional[str] = None


class DraftPublicResponse(BaseModel):
    title: str
    type: str
    content: str
    sections: List[str] = []
    metadata: Dict[str, str]
    compliance: List[Dict[str, str]] = []
    word_count: int
    compliance_summary: Dict[str, int] = {}

    model_config = ConfigDict(extra="allow")


class ReviewPublicResponse(BaseModel):
    status: str
    error: Optional[str] = None
    draft: DraftPublicResponse
    edit_mode: bool
    edited_content: str


class FinalPublicResponse(BaseModel):
    status: str
    error: Optional[str] = None
    draft: DraftPublicResponse
    document_id: str
    version: str
    generated_on: str


class SessionPublicResponse(BaseModel):
    session_id: str
    screen: str
    header_title: str
    sidebar_open: bool
    gathered_information: Dict[str, str] = {}
    draft: DraftPublicResponse
    final_draft: Optional[DraftPublicResponse] = None
    interview: Optional[InterviewPublicResponse] = None
    review: Optional[ReviewPublicResponse] = None
    final: Optional[FinalPublicResponse] = None

    model_config = ConfigDict(extra="allow")


class ActionPublicResponse(BaseModel):
    status: str
    reason: Optional[str] = None
    session: SessionPublicResponse


class DashboardPublicResponse(BaseModel):
    stats: List[Dict[str, Any]]
    policies: List[Dict[str, Any]]
    policy_types: List[Dict[str, str]]
