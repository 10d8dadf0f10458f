# policyflow/wizard/interview.py

from __future__ import annotations

import logging
import math
import threading
import uuid
from typing import List, Optional

from policyflow.agent.client import GENERIC_AGENT_ERROR, AgentBackend, AgentCallError, AgentRole
from policyflow.agent.parsing import InterviewReply, parse_interview_reply
from policyflow.core.models import ConversationMessage, GatheredInfo, Sender
from policyflow.core.samples import INITIAL_GATHERED_INFO, sample_conversation
from policyflow.wizard.flow import call_agent, display_time
from policyflow.wizard.slots import RequestHandle, RequestSlot

logger = logging.getLogger(__name__)

TOTAL_QUESTIONS = 8


class InterviewFlow:
    """Conversation log plus the gathered-information record for one policy interview."""

    def __init__(
        self,
        *,
        session_id: str,
        lock: Optional[threading.RLock] = None,
        progress: int = 50,
        draft_threshold: int = 80,
        default_progress: int = 50,
        messages: Optional[List[ConversationMessage]] = None,
        gathered: Optional[GatheredInfo] = None,
    ) -> None:
        self.session_id = session_id
        self.lock = lock or threading.RLock()
        self.messages: List[ConversationMessage] = messages if messages is not None else sample_conversation()
        self.gathered = gathered if gathered is not None else INITIAL_GATHERED_INFO.model_copy()
        self.progress = max(0, min(100, progress))
        self.draft_threshold = draft_threshold
        self.default_progress = default_progress
        self.error: Optional[str] = None
        self.slot = RequestSlot()

    @property
    def loading(self) -> bool:
        return self.slot.busy

    @property
    def can_generate_draft(self) -> bool:
        return self.progress >= self.draft_threshold

    @property
    def questions_remaining(self) -> int:
        return max(0, math.ceil(TOTAL_QUESTIONS - self.progress / 12.5))

    def _append(self, sender: Sender, content: str) -> ConversationMessage:
        message = ConversationMessage(
            id=uuid.uuid4().hex,
            sender=sender,
            content=content,
            timestamp=display_time(),
        )
        self.messages.append(message)
        return message

    def submit(self, text: str) -> Optional[RequestHandle]:
        """Appends the user's message and reserves the request slot; None means the submission was ignored."""
        if not str(text or "").strip():
            return None
        with self.lock:
            history = [{"sender": m.sender.value, "content": m.content} for m in self.messages]
            payload = {
                "message": text,
                "conversation_history": history,
                "gathered_information": self.gathered.filled(),
            }
            handle = self.slot.acquire("interview", payload)
            if handle is None:
                logger.info("Interview busy, ignoring submission (session=%s)", self.session_id)
                return None
            self._append(Sender.USER, text)
            self.error = None
            return handle

    def run(self, handle: RequestHandle, agent: AgentBackend) -> bool:
        try:
            raw = call_agent(agent, AgentRole.INTERVIEW, handle, self.session_id)
        except AgentCallError as exc:
            return self._fail(handle, str(exc))
        return self._complete(handle, parse_interview_reply(raw, default_progress=self.default_progress))

    def send(self, text: str, agent: AgentBackend) -> bool:
        handle = self.submit(text)
        if handle is None:
            return False
        return self.run(handle, agent)

    def abort(self) -> None:
        self.slot.abort()

    def _complete(self, handle: RequestHandle, reply: InterviewReply) -> bool:
        with self.lock:
            if not self.slot.is_current(handle):
                logger.info("Discarding stale interview reply %s (session=%s)", handle.id, self.session_id)
                return False
            self._append(Sender.AGENT, reply.text)
            self.gathered = self.gathered.merged(reply.gathered)
            self.progress = max(0, min(100, reply.progress))
            self.slot.release(handle)
            return True

    def _fail(self, handle: RequestHandle, message: str) -> bool:
        with self.lock:
            if not self.slot.is_current(handle):
                return False
            self.error = message or GENERIC_AGENT_ERROR
            self.slot.release(handle)
            return False
