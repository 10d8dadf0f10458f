# policyflow/wizard/flow.py

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from policyflow.agent.client import GENERIC_AGENT_ERROR, AgentBackend, AgentCallError, AgentRole
from policyflow.core.models import FlowStatus
from policyflow.wizard.slots import RequestHandle, RequestSlot

logger = logging.getLogger(__name__)


class WizardStateError(ValueError):
    """The requested action is not valid on the current screen."""


def display_time(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%I:%M %p")


def call_agent(agent: AgentBackend, role: AgentRole, handle: RequestHandle, session_id: str) -> Any:
    """Runs one agent call; every failure comes back as AgentCallError with a displayable message."""
    try:
        return agent.call(role, handle.payload, session_id=session_id)
    except AgentCallError:
        raise
    except Exception as exc:
        logger.exception("Agent call crashed (role=%s session=%s)", role.value, session_id)
        raise AgentCallError(str(exc) or GENERIC_AGENT_ERROR) from exc


class OneShotFlow(ABC):
    """A screen that makes exactly one agent call per mount: idle -> generating -> success | error."""
    role: AgentRole
    kind: str

    def __init__(self, *, session_id: str, lock: Optional[threading.RLock] = None) -> None:
        self.session_id = session_id
        self.lock = lock or threading.RLock()
        self.status = FlowStatus.IDLE
        self.error: Optional[str] = None
        self.slot = RequestSlot()

    @abstractmethod
    def build_payload(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def apply(self, raw: Any) -> None:
        """Apply a successful agent response; called under the lock."""
        ...

    @property
    def loading(self) -> bool:
        return self.status == FlowStatus.GENERATING

    def begin(self) -> Optional[RequestHandle]:
        with self.lock:
            if self.status != FlowStatus.IDLE:
                return None
            handle = self.slot.acquire(self.kind, self.build_payload())
            if handle is None:
                return None
            self.status = FlowStatus.GENERATING
            self.error = None
            return handle

    def run(self, handle: RequestHandle, agent: AgentBackend) -> bool:
        try:
            raw = call_agent(agent, self.role, handle, self.session_id)
        except AgentCallError as exc:
            return self._fail(handle, str(exc))
        return self._complete(handle, raw)

    def initialize(self, agent: AgentBackend) -> bool:
        handle = self.begin()
        if handle is None:
            return False
        return self.run(handle, agent)

    def abort(self) -> None:
        handle = self.slot.abort()
        if handle is not None:
            logger.info("Aborted %s request %s (session=%s)", self.kind, handle.id, self.session_id)

    def _complete(self, handle: RequestHandle, raw: Any) -> bool:
        with self.lock:
            if not self.slot.is_current(handle):
                logger.info("Discarding stale %s result %s (session=%s)", self.kind, handle.id, self.session_id)
                return False
            self.apply(raw)
            self.status = FlowStatus.SUCCESS
            self.slot.release(handle)
            return True

    def _fail(self, handle: RequestHandle, message: str) -> bool:
        with self.lock:
            if not self.slot.is_current(handle):
                logger.info("Discarding stale %s failure %s (session=%s)", self.kind, handle.id, self.session_id)
                return False
            self.status = FlowStatus.ERROR
            self.error = message or GENERIC_AGENT_ERROR
            self.slot.release(handle)
            return False
