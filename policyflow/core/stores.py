# policyflow/core/stores.py

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Dict, Optional

from policyflow.core.config import PolicyFlowConfig
from policyflow.wizard.session import WizardSession

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """Live wizard sessions keyed by id. Nothing survives a restart."""

    def __init__(self, max_sessions: int = 500) -> None:
        self.max_sessions = max(1, max_sessions)
        self._sessions: "OrderedDict[str, WizardSession]" = OrderedDict()
        self._lock = threading.Lock()

    def create(self, cfg: Optional[PolicyFlowConfig] = None) -> WizardSession:
        session = WizardSession(cfg=cfg)
        with self._lock:
            self._sessions[session.id] = session
            while len(self._sessions) > self.max_sessions:
                evicted_id, evicted = self._sessions.popitem(last=False)
                evicted.navigate("dashboard")
                logger.info("Evicted wizard session %s (limit=%s)", evicted_id, self.max_sessions)
        return session

    def get(self, session_id: str) -> Optional[WizardSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.navigate("dashboard")
        return True

    def list(self) -> Dict[str, WizardSession]:
        with self._lock:
            return dict(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def create_session_store_from_config(cfg: PolicyFlowConfig) -> InMemorySessionStore:
    return InMemorySessionStore(max_sessions=cfg.wizard.max_sessions)
