# policyflow/wizard/final.py

from __future__ import annotations

import logging
import random
import string
import threading
from datetime import date
from typing import Any, Dict, Optional

from policyflow.agent.client import AgentRole
from policyflow.agent.parsing import parse_final_reply
from policyflow.core.config import OrganizationConfig
from policyflow.core.models import PolicyDraft, count_words
from policyflow.wizard.flow import OneShotFlow

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = "1.0"
_ID_ALPHABET = string.digits + string.ascii_uppercase


def cosmetic_document_id(rng: Optional[random.Random] = None) -> str:
    """Display-only identifier; not unique and never used as a key."""
    chooser = rng or random
    return "POL-" + "".join(chooser.choice(_ID_ALPHABET) for _ in range(9))


class FinalPolicyFlow(OneShotFlow):
    role = AgentRole.FINALIZATION
    kind = "final"

    def __init__(
        self,
        *,
        session_id: str,
        draft: PolicyDraft,
        organization: OrganizationConfig,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        super().__init__(session_id=session_id, lock=lock)
        self.draft = draft
        self.organization = organization
        self.document_id = cosmetic_document_id()
        self.version = DOCUMENT_VERSION
        self.generated_on = date.today().isoformat()

    def build_payload(self) -> Dict[str, Any]:
        return {
            "action": "finalize_policy",
            "draft": self.draft.agent_payload(),
            "organization": self.organization.model_dump(),
        }

    def apply(self, raw: Any) -> None:
        update = parse_final_reply(raw)
        if update.empty:
            logger.warning("Finalization response had no title or content (session=%s)", self.session_id)
            return
        patch: Dict[str, Any] = {}
        if update.title is not None:
            patch["title"] = update.title
        if update.content is not None:
            patch["content"] = update.content
            patch["word_count"] = count_words(update.content)
        self.draft = self.draft.model_copy(update=patch)
