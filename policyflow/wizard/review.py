# policyflow/wizard/review.py

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from policyflow.agent.client import AgentRole
from policyflow.agent.parsing import parse_draft_reply
from policyflow.core.models import GatheredInfo, PolicyDraft, count_words
from policyflow.wizard.flow import OneShotFlow, WizardStateError

logger = logging.getLogger(__name__)


class DraftReviewFlow(OneShotFlow):
    role = AgentRole.DRAFTING_COORDINATOR
    kind = "draft"

    def __init__(
        self,
        *,
        session_id: str,
        draft: PolicyDraft,
        requirements: GatheredInfo,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        super().__init__(session_id=session_id, lock=lock)
        self.draft = draft
        self.requirements = requirements
        self.edit_mode = False
        self.edited_content = draft.content
        self.shape_mismatch = False

    def build_payload(self) -> Dict[str, Any]:
        return {
            "action": "generate_policy_draft",
            "policy_type": self.requirements.policy_type or self.draft.type,
            "requirements": self.requirements.filled(),
        }

    def apply(self, raw: Any) -> None:
        update = parse_draft_reply(raw)
        if update is None:
            # Keep showing the seeded draft.
            self.shape_mismatch = True
            logger.warning("Coordinator response had no usable draft (session=%s)", self.session_id)
            return

        untouched = self.edited_content == self.draft.content
        patch: Dict[str, Any] = {"content": update.content, "word_count": count_words(update.content)}
        if update.title:
            patch["title"] = update.title
        if update.sections:
            patch["sections"] = update.sections
        if update.compliance is not None:
            patch["compliance"] = update.compliance
        self.draft = self.draft.model_copy(update=patch)
        if untouched:
            self.edited_content = self.draft.content

    def toggle_edit_mode(self) -> bool:
        with self.lock:
            self.edit_mode = not self.edit_mode
            return self.edit_mode

    def edit_content(self, content: str) -> None:
        with self.lock:
            if not self.edit_mode:
                raise WizardStateError("Draft is not in edit mode")
            self.edited_content = content

    def approved_draft(self) -> PolicyDraft:
        """The draft as approved: the edited text replaces the generated content."""
        with self.lock:
            return self.draft.model_copy(
                update={"content": self.edited_content, "word_count": count_words(self.edited_content)},
                deep=True,
            )
