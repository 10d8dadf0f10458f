# policyflow/wizard/session.py

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date
from typing import Optional, Union

from policyflow.core.config import PolicyFlowConfig, config
from policyflow.core.models import SCREEN_TITLES, SIDEBAR_SCREENS, GatheredInfo, PolicyDraft, Screen
from policyflow.core.samples import INITIAL_GATHERED_INFO, sample_draft
from policyflow.wizard.final import FinalPolicyFlow
from policyflow.wizard.flow import WizardStateError
from policyflow.wizard.interview import InterviewFlow
from policyflow.wizard.review import DraftReviewFlow

logger = logging.getLogger(__name__)


def _as_screen(value: Union[Screen, str]) -> Screen:
    try:
        return Screen(value)
    except ValueError as exc:
        raise WizardStateError(f"Unknown screen: {value}") from exc


class WizardSession:
    """Screen state holder for one browser tab: current screen, sidebar, drafts and mounted flows."""

    def __init__(self, session_id: Optional[str] = None, *, cfg: Optional[PolicyFlowConfig] = None) -> None:
        self.id = session_id or str(uuid.uuid4())
        self.cfg = cfg or config
        self.lock = threading.RLock()
        self.screen = Screen.DASHBOARD
        self.sidebar_open = True
        self.gathered: GatheredInfo = INITIAL_GATHERED_INFO.model_copy()
        self.interview: Optional[InterviewFlow] = None
        self.review: Optional[DraftReviewFlow] = None
        self.final: Optional[FinalPolicyFlow] = None
        self._draft: PolicyDraft = sample_draft()
        self._final_draft: Optional[PolicyDraft] = None

    @property
    def header_title(self) -> str:
        return SCREEN_TITLES[self.screen]

    @property
    def draft(self) -> PolicyDraft:
        if self.review is not None:
            return self.review.draft
        return self._draft

    @property
    def final_draft(self) -> Optional[PolicyDraft]:
        if self.final is not None:
            return self.final.draft
        return self._final_draft

    def _require(self, *screens: Screen) -> None:
        if self.screen not in screens:
            allowed = ", ".join(s.value for s in screens)
            raise WizardStateError(f"Action requires screen {allowed}; current screen is {self.screen.value}")

    def _new_interview(self) -> InterviewFlow:
        wizard = self.cfg.wizard
        return InterviewFlow(
            session_id=self.id,
            lock=self.lock,
            progress=wizard.default_progress,
            draft_threshold=wizard.draft_progress_threshold,
            default_progress=wizard.default_progress,
        )

    def _unmount_all(self) -> None:
        for flow in (self.interview, self.review, self.final):
            if flow is not None:
                flow.abort()
        if self.final is not None:
            self._final_draft = self.final.draft
        if self.review is not None:
            self._draft = self.review.draft
        self.interview = None
        self.review = None
        self.final = None

    def toggle_sidebar(self) -> bool:
        with self.lock:
            self.sidebar_open = not self.sidebar_open
            return self.sidebar_open

    def navigate(self, target: Union[Screen, str]) -> Screen:
        screen = _as_screen(target)
        if screen not in SIDEBAR_SCREENS:
            raise WizardStateError(f"Screen {screen.value} is reached through the wizard actions")
        with self.lock:
            self._unmount_all()
            self.screen = screen
            return self.screen

    def start_policy(self) -> InterviewFlow:
        with self.lock:
            self._require(*SIDEBAR_SCREENS)
            self._unmount_all()
            self._final_draft = None
            self.interview = self._new_interview()
            self.screen = Screen.INTERVIEW
            logger.info("Interview started (session=%s)", self.id)
            return self.interview

    def generate_draft(self) -> DraftReviewFlow:
        with self.lock:
            self._require(Screen.INTERVIEW)
            interview = self.interview
            if interview is None or not interview.can_generate_draft:
                raise WizardStateError("Interview is not far enough along to generate a draft")
            interview.abort()
            self.gathered = interview.gathered.model_copy()

            policy_type = self.gathered.policy_type
            draft = sample_draft()
            metadata = draft.metadata.model_copy(
                update={
                    key: value
                    for key, value in {
                        "departments": self.gathered.departments,
                        "effective_date": self.gathered.effective_date,
                    }.items()
                    if value
                }
            )
            draft = draft.model_copy(
                update={"title": f"{policy_type or 'Policy'} - {date.today().year}", "metadata": metadata}
            )
            self._draft = draft
            self.review = DraftReviewFlow(
                session_id=self.id,
                draft=draft,
                requirements=self.gathered.model_copy(),
                lock=self.lock,
            )
            self.screen = Screen.DRAFT_REVIEW
            return self.review

    def approve_draft(self) -> FinalPolicyFlow:
        with self.lock:
            self._require(Screen.DRAFT_REVIEW)
            if self.review is None:
                raise WizardStateError("Draft review is not active")
            approved = self.review.approved_draft()
            self.review.abort()
            self.review = None
            self._draft = approved
            self._final_draft = None
            self.final = FinalPolicyFlow(
                session_id=self.id,
                draft=approved,
                organization=self.cfg.organization,
                lock=self.lock,
            )
            self.screen = Screen.FINAL_POLICY
            return self.final

    def back_to_interview(self) -> InterviewFlow:
        with self.lock:
            self._require(Screen.DRAFT_REVIEW)
            if self.review is not None:
                self.review.abort()
                self._draft = self.review.draft
                self.review = None
            if self.interview is None:
                self.interview = self._new_interview()
            self.screen = Screen.INTERVIEW
            return self.interview

    def back_to_dashboard(self) -> Screen:
        return self.navigate(Screen.DASHBOARD)
