"""Optimization session: working document, current analysis and lifecycle state.

A session is an explicit value owned by its caller; nothing here is a module
level singleton, so any number of sessions can run side by side.

Status machine: idle -> analyzing -> idle on success, and
idle -> analyzing -> failed -> idle on error. The error is recorded in
``last_error`` and raised to the caller. At most one analysis is in flight per
session; a second request is rejected rather than cancelling the first.

Every write to the working document (patch applications and direct edits)
goes through the document lock, as does publication of a new analysis.
"""

import asyncio
import logging
import threading
import uuid

from resume_optimizer.config import settings
from resume_optimizer.errors import (
    AlreadyInProgressError,
    InvalidInputError,
    NotFoundError,
)
from resume_optimizer.models.analysis import AnalysisResult
from resume_optimizer.models.lifecycle import (
    AnalysisStatus,
    NotFound,
    SuggestionState,
)
from resume_optimizer.models.requests import JobContext
from resume_optimizer.models.responses import PatchResult, SessionView
from resume_optimizer.services import orchestrator
from resume_optimizer.services.lifecycle import Listener, SuggestionLifecycleManager
from resume_optimizer.services.orchestrator import ScorerMap
from resume_optimizer.services.patch_applier import apply_patch

logger = logging.getLogger(__name__)


class WorkingDocument:
    """Resume text being edited, with a version bumped on every write."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._version = 0
        self.lock = threading.RLock()

    @property
    def text(self) -> str:
        return self._text

    @property
    def version(self) -> int:
        return self._version

    def replace(self, text: str) -> int:
        with self.lock:
            self._text = text
            self._version += 1
            return self._version


class OptimizationSession:
    def __init__(
        self,
        resume_text: str,
        job_context: JobContext | None = None,
        scorers: ScorerMap | None = None,
        session_id: str | None = None,
    ) -> None:
        self.id = session_id or f"session_{uuid.uuid4().hex}"
        self.document = WorkingDocument(resume_text)
        self.job_context = job_context
        self.status = AnalysisStatus.IDLE
        self.last_error: Exception | None = None
        self._scorers = scorers
        self._result: AnalysisResult | None = None
        self._lifecycle: SuggestionLifecycleManager | None = None
        self._applied: set[str] = set()
        self._listeners: list[Listener] = []
        self._status_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    @property
    def current_result(self) -> AnalysisResult | None:
        return self._result

    def _set_status(self, status: AnalysisStatus) -> None:
        if status != self.status:
            logger.debug("Session %s: %s -> %s", self.id, self.status.value, status.value)
        self.status = status

    async def analyze(self) -> AnalysisResult:
        """Run the first analysis of the working document."""
        return await self.reanalyze()

    async def reanalyze(self, job_context: JobContext | None = None) -> AnalysisResult:
        """Analyze the current working text and publish the result.

        Raises:
            AlreadyInProgressError: another analysis of this session is running.
            InvalidInputError, ScorerFailureError: from the analysis run; the
                session records ``last_error``, keeps its previous result and
                job context, and returns to ``idle``.
        """
        with self._status_lock:
            if self.status == AnalysisStatus.ANALYZING:
                logger.warning("Rejected reanalysis of %s: run already in progress", self.id)
                raise AlreadyInProgressError(self.id)
            self._set_status(AnalysisStatus.ANALYZING)

        target = job_context if job_context is not None else self.job_context
        snapshot = self.document.text

        try:
            result = await orchestrator.analyze(snapshot, target, self._scorers)
        except asyncio.CancelledError:
            self._set_status(AnalysisStatus.IDLE)
            raise
        except Exception as e:
            self._set_status(AnalysisStatus.FAILED)
            logger.error("Analysis of session %s failed: %s", self.id, e)
            self.last_error = e
            self._set_status(AnalysisStatus.IDLE)
            raise

        self.job_context = target
        self._publish(result)
        return result

    def _publish(self, result: AnalysisResult) -> None:
        lifecycle = SuggestionLifecycleManager(result)
        for listener in self._listeners:
            lifecycle.subscribe(listener)
        with self.document.lock:
            self._result = result
            self._lifecycle = lifecycle
            self._applied = set()
            self.last_error = None
            self._set_status(AnalysisStatus.IDLE)
        logger.info("Session %s now at analysis %s", self.id, result.id)

    # ------------------------------------------------------------------
    # Suggestion lifecycle
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Receive lifecycle events for this and every later analysis."""
        self._listeners.append(listener)
        if self._lifecycle is not None:
            self._lifecycle.subscribe(listener)

    def _require_current(self, analysis_id: str) -> tuple[AnalysisResult, SuggestionLifecycleManager]:
        if self._result is None or self._lifecycle is None or self._result.id != analysis_id:
            raise NotFoundError(analysis_id)
        return self._result, self._lifecycle

    @staticmethod
    def _unwrap(outcome: SuggestionState | NotFound) -> SuggestionState:
        if isinstance(outcome, NotFound):
            raise NotFoundError(outcome.analysis_id, outcome.suggestion_id)
        return outcome

    def suggestion_states(self) -> list[SuggestionState]:
        return self._lifecycle.states() if self._lifecycle is not None else []

    def adopt_suggestion(self, analysis_id: str, suggestion_id: str) -> SuggestionState:
        with self.document.lock:
            _, lifecycle = self._require_current(analysis_id)
            return self._unwrap(lifecycle.adopt(suggestion_id))

    def ignore_suggestion(self, analysis_id: str, suggestion_id: str) -> SuggestionState:
        with self.document.lock:
            _, lifecycle = self._require_current(analysis_id)
            return self._unwrap(lifecycle.ignore(suggestion_id))

    def modify_suggestion(self, analysis_id: str, suggestion_id: str, text: str) -> SuggestionState:
        with self.document.lock:
            _, lifecycle = self._require_current(analysis_id)
            return self._unwrap(lifecycle.modify(suggestion_id, text))

    # ------------------------------------------------------------------
    # Working document writes
    # ------------------------------------------------------------------

    def apply_to_document(self, analysis_id: str, suggestion_id: str) -> PatchResult:
        """Splice the suggestion into the working document per its lifecycle state.

        Proposed, ignored and advisory suggestions leave the text unchanged.
        A suggestion is applied at most once per analysis.

        Raises:
            NotFoundError: stale analysis id or unknown suggestion id.
            PatchNotApplicableError: ``before_text`` is no longer in the text.
        """
        with self.document.lock:
            result, lifecycle = self._require_current(analysis_id)
            suggestion = result.get_suggestion(suggestion_id)
            if suggestion is None:
                raise NotFoundError(analysis_id, suggestion_id)
            state = self._unwrap(lifecycle.state_of(suggestion_id))

            current = self.document.text
            if suggestion_id in self._applied:
                return PatchResult(new_text=current, applied=False, document_version=self.document.version)

            new_text = apply_patch(current, suggestion, state)
            if new_text == current:
                return PatchResult(new_text=current, applied=False, document_version=self.document.version)

            version = self.document.replace(new_text)
            self._applied.add(suggestion_id)
            logger.debug("Applied %s to session %s (version %d)", suggestion_id, self.id, version)
            return PatchResult(new_text=new_text, applied=True, document_version=version)

    def edit_document(self, text: str) -> int:
        """Replace the working text with a direct user edit; returns the new version."""
        if len(text) > settings.max_resume_chars:
            raise InvalidInputError(
                f"Resume text too long (max {settings.max_resume_chars} characters)"
            )
        with self.document.lock:
            return self.document.replace(text)

    def view(self) -> SessionView:
        with self.document.lock:
            return SessionView(
                id=self.id,
                status=self.status,
                document_text=self.document.text,
                document_version=self.document.version,
                job_context=self.job_context,
                analysis=self._result,
                suggestion_states=self.suggestion_states(),
                last_error=str(self.last_error) if self.last_error else None,
            )
