"""Tests for optimization sessions: analyze, edit, apply and reanalyze."""

import asyncio
import logging

import pytest

from conftest import StubScorer
from resume_optimizer.errors import (
    AlreadyInProgressError,
    InvalidInputError,
    NotFoundError,
    PatchNotApplicableError,
    ScorerFailureError,
)
from resume_optimizer.models.analysis import Dimension, KeywordAnalysis, MissingKeyword
from resume_optimizer.models.lifecycle import AnalysisStatus, SuggestionStatus
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services.session import OptimizationSession, WorkingDocument

RESUME = "Managed projects."
JOB = JobContext(title="Frontend Lead", keywords=["React", "Leadership"])


class _BlockingScorer(StubScorer):
    def __init__(self, dimension, result):
        super().__init__(dimension, result)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def ascore(self, resume_text, job_context=None):
        self.started.set()
        await self.release.wait()
        return self.result


@pytest.fixture
def patch_scorers(stub_scorers):
    """Stub scorers whose keyword result yields one patch on ``RESUME``."""
    stub_scorers[Dimension.KEYWORD].result = KeywordAnalysis(
        score=0,
        total_keywords=1,
        missing_keywords=[MissingKeyword(keyword="React", importance="high")],
    )
    return stub_scorers


@pytest.fixture
def session(patch_scorers):
    return OptimizationSession(RESUME, JOB, scorers=patch_scorers)


class TestWorkingDocument:
    def test_replace_bumps_version(self):
        doc = WorkingDocument("a")
        assert doc.version == 0
        assert doc.replace("b") == 1
        assert doc.text == "b"


@pytest.mark.integration
class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_adopt_apply_reanalyze(self):
        session = OptimizationSession(RESUME, JOB)
        first = await session.analyze()

        assert [m.keyword for m in first.keyword_analysis.missing_keywords] == ["React", "Leadership"]
        top = first.suggestions[0]
        assert top.id == "keyword-1"
        assert top.before_text == "Managed projects."
        assert top.after_text == "Managed projects leveraging React and Leadership, delivering a [X]% improvement."

        session.adopt_suggestion(first.id, top.id)
        patched = session.apply_to_document(first.id, top.id)
        assert patched.applied
        assert patched.new_text == top.after_text
        assert session.document.text == top.after_text

        second = await session.reanalyze()
        assert second.id != first.id
        assert second.keyword_analysis.missing_keywords == []
        assert second.keyword_analysis.score == 100
        assert session.status == AnalysisStatus.IDLE


class TestSuggestionFlow:
    @pytest.mark.asyncio
    async def test_apply_adopted_patch(self, session):
        result = await session.analyze()
        assert result.suggestions[0].id == "keyword-1"

        state = session.adopt_suggestion(result.id, "keyword-1")
        assert state.status == SuggestionStatus.ADOPTED

        patched = session.apply_to_document(result.id, "keyword-1")
        assert patched.applied
        assert patched.document_version == 1
        assert "React" in patched.new_text

    @pytest.mark.asyncio
    async def test_proposed_suggestion_leaves_text(self, session):
        result = await session.analyze()
        patched = session.apply_to_document(result.id, "keyword-1")
        assert not patched.applied
        assert patched.new_text == RESUME
        assert session.document.version == 0

    @pytest.mark.asyncio
    async def test_applied_at_most_once(self, session):
        result = await session.analyze()
        session.adopt_suggestion(result.id, "keyword-1")
        first = session.apply_to_document(result.id, "keyword-1")
        second = session.apply_to_document(result.id, "keyword-1")
        assert first.applied
        assert not second.applied
        assert second.document_version == first.document_version
        assert second.new_text == first.new_text

    @pytest.mark.asyncio
    async def test_modified_patch_uses_user_text(self, session):
        result = await session.analyze()
        session.modify_suggestion(result.id, "keyword-1", "Led React projects for 3 teams.")
        patched = session.apply_to_document(result.id, "keyword-1")
        assert patched.new_text == "Led React projects for 3 teams."

    @pytest.mark.asyncio
    async def test_patch_fails_after_conflicting_edit(self, session):
        result = await session.analyze()
        session.adopt_suggestion(result.id, "keyword-1")
        session.edit_document("Directed projects.")
        with pytest.raises(PatchNotApplicableError):
            session.apply_to_document(result.id, "keyword-1")
        assert session.document.text == "Directed projects."

    @pytest.mark.asyncio
    async def test_unknown_suggestion(self, session):
        result = await session.analyze()
        with pytest.raises(NotFoundError):
            session.adopt_suggestion(result.id, "grammar-7")
        with pytest.raises(NotFoundError):
            session.apply_to_document(result.id, "grammar-7")

    @pytest.mark.asyncio
    async def test_listeners_receive_events(self, session):
        events = []
        session.subscribe(events.append)
        result = await session.analyze()
        session.adopt_suggestion(result.id, "keyword-1")
        session.adopt_suggestion(result.id, "keyword-1")
        assert len(events) == 1
        assert events[0].new_status == SuggestionStatus.ADOPTED

    def test_actions_before_analysis(self, session):
        with pytest.raises(NotFoundError):
            session.adopt_suggestion("analysis_missing", "keyword-1")
        assert session.suggestion_states() == []


class TestReanalysis:
    @pytest.mark.asyncio
    async def test_resets_lifecycle_and_invalidates_old_ids(self, session):
        first = await session.analyze()
        session.adopt_suggestion(first.id, "keyword-1")

        second = await session.reanalyze()

        assert second.id != first.id
        assert session.current_result is second
        assert all(s.status == SuggestionStatus.PROPOSED for s in session.suggestion_states())
        assert all(s.analysis_id == second.id for s in session.suggestion_states())
        with pytest.raises(NotFoundError):
            session.adopt_suggestion(first.id, "keyword-1")
        with pytest.raises(NotFoundError):
            session.apply_to_document(first.id, "keyword-1")

    @pytest.mark.asyncio
    async def test_new_job_context(self, session):
        await session.analyze()
        target = JobContext(title="Engineering Manager")
        result = await session.reanalyze(target)
        assert session.job_context == target
        assert result.metadata.target_job_title == "Engineering Manager"

    @pytest.mark.asyncio
    async def test_rejects_concurrent_run(self, stub_scorers):
        blocking = _BlockingScorer(Dimension.FORMAT, stub_scorers[Dimension.FORMAT].result)
        stub_scorers[Dimension.FORMAT] = blocking
        session = OptimizationSession(RESUME, JOB, scorers=stub_scorers)

        task = asyncio.create_task(session.reanalyze())
        await asyncio.wait_for(blocking.started.wait(), timeout=5)
        assert session.status == AnalysisStatus.ANALYZING

        with pytest.raises(AlreadyInProgressError):
            await session.reanalyze()

        blocking.release.set()
        result = await task
        assert session.current_result is result
        assert session.status == AnalysisStatus.IDLE

    @pytest.mark.asyncio
    async def test_cancelled_run_returns_to_idle(self, stub_scorers):
        blocking = _BlockingScorer(Dimension.GRAMMAR, stub_scorers[Dimension.GRAMMAR].result)
        stub_scorers[Dimension.GRAMMAR] = blocking
        session = OptimizationSession(RESUME, JOB, scorers=stub_scorers)

        task = asyncio.create_task(session.reanalyze())
        await asyncio.wait_for(blocking.started.wait(), timeout=5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.status == AnalysisStatus.IDLE
        assert session.current_result is None

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_result_and_recovers(self, session, patch_scorers):
        first = await session.analyze()
        patch_scorers[Dimension.QUANTITATIVE].error = RuntimeError("boom")

        with pytest.raises(ScorerFailureError):
            await session.reanalyze()
        assert session.status == AnalysisStatus.IDLE
        assert session.current_result is first
        assert "boom" in session.view().last_error

        patch_scorers[Dimension.QUANTITATIVE].error = None
        second = await session.reanalyze()
        assert session.status == AnalysisStatus.IDLE
        assert session.last_error is None
        assert second.id != first.id

    @pytest.mark.asyncio
    async def test_failed_run_passes_through_failed_to_idle(self, session, caplog):
        session.edit_document("   ")
        with caplog.at_level(logging.DEBUG, logger="resume_optimizer.services.session"):
            with pytest.raises(InvalidInputError):
                await session.reanalyze()

        assert session.status == AnalysisStatus.IDLE
        assert isinstance(session.last_error, InvalidInputError)
        transitions = [r.getMessage().split(": ", 1)[1] for r in caplog.records if " -> " in r.getMessage()]
        assert transitions == ["idle -> analyzing", "analyzing -> failed", "failed -> idle"]

    @pytest.mark.asyncio
    async def test_failed_run_keeps_job_context(self, session, patch_scorers):
        patch_scorers[Dimension.FORMAT].error = RuntimeError("boom")
        with pytest.raises(ScorerFailureError):
            await session.reanalyze(JobContext(title="Engineering Manager"))
        assert session.job_context == JOB


class TestDocumentEdits:
    def test_edit_bumps_version(self, session):
        assert session.edit_document("New text") == 1
        assert session.edit_document("Newer text") == 2
        assert session.view().document_text == "Newer text"

    def test_edit_rejects_oversized_text(self, session, monkeypatch):
        from resume_optimizer.config import settings

        monkeypatch.setattr(settings, "max_resume_chars", 10)
        with pytest.raises(InvalidInputError):
            session.edit_document("x" * 11)
        assert session.document.version == 0

    @pytest.mark.asyncio
    async def test_view(self, session):
        result = await session.analyze()
        view = session.view()
        assert view.id == session.id
        assert view.status == AnalysisStatus.IDLE
        assert view.analysis.id == result.id
        assert len(view.suggestion_states) == len(result.suggestions)
        assert view.last_error is None
