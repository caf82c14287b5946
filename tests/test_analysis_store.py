"""Tests for the saved-analysis store."""

import threading
from datetime import datetime, timezone

import pytest

from resume_optimizer.errors import NotFoundError
from resume_optimizer.models.analysis import (
    AnalysisResult,
    FormatAnalysis,
    GrammarCheck,
    KeywordAnalysis,
    QuantitativeAnalysis,
)
from resume_optimizer.services.analysis_store import AnalysisStore


def _result(analysis_id):
    return AnalysisResult(
        id=analysis_id,
        overall_score=70,
        ats_score=65,
        keyword_analysis=KeywordAnalysis(score=70, total_keywords=0),
        grammar_check=GrammarCheck(score=70, total_issues=0, overall_readability=70),
        format_analysis=FormatAnalysis(score=70, ats_compatibility=70),
        quantitative_analysis=QuantitativeAnalysis(score=70, achievements_with_numbers=0, total_achievements=0),
        created_at=datetime.now(timezone.utc),
        processing_time_ms=5,
    )


class TestAnalysisStore:
    def setup_method(self):
        self.store = AnalysisStore()

    def test_save_and_get(self):
        result = _result("analysis_a")
        record = self.store.save(result, user_id="u1")
        assert record.id == "analysis_a"
        assert record.user_id == "u1"
        assert self.store.get("analysis_a").analysis is result

    def test_missing_id(self):
        with pytest.raises(NotFoundError):
            self.store.get("analysis_missing")

    def test_list_for_user_newest_first(self):
        self.store.save(_result("analysis_a"), user_id="u1")
        self.store.save(_result("analysis_b"), user_id="u2")
        self.store.save(_result("analysis_c"), user_id="u1")
        assert [r.id for r in self.store.list_for_user("u1")] == ["analysis_c", "analysis_a"]
        assert self.store.list_for_user("nobody") == []

    def test_resave_moves_to_front(self):
        self.store.save(_result("analysis_a"), user_id="u1")
        self.store.save(_result("analysis_b"), user_id="u1")
        self.store.save(_result("analysis_a"), user_id="u1")
        assert [r.id for r in self.store.list_for_user("u1")] == ["analysis_a", "analysis_b"]
        assert len(self.store) == 2

    def test_anonymous_saves_are_not_listed_for_users(self):
        self.store.save(_result("analysis_a"))
        assert self.store.list_for_user("u1") == []
        assert self.store.get("analysis_a").user_id is None

    def test_delete(self):
        self.store.save(_result("analysis_a"), user_id="u1")
        self.store.save(_result("analysis_b"), user_id="u1")
        self.store.delete("analysis_a")
        assert len(self.store) == 1
        with pytest.raises(NotFoundError):
            self.store.get("analysis_a")

    def test_delete_unknown_id(self):
        with pytest.raises(NotFoundError):
            self.store.delete("analysis_missing")

    def test_delete_checks_owner(self):
        self.store.save(_result("analysis_a"), user_id="u1")
        with pytest.raises(NotFoundError):
            self.store.delete("analysis_a", user_id="u2")
        self.store.delete("analysis_a", user_id="u1")
        assert len(self.store) == 0

    def test_len_waits_for_lock(self):
        self.store.save(_result("analysis_a"))
        sizes = []
        with self.store._lock:
            reader = threading.Thread(target=lambda: sizes.append(len(self.store)))
            reader.start()
            reader.join(timeout=0.1)
            assert reader.is_alive()
        reader.join(timeout=5)
        assert sizes == [1]
