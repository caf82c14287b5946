"""Tests for the Keyword Match scorer."""

from resume_optimizer.models.analysis import KeywordAnalysis
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services.scorers.keyword import (
    NO_KEYWORDS_SCORE,
    KeywordScorer,
    resolve_target_keywords,
)


class TestResolveTargetKeywords:
    def test_explicit_keywords_are_high_importance(self):
        ctx = JobContext(title="Backend Engineer", keywords=["Python", "Go"])
        assert resolve_target_keywords(ctx) == [("Python", "high"), ("Go", "high")]

    def test_keywords_from_description(self):
        ctx = JobContext(
            title="Backend Developer",
            description="We need Python and Docker. Python is used daily.",
        )
        targets = dict(resolve_target_keywords(ctx))
        assert targets["python"] == "high"
        assert targets["docker"] == "medium"

    def test_title_fallback(self):
        ctx = JobContext(title="Python Developer")
        assert resolve_target_keywords(ctx) == [("Python", "high")]

    def test_no_context(self):
        assert resolve_target_keywords(None) == []


class TestKeywordScorer:
    def setup_method(self):
        self.scorer = KeywordScorer()

    def test_matched_and_missing(self, sample_resume):
        ctx = JobContext(title="Platform Engineer", keywords=["Python", "Kubernetes", "Terraform"])
        result = self.scorer.score(sample_resume, ctx)

        assert isinstance(result, KeywordAnalysis)
        assert result.total_keywords == 3
        assert [m.keyword for m in result.matched_keywords] == ["Python", "Kubernetes"]
        assert [m.keyword for m in result.missing_keywords] == ["Terraform"]
        assert result.score == 67

    def test_frequency_relevance_and_snippets(self, sample_resume):
        ctx = JobContext(title="Platform Engineer", keywords=["Python"])
        matched = self.scorer.score(sample_resume, ctx).matched_keywords[0]
        assert matched.frequency == 3
        assert matched.relevance_score == 1.0
        assert len(matched.context_snippets) == 3
        assert "Python" in matched.context_snippets[0]

    def test_missing_keyword_details(self):
        ctx = JobContext(title="Platform Engineer", keywords=["Terraform", "Mentoring", "K8s"])
        result = self.scorer.score("Summary\nBackend engineer building data platforms for analysts", ctx)
        by_name = {m.keyword: m for m in result.missing_keywords}
        assert by_name["Terraform"].suggested_placement == ["skills", "experience"]
        assert by_name["Mentoring"].suggested_placement == ["summary", "experience"]
        assert "kubernetes" in by_name["K8s"].related_terms
        assert any("Terraform" in r for r in result.recommendations)

    def test_synonym_counts_as_match(self):
        ctx = JobContext(title="Engineer", keywords=["Leadership"])
        result = self.scorer.score("Led a team of five engineers on the billing platform", ctx)
        assert result.score == 100
        assert result.matched_keywords[0].keyword == "Leadership"

    def test_approximate_match_gets_partial_credit(self):
        ctx = JobContext(title="Engineer", keywords=["Kubernetes"])
        result = self.scorer.score("Deployed Kubernets clusters for the platform team", ctx)
        assert result.score == 60
        assert result.matched_keywords[0].frequency == 1
        assert result.matched_keywords[0].relevance_score == 0.3

    def test_no_role_section_bonus_outside_role_sections(self):
        text = "Education\nB.S. Physics with Python coursework\n\nExperience\n- Built dashboards for sales\n"
        ctx = JobContext(title="Engineer", keywords=["Python"])
        matched = self.scorer.score(text, ctx).matched_keywords[0]
        assert matched.relevance_score == 0.5

    def test_no_keywords_is_neutral(self, sample_resume):
        result = self.scorer.score(sample_resume, JobContext(title="Senior Engineer"))
        assert result.score == NO_KEYWORDS_SCORE
        assert result.total_keywords == 0
        assert result.recommendations

    def test_empty_text(self):
        ctx = JobContext(title="Engineer", keywords=["Python"])
        result = self.scorer.score("", ctx)
        assert result.score == 0
        assert [m.keyword for m in result.missing_keywords] == ["Python"]
        assert "empty" in result.recommendations[0]

    def test_keyword_density(self, sample_resume):
        ctx = JobContext(title="Engineer", keywords=["Python", "Terraform"])
        result = self.scorer.score(sample_resume, ctx)
        assert result.keyword_density["Python"] > 0
        assert result.keyword_density["Terraform"] == 0.0

    def test_deterministic(self, sample_resume):
        ctx = JobContext(title="Engineer", keywords=["Python", "Terraform"])
        assert self.scorer.score(sample_resume, ctx) == self.scorer.score(sample_resume, ctx)
