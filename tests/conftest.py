"""Shared test configuration, pytest markers and stub scorers."""

import pytest

from resume_optimizer.models.analysis import (
    Dimension,
    FormatAnalysis,
    GrammarCheck,
    KeywordAnalysis,
    QuantitativeAnalysis,
)
from resume_optimizer.services.scorers.base import DimensionScorer
from resume_optimizer.services.scorers.registry import clear as clear_registry


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: runs the full rule-based scorer stack end to end"
    )
    config.addinivalue_line(
        "markers", "gemini: exercises the Gemini-backed scorer with a stubbed client"
    )


@pytest.fixture(autouse=True)
def _reset_registry():
    """Clear scorer registry before each test."""
    clear_registry()
    yield
    clear_registry()


SAMPLE_RESUME = """Jane Doe
jane.doe@example.com | (555) 123-4567 | linkedin.com/in/janedoe

Summary
Backend engineer with six years of Python experience building data platforms.

Experience
Senior Engineer, Acme Corp, Jan 2020 - Present
- Led migration of 40 services to Kubernetes, cutting deploy time by 60%
- Built REST APIs in Python and FastAPI serving 2M requests per day
- Responsible for on-call rotation
- Worked on the billing system

Education
B.S. Computer Science, State University, 2015

Skills
Python, FastAPI, PostgreSQL, Docker, Kubernetes, AWS
"""


@pytest.fixture
def sample_resume() -> str:
    return SAMPLE_RESUME


class StubScorer(DimensionScorer):
    """Returns a fixed result; optionally raises instead."""

    name = "stub"

    def __init__(self, dimension: Dimension, result=None, error: Exception | None = None):
        self.dimension = dimension
        self.result = result
        self.error = error
        self.calls = 0

    def score(self, resume_text, job_context=None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def default_stub_results() -> dict[Dimension, object]:
    return {
        Dimension.KEYWORD: KeywordAnalysis(score=80, total_keywords=0),
        Dimension.GRAMMAR: GrammarCheck(score=90, total_issues=0, overall_readability=70),
        Dimension.FORMAT: FormatAnalysis(score=50, ats_compatibility=60),
        Dimension.QUANTITATIVE: QuantitativeAnalysis(
            score=40, achievements_with_numbers=2, total_achievements=5
        ),
    }


@pytest.fixture
def stub_scorers() -> dict[Dimension, StubScorer]:
    """One deterministic stub per dimension; tests may swap results or errors."""
    return {
        dimension: StubScorer(dimension, result)
        for dimension, result in default_stub_results().items()
    }
