"""Per-dimension findings and the immutable AnalysisResult snapshot."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import Field, model_validator

from resume_optimizer.models.base import Score, UnitInterval, WireModel
from resume_optimizer.models.suggestion import Suggestion


class Dimension(str, Enum):
    KEYWORD = "keyword"
    GRAMMAR = "grammar"
    FORMAT = "format"
    QUANTITATIVE = "quantitative"


Importance = Literal["low", "medium", "high"]


# ---------------------------------------------------------------------------
# Keyword dimension
# ---------------------------------------------------------------------------

class MatchedKeyword(WireModel):
    keyword: str
    frequency: int = Field(ge=0)
    relevance_score: UnitInterval
    context_snippets: list[str] = []


class MissingKeyword(WireModel):
    keyword: str
    importance: Importance
    suggested_placement: list[str] = []
    related_terms: list[str] = []


class KeywordAnalysis(WireModel):
    score: Score
    total_keywords: int = Field(ge=0)
    matched_keywords: list[MatchedKeyword] = []
    missing_keywords: list[MissingKeyword] = []
    keyword_density: dict[str, float] = {}
    recommendations: list[str] = []


# ---------------------------------------------------------------------------
# Grammar / readability dimension
# ---------------------------------------------------------------------------

class TextSpan(WireModel):
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    line: int | None = None
    column: int | None = None


class GrammarIssue(WireModel):
    id: str
    type: Literal["spelling", "grammar", "punctuation", "style"]
    severity: Literal["error", "warning", "suggestion"]
    rule: str
    message: str
    context: str = ""
    suggestions: list[str] = []
    position: TextSpan


class GrammarCheck(WireModel):
    score: Score
    total_issues: int = Field(ge=0)
    issues: list[GrammarIssue] = []
    overall_readability: Score


# ---------------------------------------------------------------------------
# Format / ATS dimension
# ---------------------------------------------------------------------------

class FormatIssue(WireModel):
    type: Literal["spacing", "font", "structure", "length", "sections"]
    severity: Literal["low", "medium", "high"]
    rule: str
    description: str
    recommendation: str
    section: str = "general"
    # Exact source text and its proposed replacement, when a literal fix exists
    context: str | None = None
    replacement: str | None = None


class SectionStructure(WireModel):
    name: str
    present: bool
    order: int = Field(ge=1)
    recommended: bool


class FormatAnalysis(WireModel):
    score: Score
    ats_compatibility: Score
    issues: list[FormatIssue] = []
    recommendations: list[str] = []
    section_structure: list[SectionStructure] = []


# ---------------------------------------------------------------------------
# Quantitative-achievement dimension
# ---------------------------------------------------------------------------

class QuantitativeSuggestion(WireModel):
    section: str
    original_text: str
    suggested_text: str | None = None
    reasoning: str


class QuantitativeAnalysis(WireModel):
    score: Score
    achievements_with_numbers: int = Field(ge=0)
    total_achievements: int = Field(ge=0)
    impact_words: list[str] = []
    suggestions: list[QuantitativeSuggestion] = []

    @model_validator(mode="after")
    def _quantified_within_total(self) -> "QuantitativeAnalysis":
        if self.achievements_with_numbers > self.total_achievements:
            raise ValueError("achievements_with_numbers exceeds total_achievements")
        return self


DimensionResult = KeywordAnalysis | GrammarCheck | FormatAnalysis | QuantitativeAnalysis

RESULT_TYPES: dict[Dimension, type] = {
    Dimension.KEYWORD: KeywordAnalysis,
    Dimension.GRAMMAR: GrammarCheck,
    Dimension.FORMAT: FormatAnalysis,
    Dimension.QUANTITATIVE: QuantitativeAnalysis,
}


# ---------------------------------------------------------------------------
# Aggregate snapshot
# ---------------------------------------------------------------------------

class AnalysisMetadata(WireModel):
    target_job_title: str
    target_company: str | None = None
    word_count: int = Field(ge=0)
    analysis_date: datetime


class AnalysisResult(WireModel):
    """Immutable snapshot produced by one analysis run."""

    id: str
    overall_score: Score
    ats_score: Score
    keyword_analysis: KeywordAnalysis
    grammar_check: GrammarCheck
    format_analysis: FormatAnalysis
    quantitative_analysis: QuantitativeAnalysis
    suggestions: list[Suggestion] = []
    strengths: list[str] = []
    weaknesses: list[str] = []
    created_at: datetime
    processing_time_ms: int = Field(ge=0)
    metadata: AnalysisMetadata | None = None

    @model_validator(mode="after")
    def _suggestions_prioritized(self) -> "AnalysisResult":
        priorities = [s.priority for s in self.suggestions]
        if priorities != list(range(1, len(priorities) + 1)):
            raise ValueError("suggestion priorities must be dense and ascending from 1")
        ids = [s.id for s in self.suggestions]
        if len(set(ids)) != len(ids):
            raise ValueError("suggestion ids must be unique within an analysis")
        return self

    def get_suggestion(self, suggestion_id: str) -> Suggestion | None:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    def dimension_scores(self) -> dict[Dimension, int]:
        return {
            Dimension.KEYWORD: self.keyword_analysis.score,
            Dimension.GRAMMAR: self.grammar_check.score,
            Dimension.FORMAT: self.format_analysis.score,
            Dimension.QUANTITATIVE: self.quantitative_analysis.score,
        }
