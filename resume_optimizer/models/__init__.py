"""Pydantic contracts shared by the scorers, the engine and the HTTP surface."""

from resume_optimizer.models.analysis import (
    AnalysisMetadata,
    AnalysisResult,
    Dimension,
    FormatAnalysis,
    FormatIssue,
    GrammarCheck,
    GrammarIssue,
    KeywordAnalysis,
    MatchedKeyword,
    MissingKeyword,
    QuantitativeAnalysis,
    QuantitativeSuggestion,
    SectionStructure,
    TextSpan,
)
from resume_optimizer.models.lifecycle import (
    AnalysisStatus,
    LifecycleEvent,
    NotFound,
    SuggestionState,
    SuggestionStatus,
)
from resume_optimizer.models.requests import JobContext
from resume_optimizer.models.responses import PatchResult, SavedAnalysis, SessionView
from resume_optimizer.models.suggestion import Impact, Suggestion, SuggestionType

__all__ = [
    "AnalysisMetadata",
    "AnalysisResult",
    "AnalysisStatus",
    "Dimension",
    "FormatAnalysis",
    "FormatIssue",
    "GrammarCheck",
    "GrammarIssue",
    "Impact",
    "JobContext",
    "KeywordAnalysis",
    "LifecycleEvent",
    "MatchedKeyword",
    "MissingKeyword",
    "NotFound",
    "PatchResult",
    "QuantitativeAnalysis",
    "QuantitativeSuggestion",
    "SavedAnalysis",
    "SectionStructure",
    "SessionView",
    "Suggestion",
    "SuggestionState",
    "SuggestionStatus",
    "SuggestionType",
    "TextSpan",
]
