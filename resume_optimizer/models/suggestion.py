"""Suggestion records emitted by the suggestion generator."""

from enum import Enum

from pydantic import Field, model_validator

from resume_optimizer.models.base import WireModel


class Impact(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _IMPACT_RANK[self]


_IMPACT_RANK = {Impact.LOW: 1, Impact.MEDIUM: 2, Impact.HIGH: 3}


class SuggestionType(str, Enum):
    """Closed set of suggestion tags.

    Unknown tags (e.g. from a remote scorer) collapse to OTHER instead of
    failing validation.
    """

    KEYWORD = "keyword"
    ACHIEVEMENT = "achievement"
    GRAMMAR = "grammar"
    STRUCTURE = "structure"
    FORMAT = "format"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> "SuggestionType":
        return cls.OTHER


class Suggestion(WireModel):
    id: str
    type: SuggestionType
    title: str
    description: str
    suggestion_text: str
    impact: Impact
    priority: int = Field(ge=1)
    estimated_score_improvement: int = Field(default=0, ge=0)
    before_text: str | None = None
    after_text: str | None = None
    section: str = "general"

    @model_validator(mode="after")
    def _patch_fully_specified(self) -> "Suggestion":
        if (self.before_text is None) != (self.after_text is None):
            raise ValueError("before_text and after_text must be given together")
        if self.before_text == "":
            raise ValueError("before_text must not be empty")
        return self

    @property
    def has_patch(self) -> bool:
        return self.before_text is not None
