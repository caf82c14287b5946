"""Suggestion lifecycle records and events."""

from dataclasses import dataclass
from enum import Enum

from pydantic import model_validator

from resume_optimizer.models.base import WireModel


class SuggestionStatus(str, Enum):
    PROPOSED = "proposed"
    ADOPTED = "adopted"
    IGNORED = "ignored"
    MODIFIED = "modified"


class SuggestionState(WireModel):
    analysis_id: str
    suggestion_id: str
    status: SuggestionStatus = SuggestionStatus.PROPOSED
    modified_text: str | None = None

    @model_validator(mode="after")
    def _modified_text_only_when_modified(self) -> "SuggestionState":
        if self.status == SuggestionStatus.MODIFIED and self.modified_text is None:
            raise ValueError("modified state requires modified_text")
        if self.status != SuggestionStatus.MODIFIED and self.modified_text is not None:
            raise ValueError("modified_text is only kept for modified suggestions")
        return self


@dataclass(frozen=True)
class LifecycleEvent:
    analysis_id: str
    suggestion_id: str
    old_status: SuggestionStatus
    new_status: SuggestionStatus


@dataclass(frozen=True)
class NotFound:
    """Outcome of a transition that referenced an unknown or stale id."""

    analysis_id: str
    suggestion_id: str


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    FAILED = "failed"
