from datetime import datetime

from resume_optimizer.models.analysis import AnalysisResult
from resume_optimizer.models.base import WireModel
from resume_optimizer.models.lifecycle import AnalysisStatus, SuggestionState
from resume_optimizer.models.requests import JobContext


class PatchResult(WireModel):
    new_text: str
    applied: bool = False
    document_version: int = 0


class SessionView(WireModel):
    id: str
    status: AnalysisStatus
    document_text: str
    document_version: int
    job_context: JobContext | None = None
    analysis: AnalysisResult | None = None
    suggestion_states: list[SuggestionState] = []
    last_error: str | None = None


class SavedAnalysis(WireModel):
    id: str
    user_id: str | None = None
    saved_at: datetime
    analysis: AnalysisResult


class ErrorResponse(WireModel):
    error: str
    detail: str
