from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from resume_optimizer.models.analysis import AnalysisResult
from resume_optimizer.models.base import WireModel


class JobContext(WireModel):
    """Target job the resume is analyzed against."""

    title: str = Field(..., min_length=1, max_length=200)
    company: str | None = None
    keywords: list[str] = []
    description: str | None = Field(default=None, max_length=10000)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Target job title is required")
        return value.strip()

    @field_validator("keywords", mode="before")
    @classmethod
    def _split_keywords(cls, value):
        # The job form submits keywords as one comma-separated string
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        seen: set[str] = set()
        keywords = []
        for kw in value:
            kw = str(kw).strip()
            if kw and kw.lower() not in seen:
                seen.add(kw.lower())
                keywords.append(kw)
        return keywords


class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeRequest(_RequestModel):
    resume_text: str = Field(..., max_length=50000, description="Plain text resume content")
    job_context: JobContext


class CreateSessionRequest(AnalyzeRequest):
    analyze: bool = True


class DocumentEditRequest(_RequestModel):
    text: str = Field(..., max_length=50000)


class ReanalyzeRequest(_RequestModel):
    job_context: JobContext | None = None


class ModifySuggestionRequest(_RequestModel):
    analysis_id: str
    text: str = Field(..., max_length=5000)


class SuggestionActionRequest(_RequestModel):
    analysis_id: str


class SaveAnalysisRequest(_RequestModel):
    analysis_result: AnalysisResult
    user_id: str | None = None
