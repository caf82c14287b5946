from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from resume_optimizer.api.dependencies import get_analysis_store, get_session, get_sessions
from resume_optimizer.config import settings
from resume_optimizer.errors import InvalidInputError
from resume_optimizer.models.analysis import AnalysisResult
from resume_optimizer.models.lifecycle import SuggestionState
from resume_optimizer.models.requests import (
    AnalyzeRequest,
    CreateSessionRequest,
    DocumentEditRequest,
    ModifySuggestionRequest,
    ReanalyzeRequest,
    SaveAnalysisRequest,
    SuggestionActionRequest,
)
from resume_optimizer.models.responses import PatchResult, SavedAnalysis, SessionView
from resume_optimizer.services import orchestrator
from resume_optimizer.services.analysis_store import AnalysisStore
from resume_optimizer.services.session import OptimizationSession

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "grammar_backend": settings.grammar_backend,
    }


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(settings.analysis_rate_limit)
async def analyze(request: Request, body: AnalyzeRequest):
    return await orchestrator.analyze(body.resume_text, body.job_context)


# ---------------------------------------------------------------------------
# Optimization sessions
# ---------------------------------------------------------------------------

@router.post("/sessions", response_model=SessionView, status_code=201)
@limiter.limit(settings.analysis_rate_limit)
async def create_session(
    request: Request,
    body: CreateSessionRequest,
    sessions: dict[str, OptimizationSession] = Depends(get_sessions),
):
    session = OptimizationSession(body.resume_text, body.job_context)
    if body.analyze:
        await session.analyze()
    sessions[session.id] = session
    return session.view()


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session_view(session: OptimizationSession = Depends(get_session)):
    return session.view()


@router.put("/sessions/{session_id}/document", response_model=SessionView)
async def edit_document(body: DocumentEditRequest, session: OptimizationSession = Depends(get_session)):
    session.edit_document(body.text)
    return session.view()


@router.post("/sessions/{session_id}/reanalyze", response_model=AnalysisResult)
@limiter.limit(settings.analysis_rate_limit)
async def reanalyze(
    request: Request,
    body: ReanalyzeRequest | None = None,
    session: OptimizationSession = Depends(get_session),
):
    return await session.reanalyze(body.job_context if body else None)


@router.post("/sessions/{session_id}/suggestions/{suggestion_id}/adopt", response_model=SuggestionState)
async def adopt_suggestion(
    suggestion_id: str,
    body: SuggestionActionRequest,
    session: OptimizationSession = Depends(get_session),
):
    return session.adopt_suggestion(body.analysis_id, suggestion_id)


@router.post("/sessions/{session_id}/suggestions/{suggestion_id}/ignore", response_model=SuggestionState)
async def ignore_suggestion(
    suggestion_id: str,
    body: SuggestionActionRequest,
    session: OptimizationSession = Depends(get_session),
):
    return session.ignore_suggestion(body.analysis_id, suggestion_id)


@router.post("/sessions/{session_id}/suggestions/{suggestion_id}/modify", response_model=SuggestionState)
async def modify_suggestion(
    suggestion_id: str,
    body: ModifySuggestionRequest,
    session: OptimizationSession = Depends(get_session),
):
    return session.modify_suggestion(body.analysis_id, suggestion_id, body.text)


@router.post("/sessions/{session_id}/suggestions/{suggestion_id}/apply", response_model=PatchResult)
async def apply_suggestion(
    suggestion_id: str,
    body: SuggestionActionRequest,
    session: OptimizationSession = Depends(get_session),
):
    return session.apply_to_document(body.analysis_id, suggestion_id)


# ---------------------------------------------------------------------------
# Saved analyses
# ---------------------------------------------------------------------------

@router.post("/analyses", response_model=SavedAnalysis, status_code=201)
async def save_analysis(body: SaveAnalysisRequest, store: AnalysisStore = Depends(get_analysis_store)):
    return store.save(body.analysis_result, body.user_id)


@router.get("/analyses/{analysis_id}", response_model=SavedAnalysis)
async def get_analysis(analysis_id: str, store: AnalysisStore = Depends(get_analysis_store)):
    return store.get(analysis_id)


@router.get("/analyses", response_model=list[SavedAnalysis])
async def list_analyses(user_id: str | None = None, store: AnalysisStore = Depends(get_analysis_store)):
    if not user_id:
        raise InvalidInputError("user_id is required to list saved analyses")
    return store.list_for_user(user_id)


@router.delete("/analyses/{analysis_id}")
async def delete_analysis(
    analysis_id: str,
    user_id: str | None = None,
    store: AnalysisStore = Depends(get_analysis_store),
):
    store.delete(analysis_id, user_id)
    return {"deleted": True}
