"""Shared dependencies for API routes."""

from fastapi import HTTPException, Request

from resume_optimizer.services.analysis_store import AnalysisStore
from resume_optimizer.services.session import OptimizationSession


def get_sessions(request: Request) -> dict[str, OptimizationSession]:
    return request.app.state.sessions


def get_session(request: Request, session_id: str) -> OptimizationSession:
    session = request.app.state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id!r} not found")
    return session


def get_analysis_store(request: Request) -> AnalysisStore:
    return request.app.state.analysis_store
