import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from resume_optimizer.api.router import limiter, router
from resume_optimizer.config import settings
from resume_optimizer.errors import (
    AlreadyInProgressError,
    InvalidInputError,
    NotFoundError,
    PatchNotApplicableError,
    ResumeOptimizerError,
    ScorerFailureError,
)
from resume_optimizer.models.responses import ErrorResponse
from resume_optimizer.services.analysis_store import AnalysisStore

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[ResumeOptimizerError], int] = {
    InvalidInputError: 400,
    ScorerFailureError: 502,
    NotFoundError: 404,
    PatchNotApplicableError: 409,
    AlreadyInProgressError: 409,
}

app = FastAPI(
    title="Resume Optimizer API",
    description="Resume analysis, ranked suggestions and an adopt/ignore/modify editing loop",
    version="1.0.0",
)

app.state.limiter = limiter
app.state.sessions = {}
app.state.analysis_store = AnalysisStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ResumeOptimizerError)
async def engine_error_handler(request: Request, exc: ResumeOptimizerError) -> JSONResponse:
    status = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=status, content=body.model_dump())


app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.include_router(router)
