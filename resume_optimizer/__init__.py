"""Resume analysis and suggestion lifecycle engine."""

from resume_optimizer.errors import (
    AlreadyInProgressError,
    InvalidInputError,
    NotFoundError,
    PatchNotApplicableError,
    ResumeOptimizerError,
    ScorerFailureError,
)
from resume_optimizer.services.orchestrator import analyze
from resume_optimizer.services.patch_applier import apply_patch
from resume_optimizer.services.session import OptimizationSession, WorkingDocument

__version__ = "1.0.0"

__all__ = [
    "AlreadyInProgressError",
    "InvalidInputError",
    "NotFoundError",
    "OptimizationSession",
    "PatchNotApplicableError",
    "ResumeOptimizerError",
    "ScorerFailureError",
    "WorkingDocument",
    "analyze",
    "apply_patch",
]
