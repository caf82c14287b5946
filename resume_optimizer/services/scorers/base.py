"""Abstract base class for all dimension scorers."""

import asyncio
import logging
from abc import ABC, abstractmethod

from resume_optimizer.models.analysis import Dimension, DimensionResult
from resume_optimizer.models.requests import JobContext

logger = logging.getLogger(__name__)


class DimensionScorer(ABC):
    """Base class for dimension scorers.

    Subclasses must implement:
        - dimension: which analysis axis the scorer produces
        - score(resume_text, job_context): return the dimension result

    Scorers hold no per-call mutable state, so one instance can serve
    concurrent analyses. ``score`` must not raise on well-formed text; empty
    or very short input yields minimum scores plus a finding.
    Remote-backed scorers override ``ascore`` and own their retry policy.
    """

    dimension: Dimension
    name: str = ""
    _loaded: bool = False

    def load(self) -> None:
        """Load artifacts or clients. Called once before first use."""

    @abstractmethod
    def score(self, resume_text: str, job_context: JobContext | None = None) -> DimensionResult:
        """Score the resume along this scorer's dimension."""

    async def ascore(self, resume_text: str, job_context: JobContext | None = None) -> DimensionResult:
        """Run ``score`` in a worker thread so scorers execute concurrently."""
        self.ensure_loaded()
        return await asyncio.to_thread(self.score, resume_text, job_context)

    def ensure_loaded(self) -> None:
        """Load scorer if not already loaded."""
        if not self._loaded:
            logger.info("Loading scorer: %s", self.name or self.dimension.value)
            self.load()
            self._loaded = True
