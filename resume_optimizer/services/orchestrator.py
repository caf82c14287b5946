"""Analysis orchestrator: scorers -> suggestion generator -> aggregator.

Flow:
    resume_text + job_context
      ├─ keyword scorer       ┐
      ├─ grammar scorer       │ concurrent, same immutable text
      ├─ format scorer        │
      └─ quantitative scorer  ┘
                 ↓ join (any failure fails the whole run)
      generate_suggestions(...)  → list[Suggestion]
                 ↓
      build_result(...)          → AnalysisResult

No retries happen here. Remote-backed scorers own their retry policy.
"""

import asyncio
import logging
import time
from collections.abc import Mapping

from resume_optimizer.config import settings
from resume_optimizer.errors import InvalidInputError, ScorerFailureError
from resume_optimizer.models.analysis import RESULT_TYPES, AnalysisResult, Dimension, DimensionResult
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services import aggregator, suggestion_generator
from resume_optimizer.services.scorers.base import DimensionScorer
from resume_optimizer.services.scorers.registry import get_scorer

logger = logging.getLogger(__name__)

ScorerMap = Mapping[Dimension, DimensionScorer]


def validate_resume_text(resume_text: str) -> None:
    if not isinstance(resume_text, str) or not resume_text.strip():
        raise InvalidInputError("Resume text is empty")
    if len(resume_text) > settings.max_resume_chars:
        raise InvalidInputError(
            f"Resume text too long (max {settings.max_resume_chars} characters)"
        )


async def _run_scorer(
    dimension: Dimension,
    scorer: DimensionScorer | None,
    resume_text: str,
    job_context: JobContext | None,
) -> DimensionResult:
    timeout = settings.scorer_timeout_seconds
    try:
        # First registry access loads the scorer
        scorer = scorer or get_scorer(dimension)
        result = await asyncio.wait_for(scorer.ascore(resume_text, job_context), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("%s scorer timed out after %.1fs", dimension.value, timeout)
        raise ScorerFailureError(dimension.value, f"timed out after {timeout}s") from e
    except Exception as e:
        logger.error("%s scorer failed: %s", dimension.value, e)
        raise ScorerFailureError(dimension.value, str(e) or type(e).__name__) from e

    expected = RESULT_TYPES[dimension]
    if not isinstance(result, expected):
        logger.error("%s scorer returned %s", dimension.value, type(result).__name__)
        raise ScorerFailureError(
            dimension.value,
            f"returned {type(result).__name__}, expected {expected.__name__}",
        )
    return result


async def run_scorers(
    resume_text: str,
    job_context: JobContext | None,
    scorers: ScorerMap | None = None,
) -> dict[Dimension, DimensionResult]:
    """Run one scorer per dimension concurrently and join on all of them.

    On the first failure the remaining scorers are cancelled and the
    ``ScorerFailureError`` naming the failed dimension propagates.
    """
    scorers = scorers or {}
    tasks = {
        dimension: asyncio.create_task(
            _run_scorer(dimension, scorers.get(dimension), resume_text, job_context),
            name=f"score-{dimension.value}",
        )
        for dimension in Dimension
    }
    try:
        await asyncio.gather(*tasks.values())
    except BaseException:
        for task in tasks.values():
            task.cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        raise
    return {dimension: task.result() for dimension, task in tasks.items()}


async def analyze(
    resume_text: str,
    job_context: JobContext | None = None,
    scorers: ScorerMap | None = None,
) -> AnalysisResult:
    """Score *resume_text* on every dimension and build a new AnalysisResult.

    Raises:
        InvalidInputError: empty, whitespace-only or oversized text.
        ScorerFailureError: any scorer raised, timed out or returned the wrong type.
    """
    validate_resume_text(resume_text)
    started = time.perf_counter()
    logger.info(
        "Analysis started (%d chars, target=%r)",
        len(resume_text), job_context.title if job_context else None,
    )

    results = await run_scorers(resume_text, job_context, scorers)
    keyword = results[Dimension.KEYWORD]
    grammar = results[Dimension.GRAMMAR]
    format_result = results[Dimension.FORMAT]
    quant = results[Dimension.QUANTITATIVE]

    suggestions = suggestion_generator.generate_suggestions(
        keyword, grammar, format_result, quant, resume_text
    )
    elapsed_ms = round((time.perf_counter() - started) * 1000)
    result = aggregator.build_result(
        keyword,
        grammar,
        format_result,
        quant,
        suggestions,
        resume_text=resume_text,
        job_context=job_context,
        processing_time_ms=elapsed_ms,
    )
    logger.info(
        "Analysis %s finished in %dms (overall=%d, %d suggestions)",
        result.id, elapsed_ms, result.overall_score, len(suggestions),
    )
    return result
