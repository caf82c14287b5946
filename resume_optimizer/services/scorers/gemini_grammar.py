"""Grammar/Readability scorer backed by Gemini.

Satisfies the same contract as the rule-based scorer. The remote call is
retried here with exponential backoff; when every attempt fails the scorer
raises and the analysis run fails as a whole.
"""

import asyncio
import logging

from pydantic import ValidationError

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import Dimension, GrammarCheck, GrammarIssue, TextSpan
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services import gemini_client, prompt_builder
from resume_optimizer.services.scorers.base import DimensionScorer
from resume_optimizer.services.scorers.grammar import (
    _WORD_RE,
    flesch_reading_ease,
    shortfall_check,
)

logger = logging.getLogger(__name__)

MAX_ISSUES = 20

ISSUE_TYPES = frozenset({"spelling", "grammar", "punctuation", "style"})
SEVERITIES = frozenset({"error", "warning", "suggestion"})


class GeminiUnavailableError(RuntimeError):
    """Gemini returned no usable response after all retries."""


def _clamp(value, default: int = 0) -> int:
    try:
        return min(100, max(0, int(value)))
    except (TypeError, ValueError):
        return default


class GeminiGrammarScorer(DimensionScorer):
    dimension = Dimension.GRAMMAR
    name = "gemini_grammar"

    def load(self) -> None:
        if gemini_client.get_client() is None:
            logger.warning("Gemini grammar scorer selected without GEMINI_API_KEY")

    def score(self, resume_text: str, job_context: JobContext | None = None) -> GrammarCheck:
        return asyncio.run(self.ascore(resume_text, job_context))

    async def ascore(self, resume_text: str, job_context: JobContext | None = None) -> GrammarCheck:
        self.ensure_loaded()
        word_count = len(_WORD_RE.findall(resume_text))
        if word_count < max(1, settings.min_resume_words):
            return shortfall_check(resume_text, word_count)

        prompt = prompt_builder.build_grammar_prompt(resume_text)
        attempts = settings.gemini_max_retries + 1
        for attempt in range(attempts):
            data = await gemini_client.generate_json(prompt)
            if data is not None:
                try:
                    return self._to_grammar_check(resume_text, data)
                except (ValidationError, TypeError, AttributeError) as e:
                    logger.warning("Discarding malformed Gemini grammar response: %s", e)
            if attempt + 1 < attempts:
                delay = settings.gemini_retry_backoff_seconds * (2 ** attempt)
                logger.info("Retrying Gemini grammar scoring in %.2fs", delay)
                await asyncio.sleep(delay)

        raise GeminiUnavailableError(f"no usable Gemini response after {attempts} attempt(s)")

    def _to_grammar_check(self, resume_text: str, data: dict) -> GrammarCheck:
        """Anchor model-reported issues to the text; drop ones that don't occur verbatim."""
        issues: list[GrammarIssue] = []
        for raw in data.get("issues", [])[:MAX_ISSUES]:
            context = str(raw.get("context", ""))
            start = resume_text.find(context) if context else -1
            if start < 0:
                continue
            line_start = resume_text.rfind("\n", 0, start) + 1
            issues.append(GrammarIssue(
                id=f"g{len(issues) + 1}",
                type=raw.get("type") if raw.get("type") in ISSUE_TYPES else "style",
                severity=raw.get("severity") if raw.get("severity") in SEVERITIES else "suggestion",
                rule=str(raw.get("rule") or "model-review"),
                message=str(raw.get("message", "")),
                context=context,
                suggestions=[str(s) for s in raw.get("suggestions") or []],
                position=TextSpan(
                    start=start,
                    end=start + len(context),
                    line=resume_text.count("\n", 0, start) + 1,
                    column=start - line_start + 1,
                ),
            ))

        readability = data.get("overall_readability")
        return GrammarCheck(
            score=_clamp(data.get("score")),
            total_issues=len(issues),
            issues=issues,
            overall_readability=(
                _clamp(readability) if readability is not None else flesch_reading_ease(resume_text)
            ),
        )
