"""Quantitative-Achievement scorer: share of achievements backed by numbers."""

import logging

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import (
    Dimension,
    QuantitativeAnalysis,
    QuantitativeSuggestion,
)
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services.achievements import (
    DELTA_VERBS,
    extract_achievements,
    first_word,
    has_metrics,
    has_placeholder,
    impact_words,
    starts_with_action_verb,
)
from resume_optimizer.services.scorers.base import DimensionScorer
from resume_optimizer.services.section_parser import split_sections

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 10

# Weight of quantified share vs. impact-verb share in the score
W_QUANTIFIED = 0.8
W_IMPACT_VERB = 0.2


def quantify(text: str) -> str:
    """Template rewrite that leaves a placeholder metric for the user to fill."""
    terminal = "." if text.endswith(".") else ""
    base = text.rstrip(" .;,")
    if first_word(base) in DELTA_VERBS:
        return f"{base} by [X]%{terminal}"
    return f"{base}, resulting in a [X]% improvement{terminal}"


class QuantitativeScorer(DimensionScorer):
    dimension = Dimension.QUANTITATIVE
    name = "rules_quantitative"

    def score(self, resume_text: str, job_context: JobContext | None = None) -> QuantitativeAnalysis:
        if not resume_text.strip():
            return QuantitativeAnalysis(
                score=0,
                achievements_with_numbers=0,
                total_achievements=0,
                suggestions=[QuantitativeSuggestion(
                    section="experience",
                    original_text="",
                    reasoning="Resume text is empty",
                )],
            )

        achievements = extract_achievements(resume_text, split_sections(resume_text))
        if not achievements:
            return QuantitativeAnalysis(
                score=0,
                achievements_with_numbers=0,
                total_achievements=0,
                impact_words=impact_words(resume_text),
                suggestions=[QuantitativeSuggestion(
                    section="experience",
                    original_text="",
                    reasoning="No achievement bullets found; list accomplishments as "
                    "bullets that open with an action verb",
                )],
            )

        quantified = 0
        with_verb = 0
        suggestions: list[QuantitativeSuggestion] = []
        for line in achievements:
            if starts_with_action_verb(line.text):
                with_verb += 1
            if has_metrics(line.text):
                quantified += 1
                continue
            if len(suggestions) >= MAX_SUGGESTIONS:
                continue
            if has_placeholder(line.text):
                suggestions.append(QuantitativeSuggestion(
                    section=line.section,
                    original_text=line.text,
                    reasoning="Replace the [X] placeholder with the real figure",
                ))
            else:
                suggestions.append(QuantitativeSuggestion(
                    section=line.section,
                    original_text=line.text,
                    suggested_text=quantify(line.text),
                    reasoning="Add a concrete metric (%, $, count) to show the scale of the result",
                ))

        total = len(achievements)
        raw = 100 * (W_QUANTIFIED * quantified / total + W_IMPACT_VERB * with_verb / total)
        word_count = len(resume_text.split())
        if word_count < settings.min_resume_words:
            raw = 0
            suggestions.insert(0, QuantitativeSuggestion(
                section="experience",
                original_text="",
                reasoning=f"Resume text is too short to assess achievements ({word_count} words)",
            ))
        logger.debug("Quantified %d/%d achievements", quantified, total)
        return QuantitativeAnalysis(
            score=min(100, max(0, round(raw))),
            achievements_with_numbers=quantified,
            total_achievements=total,
            impact_words=impact_words(" ".join(a.text for a in achievements)),
            suggestions=suggestions,
        )
