"""Analysis aggregator: combines dimension results into an AnalysisResult.

Pure apart from allocating an id and timestamp. The overall score is a
fixed weighted average (see ``Settings.dimension_weights``); strengths and
weaknesses come from thresholding each dimension score against fixed bands.
"""

import logging
import uuid
from datetime import datetime, timezone

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import (
    AnalysisMetadata,
    AnalysisResult,
    Dimension,
    FormatAnalysis,
    GrammarCheck,
    KeywordAnalysis,
    QuantitativeAnalysis,
)
from resume_optimizer.models.requests import JobContext
from resume_optimizer.models.suggestion import Suggestion

logger = logging.getLogger(__name__)

# atsScore blends extraction safety with keyword coverage
ATS_FORMAT_SHARE = 0.6
ATS_KEYWORD_SHARE = 0.4


def overall_score(scores: dict[Dimension, int]) -> int:
    weights = settings.dimension_weights()
    total = sum(weights[d.value] * scores[d] for d in Dimension)
    return min(100, max(0, round(total)))


def ats_score(keyword: KeywordAnalysis, format_result: FormatAnalysis) -> int:
    raw = ATS_FORMAT_SHARE * format_result.ats_compatibility + ATS_KEYWORD_SHARE * keyword.score
    return min(100, max(0, round(raw)))


# ---------------------------------------------------------------------------
# Strength / weakness statements
# ---------------------------------------------------------------------------

def _strength(dimension: Dimension, keyword: KeywordAnalysis, grammar: GrammarCheck,
              format_result: FormatAnalysis, quant: QuantitativeAnalysis) -> str:
    if dimension == Dimension.KEYWORD:
        if keyword.total_keywords:
            return (
                f"Strong keyword alignment: {len(keyword.matched_keywords)} of "
                f"{keyword.total_keywords} target keywords present ({keyword.score}/100)"
            )
        return f"Resume language is broadly relevant to the role ({keyword.score}/100)"
    if dimension == Dimension.GRAMMAR:
        return f"Clear, well-edited writing with few language issues ({grammar.score}/100)"
    if dimension == Dimension.FORMAT:
        return f"ATS-friendly structure and formatting ({format_result.score}/100)"
    return (
        f"Achievements are backed by numbers: {quant.achievements_with_numbers} of "
        f"{quant.total_achievements} quantified ({quant.score}/100)"
    )


def _weakness(dimension: Dimension, keyword: KeywordAnalysis, grammar: GrammarCheck,
              format_result: FormatAnalysis, quant: QuantitativeAnalysis) -> str:
    if dimension == Dimension.KEYWORD:
        top = [m.keyword for m in keyword.missing_keywords[:5]]
        if top:
            return f"Missing target keywords: {', '.join(top)} ({keyword.score}/100)"
        return f"Weak keyword alignment with the target role ({keyword.score}/100)"
    if dimension == Dimension.GRAMMAR:
        return (
            f"Writing needs polish: {grammar.total_issues} grammar or style "
            f"issue(s) found ({grammar.score}/100)"
        )
    if dimension == Dimension.FORMAT:
        return (
            f"Formatting may confuse applicant tracking systems "
            f"(ATS compatibility {format_result.ats_compatibility}/100)"
        )
    if quant.total_achievements == 0:
        return f"No achievement bullets found ({quant.score}/100)"
    return (
        f"Few quantified achievements: {quant.achievements_with_numbers} of "
        f"{quant.total_achievements} include metrics ({quant.score}/100)"
    )


def strengths_and_weaknesses(
    keyword: KeywordAnalysis,
    grammar: GrammarCheck,
    format_result: FormatAnalysis,
    quant: QuantitativeAnalysis,
) -> tuple[list[str], list[str]]:
    scores = {
        Dimension.KEYWORD: keyword.score,
        Dimension.GRAMMAR: grammar.score,
        Dimension.FORMAT: format_result.score,
        Dimension.QUANTITATIVE: quant.score,
    }
    strengths: list[str] = []
    weaknesses: list[str] = []
    for dimension in Dimension:
        score = scores[dimension]
        if score >= settings.strength_threshold:
            strengths.append(_strength(dimension, keyword, grammar, format_result, quant))
        elif score < settings.weakness_threshold:
            weaknesses.append(_weakness(dimension, keyword, grammar, format_result, quant))
    return strengths, weaknesses


def build_result(
    keyword: KeywordAnalysis,
    grammar: GrammarCheck,
    format_result: FormatAnalysis,
    quant: QuantitativeAnalysis,
    suggestions: list[Suggestion],
    resume_text: str,
    job_context: JobContext | None = None,
    processing_time_ms: int = 0,
) -> AnalysisResult:
    """Assemble the immutable snapshot for one analysis run."""
    now = datetime.now(timezone.utc)
    scores = {
        Dimension.KEYWORD: keyword.score,
        Dimension.GRAMMAR: grammar.score,
        Dimension.FORMAT: format_result.score,
        Dimension.QUANTITATIVE: quant.score,
    }
    strengths, weaknesses = strengths_and_weaknesses(keyword, grammar, format_result, quant)

    metadata = None
    if job_context is not None:
        metadata = AnalysisMetadata(
            target_job_title=job_context.title,
            target_company=job_context.company,
            word_count=len(resume_text.split()),
            analysis_date=now,
        )

    result = AnalysisResult(
        id=f"analysis_{uuid.uuid4().hex}",
        overall_score=overall_score(scores),
        ats_score=ats_score(keyword, format_result),
        keyword_analysis=keyword,
        grammar_check=grammar,
        format_analysis=format_result,
        quantitative_analysis=quant,
        suggestions=suggestions,
        strengths=strengths,
        weaknesses=weaknesses,
        created_at=now,
        processing_time_ms=max(0, processing_time_ms),
        metadata=metadata,
    )
    logger.debug("Aggregated %s: overall=%d ats=%d", result.id, result.overall_score, result.ats_score)
    return result
