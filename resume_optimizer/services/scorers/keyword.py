"""Keyword Match scorer: coverage of job keywords in the resume."""

import logging

from resume_optimizer.models.analysis import (
    Dimension,
    Importance,
    KeywordAnalysis,
    MatchedKeyword,
    MissingKeyword,
)
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services.keyword_extractor import (
    COMMON_KEYWORDS,
    MAX_HEALTHY_DENSITY,
    SOFT_SKILLS,
    canonicalize,
    compute_keyword_density,
    extract_keywords_combined,
    extract_terms,
    find_occurrences,
    fuzzy_match,
    is_technical_term,
    related_terms,
    stem_match,
)
from resume_optimizer.services.scorers.base import DimensionScorer
from resume_optimizer.services.section_parser import section_at, split_sections

logger = logging.getLogger(__name__)

# Score when the job context names no keywords at all
NO_KEYWORDS_SCORE = 75

IMPORTANCE_WEIGHTS: dict[str, int] = {"high": 3, "medium": 2, "low": 1}

# Sections where a keyword counts as evidence of hands-on use
ROLE_SECTIONS = frozenset({"experience", "skills", "summary", "projects"})

# Credit for a stem/fuzzy match relative to a verbatim one
APPROXIMATE_CREDIT = 0.6

SNIPPET_RADIUS = 40
MAX_SNIPPETS = 3


def resolve_target_keywords(job_context: JobContext | None) -> list[tuple[str, Importance]]:
    """Keywords to score against, with their importance.

    Explicit keywords win; otherwise they are extracted from the job
    description, and as a last resort from the job title.
    """
    if job_context is None:
        return []
    if job_context.keywords:
        return [(kw, "high") for kw in job_context.keywords]

    title = job_context.title
    if job_context.description and job_context.description.strip():
        description = job_context.description
        targets: list[tuple[str, Importance]] = []
        for kw in extract_keywords_combined(description):
            mentions = len(find_occurrences(description, kw))
            if find_occurrences(title, kw) or mentions >= 2:
                importance: Importance = "high"
            elif kw in COMMON_KEYWORDS:
                importance = "medium"
            else:
                importance = "low"
            targets.append((kw, importance))
        return targets

    words = [w for w in title.replace("/", " ").split() if is_technical_term(w.strip(",.()"))]
    return [(w.strip(",.()"), "high") for w in words]


def _snippet(text: str, start: int, end: int) -> str:
    left = max(0, start - SNIPPET_RADIUS)
    right = min(len(text), end + SNIPPET_RADIUS)
    snippet = " ".join(text[left:right].split())
    if left > 0:
        snippet = "..." + snippet
    if right < len(text):
        snippet += "..."
    return snippet


def _placement(keyword: str) -> list[str]:
    canon = canonicalize(keyword)
    if canon in SOFT_SKILLS:
        return ["summary", "experience"]
    if canon in COMMON_KEYWORDS:
        return ["skills", "experience"]
    return ["summary", "skills"]


class KeywordScorer(DimensionScorer):
    dimension = Dimension.KEYWORD
    name = "rules_keyword"

    def score(self, resume_text: str, job_context: JobContext | None = None) -> KeywordAnalysis:
        targets = resolve_target_keywords(job_context)
        is_empty = not resume_text.strip()

        if not targets:
            return KeywordAnalysis(
                score=0 if is_empty else NO_KEYWORDS_SCORE,
                total_keywords=0,
                recommendations=[
                    "Resume text is empty; no keywords could be matched"
                    if is_empty
                    else "No target keywords were supplied; add keywords or a job "
                    "description for a tailored match",
                ],
            )

        sections = split_sections(resume_text)
        resume_terms = extract_terms(resume_text)
        matched: list[MatchedKeyword] = []
        missing: list[MissingKeyword] = []
        covered = 0.0
        total = 0.0

        for keyword, importance in targets:
            weight = IMPORTANCE_WEIGHTS[importance]
            total += weight
            spans = find_occurrences(resume_text, keyword)

            if spans:
                frequency = len(spans)
                relevance = min(1.0, 0.5 + 0.15 * (frequency - 1))
                hit_sections = {section_at(sections, start) for start, _ in spans}
                if hit_sections & ROLE_SECTIONS or hit_sections == {"header"}:
                    relevance = min(1.0, relevance + 0.3)
                matched.append(MatchedKeyword(
                    keyword=keyword,
                    frequency=frequency,
                    relevance_score=round(relevance, 2),
                    context_snippets=[
                        _snippet(resume_text, s, e) for s, e in spans[:MAX_SNIPPETS]
                    ],
                ))
                covered += weight
            elif stem_match(keyword, resume_terms) or fuzzy_match(keyword, resume_terms):
                matched.append(MatchedKeyword(
                    keyword=keyword,
                    frequency=1,
                    relevance_score=round(0.5 * APPROXIMATE_CREDIT, 2),
                ))
                covered += weight * APPROXIMATE_CREDIT
            else:
                missing.append(MissingKeyword(
                    keyword=keyword,
                    importance=importance,
                    suggested_placement=_placement(keyword),
                    related_terms=related_terms(keyword),
                ))

        score = round(100 * covered / total) if total else 0
        density = compute_keyword_density(resume_text, [kw for kw, _ in targets])
        logger.debug(
            "Keyword coverage %d/%d (score=%d)", len(matched), len(targets), score
        )

        return KeywordAnalysis(
            score=min(100, max(0, score)),
            total_keywords=len(targets),
            matched_keywords=matched,
            missing_keywords=missing,
            keyword_density=density,
            recommendations=_recommendations(is_empty, matched, missing, density, score),
        )


def _recommendations(
    is_empty: bool,
    matched: list[MatchedKeyword],
    missing: list[MissingKeyword],
    density: dict[str, float],
    score: int,
) -> list[str]:
    if is_empty:
        return ["Resume text is empty; no keywords could be matched"]

    recs: list[str] = []
    high = [m.keyword for m in missing if m.importance == "high"]
    if high:
        recs.append(f"Add the missing high-importance keywords: {', '.join(high[:5])}")
    if score < 50:
        recs.append("Mirror the job description's terminology in your summary and skills sections")
    for m in matched:
        pct = density.get(m.keyword, 0.0)
        if m.frequency >= 3 and pct > MAX_HEALTHY_DENSITY:
            recs.append(f"Reduce repetition of '{m.keyword}' ({pct}% of words); 1-3% reads naturally")
    if not missing and matched:
        recs.append("Keyword coverage is complete; keep each term close to the role that used it")
    return recs
