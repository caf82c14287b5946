"""Suggestion generator: maps dimension findings to ranked suggestions.

Template-based and deterministic. Every finding becomes one candidate with
a dimension-specific impact and estimated overall-score gain; candidates
are ranked by (impact, estimated gain), capped, then numbered.

A candidate keeps its literal patch only when ``before_text`` occurs in the
working text and does not overlap a patch already claimed by a
higher-priority suggestion. Otherwise it is downgraded to advisory, so
adopting every patched suggestion in priority order never collides.
"""

import logging
from dataclasses import dataclass

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import (
    FormatAnalysis,
    GrammarCheck,
    KeywordAnalysis,
    MissingKeyword,
    QuantitativeAnalysis,
)
from resume_optimizer.models.suggestion import Impact, Suggestion, SuggestionType
from resume_optimizer.services.achievements import extract_achievements, has_metrics
from resume_optimizer.services.section_parser import (
    EMAIL_RE,
    LINKEDIN_RE,
    PHONE_RE,
    match_header,
    section_at,
    split_sections,
)

logger = logging.getLogger(__name__)

# Missing keywords woven into a single line rewrite
MAX_KEYWORDS_PER_PATCH = 3

GRAMMAR_IMPACT = {"error": Impact.HIGH, "warning": Impact.MEDIUM, "suggestion": Impact.LOW}
GRAMMAR_GAIN = {"error": 3, "warning": 2, "suggestion": 1}

FORMAT_IMPACT = {"high": Impact.HIGH, "medium": Impact.MEDIUM, "low": Impact.LOW}
FORMAT_GAIN = {"high": 8, "medium": 5, "low": 2}

KEYWORD_IMPACT = {"high": Impact.HIGH, "medium": Impact.MEDIUM, "low": Impact.LOW}
_IMPORTANCE_ORDER = {"high": 0, "medium": 1, "low": 2}

QUANT_GAIN = 4


@dataclass
class _Candidate:
    type: SuggestionType
    title: str
    description: str
    suggestion_text: str
    impact: Impact
    estimated_gain: int
    section: str = "general"
    before_text: str | None = None
    after_text: str | None = None

    def drop_patch(self) -> None:
        self.before_text = None
        self.after_text = None


# ---------------------------------------------------------------------------
# Keyword candidates
# ---------------------------------------------------------------------------

def _join_terms(terms: list[str]) -> str:
    if len(terms) <= 2:
        return " and ".join(terms)
    return f"{', '.join(terms[:-1])} and {terms[-1]}"


def weave_keywords(line: str, keywords: list[str]) -> str:
    """Rewrite *line* to mention *keywords*, adding a placeholder metric if it has none."""
    terminal = "." if line.endswith(".") else ""
    base = line.rstrip(" .;,")
    rewrite = f"{base} leveraging {_join_terms(keywords)}"
    if not has_metrics(line):
        rewrite += ", delivering a [X]% improvement"
    return rewrite + terminal


# Non-achievement lines a keyword rewrite may land on
_REWRITABLE_SECTIONS = ("summary", "experience")


def _is_contact_line(line: str) -> bool:
    return bool(EMAIL_RE.search(line) or PHONE_RE.search(line) or LINKEDIN_RE.search(line))


def _target_line(text: str) -> tuple[str, str] | None:
    """The line a keyword rewrite should land on, with its section.

    First achievement line; failing that, the first summary or experience
    line. The leading name/contact block is never rewritten.
    """
    sections = split_sections(text)
    for achievement in extract_achievements(text, sections):
        if not _is_contact_line(achievement.text):
            return achievement.text, achievement.section

    fallback: dict[str, str] = {}
    offset = 0
    for raw_line in text.splitlines(keepends=True):
        stripped = raw_line.strip()
        section = section_at(sections, offset)
        offset += len(raw_line)
        if (
            stripped
            and section in _REWRITABLE_SECTIONS
            and not match_header(stripped)
            and not _is_contact_line(stripped)
        ):
            fallback.setdefault(section, stripped)
    for section in _REWRITABLE_SECTIONS:
        if section in fallback:
            return fallback[section], section
    return None


def _keyword_gain(count: int, total: int) -> int:
    weight = settings.dimension_weights()["keyword"]
    return max(1, round(weight * 100 * count / max(1, total)))


def _keyword_candidates(result: KeywordAnalysis, working_text: str) -> list[_Candidate]:
    missing: list[MissingKeyword] = sorted(
        result.missing_keywords, key=lambda m: _IMPORTANCE_ORDER[m.importance]
    )
    if not missing:
        return []

    candidates: list[_Candidate] = []
    remaining = missing
    target = _target_line(working_text)
    if target is not None:
        line, section = target
        woven = missing[:MAX_KEYWORDS_PER_PATCH]
        remaining = missing[MAX_KEYWORDS_PER_PATCH:]
        keywords = [m.keyword for m in woven]
        after = weave_keywords(line, keywords)
        candidates.append(_Candidate(
            type=SuggestionType.KEYWORD,
            title=f"Work {_join_terms(keywords)} into your experience",
            description=(
                f"The job targets {_join_terms(keywords)}, which the resume never mentions. "
                "Tie them to a concrete result and replace [X] with the real figure."
            ),
            suggestion_text=after,
            impact=max((KEYWORD_IMPACT[m.importance] for m in woven), key=lambda i: i.rank),
            estimated_gain=_keyword_gain(len(woven), result.total_keywords),
            section=section,
            before_text=line,
            after_text=after,
        ))

    for m in remaining:
        places = " or ".join(m.suggested_placement) or "skills"
        related = f" Related terms: {', '.join(m.related_terms)}." if m.related_terms else ""
        candidates.append(_Candidate(
            type=SuggestionType.KEYWORD,
            title=f"Add missing keyword: {m.keyword}",
            description=f"'{m.keyword}' ({m.importance} importance) does not appear in the resume.{related}",
            suggestion_text=f"Mention {m.keyword} in your {places} section where it reflects real experience",
            impact=KEYWORD_IMPACT[m.importance],
            estimated_gain=_keyword_gain(1, result.total_keywords),
            section=m.suggested_placement[0] if m.suggested_placement else "skills",
        ))
    return candidates


# ---------------------------------------------------------------------------
# Grammar, format and quantitative candidates
# ---------------------------------------------------------------------------

def _grammar_candidates(result: GrammarCheck, working_text: str) -> list[_Candidate]:
    sections = split_sections(working_text)
    candidates = []
    for issue in result.issues:
        if issue.rule == "insufficient-text":
            candidates.append(_Candidate(
                type=SuggestionType.STRUCTURE,
                title="Provide more resume text",
                description=issue.message,
                suggestion_text="Paste the complete resume so sentences can be reviewed",
                impact=GRAMMAR_IMPACT[issue.severity],
                estimated_gain=GRAMMAR_GAIN[issue.severity],
            ))
            continue

        fix = issue.suggestions[0] if issue.suggestions else None
        patched = bool(issue.context) and fix is not None and fix != issue.context
        candidates.append(_Candidate(
            type=SuggestionType.GRAMMAR,
            title=issue.rule.replace("-", " ").capitalize(),
            description=issue.message,
            suggestion_text=fix if patched else issue.message,
            impact=GRAMMAR_IMPACT[issue.severity],
            estimated_gain=GRAMMAR_GAIN[issue.severity],
            section=section_at(sections, issue.position.start),
            before_text=issue.context if patched else None,
            after_text=fix if patched else None,
        ))
    return candidates


def _format_candidates(result: FormatAnalysis) -> list[_Candidate]:
    candidates = []
    for issue in result.issues:
        patched = bool(issue.context) and bool(issue.replacement) and issue.replacement != issue.context
        is_structure = issue.type == "sections" or issue.rule == "insufficient-text"
        candidates.append(_Candidate(
            type=SuggestionType.STRUCTURE if is_structure else SuggestionType.FORMAT,
            title=issue.rule.replace("-", " ").capitalize(),
            description=issue.description,
            suggestion_text=issue.replacement if patched else issue.recommendation,
            impact=FORMAT_IMPACT[issue.severity],
            estimated_gain=FORMAT_GAIN[issue.severity],
            section=issue.section,
            before_text=issue.context if patched else None,
            after_text=issue.replacement if patched else None,
        ))
    return candidates


def _quantitative_candidates(result: QuantitativeAnalysis) -> list[_Candidate]:
    candidates = []
    for s in result.suggestions:
        patched = bool(s.original_text) and bool(s.suggested_text)
        if s.original_text:
            title = "Quantify this achievement"
        else:
            title = "Add measurable achievements"
        candidates.append(_Candidate(
            type=SuggestionType.ACHIEVEMENT,
            title=title,
            description=s.reasoning,
            suggestion_text=s.suggested_text if patched else s.reasoning,
            impact=Impact.MEDIUM,
            estimated_gain=QUANT_GAIN,
            section=s.section,
            before_text=s.original_text if patched else None,
            after_text=s.suggested_text if patched else None,
        ))
    return candidates


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def _claim_patches(candidates: list[_Candidate], working_text: str) -> None:
    """Downgrade patches that are missing from the text or overlap a higher-ranked one."""
    claimed: list[tuple[int, int]] = []
    for cand in candidates:
        if cand.before_text is None:
            continue
        start = working_text.find(cand.before_text)
        if start < 0:
            cand.drop_patch()
            cand.suggestion_text = cand.description
            continue
        end = start + len(cand.before_text)
        if any(start < c_end and c_start < end for c_start, c_end in claimed):
            logger.debug("Patch for %r overlaps a higher-priority patch", cand.title)
            cand.drop_patch()
            cand.suggestion_text = cand.description
            continue
        claimed.append((start, end))


def generate_suggestions(
    keyword_result: KeywordAnalysis,
    grammar_result: GrammarCheck,
    format_result: FormatAnalysis,
    quant_result: QuantitativeAnalysis,
    working_text: str,
    max_suggestions: int | None = None,
) -> list[Suggestion]:
    """Rank all findings into a capped, densely prioritized suggestion list."""
    limit = settings.max_suggestions if max_suggestions is None else max_suggestions

    candidates = (
        _keyword_candidates(keyword_result, working_text)
        + _quantitative_candidates(quant_result)
        + _grammar_candidates(grammar_result, working_text)
        + _format_candidates(format_result)
    )
    # sorted() is stable, so ties keep dimension order
    candidates = sorted(candidates, key=lambda c: (-c.impact.rank, -c.estimated_gain))
    candidates = candidates[:max(0, limit)]
    _claim_patches(candidates, working_text)

    suggestions = []
    for priority, cand in enumerate(candidates, start=1):
        suggestions.append(Suggestion(
            id=f"{cand.type.value}-{priority}",
            type=cand.type,
            title=cand.title,
            description=cand.description,
            suggestion_text=cand.suggestion_text,
            impact=cand.impact,
            priority=priority,
            estimated_score_improvement=cand.estimated_gain,
            before_text=cand.before_text,
            after_text=cand.after_text,
            section=cand.section,
        ))
    logger.debug(
        "Generated %d suggestions (%d with patches)",
        len(suggestions), sum(1 for s in suggestions if s.has_patch),
    )
    return suggestions
