"""Grammar/Readability scorer: rule-based scan plus Flesch reading ease.

Each issue's ``context`` is the exact source text it refers to. When the
issue carries ``suggestions``, the first one is a drop-in replacement for
``context``.
"""

import logging
import re
from dataclasses import dataclass

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import Dimension, GrammarCheck, GrammarIssue, TextSpan
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services.achievements import BULLET_MARKERS
from resume_optimizer.services.scorers.base import DimensionScorer

logger = logging.getLogger(__name__)

LONG_SENTENCE_WORDS = 30

SEVERITY_PENALTY = {"error": 8, "warning": 4, "suggestion": 2}

# Generic or weak openers and their stronger replacements
WEAK_PHRASES: dict[str, str] = {
    "responsible for": "owned",
    "was involved in": "contributed to",
    "worked on": "delivered",
    "assisted with": "supported",
    "helped with": "supported",
    "helped": "supported",
    "duties included": "delivered",
    "tasked with": "drove",
    "handled": "managed",
}
_WEAK_RE = re.compile(
    r"(?<![A-Za-z])(" + "|".join(re.escape(p) for p in sorted(WEAK_PHRASES, key=len, reverse=True)) + r")(?![A-Za-z])",
    re.IGNORECASE,
)

_SENTENCE_RE = re.compile(r"[^.!?\n]+(?:[.!?]+|$)", re.MULTILINE)
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'-]*")
_REPEATED_RE = re.compile(r"\b([A-Za-z]+)\s+\1\b", re.IGNORECASE)
_PASSIVE_RE = re.compile(
    r"\b(?:am|is|are|was|were|be|been|being)\s+(?:\w+ly\s+)?([a-z]+(?:ed|en))\b",
    re.IGNORECASE,
)
_SPACE_BEFORE_PUNCT_RE = re.compile(r"(\S)[ \t]+([,;])")
_STRIP_CHARS = "".join(BULLET_MARKERS) + " \t"


@dataclass(frozen=True)
class _Sentence:
    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


def split_sentences(text: str) -> list[_Sentence]:
    """Sentences (or bullet fragments) with their document offsets."""
    sentences = []
    for match in _SENTENCE_RE.finditer(text):
        raw = match.group()
        stripped = raw.lstrip(_STRIP_CHARS).rstrip()
        if not _WORD_RE.search(stripped):
            continue
        sentences.append(_Sentence(stripped, match.start() + raw.index(stripped)))
    return sentences


def count_syllables(word: str) -> int:
    """Approximate syllable count from vowel groups."""
    word = word.lower()
    count = len(re.findall(r"[aeiouy]+", word))
    if word.endswith("e") and not word.endswith(("le", "ee")) and count > 1:
        count -= 1
    return max(1, count)


def flesch_reading_ease(text: str) -> int:
    """Flesch reading ease clamped to 0-100."""
    sentences = split_sentences(text)
    words = _WORD_RE.findall(text)
    if not sentences or not words:
        return 0
    syllables = sum(count_syllables(w) for w in words)
    raw = 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))
    return min(100, max(0, round(raw)))


def _span(text: str, start: int, end: int) -> TextSpan:
    line_start = text.rfind("\n", 0, start) + 1
    return TextSpan(
        start=start,
        end=end,
        line=text.count("\n", 0, start) + 1,
        column=start - line_start + 1,
    )


def _match_case(replacement: str, original: str) -> str:
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def shortfall_check(text: str, word_count: int) -> GrammarCheck:
    """Minimum-score result for empty or very short input."""
    message = (
        "Resume text is empty"
        if word_count == 0
        else f"Resume text is too short to assess readability ({word_count} words)"
    )
    issue = GrammarIssue(
        id="g1",
        type="style",
        severity="warning",
        rule="insufficient-text",
        message=message,
        context="",
        position=TextSpan(start=0, end=len(text), line=1, column=1),
    )
    return GrammarCheck(score=0, total_issues=1, issues=[issue], overall_readability=0)


def score_from_issues(issues: list[GrammarIssue], word_count: int, readability: int) -> int:
    penalty = sum(SEVERITY_PENALTY[i.severity] for i in issues)
    issue_score = max(0, 100 - round(penalty * 100 / max(word_count, 100)))
    return min(100, max(0, round(0.75 * issue_score + 0.25 * readability)))


class GrammarScorer(DimensionScorer):
    dimension = Dimension.GRAMMAR
    name = "rules_grammar"

    def score(self, resume_text: str, job_context: JobContext | None = None) -> GrammarCheck:
        word_count = len(_WORD_RE.findall(resume_text))
        if word_count < max(1, settings.min_resume_words):
            return shortfall_check(resume_text, word_count)

        issues: list[GrammarIssue] = []

        def add(**fields) -> None:
            issues.append(GrammarIssue(id=f"g{len(issues) + 1}", **fields))

        for sentence in split_sentences(resume_text):
            text = sentence.text
            span = _span(resume_text, sentence.start, sentence.end)

            for m in _REPEATED_RE.finditer(text):
                fixed = text[:m.start()] + m.group(1) + text[m.end():]
                add(
                    type="grammar",
                    severity="error",
                    rule="repeated-word",
                    message=f"Repeated word: '{m.group(1)}'",
                    context=text,
                    suggestions=[fixed],
                    position=span,
                )
                break

            m = _SPACE_BEFORE_PUNCT_RE.search(text)
            if m:
                add(
                    type="punctuation",
                    severity="suggestion",
                    rule="space-before-punctuation",
                    message=f"Remove the space before '{m.group(2)}'",
                    context=text,
                    suggestions=[_SPACE_BEFORE_PUNCT_RE.sub(r"\1\2", text)],
                    position=span,
                )

            m = _WEAK_RE.search(text)
            if m:
                phrase = m.group(1)
                replacement = _match_case(WEAK_PHRASES[phrase.lower()], phrase)
                add(
                    type="style",
                    severity="warning",
                    rule="weak-verb",
                    message=f"'{phrase}' is generic; lead with a stronger verb",
                    context=text,
                    suggestions=[text[:m.start()] + replacement + text[m.end():]],
                    position=span,
                )

            m = _PASSIVE_RE.search(text)
            if m:
                add(
                    type="style",
                    severity="suggestion",
                    rule="passive-voice",
                    message=f"Passive voice ('{m.group()}'); state who did what",
                    context=text,
                    position=span,
                )

            n_words = len(_WORD_RE.findall(text))
            if n_words > LONG_SENTENCE_WORDS:
                add(
                    type="style",
                    severity="warning",
                    rule="long-sentence",
                    message=f"Sentence is {n_words} words long; split it below {LONG_SENTENCE_WORDS}",
                    context=text,
                    position=span,
                )

        readability = flesch_reading_ease(resume_text)
        score = score_from_issues(issues, word_count, readability)
        logger.debug("Grammar scan: %d issues, readability=%d", len(issues), readability)
        return GrammarCheck(
            score=score,
            total_issues=len(issues),
            issues=issues,
            overall_readability=readability,
        )
