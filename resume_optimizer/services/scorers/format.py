"""Format/ATS-Compatibility scorer: structural cues that survive text extraction."""

import logging
import re
import unicodedata

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import (
    Dimension,
    FormatAnalysis,
    FormatIssue,
    SectionStructure,
)
from resume_optimizer.models.requests import JobContext
from resume_optimizer.services.scorers.base import DimensionScorer
from resume_optimizer.services.section_parser import (
    RECOMMENDED_SECTIONS,
    REQUIRED_SECTIONS,
    STANDARD_ORDER,
    has_contact_info,
    split_sections,
)

logger = logging.getLogger(__name__)

SEVERITY_PENALTY = {"high": 15, "medium": 8, "low": 3}

# Rules that break or degrade ATS text extraction
ATS_RULES = frozenset({
    "missing-section", "missing-contact", "table-layout", "column-layout", "special-characters",
})

MIN_WORDS = 150
MAX_WORDS = 1000
MAX_CHARACTER_ISSUES = 3

# Characters ATS parsers read reliably even though they are not ASCII
_SAFE_SYMBOLS = frozenset("•–—·’‘“”…é")

_COLUMN_GAP_RE = re.compile(r"\S {4,}\S")
_MONTHS_FULL = r"(?:January|February|March|April|May|June|July|August|September|October|November|December)"
_MONTHS_ABBR = r"(?:Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept?|Oct|Nov|Dec)\.?"
DATE_STYLES: dict[str, re.Pattern] = {
    "numeric": re.compile(r"\b(?:0?[1-9]|1[0-2])[/.-](?:19|20)\d{2}\b"),
    "month-name": re.compile(rf"\b{_MONTHS_FULL}\s+(?:19|20)\d{{2}}\b"),
    "month-abbreviation": re.compile(rf"\b{_MONTHS_ABBR}\s+(?:19|20)\d{{2}}\b"),
}

_TITLES = {
    "contact": "Contact Information",
    "summary": "Professional Summary",
    "experience": "Experience",
    "education": "Education",
    "skills": "Skills",
    "projects": "Projects",
    "certifications": "Certifications",
}


def _is_unsafe_char(ch: str) -> bool:
    if ch.isascii() or ch in _SAFE_SYMBOLS:
        return False
    if ch.isalpha():
        return False
    return unicodedata.category(ch) in ("So", "Sk", "Co", "Cn") or 0x2500 <= ord(ch) <= 0x259F


def _clean_line(line: str) -> str:
    """Replace unsafe symbols: a leading one becomes '-', others are dropped."""
    stripped = line.strip()
    lead = ""
    while stripped and _is_unsafe_char(stripped[0]):
        stripped = stripped[1:].lstrip()
        lead = "- "
    body = "".join(ch for ch in stripped if not _is_unsafe_char(ch))
    return lead + re.sub(r"[ \t]{2,}", " ", body).strip()


def _section_structure(present: set[str]) -> list[SectionStructure]:
    return [
        SectionStructure(
            name=_TITLES[name],
            present=name in present,
            order=index + 1,
            recommended=name in RECOMMENDED_SECTIONS,
        )
        for index, name in enumerate(STANDARD_ORDER)
    ]


def _score(issues: list[FormatIssue], rules: frozenset[str] | None = None) -> int:
    # Each rule is charged once, at its worst severity
    worst: dict[str, int] = {}
    for issue in issues:
        if rules is not None and issue.rule not in rules:
            continue
        worst[issue.rule] = max(worst.get(issue.rule, 0), SEVERITY_PENALTY[issue.severity])
    return min(100, max(0, 100 - sum(worst.values())))


class FormatScorer(DimensionScorer):
    dimension = Dimension.FORMAT
    name = "rules_format"

    def score(self, resume_text: str, job_context: JobContext | None = None) -> FormatAnalysis:
        word_count = len(resume_text.split())
        if word_count < max(1, settings.min_resume_words):
            return self._shortfall(word_count)

        sections = split_sections(resume_text)
        present = {s.name for s in sections if s.name != "header"}
        if has_contact_info(resume_text):
            present.add("contact")

        issues: list[FormatIssue] = []
        issues.extend(self._section_issues(present))
        issues.extend(self._layout_issues(resume_text))
        issues.extend(self._character_issues(resume_text))
        issues.extend(self._date_issues(resume_text))
        issues.extend(self._length_issues(word_count))

        recommendations = list(dict.fromkeys(i.recommendation for i in issues))
        if not recommendations:
            recommendations = ["Formatting is ATS-friendly; keep standard headers and a single-column layout"]

        return FormatAnalysis(
            score=_score(issues),
            ats_compatibility=_score(issues, ATS_RULES),
            issues=issues,
            recommendations=recommendations,
            section_structure=_section_structure(present),
        )

    def _shortfall(self, word_count: int) -> FormatAnalysis:
        description = (
            "Resume text is empty"
            if word_count == 0
            else f"Resume text is too short to assess structure ({word_count} words)"
        )
        issue = FormatIssue(
            type="length",
            severity="high",
            rule="insufficient-text",
            description=description,
            recommendation="Provide the full resume text, including section headers",
        )
        return FormatAnalysis(
            score=0,
            ats_compatibility=0,
            issues=[issue],
            recommendations=[issue.recommendation],
            section_structure=_section_structure(set()),
        )

    def _section_issues(self, present: set[str]) -> list[FormatIssue]:
        issues = []
        if "contact" not in present:
            issues.append(FormatIssue(
                type="sections",
                severity="high",
                rule="missing-contact",
                section="contact",
                description="No email, phone number or LinkedIn profile found",
                recommendation="Add your email, phone number and LinkedIn URL at the top of the resume",
            ))
        for name in ("summary", "experience", "education", "skills"):
            if name in present:
                continue
            issues.append(FormatIssue(
                type="sections",
                severity="high" if name in REQUIRED_SECTIONS else "medium",
                rule="missing-section",
                section=name,
                description=f"No '{_TITLES[name]}' section header found",
                recommendation=f"Add a clearly labelled '{_TITLES[name]}' section header",
            ))
        return issues

    def _layout_issues(self, text: str) -> list[FormatIssue]:
        lines = text.splitlines()
        issues = []
        table_rows = [ln for ln in lines if ln.count("|") >= 3 or "\t" in ln.strip()]
        if table_rows:
            issues.append(FormatIssue(
                type="structure",
                severity="high",
                rule="table-layout",
                description=f"{len(table_rows)} line(s) look like table rows",
                recommendation="Replace tables with plain lines; ATS parsers often scramble table cells",
                context=table_rows[0].strip(),
            ))
        column_rows = [ln for ln in lines if _COLUMN_GAP_RE.search(ln.strip())]
        if len(column_rows) >= 2:
            issues.append(FormatIssue(
                type="structure",
                severity="medium",
                rule="column-layout",
                description="Wide internal spacing suggests a multi-column layout",
                recommendation="Use a single-column layout so text is extracted in reading order",
                context=column_rows[0].strip(),
            ))
        return issues

    def _character_issues(self, text: str) -> list[FormatIssue]:
        issues = []
        for line in text.splitlines():
            stripped = line.strip()
            if not any(_is_unsafe_char(ch) for ch in stripped):
                continue
            cleaned = _clean_line(stripped)
            symbols = "".join(dict.fromkeys(ch for ch in stripped if _is_unsafe_char(ch)))
            issues.append(FormatIssue(
                type="font",
                severity="medium",
                rule="special-characters",
                description=f"Special characters '{symbols}' may not survive text extraction",
                recommendation="Use plain hyphens or standard bullets instead of decorative symbols",
                context=stripped,
                replacement=cleaned if cleaned and cleaned != stripped else None,
            ))
            if len(issues) >= MAX_CHARACTER_ISSUES:
                break
        return issues

    def _date_issues(self, text: str) -> list[FormatIssue]:
        styles = [name for name, pattern in DATE_STYLES.items() if pattern.search(text)]
        if len(styles) <= 1:
            return []
        return [FormatIssue(
            type="structure",
            severity="low",
            rule="inconsistent-dates",
            section="experience",
            description=f"Dates mix several formats ({', '.join(styles)})",
            recommendation="Use one date format throughout, e.g. 'Jan 2020 - Mar 2022'",
        )]

    def _length_issues(self, word_count: int) -> list[FormatIssue]:
        if word_count < MIN_WORDS:
            return [FormatIssue(
                type="length",
                severity="medium",
                rule="too-short",
                description=f"Resume is short ({word_count} words)",
                recommendation="Expand each role with responsibilities and measurable results",
            )]
        if word_count > MAX_WORDS:
            return [FormatIssue(
                type="length",
                severity="medium",
                rule="too-long",
                description=f"Resume is long ({word_count} words)",
                recommendation="Condense to one or two pages by trimming older or less relevant roles",
            )]
        return []
