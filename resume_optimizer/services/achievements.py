"""Achievement-line extraction and bullet quality signals."""

import re
from dataclasses import dataclass

from resume_optimizer.services.section_parser import Section, match_header, section_at

# Bullet markers: standard + expanded unicode set
BULLET_MARKERS = frozenset("•-–—►▪✓*○◆⚫→▸▹◇■□●")

# Strong action verbs for bullet quality scoring
ACTION_VERBS = frozenset({
    "achieved", "administered", "advanced", "analyzed", "architected",
    "automated", "boosted", "built", "collaborated", "conducted", "configured",
    "consolidated", "contributed", "coordinated", "created", "cut", "decreased",
    "delivered", "deployed", "designed", "developed", "directed",
    "drove", "eliminated", "enabled", "engineered", "enhanced",
    "established", "evaluated", "executed", "expanded", "facilitated",
    "founded", "generated", "grew", "identified", "implemented",
    "improved", "increased", "influenced", "initiated", "innovated",
    "integrated", "introduced", "launched", "led", "leveraged",
    "maintained", "managed", "mentored", "migrated", "modernized",
    "negotiated", "optimized", "orchestrated", "organized", "overhauled",
    "owned", "partnered", "performed", "pioneered", "planned", "presented",
    "processed", "produced", "programmed", "proposed", "published",
    "rebuilt", "reduced", "refactored", "refined", "remodeled",
    "resolved", "restructured", "revamped", "saved", "scaled", "secured",
    "shipped", "simplified", "spearheaded", "standardized", "streamlined",
    "strengthened", "supervised", "surpassed", "tested", "trained",
    "transformed", "tripled", "upgraded", "utilized",
})

# Verbs that read naturally with "by [X]%"
DELTA_VERBS = frozenset({
    "boosted", "cut", "decreased", "grew", "improved", "increased",
    "reduced", "saved", "tripled", "optimized", "accelerated",
})

# Regex for quantified metrics
_METRICS_RE = re.compile(
    r"\d+(?:\.\d+)?\s*%"
    r"|\$\s?\d[\d,]*(?:\.\d+)?\s*[KMB]?"
    r"|\b\d+(?:\.\d+)?[KMBx]\b"
    r"|\b\d[\d,]*\+?\s*(?:users|clients|customers|requests|endpoints|services|teams?|members?"
    r"|engineers|people|projects|products|releases|countries|hours|days|weeks|months)\b"
    r"|\b\d{1,3}(?:,\d{3})+\b",
    re.IGNORECASE,
)
# Plain counts, excluding four-digit years
_COUNT_RE = re.compile(r"\b(?!(?:19|20)\d{2}\b)\d+(?:\.\d+)?\b")

# "[X]" style placeholders left for the user to fill in
PLACEHOLDER_RE = re.compile(r"\[(?:x|n|#)\]", re.IGNORECASE)

_NUMBERED_RE = re.compile(r"^\d{1,2}[.)]\s+")
_NON_ACHIEVEMENT_SECTIONS = frozenset({"skills", "education", "certifications", "contact"})


@dataclass(frozen=True)
class AchievementLine:
    """An achievement-like line; ``start``/``end`` cover ``text`` in the document."""

    text: str
    start: int
    end: int
    section: str
    bulleted: bool


def first_word(text: str) -> str:
    words = text.split()
    return re.sub(r"[^a-z]", "", words[0].lower()) if words else ""


def starts_with_action_verb(text: str) -> bool:
    return first_word(text) in ACTION_VERBS


def has_metrics(text: str) -> bool:
    cleaned = PLACEHOLDER_RE.sub("", text)
    return bool(_METRICS_RE.search(cleaned) or _COUNT_RE.search(cleaned))


def has_placeholder(text: str) -> bool:
    return bool(PLACEHOLDER_RE.search(text))


def impact_words(text: str) -> list[str]:
    """Action verbs used in *text*, in order of first appearance."""
    seen: list[str] = []
    for word in re.findall(r"[A-Za-z]+", text):
        lower = word.lower()
        if lower in ACTION_VERBS and lower not in seen:
            seen.append(lower)
    return seen


def extract_achievements(text: str, sections: list[Section]) -> list[AchievementLine]:
    """Extract bullet and action-verb lines from resume text.

    Bullets count anywhere except skill/education-style sections; unbulleted
    lines count only when they open with an action verb.
    """
    achievements: list[AchievementLine] = []
    offset = 0
    for raw_line in text.splitlines(keepends=True):
        line_start = offset
        offset += len(raw_line)
        line = raw_line.rstrip("\r\n")
        stripped = line.strip()
        if not stripped or match_header(stripped):
            continue
        section = section_at(sections, line_start)
        if section in _NON_ACHIEVEMENT_SECTIONS:
            continue

        content_start = line_start + (len(line) - len(line.lstrip()))
        bulleted = False
        if stripped[0] in BULLET_MARKERS:
            cleaned = stripped.lstrip("".join(BULLET_MARKERS) + " \t")
            bulleted = True
        elif _NUMBERED_RE.match(stripped):
            cleaned = _NUMBERED_RE.sub("", stripped)
            bulleted = True
        else:
            cleaned = stripped
        cleaned = cleaned.strip()
        if not cleaned:
            continue
        if not bulleted and not starts_with_action_verb(cleaned):
            continue

        start = content_start + stripped.index(cleaned)
        achievements.append(AchievementLine(
            text=cleaned,
            start=start,
            end=start + len(cleaned),
            section=section if section != "header" else "experience",
            bulleted=bulleted,
        ))
    return achievements
