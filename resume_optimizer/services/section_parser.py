"""Resume section segmentation and contact extraction."""

import re
from dataclasses import dataclass

# Section header patterns and their canonical names
SECTION_PATTERNS: dict[str, list[str]] = {
    "contact": [
        r"contact(?:\s*(?:info(?:rmation)?|details))?",
    ],
    "summary": [
        r"(?:professional|executive|career)?\s*summary",
        r"(?:career|professional)?\s*objective",
        r"profile",
        r"about\s*me",
    ],
    "experience": [
        r"(?:work|professional|employment)\s*(?:experience|history)",
        r"experience",
        r"career\s*(?:history|path)",
        r"(?:positions?\s*held|roles)",
    ],
    "education": [
        r"education(?:al)?\s*(?:background|qualifications|history)?",
        r"academic\s*(?:background|qualifications)",
    ],
    "skills": [
        r"(?:technical|core|key|professional)?\s*skills",
        r"(?:technical|core)?\s*(?:competencies|proficiencies|expertise)",
        r"technologies",
        r"(?:technical\s+)?(?:stack|toolkit|tooling)",
    ],
    "projects": [
        r"(?:key|notable|selected|personal)?\s*projects",
        r"portfolio",
    ],
    "certifications": [
        r"certific(?:ations?|ates?)",
        r"licen[sc]es?\s*(?:&|and)?\s*certific(?:ations?|ates?)",
    ],
    "achievements": [
        r"(?:key\s+)?achievements?",
        r"(?:awards?|honors?|accomplishments)",
    ],
}

# Compile all patterns into a single regex per section
_COMPILED: dict[str, re.Pattern] = {}
for section, patterns in SECTION_PATTERNS.items():
    combined = "|".join(patterns)
    _COMPILED[section] = re.compile(rf"^\s*(?:{combined})\s*:?\s*$", re.IGNORECASE)

# Contact info patterns
EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
PHONE_RE = re.compile(r"(?:\+\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}\b")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/[\w-]+", re.IGNORECASE)

# Sections an ATS expects, in the conventional order
STANDARD_ORDER = ["contact", "summary", "experience", "education", "skills", "projects", "certifications"]
REQUIRED_SECTIONS = {"experience", "education", "skills"}
RECOMMENDED_SECTIONS = REQUIRED_SECTIONS | {"contact", "summary"}


@dataclass(frozen=True)
class Section:
    """A contiguous region of the resume.

    ``start``/``end`` delimit the section body (excluding the header line).
    ``header`` is the header line as written, empty for the leading block.
    """

    name: str
    header: str
    start: int
    end: int


def match_header(line: str) -> str | None:
    """Return the canonical section name if *line* is a section header."""
    stripped = line.strip()
    if not stripped or len(stripped) > 60:
        return None
    for section_name, pattern in _COMPILED.items():
        if pattern.match(stripped):
            return section_name
    return None


def split_sections(text: str) -> list[Section]:
    """Split resume text into sections with character offsets.

    Text before the first recognized header is reported as 'header' and
    dropped when it is blank.
    """
    sections: list[Section] = []
    current_name, current_header, current_start = "header", "", 0
    offset = 0

    for line in text.splitlines(keepends=True):
        matched = match_header(line)
        if matched:
            if current_header or text[current_start:offset].strip():
                sections.append(Section(current_name, current_header, current_start, offset))
            current_name = matched
            current_header = line.strip()
            current_start = offset + len(line)
        offset += len(line)

    if current_header or text[current_start:].strip():
        sections.append(Section(current_name, current_header, current_start, len(text)))
    return sections


def section_at(sections: list[Section], offset: int) -> str:
    """Name of the section containing *offset* ('header' if none)."""
    for sec in sections:
        if sec.start <= offset < sec.end:
            return sec.name
    return "header"


def extract_contact_info(text: str) -> dict[str, str | None]:
    """Extract contact information from resume text."""
    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)
    linkedin_match = LINKEDIN_RE.search(text)

    return {
        "email": email_match.group() if email_match else None,
        "phone": phone_match.group().strip() if phone_match else None,
        "linkedin": linkedin_match.group() if linkedin_match else None,
    }


def has_contact_info(text: str) -> bool:
    contact = extract_contact_info(text)
    return bool(contact["email"] or contact["phone"] or contact["linkedin"])
