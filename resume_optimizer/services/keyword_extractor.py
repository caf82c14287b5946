"""Keyword extraction and matching for resume-job analysis.

Combines TF-IDF-based keyword discovery over the job description with a
curated fallback dictionary, skill synonym resolution, stemming and fuzzy
matching for close variants.
"""

import logging
import re
from collections import Counter

import numpy as np
from nltk.stem import PorterStemmer
from rapidfuzz import fuzz
from sklearn.feature_extraction.text import TfidfVectorizer

logger = logging.getLogger(__name__)

_stemmer = PorterStemmer()

# ---------------------------------------------------------------------------
# JD boilerplate filtering: non-technical terms TF-IDF often picks up
# ---------------------------------------------------------------------------
JD_STOPWORDS: frozenset[str] = frozenset({
    # Company / HR boilerplate
    "opportunity", "opportunities", "position", "positions", "role", "roles",
    "candidate", "candidates", "applicant", "applicants", "application",
    "employment", "employer", "employee", "employees",
    "company", "organization", "team", "teams", "department",
    # Compensation & benefits
    "compensation", "salary", "benefits", "bonus", "equity",
    "insurance", "401k", "pto", "vacation", "retirement",
    # Generic JD filler
    "including", "based", "preferred", "required", "minimum",
    "experience", "qualified", "qualifications",
    "responsible", "responsibilities", "requirement", "requirements",
    "description", "overview", "summary", "mission",
    "passionate", "exciting", "innovative", "dynamic",
    "competitive", "flexible", "remote", "hybrid", "onsite", "location",
    # Generic action words that aren't skills
    "deliver", "manage", "create", "build", "develop", "maintain",
    "implement", "design", "support", "ensure", "provide",
    "utilize", "leverage", "help", "join", "apply",
    # Common words that sneak through TF-IDF
    "job", "work", "working", "career", "people", "person",
    "year", "years", "day", "days", "time",
    "great", "best", "good", "strong", "key", "core",
    "ability", "knowledge", "familiarity", "understanding", "plus",
    "senior", "junior", "lead", "engineer", "developer", "looking",
})

SKILL_SYNONYMS: dict[str, str] = {
    # JavaScript ecosystem
    "js": "javascript", "es6": "javascript",
    "ts": "typescript",
    "react.js": "react", "reactjs": "react",
    "vue.js": "vue", "vuejs": "vue",
    "angular.js": "angular", "angularjs": "angular",
    "node": "node.js", "nodejs": "node.js",
    "nextjs": "next.js",
    # Python ecosystem
    "py": "python", "python3": "python",
    "sklearn": "scikit-learn",
    "torch": "pytorch",
    # Cloud & DevOps
    "k8s": "kubernetes", "kube": "kubernetes",
    "amazon web services": "aws",
    "google cloud": "gcp", "google cloud platform": "gcp",
    "microsoft azure": "azure",
    "cicd": "ci/cd",
    # Databases
    "postgres": "postgresql",
    "mongo": "mongodb",
    "mssql": "sql server",
    # Languages
    "c sharp": "c#", "csharp": "c#",
    "cpp": "c++",
    "golang": "go",
    # AI/ML
    "ml": "machine learning",
    "dl": "deep learning",
    "nlp": "natural language processing",
    "genai": "generative ai",
    "large language model": "llm", "large language models": "llm",
    # Tools & methodologies
    "restful": "rest", "rest api": "rest", "rest apis": "rest",
    "pm": "project management",
    "agile methodology": "agile",
    # Soft skills
    "led": "leadership", "leading": "leadership",
}

# Supplementary keyword dictionary for common terms that TF-IDF might miss
# due to short document length.
COMMON_KEYWORDS = {
    # Programming languages
    "python", "javascript", "typescript", "java", "c++", "c#", "go", "rust",
    "ruby", "php", "swift", "kotlin", "scala", "sql",
    # Frontend
    "react", "angular", "vue", "next.js", "html", "css", "tailwind",
    # Backend
    "node.js", "fastapi", "django", "flask", "spring", "rails", "graphql", "rest",
    # Cloud & DevOps
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform",
    "jenkins", "ci/cd", "linux",
    # Data
    "postgresql", "mysql", "mongodb", "redis", "elasticsearch", "kafka",
    "spark", "snowflake", "pandas",
    # ML/AI
    "machine learning", "deep learning", "tensorflow", "pytorch",
    "natural language processing", "scikit-learn", "llm", "generative ai",
    # Soft skills & methodologies
    "agile", "scrum", "leadership", "communication", "mentoring",
    "stakeholder management", "project management", "problem-solving",
}

SOFT_SKILLS = frozenset({
    "leadership", "communication", "mentoring", "teamwork", "collaboration",
    "stakeholder management", "project management", "problem-solving",
    "agile", "scrum", "ownership",
})

# Density above which a keyword reads as stuffed (percent of words)
MAX_HEALTHY_DENSITY = 3.0

# Fuzzy match threshold (0-100). Kept high so short terms don't collide.
FUZZY_THRESHOLD = 88

# Reference corpus to provide IDF contrast for a single job description
_TFIDF_REFERENCE = [
    "the candidate should have experience and skills in relevant areas",
    "looking for a professional with strong background and qualifications",
    "requirements include working with teams and delivering results",
]


def _normalize(text: str) -> str:
    # Strip sentence-ending periods but keep dots in tech terms like "node.js"
    text = re.sub(r"\.(\s|$)", " ", text.lower())
    return re.sub(r"[^a-z0-9.#+/ -]", " ", text)


def canonicalize(term: str) -> str:
    """Resolve a term to its canonical form via synonym dictionary."""
    lower = term.lower().strip()
    return SKILL_SYNONYMS.get(lower, lower)


def related_terms(keyword: str) -> list[str]:
    """Synonyms that resolve to the same canonical form as *keyword*."""
    canon = canonicalize(keyword)
    related = {alias for alias, target in SKILL_SYNONYMS.items() if target == canon}
    if canon != keyword.lower():
        related.add(canon)
    related.discard(keyword.lower())
    return sorted(related)


def extract_terms(text: str) -> set[str]:
    """Extract single, bigram and trigram terms from text."""
    word_list = _normalize(text).split()
    words: set[str] = set(word_list)
    for i in range(len(word_list) - 1):
        words.add(f"{word_list[i]} {word_list[i+1]}")
    for i in range(len(word_list) - 2):
        words.add(f"{word_list[i]} {word_list[i+1]} {word_list[i+2]}")
    return words


def keyword_pattern(term: str) -> re.Pattern:
    """Case-insensitive pattern matching *term* as a whole token."""
    escaped = re.escape(term.strip()).replace(r"\ ", r"\s+")
    return re.compile(rf"(?<![A-Za-z0-9]){escaped}(?![A-Za-z0-9+#])", re.IGNORECASE)


def find_occurrences(text: str, keyword: str) -> list[tuple[int, int]]:
    """Spans of *keyword* and its synonyms in *text*, in document order."""
    spans: set[tuple[int, int]] = set()
    for term in [keyword, *related_terms(keyword)]:
        for match in keyword_pattern(term).finditer(text):
            spans.add(match.span())
    return sorted(spans)


def is_technical_term(term: str) -> bool:
    """Check if an extracted term is likely a job-relevant keyword."""
    words = term.lower().split()
    if not words:
        return False
    if len(words) == 1:
        return words[0] not in JD_STOPWORDS and len(words[0]) > 1 and not words[0].isdigit()
    return not any(w in JD_STOPWORDS for w in words)


def extract_tfidf_keywords(text: str, top_n: int = 20) -> list[str]:
    """Extract top keywords from text using TF-IDF scores."""
    if not text.strip():
        return []

    vectorizer = TfidfVectorizer(
        stop_words="english",
        max_features=3000,
        sublinear_tf=True,
        ngram_range=(1, 2),
    )

    try:
        tfidf_matrix = vectorizer.fit_transform([text] + _TFIDF_REFERENCE)
    except ValueError:
        return []
    feature_names = vectorizer.get_feature_names_out()
    scores = tfidf_matrix[0].toarray().flatten()

    # Stable sort so equal scores keep vocabulary order between runs
    top_indices = np.argsort(-scores, kind="stable")[: top_n * 2]
    keywords = [
        str(feature_names[i])
        for i in top_indices
        if scores[i] > 0 and is_technical_term(str(feature_names[i]))
    ]
    return keywords[:top_n]


def extract_dictionary_keywords(job_description: str) -> list[str]:
    """Curated dictionary keywords mentioned in a job description."""
    jd_terms = extract_terms(job_description)
    canonical_jd = {canonicalize(t) for t in jd_terms}
    return sorted(kw for kw in COMMON_KEYWORDS if kw in canonical_jd or kw in jd_terms)


def extract_keywords_combined(job_description: str, top_n: int = 20) -> list[str]:
    """Extract keywords using both dictionary and TF-IDF methods.

    Dictionary hits come first, then TF-IDF terms not already covered.
    """
    dict_kws = extract_dictionary_keywords(job_description)
    covered = {canonicalize(k) for k in dict_kws}
    tfidf_kws = [
        kw for kw in extract_tfidf_keywords(job_description, top_n=top_n)
        if canonicalize(kw) not in covered and not any(kw in c or c in kw for c in covered)
    ]
    return (dict_kws + tfidf_kws)[:top_n]


def stem_match(keyword: str, resume_terms: set[str]) -> bool:
    """Single-word keyword matches a resume word sharing its stem."""
    if " " in keyword.strip() or len(keyword) < 4:
        return False
    stem = _stemmer.stem(keyword.lower())
    return any(_stemmer.stem(t) == stem for t in resume_terms if " " not in t)


def fuzzy_match(keyword: str, resume_terms: set[str]) -> bool:
    """Levenshtein-ratio match for typos and close variants."""
    canon_kw = canonicalize(keyword)
    if len(canon_kw) < 5:
        return False
    return any(
        len(term) >= 5 and fuzz.ratio(canon_kw, term) >= FUZZY_THRESHOLD
        for term in resume_terms
    )


def compute_keyword_density(resume_text: str, keywords: list[str]) -> dict[str, float]:
    """Compute keyword density (occurrences / total words) for each keyword.

    Returns dict of keyword -> density percentage.
    ATS optimal range: 1-3% per primary keyword.
    """
    total_words = len(resume_text.split())
    if total_words == 0:
        return {}

    counts = Counter({kw: len(find_occurrences(resume_text, kw)) for kw in keywords})
    return {kw: round((counts[kw] / total_words) * 100, 2) for kw in keywords}
