from resume_optimizer.services.keyword_extractor import (
    canonicalize,
    compute_keyword_density,
    extract_dictionary_keywords,
    extract_keywords_combined,
    extract_terms,
    extract_tfidf_keywords,
    find_occurrences,
    fuzzy_match,
    is_technical_term,
    related_terms,
    stem_match,
)


SAMPLE_JD = """
Senior Python Developer

Requirements:
- 5+ years of experience with Python
- Strong knowledge of Django or FastAPI
- Experience with PostgreSQL and Redis
- Familiarity with Docker and Kubernetes (k8s)
"""


def test_canonicalize_synonyms():
    assert canonicalize("K8s") == "kubernetes"
    assert canonicalize("ReactJS") == "react"
    assert canonicalize("Python") == "python"


def test_related_terms():
    assert "k8s" in related_terms("Kubernetes")
    assert related_terms("k8s") == ["kube", "kubernetes"]


def test_find_occurrences_is_case_insensitive_and_whole_token():
    text = "Used python daily. Pythonic code. PYTHON scripts."
    spans = find_occurrences(text, "Python")
    assert [text[s:e] for s, e in spans] == ["python", "PYTHON"]


def test_find_occurrences_includes_synonyms():
    text = "Ran services on k8s and Kubernetes"
    assert len(find_occurrences(text, "Kubernetes")) == 2


def test_find_occurrences_respects_symbol_suffixes():
    assert find_occurrences("Wrote C++ and C# tools", "C") == []


def test_dictionary_keywords_from_jd():
    keywords = extract_dictionary_keywords(SAMPLE_JD)
    for kw in ("python", "django", "fastapi", "postgresql", "redis", "docker", "kubernetes"):
        assert kw in keywords


def test_tfidf_keywords_filter_boilerplate():
    keywords = extract_tfidf_keywords(SAMPLE_JD)
    assert keywords
    assert "experience" not in keywords
    assert "requirements" not in keywords


def test_tfidf_empty_text():
    assert extract_tfidf_keywords("   ") == []


def test_combined_puts_dictionary_hits_first():
    keywords = extract_keywords_combined(SAMPLE_JD)
    dictionary = extract_dictionary_keywords(SAMPLE_JD)
    assert keywords[:len(dictionary)] == dictionary


def test_combined_is_deterministic():
    assert extract_keywords_combined(SAMPLE_JD) == extract_keywords_combined(SAMPLE_JD)


def test_is_technical_term():
    assert is_technical_term("graphql")
    assert not is_technical_term("experience")
    assert not is_technical_term("senior engineer")
    assert not is_technical_term("401")


def test_stem_and_fuzzy_match():
    terms = extract_terms("Deployed services on Kubernets clusters")
    assert stem_match("Testing", extract_terms("Tested the release"))
    assert not stem_match("Go", extract_terms("going places"))
    assert fuzzy_match("Kubernetes", terms)
    assert not fuzzy_match("Go", terms)


def test_keyword_density():
    text = "Python Python Docker words words words words words words words"
    density = compute_keyword_density(text, ["Python", "Docker", "Rust"])
    assert density == {"Python": 20.0, "Docker": 10.0, "Rust": 0.0}
    assert compute_keyword_density("", ["Python"]) == {}
