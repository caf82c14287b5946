"""Tests for the Gemini-backed grammar scorer with a stubbed client."""

import pytest

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import GrammarCheck
from resume_optimizer.services import gemini_client
from resume_optimizer.services.prompt_builder import build_grammar_prompt
from resume_optimizer.services.scorers.gemini_grammar import (
    GeminiGrammarScorer,
    GeminiUnavailableError,
)


RESUME = "Experience\n- Responsible for the vendor budget\n- Built teh billing API for partners\n"

RESPONSE = {
    "score": 82,
    "overall_readability": 64,
    "issues": [
        {
            "type": "spelling",
            "severity": "error",
            "rule": "misspelling",
            "message": "'teh' should be 'the'",
            "context": "Built teh billing API",
            "suggestions": ["Built the billing API"],
        },
        {
            "type": "clarity",
            "severity": "critical",
            "message": "Not anchored in the text",
            "context": "this text does not exist",
            "suggestions": [],
        },
        {
            "type": "clarity",
            "severity": "critical",
            "message": "Generic opener",
            "context": "Responsible for",
            "suggestions": [],
        },
    ],
}


class _StubGenerate:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0

    async def __call__(self, prompt):
        self.calls += 1
        return self.responses.pop(0) if self.responses else None


@pytest.fixture
def fast_retries(monkeypatch):
    monkeypatch.setattr(settings, "gemini_max_retries", 2)
    monkeypatch.setattr(settings, "gemini_retry_backoff_seconds", 0.0)


@pytest.mark.gemini
class TestGeminiGrammarScorer:
    @pytest.mark.asyncio
    async def test_builds_grammar_check(self, monkeypatch, fast_retries):
        stub = _StubGenerate([RESPONSE])
        monkeypatch.setattr(gemini_client, "generate_json", stub)

        result = await GeminiGrammarScorer().ascore(RESUME)

        assert isinstance(result, GrammarCheck)
        assert result.score == 82
        assert result.overall_readability == 64
        # unanchored issue is dropped
        assert result.total_issues == 2
        first = result.issues[0]
        assert first.id == "g1"
        assert RESUME[first.position.start:first.position.end] == "Built teh billing API"
        assert first.position.line == 3
        assert first.suggestions == ["Built the billing API"]

    @pytest.mark.asyncio
    async def test_unknown_labels_are_coerced(self, monkeypatch, fast_retries):
        monkeypatch.setattr(gemini_client, "generate_json", _StubGenerate([RESPONSE]))
        result = await GeminiGrammarScorer().ascore(RESUME)
        assert result.issues[1].type == "style"
        assert result.issues[1].severity == "suggestion"

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, monkeypatch, fast_retries):
        stub = _StubGenerate([None, RESPONSE])
        monkeypatch.setattr(gemini_client, "generate_json", stub)
        result = await GeminiGrammarScorer().ascore(RESUME)
        assert stub.calls == 2
        assert result.score == 82

    @pytest.mark.asyncio
    async def test_raises_after_retries_exhausted(self, monkeypatch, fast_retries):
        stub = _StubGenerate([])
        monkeypatch.setattr(gemini_client, "generate_json", stub)
        with pytest.raises(GeminiUnavailableError):
            await GeminiGrammarScorer().ascore(RESUME)
        assert stub.calls == 3

    @pytest.mark.asyncio
    async def test_malformed_response_is_retried(self, monkeypatch, fast_retries):
        stub = _StubGenerate([{"issues": None}, RESPONSE])
        monkeypatch.setattr(gemini_client, "generate_json", stub)
        result = await GeminiGrammarScorer().ascore(RESUME)
        assert stub.calls == 2
        assert result.total_issues == 2

    @pytest.mark.asyncio
    async def test_short_text_skips_remote_call(self, monkeypatch, fast_retries):
        stub = _StubGenerate([RESPONSE])
        monkeypatch.setattr(gemini_client, "generate_json", stub)
        result = await GeminiGrammarScorer().ascore("Managed projects.")
        assert stub.calls == 0
        assert result.score == 0
        assert result.issues[0].rule == "insufficient-text"


def test_prompt_embeds_resume():
    prompt = build_grammar_prompt(RESUME)
    assert RESUME in prompt
    assert "Respond with ONLY valid JSON" in prompt
