"""Prompt templates for Gemini-backed scorers."""


def build_grammar_prompt(resume_text: str) -> str:
    """Grammar/readability review returning issues anchored to exact source text."""
    return f"""You are an expert resume editor reviewing grammar, style and readability.

Review the resume below. Report only concrete problems: spelling mistakes,
grammar errors, punctuation errors, weak or generic verbs, passive voice and
overlong sentences.

RULES:
- "context" must be copied VERBATIM from the resume (exact characters, same case).
- If you propose a fix, the first entry of "suggestions" must be a drop-in
  replacement for "context". Leave "suggestions" empty for advice without a fix.
- Do not report more than 20 issues.

RESUME:
---
{resume_text}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "score": <integer 0-100, overall writing quality>,
  "overall_readability": <integer 0-100, higher is easier to read>,
  "issues": [
    {{
      "type": "<spelling|grammar|punctuation|style>",
      "severity": "<error|warning|suggestion>",
      "rule": "<short kebab-case rule name>",
      "message": "<one sentence explanation>",
      "context": "<exact text from the resume>",
      "suggestions": ["<replacement for context>"]
    }}
  ]
}}"""
