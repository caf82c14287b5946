import os

from pydantic import model_validator
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_max_retries: int = 2
    gemini_retry_backoff_seconds: float = 0.5
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Scorer selection: "rules" (deterministic) | "gemini" (remote model)
    grammar_backend: str = "rules"
    scorer_timeout_seconds: float = 30.0

    # Weighting policy for overallScore. Normalized at use, so only ratios matter.
    weight_keyword: float = 0.35
    weight_grammar: float = 0.20
    weight_format: float = 0.20
    weight_quantitative: float = 0.25

    # Strength / weakness bands applied per dimension score
    strength_threshold: int = 85
    weakness_threshold: int = 60

    max_suggestions: int = 15
    analysis_rate_limit: str = "10/minute"
    min_resume_words: int = 5
    max_resume_chars: int = 50000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_weights(self) -> "Settings":
        weights = (
            self.weight_keyword,
            self.weight_grammar,
            self.weight_format,
            self.weight_quantitative,
        )
        if any(w < 0 for w in weights) or sum(weights) <= 0:
            raise ValueError("dimension weights must be non-negative and not all zero")
        if self.weakness_threshold > self.strength_threshold:
            raise ValueError("weakness_threshold must not exceed strength_threshold")
        return self

    def dimension_weights(self) -> dict[str, float]:
        """Normalized weight per dimension name; values sum to 1.0."""
        raw = {
            "keyword": self.weight_keyword,
            "grammar": self.weight_grammar,
            "format": self.weight_format,
            "quantitative": self.weight_quantitative,
        }
        total = sum(raw.values())
        return {name: w / total for name, w in raw.items()}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
