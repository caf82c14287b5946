"""Lazy-loading scorer registry.

Scorers are stateless, so one shared instance per dimension is enough.
Sessions may bypass the registry by injecting their own scorers.
"""

import logging

from resume_optimizer.config import settings
from resume_optimizer.models.analysis import Dimension
from resume_optimizer.services.scorers.base import DimensionScorer

logger = logging.getLogger(__name__)

_registry: dict[Dimension, DimensionScorer] = {}


def _create_scorer(dimension: Dimension) -> DimensionScorer:
    """Factory: create a scorer by dimension with deferred imports."""
    if dimension == Dimension.KEYWORD:
        from resume_optimizer.services.scorers.keyword import KeywordScorer
        return KeywordScorer()
    elif dimension == Dimension.GRAMMAR:
        if settings.grammar_backend == "gemini":
            from resume_optimizer.services.scorers.gemini_grammar import GeminiGrammarScorer
            return GeminiGrammarScorer()
        from resume_optimizer.services.scorers.grammar import GrammarScorer
        return GrammarScorer()
    elif dimension == Dimension.FORMAT:
        from resume_optimizer.services.scorers.format import FormatScorer
        return FormatScorer()
    elif dimension == Dimension.QUANTITATIVE:
        from resume_optimizer.services.scorers.quantitative import QuantitativeScorer
        return QuantitativeScorer()
    else:
        raise ValueError(f"Unknown dimension: {dimension}")


def get_scorer(dimension: Dimension) -> DimensionScorer:
    """Get a scorer by dimension, creating and loading it on first access."""
    if dimension not in _registry:
        _registry[dimension] = _create_scorer(dimension)
    scorer = _registry[dimension]
    scorer.ensure_loaded()
    return scorer


def register(scorer: DimensionScorer) -> None:
    """Replace the shared scorer for ``scorer.dimension``."""
    logger.info("Registering %s scorer: %s", scorer.dimension.value, type(scorer).__name__)
    _registry[scorer.dimension] = scorer


def clear() -> None:
    """Drop all scorers. Useful for testing."""
    _registry.clear()
