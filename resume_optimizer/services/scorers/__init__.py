"""Pluggable dimension scorers, one interchangeable implementation per dimension."""

from resume_optimizer.services.scorers.base import DimensionScorer
from resume_optimizer.services.scorers.registry import clear, get_scorer, register

__all__ = ["DimensionScorer", "clear", "get_scorer", "register"]
