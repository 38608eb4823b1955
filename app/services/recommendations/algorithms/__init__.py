"""
Recommendation algorithms
"""
from .scoring import ScoringEngine
from .trending import TrendingAggregator

__all__ = [
    "ScoringEngine",
    "TrendingAggregator"
]
