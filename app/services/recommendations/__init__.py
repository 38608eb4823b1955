"""
Recommendations module
Template recommendation engine with preference caching, scoring and trending
"""
from .engine import TemplateRecommendationEngine
from .models import (
    RecommendationOptions,
    RecommendationResult,
    RecommendationScore,
    TemplateCategory,
    TemplateRecord,
    UserPreferences
)
from .cache import PreferenceCache
from .preferences import PreferenceStore
from .similarity import calculate_template_similarity

__all__ = [
    "TemplateRecommendationEngine",
    "RecommendationOptions",
    "RecommendationResult",
    "RecommendationScore",
    "TemplateCategory",
    "TemplateRecord",
    "UserPreferences",
    "PreferenceCache",
    "PreferenceStore",
    "calculate_template_similarity"
]
