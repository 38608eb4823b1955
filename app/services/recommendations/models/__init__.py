"""
Models for recommendations
"""
from .template import TemplateCategory, TemplateRecord, TemplateSearchFilters
from .user_profile import TemplateRating, TemplateUsage, UserPreferences
from .recommendation import (
    ReasonType,
    RecommendationOptions,
    RecommendationReason,
    RecommendationResult,
    RecommendationScore
)

__all__ = [
    "TemplateCategory",
    "TemplateRecord",
    "TemplateSearchFilters",
    "TemplateRating",
    "TemplateUsage",
    "UserPreferences",
    "ReasonType",
    "RecommendationOptions",
    "RecommendationReason",
    "RecommendationResult",
    "RecommendationScore"
]
