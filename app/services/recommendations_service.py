"""
Recommendations service - high-level business logic for recommendations
Builds the engine and converts its results to API responses
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.config import settings
from app.services.recommendations import (
    PreferenceCache,
    RecommendationOptions,
    TemplateCategory,
    TemplateRecommendationEngine
)
from app.services.recommendations.repository import (
    SqlPreferencePersistence,
    SqlTemplateCatalog,
    SqlUsageAnalytics
)

logger = logging.getLogger(__name__)


def parse_categories(categories: Optional[List[str]]) -> Optional[List[TemplateCategory]]:
    """
    Parse category names given by a caller
    
    Raises:
        ValueError: On a name that is not a known category
    """
    if not categories:
        return None
    
    parsed = []
    for category in categories:
        try:
            parsed.append(TemplateCategory(category.strip().lower()))
        except ValueError:
            known = ", ".join(c.value for c in TemplateCategory)
            raise ValueError(f"Unknown category {category!r}, expected one of: {known}")
    return parsed


def create_engine(session_factory: async_sessionmaker) -> TemplateRecommendationEngine:
    """
    Build a recommendation engine backed by the database
    
    Args:
        session_factory: Async session factory
        
    Returns:
        Engine with SQL collaborators and a process-wide preference cache
    """
    engine = TemplateRecommendationEngine(
        catalog=SqlTemplateCatalog(session_factory),
        persistence=SqlPreferencePersistence(session_factory),
        analytics=SqlUsageAnalytics(session_factory),
        cache=PreferenceCache(max_size=settings.PREFERENCE_CACHE_MAX_SIZE),
        candidate_pool=settings.RECOMMENDATION_CANDIDATE_POOL
    )
    logger.info(
        f"Recommendation engine created (candidate pool {settings.RECOMMENDATION_CANDIDATE_POOL}, "
        f"cache size {settings.PREFERENCE_CACHE_MAX_SIZE or 'unbounded'})"
    )
    return engine


async def get_recommendations(
    engine: TemplateRecommendationEngine,
    user_id: str,
    limit: int = 10,
    exclude_used: bool = False,
    categories: Optional[List[str]] = None,
    min_rating: Optional[float] = None,
    include_reasons: bool = False,
    ids_only: bool = False
) -> Dict[str, Any] | List[str]:
    """
    Get recommendations for a user
    
    Args:
        engine: Recommendation engine
        user_id: User identifier
        limit: Number of recommendations
        exclude_used: Skip templates the user already used
        categories: Restrict to these categories
        min_rating: Minimum template rating
        include_reasons: Attach explanations to scores
        ids_only: If True, return simple array of template IDs
        
    Returns:
        Full format (ids_only=false):
        {
            "user_id": "user123",
            "templates": [{id, name, category, ...}],
            "scores": [{template_id, score, reasons, confidence}],
            "execution_time_ms": 12.3,
            ...
        }
        
        IDs only (ids_only=true):
        ["tpl-sales-1", "tpl-support-4", ...]
    """
    options = RecommendationOptions(
        limit=limit,
        exclude_used=exclude_used,
        categories=parse_categories(categories),
        min_rating=min_rating,
        include_reasons=include_reasons
    )
    result = await engine.get_recommendations(user_id, options)
    
    if ids_only:
        return [template.id for template in result.templates]
    
    return result.to_dict()


async def get_similar_templates(
    engine: TemplateRecommendationEngine,
    template_id: str,
    limit: int = 5
) -> Dict[str, Any]:
    """Get templates similar to a template"""
    templates = await engine.get_similar_templates(template_id, limit)
    return {
        "template_id": template_id,
        "templates": [template.to_dict() for template in templates],
        "count": len(templates)
    }


async def get_trending_templates(
    engine: TemplateRecommendationEngine,
    timeframe: str = "week",
    limit: int = 10
) -> Dict[str, Any]:
    """Get trending templates for a timeframe"""
    templates = await engine.get_trending_templates(timeframe, limit)
    return {
        "timeframe": timeframe,
        "templates": [template.to_dict() for template in templates],
        "count": len(templates)
    }


async def record_usage(
    engine: TemplateRecommendationEngine,
    user_id: str,
    template_id: str,
    completed: bool = False,
    customizations: Optional[Dict[str, Any]] = None,
    duration: Optional[float] = None
) -> Dict[str, Any]:
    """Record template usage (best-effort)"""
    await engine.record_template_usage(
        user_id,
        template_id,
        completed=completed,
        customizations=customizations,
        duration=duration
    )
    return {"success": True, "user_id": user_id, "template_id": template_id}


async def update_search_preferences(
    engine: TemplateRecommendationEngine,
    user_id: str,
    search_term: str,
    selected_template_ids: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Learn from a search (best-effort)"""
    await engine.update_search_preferences(user_id, search_term, selected_template_ids or [])
    return {"success": True, "user_id": user_id}


async def record_rating(
    engine: TemplateRecommendationEngine,
    user_id: str,
    template_id: str,
    rating: float
) -> Dict[str, Any]:
    """Record a template rating (best-effort)"""
    await engine.record_template_rating(user_id, template_id, rating)
    return {"success": True, "user_id": user_id, "template_id": template_id}


async def clear_preference_cache(
    engine: TemplateRecommendationEngine,
    user_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Invalidate cached preferences
    
    Args:
        engine: Recommendation engine
        user_id: Only this user (None for all)
        
    Returns:
        Number of removed entries
    """
    removed = engine.clear_cache(user_id)
    return {"success": True, "removed": removed}


async def get_engine_stats(engine: TemplateRecommendationEngine) -> Dict[str, Any]:
    """Get recommendation engine statistics"""
    return engine.get_stats()
