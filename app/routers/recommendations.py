"""
Recommendations router - personalized recommendations and feedback signals
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Query

from app.core.config import settings
from app.core.dependencies import get_recommendation_engine
from app.services import recommendations_service
from app.services.recommendations import TemplateRecommendationEngine

router = APIRouter()


@router.get("/stats")
async def get_stats(
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Get recommendation engine statistics (scoring weights, cache usage)
    """
    return await recommendations_service.get_engine_stats(engine)


@router.post("/cache/clear")
async def clear_cache(
    user_id: Optional[str] = Body(None, embed=True, description="Only clear this user"),
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Invalidate cached preference records
    """
    return await recommendations_service.clear_preference_cache(engine, user_id)


@router.post("/usage")
async def record_usage(
    user_id: str = Body(..., description="User ID"),
    template_id: str = Body(..., description="Applied template ID"),
    completed: bool = Body(False, description="Whether setup was completed"),
    customizations: Optional[Dict[str, Any]] = Body(None, description="User customizations"),
    duration: Optional[float] = Body(None, ge=0, description="Time spent in seconds"),
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Record that a user applied a template
    
    Always succeeds: failures to store the signal are logged, not returned.
    """
    return await recommendations_service.record_usage(
        engine,
        user_id=user_id,
        template_id=template_id,
        completed=completed,
        customizations=customizations,
        duration=duration
    )


@router.post("/search")
async def update_search_preferences(
    user_id: str = Body(..., description="User ID"),
    search_term: str = Body(..., description="Search text"),
    selected_template_ids: Optional[List[str]] = Body(None, description="Templates picked from results"),
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Learn preferred tags and categories from a search
    
    Example:
    ```json
    {
        "user_id": "user123",
        "search_term": "lead generation chatbot",
        "selected_template_ids": ["tpl-sales-1"]
    }
    ```
    """
    return await recommendations_service.update_search_preferences(
        engine,
        user_id=user_id,
        search_term=search_term,
        selected_template_ids=selected_template_ids
    )


@router.post("/ratings")
async def record_rating(
    user_id: str = Body(..., description="User ID"),
    template_id: str = Body(..., description="Rated template ID"),
    rating: float = Body(..., ge=0, le=5, description="Rating 0-5"),
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Remember a user's rating of a template
    """
    return await recommendations_service.record_rating(
        engine,
        user_id=user_id,
        template_id=template_id,
        rating=rating
    )


@router.get("/{user_id}")
async def get_user_recommendations(
    user_id: str,
    limit: int = Query(settings.RECOMMENDATION_DEFAULT_LIMIT, ge=0, le=100, description="Number of recommendations"),
    exclude_used: bool = Query(False, description="Skip templates the user already used"),
    categories: Optional[List[str]] = Query(None, description="Restrict to categories"),
    min_rating: Optional[float] = Query(None, ge=0, le=5, description="Minimum template rating"),
    include_reasons: bool = Query(False, description="Explain each score"),
    ids_only: bool = Query(False, description="Return only template IDs (simple array)"),
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Get personalized template recommendations for a user
    
    Parameters:
    - limit: Number of recommendations (0-100)
    - exclude_used: Drop templates present in the user's usage history
    - categories: Repeatable, e.g. ?categories=sales&categories=support
    - min_rating: Minimum average rating
    - include_reasons: Add category/tag/trending/rating explanations
    - ids_only: If true, returns only array of IDs
    
    An empty list means no suggestions are available.
    """
    return await recommendations_service.get_recommendations(
        engine,
        user_id=user_id,
        limit=limit,
        exclude_used=exclude_used,
        categories=categories,
        min_rating=min_rating,
        include_reasons=include_reasons,
        ids_only=ids_only
    )
