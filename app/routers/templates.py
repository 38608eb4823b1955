"""
Templates router - trending and similar templates
"""
from fastapi import APIRouter, Depends, Query

from app.core.config import settings
from app.core.dependencies import get_recommendation_engine
from app.services import recommendations_service
from app.services.recommendations import TemplateRecommendationEngine

router = APIRouter()


@router.get("/trending")
async def get_trending_templates(
    timeframe: str = Query("week", pattern="^(day|week|month)$", description="day, week or month"),
    limit: int = Query(settings.TRENDING_DEFAULT_LIMIT, ge=0, le=100, description="Number of templates"),
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Get templates with the most usage in the timeframe
    
    Falls back to the most popular public templates when there is no recent usage.
    """
    return await recommendations_service.get_trending_templates(engine, timeframe, limit)


@router.get("/{template_id}/similar")
async def get_similar_templates(
    template_id: str,
    limit: int = Query(settings.SIMILAR_TEMPLATES_DEFAULT_LIMIT, ge=0, le=100, description="Number of templates"),
    engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Get public templates of the same category ranked by content similarity
    """
    return await recommendations_service.get_similar_templates(engine, template_id, limit)
