"""
FastAPI dependencies
"""
from fastapi import Request

from app.services.recommendations import TemplateRecommendationEngine


def get_recommendation_engine(request: Request) -> TemplateRecommendationEngine:
    """
    Dependency returning the engine created at startup
    Usage: engine: TemplateRecommendationEngine = Depends(get_recommendation_engine)
    """
    return request.app.state.recommendation_engine
