"""
Trending templates from windowed usage analytics
Falls back to overall catalog popularity when analytics are empty or unavailable
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from app.services.recommendations.base import TemplateCatalog, UsageAnalytics
from app.services.recommendations.models import TemplateRecord, TemplateSearchFilters
from app.services.utils.constants import DEFAULT_TRENDING_TIMEFRAME
from app.services.utils.validators import validate_limit, validate_timeframe

logger = logging.getLogger(__name__)


class TrendingAggregator:
    """
    Analytics-based trending templates
    
    NO personalization - returns same results for all users.
    Never raises for I/O problems: trending is an enhancement, so every
    failure degrades to the catalog's most popular public templates.
    """
    
    name = "trending"
    
    def __init__(self, catalog: TemplateCatalog, analytics: UsageAnalytics):
        self.catalog = catalog
        self.analytics = analytics
    
    async def get_trending(
        self,
        timeframe: str = DEFAULT_TRENDING_TIMEFRAME,
        limit: int = 10,
        today: Optional[date] = None
    ) -> List[TemplateRecord]:
        """
        Get trending templates
        
        Args:
            timeframe: "day", "week" or "month"
            limit: Maximum number of templates
            today: Reference day (defaults to the current UTC day)
            
        Returns:
            Templates ordered by usage within the window
            
        Raises:
            ValueError: On unknown timeframe or negative limit
        """
        days = validate_timeframe(timeframe)
        validate_limit(limit)
        if limit == 0:
            return []
        
        since = (today or datetime.utcnow().date()) - timedelta(days=days)
        
        try:
            rows = await self.analytics.query_window(since, limit=limit)
            if not rows:
                logger.info(f"No usage analytics since {since.isoformat()}, using popular templates")
                return await self._popular_fallback(limit)
            
            ranking = {}
            for template_id, usage_count in rows[:limit]:
                ranking.setdefault(template_id, usage_count)
            
            templates, _ = await self.catalog.search(
                TemplateSearchFilters(template_ids=list(ranking), is_public=True),
                page=1,
                limit=len(ranking)
            )
            
            # Catalog order is by overall popularity; restore the window order
            order = {template_id: position for position, template_id in enumerate(ranking)}
            trending = sorted(
                (t for t in templates if t.id in order),
                key=lambda t: order[t.id]
            )
            if not trending:
                logger.info("Trending templates are not public anymore, using popular templates")
                return await self._popular_fallback(limit)
            return trending
        
        except Exception as e:
            logger.warning(f"Failed to get trending templates ({timeframe}): {e}. Using fallback...")
            return await self._popular_fallback(limit)
    
    async def _popular_fallback(self, limit: int) -> List[TemplateRecord]:
        """Most popular public templates overall"""
        try:
            templates, _ = await self.catalog.search(
                TemplateSearchFilters(is_public=True),
                page=1,
                limit=limit
            )
            return templates
        except Exception as e:
            logger.error(f"Popular templates fallback also failed: {e}")
            return []
    
    def get_info(self) -> dict:
        """Get information about the aggregator"""
        return {
            "name": self.name,
            "type": self.__class__.__name__,
            "personalized": False,
            "source": "usage_analytics"
        }
