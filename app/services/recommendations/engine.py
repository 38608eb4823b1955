"""
Main recommendation engine
Coordinates the catalog, preference store, scoring and trending
"""
import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.services.recommendations.algorithms import ScoringEngine, TrendingAggregator
from app.services.recommendations.base import PreferencePersistence, TemplateCatalog, UsageAnalytics
from app.services.recommendations.cache import PreferenceCache
from app.services.recommendations.models import (
    RecommendationOptions,
    RecommendationResult,
    TemplateRecord,
    TemplateSearchFilters
)
from app.services.recommendations.preferences import PreferenceStore
from app.services.recommendations.similarity import calculate_template_similarity
from app.services.utils.constants import DEFAULT_TRENDING_TIMEFRAME
from app.services.utils.validators import validate_identifier, validate_limit, validate_rating

logger = logging.getLogger(__name__)


class TemplateRecommendationEngine:
    """
    Template recommendation engine
    
    Read operations raise ValueError for malformed arguments and otherwise
    degrade to empty (or fallback) results when storage fails. Write
    operations never raise: usage, search and rating signals are best-effort.
    """
    
    def __init__(
        self,
        catalog: TemplateCatalog,
        persistence: PreferencePersistence,
        analytics: UsageAnalytics,
        cache: Optional[PreferenceCache] = None,
        candidate_pool: int = 100
    ):
        """
        Initialize recommendation engine
        
        Args:
            catalog: Template catalog accessor
            persistence: Preference persistence
            analytics: Usage analytics store
            cache: Preference cache (a default PreferenceCache if None)
            candidate_pool: Maximum templates fetched per recommendation call
        """
        self.catalog = catalog
        self.analytics = analytics
        self.candidate_pool = candidate_pool
        
        # Components
        self.preferences = PreferenceStore(persistence, cache)
        self.scorer = ScoringEngine()
        self.trending = TrendingAggregator(catalog, analytics)
    
    async def get_recommendations(
        self,
        user_id: str,
        options: Optional[RecommendationOptions] = None
    ) -> RecommendationResult:
        """
        Get personalized recommendations for a user
        
        Args:
            user_id: User identifier
            options: Limit, filters and reason flag (defaults if None)
            
        Returns:
            RecommendationResult with templates and parallel scores,
            empty when the catalog or preferences are unavailable
        """
        options = options or RecommendationOptions()
        validate_identifier(user_id, "user_id")
        validate_limit(options.limit)
        validate_rating(options.min_rating, "min_rating")
        
        start_time = time.time()
        result = RecommendationResult(user_id=user_id)
        
        try:
            preferences = await self.preferences.get(user_id)
            
            candidates, _ = await self.catalog.search(
                TemplateSearchFilters(is_public=True, min_rating=options.min_rating),
                page=1,
                limit=self.candidate_pool
            )
            
            if options.exclude_used:
                used_ids = preferences.used_template_ids()
                candidates = [t for t in candidates if t.id not in used_ids]
            
            if options.categories:
                allowed = set(options.categories)
                candidates = [t for t in candidates if t.category in allowed]
            
            scores = self.scorer.score(candidates, preferences, options.include_reasons)
            
            # Equal scores are ordered by template id
            scores.sort(key=lambda s: (-s.score, s.template_id))
            scores = scores[:options.limit]
            
            by_id = {template.id: template for template in candidates}
            result.scores = [s for s in scores if s.template_id in by_id]
            result.templates = [by_id[s.template_id] for s in result.scores]
        
        except Exception as e:
            logger.error(f"Failed to get recommendations for user {user_id}: {e}")
            result.templates, result.scores = [], []
        
        result.execution_time_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"Recommendations for {user_id}: {len(result.templates)} templates "
            f"in {result.execution_time_ms:.1f} ms"
        )
        return result
    
    async def get_similar_templates(
        self,
        template_id: str,
        limit: int = 5
    ) -> List[TemplateRecord]:
        """
        Get public templates similar to a template, most similar first
        
        Args:
            template_id: Template to compare against
            limit: Maximum number of templates
            
        Returns:
            Similar templates (never including the template itself)
        """
        validate_identifier(template_id, "template_id")
        validate_limit(limit)
        
        try:
            template = await self.catalog.get_by_id(template_id)
            if template is None:
                return []
            
            category_templates, _ = await self.catalog.search(
                TemplateSearchFilters(category=template.category, is_public=True),
                page=1,
                limit=self.candidate_pool
            )
            
            similarities = [
                (candidate, calculate_template_similarity(template, candidate))
                for candidate in category_templates
                if candidate.id != template_id
            ]
            similarities.sort(key=lambda pair: (-pair[1], pair[0].id))
            return [candidate for candidate, _ in similarities[:limit]]
        
        except Exception as e:
            logger.error(f"Failed to get similar templates for {template_id}: {e}")
            return []
    
    async def get_trending_templates(
        self,
        timeframe: str = DEFAULT_TRENDING_TIMEFRAME,
        limit: int = 10
    ) -> List[TemplateRecord]:
        """
        Get trending templates for a timeframe (day, week or month)
        """
        return await self.trending.get_trending(timeframe, limit)
    
    async def record_template_usage(
        self,
        user_id: str,
        template_id: str,
        completed: bool = False,
        customizations: Optional[Dict[str, Any]] = None,
        duration: Optional[float] = None
    ) -> None:
        """
        Record that a user applied a template
        
        Updates the user's usage history and the daily analytics counter.
        Both are best-effort and independent of each other.
        """
        if not self._valid_write(user_id=user_id, template_id=template_id):
            return
        
        try:
            await self.preferences.record_usage(
                user_id,
                template_id,
                completed=completed,
                customizations=customizations,
                duration=duration
            )
        except Exception as e:
            logger.error(f"Failed to record template usage for user {user_id}: {e}")
        
        try:
            await self.analytics.record_daily(template_id, user_id, datetime.utcnow().date())
        except Exception as e:
            logger.warning(f"Failed to record usage analytics for template {template_id}: {e}")
    
    async def update_search_preferences(
        self,
        user_id: str,
        search_term: str,
        selected_template_ids: Optional[List[str]] = None
    ) -> None:
        """
        Learn preferences from a search and the templates selected from it
        """
        if not self._valid_write(user_id=user_id):
            return
        
        try:
            selected = []
            for template_id in selected_template_ids or []:
                template = await self.catalog.get_by_id(template_id)
                if template is not None:
                    selected.append(template)
            
            await self.preferences.update_search_preferences(user_id, search_term or "", selected)
        except Exception as e:
            logger.error(f"Failed to update search preferences for user {user_id}: {e}")
    
    async def record_template_rating(
        self,
        user_id: str,
        template_id: str,
        rating: float
    ) -> None:
        """
        Remember a user's rating of a template
        
        Raises:
            ValueError: If the rating is outside 0-5
        """
        rating = validate_rating(rating)
        if rating is None:
            raise ValueError("rating is required")
        if not self._valid_write(user_id=user_id, template_id=template_id):
            return
        
        try:
            await self.preferences.record_rating(user_id, template_id, rating)
        except Exception as e:
            logger.error(f"Failed to record rating of {template_id} for user {user_id}: {e}")
    
    def clear_cache(self, user_id: Optional[str] = None) -> int:
        """
        Invalidate cached preferences (one user or everyone)
        
        Returns:
            Number of entries removed
        """
        return self.preferences.clear_cache(user_id)
    
    @staticmethod
    def _valid_write(**identifiers: Any) -> bool:
        for name, value in identifiers.items():
            try:
                validate_identifier(value, name)
            except ValueError as e:
                logger.warning(f"Ignoring write with invalid input: {e}")
                return False
        return True
    
    def get_stats(self) -> Dict:
        """Get engine statistics"""
        return {
            "candidate_pool": self.candidate_pool,
            "scoring": self.scorer.get_info(),
            "trending": self.trending.get_info(),
            "cache": self.preferences.cache.get_stats()
        }
