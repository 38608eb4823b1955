"""
Preference store
Loads, caches and persists per-user preference records
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from app.services.recommendations.base import PreferencePersistence
from app.services.recommendations.cache import PreferenceCache
from app.services.recommendations.models import (
    TemplateRating,
    TemplateRecord,
    TemplateUsage,
    UserPreferences
)
from app.services.utils.constants import (
    SEARCH_HISTORY_LIMIT,
    SEARCH_TAG_VOCABULARY,
    USAGE_HISTORY_LIMIT
)

logger = logging.getLogger(__name__)


def extract_tags_from_search(search_term: str) -> List[str]:
    """
    Pick vocabulary tags mentioned in a free-text search
    
    A tag matches when the text contains it either verbatim
    ("lead-generation") or with spaces instead of hyphens ("lead generation").
    
    Args:
        search_term: Raw search text
        
    Returns:
        Matching tags in vocabulary order
    """
    search_lower = (search_term or "").lower()
    return [
        tag for tag in SEARCH_TAG_VOCABULARY
        if tag in search_lower or tag.replace("-", " ") in search_lower
    ]


class PreferenceStore:
    """
    Owns the preference cache and talks to the persistence collaborator
    
    get() always yields a usable record: a user without a stored record
    gets a fresh empty one. Mutations are applied to the cached instance,
    so later get() calls see them immediately.
    """
    
    def __init__(
        self,
        persistence: PreferencePersistence,
        cache: Optional[PreferenceCache] = None
    ):
        self.persistence = persistence
        self.cache = cache if cache is not None else PreferenceCache()
    
    async def get(self, user_id: str) -> UserPreferences:
        """
        Get preferences of a user, creating an empty record if absent
        
        Args:
            user_id: User identifier
            
        Returns:
            UserPreferences (never None)
        """
        cached = self.cache.get(user_id)
        if cached is not None:
            return cached
        
        try:
            preferences = await self.persistence.load(user_id)
        except Exception as e:
            # Not cached, so the next call retries the load
            logger.warning(f"Failed to load preferences for user {user_id}: {e}. Using defaults")
            return UserPreferences(user_id=user_id)
        
        if preferences is None:
            preferences = UserPreferences(user_id=user_id)
            try:
                await self.save(preferences)
            except Exception as e:
                logger.warning(f"Failed to persist default preferences for user {user_id}: {e}")
        
        self.cache.set(user_id, preferences)
        return preferences
    
    async def save(self, preferences: UserPreferences) -> None:
        """
        Persist a record and refresh the cache
        
        Args:
            preferences: Record to save (last_updated is stamped here)
        """
        preferences.last_updated = datetime.utcnow()
        # Cached before the upsert; a failed upsert still leaves the in-process state updated
        self.cache.set(preferences.user_id, preferences)
        await self.persistence.upsert(preferences)
    
    async def record_usage(
        self,
        user_id: str,
        template_id: str,
        completed: bool = False,
        customizations: Optional[Dict[str, Any]] = None,
        duration: Optional[float] = None
    ) -> UserPreferences:
        """
        Append a usage event, keeping the most recent USAGE_HISTORY_LIMIT
        
        Returns:
            The updated record
        """
        preferences = await self.get(user_id)
        preferences.usage_history.append(TemplateUsage(
            template_id=template_id,
            completed=completed,
            customizations=dict(customizations or {}),
            duration=duration
        ))
        
        if len(preferences.usage_history) > USAGE_HISTORY_LIMIT:
            preferences.usage_history = preferences.usage_history[-USAGE_HISTORY_LIMIT:]
        
        await self.save(preferences)
        return preferences
    
    async def update_search_preferences(
        self,
        user_id: str,
        search_term: str,
        selected_templates: Iterable[TemplateRecord] = ()
    ) -> UserPreferences:
        """
        Learn from a search and the templates picked from its results
        
        Args:
            user_id: User identifier
            search_term: Raw search text
            selected_templates: Templates the user selected
            
        Returns:
            The updated record
        """
        preferences = await self.get(user_id)
        
        # Blank searches are not recorded
        if search_term and search_term.strip():
            preferences.search_history.append(search_term)
            if len(preferences.search_history) > SEARCH_HISTORY_LIMIT:
                preferences.search_history = preferences.search_history[-SEARCH_HISTORY_LIMIT:]
        
        for tag in extract_tags_from_search(search_term):
            preferences.add_tag(tag)
        
        for template in selected_templates:
            preferences.add_category(template.category)
            for tag in template.tags:
                preferences.add_tag(tag)
        
        await self.save(preferences)
        return preferences
    
    async def record_rating(
        self,
        user_id: str,
        template_id: str,
        rating: float
    ) -> UserPreferences:
        """
        Store a user's rating, replacing an earlier rating of the same template
        
        Returns:
            The updated record
        """
        preferences = await self.get(user_id)
        preferences.ratings = [
            r for r in preferences.ratings if r.template_id != template_id
        ]
        preferences.ratings.append(TemplateRating(template_id=template_id, rating=rating))
        
        await self.save(preferences)
        return preferences
    
    def clear_cache(self, user_id: Optional[str] = None) -> int:
        """
        Drop cached records
        
        Args:
            user_id: Only drop this user (None for everyone)
            
        Returns:
            Number of entries removed
        """
        if user_id is not None:
            return 1 if self.cache.delete(user_id) else 0
        return self.cache.clear()
