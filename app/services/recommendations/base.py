"""
Base classes and interfaces for recommendation collaborators

The engine only talks to storage through these three interfaces,
so tests and alternative backends can substitute their own implementations.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Tuple

from app.services.recommendations.models import (
    TemplateRecord,
    TemplateSearchFilters,
    UserPreferences
)


class TemplateCatalog(ABC):
    """
    Read-only source of template records
    """
    
    @abstractmethod
    async def search(
        self,
        filters: Optional[TemplateSearchFilters] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[TemplateRecord], int]:
        """
        Search templates
        
        Results are ordered by usage count, then rating (both descending).
        
        Args:
            filters: Catalog filters (None for no filtering)
            page: 1-based page number
            limit: Page size
            
        Returns:
            Tuple of (templates on the page, total matching count)
        """
        pass
    
    @abstractmethod
    async def get_by_id(self, template_id: str) -> Optional[TemplateRecord]:
        """Get a single template, None if it does not exist"""
        pass


class PreferencePersistence(ABC):
    """
    Durable storage of user preference records
    """
    
    @abstractmethod
    async def load(self, user_id: str) -> Optional[UserPreferences]:
        """Load the record of a user, None if the user has none yet"""
        pass
    
    @abstractmethod
    async def upsert(self, preferences: UserPreferences) -> None:
        """Insert or replace the record of preferences.user_id"""
        pass


class UsageAnalytics(ABC):
    """
    Daily usage counters per template
    """
    
    @abstractmethod
    async def record_daily(self, template_id: str, user_id: str, day: date) -> None:
        """
        Record that a user used a template on a given day
        
        Idempotent per (template, user, day).
        """
        pass
    
    @abstractmethod
    async def query_window(
        self,
        since: date,
        limit: Optional[int] = None
    ) -> List[Tuple[str, int]]:
        """
        Aggregate usage counts since a day (inclusive)
        
        Returns:
            List of (template_id, usage_count) sorted by count descending
        """
        pass
