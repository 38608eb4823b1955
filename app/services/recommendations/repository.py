"""
SQLAlchemy implementations of the recommendation collaborators
Each call opens its own session from the factory, so one instance
can be shared by concurrent requests.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import and_, desc, func, select, update
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.models.models import AgentTemplate, TemplateUsageAnalytics, UserTemplatePreference
from app.services.recommendations.base import PreferencePersistence, TemplateCatalog, UsageAnalytics
from app.services.recommendations.models import (
    TemplateCategory,
    TemplateRecord,
    TemplateSearchFilters,
    UserPreferences
)
from app.services.utils.parsers import parse_datetime, safe_json_list

logger = logging.getLogger(__name__)


def template_from_row(row: AgentTemplate) -> TemplateRecord:
    """
    Convert a database row to a TemplateRecord
    
    Missing values get neutral defaults and unknown categories become "general".
    """
    return TemplateRecord(
        id=str(row.id),
        name=row.name or "",
        description=row.description or "",
        category=TemplateCategory.parse(row.category),
        tags=[str(tag) for tag in safe_json_list(row.tags)],
        rating=float(row.rating or 0.0),
        usage_count=int(row.usage_count or 0),
        is_public=bool(row.is_public),
        is_official=bool(row.is_official),
        created_by=row.created_by,
        created_at=parse_datetime(row.createdAt),
        updated_at=parse_datetime(row.updatedAt)
    )


class SqlTemplateCatalog(TemplateCatalog):
    """
    Template catalog backed by the AgentTemplates table
    """
    
    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory
    
    @staticmethod
    def _conditions(filters: TemplateSearchFilters) -> list:
        conditions = [AgentTemplate.is_active.is_(True)]
        if filters.category is not None:
            conditions.append(AgentTemplate.category == TemplateCategory.parse(filters.category).value)
        if filters.is_public is not None:
            conditions.append(AgentTemplate.is_public.is_(filters.is_public))
        if filters.min_rating:
            conditions.append(AgentTemplate.rating >= filters.min_rating)
        if filters.template_ids is not None:
            conditions.append(AgentTemplate.id.in_(filters.template_ids))
        return conditions
    
    async def search(
        self,
        filters: Optional[TemplateSearchFilters] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[TemplateRecord], int]:
        filters = filters or TemplateSearchFilters()
        if filters.template_ids is not None and not filters.template_ids:
            return [], 0
        
        offset = max(page - 1, 0) * limit
        query = (
            select(AgentTemplate)
            .where(and_(*self._conditions(filters)))
            .order_by(
                desc(AgentTemplate.usage_count),
                desc(AgentTemplate.rating),
                AgentTemplate.id
            )
        )
        
        async with self.session_factory() as db:
            if filters.tags:
                # Tags live in a JSON column, so overlap is checked here
                result = await db.execute(query)
                wanted = set(filters.tags)
                rows = [
                    row for row in result.scalars().all()
                    if wanted & set(safe_json_list(row.tags))
                ]
                total = len(rows)
                rows = rows[offset:offset + limit]
            else:
                count_result = await db.execute(
                    select(func.count()).select_from(AgentTemplate).where(and_(*self._conditions(filters)))
                )
                total = count_result.scalar_one()
                result = await db.execute(query.offset(offset).limit(limit))
                rows = result.scalars().all()
        
        return [template_from_row(row) for row in rows], total
    
    async def get_by_id(self, template_id: str) -> Optional[TemplateRecord]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(AgentTemplate).where(
                    and_(AgentTemplate.id == template_id, AgentTemplate.is_active.is_(True))
                )
            )
            row = result.scalar_one_or_none()
        return template_from_row(row) if row is not None else None


class SqlPreferencePersistence(PreferencePersistence):
    """
    Preference records stored one row per user
    """
    
    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory
    
    async def load(self, user_id: str) -> Optional[UserPreferences]:
        async with self.session_factory() as db:
            result = await db.execute(
                select(UserTemplatePreference).where(UserTemplatePreference.user_id == user_id)
            )
            row = result.scalar_one_or_none()
        
        if row is None:
            return None
        
        return UserPreferences.from_dict({
            "user_id": row.user_id,
            "preferred_categories": safe_json_list(row.preferred_categories),
            "preferred_tags": safe_json_list(row.preferred_tags),
            "usage_history": safe_json_list(row.usage_history),
            "ratings": safe_json_list(row.ratings),
            "search_history": safe_json_list(row.search_history),
            "last_updated": row.updatedAt
        })
    
    async def upsert(self, preferences: UserPreferences) -> None:
        data = preferences.to_dict()
        async with self.session_factory() as db:
            try:
                result = await db.execute(
                    select(UserTemplatePreference).where(
                        UserTemplatePreference.user_id == preferences.user_id
                    )
                )
                row = result.scalar_one_or_none()
                
                if row is None:
                    row = UserTemplatePreference(user_id=preferences.user_id)
                    db.add(row)
                
                row.preferred_categories = data["preferred_categories"]
                row.preferred_tags = data["preferred_tags"]
                row.usage_history = data["usage_history"]
                row.ratings = data["ratings"]
                row.search_history = data["search_history"]
                row.updatedAt = preferences.last_updated
                
                await db.commit()
            except Exception as e:
                logger.error(f"Error saving preferences of user {preferences.user_id}: {e}")
                await db.rollback()
                raise


class SqlUsageAnalytics(UsageAnalytics):
    """
    Daily usage counters in the TemplateUsageAnalytics table
    """
    
    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory
    
    async def record_daily(self, template_id: str, user_id: str, day: date) -> None:
        async with self.session_factory() as db:
            try:
                result = await db.execute(
                    select(TemplateUsageAnalytics.id).where(and_(
                        TemplateUsageAnalytics.template_id == template_id,
                        TemplateUsageAnalytics.user_id == user_id,
                        TemplateUsageAnalytics.date == day
                    ))
                )
                if result.scalar_one_or_none() is not None:
                    return
                
                db.add(TemplateUsageAnalytics(
                    template_id=template_id,
                    user_id=user_id,
                    date=day,
                    usage_count=1
                ))
                # A new daily row also counts towards the template's lifetime usage
                await db.execute(
                    update(AgentTemplate)
                    .where(AgentTemplate.id == template_id)
                    .values(usage_count=func.coalesce(AgentTemplate.usage_count, 0) + 1)
                    .execution_options(synchronize_session=False)
                )
                await db.commit()
            except Exception as e:
                logger.error(f"Error recording usage of template {template_id}: {e}")
                await db.rollback()
                raise
    
    async def query_window(
        self,
        since: date,
        limit: Optional[int] = None
    ) -> List[Tuple[str, int]]:
        total = func.sum(TemplateUsageAnalytics.usage_count).label("usage_count")
        query = (
            select(TemplateUsageAnalytics.template_id, total)
            .where(TemplateUsageAnalytics.date >= since)
            .group_by(TemplateUsageAnalytics.template_id)
            .order_by(desc(total), TemplateUsageAnalytics.template_id)
        )
        if limit is not None:
            query = query.limit(limit)
        
        async with self.session_factory() as db:
            result = await db.execute(query)
            rows = result.all()
        
        return [(str(template_id), int(usage_count)) for template_id, usage_count in rows]
