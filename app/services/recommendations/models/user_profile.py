"""
User preference models
"""
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime

from app.services.recommendations.models.template import TemplateCategory
from app.services.utils.parsers import parse_datetime


@dataclass
class TemplateUsage:
    """A single recorded use of a template"""
    template_id: str
    used_at: datetime = field(default_factory=datetime.utcnow)
    completed: bool = False
    customizations: Dict[str, Any] = field(default_factory=dict)
    duration: Optional[float] = None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "template_id": self.template_id,
            "used_at": self.used_at.isoformat(),
            "completed": self.completed,
            "customizations": self.customizations,
            "duration": self.duration
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateUsage":
        return cls(
            template_id=str(data["template_id"]),
            used_at=parse_datetime(data.get("used_at")) or datetime.utcnow(),
            completed=bool(data.get("completed", False)),
            customizations=dict(data.get("customizations") or {}),
            duration=data.get("duration")
        )


@dataclass
class TemplateRating:
    """A rating a user gave to a template"""
    template_id: str
    rating: float
    rated_at: datetime = field(default_factory=datetime.utcnow)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "template_id": self.template_id,
            "rating": self.rating,
            "rated_at": self.rated_at.isoformat()
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateRating":
        return cls(
            template_id=str(data["template_id"]),
            rating=float(data.get("rating", 0.0)),
            rated_at=parse_datetime(data.get("rated_at")) or datetime.utcnow()
        )


@dataclass
class UserPreferences:
    """
    Accumulated interests and history of one user
    
    preferred_categories and preferred_tags behave as sets;
    they are kept as lists so the stored order stays stable.
    """
    user_id: str
    preferred_categories: List[TemplateCategory] = field(default_factory=list)
    preferred_tags: List[str] = field(default_factory=list)
    usage_history: List[TemplateUsage] = field(default_factory=list)
    ratings: List[TemplateRating] = field(default_factory=list)
    search_history: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=datetime.utcnow)
    
    def add_category(self, category: TemplateCategory) -> bool:
        """Add category if missing, returns True when it was added"""
        if category in self.preferred_categories:
            return False
        self.preferred_categories.append(category)
        return True
    
    def add_tag(self, tag: str) -> bool:
        """Add tag if missing, returns True when it was added"""
        if tag in self.preferred_tags:
            return False
        self.preferred_tags.append(tag)
        return True
    
    def used_template_ids(self) -> set:
        """Ids of every template present in usage history"""
        return {usage.template_id for usage in self.usage_history}
    
    def completed_count(self) -> int:
        return sum(1 for usage in self.usage_history if usage.completed)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "user_id": self.user_id,
            "preferred_categories": [c.value for c in self.preferred_categories],
            "preferred_tags": list(self.preferred_tags),
            "usage_history": [u.to_dict() for u in self.usage_history],
            "ratings": [r.to_dict() for r in self.ratings],
            "search_history": list(self.search_history),
            "last_updated": self.last_updated.isoformat()
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserPreferences":
        """Build from a stored dictionary, tolerating missing fields"""
        preferences = cls(user_id=str(data["user_id"]))
        for category in data.get("preferred_categories") or []:
            preferences.add_category(TemplateCategory.parse(category))
        for tag in data.get("preferred_tags") or []:
            preferences.add_tag(tag)
        preferences.usage_history = [
            TemplateUsage.from_dict(item) for item in data.get("usage_history") or []
        ]
        preferences.ratings = [
            TemplateRating.from_dict(item) for item in data.get("ratings") or []
        ]
        preferences.search_history = list(data.get("search_history") or [])
        preferences.last_updated = parse_datetime(data.get("last_updated")) or datetime.utcnow()
        return preferences
