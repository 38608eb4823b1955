"""
Template catalog models
"""
from enum import Enum
from typing import Optional, List
from dataclasses import dataclass, field
from datetime import datetime


class TemplateCategory(str, Enum):
    """Business domains a template can belong to"""
    CUSTOMER_SERVICE = "customer_service"
    SALES = "sales"
    SUPPORT = "support"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    FINANCE = "finance"
    LEGAL = "legal"
    HR = "hr"
    MARKETING = "marketing"
    GENERAL = "general"
    
    @classmethod
    def parse(cls, value) -> "TemplateCategory":
        """Map a stored value to a category, unknown values become GENERAL"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERAL


@dataclass(frozen=True)
class TemplateRecord:
    """Read-only view of a catalog template"""
    id: str
    category: TemplateCategory
    name: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    rating: float = 0.0
    usage_count: int = 0
    is_public: bool = False
    is_official: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "tags": list(self.tags),
            "rating": round(self.rating, 2),
            "usage_count": self.usage_count,
            "is_public": self.is_public,
            "is_official": self.is_official,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }


@dataclass
class TemplateSearchFilters:
    """Catalog query filters"""
    category: Optional[TemplateCategory] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    min_rating: Optional[float] = None
    template_ids: Optional[List[str]] = None
