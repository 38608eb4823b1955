"""
Data models for recommendations
"""
from enum import Enum
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime

from app.services.recommendations.models.template import TemplateCategory, TemplateRecord


class ReasonType(str, Enum):
    """Kinds of explanation attached to a recommendation"""
    CATEGORY_MATCH = "category_match"
    TAG_MATCH = "tag_match"
    SIMILAR_USERS = "similar_users"
    TRENDING = "trending"
    RATING = "rating"
    USAGE_PATTERN = "usage_pattern"


@dataclass
class RecommendationReason:
    """Human readable explanation of one score contribution"""
    type: ReasonType
    description: str
    weight: float
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "description": self.description,
            "weight": round(self.weight, 4)
        }


@dataclass
class RecommendationScore:
    """Score of a single template for a user"""
    template_id: str
    score: float
    reasons: List[RecommendationReason] = field(default_factory=list)
    confidence: float = 0.5
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "template_id": self.template_id,
            "score": round(self.score, 4),
            "reasons": [reason.to_dict() for reason in self.reasons],
            "confidence": round(self.confidence, 4)
        }


@dataclass
class RecommendationOptions:
    """Options accepted by get_recommendations"""
    limit: int = 10
    exclude_used: bool = False
    categories: Optional[List[TemplateCategory]] = None
    min_rating: Optional[float] = None
    include_reasons: bool = False


@dataclass
class RecommendationResult:
    """Ranked templates together with their scores"""
    user_id: str
    templates: List[TemplateRecord] = field(default_factory=list)
    scores: List[RecommendationScore] = field(default_factory=list)
    execution_time_ms: float = 0.0
    timestamp: datetime = field(default_factory=datetime.utcnow)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "user_id": self.user_id,
            "templates": [template.to_dict() for template in self.templates],
            "scores": [score.to_dict() for score in self.scores],
            "execution_time_ms": round(self.execution_time_ms, 2),
            "timestamp": self.timestamp.isoformat(),
            "count": len(self.templates)
        }
