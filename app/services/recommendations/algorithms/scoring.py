"""
Multi-factor scoring of templates for a user
"""
from typing import List, Optional

import numpy as np

from app.services.recommendations.models import (
    ReasonType,
    RecommendationReason,
    RecommendationScore,
    TemplateRecord,
    UserPreferences
)

# Base score
RATING_WEIGHT = 0.3
USAGE_WEIGHT = 0.2

# Bonuses
CATEGORY_MATCH_BONUS = 2.0
TAG_MATCH_BONUS = 0.5
TRENDING_BONUS = 0.5
TRENDING_MIN_USAGE = 10
HIGH_RATING_BONUS = 0.8
HIGH_RATING_THRESHOLD = 4.0

# Usage pattern sub-score
HISTORY_STEP = 0.1
HISTORY_CAP = 0.5
COMPLETION_WEIGHT = 0.3
PATTERN_TAG_STEP = 0.2
PATTERN_TAG_CAP = 0.6
PATTERN_CATEGORY_BONUS = 0.4
USAGE_PATTERN_CAP = 2.0

# Confidence, counted in tenths so the sums stay exact
BASE_CONFIDENCE_TENTHS = 5


class ScoringEngine:
    """
    Weighted recommendation scoring
    
    Every candidate gets a base score from rating and popularity; preference
    matches, popularity and high ratings add fixed bonuses. The usage pattern
    sub-score looks at the same category/tag signals as the match bonuses,
    so those signals count twice.
    """
    
    name = "weighted_scoring"
    
    def score(
        self,
        candidates: List[TemplateRecord],
        preferences: Optional[UserPreferences] = None,
        include_reasons: bool = False
    ) -> List[RecommendationScore]:
        """
        Score candidates for a user
        
        Args:
            candidates: Templates to score
            preferences: User preference record (None scores without personalization)
            include_reasons: Attach human readable reasons
            
        Returns:
            One RecommendationScore per candidate, in candidate order
        """
        return [
            self.score_template(template, preferences, include_reasons)
            for template in candidates
        ]
    
    def score_template(
        self,
        template: TemplateRecord,
        preferences: Optional[UserPreferences] = None,
        include_reasons: bool = False
    ) -> RecommendationScore:
        """Score a single template"""
        reasons: List[RecommendationReason] = []
        
        def add(reason_type: ReasonType, description: str, weight: float) -> float:
            if include_reasons:
                reasons.append(RecommendationReason(reason_type, description, weight))
            return weight
        
        score = self.base_score(template)
        
        if preferences is not None:
            if template.category in preferences.preferred_categories:
                score += add(
                    ReasonType.CATEGORY_MATCH,
                    f"Matches your preferred category: {template.category.value}",
                    CATEGORY_MATCH_BONUS
                )
            
            matching_tags = self._matching_tags(template, preferences)
            if matching_tags:
                score += add(
                    ReasonType.TAG_MATCH,
                    f"Matches your interests: {', '.join(matching_tags)}",
                    len(matching_tags) * TAG_MATCH_BONUS
                )
            
            usage_score = self.usage_pattern_score(template, preferences)
            if usage_score > 0:
                score += add(
                    ReasonType.USAGE_PATTERN,
                    "Based on your usage patterns and preferences",
                    usage_score
                )
        
        if template.usage_count > TRENDING_MIN_USAGE:
            score += add(ReasonType.TRENDING, "Popular with other users", TRENDING_BONUS)
        
        if template.rating >= HIGH_RATING_THRESHOLD:
            score += add(
                ReasonType.RATING,
                f"Highly rated ({template.rating:.1f}/5.0)",
                HIGH_RATING_BONUS
            )
        
        return RecommendationScore(
            template_id=template.id,
            score=score,
            reasons=reasons,
            confidence=self.confidence(template, preferences)
        )
    
    @staticmethod
    def base_score(template: TemplateRecord) -> float:
        """rating * 0.3 + ln(usage_count + 1) * 0.2"""
        usage = max(template.usage_count, 0)
        return template.rating * RATING_WEIGHT + float(np.log1p(usage)) * USAGE_WEIGHT
    
    @staticmethod
    def _matching_tags(template: TemplateRecord, preferences: UserPreferences) -> List[str]:
        preferred = set(preferences.preferred_tags)
        matching = []
        for tag in template.tags:
            if tag in preferred and tag not in matching:
                matching.append(tag)
        return matching
    
    def usage_pattern_score(
        self,
        template: TemplateRecord,
        preferences: UserPreferences
    ) -> float:
        """
        Score in [0, 2.0] from history volume, completion rate and preference overlap
        """
        score = 0.0
        
        total_usage = len(preferences.usage_history)
        if total_usage > 0:
            score += min(total_usage * HISTORY_STEP, HISTORY_CAP)
            score += (preferences.completed_count() / total_usage) * COMPLETION_WEIGHT
        
        matching_tags = self._matching_tags(template, preferences)
        if matching_tags:
            score += min(len(matching_tags) * PATTERN_TAG_STEP, PATTERN_TAG_CAP)
        
        if template.category in preferences.preferred_categories:
            score += PATTERN_CATEGORY_BONUS
        
        return float(np.clip(score, 0.0, USAGE_PATTERN_CAP))
    
    @staticmethod
    def confidence(
        template: TemplateRecord,
        preferences: Optional[UserPreferences] = None
    ) -> float:
        """
        Evidence volume behind a score, in [0, 1]
        
        Independent of the score itself: a high score backed by little data
        gets a low confidence.
        """
        tenths = BASE_CONFIDENCE_TENTHS
        
        # More usage = more evidence about the template
        if template.usage_count > 5:
            tenths += 2
        if template.usage_count > 20:
            tenths += 1
        
        # User data availability
        if preferences is not None:
            if len(preferences.usage_history) > 3:
                tenths += 1
            if len(preferences.preferred_tags) > 5:
                tenths += 1
        
        return float(np.clip(tenths / 10, 0.0, 1.0))
    
    def get_info(self) -> dict:
        """Get information about the scorer"""
        return {
            "name": self.name,
            "type": self.__class__.__name__,
            "weights": {
                "rating": RATING_WEIGHT,
                "usage": USAGE_WEIGHT,
                "category_match": CATEGORY_MATCH_BONUS,
                "tag_match": TAG_MATCH_BONUS,
                "trending": TRENDING_BONUS,
                "rating_bonus": HIGH_RATING_BONUS,
                "usage_pattern_cap": USAGE_PATTERN_CAP
            }
        }
