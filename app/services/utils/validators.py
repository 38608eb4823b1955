"""
Shared validation utilities
"""
from typing import Any, Optional

from .constants import MAX_RATING, MIN_RATING, TRENDING_WINDOWS


def validate_identifier(value: Any, name: str) -> str:
    """
    Check that an identifier is a non-blank string
    
    Args:
        value: Value to check
        name: Parameter name used in the error message
    
    Returns:
        The identifier
    
    Raises:
        ValueError: If the identifier is missing or blank
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string, got {value!r}")
    return value


def validate_limit(limit: Any, name: str = "limit") -> int:
    """Check that a result limit is a non-negative integer"""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValueError(f"{name} must be an integer, got {limit!r}")
    if limit < 0:
        raise ValueError(f"{name} must be >= 0, got {limit}")
    return limit


def validate_rating(rating: Any, name: str = "rating") -> Optional[float]:
    """Check that a rating lies on the 0-5 scale (None passes through)"""
    if rating is None:
        return None
    if isinstance(rating, bool) or not isinstance(rating, (int, float)):
        raise ValueError(f"{name} must be a number, got {rating!r}")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"{name} must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return float(rating)


def validate_timeframe(timeframe: Any) -> int:
    """
    Resolve a trending timeframe to its window in days
    
    Raises:
        ValueError: If the timeframe is not day, week or month
    """
    if timeframe not in TRENDING_WINDOWS:
        raise ValueError(
            f"timeframe must be one of {', '.join(TRENDING_WINDOWS)}, got {timeframe!r}"
        )
    return TRENDING_WINDOWS[timeframe]
