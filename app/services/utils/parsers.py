"""
Shared parsing utilities
"""
import json
import logging
from datetime import datetime
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def safe_json_list(value: Any) -> List[Any]:
    """
    Read a JSON array column that may arrive as text, a list or NULL
    
    Args:
        value: Raw column value
    
    Returns:
        Parsed list or an empty list
    """
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError as e:
            logger.warning(f"Error parsing JSON array: {e}")
            return []
    return list(value) if isinstance(value, (list, tuple)) else []


def parse_datetime(date_string: Any) -> Optional[datetime]:
    """
    Parse datetime string to a timezone-naive datetime object
    
    Args:
        date_string: String or datetime object to parse
    
    Returns:
        Parsed datetime or None if parsing fails
    """
    if not date_string:
        return None
    
    if isinstance(date_string, datetime):
        # Stored timestamps are naive UTC
        return date_string.replace(tzinfo=None) if date_string.tzinfo else date_string
    
    try:
        # Try parsing: '2025-10-10 12:52:38'
        return datetime.strptime(date_string, '%Y-%m-%d %H:%M:%S')
    except (ValueError, TypeError):
        try:
            # Try ISO format with T and timezone
            dt = datetime.fromisoformat(date_string.replace('Z', '+00:00'))
            return dt.replace(tzinfo=None)
        except (ValueError, TypeError, AttributeError):
            logger.warning(f"Could not parse datetime: {date_string}")
            return None
