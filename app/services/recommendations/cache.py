"""
In-memory cache of user preference records
"""
import logging
import time
from typing import Optional, Dict, Any
from collections import OrderedDict
from dataclasses import dataclass

from app.services.recommendations.models import UserPreferences

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Cache entry with metadata"""
    data: UserPreferences
    timestamp: float
    hits: int = 0
    
    def touch(self):
        """Update hit count"""
        self.hits += 1


class PreferenceCache:
    """
    LRU cache of preference records keyed by user id
    
    Entries never expire on their own; they leave the cache only through
    an explicit clear/delete, or LRU eviction once max_size is reached.
    max_size=0 disables the bound (memory then grows with the number of users).
    """
    
    def __init__(self, max_size: int = 10000):
        """
        Initialize cache
        
        Args:
            max_size: Maximum number of entries (0 for unbounded)
        """
        if max_size < 0:
            raise ValueError(f"max_size must be >= 0, got {max_size}")
        
        self.max_size = max_size
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0
        }
    
    def __contains__(self, user_id: str) -> bool:
        return user_id in self._cache
    
    def __len__(self) -> int:
        return len(self._cache)
    
    def get(self, user_id: str) -> Optional[UserPreferences]:
        """
        Get preferences from cache
        
        Args:
            user_id: User identifier
            
        Returns:
            Cached record or None if not cached
        """
        entry = self._cache.get(user_id)
        if entry is None:
            self._stats["misses"] += 1
            return None
        
        # Move to end (most recently used)
        self._cache.move_to_end(user_id)
        entry.touch()
        self._stats["hits"] += 1
        
        return entry.data
    
    def set(self, user_id: str, preferences: UserPreferences):
        """
        Store preferences in cache
        
        Args:
            user_id: User identifier
            preferences: Record to cache
        """
        # Remove oldest if at capacity
        if self.max_size and len(self._cache) >= self.max_size and user_id not in self._cache:
            self._evict_oldest()
        
        existing = self._cache.get(user_id)
        self._cache[user_id] = CacheEntry(
            data=preferences,
            timestamp=time.time(),
            hits=existing.hits if existing else 0
        )
        self._cache.move_to_end(user_id)
    
    def delete(self, user_id: str) -> bool:
        """
        Delete a user from cache
        
        Returns:
            True if deleted, False if not found
        """
        if user_id in self._cache:
            del self._cache[user_id]
            return True
        return False
    
    def clear(self) -> int:
        """
        Clear all cache entries
        
        Returns:
            Number of entries removed
        """
        removed = len(self._cache)
        self._cache.clear()
        logger.info(f"Preference cache cleared ({removed} entries)")
        return removed
    
    def _evict_oldest(self):
        """Evict the least recently used entry"""
        if self._cache:
            user_id, _ = self._cache.popitem(last=False)
            self._stats["evictions"] += 1
            logger.debug(f"Evicted preferences of user {user_id} from cache")
    
    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        total_requests = self._stats["hits"] + self._stats["misses"]
        hit_rate = self._stats["hits"] / total_requests if total_requests > 0 else 0
        
        return {
            "size": len(self._cache),
            "max_size": self.max_size,
            "utilization": len(self._cache) / self.max_size if self.max_size > 0 else 0,
            "hits": self._stats["hits"],
            "misses": self._stats["misses"],
            "hit_rate": round(hit_rate, 4),
            "evictions": self._stats["evictions"],
            "total_requests": total_requests
        }
