import pytest

from app.services.recommendations import PreferenceCache, UserPreferences


def test_get_and_set():
    cache = PreferenceCache(max_size=10)
    preferences = UserPreferences(user_id="u1")
    
    assert cache.get("u1") is None
    cache.set("u1", preferences)
    
    assert cache.get("u1") is preferences
    assert "u1" in cache
    assert len(cache) == 1


def test_least_recently_used_entry_is_evicted():
    cache = PreferenceCache(max_size=2)
    cache.set("u1", UserPreferences(user_id="u1"))
    cache.set("u2", UserPreferences(user_id="u2"))
    
    # Touch u1 so u2 becomes the oldest
    cache.get("u1")
    cache.set("u3", UserPreferences(user_id="u3"))
    
    assert "u1" in cache
    assert "u2" not in cache
    assert "u3" in cache
    assert cache.get_stats()["evictions"] == 1


def test_overwriting_an_entry_does_not_evict():
    cache = PreferenceCache(max_size=1)
    cache.set("u1", UserPreferences(user_id="u1"))
    cache.set("u1", UserPreferences(user_id="u1"))
    
    assert len(cache) == 1
    assert cache.get_stats()["evictions"] == 0


def test_zero_max_size_is_unbounded():
    cache = PreferenceCache(max_size=0)
    for i in range(50):
        cache.set(f"u{i}", UserPreferences(user_id=f"u{i}"))
    
    assert len(cache) == 50
    assert cache.get_stats()["utilization"] == 0


def test_negative_max_size_rejected():
    with pytest.raises(ValueError):
        PreferenceCache(max_size=-1)


def test_delete_and_clear():
    cache = PreferenceCache()
    cache.set("u1", UserPreferences(user_id="u1"))
    cache.set("u2", UserPreferences(user_id="u2"))
    
    assert cache.delete("u1") is True
    assert cache.delete("u1") is False
    assert cache.clear() == 1
    assert len(cache) == 0


def test_stats_track_hits_and_misses():
    cache = PreferenceCache()
    cache.set("u1", UserPreferences(user_id="u1"))
    cache.get("u1")
    cache.get("u1")
    cache.get("missing")
    
    stats = cache.get_stats()
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["total_requests"] == 3
    assert stats["hit_rate"] == pytest.approx(0.6667)
