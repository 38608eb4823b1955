import pytest

from app.services.recommendations import PreferenceCache, PreferenceStore, TemplateCategory, UserPreferences
from app.services.recommendations.preferences import extract_tags_from_search
from tests.fakes import make_template


@pytest.fixture
def store(persistence):
    return PreferenceStore(persistence, PreferenceCache(max_size=100))


def test_extract_tags_from_search():
    tags = extract_tags_from_search("Need a Lead Generation chatbot for my CRM")
    
    assert tags == ["chatbot", "lead-generation", "crm"]


def test_extract_tags_from_empty_search():
    assert extract_tags_from_search("") == []
    assert extract_tags_from_search(None) == []


@pytest.mark.asyncio
async def test_get_creates_and_persists_default(store, persistence):
    preferences = await store.get("u1")
    
    assert preferences.user_id == "u1"
    assert preferences.usage_history == []
    assert "u1" in persistence.rows
    assert persistence.upsert_calls == 1


@pytest.mark.asyncio
async def test_get_is_served_from_cache(store, persistence):
    first = await store.get("u1")
    second = await store.get("u1")
    
    assert first is second
    assert persistence.load_calls == 1


@pytest.mark.asyncio
async def test_load_failure_returns_uncached_default(store, persistence):
    persistence.fail_load = True
    
    preferences = await store.get("u1")
    
    assert preferences.user_id == "u1"
    assert "u1" not in store.cache
    assert persistence.upsert_calls == 0


@pytest.mark.asyncio
async def test_default_is_cached_even_if_persisting_fails(store, persistence):
    persistence.fail_upsert = True
    
    preferences = await store.get("u1")
    
    assert store.cache.get("u1") is preferences


@pytest.mark.asyncio
async def test_existing_record_is_loaded(persistence):
    writer = PreferenceStore(persistence, PreferenceCache())
    await writer.record_usage("u1", "t-1", completed=True)
    
    reader = PreferenceStore(persistence, PreferenceCache())
    preferences = await reader.get("u1")
    
    assert [u.template_id for u in preferences.usage_history] == ["t-1"]
    assert preferences.usage_history[0].completed is True


@pytest.mark.asyncio
async def test_usage_history_keeps_most_recent_fifty(store):
    for i in range(55):
        await store.record_usage("u1", f"t{i}")
    
    preferences = await store.get("u1")
    assert len(preferences.usage_history) == 50
    assert preferences.usage_history[0].template_id == "t5"
    assert preferences.usage_history[-1].template_id == "t54"


@pytest.mark.asyncio
async def test_usage_is_visible_before_next_load(store, persistence):
    await store.record_usage("u1", "t-1", customizations={"tone": "formal"}, duration=12.5)
    
    preferences = await store.get("u1")
    assert preferences.usage_history[-1].customizations == {"tone": "formal"}
    assert preferences.usage_history[-1].duration == 12.5
    assert persistence.load_calls == 1


@pytest.mark.asyncio
async def test_search_history_keeps_most_recent_twenty(store):
    for i in range(25):
        await store.update_search_preferences("u1", f"search {i}")
    
    preferences = await store.get("u1")
    assert len(preferences.search_history) == 20
    assert preferences.search_history[0] == "search 5"
    assert preferences.search_history[-1] == "search 24"


@pytest.mark.asyncio
async def test_search_preferences_merge_is_idempotent(store):
    selected = [make_template("t-1", TemplateCategory.SALES, ["crm", "pipeline"])]
    
    await store.update_search_preferences("u1", "sales automation", selected)
    once = await store.get("u1")
    categories, tags = list(once.preferred_categories), list(once.preferred_tags)
    
    await store.update_search_preferences("u1", "sales automation", selected)
    twice = await store.get("u1")
    
    assert twice.preferred_categories == categories == [TemplateCategory.SALES]
    assert twice.preferred_tags == tags
    assert set(tags) == {"automation", "sales", "crm", "pipeline"}
    assert len(twice.search_history) == 2


@pytest.mark.asyncio
async def test_rating_replaces_earlier_rating(store):
    await store.record_rating("u1", "t-1", 2.0)
    await store.record_rating("u1", "t-2", 4.0)
    await store.record_rating("u1", "t-1", 5.0)
    
    preferences = await store.get("u1")
    assert {(r.template_id, r.rating) for r in preferences.ratings} == {("t-1", 5.0), ("t-2", 4.0)}


@pytest.mark.asyncio
async def test_failed_save_raises_but_keeps_cache(store, persistence):
    await store.get("u1")
    persistence.fail_upsert = True
    
    with pytest.raises(ConnectionError):
        await store.record_usage("u1", "t-1")
    
    preferences = await store.get("u1")
    assert [u.template_id for u in preferences.usage_history] == ["t-1"]


def test_clear_cache_single_user_and_all(store):
    store.cache.set("u1", UserPreferences(user_id="u1"))
    store.cache.set("u2", UserPreferences(user_id="u2"))
    
    assert store.clear_cache("u1") == 1
    assert store.clear_cache("u1") == 0
    assert store.clear_cache() == 1


@pytest.mark.asyncio
async def test_blank_search_is_not_recorded(store):
    selected = [make_template("t-1", TemplateCategory.SUPPORT, ["chatbot"])]
    
    await store.update_search_preferences("u1", "crm")
    await store.update_search_preferences("u1", "   ", selected)
    await store.update_search_preferences("u1", "")
    
    preferences = await store.get("u1")
    assert preferences.search_history == ["crm"]
    assert preferences.preferred_categories == [TemplateCategory.SUPPORT]
    assert preferences.preferred_tags == ["crm", "chatbot"]
