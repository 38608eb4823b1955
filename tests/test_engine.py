import pytest

from app.services.recommendations import (
    PreferenceCache,
    RecommendationOptions,
    TemplateCategory,
    TemplateRecommendationEngine
)
from app.services.recommendations.models import ReasonType
from tests.fakes import InMemoryCatalog, make_template


def ids(result):
    return [t.id for t in result.templates]


@pytest.mark.asyncio
async def test_new_user_gets_public_templates_by_score(engine):
    result = await engine.get_recommendations("u1")
    
    assert ids(result) == ["t-sales-1", "t-support-1", "t-fin-1", "t-sales-2", "t-edu-1"]
    assert [s.template_id for s in result.scores] == ids(result)
    assert all(a.score >= b.score for a, b in zip(result.scores, result.scores[1:]))


@pytest.mark.asyncio
async def test_limit_and_zero_limit(engine):
    assert len((await engine.get_recommendations("u1", RecommendationOptions(limit=2))).templates) == 2
    assert (await engine.get_recommendations("u1", RecommendationOptions(limit=0))).templates == []


@pytest.mark.asyncio
async def test_category_filter(engine):
    options = RecommendationOptions(categories=[TemplateCategory.SUPPORT])
    
    result = await engine.get_recommendations("u1", options)
    
    assert ids(result) == ["t-support-1"]


@pytest.mark.asyncio
async def test_min_rating_filter(engine):
    result = await engine.get_recommendations("u1", RecommendationOptions(min_rating=4.0))
    
    assert set(ids(result)) == {"t-sales-1", "t-support-1", "t-fin-1"}


@pytest.mark.asyncio
async def test_recorded_usage_is_excluded(engine):
    await engine.record_template_usage("u1", "t-sales-1", completed=True)
    
    result = await engine.get_recommendations("u1", RecommendationOptions(exclude_used=True))
    
    assert "t-sales-1" not in ids(result)
    assert len(result.templates) == 4


@pytest.mark.asyncio
async def test_search_preferences_boost_matching_category(engine):
    await engine.update_search_preferences("u1", "education booking", ["t-edu-1", "missing"])
    
    preferences = await engine.preferences.get("u1")
    assert preferences.preferred_categories == [TemplateCategory.EDUCATION]
    assert preferences.preferred_tags == ["education", "booking"]
    
    result = await engine.get_recommendations("u1", RecommendationOptions(include_reasons=True))
    assert ids(result)[0] == "t-edu-1"
    reasons = {reason.type for reason in result.scores[0].reasons}
    assert {ReasonType.CATEGORY_MATCH, ReasonType.TAG_MATCH} <= reasons


@pytest.mark.asyncio
async def test_reasons_only_when_requested(engine):
    result = await engine.get_recommendations("u1")
    
    assert all(score.reasons == [] for score in result.scores)


@pytest.mark.asyncio
async def test_equal_scores_ordered_by_id(persistence, analytics):
    catalog = InMemoryCatalog([
        make_template("b", rating=3.0, usage_count=2),
        make_template("c", rating=3.0, usage_count=2),
        make_template("a", rating=3.0, usage_count=2),
    ])
    engine = TemplateRecommendationEngine(catalog, persistence, analytics, PreferenceCache())
    
    result = await engine.get_recommendations("u1")
    
    assert ids(result) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_catalog_failure_gives_empty_result(engine, catalog):
    catalog.fail = True
    
    result = await engine.get_recommendations("u1")
    
    assert result.templates == []
    assert result.scores == []
    assert result.user_id == "u1"


@pytest.mark.asyncio
async def test_preference_failure_still_recommends(engine, persistence):
    persistence.fail_load = True
    
    result = await engine.get_recommendations("u1")
    
    assert len(result.templates) == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", ["", "   ", None])
async def test_invalid_user_id_rejected(engine, user_id):
    with pytest.raises(ValueError):
        await engine.get_recommendations(user_id)


@pytest.mark.asyncio
async def test_invalid_options_rejected(engine):
    with pytest.raises(ValueError):
        await engine.get_recommendations("u1", RecommendationOptions(limit=-1))
    with pytest.raises(ValueError):
        await engine.get_recommendations("u1", RecommendationOptions(min_rating=7))


@pytest.mark.asyncio
async def test_similar_templates(engine):
    similar = await engine.get_similar_templates("t-sales-1")
    
    assert [t.id for t in similar] == ["t-sales-2"]


@pytest.mark.asyncio
async def test_similar_templates_for_unknown_or_failing_catalog(engine, catalog):
    assert await engine.get_similar_templates("missing") == []
    
    catalog.fail = True
    assert await engine.get_similar_templates("t-sales-1") == []


@pytest.mark.asyncio
async def test_similar_templates_rejects_blank_id(engine):
    with pytest.raises(ValueError):
        await engine.get_similar_templates(" ")


@pytest.mark.asyncio
async def test_trending_through_engine(engine):
    await engine.record_template_usage("u1", "t-edu-1")
    
    trending = await engine.get_trending_templates("day", limit=5)
    
    assert [t.id for t in trending] == ["t-edu-1"]


@pytest.mark.asyncio
async def test_usage_recording_survives_storage_failures(engine, persistence, analytics):
    persistence.fail_upsert = True
    await engine.record_template_usage("u1", "t-sales-1")
    assert len(analytics.rows) == 1
    
    analytics.fail = True
    persistence.fail_upsert = False
    await engine.record_template_usage("u1", "t-sales-2")
    
    preferences = await engine.preferences.get("u1")
    assert [u.template_id for u in preferences.usage_history] == ["t-sales-1", "t-sales-2"]


@pytest.mark.asyncio
async def test_invalid_writes_are_ignored(engine, persistence, analytics):
    await engine.record_template_usage("", "t-sales-1")
    await engine.record_template_usage("u1", "")
    await engine.update_search_preferences(None, "crm")
    
    assert persistence.rows == {}
    assert analytics.rows == {}


@pytest.mark.asyncio
async def test_record_rating(engine):
    await engine.record_template_rating("u1", "t-sales-1", 4.5)
    
    preferences = await engine.preferences.get("u1")
    assert [(r.template_id, r.rating) for r in preferences.ratings] == [("t-sales-1", 4.5)]
    
    with pytest.raises(ValueError):
        await engine.record_template_rating("u1", "t-sales-1", 5.5)


@pytest.mark.asyncio
async def test_clear_cache(engine):
    await engine.preferences.get("u1")
    await engine.preferences.get("u2")
    
    assert engine.clear_cache("u1") == 1
    assert engine.clear_cache() == 1
    assert engine.get_stats()["cache"]["size"] == 0


@pytest.mark.asyncio
async def test_engaged_sales_user_gets_confident_lead_template(engine):
    for i in range(10):
        await engine.record_template_usage("u1", f"t-used-{i}", completed=i < 4)
    await engine.update_search_preferences("u1", "lead generation", ["t-sales-1"])
    
    result = await engine.get_recommendations("u1", RecommendationOptions(include_reasons=True))
    
    top = result.scores[0]
    assert top.template_id == "t-sales-1"
    assert top.score > 6.4
    assert top.confidence >= 0.9


@pytest.mark.asyncio
async def test_missing_search_term_keeps_history_empty(engine):
    await engine.update_search_preferences("u1", None, ["t-support-1"])
    
    preferences = await engine.preferences.get("u1")
    assert preferences.search_history == []
    assert preferences.preferred_categories == [TemplateCategory.SUPPORT]
