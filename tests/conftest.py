import pytest

from app.services.recommendations import PreferenceCache, TemplateCategory, TemplateRecommendationEngine
from tests.fakes import (
    InMemoryCatalog,
    InMemoryPreferencePersistence,
    InMemoryUsageAnalytics,
    make_template
)


@pytest.fixture
def templates():
    return [
        make_template(
            "t-sales-1", TemplateCategory.SALES, ["lead-generation", "crm"],
            rating=4.8, usage_count=25,
            description="Qualify inbound leads automatically and sync them to your CRM"
        ),
        make_template(
            "t-sales-2", TemplateCategory.SALES, ["crm"],
            rating=3.5, usage_count=3,
            description="Follow up with leads and keep your CRM tidy"
        ),
        make_template(
            "t-support-1", TemplateCategory.SUPPORT, ["chatbot"],
            rating=4.2, usage_count=40,
            description="Answer support questions around the clock"
        ),
        make_template(
            "t-edu-1", TemplateCategory.EDUCATION, ["booking"],
            rating=2.0, usage_count=0,
            description="Book tutoring sessions for students"
        ),
        make_template(
            "t-fin-1", TemplateCategory.FINANCE, [],
            rating=4.0, usage_count=12,
            description="Explain invoices and payment schedules"
        ),
        make_template(
            "t-private", TemplateCategory.SALES, ["crm"],
            rating=5.0, usage_count=100, is_public=False
        ),
    ]


@pytest.fixture
def catalog(templates):
    return InMemoryCatalog(templates)


@pytest.fixture
def persistence():
    return InMemoryPreferencePersistence()


@pytest.fixture
def analytics():
    return InMemoryUsageAnalytics()


@pytest.fixture
def engine(catalog, persistence, analytics):
    return TemplateRecommendationEngine(
        catalog=catalog,
        persistence=persistence,
        analytics=analytics,
        cache=PreferenceCache(max_size=100)
    )
