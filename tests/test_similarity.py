import pytest

from app.services.recommendations import TemplateCategory, calculate_template_similarity
from tests.fakes import make_template


def test_similarity_combines_category_tags_and_description():
    a = make_template(
        "a", TemplateCategory.SALES, ["x", "y"],
        description="Qualify inbound leads automatically with chat"
    )
    b = make_template(
        "b", TemplateCategory.SALES, ["y", "z", "w"],
        description="Book meetings and qualify leads"
    )
    
    # 0.3 category + 0.4 * 1/3 tags + 0.3 * 2/6 words ("qualify", "leads")
    assert calculate_template_similarity(a, b) == pytest.approx(0.3 + 0.4 / 3 + 0.1)


def test_category_and_tag_terms_are_symmetric():
    a = make_template("a", TemplateCategory.SUPPORT, ["chatbot", "crm"])
    b = make_template("b", TemplateCategory.SUPPORT, ["crm"])
    
    assert calculate_template_similarity(a, b) == calculate_template_similarity(b, a)
    assert calculate_template_similarity(a, b) == pytest.approx(0.3 + 0.4 * 0.5)


def test_empty_tags_contribute_nothing():
    a = make_template("a", TemplateCategory.FINANCE, [])
    b = make_template("b", TemplateCategory.FINANCE, ["crm"])
    
    assert calculate_template_similarity(a, b) == pytest.approx(0.3)
    assert calculate_template_similarity(a, make_template("c", TemplateCategory.FINANCE)) == pytest.approx(0.3)


def test_short_words_are_ignored():
    a = make_template("a", TemplateCategory.HR, description="a bot for you")
    b = make_template("b", TemplateCategory.LEGAL, description="a bot for me")
    
    assert calculate_template_similarity(a, b) == 0.0
