"""
Content similarity between two templates
"""
from app.services.recommendations.models import TemplateRecord

CATEGORY_WEIGHT = 0.3
TAG_WEIGHT = 0.4
DESCRIPTION_WEIGHT = 0.3
MIN_WORD_LENGTH = 4


def _overlap_ratio(common: int, size_a: int, size_b: int) -> float:
    largest = max(size_a, size_b)
    return common / largest if largest > 0 else 0.0


def calculate_template_similarity(a: TemplateRecord, b: TemplateRecord) -> float:
    """
    Similarity of two templates from category, tags and description
    
    Roughly in [0, 1] but not normalized; use it to rank, not as a probability.
    
    Args:
        a: First template
        b: Second template
        
    Returns:
        Similarity score
    """
    similarity = 0.0
    
    if a.category == b.category:
        similarity += CATEGORY_WEIGHT
    
    # Tag overlap, zero when either side has no tags
    tags_a, tags_b = set(a.tags), set(b.tags)
    if tags_a and tags_b:
        similarity += TAG_WEIGHT * _overlap_ratio(len(tags_a & tags_b), len(tags_a), len(tags_b))
    
    # Lexical overlap of descriptions, short words ignored
    words_a = (a.description or "").lower().split()
    words_b = (b.description or "").lower().split()
    common_words = {
        word for word in set(words_a) & set(words_b)
        if len(word) >= MIN_WORD_LENGTH
    }
    similarity += DESCRIPTION_WEIGHT * _overlap_ratio(len(common_words), len(words_a), len(words_b))
    
    return similarity
