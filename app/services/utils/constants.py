"""
Shared constants for services
"""

# Preference record bounds (oldest entries are evicted first)
USAGE_HISTORY_LIMIT = 50
SEARCH_HISTORY_LIMIT = 20

# Trending windows in days
TRENDING_WINDOWS = {
    "day": 1,
    "week": 7,
    "month": 30,
}
DEFAULT_TRENDING_TIMEFRAME = "week"

# Vocabulary matched against free-text searches
SEARCH_TAG_VOCABULARY = (
    "chatbot",
    "automation",
    "ai-assistant",
    "customer-service",
    "sales",
    "support",
    "education",
    "healthcare",
    "finance",
    "marketing",
    "lead-generation",
    "appointment",
    "booking",
    "crm",
    "integration",
)

# Rating scale
MIN_RATING = 0.0
MAX_RATING = 5.0

# HTTP status codes
HTTP_BAD_REQUEST = 400
