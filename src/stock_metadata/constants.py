"""
Project-wide constants for stock metadata generation
"""  # noqa: D200, D212, D415

# ==============================================================================
# Marketplace Rules
# ==============================================================================

ADOBE_STOCK_CATEGORIES: tuple[str, ...] = (
    "Animals",
    "Buildings and Architecture",
    "Business",
    "Drinks",
    "The Environment",
    "States of Mind",
    "Food",
    "Graphic Resources",
    "Hobbies and Leisure",
    "Industry",
    "Landscapes",
    "Lifestyle",
    "People",
    "Plants and Flowers",
    "Culture and Religion",
    "Science",
    "Social Issues",
    "Sports",
    "Technology",
    "Transport",
    "Travel",
    "Abstract",
)

# Title length bounds (characters)
DEFAULT_TITLE_LENGTH = 100
MIN_TITLE_LENGTH = 5
MAX_TITLE_LENGTH = 200

# Keyword count bounds; Adobe Stock accepts at most 49
DEFAULT_KEYWORD_COUNT = 30
MIN_KEYWORD_COUNT = 5
MAX_KEYWORD_COUNT = 49

CONTENT_TYPES = ("image", "video")
DEFAULT_CONTENT_TYPE = "image"

# ==============================================================================
# Provider Configuration
# ==============================================================================

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.5

# Characters of a key shown in logs and error messages
KEY_HINT_LENGTH = 4
# Shorter keys are masked entirely
KEY_HINT_MIN_KEY_LENGTH = 2 * KEY_HINT_LENGTH

# ==============================================================================
# Export
# ==============================================================================

CSV_HEADER = ("File Name", "Title", "Keywords", "Category")
CSV_KEYWORD_SEPARATOR = ";"
DEFAULT_EXPORT_FILENAME = "adobe_stock_metadata.csv"
