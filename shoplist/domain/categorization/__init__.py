"""
Categorization Module - keyword-based grocery categorization

Two pieces:
1. Matcher: scores a normalized item title against the category keyword table
2. Registry: the user's ordered set of categories on a cart state

Example flow:
- "Tofurky Deli Slices" → phrase "deli slices" → deli
- "Organic Fresh Bananas" → token "banana" → produce
- "Paper Towels 6 Rolls" → phrase "paper towels" → household
- "Mystery Box" → nothing scores → uncategorized
"""

from shoplist.domain.categorization.keywords import (
    CATEGORY_NAMES,
    DEFAULT_CATEGORY_ORDER,
    DEFAULT_DEFINITIONS,
    UNCATEGORIZED_ID,
    CategoryDefinition,
    GroceryCategory,
)
from shoplist.domain.categorization.matcher import (
    CategoryMatcher,
    ItemClassifier,
    category_matcher,
)
from shoplist.domain.categorization.normalizer import normalize, singularize, tokenize
from shoplist.domain.categorization.schemas import MatchResult, MatchScore

__all__ = [
    'CATEGORY_NAMES',
    'DEFAULT_CATEGORY_ORDER',
    'DEFAULT_DEFINITIONS',
    'UNCATEGORIZED_ID',
    'CategoryDefinition',
    'GroceryCategory',
    'CategoryMatcher',
    'ItemClassifier',
    'category_matcher',
    'normalize',
    'singularize',
    'tokenize',
    'MatchResult',
    'MatchScore',
]
