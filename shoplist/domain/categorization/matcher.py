"""
Category Matcher - scored keyword/phrase classification of cart item titles

Scoring per category (see keywords.py for the table):
- phrase hit: 3 points (whole-phrase substring of the normalized title)
- token hit: 1 point (keyword present in the tokenized title)

Selection walks the table in definition order with a running best that starts
at ('uncategorized', 0, 0). A category with a positive score takes over when it:
1. scores higher, or
2. ties on score with more phrase hits, or
3. ties on both and sits earlier in the display order.

Example:
- "Tofurky Deli Slices" → deli (phrase "deli slices" + tokens "deli", "tofurky" = 5)
- "Organic Fresh Bananas" → produce (token "banana" = 1)
- "Chicken Pizza" → meat (1 vs frozen 1, meat is earlier in display order)
"""
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from shoplist.common.schemas.cart import CartItem
from shoplist.domain.categorization.keywords import (
    DEFAULT_CATEGORY_ORDER,
    DEFAULT_DEFINITIONS,
    UNCATEGORIZED_ID,
    CategoryDefinition,
)
from shoplist.domain.categorization.normalizer import normalize, singularize, tokenize
from shoplist.domain.categorization.schemas import MatchResult, MatchScore

PHRASE_WEIGHT = 3


class ItemClassifier(Protocol):
    """Anything that can assign a category id to a cart item."""

    def classify(self, item: CartItem) -> str:
        ...


class _CompiledDefinition:
    """Definition with phrases pre-normalized and tokens paired with their singular form."""

    __slots__ = ("category_id", "phrases", "tokens")

    def __init__(self, definition: CategoryDefinition):
        self.category_id = definition.category_id
        self.phrases = tuple(
            f" {normalize(phrase)} " for phrase in definition.phrases if normalize(phrase)
        )
        self.tokens: Tuple[Tuple[str, str], ...] = tuple(
            (token, singularize(token))
            for token in (normalize(t) for t in definition.tokens)
            if token
        )

    def score(self, padded_title: str, title_tokens: set) -> MatchScore:
        phrase_hits = sum(1 for phrase in self.phrases if phrase in padded_title)
        token_hits = sum(
            1 for token, singular in self.tokens
            if token in title_tokens or singular in title_tokens
        )
        return MatchScore(
            category_id=self.category_id,
            phrase_hits=phrase_hits,
            token_hits=token_hits,
            score=phrase_hits * PHRASE_WEIGHT + token_hits,
        )


class CategoryMatcher:
    """
    Deterministic keyword classifier.

    Usage:
        matcher = CategoryMatcher()
        matcher.classify_title("Peanut Butter Crunchy")  # "pantry"

    Both the keyword table and the tie-break order are replaceable, e.g. for a
    user-trained table or a different store layout.
    """

    def __init__(
        self,
        definitions: Optional[Iterable[CategoryDefinition]] = None,
        display_order: Optional[Sequence[str]] = None,
    ):
        self.definitions: List[_CompiledDefinition] = [
            _CompiledDefinition(d) for d in (definitions if definitions is not None else DEFAULT_DEFINITIONS)
        ]
        order = list(display_order if display_order is not None else DEFAULT_CATEGORY_ORDER)
        self._position = {category_id: index for index, category_id in enumerate(order)}

    def _display_position(self, category_id: str) -> int:
        # Categories missing from the display order sort after every listed one
        return self._position.get(category_id, len(self._position))

    def explain(self, title: str) -> MatchResult:
        """
        Score every category for a title and pick the winner.

        Args:
            title: Raw item title

        Returns:
            MatchResult with the winning category and all candidate scores
        """
        normalized = normalize(title)
        padded = f" {normalized} "
        title_tokens = tokenize(title)

        best_category = UNCATEGORIZED_ID
        best_score = 0
        best_phrase_hits = 0
        candidates: List[MatchScore] = []

        for definition in self.definitions:
            candidate = definition.score(padded, title_tokens)
            candidates.append(candidate)
            if candidate.score <= 0:
                continue

            if (
                candidate.score > best_score
                or (candidate.score == best_score and candidate.phrase_hits > best_phrase_hits)
                or (
                    candidate.score == best_score
                    and candidate.phrase_hits == best_phrase_hits
                    and self._display_position(candidate.category_id) < self._display_position(best_category)
                )
            ):
                best_category = candidate.category_id
                best_score = candidate.score
                best_phrase_hits = candidate.phrase_hits

        return MatchResult(
            title=title,
            normalized_title=normalized,
            category_id=best_category,
            score=best_score,
            phrase_hits=best_phrase_hits,
            candidates=candidates,
        )

    def classify_title(self, title: str) -> str:
        return self.explain(title).category_id

    def classify(self, item: CartItem) -> str:
        """Category id for a cart item (pure: same title, same answer)."""
        return self.explain(item.title).category_id


# Singleton instance
category_matcher = CategoryMatcher()
