"""
Data schemas for categorization module
"""
from typing import List

from pydantic import BaseModel, Field


class MatchScore(BaseModel):
    """Keyword evidence for one category against one title"""
    category_id: str
    phrase_hits: int = Field(default=0, ge=0)
    token_hits: int = Field(default=0, ge=0)
    score: int = Field(default=0, ge=0, description="phrase_hits * 3 + token_hits")


class MatchResult(BaseModel):
    """
    Winning category for a title, with the per-category breakdown.

    category_id is 'uncategorized' when no category scored above zero.
    """
    title: str
    normalized_title: str
    category_id: str
    score: int = 0
    phrase_hits: int = 0
    candidates: List[MatchScore] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Tofurky Deli Slices",
                "normalized_title": "tofurky deli slices",
                "category_id": "deli",
                "score": 5,
                "phrase_hits": 1,
                "candidates": [
                    {"category_id": "deli", "phrase_hits": 1, "token_hits": 2, "score": 5}
                ],
            }
        }
    }
