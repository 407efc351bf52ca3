"""
Text Normalizer - title cleanup and tokenization for keyword matching

- "Organic Fresh Bananas™" → "organic fresh bananas"
- tokens: {"organic", "fresh", "bananas", "banana"}

Singularization is deliberately naive (first matching rule wins, tokens
shorter than 4 characters are left alone):
- "berries" → "berry"
- "tomatoes" → "tomato"
- "slices" → "slic"  (the -es rule fires before -s)
- "eggs" → "egg"
"""
import re
import unicodedata
from typing import Set

TRADEMARK_SYMBOLS = "™®©℠"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_MIN_SINGULAR_LEN = 4


def normalize(text: str) -> str:
    """Lowercase, drop trademark symbols and accents, collapse punctuation to single spaces."""
    text = (text or "").lower()
    text = text.translate({ord(ch): None for ch in TRADEMARK_SYMBOLS})
    # "jalapeño" → "jalapeno"
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _NON_ALNUM.sub(" ", text).strip()


def singularize(token: str) -> str:
    if len(token) < _MIN_SINGULAR_LEN:
        return token
    if token.endswith("ies"):
        return token[:-3] + "y"
    if token.endswith("es"):
        return token[:-2]
    if token.endswith("s"):
        return token[:-1]
    return token


def tokenize(text: str) -> Set[str]:
    """Whitespace tokens of the normalized text, plus each token's singular form."""
    tokens: Set[str] = set()
    for token in normalize(text).split():
        tokens.add(token)
        tokens.add(singularize(token))
    return tokens
