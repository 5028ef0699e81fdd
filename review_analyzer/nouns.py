"""
Offline noun-density estimate.

Only used when the remote model's answer is missing or cannot be read, so it
aims for determinism rather than linguistic accuracy: a word is noun-like if
it is a known common noun, or if it looks like a content word (long enough,
no digits, not a function word and, in strict mode, no verbal/adverbial
suffix).
"""
from __future__ import annotations

import re
from typing import FrozenSet, Set

from .outcomes import NounDensity

HIGH_THRESHOLD = 15  # count > 15 -> High
LOW_THRESHOLD = 6    # count < 6  -> Low

COMMON_NOUNS: FrozenSet[str] = frozenset({
    "product", "item", "price", "quality", "value", "money", "service",
    "delivery", "shipping", "package", "box", "order", "seller", "store",
    "shop", "customer", "support", "staff", "manager", "owner", "refund",
    "return", "warranty", "phone", "battery", "screen", "camera", "charger",
    "cable", "case", "button", "sound", "speaker", "color", "size", "fit",
    "material", "fabric", "design", "book", "story", "author", "movie",
    "film", "plot", "actor", "music", "song", "game", "app", "software",
    "hotel", "room", "bed", "food", "meal", "dinner", "lunch", "breakfast",
    "restaurant", "table", "menu", "waiter", "drink", "coffee", "taste",
    "day", "week", "month", "year", "time", "hour", "minute", "night",
    "place", "location", "car", "kid", "child", "family", "friend", "gift",
    "problem", "issue", "experience", "review", "star", "job", "work",
    "home", "house", "kitchen", "door", "window", "water", "light", "bag",
    "shoe", "shirt", "dress", "watch", "computer", "laptop", "keyboard",
    "mouse", "headphone", "tv", "picture", "instruction", "manual", "part",
})

STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "this", "that", "these", "those", "some", "any", "each",
    "every", "such", "both", "either", "neither", "and", "but", "or", "nor",
    "because", "although", "though", "while", "unless", "until", "since",
    "with", "without", "from", "into", "onto", "over", "under", "about",
    "above", "below", "after", "before", "between", "through", "during",
    "against", "among", "within", "upon", "have", "has", "had", "having",
    "been", "being", "were", "was", "are", "is", "will", "would", "could",
    "should", "shall", "might", "must", "does", "did", "done", "they", "them",
    "their", "theirs", "there", "then", "than", "what", "when", "where",
    "which", "whom", "whose", "your", "yours", "mine", "ours", "also", "very",
    "just", "only", "even", "still", "much", "many", "more", "most", "other",
    "another", "here", "again", "ever", "never", "always", "quite", "rather",
    "really", "well", "like", "don't", "didn't", "doesn't", "can't", "won't",
    "it's", "i'm", "i've", "isn't", "wasn't", "aren't", "couldn't",
    "wouldn't", "shouldn't", "myself", "itself", "yourself", "himself",
    "herself", "themselves", "ourselves", "something", "anything",
    "nothing", "everything",
})

VERBAL_SUFFIXES = ("ing", "ed", "ly", "es")

_EDGE_PUNCT = re.compile(r"^[^\w']+|[^\w']+$")
_DIGIT = re.compile(r"\d")


def tokenize(text: str):
    for raw in text.lower().split():
        word = _EDGE_PUNCT.sub("", raw).strip("'")
        if word:
            yield word


def is_noun_like(word: str, strict: bool = True) -> bool:
    if word in COMMON_NOUNS or (word.endswith("s") and word[:-1] in COMMON_NOUNS):
        return True
    if len(word) <= 3 or _DIGIT.search(word) or word in STOP_WORDS:
        return False
    if strict and word.endswith(VERBAL_SUFFIXES):
        return False
    return True


def estimate(text: str, strict: bool = True) -> int:
    """Number of distinct noun-like words in ``text``."""
    nouns: Set[str] = {word for word in tokenize(text) if is_noun_like(word, strict)}
    return len(nouns)


def bucket(count: int) -> NounDensity:
    if count < 0:
        raise ValueError(f"noun count must be non-negative, got {count}")
    if count > HIGH_THRESHOLD:
        return NounDensity.HIGH
    if count >= LOW_THRESHOLD:
        return NounDensity.MEDIUM
    return NounDensity.LOW
