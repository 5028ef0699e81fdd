"""
Shared value types for one analysis round-trip.

InferenceOutcome is what the HTTP layer hands back (Success | HttpError |
PayloadError); Interpretation is what the user finally sees. Every category
maps to exactly one user-facing message through describe().
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class AnalysisKind(str, Enum):
    SENTIMENT = "sentiment"
    NOUN_DENSITY = "nouns"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    UNKNOWN = "unknown"


class NounDensity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


Verdict = Union[Sentiment, NounDensity]


class ErrorKind(str, Enum):
    """Transport-level failures reported by the inference client."""

    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    MODEL_LOADING = "model_loading"
    TIMEOUT = "timeout"
    NETWORK = "network"
    GENERIC = "generic"


class Category(str, Enum):
    OK = "ok"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    MODEL_LOADING = "model_loading"
    TIMEOUT = "timeout"
    NETWORK = "network"
    GENERIC = "generic"
    PAYLOAD_ERROR = "payload_error"
    UNRECOGNIZED_LABEL = "unrecognized_label"
    PARSE_ERROR = "parse_error"
    EMPTY_CORPUS = "empty_corpus"
    NO_REVIEW_SELECTED = "no_review_selected"

    @classmethod
    def from_error(cls, kind: ErrorKind) -> "Category":
        return cls(kind.value)


# ------------------------ Inference outcomes ------------------------
@dataclass(frozen=True)
class Success:
    body: Any


@dataclass(frozen=True)
class HttpError:
    kind: ErrorKind
    status_code: Optional[int] = None
    detail: Optional[str] = None
    retry_after: Optional[str] = None


@dataclass(frozen=True)
class PayloadError:
    reason: str


InferenceOutcome = Union[Success, HttpError, PayloadError]


# ------------------------ User-facing messages ------------------------
_MESSAGES = {
    Category.OK: "Analysis complete",
    Category.UNAUTHORIZED: "Invalid API token. Please check your Hugging Face API token.",
    Category.RATE_LIMITED: "Rate limit exceeded. Please wait or add your API token for higher limits.",
    Category.NOT_FOUND: "Model not found. Please check the configured model id.",
    Category.MODEL_LOADING: "Model is loading. Please try again in a few seconds.",
    Category.TIMEOUT: "The inference request timed out. Please try again.",
    Category.NETWORK: "Network error: {detail}",
    Category.GENERIC: "API error: {status_code}",
    Category.PAYLOAD_ERROR: "Failed to process API response: {detail}",
    Category.UNRECOGNIZED_LABEL: "Could not determine sentiment from response",
    Category.PARSE_ERROR: "Failed to load reviews: {detail}",
    Category.EMPTY_CORPUS: "No reviews available. Please wait for reviews to load.",
    Category.NO_REVIEW_SELECTED: 'Please select a review first using "Select Random Review"',
}


def describe(category: Category, status_code: Optional[int] = None, detail: Optional[str] = None) -> str:
    return _MESSAGES[category].format(
        status_code=status_code if status_code is not None else "unknown",
        detail=detail or "unexpected error",
    )


def unknown_verdict(kind: AnalysisKind) -> Verdict:
    return Sentiment.UNKNOWN if kind is AnalysisKind.SENTIMENT else NounDensity.UNKNOWN


@dataclass(frozen=True)
class Interpretation:
    """Final verdict for one analysis request, plus how it was reached."""

    kind: AnalysisKind
    verdict: Verdict
    category: Category = Category.OK
    score: Optional[float] = None
    noun_count: Optional[int] = None
    heuristic: bool = False
    status_code: Optional[int] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.category is Category.OK

    @property
    def message(self) -> str:
        return describe(self.category, self.status_code, self.detail)

    @classmethod
    def failure(
        cls,
        kind: AnalysisKind,
        category: Category,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> "Interpretation":
        return cls(
            kind=kind,
            verdict=unknown_verdict(kind),
            category=category,
            status_code=status_code,
            detail=detail,
        )
