"""
Turn a raw inference payload into a verdict.

Upstream models answer in different shapes and none of them say which one
they use, so extraction walks a fixed list of known shapes and the first
structural match wins:

    1) [[{"label": ..., "score": ...}, ...]]   text-classification, nested
    2) {"label": ..., "score": ...}            text-classification, flat
    3) [{"generated_text": ...}] / {"generated_text": ...}   text-generation

Noun-density requests never end in Unknown because of a bad payload: the
offline heuristic in ``nouns`` fills that gap. Sentiment has no fallback.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from . import nouns
from .metrics import HEURISTIC_FALLBACKS
from .outcomes import (
    AnalysisKind,
    Category,
    HttpError,
    InferenceOutcome,
    Interpretation,
    NounDensity,
    PayloadError,
    Sentiment,
    Success,
)

logger = logging.getLogger(__name__)

# full words are tried across all sets before the abbreviations
SENTIMENT_KEYWORDS = (
    (Sentiment.POSITIVE, ("positive",), ("pos",)),
    (Sentiment.NEGATIVE, ("negative",), ("neg",)),
    (Sentiment.NEUTRAL, ("neutral",), ("neu",)),
)
DENSITY_KEYWORDS = (
    (NounDensity.HIGH, "high"),
    (NounDensity.MEDIUM, "medium"),
    (NounDensity.LOW, "low"),
)

_GREATER_THAN_HIGH = re.compile(r">\s*15\b")
_LESS_THAN_LOW = re.compile(r"<\s*6\b")
_INTEGER = re.compile(r"\d+")


@dataclass(frozen=True)
class Label:
    text: str
    score: Optional[float] = None


def _label_from(obj: Any) -> Optional[Label]:
    if isinstance(obj, dict) and isinstance(obj.get("label"), str):
        score = obj.get("score")
        return Label(obj["label"], float(score) if isinstance(score, (int, float)) else None)
    return None


def _generated_text(body: Any) -> Optional[str]:
    if isinstance(body, list) and body and isinstance(body[0], dict):
        text = body[0].get("generated_text")
    elif isinstance(body, dict):
        text = body.get("generated_text")
    else:
        return None
    return text if isinstance(text, str) else None


def extract_label(body: Any, prompt: Optional[str] = None) -> Union[Label, PayloadError]:
    # 1) nested array of label/score pairs
    if isinstance(body, list) and body and isinstance(body[0], list) and body[0]:
        label = _label_from(body[0][0])
        if label is not None:
            return label

    # 2) plain object with a label
    label = _label_from(body)
    if label is not None:
        return label

    # 3) free-form generated text
    text = _generated_text(body)
    if text is not None:
        text = text.lower().strip()
        echoed = prompt.lower().strip() if prompt else ""
        if echoed and text.startswith(echoed):
            text = text[len(echoed):].strip()
        return Label(text.split("\n")[0].strip())

    return PayloadError("unexpected API response format")


def classify_sentiment(text: str) -> Optional[Sentiment]:
    lowered = text.lower()
    for full_words in (True, False):
        for sentiment, words, abbreviations in SENTIMENT_KEYWORDS:
            candidates = words if full_words else abbreviations
            if any(word in lowered for word in candidates):
                return sentiment
    return None


def classify_density(text: str) -> Optional[NounDensity]:
    lowered = text.lower()
    for density, keyword in DENSITY_KEYWORDS:
        if keyword in lowered:
            return density
    if _GREATER_THAN_HIGH.search(lowered):
        return NounDensity.HIGH
    if _LESS_THAN_LOW.search(lowered):
        return NounDensity.LOW
    match = _INTEGER.search(lowered)
    if match:
        return nouns.bucket(int(match.group()))
    return None


def _heuristic(original_text: str, strict: bool) -> Interpretation:
    count = nouns.estimate(original_text, strict=strict)
    HEURISTIC_FALLBACKS.inc()
    logger.info("Model answer unusable; heuristic counted %d noun-like words", count)
    return Interpretation(
        kind=AnalysisKind.NOUN_DENSITY,
        verdict=nouns.bucket(count),
        noun_count=count,
        heuristic=True,
    )


def interpret(
    outcome: InferenceOutcome,
    kind: AnalysisKind,
    original_text: str,
    prompt: Optional[str] = None,
    min_score: float = 0.5,
    strict: bool = True,
) -> Interpretation:
    if isinstance(outcome, HttpError):
        return Interpretation.failure(
            kind, Category.from_error(outcome.kind), outcome.status_code, outcome.detail
        )

    if isinstance(outcome, Success):
        extracted = extract_label(outcome.body, prompt)
    else:
        extracted = outcome

    if isinstance(extracted, PayloadError):
        logger.warning("Unusable %s payload: %s", kind.value, extracted.reason)
        if kind is AnalysisKind.NOUN_DENSITY:
            return _heuristic(original_text, strict)
        return Interpretation.failure(kind, Category.PAYLOAD_ERROR, detail=extracted.reason)

    if kind is AnalysisKind.SENTIMENT:
        sentiment = classify_sentiment(extracted.text)
        if sentiment is None:
            logger.warning("Unrecognized sentiment label: %r", extracted.text)
            return Interpretation.failure(kind, Category.UNRECOGNIZED_LABEL, detail=extracted.text)
        if (
            sentiment in (Sentiment.POSITIVE, Sentiment.NEGATIVE)
            and extracted.score is not None
            and extracted.score <= min_score
        ):
            sentiment = Sentiment.NEUTRAL
        return Interpretation(kind=kind, verdict=sentiment, score=extracted.score)

    density = classify_density(extracted.text)
    if density is None:
        return _heuristic(original_text, strict)
    return Interpretation(kind=kind, verdict=density, score=extracted.score)
