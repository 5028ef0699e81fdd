"""
AnalysisController: one review page worth of state.

Owns the corpus and the currently selected review, runs at most one analysis
at a time and drops results that arrive after a newer review was selected.
Results are pushed to a ResultSink, which is whatever renders them.
"""
from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple

from .inference import InferenceClient
from .interpreter import interpret
from .metrics import VERDICTS
from .outcomes import AnalysisKind, Category, Interpretation, describe
from .store import (
    EmptyCorpusError,
    FileReviewProvider,
    HttpReviewProvider,
    ParseError,
    Review,
    ReviewProvider,
    ReviewStore,
)

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    def show_review(self, review: Review) -> None: ...

    def show_result(self, result: Interpretation) -> None: ...

    def show_error(self, message: str) -> None: ...

    def set_busy(self, busy: bool) -> None: ...


class SnapshotSink:
    """Keeps the latest rendered state so it can be served as JSON."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.review: Optional[Review] = None
        self.results: Dict[AnalysisKind, Interpretation] = {}
        self.error: Optional[str] = None
        self.busy = False

    def show_review(self, review: Review) -> None:
        with self._lock:
            self.review = review
            self.results = {}
            self.error = None

    def show_result(self, result: Interpretation) -> None:
        with self._lock:
            self.results[result.kind] = result
            if result.ok:
                self.error = None

    def show_error(self, message: str) -> None:
        with self._lock:
            self.error = message

    def set_busy(self, busy: bool) -> None:
        with self._lock:
            self.busy = busy

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "review": self.review,
                "results": dict(self.results),
                "error": self.error,
                "busy": self.busy,
            }


@dataclass(frozen=True)
class AnalysisProfile:
    """Endpoints and prompt for one analysis kind."""

    kind: AnalysisKind
    endpoints: Sequence[str]
    prompt_template: str = "{text}"

    def build_payload(self, text: str) -> Tuple[Dict[str, Any], str]:
        prompt = self.prompt_template.format(text=text)
        return {"inputs": prompt}, prompt


class AnalysisController:
    def __init__(
        self,
        provider: ReviewProvider,
        client: InferenceClient,
        profiles: Mapping[AnalysisKind, AnalysisProfile],
        sink: Optional[ResultSink] = None,
        auth_token: Optional[str] = None,
        timeout: Optional[float] = None,
        min_score: float = 0.5,
        strict_nouns: bool = True,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.provider = provider
        self.client = client
        self.profiles = dict(profiles)
        self.sink = sink or SnapshotSink()
        self.auth_token = auth_token
        self.timeout = timeout
        self.min_score = min_score
        self.strict_nouns = strict_nouns
        self.store = ReviewStore(rng)

        self.current_review: Optional[Review] = None
        self._generation = 0
        self._state = threading.Lock()
        self._in_flight = threading.Lock()

    @classmethod
    def from_settings(cls, settings, sink: Optional[ResultSink] = None) -> "AnalysisController":
        if settings.REVIEWS_URL:
            provider = HttpReviewProvider(settings.REVIEWS_URL, timeout=settings.REQUEST_TIMEOUT)
        else:
            provider = FileReviewProvider(settings.REVIEWS_PATH)
        client = InferenceClient(
            timeout=settings.REQUEST_TIMEOUT,
            backoff=settings.RATE_LIMIT_BACKOFF,
            max_backoff=settings.MAX_BACKOFF,
        )
        profiles = {
            AnalysisKind.SENTIMENT: AnalysisProfile(
                AnalysisKind.SENTIMENT,
                settings.endpoints_for(settings.SENTIMENT_MODELS),
                settings.SENTIMENT_PROMPT,
            ),
            AnalysisKind.NOUN_DENSITY: AnalysisProfile(
                AnalysisKind.NOUN_DENSITY,
                settings.endpoints_for(settings.NOUN_MODELS),
                settings.NOUN_PROMPT,
            ),
        }
        return cls(
            provider,
            client,
            profiles,
            sink=sink,
            auth_token=settings.HF_API_TOKEN,
            timeout=settings.REQUEST_TIMEOUT,
            min_score=settings.SENTIMENT_MIN_SCORE,
            strict_nouns=settings.STRICT_NOUN_HEURISTIC,
        )

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    @property
    def review_count(self) -> int:
        return len(self.store)

    def load(self) -> int:
        """Fetch and parse the corpus; returns the number of reviews kept."""
        try:
            reviews = self.store.load(self.provider.fetch_raw_corpus())
        except ParseError as e:
            logger.error("Failed to load reviews: %s", e)
            self.sink.show_error(describe(Category.PARSE_ERROR, detail=str(e)))
            return 0
        if not reviews:
            self.sink.show_error(describe(Category.EMPTY_CORPUS))
        return len(reviews)

    def select_random_review(self) -> Optional[Review]:
        with self._state:
            # any analysis still in flight now belongs to an older review
            self._generation += 1
            try:
                review = self.store.sample()
            except EmptyCorpusError:
                logger.warning("Review requested but the corpus is empty")
                self.sink.show_error(describe(Category.EMPTY_CORPUS))
                return None
            self.current_review = review
            self.sink.show_review(review)
        return review

    def analyze(self, kind: AnalysisKind, auth_token: Optional[str] = None) -> Optional[Interpretation]:
        """Run one analysis of the current review.

        Returns None when the request was ignored because another analysis is
        in flight, or when its result went stale before it arrived.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.info("Analysis already in flight; ignoring %s request", kind.value)
            return None
        try:
            with self._state:
                review = self.current_review
                generation = self._generation
            if review is None:
                result = Interpretation.failure(kind, Category.NO_REVIEW_SELECTED)
                self._emit(result)
                return result

            self.sink.set_busy(True)
            profile = self.profiles[kind]
            payload, prompt = profile.build_payload(review.text)
            outcome = self.client.invoke_with_fallback(
                profile.endpoints,
                payload,
                auth_token=auth_token or self.auth_token,
                timeout=self.timeout,
            )
            result = interpret(
                outcome,
                kind,
                review.text,
                prompt=prompt,
                min_score=self.min_score,
                strict=self.strict_nouns,
            )

            with self._state:
                if generation != self._generation:
                    logger.info("Discarding stale %s result for a previous review", kind.value)
                    return None
                self._emit(result)
            return result
        finally:
            self.sink.set_busy(False)
            self._in_flight.release()

    def _emit(self, result: Interpretation) -> None:
        VERDICTS.labels(result.kind.value, result.verdict.value, result.category.value).inc()
        self.sink.show_result(result)
        if not result.ok:
            self.sink.show_error(result.message)
