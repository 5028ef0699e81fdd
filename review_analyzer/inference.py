# review_analyzer/inference.py
from __future__ import annotations

"""
HTTP client for the Hugging Face style Inference API.

- invoke():
    One JSON POST to one model endpoint. Never raises for HTTP or transport
    failures; every result is an InferenceOutcome (Success / HttpError /
    PayloadError).

- invoke_with_fallback():
    Walks an ordered endpoint list. A rate limit (402/429) moves on to the
    next endpoint, each endpoint is tried exactly once, and the last rate
    limit is surfaced when the list runs out. Anything else returns at once.
"""

import logging
import math
import time
from typing import Any, Dict, Optional, Sequence

import requests

from .metrics import ENDPOINT_FALLBACKS
from .outcomes import ErrorKind, HttpError, InferenceOutcome, PayloadError, Success

logger = logging.getLogger(__name__)

_STATUS_KINDS = {
    401: ErrorKind.UNAUTHORIZED,
    402: ErrorKind.RATE_LIMITED,
    429: ErrorKind.RATE_LIMITED,
    404: ErrorKind.NOT_FOUND,
    503: ErrorKind.MODEL_LOADING,
}


def classify_status(status_code: int) -> ErrorKind:
    return _STATUS_KINDS.get(status_code, ErrorKind.GENERIC)


def is_rate_limited(outcome: InferenceOutcome) -> bool:
    return isinstance(outcome, HttpError) and outcome.kind is ErrorKind.RATE_LIMITED


class InferenceClient:
    def __init__(
        self,
        timeout: Optional[float] = 30.0,
        backoff: float = 0.0,
        max_backoff: float = 10.0,
    ) -> None:
        self.timeout = timeout
        self.backoff = backoff
        self.max_backoff = max_backoff

    def _sleep_backoff(self, attempt: int, retry_after: Optional[str]) -> None:
        # Honor Retry-After if present; otherwise exponential backoff
        if self.backoff <= 0:
            return
        delay = self.backoff * (2 ** (attempt - 1))
        if retry_after:
            try:
                parsed = float(retry_after)
            except ValueError:
                parsed = None
            # negative or nan headers keep the computed delay
            if parsed is not None and math.isfinite(parsed) and parsed >= 0:
                delay = parsed
        time.sleep(max(0.0, min(delay, self.max_backoff)))

    def invoke(
        self,
        endpoint: str,
        payload: Dict[str, Any],
        auth_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> InferenceOutcome:
        headers = {"Content-Type": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        try:
            resp = requests.post(
                endpoint,
                json=payload,
                headers=headers,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.Timeout:
            logger.warning("Inference request to %s timed out", endpoint)
            return HttpError(ErrorKind.TIMEOUT)
        except requests.RequestException as e:
            logger.warning("Inference request to %s failed: %s", endpoint, e)
            return HttpError(ErrorKind.NETWORK, detail=str(e))

        if 200 <= resp.status_code < 300:
            try:
                return Success(resp.json())
            except ValueError:
                return PayloadError("response body is not valid JSON")

        kind = classify_status(resp.status_code)
        logger.info("Inference endpoint %s answered %d (%s)", endpoint, resp.status_code, kind.value)
        return HttpError(
            kind,
            status_code=resp.status_code,
            retry_after=resp.headers.get("Retry-After"),
        )

    def invoke_with_fallback(
        self,
        endpoints: Sequence[str],
        payload: Dict[str, Any],
        auth_token: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> InferenceOutcome:
        if not endpoints:
            raise ValueError("at least one inference endpoint is required")

        outcome: Optional[InferenceOutcome] = None
        for attempt, endpoint in enumerate(endpoints):
            if attempt:
                ENDPOINT_FALLBACKS.inc()
                logger.warning(
                    "Rate limited; falling back to %s (%d/%d)", endpoint, attempt + 1, len(endpoints)
                )
                self._sleep_backoff(attempt, outcome.retry_after)
            outcome = self.invoke(endpoint, payload, auth_token=auth_token, timeout=timeout)
            if not is_rate_limited(outcome):
                return outcome

        logger.warning("All %d inference endpoints are rate limited", len(endpoints))
        return outcome
