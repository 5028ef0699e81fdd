from unittest.mock import MagicMock, patch

import pytest
import requests

from review_analyzer.inference import InferenceClient, classify_status
from review_analyzer.outcomes import ErrorKind, HttpError, PayloadError, Success

ENDPOINT = "https://hf.test/models/primary"
BACKUP = "https://hf.test/models/backup"


def _response(status, body=None, headers=None):
    resp = MagicMock()
    resp.status_code = status
    resp.headers = headers or {}
    resp.json.return_value = body
    return resp


@pytest.fixture
def post():
    with patch("review_analyzer.inference.requests.post") as mock_post:
        yield mock_post


def test_success_returns_body(post):
    post.return_value = _response(200, [[{"label": "POSITIVE", "score": 0.99}]])
    outcome = InferenceClient().invoke(ENDPOINT, {"inputs": "great"})
    assert outcome == Success([[{"label": "POSITIVE", "score": 0.99}]])
    assert post.call_args.kwargs["json"] == {"inputs": "great"}


def test_non_json_body_is_payload_error(post):
    resp = _response(200)
    resp.json.side_effect = ValueError("no json")
    post.return_value = resp
    assert isinstance(InferenceClient().invoke(ENDPOINT, {"inputs": "x"}), PayloadError)


def test_bearer_header_only_with_token(post):
    post.return_value = _response(200, {"label": "positive"})
    client = InferenceClient()

    client.invoke(ENDPOINT, {"inputs": "x"}, auth_token="hf_secret")
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer hf_secret"

    client.invoke(ENDPOINT, {"inputs": "x"})
    assert "Authorization" not in post.call_args.kwargs["headers"]


def test_timeout_is_forwarded(post):
    post.return_value = _response(200, {})
    client = InferenceClient(timeout=5)
    client.invoke(ENDPOINT, {"inputs": "x"})
    assert post.call_args.kwargs["timeout"] == 5
    client.invoke(ENDPOINT, {"inputs": "x"}, timeout=2)
    assert post.call_args.kwargs["timeout"] == 2


@pytest.mark.parametrize(
    "status, kind",
    [
        (401, ErrorKind.UNAUTHORIZED),
        (402, ErrorKind.RATE_LIMITED),
        (429, ErrorKind.RATE_LIMITED),
        (404, ErrorKind.NOT_FOUND),
        (503, ErrorKind.MODEL_LOADING),
        (500, ErrorKind.GENERIC),
        (418, ErrorKind.GENERIC),
    ],
)
def test_status_codes(post, status, kind):
    assert classify_status(status) is kind
    post.return_value = _response(status)
    outcome = InferenceClient().invoke(ENDPOINT, {"inputs": "x"})
    assert outcome == HttpError(kind, status_code=status)


def test_timeout_error(post):
    post.side_effect = requests.Timeout("read timed out")
    outcome = InferenceClient().invoke(ENDPOINT, {"inputs": "x"})
    assert outcome.kind is ErrorKind.TIMEOUT


def test_connection_error(post):
    post.side_effect = requests.ConnectionError("refused")
    outcome = InferenceClient().invoke(ENDPOINT, {"inputs": "x"})
    assert outcome.kind is ErrorKind.NETWORK
    assert "refused" in outcome.detail


def test_rate_limit_tries_each_endpoint_once(post):
    post.side_effect = [_response(429), _response(429)]
    outcome = InferenceClient().invoke_with_fallback([ENDPOINT, BACKUP], {"inputs": "x"})
    assert post.call_count == 2
    assert post.call_args_list[1].args[0] == BACKUP
    assert outcome.kind is ErrorKind.RATE_LIMITED


def test_rate_limit_falls_back_to_next_endpoint(post):
    post.side_effect = [_response(429), _response(200, {"label": "NEGATIVE"})]
    outcome = InferenceClient().invoke_with_fallback([ENDPOINT, BACKUP], {"inputs": "x"})
    assert outcome == Success({"label": "NEGATIVE"})


def test_other_errors_are_not_retried(post):
    post.side_effect = [_response(503)]
    outcome = InferenceClient().invoke_with_fallback([ENDPOINT, BACKUP], {"inputs": "x"})
    assert post.call_count == 1
    assert outcome.kind is ErrorKind.MODEL_LOADING


def test_backoff_honors_retry_after(post):
    post.side_effect = [_response(429, headers={"Retry-After": "3"}), _response(200, {})]
    with patch("review_analyzer.inference.time.sleep") as sleep:
        InferenceClient(backoff=1.0).invoke_with_fallback([ENDPOINT, BACKUP], {"inputs": "x"})
    sleep.assert_called_once_with(3.0)


@pytest.mark.parametrize("retry_after", ["-1", "nan", "inf", "soon"])
def test_unusable_retry_after_keeps_computed_delay(post, retry_after):
    post.side_effect = [_response(429, headers={"Retry-After": retry_after}), _response(200, {"label": "POSITIVE"})]
    with patch("review_analyzer.inference.time.sleep") as sleep:
        outcome = InferenceClient(backoff=1.0).invoke_with_fallback([ENDPOINT, BACKUP], {"inputs": "x"})
    assert outcome == Success({"label": "POSITIVE"})
    sleep.assert_called_once_with(1.0)


def test_no_sleep_without_backoff(post):
    post.side_effect = [_response(429), _response(429)]
    with patch("review_analyzer.inference.time.sleep") as sleep:
        InferenceClient().invoke_with_fallback([ENDPOINT, BACKUP], {"inputs": "x"})
    sleep.assert_not_called()


def test_empty_endpoint_list_is_rejected():
    with pytest.raises(ValueError):
        InferenceClient().invoke_with_fallback([], {"inputs": "x"})
