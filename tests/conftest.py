"""Pytest configuration."""

import random
import threading

import pytest

from review_analyzer.controller import AnalysisController, AnalysisProfile, SnapshotSink
from review_analyzer.outcomes import AnalysisKind, Success

CORPUS = "id\ttext\n1\tI love this phone\n2\tThe hotel room was dirty\n"


class StaticProvider:
    def __init__(self, raw: str = CORPUS) -> None:
        self.raw = raw

    def fetch_raw_corpus(self) -> str:
        return self.raw


class FakeClient:
    """Stands in for InferenceClient; records calls and replays one outcome."""

    def __init__(self, outcome=None) -> None:
        self.outcome = outcome if outcome is not None else Success([[{"label": "POSITIVE", "score": 0.98}]])
        self.calls = []

    def invoke_with_fallback(self, endpoints, payload, auth_token=None, timeout=None):
        self.calls.append({"endpoints": list(endpoints), "payload": payload, "auth_token": auth_token})
        return self.outcome


class BlockingClient(FakeClient):
    """Holds the request open until ``release`` is set."""

    def __init__(self, outcome=None) -> None:
        super().__init__(outcome)
        self.started = threading.Event()
        self.release = threading.Event()

    def invoke_with_fallback(self, endpoints, payload, auth_token=None, timeout=None):
        self.started.set()
        self.release.wait(5)
        return super().invoke_with_fallback(endpoints, payload, auth_token, timeout)


PROFILES = {
    AnalysisKind.SENTIMENT: AnalysisProfile(
        AnalysisKind.SENTIMENT, ["https://hf.test/models/primary", "https://hf.test/models/backup"]
    ),
    AnalysisKind.NOUN_DENSITY: AnalysisProfile(
        AnalysisKind.NOUN_DENSITY, ["https://hf.test/models/generator"], "Count the nouns: {text}"
    ),
}


def make_controller(client=None, raw: str = CORPUS, **kwargs) -> AnalysisController:
    controller = AnalysisController(
        StaticProvider(raw),
        client or FakeClient(),
        PROFILES,
        sink=SnapshotSink(),
        rng=random.Random(7),
        **kwargs,
    )
    controller.load()
    return controller


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def controller(fake_client):
    return make_controller(fake_client)
