"""
Review corpus: TSV loading and random sampling.
"""
from __future__ import annotations

import csv
import io
import logging
import random
from pathlib import Path
from typing import List, Optional, Protocol

import requests
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

TEXT_COLUMN = "text"


class Review(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class ReviewStoreError(Exception):
    """Base class for corpus errors."""


class ParseError(ReviewStoreError):
    """The corpus is missing, unreadable or has no text column."""


class EmptyCorpusError(ReviewStoreError):
    """No reviews are available to sample."""


class ReviewProvider(Protocol):
    def fetch_raw_corpus(self) -> str: ...


class FileReviewProvider:
    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def fetch_raw_corpus(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"cannot read {self.path}: {e}") from e


class HttpReviewProvider:
    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self.url = url
        self.timeout = timeout

    def fetch_raw_corpus(self) -> str:
        try:
            resp = requests.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise ParseError(f"cannot fetch {self.url}: {e}") from e
        return resp.text


class ReviewStore:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._reviews: List[Review] = []

    def __len__(self) -> int:
        return len(self._reviews)

    def load(self, raw_tsv: str) -> List[Review]:
        """Parse ``raw_tsv`` and replace the held corpus.

        The first row is a header that must name a ``text`` column. Rows with
        an empty or whitespace-only text field are dropped.
        """
        if not raw_tsv or not raw_tsv.strip():
            raise ParseError("corpus is empty")

        reader = csv.DictReader(io.StringIO(raw_tsv), delimiter="\t", quoting=csv.QUOTE_NONE)
        try:
            fieldnames = reader.fieldnames
            if not fieldnames:
                raise ParseError("corpus has no header row")
            reader.fieldnames = [name.strip() for name in fieldnames]
            if TEXT_COLUMN not in reader.fieldnames:
                raise ParseError(f"header has no {TEXT_COLUMN!r} column")

            reviews = []
            for row in reader:
                text = row.get(TEXT_COLUMN)
                if text and text.strip():
                    reviews.append(Review(text=text.strip()))
        except csv.Error as e:
            raise ParseError(f"malformed TSV at line {reader.line_num}: {e}") from e

        self._reviews = reviews
        logger.info("Loaded %d reviews", len(reviews))
        return list(reviews)

    def sample(self) -> Review:
        if not self._reviews:
            raise EmptyCorpusError("no reviews loaded")
        return self._rng.choice(self._reviews)
