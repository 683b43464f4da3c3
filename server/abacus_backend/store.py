"""
Review storage backed by a flat JSON document, plus an in-memory test implementation.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from abacus_backend.schemas import Review

logger = logging.getLogger(__name__)


class ReviewStoreError(RuntimeError):
    """Raised when the review document cannot be read or written."""


class ReviewStore(Protocol):
    """Interface for review persistence."""

    def list_reviews(self) -> list[Review]:
        ...

    def list_reviews_for_location(self, location_name: str) -> list[Review]:
        ...

    def add_review(self, review: Review) -> Review:
        ...

    def next_review_id(self) -> str:
        ...


def _matches_location(review: Review, location_name: str) -> bool:
    return review.locationName.lower() == location_name.lower()


def _unique_timestamp_id(existing: set[str], now: Optional[float] = None) -> str:
    candidate = int((now if now is not None else time.time()) * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)


def _existing_ids(raw_reviews: list) -> set[str]:
    return {str(item.get("id")) for item in raw_reviews if isinstance(item, dict)}


class InMemoryReviewStore:
    """Simple in-memory review store for development and tests."""

    def __init__(self, reviews: Optional[list[Review]] = None):
        self.reviews: list[Review] = list(reviews or [])
        self._lock = threading.Lock()

    def list_reviews(self) -> list[Review]:
        return list(self.reviews)

    def list_reviews_for_location(self, location_name: str) -> list[Review]:
        return [r for r in self.reviews if _matches_location(r, location_name)]

    def add_review(self, review: Review) -> Review:
        with self._lock:
            existing = {r.id for r in self.reviews}
            if not review.id or review.id in existing:
                new_id = _unique_timestamp_id(existing)
                review = review.model_copy(update={"id": new_id})
            self.reviews.append(review)
        return review

    def next_review_id(self) -> str:
        return _unique_timestamp_id({r.id for r in self.reviews})

    def reset(self) -> None:
        """Clear all stored reviews (useful in tests)."""
        self.reviews.clear()


class JsonFileReviewStore:
    """
    Keeps every review in one JSON document of the form {"reviews": [...]}.

    Each call re-reads the file. Writes go to a temporary sibling that is then
    renamed over the original, and a process-local lock serialises the
    read/append/write cycle. Nothing guards against other processes writing
    the same file.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = threading.Lock()

    def initialize(self) -> bool:
        """Create an empty review document if none exists. Returns True if created."""
        if self.path.exists():
            return False
        self._write_document({"reviews": []})
        logger.info("Reviews file created at %s", self.path)
        return True

    def _read_document(self) -> dict:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {"reviews": []}
        except (OSError, json.JSONDecodeError) as exc:
            raise ReviewStoreError(f"Could not read {self.path}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("reviews", []), list):
            raise ReviewStoreError(f"Unexpected review document layout in {self.path}")
        data.setdefault("reviews", [])
        return data

    def _write_document(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise ReviewStoreError(f"Could not write {self.path}: {exc}") from exc

    def _load_reviews(self) -> list[Review]:
        reviews: list[Review] = []
        for index, item in enumerate(self._read_document()["reviews"]):
            try:
                reviews.append(Review.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed review #%d in %s: %s", index, self.path, exc
                )
        return reviews

    def list_reviews(self) -> list[Review]:
        return self._load_reviews()

    def list_reviews_for_location(self, location_name: str) -> list[Review]:
        return [r for r in self._load_reviews() if _matches_location(r, location_name)]

    def add_review(self, review: Review) -> Review:
        """
        Append a review and return it as stored.

        The id is re-checked under the lock; a clash gets a fresh id.
        Records that fail validation are kept in the document untouched.
        """
        with self._lock:
            data = self._read_document()
            existing = _existing_ids(data["reviews"])
            if not review.id or review.id in existing:
                new_id = _unique_timestamp_id(existing)
                review = review.model_copy(update={"id": new_id})
            data["reviews"].append(review.model_dump())
            self._write_document(data)
        return review

    def next_review_id(self) -> str:
        return _unique_timestamp_id(_existing_ids(self._read_document()["reviews"]))
