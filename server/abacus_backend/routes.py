"""
HTTP routes for the reviews and contact APIs.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from abacus_backend.config import Settings, get_settings
from abacus_backend.dependencies import get_mailer, get_review_store
from abacus_backend.mailer import Mailer, MailerError
from abacus_backend.notifications import contact_notification, review_notification
from abacus_backend.schemas import (
    ContactSubmission,
    HealthResponse,
    MessageResponse,
    Review,
    ReviewCreatedResponse,
    ReviewListResponse,
    ReviewSubmission,
)
from abacus_backend.store import ReviewStore, ReviewStoreError

logger = logging.getLogger(__name__)

router = APIRouter()

REVIEW_FIELDS_MESSAGE = "Please fill in all required fields"
RATING_MESSAGE = "Rating must be a whole number between 1 and 5"
CONTACT_FIELDS_MESSAGE = "Please fill in all required fields (name, email, phone)"


async def read_submission(request: Request) -> Optional[dict]:
    """
    Return the request body as a dict, accepting JSON or form encodings.

    Returns None when the body cannot be interpreted as a flat object.
    """
    content_type = request.headers.get("content-type", "").lower()
    if "form" in content_type:
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


def _parse_rating(value: Union[int, float, str, None]) -> Optional[int]:
    if isinstance(value, int):
        rating = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        rating = int(value)
    else:
        try:
            rating = int(str(value).strip())
        except ValueError:
            return None
    return rating if 1 <= rating <= 5 else None


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/reviews", response_model=ReviewListResponse)
def list_reviews(store: ReviewStore = Depends(get_review_store)):
    try:
        reviews = store.list_reviews()
    except ReviewStoreError:
        logger.exception("Error fetching reviews")
        raise HTTPException(status_code=500, detail="Failed to fetch reviews")
    return ReviewListResponse(reviews=reviews)


@router.get("/reviews/{location_name:path}", response_model=ReviewListResponse)
def list_location_reviews(
    location_name: str, store: ReviewStore = Depends(get_review_store)
):
    try:
        if location_name:
            reviews = store.list_reviews_for_location(location_name)
        else:
            # /reviews/ with no name lists everything
            reviews = store.list_reviews()
    except ReviewStoreError:
        logger.exception("Error fetching reviews for location %s", location_name)
        raise HTTPException(status_code=500, detail="Failed to fetch reviews")
    return ReviewListResponse(reviews=reviews)


@router.post("/reviews", response_model=ReviewCreatedResponse, status_code=201)
def submit_review(
    payload: Optional[dict] = Depends(read_submission),
    store: ReviewStore = Depends(get_review_store),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    """
    Store a new review, then notify the site owner.

    A failed notification is logged but does not fail the request.
    """
    if payload is None:
        raise HTTPException(status_code=400, detail=REVIEW_FIELDS_MESSAGE)
    try:
        submission = ReviewSubmission.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail=REVIEW_FIELDS_MESSAGE)
    if not submission.has_required_fields():
        raise HTTPException(status_code=400, detail=REVIEW_FIELDS_MESSAGE)
    rating = _parse_rating(submission.rating)
    if rating is None:
        raise HTTPException(status_code=400, detail=RATING_MESSAGE)

    try:
        review = Review(
            id=store.next_review_id(),
            locationName=submission.locationName,
            locationAddress=submission.locationAddress or "",
            author=submission.reviewerName,
            email=submission.reviewerEmail or "",
            rating=rating,
            text=submission.reviewText,
            createdAt=_utc_timestamp(),
        )
        review = store.add_review(review)
    except ReviewStoreError:
        logger.exception("Error submitting review")
        raise HTTPException(
            status_code=500, detail="Failed to submit review. Please try again."
        )

    logger.info(
        "New review added for %s by %s (%d stars)",
        review.locationName,
        review.author,
        review.rating,
    )

    try:
        mailer.send(review_notification(review, settings))
        logger.info("Review notification email sent")
    except MailerError:
        logger.exception("Failed to send review email notification")

    return ReviewCreatedResponse(
        message="Review submitted successfully!",
        review=review,
    )


@router.post("/contact", response_model=MessageResponse)
def submit_contact(
    payload: Optional[dict] = Depends(read_submission),
    mailer: Mailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    if payload is None:
        raise HTTPException(status_code=400, detail=CONTACT_FIELDS_MESSAGE)
    try:
        submission = ContactSubmission.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail=CONTACT_FIELDS_MESSAGE)
    if not submission.has_required_fields():
        raise HTTPException(status_code=400, detail=CONTACT_FIELDS_MESSAGE)

    try:
        mailer.send(contact_notification(submission, settings))
    except MailerError:
        logger.exception("Error sending contact email")
        raise HTTPException(
            status_code=500,
            detail="Failed to send message. Please try again or contact us directly.",
        )

    logger.info("Contact email sent for %s (%s)", submission.name, submission.email)
    return MessageResponse(
        message="Thank you! Your message has been sent successfully.",
    )


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(message="Server is running")
