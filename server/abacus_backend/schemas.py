"""
Pydantic schemas for the site backend.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr


class Review(BaseModel):
    """A stored review, serialized with the camelCase keys of reviews.json."""

    id: str
    locationName: str
    locationAddress: str = ""
    author: str
    email: str = ""
    rating: int = Field(..., ge=1, le=5)
    text: str
    createdAt: str


class ReviewSubmission(BaseModel):
    locationName: Optional[str] = None
    locationAddress: Optional[str] = None
    reviewerName: Optional[str] = None
    reviewerEmail: Optional[str] = None
    # Form posts send the rating as a string. Strict members keep JSON
    # booleans from being coerced to 0 or 1.
    rating: Optional[Union[StrictInt, StrictFloat, StrictStr]] = None
    reviewText: Optional[str] = None

    def has_required_fields(self) -> bool:
        return all(
            [self.locationName, self.reviewerName, self.rating, self.reviewText]
        )


class ContactSubmission(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    course: Optional[str] = None
    message: Optional[str] = None

    def has_required_fields(self) -> bool:
        return all([self.name, self.email, self.phone])


class ReviewListResponse(BaseModel):
    success: Literal[True] = True
    reviews: list[Review]


class ReviewCreatedResponse(BaseModel):
    success: Literal[True] = True
    message: str
    review: Review


class MessageResponse(BaseModel):
    success: Literal[True] = True
    message: str


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    message: str
