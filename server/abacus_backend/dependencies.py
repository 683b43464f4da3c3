"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from abacus_backend.config import get_settings
from abacus_backend.mailer import InMemoryMailer, Mailer, SmtpMailer
from abacus_backend.store import (
    InMemoryReviewStore,
    JsonFileReviewStore,
    ReviewStore,
)

_review_store: ReviewStore | None = None
_mailer: Mailer | None = None


def get_review_store() -> ReviewStore:
    """
    Return a singleton review store so the file lock is shared across requests.
    """
    global _review_store
    if _review_store:
        return _review_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _review_store = InMemoryReviewStore()
    else:
        _review_store = JsonFileReviewStore(settings.reviews_file)
    return _review_store


def get_mailer() -> Mailer:
    global _mailer
    if _mailer:
        return _mailer

    settings = get_settings()
    if settings.use_in_memory_backends:
        _mailer = InMemoryMailer()
    else:
        _mailer = SmtpMailer(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.smtp_timeout_seconds,
        )
    return _mailer
