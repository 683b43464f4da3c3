"""
Rendering of the notification emails sent to the site owner.
"""

from __future__ import annotations

import re
from html import escape
from typing import Optional

from abacus_backend.config import Settings
from abacus_backend.mailer import OutgoingEmail
from abacus_backend.schemas import ContactSubmission, Review

_CONTAINER_STYLE = (
    "font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; "
    "padding: 20px; border: 1px solid #e0e0e0; border-radius: 10px;"
)
_HEADING_STYLE = (
    "color: #2563eb; border-bottom: 2px solid #2563eb; padding-bottom: 10px;"
)
_LABEL_STYLE = "padding: 10px; background: #f3f4f6; font-weight: bold;"
_VALUE_STYLE = "padding: 10px; background: #f9fafb;"
_FOOTER_STYLE = "margin-top: 20px; color: #6b7280; font-size: 12px;"


def _row(
    label: str,
    value_html: str,
    *,
    first: bool = False,
    top: bool = False,
    value_style: str = "",
) -> str:
    label_style = _LABEL_STYLE
    if first:
        label_style += " width: 30%;"
    if top:
        label_style += " vertical-align: top;"
    return (
        "<tr>"
        f'<td style="{label_style}">{escape(label)}:</td>'
        f'<td style="{_VALUE_STYLE}{value_style}">{value_html}</td>'
        "</tr>"
    )


def _document(heading: str, rows: list[str], footer: str) -> str:
    return (
        f'<div style="{_CONTAINER_STYLE}">'
        f'<h2 style="{_HEADING_STYLE}">{escape(heading)}</h2>'
        '<table style="width: 100%; border-collapse: collapse; margin-top: 20px;">'
        + "".join(rows)
        + "</table>"
        f'<p style="{_FOOTER_STYLE}">{escape(footer)}</p>'
        "</div>"
    )


def _header_value(value: Optional[str]) -> Optional[str]:
    """Collapse CR/LF runs so user input cannot add or break headers."""
    if value is None:
        return None
    return re.sub(r"[\r\n]+", " ", value).strip()


def _sender(display_name: str, address: Optional[str]) -> str:
    return f'"{display_name}" <{address or ""}>'


def star_bar(rating: int) -> str:
    filled = max(0, min(5, rating))
    return "★" * filled + "☆" * (5 - filled)


def review_notification(review: Review, settings: Settings) -> OutgoingEmail:
    rows = [
        _row("Location", escape(review.locationName), first=True),
        _row("Address", escape(review.locationAddress or "N/A")),
        _row("Reviewer", escape(review.author)),
        _row("Email", escape(review.email or "Not provided")),
        _row(
            "Rating",
            star_bar(review.rating),
            value_style=" color: #f59e0b; font-size: 18px;",
        ),
        _row("Review", escape(review.text), top=True),
    ]
    html = _document(
        "⭐ New Review Submitted",
        rows,
        f"This review was submitted via the {settings.site_name} website.",
    )
    return OutgoingEmail(
        sender=_sender(f"{settings.site_name} Reviews", settings.email_user),
        to=settings.email_to or "",
        reply_to=_header_value(review.email or settings.email_user) or None,
        subject=_header_value(
            f"New Review: {review.locationName} - {review.rating} Stars"
        ),
        html=html,
    )


def contact_notification(
    submission: ContactSubmission, settings: Settings
) -> OutgoingEmail:
    email = escape(submission.email or "")
    phone = escape(submission.phone or "")
    rows = [
        _row("Name", escape(submission.name or ""), first=True),
        _row("Email", f'<a href="mailto:{email}">{email}</a>'),
        _row("Phone", f'<a href="tel:{phone}">{phone}</a>'),
    ]
    if submission.course:
        rows.append(_row("Course Interest", escape(submission.course)))
    if submission.message:
        rows.append(_row("Message", escape(submission.message), top=True))
    html = _document(
        "New Contact Form Submission",
        rows,
        f"This email was sent from the {settings.site_name} website contact form.",
    )
    return OutgoingEmail(
        sender=_sender(f"{settings.site_name} Website", settings.email_user),
        to=settings.email_to or "",
        reply_to=_header_value(submission.email) or None,
        subject=_header_value(f"New Contact Form Submission - {submission.name}"),
        html=html,
    )
