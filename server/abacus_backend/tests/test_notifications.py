import unittest

from abacus_backend.config import Settings
from abacus_backend.notifications import (
    contact_notification,
    review_notification,
    star_bar,
)
from abacus_backend.schemas import ContactSubmission, Review


class NotificationTests(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(
            _env_file=None,
            email_user="site@example.com",
            email_to="owner@example.com",
        )

    def _review(self, **overrides) -> Review:
        fields = dict(
            id="1",
            locationName="Downtown Centre",
            locationAddress="",
            author="Priya",
            email="",
            rating=3,
            text="Helpful staff",
            createdAt="2024-05-01T10:00:00.000Z",
        )
        fields.update(overrides)
        return Review(**fields)

    def test_star_bar(self):
        self.assertEqual(star_bar(3), "★★★☆☆")
        self.assertEqual(star_bar(5), "★★★★★")

    def test_review_notification_defaults(self):
        email = review_notification(self._review(), self.settings)
        self.assertEqual(email.sender, '"Matrix Abacus Reviews" <site@example.com>')
        self.assertEqual(email.to, "owner@example.com")
        self.assertEqual(email.reply_to, "site@example.com")
        self.assertEqual(email.subject, "New Review: Downtown Centre - 3 Stars")
        self.assertIn("N/A", email.html)
        self.assertIn("Not provided", email.html)
        self.assertIn("★★★☆☆", email.html)
        self.assertIn("Matrix Abacus website", email.html)

    def test_review_notification_escapes_user_input(self):
        email = review_notification(
            self._review(text="<script>alert(1)</script>", email="a@example.com"),
            self.settings,
        )
        self.assertNotIn("<script>", email.html)
        self.assertIn("&lt;script&gt;", email.html)
        self.assertEqual(email.reply_to, "a@example.com")

    def test_contact_notification_optional_rows(self):
        submission = ContactSubmission(
            name="Ana", email="ana@example.com", phone="555-0100"
        )
        email = contact_notification(submission, self.settings)
        self.assertEqual(email.sender, '"Matrix Abacus Website" <site@example.com>')
        self.assertEqual(email.subject, "New Contact Form Submission - Ana")
        self.assertEqual(email.reply_to, "ana@example.com")
        self.assertIn('href="mailto:ana@example.com"', email.html)
        self.assertIn('href="tel:555-0100"', email.html)
        self.assertNotIn("Course Interest", email.html)
        self.assertNotIn("Message:", email.html)

        submission = ContactSubmission(
            name="Ana",
            email="ana@example.com",
            phone="555-0100",
            course="Mental Maths",
            message="Weekend slots?",
        )
        email = contact_notification(submission, self.settings)
        self.assertIn("Course Interest", email.html)
        self.assertIn("Mental Maths", email.html)
        self.assertIn("Weekend slots?", email.html)

    def test_headers_drop_line_breaks(self):
        email = review_notification(
            self._review(locationName="Down\r\ntown", email="a@example.com\n"),
            self.settings,
        )
        self.assertEqual(email.subject, "New Review: Down town - 3 Stars")
        self.assertEqual(email.reply_to, "a@example.com")

        submission = ContactSubmission(
            name="Ana\r\nBcc: x@evil.com", email="ana@example.com", phone="1"
        )
        email = contact_notification(submission, self.settings)
        self.assertNotIn("\n", email.subject)
        self.assertNotIn("\r", email.subject)
        # the message builds without header errors
        self.assertIsNone(email.to_message()["Bcc"])

    def test_site_name_is_configurable(self):
        settings = Settings(_env_file=None, site_name="Bright Minds")
        email = review_notification(self._review(), settings)
        self.assertTrue(email.sender.startswith('"Bright Minds Reviews"'))


if __name__ == "__main__":
    unittest.main()
