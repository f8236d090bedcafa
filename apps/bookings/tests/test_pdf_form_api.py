"""Integration tests for emailing a filled-in PDF booking form."""

from __future__ import annotations

from unittest.mock import patch

from django.core import mail
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import HallBooking
from apps.users.models import User


def _pdf(name: str = "roberts-hall-form.pdf", size: int = 0) -> SimpleUploadedFile:
    content = b"%PDF-1.4 filled form" + b"0" * size
    return SimpleUploadedFile(name, content, content_type="application/pdf")


@override_settings(HALL_BOOKINGS_ADMIN_EMAIL="hall-admin@example.com")
class PdfFormAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.user = User.objects.create_user(
            email="thandi@example.com",
            password="HallPass123",
            first_name="Thandi",
            last_name="Mokoena",
        )
        self.client.force_authenticate(self.user)
        self.url = reverse("hall-booking-form-pdf-form")

    def tearDown(self) -> None:
        cache.clear()

    def _send(self, data: dict):
        return self.client.post(self.url, data, format="multipart")

    def test_pdf_is_emailed_to_the_hall_admin(self) -> None:
        response = self._send({"pdf": _pdf()})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["detail"], "PDF booking form sent successfully")
        message = mail.outbox[0]
        self.assertEqual(message.to, ["hall-admin@example.com"])
        self.assertEqual(message.reply_to, ["thandi@example.com"])
        self.assertIn("Thandi Mokoena", message.subject)
        filename, content, mimetype = message.attachments[0]
        self.assertEqual(filename, "roberts-hall-form.pdf")
        self.assertTrue(content.startswith(b"%PDF-1.4"))
        self.assertEqual(mimetype, "application/pdf")
        self.assertFalse(HallBooking.objects.exists())

    def test_sender_details_can_be_given(self) -> None:
        response = self._send({"pdf": _pdf(), "name": "<b>Sipho</b>", "email": "sipho@example.com"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        message = mail.outbox[0]
        self.assertEqual(message.reply_to, ["sipho@example.com"])
        html = message.alternatives[0][0]
        self.assertNotIn("<b>Sipho</b>", html)
        self.assertIn("&lt;b&gt;Sipho&lt;/b&gt;", html)

    def test_only_pdfs_are_accepted(self) -> None:
        image = SimpleUploadedFile("form.png", b"\x89PNG", content_type="image/png")

        response = self._send({"pdf": image})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "Only PDF files are allowed")
        self.assertEqual(mail.outbox, [])

    @override_settings(HALL_UPLOAD_MAX_BYTES=1024)
    def test_large_pdfs_are_refused(self) -> None:
        response = self._send({"pdf": _pdf(size=2048)})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(mail.outbox, [])

    def test_missing_file_is_a_bad_request(self) -> None:
        response = self._send({"name": "Thandi"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("pdf", response.data)

    @patch("apps.notifications.services.EmailMultiAlternatives.send", side_effect=OSError("SMTP unavailable"))
    def test_mail_failure_is_reported(self, mock_send) -> None:
        response = self._send({"pdf": _pdf()})

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["detail"], "Failed to send email")

    def test_submissions_are_rate_limited(self) -> None:
        for _ in range(3):
            self.assertEqual(self._send({"pdf": _pdf()}).status_code, status.HTTP_200_OK)

        response = self._send({"pdf": _pdf()})

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(len(mail.outbox), 3)
