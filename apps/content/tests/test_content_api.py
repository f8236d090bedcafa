"""Integration tests for page content endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.content.models import PageElement
from apps.users.models import User


class PageContentAPITests(APITestCase):
    def setUp(self) -> None:
        self.staff = User.objects.create_user(
            email="editor@example.com",
            password="EditorPass123",
            role=User.RoleChoices.STAFF,
        )
        self.customer = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.changes_url = reverse("page-content-changes", args=["homepage"])

    def test_anyone_can_read_a_page(self) -> None:
        PageElement.objects.create(page="homepage", key="hero-title", text="Welcome")

        response = self.client.get(reverse("page-content", args=["homepage"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["elements"]["hero-title"]["text"], "Welcome")

    def test_staff_applies_a_batch(self) -> None:
        self.client.force_authenticate(self.staff)

        response = self.client.post(
            self.changes_url,
            {
                "changes": [
                    {"type": "text", "key": "hero-title", "text": "Book the hall"},
                    {"type": "image", "key": "hero-image", "image_url": "https://cdn.example.com/hall.jpg"},
                ]
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data["updated"]), 2)
        self.assertEqual(PageElement.objects.get(key="hero-title").updated_by, self.staff)

    def test_invalid_entry_rejects_the_whole_batch(self) -> None:
        self.client.force_authenticate(self.staff)

        response = self.client.post(
            self.changes_url,
            {
                "changes": [
                    {"type": "text", "key": "hero-title", "text": "Book the hall"},
                    {"type": "color", "key": "hero-title", "color": "blue"},
                ]
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PageElement.objects.exists())

    def test_wrongly_typed_change_is_a_bad_request(self) -> None:
        self.client.force_authenticate(self.staff)

        for change in (
            {"type": ["text"], "key": "hero-title", "text": "Welcome"},
            {"type": "color", "key": "hero-title", "color": 5},
        ):
            response = self.client.post(self.changes_url, {"changes": [change]}, format="json")

            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, change)
            self.assertIn("changes", response.data)
        self.assertFalse(PageElement.objects.exists())


    def test_customers_cannot_edit(self) -> None:
        self.client.force_authenticate(self.customer)

        response = self.client.post(
            self.changes_url,
            {"changes": [{"type": "text", "key": "hero-title", "text": "Hacked"}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
