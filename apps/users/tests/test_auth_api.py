"""API tests for authentication endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.context import UserContext
from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "guest@example.com",
            "phone": "+27821234567",
            "first_name": "Thandi",
            "last_name": "Mokoena",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data)
        self.assertEqual(response.data["user"]["email"], payload["email"])
        self.assertEqual(response.data["user"]["role"], "customer")
        self.assertTrue(User.objects.filter(email=payload["email"]).exists())

    def test_register_rejects_mismatched_passwords(self) -> None:
        payload = {
            "email": "guest@example.com",
            "password": "StrongPass123",
            "password_confirm": "OtherPass123",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data)

    def test_login_limited_attempts(self) -> None:
        user = User.objects.create_user(
            email="lock@example.com",
            phone="+27820000000",
            password="CorrectPassword1",
        )

        url = reverse("auth:login")
        wrong_payload = {"login": user.email, "password": "wrong"}
        for _ in range(5):
            response = self.client.post(url, wrong_payload, format="json")

        user.refresh_from_db()
        self.assertTrue(user.is_locked)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        user.locked_until = timezone.now() - timedelta(minutes=1)
        user.save(update_fields=["locked_until"])
        response = self.client.post(url, {"login": user.email, "password": "CorrectPassword1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data["tokens"])


class UserContextTests(APITestCase):
    def test_from_user_splits_full_name(self) -> None:
        user = User.objects.create_user(
            email="jane@example.com",
            password="Secret12345",
            first_name="Jane",
            last_name="van der Merwe",
            phone="+27825550000",
            address="12 Roberts Ave",
        )

        context = UserContext.from_user(user)

        self.assertEqual(context.user_id, user.pk)
        self.assertEqual(context.first_name, "Jane")
        self.assertEqual(context.surname, "van der Merwe")
        self.assertEqual(context.address, "12 Roberts Ave")
        self.assertFalse(context.is_staff)
