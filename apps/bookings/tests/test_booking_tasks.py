"""Celery tasks for hall bookings."""

from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.core import mail
from django.utils import timezone

from apps.bookings import tasks
from apps.bookings.models import HallBooking
from apps.finances.models import Payment
from apps.notifications.models import Notification
from apps.users.models import User

pytestmark = pytest.mark.django_db


@pytest.fixture
def applicant():
    return User.objects.create_user(email="applicant@example.com", password="HallPass123")


@pytest.fixture
def confirmed_booking(applicant):
    return HallBooking.objects.create(
        user=applicant,
        applicant_name="Lerato",
        applicant_surname="Dlamini",
        applicant_email="lerato@example.com",
        event_date=date.today() + timedelta(days=14),
        event_type="wedding",
        total_guests=45,
        status=HallBooking.Status.CONFIRMED,
        payment_status=HallBooking.PaymentStatus.PAID,
        booking_reference="RH-2025-003",
        payment_reference="p_003",
    )


def test_confirmation_emails_applicant_and_admin(confirmed_booking, settings):
    settings.HALL_BOOKINGS_ADMIN_EMAIL = "hall-admin@example.com"

    assert tasks.send_hall_booking_confirmation(confirmed_booking.pk, "RH-2025-003") is True

    recipients = [message.to[0] for message in mail.outbox]
    assert recipients == ["lerato@example.com", "hall-admin@example.com"]
    assert "RH-2025-003" in mail.outbox[0].subject
    assert "R 2,500.00" in mail.outbox[0].alternatives[0][0]
    notification = Notification.objects.get(user=confirmed_booking.user)
    assert "RH-2025-003" in notification.title


def test_confirmation_skips_unconfirmed_booking(applicant):
    booking = HallBooking.objects.create(user=applicant, applicant_email="a@example.com")

    assert tasks.send_hall_booking_confirmation(booking.pk, "RH-2025-009") is False
    assert mail.outbox == []


def test_confirmation_for_missing_booking():
    assert tasks.send_hall_booking_confirmation(999999, "RH-2025-010") is False


def test_rejection_notice(applicant):
    booking = HallBooking.objects.create(
        user=applicant,
        applicant_email="applicant@example.com",
        status=HallBooking.Status.REJECTED,
        rejection_reason="Date already taken",
    )

    assert tasks.send_hall_booking_rejection(booking.pk) is True
    assert "Date already taken" in mail.outbox[0].body
    assert Notification.objects.filter(user=applicant, title="Hall booking declined").exists()


def _checkout_lookup(payloads):
    def fake_get(url, **kwargs):
        response = MagicMock()
        response.json.return_value = payloads[url.rsplit("/", 1)[-1]]
        return response

    return fake_get


def _stale_booking(applicant, checkout_id, minutes_ago):
    booking = HallBooking.objects.create(
        user=applicant,
        applicant_email="applicant@example.com",
        status=HallBooking.Status.PAYMENT_PROCESSING,
        checkout_id=checkout_id,
        payment_started_at=timezone.now() - timedelta(minutes=minutes_ago),
    )
    Payment.objects.create(booking=booking, checkout_id=checkout_id, amount=booking.total_amount)
    return booking


@patch("apps.finances.yoco_service.requests.get")
def test_stale_payment_sessions_are_released(mock_get, applicant, settings):
    settings.HALL_PAYMENT_SESSION_MINUTES = 30
    mock_get.side_effect = _checkout_lookup({"ch_old": {"id": "ch_old", "status": "started"}})
    stale = _stale_booking(applicant, "ch_old", 45)
    fresh = _stale_booking(applicant, "ch_new", 5)

    assert tasks.release_stale_payment_sessions() == {"released": 1, "confirmed": 0}

    stale.refresh_from_db()
    fresh.refresh_from_db()
    assert stale.status == HallBooking.Status.DRAFT
    assert stale.payment_status == HallBooking.PaymentStatus.FAILED
    assert Payment.objects.get(checkout_id="ch_old").status == Payment.Status.FAILED
    assert fresh.status == HallBooking.Status.PAYMENT_PROCESSING
    assert mock_get.call_count == 1


@patch("apps.finances.yoco_service.requests.get")
def test_stale_session_paid_at_yoco_is_confirmed(mock_get, applicant, settings):
    settings.HALL_PAYMENT_SESSION_MINUTES = 30
    mock_get.side_effect = _checkout_lookup(
        {"ch_paid": {"id": "ch_paid", "status": "completed", "paymentId": "p_paid"}}
    )
    booking = _stale_booking(applicant, "ch_paid", 45)

    assert tasks.release_stale_payment_sessions() == {"released": 0, "confirmed": 1}

    booking.refresh_from_db()
    assert booking.status == HallBooking.Status.CONFIRMED
    assert booking.payment_reference == "p_paid"
    assert booking.booking_reference
    assert Payment.objects.get(checkout_id="ch_paid").status == Payment.Status.SUCCESS
    assert mail.outbox[0].to == ["applicant@example.com"]


@patch("apps.finances.yoco_service.requests.get", side_effect=requests.exceptions.Timeout("slow"))
def test_stale_session_kept_when_yoco_is_unreachable(mock_get, applicant, settings):
    settings.HALL_PAYMENT_SESSION_MINUTES = 30
    booking = _stale_booking(applicant, "ch_unknown", 45)

    assert tasks.release_stale_payment_sessions() == {"released": 0, "confirmed": 0}

    booking.refresh_from_db()
    assert booking.status == HallBooking.Status.PAYMENT_PROCESSING
