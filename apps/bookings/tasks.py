"""Celery tasks for hall bookings."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from apps.finances.services import YocoHallPaymentGateway
from apps.notifications.services import (
    create_in_app_notification,
    send_hall_booking_confirmation_email,
    send_hall_booking_rejected_email,
)

from . import services
from .models import HallBooking
from .repositories import DjangoDraftRepository

logger = logging.getLogger(__name__)


@shared_task(name="bookings.send_hall_booking_confirmation")
def send_hall_booking_confirmation(booking_id: int, booking_reference: str) -> bool:
    """Email the applicant (and the hall admin) and leave an in-app notification."""
    try:
        booking = HallBooking.objects.select_related("user").get(pk=booking_id)
    except HallBooking.DoesNotExist:
        logger.warning(f"Hall booking {booking_id} not found for confirmation {booking_reference}")
        return False

    if booking.status != HallBooking.Status.CONFIRMED:
        logger.warning(f"Hall booking {booking_id} is {booking.status}; confirmation not sent")
        return False

    sent = send_hall_booking_confirmation_email(booking)
    create_in_app_notification(
        booking.user,
        f"Hall booking {booking.booking_reference} confirmed",
        (
            f"Your booking for {booking.event_date:%d %B %Y} is confirmed. "
            f"Total paid: R {booking.total_amount:,.2f}."
        ) if booking.event_date else f"Your booking {booking.booking_reference} is confirmed.",
    )
    logger.info(f"Confirmation for hall booking {booking_reference} dispatched (email sent: {sent})")
    return sent


@shared_task(name="bookings.send_hall_booking_rejection")
def send_hall_booking_rejection(booking_id: int) -> bool:
    try:
        booking = HallBooking.objects.select_related("user").get(pk=booking_id)
    except HallBooking.DoesNotExist:
        logger.warning(f"Hall booking {booking_id} not found for rejection notice")
        return False

    sent = send_hall_booking_rejected_email(booking)
    create_in_app_notification(
        booking.user,
        "Hall booking declined",
        booking.rejection_reason or "Your hall booking application was declined.",
    )
    return sent


@shared_task(name="bookings.release_stale_payment_sessions")
def release_stale_payment_sessions() -> dict[str, int]:
    """
    Settle bookings stuck in payment processing.

    Runs every 5 minutes via Celery Beat; a checkout older than
    HALL_PAYMENT_SESSION_MINUTES without a webhook is checked with Yoco,
    then confirmed if paid or treated as abandoned.
    """
    counts = services.release_stale_payment_sessions(
        DjangoDraftRepository(),
        notifier=services.ConfirmationNotifier(),
        gateway=YocoHallPaymentGateway(),
    )
    if any(counts.values()):
        logger.info(
            f"Stale hall booking payment sessions: {counts['released']} released, {counts['confirmed']} confirmed"
        )
    return counts
