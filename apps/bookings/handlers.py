"""Domain event handlers for hall bookings, registered on the message bus."""

from __future__ import annotations

import logging

from apps.notifications.services import create_in_app_notification
from shared.application.message_bus import message_bus

from .domain.events import BookingRejected, PaymentFailed

logger = logging.getLogger(__name__)


def on_booking_rejected(event: BookingRejected) -> None:
    from .tasks import send_hall_booking_rejection

    send_hall_booking_rejection.delay(event.booking_id)


def on_payment_failed(event: PaymentFailed) -> None:
    from .models import HallBooking

    booking = HallBooking.objects.select_related("user").filter(pk=event.booking_id).first()
    if booking is None:
        return
    create_in_app_notification(
        booking.user,
        "Hall booking payment failed",
        "Your payment did not go through. Your booking details are saved; you can try again.",
    )


def register_handlers() -> None:
    message_bus.register_event_handler(BookingRejected, on_booking_rejected)
    message_bus.register_event_handler(PaymentFailed, on_payment_failed)
    logger.debug("Hall booking event handlers registered")
