"""Hall booking services shared by the form, the webhook and Celery tasks."""

from __future__ import annotations

import logging
import os
from datetime import timedelta
from typing import Any

from django.conf import settings  # type: ignore
from django.core.files.storage import default_storage  # type: ignore
from django.utils import timezone  # type: ignore

from apps.finances import yoco_service
from apps.finances.yoco_service import YocoPaymentError

from .constants import ALLOWED_DOCUMENT_TYPES, DOCUMENT_KINDS
from .domain.entities import BookingDraft, BookingStatus
from .exceptions import DraftPersistenceError
from .models import HallBooking
from .repositories import DraftRepository

logger = logging.getLogger(__name__)


class ConfirmationNotifier:
    """Dispatches the confirmation email and in-app notification."""

    def booking_confirmed(self, booking_id: int, booking_reference: str) -> None:
        from .tasks import send_hall_booking_confirmation

        send_hall_booking_confirmation.delay(booking_id, booking_reference)


def confirm_booking_payment(
    draft: BookingDraft,
    payment_reference: str,
    repository: DraftRepository,
    notifier: Any,
    allow_released: bool = False,
) -> bool:
    """
    Confirm a paid booking and fire the confirmation notification

    Returns False when the booking was already confirmed. Notification
    failures are logged and never undo the confirmation. ``allow_released``
    is for gateway webhooks that land after the session was released.
    """
    now = timezone.now()
    booking_reference = draft.booking_reference or repository.next_booking_reference(
        timezone.localdate(now).year
    )
    if not draft.confirm_payment(payment_reference, booking_reference, now, allow_released=allow_released):
        logger.info(f"Hall booking {draft.id} already confirmed as {draft.booking_reference}")
        return False

    repository.save(draft)
    logger.info(f"Hall booking {draft.id} confirmed as {draft.booking_reference}")

    if notifier is None:
        return True
    try:
        notifier.booking_confirmed(draft.id, draft.booking_reference)
    except Exception as exc:
        logger.error(
            f"Failed to send confirmation for hall booking {draft.id}: {exc}",
            exc_info=True,
        )
    return True


def fail_booking_payment(draft: BookingDraft, reason: str, repository: DraftRepository) -> bool:
    """Revert an unpaid booking to an editable draft. False if nothing changed."""
    if draft.status not in (BookingStatus.DRAFT, BookingStatus.PAYMENT_PROCESSING):
        logger.info(f"Ignoring payment failure for hall booking {draft.id} in status {draft.status.value}")
        return False
    draft.fail_payment(reason)
    repository.save(draft)
    logger.warning(f"Payment failed for hall booking {draft.id}: {reason}")
    return True


def validate_document(upload) -> str:
    """Return the file extension for an accepted upload, else raise ValueError."""
    extension = ALLOWED_DOCUMENT_TYPES.get(getattr(upload, "content_type", ""))
    if extension is None:
        raise ValueError("Please upload a JPG, PNG, or PDF file")
    if upload.size > settings.HALL_UPLOAD_MAX_BYTES:
        limit_mb = settings.HALL_UPLOAD_MAX_BYTES // (1024 * 1024)
        raise ValueError(f"File size must be less than {limit_mb}MB")
    return extension


def validate_pdf_form(upload) -> None:
    """Only PDFs within the upload limit; raises ValueError otherwise."""
    if getattr(upload, "content_type", "") != "application/pdf":
        raise ValueError("Only PDF files are allowed")
    validate_document(upload)


def store_booking_document(user_id: int, kind: str, upload) -> tuple[str, str]:
    """
    Save a proof document to default storage

    Returns ``(draft_field, url)``; the caller writes the URL into the
    draft field.
    """
    if kind not in DOCUMENT_KINDS:
        raise ValueError(f"Unknown document kind: {kind}")
    extension = validate_document(upload)

    timestamp = int(timezone.now().timestamp() * 1000)
    folder = kind.replace("_", "-")
    path = os.path.join("hall-bookings", f"{folder}s", f"{user_id}-{folder}-{timestamp}.{extension}")
    saved_path = default_storage.save(path, upload)
    url = default_storage.url(saved_path)
    logger.info(f"Stored {kind} document for user {user_id} at {saved_path}")
    return DOCUMENT_KINDS[kind], url


def release_stale_payment_sessions(
    repository: DraftRepository,
    minutes: int | None = None,
    notifier: Any = None,
    gateway: Any = None,
) -> dict[str, int]:
    """
    Settle bookings stuck in payment processing

    Each stale checkout is looked up at Yoco first: a completed checkout
    confirms the booking, anything else reverts it to draft. Bookings whose
    checkout cannot be looked up stay in payment processing for the next run.
    The gateway, when given, records each outcome on the Payment ledger.
    """
    minutes = minutes if minutes is not None else settings.HALL_PAYMENT_SESSION_MINUTES
    cutoff = timezone.now() - timedelta(minutes=minutes)
    stale_ids = list(
        HallBooking.objects.filter(
            status=HallBooking.Status.PAYMENT_PROCESSING,
            payment_started_at__lte=cutoff,
        ).values_list("pk", flat=True)
    )

    counts = {"released": 0, "confirmed": 0}
    for booking_id in stale_ids:
        draft = repository.get(booking_id)
        if draft is None or draft.status != BookingStatus.PAYMENT_PROCESSING:
            continue

        checkout: dict = {}
        if draft.checkout_id:
            try:
                checkout = yoco_service.get_checkout(draft.checkout_id)
            except YocoPaymentError as exc:
                logger.warning(f"Keeping hall booking {draft.id} in payment, checkout lookup failed: {exc}")
                continue

        try:
            outcome = _settle_stale_session(draft, checkout, repository, notifier, gateway)
        except DraftPersistenceError as exc:
            logger.error(f"Could not settle stale payment session for hall booking {draft.id}: {exc}")
            continue
        if outcome:
            counts[outcome] += 1
    return counts


def _settle_stale_session(draft, checkout, repository, notifier, gateway) -> str | None:
    if checkout.get("status") == "completed":
        payment_reference = str(checkout.get("paymentId") or draft.checkout_id)
        if not confirm_booking_payment(draft, payment_reference, repository, notifier):
            return None
        if gateway is not None:
            gateway.record_result(
                draft.id, draft.checkout_id, succeeded=True, reference=payment_reference,
                event="checkout_lookup", payload=checkout,
            )
        return "confirmed"

    if not fail_booking_payment(draft, "Payment session expired", repository):
        return None
    if gateway is not None:
        gateway.record_result(
            draft.id, draft.checkout_id, succeeded=False, reason="Payment session expired",
            event="session_expired", payload=checkout,
        )
    return "released"
