"""
Yoco Payment Gateway Integration

Checkout sessions for hall booking payments and webhook verification.
Amounts are sent to Yoco in cents (ZAR).
"""

import hashlib
import hmac
import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

WEBHOOK_SIGNATURE_HEADERS = ("HTTP_WEBHOOK_SIGNATURE", "HTTP_X_WEBHOOK_SIGNATURE")
EVENT_PAYMENT_SUCCEEDED = "payment.succeeded"
EVENT_PAYMENT_FAILED = "payment.failed"


class YocoPaymentError(Exception):
    """Custom exception for Yoco payment errors."""

    pass


@dataclass(frozen=True)
class CheckoutRequest:
    booking_id: int
    amount: Decimal
    customer_email: str
    customer_name: str
    currency: str = "ZAR"
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class CheckoutSession:
    checkout_id: str
    redirect_url: Optional[str] = None
    status: str = "created"


def rands_to_cents(amount: Decimal) -> int:
    return int((Decimal(str(amount)) * 100).to_integral_value())


def is_emulated() -> bool:
    return bool(getattr(settings, "YOCO_EMULATE", False)) or not getattr(settings, "YOCO_SECRET_KEY", "")


def callback_urls(booking_id: int) -> dict:
    """Browser return URLs plus the server-to-server webhook URL."""
    base = settings.SITE_URL.rstrip("/")
    return {
        "successUrl": f"{base}/hall-booking/payment/success?bookingId={booking_id}",
        "cancelUrl": f"{base}/hall-booking/payment/cancel?bookingId={booking_id}",
        "failureUrl": f"{base}/hall-booking/payment/failure?bookingId={booking_id}",
        "webhookUrl": f"{base}/api/v1/payments/yoco/webhook/",
    }


def _headers() -> dict:
    return {
        "Authorization": f"Bearer {settings.YOCO_SECRET_KEY}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def create_checkout(checkout: CheckoutRequest) -> CheckoutSession:
    """
    Create a Yoco checkout session

    Returns:
        CheckoutSession: redirect_url is None when Yoco expects the inline
        (popup) flow instead of a full page redirect.
    """
    amount_cents = rands_to_cents(checkout.amount)
    logger.info(
        f"Creating Yoco checkout for hall booking {checkout.booking_id}, "
        f"amount {amount_cents} cents {checkout.currency}"
    )

    if is_emulated():
        logger.warning("Yoco API emulation in use (YOCO_EMULATE set or no secret key)")
        return CheckoutSession(checkout_id=f"ch_emulated_{uuid.uuid4().hex[:16]}")

    payload = {
        "amount": amount_cents,
        "currency": checkout.currency,
        **callback_urls(checkout.booking_id),
        "metadata": {
            "bookingId": str(checkout.booking_id),
            "bookingType": "hall_booking",
            "customerEmail": checkout.customer_email,
            "customerName": checkout.customer_name,
            **checkout.metadata,
        },
    }

    try:
        response = requests.post(
            f"{settings.YOCO_API_BASE_URL}checkouts",
            json=payload,
            headers=_headers(),
            timeout=settings.YOCO_TIMEOUT,
        )
        response.raise_for_status()
        result = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Network error calling Yoco API: {e}")
        raise YocoPaymentError(f"Could not reach Yoco: {e}") from e
    except ValueError as e:
        logger.error(f"Yoco API returned invalid JSON: {e}")
        raise YocoPaymentError("Invalid response from Yoco") from e

    checkout_id = result.get("id")
    if not checkout_id:
        message = result.get("message") or result.get("errorMessage") or "Unknown error"
        logger.error(f"Yoco API returned an error: {message}")
        raise YocoPaymentError(f"Yoco error: {message}")

    logger.info(f"Yoco checkout created: {checkout_id}")
    return CheckoutSession(
        checkout_id=checkout_id,
        redirect_url=result.get("redirectUrl") or None,
        status=result.get("status", "created"),
    )


def get_checkout(checkout_id: str) -> dict:
    """
    Fetch a checkout session's current state from Yoco

    A paid checkout has status ``completed`` and carries the ``paymentId``.
    Emulated checkouts are never paid through Yoco; the inline flow
    confirms them.
    """
    if is_emulated():
        return {"id": checkout_id, "status": "created"}

    try:
        response = requests.get(
            f"{settings.YOCO_API_BASE_URL}checkouts/{checkout_id}",
            headers=_headers(),
            timeout=settings.YOCO_TIMEOUT,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Error fetching Yoco checkout {checkout_id}: {e}")
        raise YocoPaymentError(f"Could not fetch checkout: {e}") from e
    except ValueError as e:
        logger.error(f"Yoco API returned invalid JSON for checkout {checkout_id}: {e}")
        raise YocoPaymentError("Invalid response from Yoco") from e


def verify_webhook_signature(body: bytes, signature: str, secret: Optional[str] = None) -> bool:
    """
    HMAC-SHA256 over the raw request body, hex encoded

    Accepts an optional ``sha256=`` prefix; compared in constant time.
    """
    secret = secret if secret is not None else settings.YOCO_WEBHOOK_SECRET
    if not secret or not signature:
        return False
    received = signature[len("sha256="):] if signature.startswith("sha256=") else signature
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, received.strip().lower())


def signature_from_request(request) -> str:
    for header in WEBHOOK_SIGNATURE_HEADERS:
        value = request.META.get(header)
        if value:
            return value
    return ""


def booking_id_from_event(event: dict) -> Optional[int]:
    """Booking id from ``payload.metadata.bookingId`` of a webhook event."""
    payload = event.get("payload") or {}
    metadata = payload.get("metadata") or {}
    raw = metadata.get("bookingId") or metadata.get("orderId")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None
