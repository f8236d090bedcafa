"""Payment handoff collaborator backed by Yoco."""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction  # type: ignore

from . import yoco_service
from .models import Payment, PaymentTransaction
from .yoco_service import CheckoutRequest, CheckoutSession, YocoPaymentError

logger = logging.getLogger(__name__)


class YocoHallPaymentGateway:
    """
    Opens Yoco checkouts for hall bookings and keeps the Payment ledger

    Every attempt gets a Payment row; every callback or webhook received for
    it is appended as a PaymentTransaction.
    """

    def create_checkout(self, checkout: CheckoutRequest) -> CheckoutSession:
        try:
            session = yoco_service.create_checkout(checkout)
        except YocoPaymentError as exc:
            Payment.objects.create(
                booking_id=checkout.booking_id,
                status=Payment.Status.FAILED,
                amount=checkout.amount,
                currency=checkout.currency,
                metadata={"failure_reason": str(exc)},
            )
            raise

        Payment.objects.create(
            booking_id=checkout.booking_id,
            checkout_id=session.checkout_id,
            amount=checkout.amount,
            currency=checkout.currency,
            metadata={"redirect_url": session.redirect_url or ""},
        )
        return session

    @transaction.atomic
    def record_result(
        self,
        booking_id: int,
        checkout_id: str,
        *,
        succeeded: bool,
        reference: str = "",
        reason: str = "",
        event: str = "inline_callback",
        payload: dict[str, Any] | None = None,
    ) -> Payment:
        payment = self._find_payment(booking_id, checkout_id)
        PaymentTransaction.objects.create(
            payment=payment,
            event=event,
            payload=payload or {},
            status="success" if succeeded else "failed",
        )

        if succeeded:
            if payment.status != Payment.Status.SUCCESS:
                payment.mark_success(payment_reference=reference)
            logger.info(f"Payment {payment.pk} for hall booking {booking_id} succeeded ({reference})")
        elif payment.status != Payment.Status.SUCCESS:
            payment.mark_failed(reason=reason or "Payment failed")
            logger.warning(f"Payment {payment.pk} for hall booking {booking_id} failed: {reason}")
        return payment

    @staticmethod
    def _find_payment(booking_id: int, checkout_id: str) -> Payment:
        payments = Payment.objects.select_for_update().filter(booking_id=booking_id)
        payment = None
        if checkout_id:
            payment = payments.filter(checkout_id=checkout_id).first()
        if payment is None:
            payment = payments.order_by("-created_at", "-pk").first()
        if payment is None:
            payment = Payment.objects.create(booking_id=booking_id, checkout_id=checkout_id or "")
        return payment
