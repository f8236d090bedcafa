"""Payment API views and the Yoco webhook endpoint."""

from __future__ import annotations

import json
import logging

from django.utils.decorators import method_decorator  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.exceptions import HallBookingError
from apps.bookings.repositories import DjangoDraftRepository
from apps.bookings.services import ConfirmationNotifier, confirm_booking_payment, fail_booking_payment

from . import yoco_service
from .models import Payment
from .serializers import PaymentSerializer
from .services import YocoHallPaymentGateway

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """Payments for the user's own hall bookings; staff see all."""

    queryset = Payment.objects.select_related("booking").all()
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_hall_manager", False):
            return qs
        return qs.filter(booking__user=user)


@method_decorator(csrf_exempt, name="dispatch")
class YocoWebhookView(APIView):
    """
    Receives Yoco payment events

    The signature is an HMAC-SHA256 of the raw body; the booking is found
    through ``payload.metadata.bookingId``.
    """

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        body = request.body
        signature = yoco_service.signature_from_request(request)
        if not yoco_service.verify_webhook_signature(body, signature):
            logger.warning("Rejected Yoco webhook with invalid signature")
            return Response({"status": "error", "message": "Invalid signature"}, status=status.HTTP_403_FORBIDDEN)

        try:
            event = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return Response({"status": "error", "message": "Invalid JSON"}, status=status.HTTP_400_BAD_REQUEST)
        if not isinstance(event, dict):
            return Response({"status": "error", "message": "Invalid JSON"}, status=status.HTTP_400_BAD_REQUEST)

        event_type = event.get("type", "")
        if event_type not in (yoco_service.EVENT_PAYMENT_SUCCEEDED, yoco_service.EVENT_PAYMENT_FAILED):
            logger.info(f"Ignoring Yoco webhook event {event_type!r}")
            return Response({"status": "ignored"}, status=status.HTTP_200_OK)

        booking_id = yoco_service.booking_id_from_event(event)
        if booking_id is None:
            return Response(
                {"status": "error", "message": "'bookingId' is required in payload metadata"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        repository = DjangoDraftRepository()
        draft = repository.get(booking_id)
        if draft is None:
            return Response({"status": "error", "message": "Booking not found"}, status=status.HTTP_404_NOT_FOUND)

        payload = event.get("payload") or {}
        payment_id = str(payload.get("id") or event.get("id") or "")
        checkout_id = str((payload.get("metadata") or {}).get("checkoutId") or draft.checkout_id)
        gateway = YocoHallPaymentGateway()

        try:
            if event_type == yoco_service.EVENT_PAYMENT_SUCCEEDED:
                confirm_booking_payment(draft, payment_id, repository, ConfirmationNotifier(), allow_released=True)
                gateway.record_result(
                    booking_id, checkout_id, succeeded=True, reference=payment_id, event=event_type, payload=event
                )
            else:
                reason = payload.get("failureReason") or "Payment failed"
                fail_booking_payment(draft, reason, repository)
                gateway.record_result(
                    booking_id, checkout_id, succeeded=False, reason=reason, event=event_type, payload=event
                )
        except HallBookingError as exc:
            logger.error(f"Could not apply Yoco event {event_type} to hall booking {booking_id}: {exc}")
            return Response({"status": "error", "message": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response({"status": "success"}, status=status.HTTP_200_OK)
