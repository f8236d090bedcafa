"""API views for hall bookings.

``BookingFormViewSet`` drives the multi-step form; the active step and the
draft id live in the Django session between requests. ``HallBookingViewSet``
lists stored bookings and lets staff reject applications.
"""

from __future__ import annotations

import logging

from django.db.models import Q  # type: ignore
from rest_framework import filters, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.throttling import ScopedRateThrottle  # type: ignore

from apps.finances.services import YocoHallPaymentGateway
from apps.finances.yoco_service import rands_to_cents
from apps.notifications.services import send_hall_booking_pdf_form
from apps.users.context import UserContext
from apps.users.permissions import IsHallManager

from .application.controller import BookingFormController
from .constants import FIRST_STEP
from .domain.entities import BookingStatus
from .domain.steps import describe_steps
from .exceptions import (
    DraftConflictError,
    DraftLockedError,
    DraftPersistenceError,
    PaymentError,
    StepValidationError,
)
from .filters import HallBookingFilterSet
from .models import HallBooking
from .repositories import DjangoDraftRepository
from .serializers import (
    BookingDraftSerializer,
    DocumentUploadSerializer,
    DraftChangesSerializer,
    HallBookingSerializer,
    PaymentResultSerializer,
    PdfFormSerializer,
    RejectSerializer,
    StepSerializer,
)
from .services import ConfirmationNotifier, store_booking_document, validate_pdf_form

logger = logging.getLogger(__name__)

SESSION_STEP_KEY = "hall_booking_step"
SESSION_BOOKING_KEY = "hall_booking_id"


class BookingFormViewSet(viewsets.ViewSet):
    """Multi-step hall booking form for the signed-in user."""

    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [JSONParser, FormParser, MultiPartParser]
    throttle_scopes = {
        "pay": "hall-booking-payment",
        "pdf_form": "hall-booking-pdf-form",
    }

    def get_throttles(self):  # type: ignore
        scope = self.throttle_scopes.get(self.action)
        if scope:
            self.throttle_scope = scope
            return [ScopedRateThrottle()]
        return super().get_throttles()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _controller(self, request) -> BookingFormController:
        user = UserContext.from_user(request.user)
        repository = DjangoDraftRepository()

        draft = None
        booking_id = request.session.get(SESSION_BOOKING_KEY)
        if booking_id:
            draft = repository.get(booking_id)
            if draft is None or draft.user_id != user.user_id or draft.status == BookingStatus.REJECTED:
                draft = None

        controller = BookingFormController(
            user=user,
            repository=repository,
            gateway=YocoHallPaymentGateway(),
            notifier=ConfirmationNotifier(),
            step=request.session.get(SESSION_STEP_KEY, FIRST_STEP) if draft is not None else FIRST_STEP,
            draft=draft,
        )
        if draft is None:
            controller.load_or_create_draft()
        return controller

    @staticmethod
    def _remember(request, controller: BookingFormController) -> None:
        request.session[SESSION_STEP_KEY] = controller.step
        if controller.draft.id is not None:
            request.session[SESSION_BOOKING_KEY] = controller.draft.id

    def _form_response(self, request, controller, http_status=status.HTTP_200_OK, **extra) -> Response:
        self._remember(request, controller)
        data = {
            "step": controller.step,
            "steps": describe_steps(controller.step),
            "draft": BookingDraftSerializer(controller.draft).data,
            **extra,
        }
        return Response(data, status=http_status)

    def _error_response(self, request, controller, exc: Exception) -> Response:
        if isinstance(exc, StepValidationError):
            return self._form_response(
                request,
                controller,
                status.HTTP_400_BAD_REQUEST,
                detail=exc.messages[0] if exc.messages else str(exc),
                errors=exc.messages,
            )
        if isinstance(exc, DraftConflictError):
            return self._form_response(request, controller, status.HTTP_409_CONFLICT, detail=str(exc))
        if isinstance(exc, DraftPersistenceError):
            return self._form_response(request, controller, status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
        if isinstance(exc, PaymentError):
            http_status = status.HTTP_402_PAYMENT_REQUIRED if exc.gateway_failure else status.HTTP_400_BAD_REQUEST
            return self._form_response(request, controller, http_status, detail=str(exc))
        return self._form_response(request, controller, status.HTTP_400_BAD_REQUEST, detail=str(exc))

    def _apply_changes(self, request, controller) -> Response | None:
        """Merge posted edits into the draft; returns an error response or None."""
        serializer = DraftChangesSerializer(data=request.data)
        if not serializer.is_valid():
            return self._form_response(
                request, controller, status.HTTP_400_BAD_REQUEST,
                detail="Invalid form data", errors=serializer.errors,
            )
        if serializer.expected_revision is not None and controller.draft.is_persisted:
            controller.draft.revision = serializer.expected_revision
        controller.update(**serializer.changes)
        return None

    # ------------------------------------------------------------------
    # endpoints
    # ------------------------------------------------------------------

    def list(self, request):  # type: ignore
        try:
            controller = self._controller(request)
        except DraftPersistenceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return self._form_response(request, controller)

    @action(detail=False, methods=["post"])
    def advance(self, request):  # type: ignore
        controller = self._controller(request)
        try:
            error = self._apply_changes(request, controller)
            if error is not None:
                return error
            controller.advance()
        except (StepValidationError, DraftPersistenceError, DraftLockedError, ValueError) as exc:
            return self._error_response(request, controller, exc)
        return self._form_response(request, controller)

    @action(detail=False, methods=["post"])
    def retreat(self, request):  # type: ignore
        controller = self._controller(request)
        controller.retreat()
        return self._form_response(request, controller)

    @action(detail=False, methods=["post"])
    def goto(self, request):  # type: ignore
        controller = self._controller(request)
        serializer = StepSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            controller.go_to(serializer.validated_data["step"])
        except ValueError as exc:
            return self._error_response(request, controller, exc)
        return self._form_response(request, controller)

    @action(detail=False, methods=["post"])
    def save(self, request):  # type: ignore
        controller = self._controller(request)
        try:
            error = self._apply_changes(request, controller)
            if error is not None:
                return error
            controller.save()
        except (DraftPersistenceError, DraftLockedError, ValueError) as exc:
            return self._error_response(request, controller, exc)
        return self._form_response(request, controller, detail="Draft saved")

    @action(detail=False, methods=["post"])
    def documents(self, request):  # type: ignore
        controller = self._controller(request)
        serializer = DocumentUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            controller.draft.ensure_editable()
            field, url = store_booking_document(
                request.user.pk,
                serializer.validated_data["kind"],
                serializer.validated_data["file"],
            )
            controller.update(**{field: url})
            controller.save()
        except (DraftPersistenceError, DraftLockedError, ValueError) as exc:
            return self._error_response(request, controller, exc)
        return self._form_response(request, controller, status.HTTP_201_CREATED, url=url, field=field)

    @action(detail=False, methods=["post"])
    def pay(self, request):  # type: ignore
        controller = self._controller(request)
        try:
            session = controller.start_payment()
        except (PaymentError, StepValidationError, DraftPersistenceError) as exc:
            return self._error_response(request, controller, exc)
        draft = controller.draft
        return self._form_response(
            request,
            controller,
            checkout_id=session.checkout_id,
            redirect_url=session.redirect_url,
            mode="redirect" if session.redirect_url else "inline",
            amount_cents=rands_to_cents(draft.total_amount),
            currency=draft.currency,
        )

    @action(detail=False, methods=["post"], url_path="payment-callback")
    def payment_callback(self, request):  # type: ignore
        controller = self._controller(request)
        serializer = PaymentResultSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            draft = controller.complete_inline_payment(dict(serializer.validated_data))
        except (PaymentError, DraftPersistenceError, DraftLockedError) as exc:
            return self._error_response(request, controller, exc)
        return self._form_response(
            request,
            controller,
            detail="Payment successful! Your booking is confirmed.",
            booking_reference=draft.booking_reference,
        )

    @action(detail=False, methods=["post"])
    def restart(self, request):  # type: ignore
        """Forget the session's booking and resume (or start) a draft."""
        request.session.pop(SESSION_BOOKING_KEY, None)
        request.session.pop(SESSION_STEP_KEY, None)
        controller = self._controller(request)
        return self._form_response(request, controller)

    @action(detail=False, methods=["post"], url_path="pdf-form")
    def pdf_form(self, request):  # type: ignore
        """Email a filled-in PDF booking form to the hall admin instead of using the steps."""
        serializer = PdfFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        upload = serializer.validated_data["pdf"]
        try:
            validate_pdf_form(upload)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        user = UserContext.from_user(request.user)
        name = serializer.validated_data.get("name") or user.full_name or user.email
        email = serializer.validated_data.get("email") or user.email
        if not send_hall_booking_pdf_form(name, email, upload):
            return Response({"detail": "Failed to send email"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        logger.info(f"PDF booking form forwarded for user {user.user_id}")
        return Response({"detail": "PDF booking form sent successfully"}, status=status.HTTP_200_OK)


class HallBookingViewSet(viewsets.ReadOnlyModelViewSet):
    """Stored hall bookings: staff see all, applicants their own."""

    queryset = HallBooking.objects.select_related("user").all()
    serializer_class = HallBookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = HallBookingFilterSet
    filter_backends = [
        filters.SearchFilter,
        filters.OrderingFilter,
        *viewsets.ReadOnlyModelViewSet.filter_backends,
    ]
    search_fields = ["booking_reference", "applicant_name", "applicant_surname", "applicant_email"]
    ordering_fields = ["created_at", "event_date", "status"]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_hall_manager", False):
            return qs
        return qs.filter(Q(user=user))

    @action(detail=True, methods=["post"], permission_classes=[IsHallManager])
    def reject(self, request, pk=None):  # type: ignore
        booking: HallBooking = self.get_object()  # type: ignore
        serializer = RejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        repository = DjangoDraftRepository()
        draft = repository.get(booking.pk)
        try:
            draft.reject(serializer.validated_data.get("reason", ""))
            repository.save(draft)
        except DraftLockedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except DraftConflictError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except DraftPersistenceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        logger.info(f"Hall booking {booking.pk} rejected by {request.user.pk}")
        booking.refresh_from_db()
        return Response(HallBookingSerializer(booking).data, status=status.HTTP_200_OK)
