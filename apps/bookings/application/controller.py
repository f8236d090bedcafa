"""
Booking Form Controller

Drives the eight-step hall booking form: owns the in-memory draft and the
active step, validates before moving forward, and writes the draft through
to the repository on every advance or save.

Usage:
    controller = BookingFormController(
        user=UserContext.from_user(request.user),
        repository=DjangoDraftRepository(),
        gateway=YocoHallPaymentGateway(),
        notifier=ConfirmationNotifier(),
    )
    controller.load_or_create_draft()
    controller.update(applicant_name="Thandi")
    controller.advance()
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Optional

from django.utils import timezone  # type: ignore

from apps.bookings.constants import FIRST_STEP, PAYMENT_STEP, REVIEW_STEP
from apps.bookings.domain.entities import BookingDraft, BookingStatus
from apps.bookings.domain.steps import HallRules, clamp_step, validate_step
from apps.bookings.exceptions import DraftPersistenceError, PaymentError, StepValidationError
from apps.bookings.repositories import DraftRepository
from apps.bookings.services import confirm_booking_payment, fail_booking_payment
from apps.finances.yoco_service import CheckoutRequest, CheckoutSession, YocoPaymentError
from apps.users.context import UserContext

logger = logging.getLogger(__name__)


class BookingFormController:

    def __init__(
        self,
        user: UserContext,
        repository: DraftRepository,
        gateway: Any,
        notifier: Any = None,
        step: int = FIRST_STEP,
        draft: Optional[BookingDraft] = None,
        rules: Optional[HallRules] = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.user = user
        self.repository = repository
        self.gateway = gateway
        self.notifier = notifier
        self.rules = rules or HallRules.from_settings()
        self.clock = clock
        self._step = clamp_step(step)
        self._draft = draft

    @property
    def step(self) -> int:
        return self._step

    @property
    def draft(self) -> BookingDraft:
        if self._draft is None:
            raise RuntimeError("No draft loaded; call load_or_create_draft() first")
        return self._draft

    def _today(self) -> date:
        now = self.clock()
        return timezone.localdate(now) if timezone.is_aware(now) else now.date()

    # ------------------------------------------------------------------
    # Draft lifecycle
    # ------------------------------------------------------------------

    def load_or_create_draft(self) -> BookingDraft:
        """Resume the user's newest draft, or start one from their profile."""
        draft = self.repository.latest_draft_for(self.user.user_id)
        if draft is None:
            draft = self.new_draft()
            logger.info(f"Started new hall booking draft for user {self.user.user_id}")
        else:
            logger.info(f"Resumed hall booking draft {draft.id} for user {self.user.user_id}")
        self._draft = draft
        return draft

    def new_draft(self) -> BookingDraft:
        return BookingDraft(
            user_id=self.user.user_id,
            applicant_name=self.user.first_name,
            applicant_surname=self.user.surname,
            applicant_email=self.user.email,
            applicant_phone=self.user.phone,
            applicant_address=self.user.address,
            rental_fee=self.rules.rental_fee,
            deposit_amount=self.rules.deposit_amount,
            currency=self.rules.currency,
            terms_version=self.rules.terms_version,
        )

    def update(self, **changes: Any) -> BookingDraft:
        self.draft.apply_changes(changes)
        return self.draft

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def validate_current_step(self) -> list[str]:
        return validate_step(self._step, self.draft, self.rules, self._today())

    def advance(self) -> int:
        """
        Validate the active step, persist, then move forward

        The step index only changes after both validation and the write
        succeed.
        """
        errors = self.validate_current_step()
        if errors:
            raise StepValidationError(self._step, errors)

        self.draft.stamp_terms_acceptance(self.clock())
        self.repository.save(self.draft)
        self._step = clamp_step(self._step + 1)
        return self._step

    def retreat(self) -> int:
        self._step = clamp_step(self._step - 1)
        return self._step

    def go_to(self, step: int) -> int:
        """Jump back to an already visited step."""
        if step < FIRST_STEP or step > PAYMENT_STEP:
            raise ValueError(f"Step must be between {FIRST_STEP} and {PAYMENT_STEP}")
        if step > self._step:
            raise ValueError("Complete the current step before moving ahead")
        self._step = step
        return self._step

    def save(self) -> BookingDraft:
        self.draft.ensure_editable()
        return self.repository.save(self.draft)

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    def start_payment(self) -> CheckoutSession:
        """
        Hand the booking off to the payment gateway

        Only from the payment step, and only when every earlier step still
        validates; otherwise the form goes back to the first failing step.
        A returned redirect_url means a full redirect; None means the client
        finishes inline and reports back via complete_inline_payment().
        """
        draft = self.draft
        if not draft.is_persisted:
            raise PaymentError("Draft booking not found. Please go back and save your information.")
        if draft.status != BookingStatus.DRAFT:
            raise PaymentError(f"Booking status is {draft.status.value}, cannot process payment")
        if self._step != PAYMENT_STEP:
            raise PaymentError("Please review your booking before paying")
        for step in range(FIRST_STEP, REVIEW_STEP + 1):
            errors = validate_step(step, draft, self.rules, self._today())
            if errors:
                self._step = step
                raise StepValidationError(step, errors)

        checkout = CheckoutRequest(
            booking_id=draft.id,
            amount=draft.total_amount,
            customer_email=draft.applicant_email or self.user.email,
            customer_name=draft.applicant_full_name,
            currency=draft.currency,
        )
        try:
            session = self.gateway.create_checkout(checkout)
        except YocoPaymentError as exc:
            logger.error(f"Checkout creation failed for hall booking {draft.id}: {exc}")
            fail_booking_payment(draft, str(exc), self.repository)
            raise PaymentError(f"Failed to create payment session: {exc}", gateway_failure=True) from exc

        draft.start_payment(session.checkout_id, self.clock())
        try:
            self.repository.save(draft)
        except DraftPersistenceError as exc:
            logger.error(f"Hall booking {draft.id} not updated after opening checkout {session.checkout_id}: {exc}")
            self.gateway.record_result(
                draft.id,
                session.checkout_id,
                succeeded=False,
                reason=f"Booking could not be updated: {exc}",
                event="handoff_aborted",
            )
            raise
        logger.info(f"Hall booking {draft.id} handed off to payment (checkout {session.checkout_id})")
        return session

    def complete_inline_payment(self, result: dict) -> BookingDraft:
        """
        Apply the inline payment result: ``{"error": ...}`` or ``{"id": ...}``

        Requires a checkout in progress. An error reverts the booking to draft
        and raises PaymentError; an id confirms it and assigns the booking
        reference. A repeated success for a confirmed booking is ignored.
        """
        draft = self.draft
        if not draft.is_persisted:
            raise PaymentError("Draft booking not found. Please go back and save your information.")

        error = result.get("error")
        payment_id = result.get("id")
        repeated_success = draft.status == BookingStatus.CONFIRMED and payment_id and not error
        if not repeated_success and (draft.status != BookingStatus.PAYMENT_PROCESSING or not draft.checkout_id):
            raise PaymentError("No payment is in progress for this booking")

        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            fail_booking_payment(draft, message, self.repository)
            self.gateway.record_result(
                draft.id,
                draft.checkout_id,
                succeeded=False,
                reason=message,
                payload=result,
            )
            raise PaymentError(f"Payment failed: {message}")

        if not payment_id:
            raise PaymentError("Payment result must contain an id or an error")

        if not confirm_booking_payment(draft, str(payment_id), self.repository, self.notifier):
            return draft
        self.gateway.record_result(
            draft.id,
            draft.checkout_id,
            succeeded=True,
            reference=str(payment_id),
            payload=result,
        )
        return draft
