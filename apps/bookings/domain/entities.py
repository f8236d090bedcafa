"""
Hall Booking Domain Entities

- BookingDraft: the aggregate edited by the multi-step form
- BookingStatus: lifecycle states
- PaymentStatus: payment state tracking
"""

from dataclasses import dataclass, fields
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from apps.bookings.exceptions import DraftLockedError, PaymentError
from shared.domain.base import Aggregate
from shared.domain.value_objects import Money, TimeWindow


class BookingStatus(Enum):
    """
    Booking lifecycle

    State transitions:
    - DRAFT -> PAYMENT_PROCESSING (checkout session opened)
    - PAYMENT_PROCESSING -> CONFIRMED (payment succeeded)
    - PAYMENT_PROCESSING -> DRAFT (payment failed or abandoned)
    - DRAFT / PAYMENT_PROCESSING -> REJECTED (staff decision)
    """
    DRAFT = 'draft'
    PAYMENT_PROCESSING = 'payment_processing'
    CONFIRMED = 'confirmed'
    REJECTED = 'rejected'


class PaymentStatus(Enum):
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'


LOCKED_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.REJECTED)

# Fields the applicant may edit through the form.
EDITABLE_FIELDS = frozenset({
    'applicant_name', 'applicant_surname', 'applicant_address', 'applicant_phone',
    'applicant_email', 'is_estate_resident', 'estate_address',
    'event_date', 'event_start_time', 'event_end_time', 'event_type',
    'event_description', 'total_guests', 'number_of_vehicles',
    'tables_required', 'chairs_required',
    'bank_account_holder', 'bank_name', 'bank_branch_code', 'bank_account_number',
    'bank_proof_document_url',
    'will_play_music', 'music_license_proof_url', 'special_requests',
    'terms_page_1_initial', 'terms_page_2_initial', 'terms_page_3_initial',
    'terms_page_4_initial', 'terms_accepted',
})


@dataclass(eq=False)
class BookingDraft(Aggregate):
    """
    Hall Booking Aggregate Root

    One applicant's booking of the hall, from the first form step until the
    deposit is paid. Money fields are fixed server-side and are not part of
    EDITABLE_FIELDS.

    Key invariants:
    - Confirmed and rejected bookings are immutable
    - Payment can only start from DRAFT on a persisted record
    - revision increases by one on every successful write
    """

    user_id: Optional[int] = None
    revision: int = 0

    # Applicant
    applicant_name: str = ''
    applicant_surname: str = ''
    applicant_address: str = ''
    applicant_phone: str = ''
    applicant_email: str = ''
    is_estate_resident: bool = True
    estate_address: str = ''

    # Event
    event_date: Optional[date] = None
    event_start_time: Optional[time] = time(10, 0)
    event_end_time: Optional[time] = time(22, 0)
    event_type: str = ''
    event_description: str = ''
    total_guests: int = 1
    number_of_vehicles: int = 0
    tables_required: int = 0
    chairs_required: int = 0

    # Bank details for the deposit refund
    bank_account_holder: str = ''
    bank_name: str = ''
    bank_branch_code: str = ''
    bank_account_number: str = ''
    bank_proof_document_url: str = ''

    # Additional info
    will_play_music: bool = False
    music_license_proof_url: str = ''
    special_requests: str = ''

    # Terms
    terms_page_1_initial: str = ''
    terms_page_2_initial: str = ''
    terms_page_3_initial: str = ''
    terms_page_4_initial: str = ''
    terms_accepted: bool = False
    terms_accepted_at: Optional[datetime] = None
    terms_version: str = '2025-01'

    # Money
    rental_fee: Decimal = Decimal('1500.00')
    deposit_amount: Decimal = Decimal('1000.00')
    currency: str = 'ZAR'

    # Status
    status: BookingStatus = BookingStatus.DRAFT
    payment_status: PaymentStatus = PaymentStatus.PENDING

    # Payment and confirmation
    checkout_id: str = ''
    payment_started_at: Optional[datetime] = None
    payment_reference: str = ''
    payment_date: Optional[datetime] = None
    booking_reference: str = ''
    confirmed_at: Optional[datetime] = None
    rejection_reason: str = ''

    @property
    def total_amount(self) -> Decimal:
        return self.rental_fee + self.deposit_amount

    @property
    def total(self) -> Money:
        return Money(self.rental_fee, self.currency) + Money(self.deposit_amount, self.currency)

    @property
    def time_window(self) -> Optional[TimeWindow]:
        if self.event_start_time is None or self.event_end_time is None:
            return None
        return TimeWindow(self.event_start_time, self.event_end_time)

    @property
    def applicant_full_name(self) -> str:
        return f"{self.applicant_name} {self.applicant_surname}".strip()

    @property
    def is_locked(self) -> bool:
        return self.status in LOCKED_STATUSES

    def field_values(self) -> dict[str, Any]:
        """Plain snapshot of the record fields (no events)."""
        return {f.name: getattr(self, f.name) for f in fields(self) if not f.name.startswith('_')}

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def ensure_editable(self):
        if self.is_locked:
            raise DraftLockedError(
                f"Booking {self.booking_reference or self.id} is {self.status.value} and can no longer be changed"
            )

    def apply_changes(self, changes: dict[str, Any]):
        """Merge form edits; unknown or read-only field names raise ValueError."""
        unknown = sorted(set(changes) - EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown or read-only fields: {', '.join(unknown)}")
        self.ensure_editable()
        for name, value in changes.items():
            setattr(self, name, value)
        if 'terms_accepted' in changes and not self.terms_accepted:
            self.terms_accepted_at = None

    def stamp_terms_acceptance(self, now: datetime):
        if self.terms_accepted and self.terms_accepted_at is None:
            self.terms_accepted_at = now

    # ------------------------------------------------------------------
    # Payment state machine
    # ------------------------------------------------------------------

    def start_payment(self, checkout_id: str, now: datetime):
        """DRAFT -> PAYMENT_PROCESSING once the gateway opened a checkout."""
        if not self.is_persisted:
            raise PaymentError("Draft booking not found. Please go back and save your information.")
        if self.status != BookingStatus.DRAFT:
            raise PaymentError(f"Cannot start payment for a booking in status {self.status.value}")

        from apps.bookings.domain.events import PaymentStarted

        self.status = BookingStatus.PAYMENT_PROCESSING
        self.payment_status = PaymentStatus.PENDING
        self.checkout_id = checkout_id
        self.payment_started_at = now
        self.add_event(PaymentStarted(
            aggregate_id=self.id,
            booking_id=self.id,
            checkout_id=checkout_id,
            amount=self.total_amount,
        ))

    def fail_payment(self, reason: str = ''):
        """Back to an editable DRAFT after a failed or abandoned payment."""
        self.ensure_editable()

        from apps.bookings.domain.events import PaymentFailed

        self.status = BookingStatus.DRAFT
        self.payment_status = PaymentStatus.FAILED
        self.add_event(PaymentFailed(aggregate_id=self.id, booking_id=self.id, reason=reason))

    def confirm_payment(
        self,
        payment_reference: str,
        booking_reference: str,
        now: datetime,
        allow_released: bool = False,
    ) -> bool:
        """
        Mark the booking paid and confirmed

        Returns False (and changes nothing) when already confirmed, so gateway
        retries and the inline callback can race safely.

        Only PAYMENT_PROCESSING bookings can be confirmed. ``allow_released``
        also accepts a DRAFT whose checkout was opened and later released,
        for gateway events that arrive after the session expired.
        """
        if self.status == BookingStatus.CONFIRMED:
            return False
        if self.status == BookingStatus.REJECTED:
            raise DraftLockedError("Rejected bookings cannot be confirmed")
        released = self.status == BookingStatus.DRAFT and bool(self.checkout_id)
        if self.status != BookingStatus.PAYMENT_PROCESSING and not (allow_released and released):
            raise PaymentError("No payment is in progress for this booking")

        from apps.bookings.domain.events import BookingConfirmed

        self.status = BookingStatus.CONFIRMED
        self.payment_status = PaymentStatus.PAID
        self.payment_reference = payment_reference
        self.payment_date = now
        self.confirmed_at = now
        self.booking_reference = self.booking_reference or booking_reference
        self.add_event(BookingConfirmed(
            aggregate_id=self.id,
            booking_id=self.id,
            booking_reference=self.booking_reference,
            user_id=self.user_id,
            payment_reference=payment_reference,
        ))
        return True

    def reject(self, reason: str = ''):
        if self.status == BookingStatus.CONFIRMED:
            raise DraftLockedError("Confirmed bookings cannot be rejected")
        self.ensure_editable()

        from apps.bookings.domain.events import BookingRejected

        self.status = BookingStatus.REJECTED
        self.rejection_reason = reason
        self.add_event(BookingRejected(
            aggregate_id=self.id,
            booking_id=self.id,
            user_id=self.user_id,
            reason=reason,
        ))
