"""Shared pytest fixtures: in-memory collaborators for the hall booking form."""

from __future__ import annotations

import copy
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.entities import BookingDraft
from apps.bookings.domain.steps import HallRules
from apps.bookings.exceptions import DraftConflictError, DraftPersistenceError
from apps.bookings.repositories import DraftRepository, format_booking_reference
from apps.finances.yoco_service import CheckoutSession, YocoPaymentError
from apps.users.context import UserContext

FIXED_NOW = datetime(2025, 3, 10, 10, 0, tzinfo=dt_timezone.utc)


class InMemoryDraftRepository(DraftRepository):
    """Keeps copies of drafts, so callers never share state with the store."""

    def __init__(self):
        self.records: dict[int, BookingDraft] = {}
        self.saves = 0
        self.fail_next_save = False
        self._next_id = 1

    def latest_draft_for(self, user_id):
        drafts = [d for d in self.records.values() if d.user_id == user_id and d.status.value == "draft"]
        if not drafts:
            return None
        return copy.deepcopy(max(drafts, key=lambda d: d.id))

    def get(self, booking_id):
        draft = self.records.get(booking_id)
        return copy.deepcopy(draft) if draft else None

    def save(self, draft):
        if self.fail_next_save:
            self.fail_next_save = False
            raise DraftPersistenceError("Could not save your booking. Please try again.")
        if draft.id is None:
            draft.id = self._next_id
            self._next_id += 1
        elif self.records[draft.id].revision != draft.revision:
            raise DraftConflictError("This booking was changed elsewhere. Reload the form and try again.")
        draft.revision += 1
        draft.clear_events()
        self.records[draft.id] = copy.deepcopy(draft)
        self.saves += 1
        return draft

    def next_booking_reference(self, year):
        confirmed = [d for d in self.records.values() if d.booking_reference]
        return format_booking_reference(year, len(confirmed) + 1)


class FakeGateway:
    def __init__(self, redirect_url="https://c.yoco.com/checkout/ch_test_1", error=None):
        self.redirect_url = redirect_url
        self.error = error
        self.checkouts = []
        self.results = []

    def create_checkout(self, checkout):
        self.checkouts.append(checkout)
        if self.error:
            raise YocoPaymentError(self.error)
        return CheckoutSession(checkout_id=f"ch_test_{len(self.checkouts)}", redirect_url=self.redirect_url)

    def record_result(self, booking_id, checkout_id, **kwargs):
        self.results.append({"booking_id": booking_id, "checkout_id": checkout_id, **kwargs})


class FakeNotifier:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def booking_confirmed(self, booking_id, booking_reference):
        if self.fail:
            raise RuntimeError("mail server down")
        self.sent.append((booking_id, booking_reference))


@pytest.fixture
def hall_rules():
    return HallRules()


@pytest.fixture
def user_context():
    return UserContext(
        user_id=7,
        email="thandi@example.com",
        full_name="Thandi Mokoena",
        phone="+27821234567",
        address="12 Oak Avenue, Roberts Estate",
    )


@pytest.fixture
def repository():
    return InMemoryDraftRepository()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def complete_draft():
    """A draft that passes every step."""
    event_day = FIXED_NOW.date() + timedelta(days=30)
    return BookingDraft(
        user_id=7,
        applicant_name="Thandi",
        applicant_surname="Mokoena",
        applicant_address="12 Oak Avenue, Roberts Estate",
        applicant_phone="+27821234567",
        applicant_email="thandi@example.com",
        is_estate_resident=True,
        estate_address="12 Oak Avenue",
        event_date=event_day,
        event_start_time=time(14, 0),
        event_end_time=time(22, 30),
        event_type="birthday",
        total_guests=40,
        number_of_vehicles=10,
        tables_required=6,
        chairs_required=40,
        bank_account_holder="T Mokoena",
        bank_name="Capitec Bank",
        bank_branch_code="470010",
        bank_account_number="1234567890",
        bank_proof_document_url="/media/hall-bookings/bank-proofs/7-bank-proof-1.pdf",
        terms_page_1_initial="TM",
        terms_page_2_initial="TM",
        terms_page_3_initial="TM",
        terms_page_4_initial="TM",
        terms_accepted=True,
        rental_fee=Decimal("1500.00"),
        deposit_amount=Decimal("1000.00"),
    )


@pytest.fixture
def today():
    return date(2025, 3, 10)


@pytest.fixture
def failing_notifier():
    return FakeNotifier(fail=True)
