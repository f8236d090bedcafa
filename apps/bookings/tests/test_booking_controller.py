"""Booking form controller against in-memory collaborators."""

from __future__ import annotations

import re

import pytest

from apps.bookings.application.controller import BookingFormController
from apps.bookings.domain.entities import BookingDraft, BookingStatus, PaymentStatus
from apps.bookings.exceptions import (
    DraftConflictError,
    DraftLockedError,
    DraftPersistenceError,
    PaymentError,
    StepValidationError,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def make_controller(user_context, repository, gateway, notifier, hall_rules, fixed_clock):
    def factory(**kwargs):
        options = dict(
            user=user_context,
            repository=repository,
            gateway=gateway,
            notifier=notifier,
            rules=hall_rules,
            clock=fixed_clock,
        )
        options.update(kwargs)
        return BookingFormController(**options)

    return factory


@pytest.fixture
def payment_controller(make_controller, repository, complete_draft):
    """Controller sitting on the payment step with a saved, complete draft."""
    repository.save(complete_draft)
    return make_controller(step=8, draft=repository.get(complete_draft.id))


def test_new_draft_is_prefilled_from_profile(make_controller):
    controller = make_controller()

    draft = controller.load_or_create_draft()

    assert draft.id is None
    assert draft.applicant_name == "Thandi"
    assert draft.applicant_surname == "Mokoena"
    assert draft.applicant_email == "thandi@example.com"
    assert draft.applicant_phone == "+27821234567"
    assert draft.status == BookingStatus.DRAFT
    assert controller.step == 1


def test_saved_draft_is_resumed(make_controller, repository, complete_draft):
    repository.save(complete_draft)

    draft = make_controller().load_or_create_draft()

    assert draft.id == complete_draft.id
    assert draft.field_values() == repository.get(complete_draft.id).field_values()


def test_advance_never_moves_on_invalid_step(make_controller, repository):
    controller = make_controller()
    controller.load_or_create_draft()
    controller.update(is_estate_resident=False)

    with pytest.raises(StepValidationError) as excinfo:
        controller.advance()

    assert excinfo.value.step == 1
    assert excinfo.value.messages == ["Sorry, only estate residents can book the hall."]
    assert controller.step == 1
    assert repository.saves == 0


def test_advance_persists_before_moving(make_controller, repository):
    controller = make_controller()
    controller.load_or_create_draft()

    assert controller.advance() == 2
    assert controller.draft.id is not None
    assert repository.get(controller.draft.id).revision == 1


def test_failed_write_keeps_the_step(make_controller, repository):
    controller = make_controller()
    controller.load_or_create_draft()
    repository.fail_next_save = True

    with pytest.raises(DraftPersistenceError):
        controller.advance()

    assert controller.step == 1


def test_full_walk_to_review(make_controller, repository, complete_draft, fixed_clock):
    controller = make_controller()
    controller.load_or_create_draft()
    values = {
        name: value
        for name, value in complete_draft.field_values().items()
        if name.startswith(("applicant_", "estate_", "event_", "bank_", "terms_page_"))
        or name in ("total_guests", "number_of_vehicles", "tables_required", "chairs_required", "terms_accepted")
    }
    values.pop("terms_accepted_at", None)
    controller.update(**values)

    for expected in range(2, 8):
        assert controller.advance() == expected

    stored = repository.get(controller.draft.id)
    assert {name: getattr(stored, name) for name in values} == values
    assert {name: getattr(controller.draft, name) for name in values} == values
    assert stored.terms_accepted_at == fixed_clock()
    assert stored.status == BookingStatus.DRAFT

    assert controller.advance() == 8
    controller.start_payment()
    assert repository.get(controller.draft.id).status == BookingStatus.PAYMENT_PROCESSING


def test_retreat_and_go_to(make_controller):
    controller = make_controller(step=5)
    controller.load_or_create_draft()

    assert controller.retreat() == 4
    assert controller.go_to(2) == 2
    with pytest.raises(ValueError):
        controller.go_to(4)
    with pytest.raises(ValueError):
        controller.go_to(0)

    controller.retreat()
    assert controller.retreat() == 1


def test_unchecking_terms_clears_acceptance_time(make_controller, complete_draft, fixed_clock):
    complete_draft.terms_accepted_at = fixed_clock()
    controller = make_controller(draft=complete_draft)

    controller.update(terms_accepted=False)

    assert controller.draft.terms_accepted_at is None


def test_money_fields_cannot_be_edited(make_controller):
    controller = make_controller()
    controller.load_or_create_draft()

    with pytest.raises(ValueError):
        controller.update(rental_fee="1.00")


def test_stale_revision_conflicts(make_controller, repository, complete_draft):
    repository.save(complete_draft)
    first = make_controller(draft=repository.get(complete_draft.id))
    second = make_controller(draft=repository.get(complete_draft.id))

    first.update(special_requests="Extra chairs please")
    first.save()
    second.update(special_requests="No balloons")

    with pytest.raises(DraftConflictError):
        second.save()
    assert repository.get(complete_draft.id).special_requests == "Extra chairs please"


def test_start_payment_requires_saved_draft(make_controller, gateway):
    controller = make_controller(step=8)
    controller.load_or_create_draft()

    with pytest.raises(PaymentError) as excinfo:
        controller.start_payment()

    assert not excinfo.value.gateway_failure
    assert gateway.checkouts == []


def test_start_payment_hands_off_to_gateway(payment_controller, repository, gateway):
    session = payment_controller.start_payment()

    checkout = gateway.checkouts[0]
    assert str(checkout.amount) == "2500.00"
    assert checkout.customer_name == "Thandi Mokoena"
    assert session.redirect_url
    stored = repository.get(payment_controller.draft.id)
    assert stored.status == BookingStatus.PAYMENT_PROCESSING
    assert stored.checkout_id == session.checkout_id


def test_start_payment_refused_before_payment_step(make_controller, repository, complete_draft, gateway):
    repository.save(complete_draft)
    controller = make_controller(step=7, draft=repository.get(complete_draft.id))

    with pytest.raises(PaymentError, match="review your booking"):
        controller.start_payment()

    assert gateway.checkouts == []
    assert repository.get(complete_draft.id).status == BookingStatus.DRAFT


def test_start_payment_sends_user_back_to_invalid_step(make_controller, repository, complete_draft, gateway):
    complete_draft.event_date = None
    repository.save(complete_draft)
    controller = make_controller(step=8, draft=repository.get(complete_draft.id))

    with pytest.raises(StepValidationError) as excinfo:
        controller.start_payment()

    assert excinfo.value.step == 3
    assert controller.step == 3
    assert gateway.checkouts == []


def test_failed_write_after_checkout_marks_payment_failed(payment_controller, repository, gateway):
    repository.fail_next_save = True

    with pytest.raises(DraftPersistenceError):
        payment_controller.start_payment()

    result = gateway.results[-1]
    assert result["checkout_id"] == "ch_test_1"
    assert result["succeeded"] is False
    assert result["event"] == "handoff_aborted"
    assert repository.get(payment_controller.draft.id).status == BookingStatus.DRAFT


def test_inline_success_without_started_payment_is_refused(payment_controller, repository, gateway, notifier):
    with pytest.raises(PaymentError, match="No payment is in progress"):
        payment_controller.complete_inline_payment({"id": "forged"})

    stored = repository.get(payment_controller.draft.id)
    assert stored.status == BookingStatus.DRAFT
    assert stored.booking_reference == ""
    assert notifier.sent == []
    assert gateway.results == []


def test_inline_success_after_released_session_is_refused(payment_controller, repository):
    payment_controller.start_payment()
    payment_controller.draft.fail_payment("Payment session expired")
    repository.save(payment_controller.draft)

    with pytest.raises(PaymentError, match="No payment is in progress"):
        payment_controller.complete_inline_payment({"id": "late"})

    assert repository.get(payment_controller.draft.id).status == BookingStatus.DRAFT


def test_gateway_failure_leaves_an_editable_draft(make_controller, repository, complete_draft, gateway):
    repository.save(complete_draft)
    gateway.error = "Could not reach Yoco"
    controller = make_controller(step=8, draft=repository.get(complete_draft.id))

    with pytest.raises(PaymentError) as excinfo:
        controller.start_payment()

    assert excinfo.value.gateway_failure
    stored = repository.get(complete_draft.id)
    assert stored.status == BookingStatus.DRAFT
    assert stored.payment_status == PaymentStatus.FAILED


def test_inline_error_reverts_to_draft(payment_controller, repository, gateway):
    payment_controller.start_payment()

    with pytest.raises(PaymentError, match="Payment failed: Card declined"):
        payment_controller.complete_inline_payment({"error": {"message": "Card declined"}})

    stored = repository.get(payment_controller.draft.id)
    assert stored.status == BookingStatus.DRAFT
    assert stored.booking_reference == ""
    assert gateway.results[-1]["succeeded"] is False


def test_inline_success_confirms_and_notifies(payment_controller, repository, gateway, notifier):
    payment_controller.start_payment()

    draft = payment_controller.complete_inline_payment({"id": "p_123"})

    assert draft.status == BookingStatus.CONFIRMED
    assert draft.payment_status == PaymentStatus.PAID
    assert draft.payment_reference == "p_123"
    assert re.fullmatch(r"RH-\d{4}-001", draft.booking_reference)
    assert notifier.sent == [(draft.id, draft.booking_reference)]
    assert gateway.results[-1]["succeeded"] is True
    assert repository.get(draft.id).status == BookingStatus.CONFIRMED


def test_notifier_failure_does_not_undo_confirmation(make_controller, repository, complete_draft, failing_notifier):
    repository.save(complete_draft)
    controller = make_controller(step=8, draft=repository.get(complete_draft.id), notifier=failing_notifier)
    controller.start_payment()

    draft = controller.complete_inline_payment({"id": "p_456"})

    assert draft.status == BookingStatus.CONFIRMED


def test_confirmed_booking_is_locked(payment_controller):
    payment_controller.start_payment()
    payment_controller.complete_inline_payment({"id": "p_789"})

    with pytest.raises(DraftLockedError):
        payment_controller.update(special_requests="Late change")
    with pytest.raises(DraftLockedError):
        payment_controller.save()


def test_second_confirmation_is_ignored(payment_controller, notifier):
    payment_controller.start_payment()
    first = payment_controller.complete_inline_payment({"id": "p_1"})
    reference = first.booking_reference

    payment_controller.complete_inline_payment({"id": "p_2"})

    assert payment_controller.draft.booking_reference == reference
    assert payment_controller.draft.payment_reference == "p_1"
    assert len(notifier.sent) == 1


def test_draft_entity_rejects_unknown_fields():
    with pytest.raises(ValueError):
        BookingDraft().apply_changes({"status": "confirmed"})


def test_confirming_requires_a_started_payment(fixed_clock):
    never_started = BookingDraft(id=3, status=BookingStatus.DRAFT)
    released = BookingDraft(id=4, status=BookingStatus.DRAFT, checkout_id="ch_expired")

    with pytest.raises(PaymentError):
        never_started.confirm_payment("p_1", "RH-2025-001", fixed_clock(), allow_released=True)
    with pytest.raises(PaymentError):
        released.confirm_payment("p_2", "RH-2025-002", fixed_clock())

    assert released.confirm_payment("p_2", "RH-2025-002", fixed_clock(), allow_released=True)
    assert released.status == BookingStatus.CONFIRMED
