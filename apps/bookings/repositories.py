"""
Draft persistence for hall bookings

The form controller talks to a ``DraftRepository``; the Django
implementation maps ``BookingDraft`` onto the ``HallBooking`` table.
Writes are conditional on the revision the draft was loaded with, so a
stale tab cannot silently overwrite newer data.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

from django.db import DatabaseError  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from .constants import BOOKING_REFERENCE_PREFIX
from .domain.entities import BookingDraft, BookingStatus, PaymentStatus
from .exceptions import DraftConflictError, DraftPersistenceError
from .models import HallBooking

logger = logging.getLogger(__name__)

# Columns managed by the repository rather than copied from the entity.
_MANAGED_FIELDS = {"id", "user_id", "revision", "created_at", "updated_at"}


class DraftRepository(ABC):
    """Record store for booking drafts, keyed by user."""

    @abstractmethod
    def latest_draft_for(self, user_id: int) -> Optional[BookingDraft]:
        """Newest record in ``draft`` status for the user, or None."""

    @abstractmethod
    def get(self, booking_id: int) -> Optional[BookingDraft]:
        pass

    @abstractmethod
    def save(self, draft: BookingDraft) -> BookingDraft:
        """Insert or update by id; bumps ``draft.revision`` on success."""

    @abstractmethod
    def next_booking_reference(self, year: int) -> str:
        pass


def format_booking_reference(year: int, sequence: int) -> str:
    return f"{BOOKING_REFERENCE_PREFIX}-{year}-{sequence:03d}"


def to_entity(record: HallBooking) -> BookingDraft:
    return BookingDraft(
        id=record.pk,
        created_at=record.created_at,
        updated_at=record.updated_at,
        user_id=record.user_id,
        revision=record.revision,
        applicant_name=record.applicant_name,
        applicant_surname=record.applicant_surname,
        applicant_address=record.applicant_address,
        applicant_phone=record.applicant_phone,
        applicant_email=record.applicant_email,
        is_estate_resident=record.is_estate_resident,
        estate_address=record.estate_address,
        event_date=record.event_date,
        event_start_time=record.event_start_time,
        event_end_time=record.event_end_time,
        event_type=record.event_type,
        event_description=record.event_description,
        total_guests=record.total_guests,
        number_of_vehicles=record.number_of_vehicles,
        tables_required=record.tables_required,
        chairs_required=record.chairs_required,
        bank_account_holder=record.bank_account_holder,
        bank_name=record.bank_name,
        bank_branch_code=record.bank_branch_code,
        bank_account_number=record.bank_account_number or "",
        bank_proof_document_url=record.bank_proof_document_url,
        will_play_music=record.will_play_music,
        music_license_proof_url=record.music_license_proof_url,
        special_requests=record.special_requests,
        terms_page_1_initial=record.terms_page_1_initial,
        terms_page_2_initial=record.terms_page_2_initial,
        terms_page_3_initial=record.terms_page_3_initial,
        terms_page_4_initial=record.terms_page_4_initial,
        terms_accepted=record.terms_accepted,
        terms_accepted_at=record.terms_accepted_at,
        terms_version=record.terms_version,
        rental_fee=record.rental_fee,
        deposit_amount=record.deposit_amount,
        currency=record.currency,
        status=BookingStatus(record.status),
        payment_status=PaymentStatus(record.payment_status),
        checkout_id=record.checkout_id,
        payment_started_at=record.payment_started_at,
        payment_reference=record.payment_reference,
        payment_date=record.payment_date,
        booking_reference=record.booking_reference,
        confirmed_at=record.confirmed_at,
        rejection_reason=record.rejection_reason,
    )


def to_columns(draft: BookingDraft) -> dict:
    columns = {
        name: value
        for name, value in draft.field_values().items()
        if name not in _MANAGED_FIELDS
    }
    columns["status"] = draft.status.value
    columns["payment_status"] = draft.payment_status.value
    columns["total_amount"] = draft.total_amount
    return columns


class DjangoDraftRepository(DraftRepository):
    def latest_draft_for(self, user_id: int) -> Optional[BookingDraft]:
        try:
            record = (
                HallBooking.objects.filter(user_id=user_id, status=HallBooking.Status.DRAFT)
                .order_by("-created_at", "-pk")
                .first()
            )
        except DatabaseError as exc:
            raise DraftPersistenceError("Could not load your saved booking") from exc
        return to_entity(record) if record else None

    def get(self, booking_id: int) -> Optional[BookingDraft]:
        record = HallBooking.objects.filter(pk=booking_id).first()
        return to_entity(record) if record else None

    def save(self, draft: BookingDraft) -> BookingDraft:
        columns = to_columns(draft)
        try:
            with DjangoUnitOfWork() as uow:
                if draft.id is None:
                    record = HallBooking.objects.create(
                        user_id=draft.user_id,
                        revision=draft.revision + 1,
                        **columns,
                    )
                    booking_id = record.pk
                else:
                    updated = HallBooking.objects.filter(pk=draft.id, revision=draft.revision).update(
                        revision=F("revision") + 1,
                        updated_at=timezone.now(),
                        **columns,
                    )
                    if not updated:
                        if HallBooking.objects.filter(pk=draft.id).exists():
                            raise DraftConflictError(
                                "This booking was changed elsewhere. Reload the form and try again."
                            )
                        raise DraftPersistenceError(f"Hall booking {draft.id} no longer exists")
                    booking_id = draft.id
                uow.collect_events(draft)
        except DraftPersistenceError:
            raise
        except DatabaseError as exc:
            logger.error(f"Failed to save hall booking draft {draft.id}: {exc}", exc_info=True)
            raise DraftPersistenceError("Could not save your booking. Please try again.") from exc

        draft.id = booking_id
        draft.revision += 1
        logger.info(f"Saved hall booking {booking_id} (revision {draft.revision}, status {draft.status.value})")
        return draft

    def next_booking_reference(self, year: int) -> str:
        prefix = f"{BOOKING_REFERENCE_PREFIX}-{year}-"
        references = HallBooking.objects.filter(booking_reference__startswith=prefix).values_list(
            "booking_reference", flat=True
        )
        sequence = 0
        for reference in references:
            match = re.fullmatch(rf"{re.escape(prefix)}(\d+)", reference)
            if match:
                sequence = max(sequence, int(match.group(1)))
        return format_booking_reference(year, sequence + 1)
