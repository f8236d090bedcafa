"""
Step rules for the hall booking form

Each step has an independent predicate returning human-readable messages;
an empty list means the step is complete. Predicates only read the draft,
so any step can be checked in isolation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Callable, Optional

from apps.bookings.constants import (
    EVENT_TYPES,
    FIRST_STEP,
    HALL_BOOKING_STEPS,
    PAYMENT_STEP,
    SOUTH_AFRICAN_BANKS,
    TERMS_PAGES,
)
from apps.bookings.domain.entities import BookingDraft

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
BRANCH_CODE_PATTERN = re.compile(r'^\d{6}$')

EVENT_TYPE_VALUES = {value for value, _label in EVENT_TYPES}


@dataclass(frozen=True)
class HallRules:
    """Hall limits and fees."""
    rental_fee: Decimal = Decimal('1500.00')
    deposit_amount: Decimal = Decimal('1000.00')
    currency: str = 'ZAR'
    min_guests: int = 1
    max_guests: int = 50
    max_vehicles: int = 30
    curfew: time = time(23, 0)
    terms_version: str = '2025-01'

    @classmethod
    def from_settings(cls) -> 'HallRules':
        from django.conf import settings

        hours, minutes = settings.HALL_CURFEW.split(':')
        return cls(
            rental_fee=settings.HALL_RENTAL_FEE,
            deposit_amount=settings.HALL_DEPOSIT_AMOUNT,
            currency=settings.HALL_CURRENCY,
            min_guests=settings.HALL_MIN_GUESTS,
            max_guests=settings.HALL_MAX_GUESTS,
            max_vehicles=settings.HALL_MAX_VEHICLES,
            curfew=time(int(hours), int(minutes)),
            terms_version=settings.HALL_TERMS_VERSION,
        )


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_verification(draft: BookingDraft, rules: HallRules, today: date) -> list[str]:
    if not draft.is_estate_resident:
        return ["Sorry, only estate residents can book the hall."]
    return []


def check_applicant(draft: BookingDraft, rules: HallRules, today: date) -> list[str]:
    required = [
        ('applicant_name', "Please enter your first name"),
        ('applicant_surname', "Please enter your surname"),
        ('applicant_email', "Please enter your email address"),
        ('applicant_phone', "Please enter your phone number"),
        ('applicant_address', "Please enter your contact address"),
        ('estate_address', "Please enter your estate address"),
    ]
    errors = [message for name, message in required if _blank(getattr(draft, name))]
    if not _blank(draft.applicant_email) and not EMAIL_PATTERN.match(draft.applicant_email.strip()):
        errors.append("Please enter a valid email address")
    return errors


def check_event(draft: BookingDraft, rules: HallRules, today: date) -> list[str]:
    errors = []
    if draft.event_date is None:
        errors.append("Please select an event date")
    if draft.event_start_time is None:
        errors.append("Please select a start time")
    if draft.event_end_time is None:
        errors.append("Please select an end time")
    if _blank(draft.event_type):
        errors.append("Please select an event type")
    elif draft.event_type not in EVENT_TYPE_VALUES:
        errors.append("Please select a valid event type")

    if draft.total_guests < rules.min_guests:
        errors.append(f"Minimum {rules.min_guests} guest required")
    if draft.total_guests > rules.max_guests:
        errors.append(f"Maximum {rules.max_guests} guests allowed")
    if draft.number_of_vehicles < 0:
        errors.append("Number of vehicles cannot be negative")
    if draft.number_of_vehicles > rules.max_vehicles:
        errors.append(f"Maximum {rules.max_vehicles} vehicles allowed")
    if draft.tables_required < 0 or draft.chairs_required < 0:
        errors.append("Tables and chairs cannot be negative")

    window = draft.time_window
    if window is not None:
        if not window.ends_by(rules.curfew):
            errors.append(f"Functions must end by {rules.curfew.strftime('%H:%M')} as per hall rules")
        if not window.is_ordered:
            errors.append("Start time must be before end time")

    if draft.event_date is not None and draft.event_date <= today:
        errors.append("Event date must be in the future")
    return errors


def check_bank(draft: BookingDraft, rules: HallRules, today: date) -> list[str]:
    required = [
        ('bank_account_holder', "Please enter the account holder name"),
        ('bank_name', "Please select your bank"),
        ('bank_branch_code', "Please enter the branch code"),
        ('bank_account_number', "Please enter the account number"),
        ('bank_proof_document_url', "Please upload proof of your bank account"),
    ]
    errors = [message for name, message in required if _blank(getattr(draft, name))]
    if not _blank(draft.bank_name) and draft.bank_name not in SOUTH_AFRICAN_BANKS:
        errors.append("Please select a supported bank")
    if not _blank(draft.bank_branch_code):
        branch_code = re.sub(r'\s+', '', draft.bank_branch_code)
        if not BRANCH_CODE_PATTERN.match(branch_code):
            errors.append("Branch code should be 6 digits")
    return errors


def check_additional(draft: BookingDraft, rules: HallRules, today: date) -> list[str]:
    if draft.will_play_music and _blank(draft.music_license_proof_url):
        return ["Please upload SAMRO/SAMPRA proof if you will be playing music"]
    return []


def check_terms(draft: BookingDraft, rules: HallRules, today: date) -> list[str]:
    errors = [
        f"Please initial page {page} of the terms and conditions"
        for page in range(1, TERMS_PAGES + 1)
        if _blank(getattr(draft, f'terms_page_{page}_initial'))
    ]
    if not draft.terms_accepted:
        errors.append("You must accept all terms and conditions to continue")
    return errors


def check_nothing(draft: BookingDraft, rules: HallRules, today: date) -> list[str]:
    return []


STEP_CHECKS: dict[int, Callable[[BookingDraft, HallRules, date], list[str]]] = {
    1: check_verification,
    2: check_applicant,
    3: check_event,
    4: check_bank,
    5: check_additional,
    6: check_terms,
    7: check_nothing,
    8: check_nothing,
}


def validate_step(
    step: int,
    draft: BookingDraft,
    rules: Optional[HallRules] = None,
    today: Optional[date] = None,
) -> list[str]:
    if step not in STEP_CHECKS:
        raise ValueError(f"Unknown step: {step}")
    return STEP_CHECKS[step](draft, rules or HallRules(), today or date.today())


def clamp_step(step: int) -> int:
    return max(FIRST_STEP, min(PAYMENT_STEP, step))


def describe_steps(current: int) -> list[dict]:
    """Step list for the progress indicator."""
    return [
        {
            'number': number,
            'title': title,
            'description': description,
            'is_complete': number < current,
            'is_accessible': number <= current,
        }
        for number, title, description in HALL_BOOKING_STEPS
    ]
