"""Step rules of the hall booking form."""

from __future__ import annotations

from dataclasses import replace
from datetime import time, timedelta

import pytest

from apps.bookings.domain.steps import clamp_step, describe_steps, validate_step


def test_complete_draft_passes_every_step(complete_draft, hall_rules, today):
    for step in range(1, 9):
        assert validate_step(step, complete_draft, hall_rules, today) == [], step


def test_non_resident_is_turned_away(complete_draft, hall_rules, today):
    complete_draft.is_estate_resident = False

    errors = validate_step(1, complete_draft, hall_rules, today)

    assert errors == ["Sorry, only estate residents can book the hall."]


def test_applicant_step_lists_every_missing_field(hall_rules, today, complete_draft):
    draft = replace(
        complete_draft,
        applicant_name="",
        applicant_surname="  ",
        applicant_email="",
        applicant_phone="",
        applicant_address="",
        estate_address="",
    )

    errors = validate_step(2, draft, hall_rules, today)

    assert errors == [
        "Please enter your first name",
        "Please enter your surname",
        "Please enter your email address",
        "Please enter your phone number",
        "Please enter your contact address",
        "Please enter your estate address",
    ]


@pytest.mark.parametrize("email", ["thandi", "thandi@", "thandi@example", "thandi @example.com"])
def test_applicant_email_must_look_like_an_address(complete_draft, hall_rules, today, email):
    complete_draft.applicant_email = email

    assert "Please enter a valid email address" in validate_step(2, complete_draft, hall_rules, today)


def test_event_may_end_exactly_at_curfew(complete_draft, hall_rules, today):
    complete_draft.event_end_time = time(23, 0)

    assert validate_step(3, complete_draft, hall_rules, today) == []


def test_event_ending_after_curfew_is_rejected(complete_draft, hall_rules, today):
    complete_draft.event_end_time = time(23, 1)

    errors = validate_step(3, complete_draft, hall_rules, today)

    assert errors == ["Functions must end by 23:00 as per hall rules"]


def test_event_start_must_precede_end(complete_draft, hall_rules, today):
    complete_draft.event_start_time = time(18, 0)
    complete_draft.event_end_time = time(17, 0)

    assert "Start time must be before end time" in validate_step(3, complete_draft, hall_rules, today)


def test_guest_limits(complete_draft, hall_rules, today):
    complete_draft.total_guests = 50
    assert validate_step(3, complete_draft, hall_rules, today) == []

    complete_draft.total_guests = 51
    assert validate_step(3, complete_draft, hall_rules, today) == ["Maximum 50 guests allowed"]

    complete_draft.total_guests = 0
    assert validate_step(3, complete_draft, hall_rules, today) == ["Minimum 1 guest required"]


def test_vehicle_limit(complete_draft, hall_rules, today):
    complete_draft.number_of_vehicles = 31

    assert validate_step(3, complete_draft, hall_rules, today) == ["Maximum 30 vehicles allowed"]


def test_event_date_must_be_after_today(complete_draft, hall_rules, today):
    complete_draft.event_date = today
    assert validate_step(3, complete_draft, hall_rules, today) == ["Event date must be in the future"]

    complete_draft.event_date = today + timedelta(days=1)
    assert validate_step(3, complete_draft, hall_rules, today) == []


def test_event_type_must_be_known(complete_draft, hall_rules, today):
    complete_draft.event_type = "rave"

    assert validate_step(3, complete_draft, hall_rules, today) == ["Please select a valid event type"]


def test_branch_code_needs_six_digits(complete_draft, hall_rules, today):
    complete_draft.bank_branch_code = "470 010"
    assert validate_step(4, complete_draft, hall_rules, today) == []

    complete_draft.bank_branch_code = "47001"
    assert validate_step(4, complete_draft, hall_rules, today) == ["Branch code should be 6 digits"]


def test_bank_proof_is_required(complete_draft, hall_rules, today):
    complete_draft.bank_proof_document_url = ""

    assert validate_step(4, complete_draft, hall_rules, today) == ["Please upload proof of your bank account"]


def test_music_needs_licence_proof(complete_draft, hall_rules, today):
    complete_draft.will_play_music = True
    assert validate_step(5, complete_draft, hall_rules, today) == [
        "Please upload SAMRO/SAMPRA proof if you will be playing music"
    ]

    complete_draft.music_license_proof_url = "/media/hall-bookings/music-licenses/7.pdf"
    assert validate_step(5, complete_draft, hall_rules, today) == []


def test_terms_need_every_initial_and_acceptance(complete_draft, hall_rules, today):
    complete_draft.terms_page_3_initial = ""
    complete_draft.terms_accepted = False

    errors = validate_step(6, complete_draft, hall_rules, today)

    assert errors == [
        "Please initial page 3 of the terms and conditions",
        "You must accept all terms and conditions to continue",
    ]


def test_unknown_step_is_an_error(complete_draft):
    with pytest.raises(ValueError):
        validate_step(9, complete_draft)


def test_clamp_and_describe_steps():
    assert clamp_step(0) == 1
    assert clamp_step(12) == 8

    steps = describe_steps(3)
    assert [s["number"] for s in steps] == list(range(1, 9))
    assert [s["is_complete"] for s in steps[:4]] == [True, True, False, False]
    assert steps[2]["is_accessible"] and not steps[3]["is_accessible"]
