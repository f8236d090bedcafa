"""Errors raised by the hall booking form and its collaborators."""

from __future__ import annotations


class HallBookingError(Exception):
    """Base class for hall booking errors."""


class StepValidationError(HallBookingError):
    """The active step's required fields are missing or invalid."""

    def __init__(self, step: int, messages: list[str]):
        self.step = step
        self.messages = list(messages)
        super().__init__(messages[0] if messages else f"Step {step} is incomplete")


class DraftPersistenceError(HallBookingError):
    """The draft could not be written to the record store."""


class DraftConflictError(DraftPersistenceError):
    """The stored draft changed since it was loaded."""


class DraftLockedError(HallBookingError):
    """The booking is confirmed or rejected and can no longer change."""


class PaymentError(HallBookingError):
    """Payment could not be started or completed.

    ``gateway_failure`` distinguishes gateway/transport problems from
    preconditions the user can fix (missing draft, wrong status).
    """

    def __init__(self, message: str, gateway_failure: bool = False):
        self.gateway_failure = gateway_failure
        super().__init__(message)
