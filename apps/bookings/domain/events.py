"""
Hall Booking Domain Events

Published after the transaction that produced them commits.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass
class PaymentStarted(DomainEvent):
    """A checkout session was opened for the booking (draft -> payment_processing)."""
    booking_id: Optional[int] = None
    checkout_id: str = ''
    amount: Decimal = Decimal('0.00')


@dataclass
class PaymentFailed(DomainEvent):
    """The gateway reported a failure; the booking is editable again."""
    booking_id: Optional[int] = None
    reason: str = ''


@dataclass
class BookingConfirmed(DomainEvent):
    """
    Payment succeeded (payment_processing -> confirmed)

    Triggers:
    - Confirmation email to the applicant and the hall admin
    - In-app notification for the user
    """
    booking_id: Optional[int] = None
    booking_reference: str = ''
    user_id: Optional[int] = None
    payment_reference: str = ''


@dataclass
class BookingRejected(DomainEvent):
    """Staff rejected the application."""
    booking_id: Optional[int] = None
    user_id: Optional[int] = None
    reason: str = ''
