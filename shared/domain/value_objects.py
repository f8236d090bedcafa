"""
Common Value Objects

- Money: monetary amounts with currency (hall fees are charged in ZAR)
- TimeWindow: start/end time of an event on a single day
"""

from dataclasses import dataclass
from datetime import time
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('ZAR', 'USD', 'EUR')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Immutable; arithmetic only between equal currencies.
    """
    amount: Decimal
    currency: str = 'ZAR'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    @property
    def cents(self) -> int:
        """Amount in minor units, as payment gateways expect it."""
        return int((self.amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    def __str__(self):
        symbol = 'R' if self.currency == 'ZAR' else f'{self.currency} '
        return f"{symbol}{self.amount:,.2f}"


@dataclass(frozen=True)
class TimeWindow(ValueObject):
    """
    Start and end time of an event

    Not validated on construction: the booking form reports ordering and
    curfew problems as messages instead of raising.
    """
    start: time
    end: time

    @property
    def is_ordered(self) -> bool:
        return self.start < self.end

    def ends_by(self, curfew: time) -> bool:
        """True when the window ends at or before the curfew."""
        return self.end <= curfew

    def __str__(self):
        return f"{self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"
