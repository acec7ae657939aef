"""Money value object.

Amounts are Decimal to keep percentage arithmetic exact. Every document
works in a single currency; combining two currencies fails fast instead of
silently keeping the first-seen code.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from core.exceptions import CurrencyMismatchError

DEFAULT_CURRENCY = "COP"

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Coerce ints, floats and strings to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def ensure_same_currency(expected: str, actual: str) -> None:
    """Raise CurrencyMismatchError unless both codes are equal."""
    if expected != actual:
        raise CurrencyMismatchError(expected, actual)


class Money(BaseModel):
    """An amount in a given ISO 4217 currency."""

    amount: Decimal = ZERO
    currency: str = Field(DEFAULT_CURRENCY, pattern=r"^[A-Z]{3}$")

    model_config = {"frozen": True}

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(amount=ZERO, currency=currency)

    def plus(self, other: "Money") -> "Money":
        ensure_same_currency(self.currency, other.currency)
        return Money(amount=self.amount + other.amount, currency=self.currency)
