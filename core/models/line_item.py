"""Line item domain models.

A line item has no identity outside the invoice or note that owns it.
Its total is derived: quantity * unit price, in the unit price's currency.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from core.money import ZERO, Money, to_decimal
from utils.timezone import now_utc


def _clamp_price(price: Money) -> Money:
    if price.amount < ZERO:
        return Money(amount=ZERO, currency=price.currency)
    return price


class LineItemCreate(BaseModel):
    """Data required to add a line item."""

    description: str = Field(..., max_length=500)
    quantity: Decimal
    unit_price: Money


class LineItemUpdate(BaseModel):
    """Data that can be updated on a line item. All fields optional."""

    description: str | None = Field(None, max_length=500)
    quantity: Decimal | None = None
    unit_price: Money | None = None


class LineItem(BaseModel):
    """Full line item entity as stored inside its document."""

    id: UUID = Field(default_factory=uuid4)
    description: str = ""
    quantity: Decimal = ZERO
    unit_price: Money = Field(default_factory=Money.zero)
    total: Money = Field(default_factory=Money.zero)
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def normalize(self) -> "LineItem":
        """Clamp negative quantity and price, then derive the total."""
        self.quantity = max(ZERO, self.quantity)
        self.unit_price = _clamp_price(self.unit_price)
        self.total = Money(
            amount=self.quantity * self.unit_price.amount,
            currency=self.unit_price.currency
        )
        return self

    @classmethod
    def create(cls, description: str, quantity, unit_price: Money) -> "LineItem":
        return cls(description=description.strip(), quantity=to_decimal(quantity), unit_price=unit_price)

    @classmethod
    def from_input(cls, data: LineItemCreate) -> "LineItem":
        return cls.create(data.description, data.quantity, data.unit_price)

    def calculate_total(self) -> None:
        self.total = Money(
            amount=self.quantity * self.unit_price.amount,
            currency=self.unit_price.currency
        )
        self.updated_at = now_utc()

    def update_quantity(self, quantity) -> None:
        self.quantity = max(ZERO, to_decimal(quantity))
        self.calculate_total()

    def update_unit_price(self, unit_price: Money) -> None:
        self.unit_price = _clamp_price(unit_price)
        self.calculate_total()

    def update_description(self, description: str) -> None:
        self.description = description.strip()
        self.updated_at = now_utc()

    @property
    def is_valid(self) -> bool:
        """Billable: non-blank description, positive quantity and price."""
        return bool(
            self.description.strip()
            and self.quantity > ZERO
            and self.unit_price.amount > ZERO
        )
