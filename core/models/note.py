"""Credit and debit note models.

A note adjusts the balance of an existing invoice without touching the
invoice itself: credit notes reduce it, debit notes increase it. Notes own
their own line items.
"""

from enum import Enum
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from core.models.document import LineItemDocument
from core.models.line_item import LineItem, LineItemCreate
from core.money import DEFAULT_CURRENCY
from core.totals import sum_items
from utils.timezone import now_utc


class NoteType(str, Enum):
    """Direction of the adjustment."""

    CREDIT = "credit"
    DEBIT = "debit"


class NoteReason(str, Enum):
    """Why the note was issued."""

    PRODUCT_RETURN = "product_return"
    DEFECTIVE_PRODUCT = "defective_product"
    PRICE_ADJUSTMENT = "price_adjustment"
    DISCOUNT = "discount"
    SERVICE_NOT_PROVIDED = "service_not_provided"
    ADDITIONAL_CHARGE = "additional_charge"
    MISSING_ITEMS = "missing_items"
    INTEREST_CHARGES = "interest_charges"
    SHIPPING_ADJUSTMENT = "shipping_adjustment"
    OTHER = "other"


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("reason_description must not be blank")
    return value.strip()


class NoteCreate(BaseModel):
    """Data required to create a note."""

    type: NoteType
    invoice_id: UUID
    reason: NoteReason
    reason_description: str = Field(..., min_length=1, max_length=2000)
    items: list[LineItemCreate] = Field(default_factory=list)

    @field_validator("reason_description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _require_text(value)


class NoteUpdate(BaseModel):
    """Partial note update. A present `items` list replaces all items."""

    type: NoteType | None = None
    invoice_id: UUID | None = None
    reason: NoteReason | None = None
    reason_description: str | None = Field(None, min_length=1, max_length=2000)
    items: list[LineItemCreate] | None = None

    @field_validator("reason_description")
    @classmethod
    def not_blank(cls, value: str | None) -> str | None:
        return None if value is None else _require_text(value)


class NoteReplace(NoteCreate):
    """Full note replacement; same shape as creation."""


class Note(LineItemDocument):
    """Full note entity as stored."""

    kind: ClassVar[str] = "note"

    type: NoteType
    invoice_id: UUID
    reason: NoteReason
    reason_description: str

    @classmethod
    def create(
        cls,
        type: NoteType,
        invoice_id: UUID,
        reason: NoteReason,
        reason_description: str,
        number: str,
        items: list[LineItem] | None = None,
        currency: str = DEFAULT_CURRENCY
    ) -> "Note":
        note = cls(
            number=number,
            type=type,
            invoice_id=invoice_id,
            reason=reason,
            reason_description=reason_description,
            currency=currency,
        )
        note.replace_items(items or [])
        return note

    def calculate_totals(self) -> None:
        self.subtotal = sum_items(self.items, self.currency)
        self.total = self.subtotal
        self.updated_at = now_utc()

    @property
    def is_credit(self) -> bool:
        return self.type == NoteType.CREDIT
