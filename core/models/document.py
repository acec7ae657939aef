"""Shared behaviour of documents that own line items (invoices and notes)."""

from datetime import datetime
from typing import ClassVar
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from core.exceptions import NotFoundError
from core.lifecycle import can_be_completed
from core.models.line_item import LineItem
from core.money import DEFAULT_CURRENCY, Money, ensure_same_currency
from utils.timezone import now_utc


class LineItemDocument(BaseModel):
    """
    A document with an ordered list of line items and derived totals.

    Every structural change (add, remove, update) recomputes totals from the
    full item list and touches updated_at. Items must be priced in the
    document's currency; a mismatch is rejected before the list changes.
    """

    id: UUID = Field(default_factory=uuid4)
    number: str
    currency: str = Field(DEFAULT_CURRENCY, pattern=r"^[A-Z]{3}$")
    items: list[LineItem] = Field(default_factory=list)
    subtotal: Money = Field(default_factory=Money.zero)
    total: Money = Field(default_factory=Money.zero)
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    model_config = {"from_attributes": True}

    # Used in error messages ("invoice", "note")
    kind: ClassVar[str] = "document"

    def calculate_totals(self) -> None:
        """Recompute subtotal and total from items. Subclasses must provide it."""
        raise NotImplementedError

    def _find_item(self, item_id: UUID) -> LineItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError("Item", item_id, within=self.kind)

    def add_item(self, item: LineItem) -> None:
        ensure_same_currency(self.currency, item.unit_price.currency)
        self.items.append(item)
        self.calculate_totals()

    def remove_item(self, item_id: UUID) -> LineItem:
        """
        Remove an item by id.

        Raises:
            NotFoundError: If the item is not part of this document
        """
        item = self._find_item(item_id)
        self.items = [i for i in self.items if i.id != item_id]
        self.calculate_totals()
        return item

    def update_item(
        self,
        item_id: UUID,
        description: str | None = None,
        quantity: Decimal | None = None,
        unit_price: Money | None = None
    ) -> LineItem:
        """
        Update fields of an item in place. Fields left as None are unchanged.

        Raises:
            NotFoundError: If the item is not part of this document
            CurrencyMismatchError: If unit_price is in another currency
        """
        item = self._find_item(item_id)
        if unit_price is not None:
            ensure_same_currency(self.currency, unit_price.currency)

        if description is not None:
            item.update_description(description)
        if quantity is not None:
            item.update_quantity(quantity)
        if unit_price is not None:
            item.update_unit_price(unit_price)

        self.calculate_totals()
        return item

    def replace_items(self, items: list[LineItem]) -> None:
        """Swap the whole item list, validating currencies first."""
        for item in items:
            ensure_same_currency(self.currency, item.unit_price.currency)
        self.items = list(items)
        self.calculate_totals()

    @property
    def has_valid_items(self) -> bool:
        return len(self.items) > 0

    @property
    def can_be_completed(self) -> bool:
        return can_be_completed(self.items)
