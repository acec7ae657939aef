"""Invoice domain models.

An invoice embeds a value copy of the company profile (tip settings
included) and optionally a client. Totals are derived from the items and the
snapshot's tip settings; status follows core.lifecycle.
"""

from datetime import date
from decimal import Decimal
from typing import ClassVar

from pydantic import BaseModel, Field

from core.lifecycle import InvoiceStatus, ensure_transition
from core.models.client import Client, ClientCreate
from core.models.company import CompanySnapshot
from core.models.document import LineItemDocument
from core.models.line_item import LineItem, LineItemCreate
from core.money import DEFAULT_CURRENCY, Money
from core.totals import compute_totals
from utils.timezone import now_utc


class InvoiceCreate(BaseModel):
    """Data for creating an invoice, optionally with items and a target status."""

    client: ClientCreate | None = None
    items: list[LineItemCreate] = Field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: str | None = Field(None, max_length=2000)
    due_date: date | None = None


class InvoiceUpdate(BaseModel):
    """
    Partial invoice update.

    Only fields present in the payload are applied; an explicit null clears
    client, notes or due_date. A present `items` list replaces all items.
    """

    client: ClientCreate | None = None
    items: list[LineItemCreate] | None = None
    status: InvoiceStatus | None = None
    notes: str | None = Field(None, max_length=2000)
    due_date: date | None = None


class InvoiceReplace(BaseModel):
    """Full invoice replacement. Omitted fields reset to their defaults."""

    client: ClientCreate | None = None
    items: list[LineItemCreate] = Field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: str | None = Field(None, max_length=2000)
    due_date: date | None = None


class Invoice(LineItemDocument):
    """Full invoice entity as stored."""

    kind: ClassVar[str] = "invoice"

    status: InvoiceStatus = InvoiceStatus.DRAFT
    company: CompanySnapshot
    client: Client | None = None
    tip_amount: Money = Field(default_factory=Money.zero)
    notes: str | None = None
    due_date: date | None = None

    @classmethod
    def create(
        cls,
        company: CompanySnapshot,
        number: str,
        client: Client | None = None,
        items: list[LineItem] | None = None,
        notes: str | None = None,
        due_date: date | None = None,
        currency: str = DEFAULT_CURRENCY
    ) -> "Invoice":
        """New DRAFT invoice with totals computed."""
        invoice = cls(
            number=number,
            company=company,
            client=client,
            notes=notes,
            due_date=due_date,
            currency=currency,
        )
        invoice.replace_items(items or [])
        return invoice

    def calculate_totals(self) -> None:
        totals = compute_totals(
            self.items,
            tip_percentage=self.company.tip_percentage,
            tip_enabled=self.company.tip_enabled,
            currency=self.currency,
        )
        self.subtotal = totals.subtotal
        self.tip_amount = totals.tip_amount
        self.total = totals.total
        self.updated_at = now_utc()

    def set_client(self, client: Client | None) -> None:
        self.client = client
        self.updated_at = now_utc()

    def transition_to(self, status: InvoiceStatus) -> InvoiceStatus:
        """
        Move to `status`, returning the previous status.

        Raises:
            InvoiceNotCompletableError: If completing without valid items.
                The status is left unchanged.
        """
        status = InvoiceStatus(status)
        ensure_transition(status, self.items, invoice_id=self.id)
        previous = self.status
        self.status = status
        self.updated_at = now_utc()
        return previous

    def mark_as_completed(self) -> None:
        self.transition_to(InvoiceStatus.COMPLETED)

    def mark_as_pending(self) -> None:
        self.transition_to(InvoiceStatus.PENDING)

    def mark_as_draft(self) -> None:
        self.transition_to(InvoiceStatus.DRAFT)

    @property
    def is_completed(self) -> bool:
        return self.status == InvoiceStatus.COMPLETED

    @property
    def total_amount(self) -> Decimal:
        return self.total.amount
