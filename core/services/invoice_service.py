"""
Invoice service for billing documents.

An invoice is created against the company profile (copied into the invoice by
value), starts as DRAFT, collects line items and moves through
draft/pending/completed. Totals are recomputed by the entity on every item
change; this service loads, mutates, persists, audits and publishes events.
"""

import logging
from datetime import date
from uuid import UUID

from core.audit import AuditLogger, AuditAction, compute_changes
from core.config import InvoicingConfig
from core.event_bus import EventBus
from core.events import InvoiceCreated, InvoiceCompleted, InvoiceDeleted
from core.exceptions import NotFoundError, PreconditionError
from core.lifecycle import InvoiceStatus
from core.models import (
    Client, ClientCreate, CompanySnapshot,
    Invoice, InvoiceCreate, InvoiceUpdate, InvoiceReplace, InvoiceStats,
    LineItem, LineItemCreate, LineItemUpdate,
)
from core.repositories.base import CompanyRepository, InvoiceRepository
from core.totals import compute_stats
from utils.timezone import now_utc, epoch_millis

logger = logging.getLogger(__name__)


class InvoiceService:
    """Service for invoice operations."""

    def __init__(
        self,
        invoices: InvoiceRepository,
        companies: CompanyRepository,
        audit: AuditLogger,
        event_bus: EventBus,
        config: InvoicingConfig | None = None
    ):
        self.invoices = invoices
        self.companies = companies
        self.audit = audit
        self.event_bus = event_bus
        self.config = config or InvoicingConfig()

    def _generate_invoice_number(self) -> str:
        """
        Generate an invoice number.

        Format: INV-YYYYMMDD-XXXXXX where XXXXXX are the last six digits of
        the current epoch milliseconds.
        """
        now = now_utc()
        suffix = str(epoch_millis(now))[-6:]
        return f"{self.config.invoice_number_prefix}-{now:%Y%m%d}-{suffix}"

    def _company_snapshot(self) -> CompanySnapshot:
        company = self.companies.find_first()
        if company is None or not company.is_complete:
            raise PreconditionError(
                "Company information is required to create invoices. "
                "Please set up company data first."
            )
        return company.snapshot()

    def _require(self, invoice_id: UUID) -> Invoice:
        invoice = self.invoices.find_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    def _build(
        self,
        client: ClientCreate | None,
        items: list[LineItemCreate],
        notes: str | None,
        due_date: date | None
    ) -> Invoice:
        return Invoice.create(
            company=self._company_snapshot(),
            number=self._generate_invoice_number(),
            client=Client.from_input(client) if client else None,
            items=[LineItem.from_input(i) for i in items],
            notes=notes,
            due_date=due_date,
            currency=self.config.default_currency,
        )

    def _save_new(self, invoice: Invoice) -> Invoice:
        saved = self.invoices.save(invoice)

        self.audit.log_change(
            entity_type="invoice",
            entity_id=saved.id,
            action=AuditAction.CREATE,
            changes={"created": saved.model_dump(mode="json")}
        )
        logger.info(f"Created invoice {saved.number} ({saved.id})")

        self.event_bus.publish(InvoiceCreated.create(invoice=saved))
        if saved.status == InvoiceStatus.COMPLETED:
            self.event_bus.publish(InvoiceCompleted.create(invoice=saved))

        return saved

    def _save_changes(self, before: dict, previous_status: InvoiceStatus, invoice: Invoice) -> Invoice:
        """Persist a mutated invoice, audit the diff and publish completion."""
        updated = self.invoices.update(invoice)

        changes = compute_changes(before, updated.model_dump(mode="json"))
        if changes:
            self.audit.log_change(
                entity_type="invoice",
                entity_id=updated.id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        if updated.status != previous_status:
            logger.info(
                f"Invoice {updated.id} status {previous_status.value} -> {updated.status.value}"
            )
            if updated.status == InvoiceStatus.COMPLETED:
                self.event_bus.publish(InvoiceCompleted.create(invoice=updated))

        return updated

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_invoice(
        self,
        client: ClientCreate | None = None,
        notes: str | None = None,
        due_date: date | None = None
    ) -> Invoice:
        """
        Create an empty DRAFT invoice for the company profile.

        Raises:
            PreconditionError: If no company profile has been set up
        """
        return self._save_new(self._build(client, [], notes, due_date))

    def create_with_items(self, data: InvoiceCreate) -> Invoice:
        """
        Create an invoice with items and an initial status in one step.

        The invoice is assembled in memory first, so a failed completion
        guard or currency check leaves nothing persisted.

        Raises:
            PreconditionError: If no company profile has been set up
            InvoiceNotCompletableError: If status is COMPLETED without valid items
            CurrencyMismatchError: If an item is priced in another currency
        """
        invoice = self._build(data.client, data.items, data.notes, data.due_date)
        if data.status != InvoiceStatus.DRAFT:
            invoice.transition_to(data.status)
        return self._save_new(invoice)

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def add_item_to_invoice(self, invoice_id: UUID, data: LineItemCreate) -> Invoice:
        """
        Append a line item and recompute totals.

        Raises:
            NotFoundError: If invoice not found
            CurrencyMismatchError: If the item is priced in another currency
        """
        invoice = self._require(invoice_id)
        before = invoice.model_dump(mode="json")

        invoice.add_item(LineItem.from_input(data))

        return self._save_changes(before, invoice.status, invoice)

    def remove_item_from_invoice(self, invoice_id: UUID, item_id: UUID) -> Invoice:
        """
        Remove a line item and recompute totals.

        Raises:
            NotFoundError: If invoice or item not found
        """
        invoice = self._require(invoice_id)
        before = invoice.model_dump(mode="json")

        invoice.remove_item(item_id)

        return self._save_changes(before, invoice.status, invoice)

    def update_item_in_invoice(self, invoice_id: UUID, item_id: UUID, data: LineItemUpdate) -> Invoice:
        """
        Update a line item's description, quantity and/or unit price.

        Raises:
            NotFoundError: If invoice or item not found
            CurrencyMismatchError: If the new price is in another currency
        """
        invoice = self._require(invoice_id)
        before = invoice.model_dump(mode="json")

        invoice.update_item(
            item_id,
            description=data.description,
            quantity=data.quantity,
            unit_price=data.unit_price,
        )

        return self._save_changes(before, invoice.status, invoice)

    # -------------------------------------------------------------------------
    # Status, client, edits
    # -------------------------------------------------------------------------

    def update_invoice_status(self, invoice_id: UUID, status: InvoiceStatus) -> Invoice:
        """
        Move an invoice to a new status.

        Completion is re-checked against the current items every time, even
        for an invoice that was completed before.

        Raises:
            NotFoundError: If invoice not found
            InvoiceNotCompletableError: If completing without valid items
        """
        invoice = self._require(invoice_id)
        before = invoice.model_dump(mode="json")

        previous = invoice.transition_to(status)

        return self._save_changes(before, previous, invoice)

    def set_invoice_client(self, invoice_id: UUID, client: ClientCreate | None) -> Invoice:
        """
        Attach, replace or (with None) remove the invoice's client.

        Raises:
            NotFoundError: If invoice not found
        """
        invoice = self._require(invoice_id)
        before = invoice.model_dump(mode="json")

        invoice.set_client(Client.from_input(client) if client else None)

        return self._save_changes(before, invoice.status, invoice)

    def update_invoice(self, invoice_id: UUID, data: InvoiceUpdate) -> Invoice:
        """
        Apply a partial update. Only fields present in `data` are touched.

        Raises:
            NotFoundError: If invoice not found
            InvoiceNotCompletableError: If completing without valid items
            CurrencyMismatchError: If an item is priced in another currency
        """
        invoice = self._require(invoice_id)
        before = invoice.model_dump(mode="json")
        previous = invoice.status
        fields = data.model_fields_set

        if "client" in fields:
            invoice.set_client(Client.from_input(data.client) if data.client else None)
        if "items" in fields and data.items is not None:
            invoice.replace_items([LineItem.from_input(i) for i in data.items])
        if "notes" in fields:
            invoice.notes = data.notes
        if "due_date" in fields:
            invoice.due_date = data.due_date
        if "status" in fields and data.status is not None:
            invoice.transition_to(data.status)

        invoice.updated_at = now_utc()
        return self._save_changes(before, previous, invoice)

    def replace_invoice(self, invoice_id: UUID, data: InvoiceReplace) -> Invoice:
        """
        Replace client, items, notes, due date and status wholesale.

        Number, company snapshot and creation time are kept.

        Raises:
            NotFoundError: If invoice not found
            InvoiceNotCompletableError: If completing without valid items
            CurrencyMismatchError: If an item is priced in another currency
        """
        invoice = self._require(invoice_id)
        before = invoice.model_dump(mode="json")
        previous = invoice.status

        invoice.set_client(Client.from_input(data.client) if data.client else None)
        invoice.replace_items([LineItem.from_input(i) for i in data.items])
        invoice.notes = data.notes
        invoice.due_date = data.due_date
        invoice.transition_to(data.status)

        return self._save_changes(before, previous, invoice)

    # -------------------------------------------------------------------------
    # Reads and delete
    # -------------------------------------------------------------------------

    def get_invoice(self, invoice_id: UUID) -> Invoice | None:
        """Invoice by id, or None."""
        return self.invoices.find_by_id(invoice_id)

    def get_all_invoices(self) -> list[Invoice]:
        """All invoices, newest first."""
        return self.invoices.find_all()

    def get_recent_invoices(self, limit: int | None = None) -> list[Invoice]:
        """Most recent invoices, newest first."""
        if limit is None:
            limit = self.config.recent_invoices_limit
        return self.invoices.find_recent(limit)

    def delete_invoice(self, invoice_id: UUID) -> bool:
        """
        Delete an invoice. Notes referencing it are left untouched.

        Returns:
            True if deleted, False if not found
        """
        current = self.invoices.find_by_id(invoice_id)
        if current is None:
            return False

        self.invoices.delete(invoice_id)

        self.audit.log_change(
            entity_type="invoice",
            entity_id=invoice_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )
        logger.info(f"Deleted invoice {current.number} ({invoice_id})")

        self.event_bus.publish(InvoiceDeleted.create(invoice=current))

        return True

    def get_stats(self) -> InvoiceStats:
        """Counts per status plus total and current-month completed revenue."""
        return compute_stats(self.invoices.find_all(), now_utc())
