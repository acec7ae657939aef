"""
Note service for credit and debit notes.

A note is issued against an existing invoice and carries its own line items.
Credit notes reduce the invoice balance, debit notes increase it; the invoice
itself is never modified.
"""

import logging
from uuid import UUID

from core.audit import AuditLogger, AuditAction, compute_changes
from core.config import InvoicingConfig
from core.event_bus import EventBus
from core.events import NoteCreated
from core.exceptions import NotFoundError
from core.models import (
    Invoice, InvoiceBalance,
    LineItem, LineItemCreate, LineItemUpdate,
    Note, NoteCreate, NoteUpdate, NoteReplace, NoteType,
)
from core.repositories.base import InvoiceRepository, NoteRepository
from core.totals import compute_balance
from utils.timezone import now_utc, epoch_millis

logger = logging.getLogger(__name__)


class NoteService:
    """Service for note operations."""

    def __init__(
        self,
        notes: NoteRepository,
        invoices: InvoiceRepository,
        audit: AuditLogger,
        event_bus: EventBus,
        config: InvoicingConfig | None = None
    ):
        self.notes = notes
        self.invoices = invoices
        self.audit = audit
        self.event_bus = event_bus
        self.config = config or InvoicingConfig()

    def _generate_note_number(self, note_type: NoteType) -> str:
        """NC-YYYYMMDD-XXXXXX for credit notes, ND-... for debit notes."""
        prefix = (
            self.config.credit_note_prefix
            if note_type == NoteType.CREDIT
            else self.config.debit_note_prefix
        )
        now = now_utc()
        suffix = str(epoch_millis(now))[-6:]
        return f"{prefix}-{now:%Y%m%d}-{suffix}"

    def _require_invoice(self, invoice_id: UUID) -> Invoice:
        invoice = self.invoices.find_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    def _require(self, note_id: UUID) -> Note:
        note = self.notes.find_by_id(note_id)
        if note is None:
            raise NotFoundError("Note", note_id)
        return note

    def _save_changes(self, before: dict, note: Note) -> Note:
        updated = self.notes.update(note)

        changes = compute_changes(before, updated.model_dump(mode="json"))
        if changes:
            self.audit.log_change(
                entity_type="note",
                entity_id=updated.id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def create_note(self, data: NoteCreate) -> Note:
        """
        Issue a credit or debit note against an invoice.

        The note takes the invoice's currency.

        Args:
            data: Note creation data

        Returns:
            Created note

        Raises:
            NotFoundError: If the referenced invoice does not exist
            CurrencyMismatchError: If an item is priced in another currency
        """
        invoice = self._require_invoice(data.invoice_id)

        note = Note.create(
            type=data.type,
            invoice_id=invoice.id,
            reason=data.reason,
            reason_description=data.reason_description,
            number=self._generate_note_number(data.type),
            items=[LineItem.from_input(i) for i in data.items],
            currency=invoice.currency,
        )
        saved = self.notes.save(note)

        self.audit.log_change(
            entity_type="note",
            entity_id=saved.id,
            action=AuditAction.CREATE,
            changes={"created": saved.model_dump(mode="json")}
        )
        logger.info(f"Created {saved.type.value} note {saved.number} for invoice {invoice.id}")

        self.event_bus.publish(NoteCreated.create(note=saved))

        return saved

    def add_item_to_note(self, note_id: UUID, data: LineItemCreate) -> Note:
        """
        Raises:
            NotFoundError: If note not found
            CurrencyMismatchError: If the item is priced in another currency
        """
        note = self._require(note_id)
        before = note.model_dump(mode="json")

        note.add_item(LineItem.from_input(data))

        return self._save_changes(before, note)

    def remove_item_from_note(self, note_id: UUID, item_id: UUID) -> Note:
        """
        Raises:
            NotFoundError: If note or item not found
        """
        note = self._require(note_id)
        before = note.model_dump(mode="json")

        note.remove_item(item_id)

        return self._save_changes(before, note)

    def update_item_in_note(self, note_id: UUID, item_id: UUID, data: LineItemUpdate) -> Note:
        """
        Raises:
            NotFoundError: If note or item not found
            CurrencyMismatchError: If the new price is in another currency
        """
        note = self._require(note_id)
        before = note.model_dump(mode="json")

        note.update_item(
            item_id,
            description=data.description,
            quantity=data.quantity,
            unit_price=data.unit_price,
        )

        return self._save_changes(before, note)

    def update_note(self, note_id: UUID, data: NoteUpdate) -> Note:
        """
        Apply a partial update. Only fields present in `data` are touched.

        Moving a note to another invoice requires that invoice to exist.

        Raises:
            NotFoundError: If the note or the new invoice does not exist
            CurrencyMismatchError: If an item is priced in another currency
        """
        note = self._require(note_id)
        before = note.model_dump(mode="json")
        fields = data.model_fields_set

        if "invoice_id" in fields and data.invoice_id is not None and data.invoice_id != note.invoice_id:
            note.invoice_id = self._require_invoice(data.invoice_id).id
        if "type" in fields and data.type is not None:
            note.type = data.type
        if "reason" in fields and data.reason is not None:
            note.reason = data.reason
        if "reason_description" in fields and data.reason_description is not None:
            note.reason_description = data.reason_description
        if "items" in fields and data.items is not None:
            note.replace_items([LineItem.from_input(i) for i in data.items])

        note.updated_at = now_utc()
        return self._save_changes(before, note)

    def replace_note(self, note_id: UUID, data: NoteReplace) -> Note:
        """
        Replace type, invoice, reason and items wholesale.

        Raises:
            NotFoundError: If the note or the referenced invoice does not exist
            CurrencyMismatchError: If an item is priced in another currency
        """
        note = self._require(note_id)
        before = note.model_dump(mode="json")

        if data.invoice_id != note.invoice_id:
            self._require_invoice(data.invoice_id)

        note.type = data.type
        note.invoice_id = data.invoice_id
        note.reason = data.reason
        note.reason_description = data.reason_description
        note.replace_items([LineItem.from_input(i) for i in data.items])

        return self._save_changes(before, note)

    def get_note(self, note_id: UUID) -> Note | None:
        return self.notes.find_by_id(note_id)

    def get_all_notes(self) -> list[Note]:
        """All notes, newest first."""
        return self.notes.find_all()

    def get_notes_by_invoice(self, invoice_id: UUID) -> list[Note]:
        return self.notes.find_by_invoice_id(invoice_id)

    def get_credit_notes(self) -> list[Note]:
        return self.notes.find_by_type(NoteType.CREDIT)

    def get_debit_notes(self) -> list[Note]:
        return self.notes.find_by_type(NoteType.DEBIT)

    def delete_note(self, note_id: UUID) -> bool:
        """
        Delete a note.

        Returns:
            True if deleted, False if not found
        """
        current = self.notes.find_by_id(note_id)
        if current is None:
            return False

        self.notes.delete(note_id)

        self.audit.log_change(
            entity_type="note",
            entity_id=note_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )
        logger.info(f"Deleted note {current.number} ({note_id})")

        return True

    def get_invoice_balance(self, invoice_id: UUID) -> InvoiceBalance:
        """
        Invoice total minus credit notes plus debit notes.

        Raises:
            NotFoundError: If invoice not found
            CurrencyMismatchError: If a note is in another currency than the invoice
        """
        invoice = self._require_invoice(invoice_id)
        notes = self.notes.find_by_invoice_id(invoice_id)
        return compute_balance(invoice, notes)
