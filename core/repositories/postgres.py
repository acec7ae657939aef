"""
PostgreSQL repositories.

The company snapshot, client and line items live in JSONB columns of their
owning row; an invoice or note is always read and written as one row.
Table definitions are in db/schema.sql.
"""

import logging
from typing import Any
from uuid import UUID

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from core.exceptions import NotFoundError
from core.models import Company, Invoice, Note, NoteType

logger = logging.getLogger(__name__)


def _money(amount, currency: str) -> dict[str, Any]:
    return {"amount": amount, "currency": currency}


def _items_json(document) -> Json:
    return Json([item.model_dump(mode="json") for item in document.items])


# =============================================================================
# COMPANY
# =============================================================================


class PostgresCompanyRepository:
    """Company profile rows."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def save(self, company: Company) -> Company:
        row = self.postgres.execute_returning(
            """
            INSERT INTO companies (
                id, name, address, phone, email, website, tax_id, logo,
                tip_percentage, tip_enabled, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s, %s, %s, %s,
                %s, %s, %s, %s
            )
            RETURNING *
            """,
            (
                company.id, company.name, company.address, company.phone,
                company.email, company.website, company.tax_id, company.logo,
                company.tip_percentage, company.tip_enabled,
                company.created_at, company.updated_at
            )
        )[0]
        return Company.model_validate(row)

    def find_by_id(self, company_id: UUID) -> Company | None:
        row = self.postgres.execute_single(
            "SELECT * FROM companies WHERE id = %s",
            (company_id,)
        )
        return Company.model_validate(row) if row is not None else None

    def find_first(self) -> Company | None:
        row = self.postgres.execute_single(
            "SELECT * FROM companies ORDER BY created_at ASC LIMIT 1"
        )
        return Company.model_validate(row) if row is not None else None

    def update(self, company: Company) -> Company:
        rows = self.postgres.execute_returning(
            """
            UPDATE companies
            SET name = %s, address = %s, phone = %s, email = %s,
                website = %s, tax_id = %s, logo = %s,
                tip_percentage = %s, tip_enabled = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (
                company.name, company.address, company.phone, company.email,
                company.website, company.tax_id, company.logo,
                company.tip_percentage, company.tip_enabled, company.updated_at,
                company.id
            )
        )
        if not rows:
            raise NotFoundError("Company", company.id)
        return Company.model_validate(rows[0])

    def delete(self, company_id: UUID) -> bool:
        rows = self.postgres.execute_returning(
            "DELETE FROM companies WHERE id = %s RETURNING id",
            (company_id,)
        )
        return len(rows) > 0


# =============================================================================
# INVOICE
# =============================================================================


def _row_to_invoice(row: dict[str, Any]) -> Invoice:
    currency = row["currency"]
    return Invoice.model_validate({
        "id": row["id"],
        "number": row["number"],
        "status": row["status"],
        "company": row["company"],
        "client": row["client"],
        "currency": currency,
        "items": row["items"] or [],
        "subtotal": _money(row["subtotal_amount"], currency),
        "tip_amount": _money(row["tip_amount"], currency),
        "total": _money(row["total_amount"], currency),
        "notes": row["notes"],
        "due_date": row["due_date"],
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    })


class PostgresInvoiceRepository:
    """Invoice rows, newest first."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def save(self, invoice: Invoice) -> Invoice:
        row = self.postgres.execute_returning(
            """
            INSERT INTO invoices (
                id, number, status, company, client, currency, items,
                subtotal_amount, tip_amount, total_amount,
                notes, due_date, created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s, %s, %s,
                %s, %s, %s,
                %s, %s, %s, %s
            )
            RETURNING *
            """,
            (
                invoice.id, invoice.number, invoice.status.value,
                Json(invoice.company.model_dump(mode="json")),
                Json(invoice.client.model_dump(mode="json")) if invoice.client else None,
                invoice.currency, _items_json(invoice),
                invoice.subtotal.amount, invoice.tip_amount.amount, invoice.total.amount,
                invoice.notes, invoice.due_date, invoice.created_at, invoice.updated_at
            )
        )[0]
        return _row_to_invoice(row)

    def find_by_id(self, invoice_id: UUID) -> Invoice | None:
        row = self.postgres.execute_single(
            "SELECT * FROM invoices WHERE id = %s",
            (invoice_id,)
        )
        return _row_to_invoice(row) if row is not None else None

    def find_all(self) -> list[Invoice]:
        rows = self.postgres.execute(
            "SELECT * FROM invoices ORDER BY created_at DESC"
        )
        return [_row_to_invoice(row) for row in rows]

    def find_recent(self, limit: int = 10) -> list[Invoice]:
        rows = self.postgres.execute(
            "SELECT * FROM invoices ORDER BY created_at DESC LIMIT %s",
            (limit,)
        )
        return [_row_to_invoice(row) for row in rows]

    def update(self, invoice: Invoice) -> Invoice:
        rows = self.postgres.execute_returning(
            """
            UPDATE invoices
            SET number = %s, status = %s, company = %s, client = %s,
                currency = %s, items = %s,
                subtotal_amount = %s, tip_amount = %s, total_amount = %s,
                notes = %s, due_date = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (
                invoice.number, invoice.status.value,
                Json(invoice.company.model_dump(mode="json")),
                Json(invoice.client.model_dump(mode="json")) if invoice.client else None,
                invoice.currency, _items_json(invoice),
                invoice.subtotal.amount, invoice.tip_amount.amount, invoice.total.amount,
                invoice.notes, invoice.due_date, invoice.updated_at,
                invoice.id
            )
        )
        if not rows:
            raise NotFoundError("Invoice", invoice.id)
        return _row_to_invoice(rows[0])

    def delete(self, invoice_id: UUID) -> bool:
        rows = self.postgres.execute_returning(
            "DELETE FROM invoices WHERE id = %s RETURNING id",
            (invoice_id,)
        )
        return len(rows) > 0


# =============================================================================
# NOTE
# =============================================================================


def _row_to_note(row: dict[str, Any]) -> Note:
    currency = row["currency"]
    return Note.model_validate({
        "id": row["id"],
        "number": row["number"],
        "type": row["type"],
        "invoice_id": row["invoice_id"],
        "reason": row["reason"],
        "reason_description": row["reason_description"],
        "currency": currency,
        "items": row["items"] or [],
        "subtotal": _money(row["subtotal_amount"], currency),
        "total": _money(row["total_amount"], currency),
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    })


class PostgresNoteRepository:
    """Credit/debit note rows, newest first."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def save(self, note: Note) -> Note:
        row = self.postgres.execute_returning(
            """
            INSERT INTO notes (
                id, number, type, invoice_id, reason, reason_description,
                currency, items, subtotal_amount, total_amount,
                created_at, updated_at
            ) VALUES (
                %s, %s, %s, %s, %s, %s,
                %s, %s, %s, %s,
                %s, %s
            )
            RETURNING *
            """,
            (
                note.id, note.number, note.type.value, note.invoice_id,
                note.reason.value, note.reason_description,
                note.currency, _items_json(note),
                note.subtotal.amount, note.total.amount,
                note.created_at, note.updated_at
            )
        )[0]
        return _row_to_note(row)

    def find_by_id(self, note_id: UUID) -> Note | None:
        row = self.postgres.execute_single(
            "SELECT * FROM notes WHERE id = %s",
            (note_id,)
        )
        return _row_to_note(row) if row is not None else None

    def find_all(self) -> list[Note]:
        rows = self.postgres.execute(
            "SELECT * FROM notes ORDER BY created_at DESC"
        )
        return [_row_to_note(row) for row in rows]

    def find_by_invoice_id(self, invoice_id: UUID) -> list[Note]:
        rows = self.postgres.execute(
            "SELECT * FROM notes WHERE invoice_id = %s ORDER BY created_at DESC",
            (invoice_id,)
        )
        return [_row_to_note(row) for row in rows]

    def find_by_type(self, note_type: NoteType) -> list[Note]:
        rows = self.postgres.execute(
            "SELECT * FROM notes WHERE type = %s ORDER BY created_at DESC",
            (NoteType(note_type).value,)
        )
        return [_row_to_note(row) for row in rows]

    def update(self, note: Note) -> Note:
        rows = self.postgres.execute_returning(
            """
            UPDATE notes
            SET number = %s, type = %s, invoice_id = %s, reason = %s,
                reason_description = %s, currency = %s, items = %s,
                subtotal_amount = %s, total_amount = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (
                note.number, note.type.value, note.invoice_id, note.reason.value,
                note.reason_description, note.currency, _items_json(note),
                note.subtotal.amount, note.total.amount, note.updated_at,
                note.id
            )
        )
        if not rows:
            raise NotFoundError("Note", note.id)
        return _row_to_note(rows[0])

    def delete(self, note_id: UUID) -> bool:
        rows = self.postgres.execute_returning(
            "DELETE FROM notes WHERE id = %s RETURNING id",
            (note_id,)
        )
        return len(rows) > 0
