"""GET /api/data — unified read endpoint."""

from uuid import UUID

from fastapi import APIRouter, Query, Request

from api.base import success_response
from api.middleware import get_request_id
from core.exceptions import NotFoundError
from core.lifecycle import InvoiceStatus


VALID_TYPES = {"company", "invoices", "notes"}

INVOICE_FILTERS = {"recent"} | {s.value for s in InvoiceStatus}
NOTE_FILTERS = {"credit", "debit"}


def _dump(items) -> list[dict]:
    return [i.model_dump(mode="json") for i in items]


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    company_svc = services["company"]
    invoice_svc = services["invoice"]
    note_svc = services["note"]

    # -------------------------------------------------------------------------
    # Convenience routes (must be registered before the generic /data route)
    # -------------------------------------------------------------------------

    @router.get("/data/invoices/stats")
    async def invoice_stats(request: Request):
        stats = invoice_svc.get_stats()
        return success_response(
            stats.model_dump(mode="json"), get_request_id(request)
        ).model_dump(mode="json")

    @router.get("/data/invoices/{invoice_id}/balance")
    async def invoice_balance(request: Request, invoice_id: UUID):
        balance = note_svc.get_invoice_balance(invoice_id)
        return success_response(
            balance.model_dump(mode="json"), get_request_id(request)
        ).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Generic data endpoint
    # -------------------------------------------------------------------------

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: UUID | None = Query(None),
        invoice_id: UUID | None = Query(None),
        include: str | None = Query(None),
        filter: str | None = Query(None),
        limit: int | None = Query(None, ge=1, le=100),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        includes = set(include.split(",")) if include else set()

        if type == "company":
            data = _handle_company(company_svc)
        elif type == "invoices":
            data = _handle_invoices(invoice_svc, note_svc, id, includes, filter, limit)
        else:
            data = _handle_notes(note_svc, id, invoice_id, filter, limit)

        return success_response(data, get_request_id(request)).model_dump(mode="json")

    return router


def _handle_company(company_svc):
    company = company_svc.get_company()
    return company.model_dump(mode="json") if company else None


def _handle_invoices(invoice_svc, note_svc, id, includes, filter, limit):
    if id:
        invoice = invoice_svc.get_invoice(id)
        if invoice is None:
            raise NotFoundError("Invoice", id)

        data = invoice.model_dump(mode="json")
        if "notes" in includes:
            data["notes_issued"] = _dump(note_svc.get_notes_by_invoice(invoice.id))
        if "balance" in includes:
            data["balance"] = note_svc.get_invoice_balance(invoice.id).model_dump(mode="json")
        return data

    if filter is not None and filter not in INVOICE_FILTERS:
        raise ValueError(
            f"Unknown invoice filter '{filter}'. Valid filters: {', '.join(sorted(INVOICE_FILTERS))}"
        )

    if filter == "recent":
        return _dump(invoice_svc.get_recent_invoices(limit))

    invoices = invoice_svc.get_all_invoices()
    if filter:
        invoices = [i for i in invoices if i.status.value == filter]
    if limit:
        invoices = invoices[:limit]
    return _dump(invoices)


def _handle_notes(note_svc, id, invoice_id, filter, limit):
    if id:
        note = note_svc.get_note(id)
        if note is None:
            raise NotFoundError("Note", id)
        return note.model_dump(mode="json")

    if filter is not None and filter not in NOTE_FILTERS:
        raise ValueError(
            f"Unknown note filter '{filter}'. Valid filters: {', '.join(sorted(NOTE_FILTERS))}"
        )

    if invoice_id:
        notes = note_svc.get_notes_by_invoice(invoice_id)
        if filter:
            notes = [n for n in notes if n.type.value == filter]
    elif filter == "credit":
        notes = note_svc.get_credit_notes()
    elif filter == "debit":
        notes = note_svc.get_debit_notes()
    else:
        notes = note_svc.get_all_notes()

    if limit:
        notes = notes[:limit]
    return _dump(notes)
