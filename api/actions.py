"""POST /api/actions — unified mutation endpoint."""

from uuid import UUID

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response
from api.middleware import get_request_id
from core.exceptions import NotFoundError
from core.lifecycle import InvoiceStatus
from core.models import (
    CompanyCreate, CompanyUpdate, TipSettingsUpdate,
    ClientCreate,
    InvoiceCreate, InvoiceUpdate, InvoiceReplace,
    LineItemCreate, LineItemUpdate,
    NoteCreate, NoteUpdate, NoteReplace,
)


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


def _require_id(data: dict, key: str = "id") -> UUID:
    value = data.pop(key, None)
    if value is None:
        raise ValueError(f"'{key}' is required")
    return UUID(str(value))


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "company": CompanyHandler(services["company"]),
        "invoice": InvoiceHandler(services["invoice"]),
        "note": NoteHandler(services["note"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(dict(body.data))
        return success_response(result, get_request_id(request)).model_dump(mode="json")

    return router


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class CompanyHandler:
    ALLOWED_ACTIONS = {"create", "update", "update_tip_settings"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        company = self.service.create_company(CompanyCreate(**data))
        return company.model_dump(mode="json")

    def _handle_update(self, data: dict):
        company_id = _require_id(data)
        company = self.service.update_company(company_id, CompanyUpdate(**data))
        return company.model_dump(mode="json")

    def _handle_update_tip_settings(self, data: dict):
        company_id = _require_id(data)
        settings = TipSettingsUpdate.model_validate(data)
        company = self.service.update_tip_settings(
            company_id, settings.tip_percentage, settings.tip_enabled
        )
        return company.model_dump(mode="json")


class InvoiceHandler:
    ALLOWED_ACTIONS = {
        "create", "update", "replace", "delete",
        "add_item", "remove_item", "update_item",
        "update_status", "set_client",
    }

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        invoice = self.service.create_with_items(InvoiceCreate(**data))
        return invoice.model_dump(mode="json")

    def _handle_update(self, data: dict):
        invoice_id = _require_id(data)
        invoice = self.service.update_invoice(invoice_id, InvoiceUpdate(**data))
        return invoice.model_dump(mode="json")

    def _handle_replace(self, data: dict):
        invoice_id = _require_id(data)
        invoice = self.service.replace_invoice(invoice_id, InvoiceReplace(**data))
        return invoice.model_dump(mode="json")

    def _handle_delete(self, data: dict):
        invoice_id = _require_id(data)
        deleted = self.service.delete_invoice(invoice_id)
        if not deleted:
            raise NotFoundError("Invoice", invoice_id)
        return {"deleted": True}

    def _handle_add_item(self, data: dict):
        invoice_id = _require_id(data)
        invoice = self.service.add_item_to_invoice(invoice_id, LineItemCreate(**data))
        return invoice.model_dump(mode="json")

    def _handle_remove_item(self, data: dict):
        invoice_id = _require_id(data)
        item_id = _require_id(data, "item_id")
        invoice = self.service.remove_item_from_invoice(invoice_id, item_id)
        return invoice.model_dump(mode="json")

    def _handle_update_item(self, data: dict):
        invoice_id = _require_id(data)
        item_id = _require_id(data, "item_id")
        invoice = self.service.update_item_in_invoice(invoice_id, item_id, LineItemUpdate(**data))
        return invoice.model_dump(mode="json")

    def _handle_update_status(self, data: dict):
        invoice_id = _require_id(data)
        if "status" not in data:
            raise ValueError("'status' is required")
        invoice = self.service.update_invoice_status(invoice_id, InvoiceStatus(data["status"]))
        return invoice.model_dump(mode="json")

    def _handle_set_client(self, data: dict):
        invoice_id = _require_id(data)
        client_data = data.get("client")
        client = ClientCreate.model_validate(client_data) if client_data else None
        invoice = self.service.set_invoice_client(invoice_id, client)
        return invoice.model_dump(mode="json")


class NoteHandler:
    ALLOWED_ACTIONS = {
        "create", "update", "replace", "delete",
        "add_item", "remove_item", "update_item",
    }

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        note = self.service.create_note(NoteCreate(**data))
        return note.model_dump(mode="json")

    def _handle_update(self, data: dict):
        note_id = _require_id(data)
        note = self.service.update_note(note_id, NoteUpdate(**data))
        return note.model_dump(mode="json")

    def _handle_replace(self, data: dict):
        note_id = _require_id(data)
        note = self.service.replace_note(note_id, NoteReplace(**data))
        return note.model_dump(mode="json")

    def _handle_delete(self, data: dict):
        note_id = _require_id(data)
        deleted = self.service.delete_note(note_id)
        if not deleted:
            raise NotFoundError("Note", note_id)
        return {"deleted": True}

    def _handle_add_item(self, data: dict):
        note_id = _require_id(data)
        note = self.service.add_item_to_note(note_id, LineItemCreate(**data))
        return note.model_dump(mode="json")

    def _handle_remove_item(self, data: dict):
        note_id = _require_id(data)
        item_id = _require_id(data, "item_id")
        note = self.service.remove_item_from_note(note_id, item_id)
        return note.model_dump(mode="json")

    def _handle_update_item(self, data: dict):
        note_id = _require_id(data)
        item_id = _require_id(data, "item_id")
        note = self.service.update_item_in_note(note_id, item_id, LineItemUpdate(**data))
        return note.model_dump(mode="json")
