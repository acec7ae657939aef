"""Core domain models."""

from core.money import Money, DEFAULT_CURRENCY
from core.lifecycle import InvoiceStatus
from core.totals import Totals, InvoiceBalance, InvoiceStats
from core.models.line_item import LineItem, LineItemCreate, LineItemUpdate
from core.models.company import Company, CompanyCreate, CompanyUpdate, CompanySnapshot, TipSettingsUpdate
from core.models.client import Client, ClientCreate, IdentificationType
from core.models.invoice import Invoice, InvoiceCreate, InvoiceUpdate, InvoiceReplace
from core.models.note import Note, NoteCreate, NoteUpdate, NoteReplace, NoteType, NoteReason

__all__ = [
    # Money
    "Money", "DEFAULT_CURRENCY", "Totals", "InvoiceBalance", "InvoiceStats",
    # LineItem
    "LineItem", "LineItemCreate", "LineItemUpdate",
    # Company
    "Company", "CompanyCreate", "CompanyUpdate", "CompanySnapshot", "TipSettingsUpdate",
    # Client
    "Client", "ClientCreate", "IdentificationType",
    # Invoice
    "Invoice", "InvoiceCreate", "InvoiceUpdate", "InvoiceReplace", "InvoiceStatus",
    # Note
    "Note", "NoteCreate", "NoteUpdate", "NoteReplace", "NoteType", "NoteReason",
]
