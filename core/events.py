"""
Domain events for invoicing.

Immutable event objects describing what happened to an invoice or note.
Services publish them after the change is persisted; listeners react without
the publisher knowing who is listening.

Events carry the full domain object so handlers don't need to re-fetch state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class InvoicingEvent:
    """Base class for all invoicing domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# INVOICE EVENTS
# =============================================================================


@dataclass(frozen=True)
class InvoiceEvent(InvoicingEvent):
    """Events related to the invoice lifecycle."""
    invoice: Any = None  # Invoice; Any avoids a models import cycle


@dataclass(frozen=True)
class InvoiceCreated(InvoiceEvent):
    """A new invoice was created."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceCreated":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceCompleted(InvoiceEvent):
    """An invoice moved to COMPLETED."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceCompleted":
        return cls(invoice=invoice)


@dataclass(frozen=True)
class InvoiceDeleted(InvoiceEvent):
    """An invoice was deleted. Carries the invoice as it was."""

    @classmethod
    def create(cls, invoice: Any) -> "InvoiceDeleted":
        return cls(invoice=invoice)


# =============================================================================
# NOTE EVENTS
# =============================================================================


@dataclass(frozen=True)
class NoteEvent(InvoicingEvent):
    """Events related to credit/debit notes."""
    note: Any = None


@dataclass(frozen=True)
class NoteCreated(NoteEvent):
    """A credit or debit note was issued against an invoice."""

    @classmethod
    def create(cls, note: Any) -> "NoteCreated":
        return cls(note=note)
