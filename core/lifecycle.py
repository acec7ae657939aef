"""
Invoice status machine.

    draft ──▶ pending ──▶ completed
      ▲          ▲            │
      └──────────┴────────────┘

Moving to COMPLETED is the only guarded transition: the invoice needs at
least one item and every item must be valid. Moving to PENDING or DRAFT is
always allowed, including out of COMPLETED.
"""

from enum import Enum
from typing import Iterable

from core.exceptions import InvoiceNotCompletableError


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "draft"
    PENDING = "pending"
    COMPLETED = "completed"


def can_be_completed(items: Iterable) -> bool:
    """True when there is at least one item and all items are valid."""
    items = list(items)
    return len(items) > 0 and all(item.is_valid for item in items)


def ensure_transition(target: InvoiceStatus, items: Iterable, invoice_id=None) -> None:
    """
    Check that an invoice holding `items` may move to `target`.

    Evaluated against the items as they are right now, never a cached flag.

    Raises:
        InvoiceNotCompletableError: If completing without valid items
    """
    if InvoiceStatus(target) == InvoiceStatus.COMPLETED and not can_be_completed(items):
        raise InvoiceNotCompletableError(invoice_id)
