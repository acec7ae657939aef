"""
Money arithmetic for invoices and credit/debit notes.

Everything here is a pure function over data already loaded in memory:
totals are always recomputed from the full item list (O(n)), never patched
incrementally.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel

from core.lifecycle import InvoiceStatus
from core.money import DEFAULT_CURRENCY, ZERO, Money, ensure_same_currency, to_decimal
from utils.timezone import to_utc

_HUNDRED = Decimal("100")

_CREDIT = "credit"
_DEBIT = "debit"


class Totals(BaseModel):
    """Derived amounts of a document."""

    subtotal: Money
    tip_amount: Money
    total: Money

    model_config = {"frozen": True}


class InvoiceBalance(BaseModel):
    """Invoice total netted against its credit and debit notes."""

    original_amount: Decimal
    credit_notes_total: Decimal
    debit_notes_total: Decimal
    final_balance: Decimal
    currency: str = DEFAULT_CURRENCY

    model_config = {"frozen": True}


class InvoiceStats(BaseModel):
    """Dashboard counters over all invoices."""

    total_invoices: int = 0
    completed_invoices: int = 0
    pending_invoices: int = 0
    total_revenue: Decimal = ZERO
    monthly_revenue: Decimal = ZERO


def sum_items(items: Iterable, currency: str = DEFAULT_CURRENCY) -> Money:
    """
    Sum item totals into a subtotal.

    Raises:
        CurrencyMismatchError: If any item is priced in another currency
    """
    subtotal = Money.zero(currency)
    for item in items:
        subtotal = subtotal.plus(item.total)
    return subtotal


def compute_tip(subtotal: Money, percentage, enabled: bool) -> Money:
    """Tip on a subtotal; zero whenever tipping is disabled."""
    if not enabled:
        return Money.zero(subtotal.currency)
    amount = subtotal.amount * to_decimal(percentage) / _HUNDRED
    return Money(amount=amount, currency=subtotal.currency)


def compute_totals(
    items: Iterable,
    tip_percentage=ZERO,
    tip_enabled: bool = False,
    currency: str = DEFAULT_CURRENCY
) -> Totals:
    """
    Subtotal, tip and total for a sequence of line items.

    Args:
        items: Line items (anything with a `total` Money)
        tip_percentage: Percentage applied to the subtotal, 0-100
        tip_enabled: Whether the tip applies at all
        currency: Currency of the owning document

    Returns:
        Totals with total == subtotal + tip
    """
    subtotal = sum_items(items, currency)
    tip_amount = compute_tip(subtotal, tip_percentage, tip_enabled)
    total = subtotal.plus(tip_amount)
    return Totals(subtotal=subtotal, tip_amount=tip_amount, total=total)


def compute_balance(invoice, notes: Iterable) -> InvoiceBalance:
    """
    Net an invoice's total against the notes that reference it.

    Credit notes reduce the balance, debit notes increase it. The invoice
    itself is never modified.

    Raises:
        CurrencyMismatchError: If a note is in a different currency than the invoice
    """
    currency = invoice.total.currency
    credit_total = ZERO
    debit_total = ZERO

    for note in notes:
        ensure_same_currency(currency, note.total.currency)
        if note.type == _CREDIT:
            credit_total += note.total.amount
        elif note.type == _DEBIT:
            debit_total += note.total.amount

    original = invoice.total.amount
    return InvoiceBalance(
        original_amount=original,
        credit_notes_total=credit_total,
        debit_notes_total=debit_total,
        final_balance=original - credit_total + debit_total,
        currency=currency,
    )


def compute_stats(invoices: Iterable, now: datetime) -> InvoiceStats:
    """
    Count invoices per status and sum completed revenue.

    Monthly revenue covers completed invoices last updated in the same UTC
    calendar month as `now`.
    """
    now = to_utc(now)
    stats = InvoiceStats()

    for invoice in invoices:
        stats.total_invoices += 1

        if invoice.status == InvoiceStatus.COMPLETED:
            stats.completed_invoices += 1
            stats.total_revenue += invoice.total.amount

            updated = to_utc(invoice.updated_at)
            if (updated.year, updated.month) == (now.year, now.month):
                stats.monthly_revenue += invoice.total.amount

        elif invoice.status == InvoiceStatus.PENDING:
            stats.pending_invoices += 1

    return stats
