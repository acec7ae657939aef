"""Tests for subtotal, tip, balance and stats arithmetic."""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from core.exceptions import CurrencyMismatchError
from core.lifecycle import InvoiceStatus
from core.models import LineItem, Money
from core.totals import compute_balance, compute_stats, compute_tip, compute_totals, sum_items


def _cop(amount) -> Money:
    return Money(amount=Decimal(str(amount)), currency="COP")


def _line(quantity, price, currency="COP") -> LineItem:
    return LineItem.create("Item", quantity, Money(amount=Decimal(str(price)), currency=currency))


class TestComputeTotals:
    """Subtotal, tip and total."""

    def test_worked_example_with_tip(self):
        """2 x 1000 + 1 x 500 at 10% -> 2500 / 250 / 2750."""
        totals = compute_totals(
            [_line(2, 1000), _line(1, 500)],
            tip_percentage=Decimal("10"),
            tip_enabled=True,
            currency="COP",
        )

        assert totals.subtotal == _cop(2500)
        assert totals.tip_amount == _cop(250)
        assert totals.total == _cop(2750)

    def test_tip_disabled_is_zero(self):
        totals = compute_totals([_line(2, 1000)], Decimal("10"), False, "COP")

        assert totals.tip_amount.amount == Decimal("0")
        assert totals.total == totals.subtotal

    def test_no_items_is_zero(self):
        totals = compute_totals([], Decimal("10"), True, "USD")

        assert totals.subtotal == Money.zero("USD")
        assert totals.total == Money.zero("USD")

    def test_total_is_subtotal_plus_tip(self):
        totals = compute_totals([_line(3, "333.33")], Decimal("7.5"), True, "COP")

        assert totals.total.amount == totals.subtotal.amount + totals.tip_amount.amount

    def test_recomputing_is_idempotent(self):
        items = [_line(2, 1000), _line(1, 500)]

        first = compute_totals(items, Decimal("10"), True, "COP")
        second = compute_totals(items, Decimal("10"), True, "COP")

        assert first == second

    def test_mixed_currency_items_rejected(self):
        with pytest.raises(CurrencyMismatchError, match="expected COP, got USD"):
            sum_items([_line(1, 100), _line(1, 100, currency="USD")], "COP")


class TestComputeTip:

    def test_percentage_of_subtotal(self):
        assert compute_tip(_cop(2000), Decimal("15"), True) == _cop(300)

    def test_accepts_int_percentage(self):
        assert compute_tip(_cop(1000), 10, True) == _cop(100)

    def test_disabled(self):
        assert compute_tip(_cop(2000), Decimal("15"), False) == Money.zero("COP")


def _document(total, type=None, currency="COP"):
    return SimpleNamespace(total=Money(amount=Decimal(str(total)), currency=currency), type=type)


class TestComputeBalance:
    """Invoice total netted against credit and debit notes."""

    def test_credit_reduces_and_debit_increases(self):
        """100000 - 20000 + 5000 = 85000."""
        balance = compute_balance(
            _document(100000),
            [_document(20000, "credit"), _document(5000, "debit")],
        )

        assert balance.original_amount == Decimal("100000")
        assert balance.credit_notes_total == Decimal("20000")
        assert balance.debit_notes_total == Decimal("5000")
        assert balance.final_balance == Decimal("85000")
        assert balance.currency == "COP"

    def test_no_notes_keeps_original(self):
        balance = compute_balance(_document(1234), [])

        assert balance.final_balance == Decimal("1234")
        assert balance.credit_notes_total == Decimal("0")

    def test_credit_can_exceed_total(self):
        """A negative balance is reported as-is."""
        balance = compute_balance(_document(100), [_document(150, "credit")])

        assert balance.final_balance == Decimal("-50")

    def test_note_in_other_currency_rejected(self):
        with pytest.raises(CurrencyMismatchError):
            compute_balance(_document(100), [_document(10, "credit", currency="USD")])


def _invoice(status, total, updated_at):
    return SimpleNamespace(
        status=status,
        total=_cop(total),
        updated_at=updated_at,
    )


class TestComputeStats:

    NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)

    def test_counts_and_revenue(self):
        invoices = [
            _invoice(InvoiceStatus.COMPLETED, 1000, datetime(2026, 3, 2, tzinfo=timezone.utc)),
            _invoice(InvoiceStatus.COMPLETED, 500, datetime(2026, 2, 27, tzinfo=timezone.utc)),
            _invoice(InvoiceStatus.PENDING, 700, datetime(2026, 3, 3, tzinfo=timezone.utc)),
            _invoice(InvoiceStatus.DRAFT, 900, datetime(2026, 3, 4, tzinfo=timezone.utc)),
        ]

        stats = compute_stats(invoices, self.NOW)

        assert stats.total_invoices == 4
        assert stats.completed_invoices == 2
        assert stats.pending_invoices == 1
        assert stats.total_revenue == Decimal("1500")
        assert stats.monthly_revenue == Decimal("1000")

    def test_same_month_previous_year_excluded(self):
        invoices = [
            _invoice(InvoiceStatus.COMPLETED, 1000, datetime(2025, 3, 10, tzinfo=timezone.utc)),
        ]

        stats = compute_stats(invoices, self.NOW)

        assert stats.total_revenue == Decimal("1000")
        assert stats.monthly_revenue == Decimal("0")

    def test_empty(self):
        stats = compute_stats([], self.NOW)

        assert stats.total_invoices == 0
        assert stats.total_revenue == Decimal("0")
