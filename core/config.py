"""Invoicing configuration."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field


class InvoicingConfig(BaseModel):
    """
    Application settings for the invoicing core.

    Secrets (database URL) are not here; they come from Vault.
    """

    # Money
    default_currency: str = Field(
        default="COP",
        description="Currency of new invoices and notes",
        pattern=r"^[A-Z]{3}$",
    )

    # Company defaults
    default_tip_percentage: Decimal = Field(
        default=Decimal("10"),
        description="Tip percentage for a new company profile when none is given",
        ge=0,
        le=100,
    )
    default_tip_enabled: bool = Field(
        default=True,
        description="Whether tipping is on for a new company profile",
    )

    # Listing
    recent_invoices_limit: int = Field(
        default=10,
        description="Default page size for recent invoices",
        ge=1,
        le=100,
    )

    # Document numbering
    invoice_number_prefix: str = Field(default="INV", min_length=1, max_length=10)
    credit_note_prefix: str = Field(default="NC", min_length=1, max_length=10)
    debit_note_prefix: str = Field(default="ND", min_length=1, max_length=10)

    # Storage backend for repositories
    storage: Literal["postgres", "memory"] = Field(
        default="postgres",
        description="'memory' keeps everything in-process (tests, demos)",
    )
