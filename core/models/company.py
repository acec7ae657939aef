"""Company profile models.

There is one company profile per deployment. Invoices embed a frozen
CompanySnapshot taken at creation, so later profile edits never rewrite
historical invoices.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import BaseModel, EmailStr, Field, field_validator

from core.money import ZERO, to_decimal
from utils.timezone import now_utc

DEFAULT_TIP_PERCENTAGE = Decimal("10")

_MAX_PERCENTAGE = Decimal("100")


def clamp_percentage(value) -> Decimal:
    """Clamp a tip percentage into [0, 100]."""
    return min(_MAX_PERCENTAGE, max(ZERO, to_decimal(value)))


class CompanyCreate(BaseModel):
    """Data required to create the company profile."""

    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = Field(None, max_length=500)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    website: str | None = Field(None, max_length=255)
    tax_id: str | None = Field(None, max_length=100)
    logo: str | None = None
    tip_percentage: Decimal | None = None
    tip_enabled: bool | None = None


class CompanyUpdate(BaseModel):
    """
    Data that can be updated on the company profile. All fields optional.

    Extra keys are kept so the service can log and ignore them.
    """

    model_config = {"extra": "allow"}

    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = Field(None, max_length=500)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    website: str | None = Field(None, max_length=255)
    tax_id: str | None = Field(None, max_length=100)
    logo: str | None = None
    tip_percentage: Decimal | None = None
    tip_enabled: bool | None = None


class TipSettingsUpdate(BaseModel):
    """Both tip settings, set together."""

    tip_percentage: Decimal
    tip_enabled: bool


class CompanySnapshot(BaseModel):
    """Value copy of the company profile embedded in an invoice."""

    id: UUID
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    tax_id: str | None = None
    logo: str | None = None
    tip_percentage: Decimal = DEFAULT_TIP_PERCENTAGE
    tip_enabled: bool = True

    model_config = {"frozen": True}


class Company(BaseModel):
    """Full company entity as stored."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    tax_id: str | None = None
    logo: str | None = None
    tip_percentage: Decimal = DEFAULT_TIP_PERCENTAGE
    tip_enabled: bool = True
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    model_config = {"from_attributes": True}

    @field_validator("tip_percentage")
    @classmethod
    def clamp_tip(cls, value: Decimal) -> Decimal:
        return clamp_percentage(value)

    @property
    def is_complete(self) -> bool:
        """Whether the profile is usable for invoicing."""
        return bool(self.name and self.name.strip())

    def update_tip_settings(self, percentage, enabled: bool) -> None:
        self.tip_percentage = clamp_percentage(percentage)
        self.tip_enabled = enabled
        self.updated_at = now_utc()

    def snapshot(self) -> CompanySnapshot:
        """Copy the profile by value for embedding in a new invoice."""
        return CompanySnapshot.model_validate(self.model_dump())
