"""Client (invoice recipient) models."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, EmailStr, Field

from utils.timezone import now_utc


class IdentificationType(str, Enum):
    """Kind of identity document."""

    CEDULA = "cedula"
    NIT = "nit"
    PASSPORT = "passport"
    OTHER = "other"


class ClientCreate(BaseModel):
    """Data for attaching a client to an invoice. Every field is optional."""

    first_name: str | None = Field(None, max_length=255)
    last_name: str | None = Field(None, max_length=255)
    email: EmailStr | None = None
    identification_type: IdentificationType | None = None
    identification_number: str | None = Field(None, max_length=50)


class Client(BaseModel):
    """Client as embedded in an invoice."""

    id: UUID = Field(default_factory=uuid4)
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    identification_type: IdentificationType | None = None
    identification_number: str | None = None
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    model_config = {"from_attributes": True}

    @classmethod
    def from_input(cls, data: ClientCreate) -> "Client":
        return cls(**data.model_dump())

    @property
    def full_name(self) -> str:
        """Human-readable name for display, empty when unnamed."""
        parts = [p for p in [self.first_name, self.last_name] if p]
        return " ".join(parts)

    @property
    def is_complete(self) -> bool:
        return bool(self.first_name or self.last_name or self.identification_number)
