"""Shared test fixtures for the invoicing test suite."""

from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton to pick up env vars
import clients.vault_client as vault_module
vault_module.reset_vault_state()

from core.audit import AuditLogger
from core.config import InvoicingConfig
from core.event_bus import EventBus
from core.models import CompanyCreate, LineItemCreate, Money
from core.repositories import (
    InMemoryCompanyRepository,
    InMemoryInvoiceRepository,
    InMemoryNoteRepository,
)
from core.services.company_service import CompanyService
from core.services.invoice_service import InvoiceService
from core.services.note_service import NoteService


def _item(description="Coffee", quantity=1, price=1000, currency="COP") -> LineItemCreate:
    return LineItemCreate(
        description=description,
        quantity=Decimal(str(quantity)),
        unit_price=Money(amount=Decimal(str(price)), currency=currency),
    )


@pytest.fixture
def make_item():
    """Factory for line item input: make_item(description, quantity, price, currency)."""
    return _item


# =============================================================================
# INFRASTRUCTURE FIXTURES
# =============================================================================


@pytest.fixture
def config() -> InvoicingConfig:
    return InvoicingConfig(storage="memory")


@pytest.fixture
def audit():
    """Audit logger mock; assert on log_change calls."""
    return Mock(spec=AuditLogger)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def published(event_bus) -> list:
    """Every event published on the bus, in order."""
    events = []
    event_bus.subscribe("InvoicingEvent", events.append)
    return events


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def company_repo():
    return InMemoryCompanyRepository()


@pytest.fixture
def invoice_repo():
    return InMemoryInvoiceRepository()


@pytest.fixture
def note_repo():
    return InMemoryNoteRepository()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def company_service(company_repo, audit, config):
    return CompanyService(company_repo, audit, config)


@pytest.fixture
def invoice_service(invoice_repo, company_repo, audit, event_bus, config):
    return InvoiceService(invoice_repo, company_repo, audit, event_bus, config)


@pytest.fixture
def note_service(note_repo, invoice_repo, audit, event_bus, config):
    return NoteService(note_repo, invoice_repo, audit, event_bus, config)


@pytest.fixture
def company(company_service):
    """Company profile with a 10% tip enabled."""
    return company_service.create_company(CompanyCreate(
        name="Café Central",
        tax_id="900123456-7",
        tip_percentage=Decimal("10"),
        tip_enabled=True,
    ))


@pytest.fixture
def invoice(company, invoice_service):
    """Empty DRAFT invoice."""
    return invoice_service.create_invoice()
