"""
Service wiring.

Builds repositories, the audit logger and the event bus once and hands them
to the services. The API receives the resulting dict and nothing else.
"""

import logging

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from core.config import InvoicingConfig
from core.event_bus import EventBus
from core.repositories import (
    InMemoryCompanyRepository,
    InMemoryInvoiceRepository,
    InMemoryNoteRepository,
    PostgresCompanyRepository,
    PostgresInvoiceRepository,
    PostgresNoteRepository,
)
from core.services.company_service import CompanyService
from core.services.invoice_service import InvoiceService
from core.services.note_service import NoteService

logger = logging.getLogger(__name__)


def build_services(
    config: InvoicingConfig | None = None,
    postgres: PostgresClient | None = None,
    event_bus: EventBus | None = None
) -> dict:
    """
    Build the service graph.

    Args:
        config: Application settings (defaults used when None)
        postgres: Database client; required when config.storage is 'postgres'
        event_bus: Shared bus; a fresh one is created when None

    Returns:
        Dict with keys 'company', 'invoice', 'note'

    Raises:
        ValueError: If postgres storage is configured without a client
    """
    config = config or InvoicingConfig()
    event_bus = event_bus or EventBus()

    if config.storage == "postgres":
        if postgres is None:
            raise ValueError("A PostgresClient is required for postgres storage")
        companies = PostgresCompanyRepository(postgres)
        invoices = PostgresInvoiceRepository(postgres)
        notes = PostgresNoteRepository(postgres)
        audit = AuditLogger(postgres)
    else:
        companies = InMemoryCompanyRepository()
        invoices = InMemoryInvoiceRepository()
        notes = InMemoryNoteRepository()
        audit = AuditLogger()

    logger.info(f"Services built with {config.storage} storage")

    return {
        "company": CompanyService(companies, audit, config),
        "invoice": InvoiceService(invoices, companies, audit, event_bus, config),
        "note": NoteService(notes, invoices, audit, event_bus, config),
    }
