"""Persistence for companies, invoices and notes.

Services depend only on the protocols in core.repositories.base; the
PostgreSQL and in-memory implementations are interchangeable.
"""

from core.repositories.base import CompanyRepository, InvoiceRepository, NoteRepository
from core.repositories.memory import (
    InMemoryCompanyRepository,
    InMemoryInvoiceRepository,
    InMemoryNoteRepository,
)
from core.repositories.postgres import (
    PostgresCompanyRepository,
    PostgresInvoiceRepository,
    PostgresNoteRepository,
)
