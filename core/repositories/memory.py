"""
In-process repositories.

Entities are deep-copied on the way in and out, so callers mutating a
returned object never change what is stored until they call update().
Used for tests and single-process demos; nothing survives a restart.
"""

import threading
from uuid import UUID

from core.exceptions import NotFoundError
from core.models import Company, Invoice, Note, NoteType


class _InMemoryStore:
    def __init__(self):
        self._rows: dict = {}
        self._lock = threading.RLock()

    def _put(self, entity):
        with self._lock:
            self._rows[entity.id] = entity.model_copy(deep=True)
        return entity.model_copy(deep=True)

    def _get(self, entity_id: UUID):
        with self._lock:
            entity = self._rows.get(entity_id)
        return entity.model_copy(deep=True) if entity is not None else None

    def _all(self) -> list:
        with self._lock:
            rows = list(self._rows.values())
        return [r.model_copy(deep=True) for r in rows]

    def _newest_first(self) -> list:
        return sorted(self._all(), key=lambda e: e.created_at, reverse=True)

    def _require_existing(self, entity):
        with self._lock:
            if entity.id not in self._rows:
                raise NotFoundError(type(entity).__name__, entity.id)
        return self._put(entity)

    def delete(self, entity_id: UUID) -> bool:
        with self._lock:
            return self._rows.pop(entity_id, None) is not None


class InMemoryCompanyRepository(_InMemoryStore):
    def save(self, company: Company) -> Company:
        return self._put(company)

    def find_by_id(self, company_id: UUID) -> Company | None:
        return self._get(company_id)

    def find_first(self) -> Company | None:
        companies = sorted(self._all(), key=lambda c: c.created_at)
        return companies[0] if companies else None

    def update(self, company: Company) -> Company:
        return self._require_existing(company)


class InMemoryInvoiceRepository(_InMemoryStore):
    def save(self, invoice: Invoice) -> Invoice:
        return self._put(invoice)

    def find_by_id(self, invoice_id: UUID) -> Invoice | None:
        return self._get(invoice_id)

    def find_all(self) -> list[Invoice]:
        return self._newest_first()

    def find_recent(self, limit: int = 10) -> list[Invoice]:
        return self._newest_first()[:limit]

    def update(self, invoice: Invoice) -> Invoice:
        return self._require_existing(invoice)


class InMemoryNoteRepository(_InMemoryStore):
    def save(self, note: Note) -> Note:
        return self._put(note)

    def find_by_id(self, note_id: UUID) -> Note | None:
        return self._get(note_id)

    def find_all(self) -> list[Note]:
        return self._newest_first()

    def find_by_invoice_id(self, invoice_id: UUID) -> list[Note]:
        return [n for n in self._newest_first() if n.invoice_id == invoice_id]

    def find_by_type(self, note_type: NoteType) -> list[Note]:
        return [n for n in self._newest_first() if n.type == NoteType(note_type)]

    def update(self, note: Note) -> Note:
        return self._require_existing(note)
