"""Repository protocols consumed by the services."""

from typing import Protocol
from uuid import UUID

from core.models import Company, Invoice, Note, NoteType


class CompanyRepository(Protocol):
    def save(self, company: Company) -> Company: ...

    def find_by_id(self, company_id: UUID) -> Company | None: ...

    def find_first(self) -> Company | None: ...

    def update(self, company: Company) -> Company: ...

    def delete(self, company_id: UUID) -> bool: ...


class InvoiceRepository(Protocol):
    def save(self, invoice: Invoice) -> Invoice: ...

    def find_by_id(self, invoice_id: UUID) -> Invoice | None: ...

    def find_all(self) -> list[Invoice]: ...

    def find_recent(self, limit: int = 10) -> list[Invoice]: ...

    def update(self, invoice: Invoice) -> Invoice: ...

    def delete(self, invoice_id: UUID) -> bool: ...


class NoteRepository(Protocol):
    def save(self, note: Note) -> Note: ...

    def find_by_id(self, note_id: UUID) -> Note | None: ...

    def find_all(self) -> list[Note]: ...

    def find_by_invoice_id(self, invoice_id: UUID) -> list[Note]: ...

    def find_by_type(self, note_type: NoteType) -> list[Note]: ...

    def update(self, note: Note) -> Note: ...

    def delete(self, note_id: UUID) -> bool: ...
