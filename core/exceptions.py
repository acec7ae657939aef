"""Typed exceptions for invoicing failures.

All of them subclass ValueError so callers that only care about "the request
was wrong" can keep catching ValueError.
"""


class InvoicingError(ValueError):
    """Base class for domain errors raised by the invoicing core."""


class NotFoundError(InvoicingError):
    """A referenced company, invoice, note or line item does not exist."""

    def __init__(self, entity: str, entity_id=None, within: str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        if within:
            message = f"{message} in {within}"
        super().__init__(message)


class DomainValidationError(InvoicingError):
    """A required field is missing or a state-transition guard failed."""


class InvoiceNotCompletableError(DomainValidationError):
    """Completion was requested for an invoice without valid items."""

    def __init__(self, invoice_id=None):
        self.invoice_id = invoice_id
        super().__init__("Cannot complete invoice: missing required items or invalid data")


class CurrencyMismatchError(DomainValidationError):
    """Two amounts in different currencies were combined."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Currency mismatch: expected {expected}, got {actual}")


class PreconditionError(InvoicingError):
    """A business rule outside a single entity's shape is not satisfied."""
