"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from api.middleware import get_request_id
from core.exceptions import (
    NotFoundError,
    DomainValidationError,
    InvoiceNotCompletableError,
    CurrencyMismatchError,
    PreconditionError,
)

logger = logging.getLogger(__name__)


def _error(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    request_id = get_request_id(request)
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, request_id).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers on the app.

    Starlette picks the handler registered for the most specific class in the
    exception's MRO, so subclasses below win over ValueError.
    """

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(request, 404, ErrorCodes.NOT_FOUND, str(exc))

    @app.exception_handler(InvoiceNotCompletableError)
    async def not_completable_handler(request: Request, exc: InvoiceNotCompletableError):
        return _error(request, 409, ErrorCodes.INVOICE_NOT_COMPLETABLE, str(exc))

    @app.exception_handler(CurrencyMismatchError)
    async def currency_mismatch_handler(request: Request, exc: CurrencyMismatchError):
        return _error(request, 400, ErrorCodes.CURRENCY_MISMATCH, str(exc))

    @app.exception_handler(DomainValidationError)
    async def domain_validation_handler(request: Request, exc: DomainValidationError):
        return _error(request, 400, ErrorCodes.VALIDATION_ERROR, str(exc))

    @app.exception_handler(PreconditionError)
    async def precondition_handler(request: Request, exc: PreconditionError):
        return _error(request, 412, ErrorCodes.COMPANY_REQUIRED, str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(request, 400, ErrorCodes.INVALID_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(request, 422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _error(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
