"""
Domain exceptions and their HTTP translation.

Services raise these; handlers registered in main.py turn them into JSON
responses. Nothing here is retried.
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ConsoleError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"detail": self.message}


class FormValidationError(ConsoleError):
    """Field-scoped validation failure raised outside the pydantic schema."""
    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.errors: Dict[str, str] = {field: message}

    def to_body(self) -> dict:
        return {"detail": self.message, "errors": self.errors}


class IdentityError(ConsoleError):
    EMAIL_IN_USE = "EMAIL_IN_USE"
    INVALID_EMAIL = "INVALID_EMAIL"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    UNKNOWN = "UNKNOWN"

    _STATUS = {EMAIL_IN_USE: 409, INVALID_EMAIL: 400, WEAK_PASSWORD: 400, UNKNOWN: 500}

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.status_code = self._STATUS.get(code, 500)

    def to_body(self) -> dict:
        return {"detail": self.message, "code": self.code}


class StoreError(ConsoleError):
    status_code = 503


class RecordNotFoundError(ConsoleError):
    status_code = 404


class AccessDeniedError(ConsoleError):
    status_code = 403


class AuthenticationError(ConsoleError):
    status_code = 401


class BulkImportValidationError(ConsoleError):
    """A row (or the file as a whole) failed validation; nothing was written."""
    status_code = 400


class BulkImportCommitError(ConsoleError):
    """The commit phase stopped part-way; rows before the failure stay written."""
    status_code = 500

    def __init__(self, message: str, committed: int, total: int):
        super().__init__(message)
        self.committed = committed
        self.total = total

    def to_body(self) -> dict:
        return {"detail": self.message, "committed": self.committed, "total": self.total}


async def console_error_handler(request: Request, exc: ConsoleError) -> JSONResponse:
    headers: Optional[dict] = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConsoleError, console_error_handler)
