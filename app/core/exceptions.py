"""Ledger error taxonomy.

Every failure the ledger services raise on purpose is a ``LedgerError``
subclass with a machine-readable ``code`` and the HTTP status the API layer
answers with. Callers catch by type, never by message.

    LedgerError
    +-- NotFoundError          404  referenced entity absent
    +-- InvalidArgumentError   400  non-positive amount, overdraft, empty course
    +-- InvalidStateError      409  inactive enrollment, double void
    +-- ForbiddenError         403  role without ledger access, branch mismatch
"""

from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code: str = "LEDGER_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(LedgerError):
    code = "RESOURCE_NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        super().__init__(message, {"resource": resource})
        self.resource = resource
        self.resource_id = resource_id


class InvalidArgumentError(LedgerError):
    code = "INVALID_ARGUMENT"
    status_code = 400


class InvalidStateError(LedgerError):
    code = "INVALID_STATE"
    status_code = 409


class ForbiddenError(LedgerError):
    code = "FORBIDDEN"
    status_code = 403
