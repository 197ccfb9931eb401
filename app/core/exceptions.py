from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.core.validation import FieldError


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BACKEND = "backend"
    INTERNAL = "internal"


class DomainError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class InvalidPayloadError(ValidationError):
    """Aggregated report of every rule a payload violated."""

    def __init__(self, errors: list["FieldError"]):
        self.errors = list(errors)
        summary = "; ".join(f"{e.field} {e.message}" for e in self.errors)
        super().__init__(
            "payload",
            summary,
            {"errors": [e.as_dict() for e in self.errors]},
        )


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, code: str = "CF_001", details: dict | None = None):
        super().__init__(code, message, details)


class BackendError(DomainError):
    kind = ErrorKind.BACKEND

    def __init__(self, message: str, code: str = "BE_001", details: dict | None = None):
        super().__init__(code, message, details)


class InternalError(DomainError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, code: str = "INT_001", details: dict | None = None):
        super().__init__(code, message, details)
