"""Error Hierarchy — typed, categorized exceptions for every HouseHub failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - http_status is read only by the API boundary — services never pick status codes
    - to_response() never includes tracebacks or driver messages

Design Decisions:
    - Single hierarchy with HouseHubError base: one FastAPI handler catches all
    - ErrorContext as dataclass: carries ids for logs without coupling to the logging setup
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories — one per error kind the API exposes."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    todo_id: str | None = None
    user_id: str | None = None
    field: str | None = None
    debug_info: dict[str, Any] | None = None


class HouseHubError(Exception):
    """Base exception for all HouseHub errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "todo_id": self.context.todo_id,
                    "user_id": self.context.user_id,
                    "field": self.context.field,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class RequestValidationError(HouseHubError):
    """Request payload missing or malformed at the service boundary."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class InvalidReferenceError(HouseHubError):
    """A referenced Todo or User does not exist (assignment side is named in field)."""
    def __init__(self, resource_type: str, resource_id: str, field: str):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "INVALID_REFERENCE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ErrorContext(field=field), 400,
        )
        self.field = field


class ResourceNotFoundError(HouseHubError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


class DuplicateEmailError(HouseHubError):
    """Another user already owns this email."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field = "email"
        super().__init__(
            "A user with this email already exists",
            "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.email = email


class AlreadyAssignedError(HouseHubError):
    """The (todo, user) pair is already assigned."""
    def __init__(self, todo_id: Any, user_id: Any):
        super().__init__(
            "User is already assigned to this todo",
            "ALREADY_ASSIGNED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING,
            ErrorContext(todo_id=str(todo_id), user_id=str(user_id)), 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(HouseHubError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
