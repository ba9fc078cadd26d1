"""Error Hierarchy — typed, categorized exceptions for all template-service failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Validation and not-found errors are INFO severity: caller mistakes, not operational failures
    - Internal errors never carry store/driver details in their user-facing message
    - to_response() produces the REST envelope used by every error handler

Design Decisions:
    - Single hierarchy with FleetConfigError base: FastAPI global handler catches all
    - ErrorContext as dataclass: ids travel with the error without coupling to logging
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
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Ids and operation name attached to an error for observability."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    template_id: int | None = None
    device_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class FleetConfigError(Exception):
    """Base exception for all template-service errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "template_id": self.context.template_id,
                "device_id": self.context.device_id,
            },
        }
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


# ─── Domain Errors (400-level) ──────────────────────────────────

class TemplateValidationError(FleetConfigError):
    """Malformed or missing required input."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.INFO, context, 400,
        )
        self.field = field


class ResourceNotFoundError(FleetConfigError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: object, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class TemplateAssignedError(FleetConfigError):
    """Deletion refused: the template is still assigned to devices."""
    def __init__(
        self, template_id: int, device_count: int, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext(template_id=template_id, operation="delete")
        super().__init__(
            "Cannot delete template: assigned to devices",
            "TEMPLATE_ASSIGNED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
            details={"device_count": device_count},
        )
        self.template_id = template_id
        self.device_count = device_count


# ─── Infrastructure Errors (500-level) ──────────────────────────

class InternalError(FleetConfigError):
    """Store or serialization failure outside caller control."""
    def __init__(
        self,
        operation: str,
        context: ErrorContext | None = None,
        code: str = "INTERNAL_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
        http_status: int = 500,
        message: str = "An unexpected error occurred",
    ):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(
            message, code, category, ErrorSeverity.CRITICAL, ctx, http_status,
        )
        self.operation = operation


class DatabaseError(InternalError):
    """Database operation failed."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__(
            operation, context,
            code="DATABASE_ERROR", category=ErrorCategory.DATABASE,
            http_status=503, message=f"Database {operation} failed",
        )
