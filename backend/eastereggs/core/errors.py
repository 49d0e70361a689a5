"""Error Hierarchy: typed, categorized exceptions for every Easter Eggs failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) abort one operation with no partial mutation
    - Infrastructure errors (5xx) come from adapters (oracle, database)
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Category, severity and HTTP status are class attributes: a subclass is
      fully described by what it declares, instances only add message/code/context
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    AUTHORIZATION = "authorization"
    STATE = "state"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CAPACITY = "capacity"
    PAYMENT = "payment"
    EXTERNAL_API = "external_api"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Who hit the error, in which operation, and for which oracle request."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    actor: str | None = None
    operation: str | None = None
    request_id: int | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class EasterEggsError(Exception):
    """Base exception. Subclasses pin category, severity and http_status."""

    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    http_status: int = 500

    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        ctx = self.context
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {
                    "actor": ctx.actor,
                    "operation": ctx.operation,
                    "request_id": ctx.request_id,
                    "retry_after_ms": ctx.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class AuthorizationError(EasterEggsError):
    """Caller is not the owner (or not the coordinator, for fulfillment)."""
    category = ErrorCategory.AUTHORIZATION
    http_status = 403

    def __init__(
        self, message: str, code: str = "NOT_OWNER",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, code, context)


class StateError(EasterEggsError):
    """Operation conflicts with the contract or account lifecycle."""
    category = ErrorCategory.STATE
    http_status = 409

    def __init__(
        self, message: str, code: str = "CONTRACT_CLOSED",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, code, context)


class ValidationError(EasterEggsError):
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(
        self, message: str, field: str, code: str = "INVALID_DATA",
        context: ErrorContext | None = None,
    ):
        super().__init__(message, code, context)
        self.field = field


class NotFoundError(EasterEggsError):
    """Structural lookup found no matching egg in owner's collection."""
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(self, owner: str, context: ErrorContext | None = None):
        super().__init__(
            f"No matching egg in the collection of {owner}", "EGG_NOT_FOUND", context,
        )
        self.owner = owner


class CapacityError(EasterEggsError):
    """A per-egg or per-account cap blocks the operation."""
    category = ErrorCategory.CAPACITY
    http_status = 409


class TransferError(EasterEggsError):
    """The payment rail refused or failed to forward a surrender payment."""
    category = ErrorCategory.PAYMENT
    http_status = 502

    def __init__(
        self, recipient: str, amount: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Forwarding {amount} to {recipient} failed", "TRANSFER_FAILED", context,
        )
        self.recipient = recipient
        self.amount = amount


# ─── Infrastructure Errors (500-level) ──────────────────────────

class OracleError(EasterEggsError):
    """Randomness coordinator rejected or failed a call.

    http_status defaults to 503; the seeded coordinator narrows it to 404
    (unknown request) or 400 (unknown subscription).
    """
    category = ErrorCategory.EXTERNAL_API
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(
        self,
        message: str,
        reason: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
        http_status: int | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Randomness coordinator error ({reason}): {message}", "ORACLE_ERROR", ctx,
        )
        self.reason = reason
        if http_status is not None:
            self.http_status = http_status


class DatabaseError(EasterEggsError):
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Database {operation} failed: {message}", "DATABASE_ERROR", context)
        self.operation = operation
