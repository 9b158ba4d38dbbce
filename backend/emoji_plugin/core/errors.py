"""Error Hierarchy — typed, categorized exceptions for all emoji failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope
    - Lookup misses are values (None), never errors, inside the manager

Design Decisions:
    - Single hierarchy with EmojiError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    PERMISSION = "permission"
    FEATURE = "feature"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    shortcode: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class EmojiError(Exception):
    """Base exception for all emoji plugin errors."""

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
                    "shortcode": self.context.shortcode,
                    "user_id": self.context.user_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidArgumentError(EmojiError):
    """Bad shortcode or malformed emoji set."""
    def __init__(self, message: str, argument: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.argument = argument


class InvalidInputKindError(EmojiError):
    """Image input is not a byte buffer, a binary file or an async byte stream."""
    def __init__(self, kind: str, context: ErrorContext | None = None):
        super().__init__(
            f"Expected a bytes buffer, binary file or async byte stream, got {kind}",
            "INVALID_INPUT_KIND", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.kind = kind


class NotAnImageError(EmojiError):
    """Leading bytes did not match any known image signature."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not an image", "NOT_AN_IMAGE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 415,
        )


class EmptyInputError(EmojiError):
    """Image stream ended before producing any bytes."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Image input is empty", "EMPTY_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class FeatureDisabledError(EmojiError):
    """Custom emoji requested but no blob store is configured."""
    def __init__(self, feature: str = "Custom emoji", context: ErrorContext | None = None):
        super().__init__(
            f"{feature} are not enabled", "FEATURE_DISABLED", ErrorCategory.FEATURE,
            ErrorSeverity.WARNING, context, 501,
        )


class ForbiddenError(EmojiError):
    """Acting user lacks the required permission."""
    def __init__(self, permission: str, context: ErrorContext | None = None):
        super().__init__(
            f'User does not have the "{permission}" role.',
            "FORBIDDEN", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.permission = permission


class ConflictError(EmojiError):
    """Write rejected by a uniqueness constraint."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DuplicateShortcodeError(ConflictError):
    """A custom emoji with this shortcode already exists."""
    def __init__(self, shortcode: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.shortcode = shortcode
        super().__init__(f"Custom emoji '{shortcode}' already exists", ctx)
        self.shortcode = shortcode


class ResourceNotFoundError(EmojiError):
    """Requested resource does not exist (HTTP read layer only)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class BlobStoreError(EmojiError):
    """Blob store read or write failed."""
    def __init__(self, message: str, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Blob store operation on '{key}' failed: {message}",
            "BLOB_STORE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.key = key


class BlobNotFoundError(BlobStoreError):
    """No blob stored under the requested key."""
    def __init__(self, key: str, context: ErrorContext | None = None):
        super().__init__("not found", key, context)
        self.code = "BLOB_NOT_FOUND"
        self.category = ErrorCategory.RESOURCE_NOT_FOUND
        self.severity = ErrorSeverity.ERROR
        self.http_status = 404


class DatabaseError(EmojiError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
