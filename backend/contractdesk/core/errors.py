"""Error Hierarchy — typed, categorized exceptions for every data-layer failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors are surfaced to the caller unmodified; nothing here is retried
    - A failure inside a unit of work is raised only after the rollback completed
    - to_dict() produces one uniform envelope for logs and callers

Design Decisions:
    - Single hierarchy with ContractDeskError base: callers catch one type
    - ExhaustedError is NOT a StopIteration: a source that ran dry must reach
      the caller instead of silently ending a `for` loop
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    ITERATION = "iteration"
    INVARIANT = "invariant"
    CONFLICT = "conflict"
    DATABASE = "database"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class ContractDeskError(Exception):
    """Base exception for all data-layer errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to the standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource": self.context.resource,
                    "operation": self.context.operation,
                    "debug_info": self.context.debug_info,
                },
            }
        }


# ─── Iteration Errors ───────────────────────────────────────────

class ExhaustedError(ContractDeskError):
    """Iteration past the end, or the page source ran dry before totalCount."""
    def __init__(self, message: str = "No more records", context: ErrorContext | None = None):
        super().__init__(
            message, "EXHAUSTED", ErrorCategory.ITERATION,
            ErrorSeverity.WARNING, context,
        )


class InvariantViolationError(ContractDeskError):
    """A collaborator broke its contract (oversized page, unexpected row count)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVARIANT_VIOLATION", ErrorCategory.INVARIANT,
            ErrorSeverity.CRITICAL, context,
        )


# ─── Domain Errors ──────────────────────────────────────────────

class ResourceNotFoundError(ContractDeskError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ProjectNotFoundError(ResourceNotFoundError):
    """The project an issue or contract refers to is not registered."""
    def __init__(
        self, repo_full_name: str, provider: str, context: ErrorContext | None = None,
    ):
        super().__init__("Project", f"{repo_full_name} at {provider}", context)
        self.code = "PROJECT_NOT_FOUND"


class ContributorNotFoundError(ResourceNotFoundError):
    """The contributor a contract refers to is not registered."""
    def __init__(
        self, username: str, provider: str, context: ErrorContext | None = None,
    ):
        super().__init__("Contributor", f"{username} at {provider}", context)
        self.code = "CONTRIBUTOR_NOT_FOUND"


class ContractMismatchError(ContractDeskError):
    """Contract does not belong to the task's project and role."""
    def __init__(self, task_key: str, contract_key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Contract {contract_key} cannot take task {task_key}: "
            "project, role or provider differ.",
            "CONTRACT_MISMATCH", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context,
        )


class NotAssignedError(ContractDeskError):
    """Resignation attempted on a task nobody holds."""
    def __init__(self, task_key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Task {task_key} is not assigned, cannot register a resignation.",
            "NOT_ASSIGNED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context,
        )


class CannotRemoveActiveResourceError(ContractDeskError):
    """Removal of the active member of a scope; deactivate it first."""
    def __init__(self, resource_type: str, resource_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"{resource_type} '{resource_id}' is active and cannot be removed. "
            "Deactivate it first.",
            "CANNOT_REMOVE_ACTIVE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context,
        )


class UnsupportedTypeError(ContractDeskError):
    """Value outside the supported set (e.g. an unknown wallet type)."""
    def __init__(self, kind: str, value: str, allowed: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Only {kind} of type {allowed} are supported, got '{value}'.",
            "UNSUPPORTED_TYPE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )


class ConflictError(ContractDeskError):
    """Registration under a key that already exists."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(ContractDeskError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
