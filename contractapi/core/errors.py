"""Error Hierarchy - typed, categorized exceptions for every contract router failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - RegistrationError is fatal: raised while building a chaincode, never per call
    - ArgumentError, HandlerError, RoutingError are per-call: they become the
      error half of an InvocationResponse and never escape the router
    - to_response() produces the REST envelope used by the HTTP transport

Design Decisions:
    - Single hierarchy with ContractAPIError base: the API layer catches all of them
      with one handler
    - ErrorContext as dataclass: carries namespace/function/tx_id for logging
      without coupling to the logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    REGISTRATION = "registration"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STATE_STORE = "state_store"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where in the router an error happened."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    namespace: str | None = None
    function: str | None = None
    tx_id: str | None = None
    debug_info: dict[str, Any] | None = None


class ContractAPIError(Exception):
    """Base exception for all contract router errors."""

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
                    "namespace": self.context.namespace,
                    "function": self.context.function,
                    "tx_id": self.context.tx_id,
                },
            }
        }


# --- Start-up Errors -------------------------------------------------------

class RegistrationError(ContractAPIError):
    """Illegal handler or hook shape, duplicate namespace or qualified name."""
    def __init__(
        self, message: str, handler: str | None = None,
        context: ErrorContext | None = None,
    ):
        full = f"{handler}: {message}" if handler else message
        super().__init__(
            full, "REGISTRATION_ERROR", ErrorCategory.REGISTRATION,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.handler = handler
        self.rule = message


# --- Per-call Errors -------------------------------------------------------

class ArgumentError(ContractAPIError):
    """Arity mismatch or a string argument that failed to convert."""
    def __init__(
        self, message: str, parameter: str | None = None,
        value: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "ARGUMENT_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.parameter = parameter
        self.value = value


class HandlerError(ContractAPIError):
    """Business-logic error returned or raised by a hook or handler.

    The message is surfaced verbatim as the response error.
    """
    def __init__(
        self, message: str, cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "HANDLER_ERROR", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.cause = cause


class RoutingError(ContractAPIError):
    """No contract group or function matched the qualified name."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ROUTING_ERROR", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


# --- Collaborator Errors ---------------------------------------------------

class StateStoreError(ContractAPIError):
    """World-state read or write failed."""
    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"State store {operation} failed: {message}",
            "STATE_STORE_ERROR", ErrorCategory.STATE_STORE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


# --- Transport Errors ------------------------------------------------------

class ChaincodeUnavailableError(ContractAPIError):
    """The HTTP transport has no chaincode or state store to serve with."""
    def __init__(self, missing: str, context: ErrorContext | None = None):
        super().__init__(
            f"{missing} is not loaded", "CHAINCODE_UNAVAILABLE",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, context, 503,
        )
        self.missing = missing
