"""Error Handlers - turn exceptions that escape a route into error envelopes.

Invariants:
    - Every envelope is ContractAPIError.to_response(), so clients parse one shape
    - Per-call invocation failures never get here; the router returns them as
      InvokeResponse bodies
    - ContractAPIError reaching a route means the transport itself is not
      ready (ChaincodeUnavailableError from api/dependencies.py)
    - Unexpected exceptions are logged with traceback and answered without detail
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from contractapi.core.errors import (
    ContractAPIError, ErrorCategory, ErrorContext, ErrorSeverity,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ContractAPIError, contract_error)
    app.add_exception_handler(RequestValidationError, invalid_request)
    app.add_exception_handler(Exception, unexpected_error)


async def contract_error(request: Request, exc: ContractAPIError) -> JSONResponse:
    logger.error(
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed invoke body, e.g. no function name anywhere."""
    details = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    error = ContractAPIError(
        "Invalid request data", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
        ErrorSeverity.ERROR, ErrorContext(debug_info={"details": details}),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.warning(
        f"Rejected request body on {request.url.path}: {len(details)} problem(s)",
        extra={"error_code": error.code, "path": request.url.path},
    )
    body = error.to_response()
    body["error"]["details"] = details
    return JSONResponse(status_code=error.http_status, content=body)


async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        extra={"path": request.url.path}, exc_info=exc,
    )
    error = ContractAPIError(
        "An unexpected error occurred", "INTERNAL_ERROR", ErrorCategory.INTERNAL,
        ErrorSeverity.CRITICAL,
    )
    return JSONResponse(status_code=error.http_status, content=error.to_response())
