"""Result Encoder - handler return values -> uniform InvocationResponse.

Invariants:
    - Error present -> payload "" and error message, even if a string was returned
    - String present, no error -> payload is the string
    - Neither -> empty success
    - A value that does not match the declared return shape is an error
      response, never an exception
"""

from typing import Any

from contractapi.core.domain_types import ReturnKind
from contractapi.core.errors import ContractAPIError
from contractapi.core.invocation import InvocationResponse
from contractapi.core.signature import HandlerDescriptor


def error_response(error: BaseException) -> InvocationResponse:
    """Response for an error value, keeping the router's code when it has one."""
    if isinstance(error, ContractAPIError):
        return InvocationResponse.failure(error.message, error.code)
    return InvocationResponse.failure(str(error) or type(error).__name__)


def _mismatch(descriptor: HandlerDescriptor, value: Any) -> InvocationResponse:
    expected = ", ".join(k.value for k in descriptor.returns) or "nothing"
    return InvocationResponse.failure(
        f"{descriptor.qualified_name} returned {type(value).__name__}, "
        f"declared ({expected})",
        "RESULT_ERROR",
    )


def _split(descriptor: HandlerDescriptor, value: Any) -> tuple[Any, Any] | None:
    """(string, error) according to the declared shape, or None on mismatch."""
    returns = descriptor.returns
    if not returns:
        return (None, None) if value is None else None
    if returns == (ReturnKind.STRING,):
        return (value, None)
    if returns == (ReturnKind.ERROR,):
        return (None, value)
    if not isinstance(value, tuple) or len(value) != 2:
        return None
    return value


def encode_result(descriptor: HandlerDescriptor, value: Any) -> InvocationResponse:
    """Normalize whatever the handler returned into the response shape."""
    if isinstance(value, BaseException):
        return error_response(value)
    parts = _split(descriptor, value)
    if parts is None:
        return _mismatch(descriptor, value)
    payload, error = parts
    if error is not None:
        if not isinstance(error, BaseException):
            return _mismatch(descriptor, error)
        return error_response(error)
    if payload is None:
        return InvocationResponse.success()
    if not isinstance(payload, str):
        return _mismatch(descriptor, payload)
    return InvocationResponse.success(payload)
