"""Invocation Request/Response - the router's input and output records.

Invariants:
    - InvocationRequest is immutable and consumed once
    - InvocationResponse: error present -> payload is ""; error absent -> payload
      is the handler's string (or "")
    - from_args() treats args[0] as the qualified name "namespace:function"
"""

from dataclasses import dataclass

from contractapi.core.domain_types import (
    QualifiedName, qualify, split_qualified_name,
)
from contractapi.core.errors import ArgumentError


@dataclass(frozen=True)
class InvocationRequest:
    namespace: str
    function: str
    args: tuple[str, ...] = ()

    @property
    def qualified_name(self) -> QualifiedName:
        return qualify(self.namespace, self.function)

    @classmethod
    def from_qualified_name(cls, name: str, args: list[str] | tuple[str, ...] = ()) -> "InvocationRequest":
        namespace, function = split_qualified_name(name)
        return cls(namespace, function, tuple(args))

    @classmethod
    def from_args(cls, args: list[str]) -> "InvocationRequest":
        """Transport convention: first argument names the function."""
        if not args:
            raise ArgumentError("Invocation needs at least a function name")
        return cls.from_qualified_name(args[0], args[1:])


@dataclass(frozen=True)
class InvocationResponse:
    payload: str = ""
    error: str | None = None
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payload: str = "") -> "InvocationResponse":
        return cls(payload=payload)

    @classmethod
    def failure(cls, message: str, code: str = "HANDLER_ERROR") -> "InvocationResponse":
        return cls(payload="", error=message, error_code=code)

    def to_dict(self) -> dict:
        return {
            "status": "ok" if self.ok else "error",
            "payload": self.payload,
            "error": self.error,
            "error_code": self.error_code,
        }

