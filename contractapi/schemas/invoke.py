"""Invoke Schemas - Pydantic bodies for the HTTP transport.

Invariants:
    - InvokeRequest names the function either in `function` or as args[0]
    - InvokeResponse mirrors InvocationResponse
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator


class InvokeRequest(BaseModel):
    """Either {"function": "ns:Fn", "args": [...]} or {"args": ["ns:Fn", ...]}."""
    function: str | None = Field(None, min_length=1, max_length=512)
    args: list[str] = Field(default_factory=list)
    tx_id: str | None = Field(None, max_length=128)

    @model_validator(mode="after")
    def require_function_name(self):
        if self.function is None and not self.args:
            raise ValueError("function name required in `function` or as the first arg")
        return self

    def transport_args(self) -> list[str]:
        """Flat argument list with the qualified name first."""
        if self.function is None:
            return list(self.args)
        return [self.function, *self.args]


class InvokeResponse(BaseModel):
    status: Literal["ok", "error"]
    payload: str = ""
    error: str | None = None
    error_code: str | None = None
