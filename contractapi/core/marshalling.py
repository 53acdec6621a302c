"""Argument Marshaller - flat string arguments -> positional values for one call.

Invariants:
    - The context is never produced here; the executor prepends it
    - str parameters receive the input verbatim; int/float/bool are converted
    - A sequence parameter (always last) collects every remaining input, in order
    - Full marshalling is strict on arity; prefix marshalling (hooks) drops the
      trailing inputs the hook does not declare
    - Every failure is an ArgumentError naming the parameter and literal
"""

from typing import Any, Callable

from contractapi.core.domain_types import ParamKind
from contractapi.core.errors import ArgumentError
from contractapi.core.signature import HandlerDescriptor, ParamSpec


_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(value)


_CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: _parse_bool,
}


def convert_scalar(spec: ParamSpec, value: str) -> Any:
    """Convert one input string to the parameter's declared type."""
    if spec.annotation is str:
        return value
    try:
        return _CONVERTERS[spec.annotation](value)
    except (ValueError, TypeError):
        raise ArgumentError(
            f"Cannot convert value {value!r} for parameter {spec.name!r} "
            f"to {spec.annotation.__name__}",
            parameter=spec.name, value=value,
        )


def _take(
    params: tuple[ParamSpec, ...], args: list[str],
) -> tuple[list[Any], int]:
    """Values for params and how many inputs were consumed."""
    values: list[Any] = []
    consumed = 0
    for spec in params:
        if spec.kind is ParamKind.SEQUENCE:
            rest = list(args[consumed:])
            consumed = len(args)
            if spec.variadic:
                values.extend(rest)
            else:
                values.append(rest)
            break
        if consumed >= len(args):
            raise ArgumentError(
                f"Missing value for parameter {spec.name!r}: expected at least "
                f"{_scalar_count(params)} argument(s), got {len(args)}",
                parameter=spec.name,
            )
        values.append(convert_scalar(spec, args[consumed]))
        consumed += 1
    return values, consumed


def _scalar_count(params: tuple[ParamSpec, ...]) -> int:
    return sum(1 for p in params if p.kind is ParamKind.SCALAR)


def marshal_arguments(descriptor: HandlerDescriptor, args: list[str]) -> list[Any]:
    """Positional values for a handler, excluding the context."""
    values, consumed = _take(descriptor.value_params, args)
    if consumed < len(args):
        raise ArgumentError(
            f"Too many arguments for {descriptor.qualified_name}: expected "
            f"{consumed}, got {len(args)}",
        )
    return values


def marshal_prefix(hook: HandlerDescriptor, args: list[str]) -> list[Any]:
    """Positional values for a before/after hook: only the prefix it declares."""
    values, _ = _take(hook.value_params, args)
    return values
