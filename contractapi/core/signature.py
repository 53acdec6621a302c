"""Signature Validator - registration-time introspection of handlers and hooks.

Invariants:
    - describe_handler() either returns a frozen HandlerDescriptor or raises
      RegistrationError naming the handler and the violated rule
    - Parameters: context? scalar* sequence? (context first, sequence last,
      at most one of each)
    - Returns: (), (string,), (error,) or (string, error); never error before string
    - Hook prefix rule: a before/after hook's value parameters are a positional
      prefix of every handler's value parameters in its group
    - Unknown hook: (), (context,) or (sequence,)

Design Decisions:
    - inspect.signature + typing.get_type_hints run ONCE per callable; the call
      path only reads the descriptor
    - Missing annotations are rejected: the declared type is what decides the
      parameter kind, so guessing would defer errors to call time
    - Python spelling of "error" return: any BaseException subclass, usually
      `Exception | None`; raising is accepted too and is handled by the executor
"""

import inspect
import types
import typing
from dataclasses import dataclass
from typing import Any, Callable, Union

from contractapi.core.domain_types import (
    DEFAULT_NAMESPACE, ParamKind, ReturnKind, QualifiedName, qualify,
)
from contractapi.core.errors import RegistrationError
from contractapi.core.transaction_context import is_context_type


# Declared scalar types the marshaller knows how to convert.
SCALAR_TYPES: tuple[type, ...] = (str, int, float, bool)

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class ParamSpec:
    """One declared parameter."""
    name: str
    kind: ParamKind
    annotation: Any
    variadic: bool = False   # declared as *args


@dataclass(frozen=True)
class HandlerDescriptor:
    """Validated shape of one exposed operation or hook."""
    namespace: str
    name: str
    func: Callable[..., Any]
    params: tuple[ParamSpec, ...]
    returns: tuple[ReturnKind, ...]

    @property
    def qualified_name(self) -> QualifiedName:
        return qualify(self.namespace, self.name)

    @property
    def context_param(self) -> ParamSpec | None:
        if self.params and self.params[0].kind is ParamKind.CONTEXT:
            return self.params[0]
        return None

    @property
    def takes_context(self) -> bool:
        return self.context_param is not None

    @property
    def value_params(self) -> tuple[ParamSpec, ...]:
        """Parameters fed from the string arguments (everything but the context)."""
        if self.takes_context:
            return self.params[1:]
        return self.params

    @property
    def has_sequence(self) -> bool:
        return bool(self.params) and self.params[-1].kind is ParamKind.SEQUENCE

    @property
    def shape(self) -> tuple[ParamKind, ...]:
        return tuple(p.kind for p in self.value_params)


# --- Introspection ---------------------------------------------------------

def _introspect(func: Callable[..., Any], label: str) -> tuple[inspect.Signature, dict]:
    """Signature and resolved annotations, or RegistrationError."""
    if not callable(func):
        raise RegistrationError("handler is not callable", label)
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError) as e:
        raise RegistrationError(f"signature cannot be inspected ({e})", label)
    target = getattr(func, "__func__", func)
    if not inspect.isfunction(target) and not inspect.ismethod(target):
        target = getattr(target, "__call__", target)
        target = getattr(target, "__func__", target)
    try:
        hints = typing.get_type_hints(target)
    except Exception as e:
        raise RegistrationError(f"annotations cannot be resolved ({e})", label)
    return sig, hints


def _param_kind(name: str, annotation: Any, variadic: bool, label: str) -> ParamKind:
    if variadic:
        if annotation is str:
            return ParamKind.SEQUENCE
        raise RegistrationError(
            f"variadic parameter *{name} must be annotated as str", label,
        )
    if is_context_type(annotation):
        return ParamKind.CONTEXT
    if annotation in SCALAR_TYPES:
        return ParamKind.SCALAR
    if typing.get_origin(annotation) is list and typing.get_args(annotation) == (str,):
        return ParamKind.SEQUENCE
    raise RegistrationError(
        f"parameter {name!r} has unsupported type {annotation!r}; "
        "expected a TransactionContext, str, int, float, bool or list[str]",
        label,
    )


def _describe_params(
    sig: inspect.Signature, hints: dict, label: str,
) -> tuple[ParamSpec, ...]:
    specs: list[ParamSpec] = []
    for param in sig.parameters.values():
        if param.kind in (param.KEYWORD_ONLY, param.VAR_KEYWORD):
            raise RegistrationError(
                f"parameter {param.name!r} must be positional", label,
            )
        if param.default is not param.empty:
            raise RegistrationError(
                f"parameter {param.name!r} must not have a default value", label,
            )
        if param.name not in hints:
            raise RegistrationError(
                f"parameter {param.name!r} has no type annotation", label,
            )
        variadic = param.kind is param.VAR_POSITIONAL
        kind = _param_kind(param.name, hints[param.name], variadic, label)
        specs.append(ParamSpec(param.name, kind, hints[param.name], variadic))
    _check_param_order(specs, label)
    return tuple(specs)


def _check_param_order(specs: list[ParamSpec], label: str) -> None:
    contexts = [i for i, s in enumerate(specs) if s.kind is ParamKind.CONTEXT]
    sequences = [i for i, s in enumerate(specs) if s.kind is ParamKind.SEQUENCE]
    if len(contexts) > 1:
        raise RegistrationError("at most one context parameter is allowed", label)
    if contexts and contexts[0] != 0:
        raise RegistrationError("context parameter must be the first parameter", label)
    if len(sequences) > 1:
        raise RegistrationError("at most one string-sequence parameter is allowed", label)
    if sequences and sequences[0] != len(specs) - 1:
        raise RegistrationError(
            "string-sequence parameter must be the last parameter", label,
        )


def _is_error_type(hint: Any) -> bool:
    return isinstance(hint, type) and issubclass(hint, BaseException)


def _single_return_kind(hint: Any) -> ReturnKind | None:
    """Kind of one return slot, or None when the type is not allowed."""
    if hint is str:
        return ReturnKind.STRING
    if _is_error_type(hint):
        return ReturnKind.ERROR
    if typing.get_origin(hint) in (Union, types.UnionType):
        members = [a for a in typing.get_args(hint) if a is not _NONE_TYPE]
        if len(members) == 1:
            return _single_return_kind(members[0])
    return None


def _describe_returns(hints: dict, label: str) -> tuple[ReturnKind, ...]:
    if "return" not in hints:
        raise RegistrationError("return type annotation is missing", label)
    hint = hints["return"]
    if hint is _NONE_TYPE or hint is None:
        return ()
    if typing.get_origin(hint) is tuple:
        slots = typing.get_args(hint)
        if not 1 <= len(slots) <= 2 or Ellipsis in slots:
            raise RegistrationError("a handler returns at most two values", label)
    else:
        slots = (hint,)
    kinds = []
    for slot in slots:
        kind = _single_return_kind(slot)
        if kind is None:
            raise RegistrationError(
                f"return type {slot!r} is not allowed; expected str or an error type",
                label,
            )
        kinds.append(kind)
    if len(kinds) == 2:
        if kinds[0] == kinds[1]:
            raise RegistrationError(
                f"at most one {kinds[0].value} return value is allowed", label,
            )
        if kinds != [ReturnKind.STRING, ReturnKind.ERROR]:
            raise RegistrationError("error must be the last return value", label)
    return tuple(kinds)


# --- Public API ------------------------------------------------------------

def describe_handler(
    func: Callable[..., Any], name: str | None = None,
    namespace: str = DEFAULT_NAMESPACE,
) -> HandlerDescriptor:
    """Validate a handler and build its descriptor. Raises RegistrationError."""
    name = name or getattr(func, "__name__", repr(func))
    label = qualify(namespace, name)
    sig, hints = _introspect(func, label)
    params = _describe_params(sig, hints, label)
    returns = _describe_returns(hints, label)
    return HandlerDescriptor(namespace, name, func, params, returns)


def describe_unknown_hook(
    func: Callable[..., Any], namespace: str = DEFAULT_NAMESPACE,
) -> HandlerDescriptor:
    """Unknown hooks take the context alone or the raw args alone."""
    hook = describe_handler(func, "<unknown>", namespace)
    if not hook.params:
        raise RegistrationError(
            "unknown-function hook must take the context or a string-sequence",
            hook.qualified_name,
        )
    if len(hook.params) > 1:
        raise RegistrationError(
            "unknown-function hook takes either the context or a string-sequence, not both",
            hook.qualified_name,
        )
    if hook.params and hook.params[0].kind is ParamKind.SCALAR:
        raise RegistrationError(
            "unknown-function hook parameter must be the context or a string-sequence",
            hook.qualified_name,
        )
    return hook


def check_prefix(hook: HandlerDescriptor, handler: HandlerDescriptor, role: str) -> None:
    """A before/after hook may only declare a positional prefix of the handler's values."""
    hook_shape, target_shape = hook.shape, handler.shape
    if len(hook_shape) > len(target_shape):
        raise RegistrationError(
            f"{role} hook {hook.name!r} declares {len(hook_shape)} argument(s) "
            f"but handler takes {len(target_shape)}",
            handler.qualified_name,
        )
    for i, (mine, theirs) in enumerate(zip(hook_shape, target_shape)):
        if mine is not theirs:
            raise RegistrationError(
                f"{role} hook {hook.name!r} parameter {i} is {mine.value}, "
                f"handler expects {theirs.value}",
                handler.qualified_name,
            )


def check_context(
    descriptor: HandlerDescriptor, context_type: type, role: str = "handler",
) -> None:
    """The group's context type must be usable where the callable declares one."""
    param = descriptor.context_param
    if param is None:
        return
    if not issubclass(context_type, param.annotation):
        raise RegistrationError(
            f"{role} expects context {param.annotation.__name__} but the group "
            f"uses {context_type.__name__}",
            descriptor.qualified_name,
        )
