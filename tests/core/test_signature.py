"""Signature Validator - tests for registration-time shape rules.

Tests cover:
    - Legal orderings (context?, scalar*, sequence?) produce descriptors
    - Illegal orderings and unsupported types raise RegistrationError
    - Return shapes: (), (string,), (error,), (string, error) and their violations
    - Hook prefix and unknown-hook shape rules
    - Context compatibility between handler and group context type
"""

import pytest

from contractapi.core.domain_types import ParamKind, ReturnKind
from contractapi.core.errors import RegistrationError
from contractapi.core.signature import (
    check_context, check_prefix, describe_handler, describe_unknown_hook,
)
from contractapi.core.transaction_context import TransactionContext


class OtherContext(TransactionContext):
    pass


class ExtendedContext(TransactionContext):
    pass


# --- legal shapes ---

def h_empty() -> None: ...
def h_ctx(ctx: TransactionContext) -> None: ...
def h_ctx_str(ctx: TransactionContext, a: str) -> str: ...
def h_strs(a: str, b: str, c: str) -> Exception | None: ...
def h_ctx_strs_seq(ctx: TransactionContext, a: str, rest: list[str]) -> tuple[str, Exception | None]: ...
def h_seq_only(rest: list[str]) -> str: ...
def h_variadic(ctx: TransactionContext, a: str, *rest: str) -> None: ...
def h_primitives(ctx: TransactionContext, n: int, x: float, flag: bool) -> str: ...


@pytest.mark.parametrize("func,shape", [
    (h_empty, ()),
    (h_ctx, ()),
    (h_ctx_str, (ParamKind.SCALAR,)),
    (h_strs, (ParamKind.SCALAR,) * 3),
    (h_ctx_strs_seq, (ParamKind.SCALAR, ParamKind.SEQUENCE)),
    (h_seq_only, (ParamKind.SEQUENCE,)),
    (h_variadic, (ParamKind.SCALAR, ParamKind.SEQUENCE)),
    (h_primitives, (ParamKind.SCALAR,) * 3),
])
def test_legal_parameter_orderings_register(func, shape):
    descriptor = describe_handler(func)
    assert descriptor.shape == shape


def test_descriptor_records_context_and_sequence():
    d = describe_handler(h_ctx_strs_seq, "Put", "ns")
    assert d.qualified_name == "ns:Put"
    assert d.takes_context
    assert d.context_param.annotation is TransactionContext
    assert d.has_sequence
    assert [p.name for p in d.value_params] == ["a", "rest"]


def test_variadic_parameter_is_flagged():
    d = describe_handler(h_variadic)
    assert d.params[-1].variadic is True
    assert d.params[-1].kind is ParamKind.SEQUENCE


# --- illegal shapes ---

def bad_ctx_not_first(a: str, ctx: TransactionContext) -> None: ...
def bad_two_ctx(ctx: TransactionContext, other: TransactionContext) -> None: ...
def bad_seq_not_last(rest: list[str], a: str) -> None: ...
def bad_two_seq(a: list[str], b: list[str]) -> None: ...
def bad_type(a: dict) -> None: ...
def bad_list_of_int(a: list[int]) -> None: ...
def bad_unannotated(a) -> None: ...
def bad_default(a: str = "x") -> None: ...
def bad_kwonly(*, a: str) -> None: ...
def bad_kwargs(**kw: str) -> None: ...
def bad_variadic_type(*rest: int) -> None: ...
def bad_variadic_with_seq(a: list[str], *rest: str) -> None: ...


@pytest.mark.parametrize("func,rule", [
    (bad_ctx_not_first, "context parameter must be the first"),
    (bad_two_ctx, "at most one context"),
    (bad_seq_not_last, "must be the last parameter"),
    (bad_two_seq, "at most one string-sequence"),
    (bad_type, "unsupported type"),
    (bad_list_of_int, "unsupported type"),
    (bad_unannotated, "no type annotation"),
    (bad_default, "default value"),
    (bad_kwonly, "must be positional"),
    (bad_kwargs, "must be positional"),
    (bad_variadic_type, "annotated as str"),
    (bad_variadic_with_seq, "at most one string-sequence"),
])
def test_illegal_parameter_shapes_raise_registration_error(func, rule):
    with pytest.raises(RegistrationError) as exc:
        describe_handler(func)
    assert rule in exc.value.message
    assert exc.value.handler == func.__name__


# --- return shapes ---

def r_str_err() -> tuple[str, Exception]: ...
def r_optional_str() -> str | None: ...
def r_value_error() -> ValueError | None: ...


@pytest.mark.parametrize("func,returns", [
    (h_empty, ()),
    (h_ctx_str, (ReturnKind.STRING,)),
    (h_strs, (ReturnKind.ERROR,)),
    (h_ctx_strs_seq, (ReturnKind.STRING, ReturnKind.ERROR)),
    (r_str_err, (ReturnKind.STRING, ReturnKind.ERROR)),
    (r_optional_str, (ReturnKind.STRING,)),
    (r_value_error, (ReturnKind.ERROR,)),
])
def test_legal_return_shapes(func, returns):
    assert describe_handler(func).returns == returns


def ret_err_first() -> tuple[Exception, str]: ...
def ret_two_strings() -> tuple[str, str]: ...
def ret_three() -> tuple[str, Exception, str]: ...
def ret_int() -> int: ...
def ret_missing(): ...
def ret_union() -> str | Exception: ...


@pytest.mark.parametrize("func,rule", [
    (ret_err_first, "error must be the last"),
    (ret_two_strings, "at most one string"),
    (ret_three, "at most two values"),
    (ret_int, "is not allowed"),
    (ret_missing, "return type annotation is missing"),
    (ret_union, "is not allowed"),
])
def test_illegal_return_shapes(func, rule):
    with pytest.raises(RegistrationError) as exc:
        describe_handler(func)
    assert rule in exc.value.message


def test_non_callable_is_rejected():
    with pytest.raises(RegistrationError, match="not callable"):
        describe_handler("Read", "Read")


def test_bound_method_excludes_self():
    class Holder:
        def read(self, ctx: TransactionContext, key: str) -> str: ...

    d = describe_handler(Holder().read)
    assert d.name == "read"
    assert d.shape == (ParamKind.SCALAR,)


def test_callable_object_uses_call_signature():
    class Reader:
        def __call__(self, key: str) -> str: ...

    d = describe_handler(Reader(), "Read")
    assert d.shape == (ParamKind.SCALAR,)


# --- hooks ---

def hook_ctx_only(ctx: TransactionContext) -> Exception | None: ...
def hook_one(ctx: TransactionContext, asset_id: str) -> Exception | None: ...
def hook_two(ctx: TransactionContext, a: str, b: str) -> Exception | None: ...
def hook_seq(ctx: TransactionContext, rest: list[str]) -> None: ...


def test_hook_prefix_accepts_shorter_and_identical_shapes():
    handler = describe_handler(hook_two, "Update")
    check_prefix(describe_handler(hook_ctx_only), handler, "before")
    check_prefix(describe_handler(hook_one), handler, "before")
    check_prefix(describe_handler(hook_two), handler, "before")


def test_hook_with_more_parameters_than_handler_is_rejected():
    handler = describe_handler(hook_one, "Read")
    with pytest.raises(RegistrationError, match="declares 2 argument"):
        check_prefix(describe_handler(hook_two), handler, "before")


def test_hook_kind_mismatch_is_rejected():
    handler = describe_handler(hook_two, "Update")
    with pytest.raises(RegistrationError, match="handler expects scalar"):
        check_prefix(describe_handler(hook_seq), handler, "after")


def unknown_ctx(ctx: TransactionContext) -> Exception: ...
def unknown_args(args: list[str]) -> Exception: ...
def unknown_none() -> Exception: ...
def unknown_both(ctx: TransactionContext, args: list[str]) -> Exception: ...
def unknown_scalar(name: str) -> Exception: ...


@pytest.mark.parametrize("func", [unknown_ctx, unknown_args])
def test_unknown_hook_legal_shapes(func):
    describe_unknown_hook(func)


@pytest.mark.parametrize("func", [unknown_both, unknown_scalar, unknown_none])
def test_unknown_hook_illegal_shapes(func):
    with pytest.raises(RegistrationError):
        describe_unknown_hook(func)


def test_unknown_hook_without_parameters_is_rejected():
    with pytest.raises(RegistrationError, match="must take the context or a string-sequence"):
        describe_unknown_hook(unknown_none)


# --- context compatibility ---

def h_extended(ctx: ExtendedContext) -> None: ...


def test_base_context_declaration_accepts_extended_group_type():
    check_context(describe_handler(h_ctx), ExtendedContext)


def test_mismatched_concrete_context_types_are_rejected():
    with pytest.raises(RegistrationError, match="expects context ExtendedContext"):
        check_context(describe_handler(h_extended), OtherContext)
