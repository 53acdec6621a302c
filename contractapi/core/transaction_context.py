"""Transaction Context - per-invocation carrier for store access and call data.

Invariants:
    - One context per invocation, created fresh by ContextFactory, never pooled
    - A context is bound to exactly one ChaincodeStub before any hook runs
    - Call data written by a before hook is visible to the handler and after
      hook of the SAME invocation only

Design Decisions:
    - Extension by subclassing TransactionContext: the router only touches
      bind_stub()/get_stub(), so extra fields on a subclass are free
    - Call data is a dict slot keyed by CallDataKey, not a global or thread-local
"""

import inspect
import uuid
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from contractapi.core.errors import RegistrationError, StateStoreError
from contractapi.core.store_protocols import StateStore

T = TypeVar("T")

_MISSING = object()


@dataclass(frozen=True)
class CallDataKey(Generic[T]):
    """Typed key for the per-call data slot."""
    name: str


class ChaincodeStub:
    """Per-invocation facade over the world-state store."""

    def __init__(
        self, store: StateStore, function: str, args: list[str],
        tx_id: str | None = None,
    ):
        self._store = store
        self.function = function
        self.args = list(args)
        self.tx_id = tx_id or uuid.uuid4().hex

    def get_state(self, key: str) -> bytes | None:
        """Value for key, or None when the key is absent."""
        return self._store.get(key)

    def put_state(self, key: str, value: bytes) -> None:
        if not key:
            raise StateStoreError("key must not be empty", "put")
        if value is None:
            raise StateStoreError(f"value for {key} must not be None", "put")
        self._store.put(key, bytes(value))

    def del_state(self, key: str) -> None:
        self._store.delete(key)


class TransactionContext:
    """Base context. Subclass it to carry extra per-call fields.

    Subclasses must be constructible with no arguments. They may be plain
    classes or dataclasses; the stub and call-data slot are set by bind_stub().
    """

    _stub: ChaincodeStub | None = None

    def bind_stub(self, stub: ChaincodeStub) -> None:
        self._stub = stub
        self._call_data: dict[str, Any] = {}

    def get_stub(self) -> ChaincodeStub:
        if self._stub is None:
            raise RuntimeError("Transaction context has no stub bound")
        return self._stub

    def set_call_data(self, key: CallDataKey[T], value: T) -> None:
        self._call_data[key.name] = value

    def get_call_data(self, key: CallDataKey[T], default: Any = _MISSING) -> T:
        """Read a call-data value. Missing keys raise KeyError unless a default is given."""
        if key.name in self._call_data:
            return self._call_data[key.name]
        if default is _MISSING:
            raise KeyError(key.name)
        return default

    def has_call_data(self, key: CallDataKey[Any]) -> bool:
        return key.name in self._call_data


def is_context_type(annotation: Any) -> bool:
    """True when annotation is TransactionContext or a subclass of it."""
    return isinstance(annotation, type) and issubclass(annotation, TransactionContext)


class ContextFactory:
    """Builds the registered context type, one instance per invocation."""

    def __init__(self, context_type: type[TransactionContext] = TransactionContext):
        if not is_context_type(context_type):
            raise RegistrationError(
                f"context type {context_type!r} must subclass TransactionContext",
            )
        _check_no_arg_constructor(context_type)
        self.context_type = context_type

    def accepts(self, declared: type) -> bool:
        """Whether a handler declaring `declared` can receive our contexts."""
        return issubclass(self.context_type, declared)

    def create(self, stub: ChaincodeStub) -> TransactionContext:
        ctx = self.context_type()
        ctx.bind_stub(stub)
        return ctx


def _check_no_arg_constructor(context_type: type[TransactionContext]) -> None:
    """Contexts are built per call with no arguments."""
    try:
        sig = inspect.signature(context_type)
    except (TypeError, ValueError):
        return
    try:
        sig.bind()
    except TypeError:
        raise RegistrationError(
            f"context type {context_type.__name__} must be constructible without "
            f"arguments, its signature is {sig}",
        )
