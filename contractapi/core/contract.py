"""Contract Groups - the registration surface handed to the router.

Invariants:
    - A ContractGroup is mutable only until it is sealed into a RegisteredGroup
    - RegisteredGroup is immutable: read-only handler table, validated hooks,
      one ContextFactory
    - Every handler and hook is validated while sealing; a bad shape raises
      RegistrationError before anything is served
    - Contract subclasses expose their public methods; methods of Contract /
      ContractGroup themselves are never exposed

Design Decisions:
    - Two registration styles over one core: ContractGroup takes an explicit
      {name: callable} dict, Contract discovers public methods by convention
    - Setters mirror the chaincode start-up path (set_namespace,
      set_before_transaction, ...)
"""

import inspect
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from contractapi.core.domain_types import DEFAULT_NAMESPACE, NAMESPACE_SEPARATOR
from contractapi.core.errors import RegistrationError
from contractapi.core.signature import (
    HandlerDescriptor, check_context, check_prefix, describe_handler,
    describe_unknown_hook,
)
from contractapi.core.transaction_context import ContextFactory, TransactionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredGroup:
    """Sealed, validated contract group used by the router at call time."""
    name: str
    namespace: str
    handlers: Mapping[str, HandlerDescriptor]
    context_factory: ContextFactory
    before: HandlerDescriptor | None = None
    after: HandlerDescriptor | None = None
    unknown: HandlerDescriptor | None = None


class ContractGroup:
    """Namespaced set of handlers sharing hooks and a context type."""

    def __init__(
        self,
        handlers: Mapping[str, Callable[..., Any]] | None = None,
        namespace: str = DEFAULT_NAMESPACE,
        context_type: type[TransactionContext] = TransactionContext,
        before: Callable[..., Any] | None = None,
        after: Callable[..., Any] | None = None,
        unknown: Callable[..., Any] | None = None,
        name: str | None = None,
    ):
        self._handlers: dict[str, Callable[..., Any]] = dict(handlers or {})
        self._namespace = namespace
        self._context_type = context_type
        self._before = before
        self._after = after
        self._unknown = unknown
        self._name = name

    # --- registration setters ---

    def add_handler(self, name: str, func: Callable[..., Any]) -> None:
        if name in self._handlers:
            raise RegistrationError("function registered twice", name)
        self._handlers[name] = func

    def set_namespace(self, namespace: str) -> None:
        self._namespace = namespace

    def set_transaction_context_handler(
        self, context: type[TransactionContext] | TransactionContext,
    ) -> None:
        """Accepts the context class or an instance of it."""
        self._context_type = context if isinstance(context, type) else type(context)

    def set_before_transaction(self, hook: Callable[..., Any]) -> None:
        self._before = hook

    def set_after_transaction(self, hook: Callable[..., Any]) -> None:
        self._after = hook

    def set_unknown_transaction(self, hook: Callable[..., Any]) -> None:
        self._unknown = hook

    # --- accessors ---

    def get_namespace(self) -> str:
        return self._namespace

    def get_name(self) -> str:
        return self._name or self._namespace or "default"

    def get_transaction_context_type(self) -> type[TransactionContext]:
        return self._context_type

    def get_handlers(self) -> dict[str, Callable[..., Any]]:
        return dict(self._handlers)

    # --- sealing ---

    def seal(self) -> RegisteredGroup:
        """Validate every handler and hook and freeze the group."""
        namespace = self.get_namespace()
        factory = ContextFactory(self.get_transaction_context_type())
        handlers = {}
        for fn_name, func in self.get_handlers().items():
            if not fn_name or NAMESPACE_SEPARATOR in fn_name:
                raise RegistrationError(
                    f"invalid function name {fn_name!r}", namespace or None,
                )
            descriptor = describe_handler(func, fn_name, namespace)
            check_context(descriptor, factory.context_type)
            handlers[fn_name] = descriptor
        before = self._describe_hook(self._before, "before", handlers, factory)
        after = self._describe_hook(self._after, "after", handlers, factory)
        unknown = None
        if self._unknown is not None:
            unknown = describe_unknown_hook(self._unknown, namespace)
            check_context(unknown, factory.context_type, "unknown hook")
        logger.info(
            f"Sealed contract group '{self.get_name()}' with {len(handlers)} function(s)",
            extra={"namespace": namespace},
        )
        return RegisteredGroup(
            name=self.get_name(),
            namespace=namespace,
            handlers=MappingProxyType(handlers),
            context_factory=factory,
            before=before,
            after=after,
            unknown=unknown,
        )

    def _describe_hook(
        self, hook: Callable[..., Any] | None, role: str,
        handlers: dict[str, HandlerDescriptor], factory: ContextFactory,
    ) -> HandlerDescriptor | None:
        if hook is None:
            return None
        descriptor = describe_handler(
            hook, getattr(hook, "__name__", f"<{role}>"), self.get_namespace(),
        )
        check_context(descriptor, factory.context_type, f"{role} hook")
        for handler in handlers.values():
            check_prefix(descriptor, handler, role)
        return descriptor


_NAME_ATTRIBUTE = "__contract_function_name__"


def transaction(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Expose a Contract method under a different function name."""
    def mark(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _NAME_ATTRIBUTE, name)
        return func
    return mark


class Contract(ContractGroup):
    """Convention-based group: every public method of a subclass is a handler.

    Subclass it, define methods taking (ctx, *string-ish args), and hand an
    instance to the chaincode. Names starting with "_" are private.
    """

    def __init__(self):
        super().__init__(name=type(self).__name__)

    def get_handlers(self) -> dict[str, Callable[..., Any]]:
        found = dict(self._handlers)
        for attr in dir(type(self)):
            if attr.startswith("_") or attr in _BASE_ATTRIBUTES:
                continue
            member = getattr(self, attr)
            if inspect.ismethod(member) or inspect.isfunction(member):
                found.setdefault(getattr(member, _NAME_ATTRIBUTE, attr), member)
        return found


_BASE_ATTRIBUTES = frozenset(dir(Contract))
