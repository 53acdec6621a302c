"""Invocation Router - resolves (namespace, function) across registered contract groups.

Invariants:
    - Built once from a fixed set of groups; the routing table is read-only after
      __init__ (no registration while serving)
    - Namespaces are unique; at most one group owns DEFAULT_NAMESPACE;
      SYSTEM_NAMESPACE is reserved; qualified names are unique
    - Every violation raises RegistrationError from __init__, before any call
    - Known namespace + unknown function -> that group's UNKNOWN branch
    - Unknown namespace -> process-wide fallback hook if configured, else a
      RoutingError response
    - invoke*() never raise; every failure is an InvocationResponse error

Design Decisions:
    - Explicit dict of namespace -> RegisteredGroup: every route visible in one place
    - The fallback is sealed as an ordinary group with only an unknown hook, so
      the executor handles it like any other UNKNOWN branch
"""

import logging
from types import MappingProxyType
from typing import Any, Callable

from contractapi.core.contract import ContractGroup, RegisteredGroup
from contractapi.core.domain_types import (
    DEFAULT_NAMESPACE, SYSTEM_NAMESPACE, QualifiedName,
)
from contractapi.core.errors import ArgumentError, RegistrationError, RoutingError
from contractapi.core.invocation import InvocationRequest, InvocationResponse
from contractapi.core.result_encoder import error_response
from contractapi.core.signature import HandlerDescriptor
from contractapi.core.store_protocols import StateStore
from contractapi.schemas.metadata import ChaincodeMetadata
from contractapi.services.lifecycle import LifecycleExecutor
from contractapi.services.system_contract import build_system_group, describe_group

logger = logging.getLogger(__name__)


class Chaincode:
    """Routes invocations to sealed contract groups. Immutable once built."""

    def __init__(
        self,
        *contracts: ContractGroup,
        fallback: Callable[..., Any] | None = None,
        include_system_contract: bool = True,
    ):
        if not contracts:
            raise RegistrationError("a chaincode needs at least one contract group")
        groups: dict[str, RegisteredGroup] = {}
        for contract in contracts:
            group = contract.seal()
            self._check_namespace(group, groups)
            groups[group.namespace] = group
        self._user_namespaces = tuple(groups)
        if include_system_contract:
            groups[SYSTEM_NAMESPACE] = build_system_group(self.metadata)
        self._groups = MappingProxyType(groups)
        self._descriptors = MappingProxyType(self._index_descriptors(groups))
        self._fallback = None
        if fallback is not None:
            self._fallback = ContractGroup(
                unknown=fallback, name="fallback",
            ).seal()
        self._executor = LifecycleExecutor()
        logger.info(
            f"Chaincode ready: {len(self._user_namespaces)} contract group(s), "
            f"{len(self._descriptors)} function(s)",
        )

    @staticmethod
    def _check_namespace(
        group: RegisteredGroup, groups: dict[str, RegisteredGroup],
    ) -> None:
        if group.namespace == SYSTEM_NAMESPACE:
            raise RegistrationError(
                f"namespace {SYSTEM_NAMESPACE!r} is reserved", group.name,
            )
        if group.namespace in groups:
            if group.namespace == DEFAULT_NAMESPACE:
                raise RegistrationError(
                    f"only one contract group may use the default namespace; "
                    f"{groups[group.namespace].name!r} already does",
                    group.name,
                )
            raise RegistrationError(
                f"namespace {group.namespace!r} is already registered by "
                f"{groups[group.namespace].name!r}",
                group.name,
            )

    @staticmethod
    def _index_descriptors(
        groups: dict[str, RegisteredGroup],
    ) -> dict[QualifiedName, HandlerDescriptor]:
        index: dict[QualifiedName, HandlerDescriptor] = {}
        for group in groups.values():
            for descriptor in group.handlers.values():
                if descriptor.qualified_name in index:
                    raise RegistrationError(
                        "qualified name registered twice", descriptor.qualified_name,
                    )
                index[descriptor.qualified_name] = descriptor
        return index

    # --- lookup ---

    @property
    def namespaces(self) -> tuple[str, ...]:
        return self._user_namespaces

    def group(self, namespace: str) -> RegisteredGroup | None:
        return self._groups.get(namespace)

    def descriptors(self) -> MappingProxyType:
        return self._descriptors

    def resolve(self, namespace: str, function: str) -> HandlerDescriptor | None:
        group = self._groups.get(namespace)
        if group is None:
            return None
        return group.handlers.get(function)

    def metadata(self) -> ChaincodeMetadata:
        default = self._groups.get(DEFAULT_NAMESPACE)
        return ChaincodeMetadata(
            default_namespace_contract=default.name if default else None,
            contracts=[describe_group(self._groups[ns]) for ns in self._groups],
        )

    # --- invocation ---

    def invoke_request(
        self, request: InvocationRequest, store: StateStore,
        tx_id: str | None = None,
    ) -> InvocationResponse:
        group = self._groups.get(request.namespace)
        if group is None:
            group = self._fallback
        if group is None:
            logger.info(
                f"No contract group for namespace {request.namespace!r}",
                extra={"namespace": request.namespace, "function": request.function},
            )
            return error_response(RoutingError(
                f"Contract not found with name {request.namespace}",
            ))
        return self._executor.execute(group, request, store, tx_id)

    def invoke(
        self, qualified_name: str, args: list[str], store: StateStore,
        tx_id: str | None = None,
    ) -> InvocationResponse:
        request = InvocationRequest.from_qualified_name(qualified_name, args)
        return self.invoke_request(request, store, tx_id)

    def invoke_args(
        self, args: list[str], store: StateStore, tx_id: str | None = None,
    ) -> InvocationResponse:
        """Transport entry point: args[0] is the qualified function name."""
        try:
            request = InvocationRequest.from_args(args)
        except ArgumentError as e:
            return error_response(e)
        return self.invoke_request(request, store, tx_id)


def create_chaincode(*contracts: ContractGroup, **kwargs: Any) -> Chaincode:
    """Build and seal a chaincode. Raises RegistrationError on any bad shape."""
    return Chaincode(*contracts, **kwargs)
