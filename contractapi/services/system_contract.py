"""System Contract - built-in group answering metadata queries.

Invariants:
    - Lives under SYSTEM_NAMESPACE; user groups may not claim it
    - GetMetadata returns the JSON of ChaincodeMetadata and never touches the store
"""

from typing import Callable

from contractapi.core.contract import ContractGroup, RegisteredGroup
from contractapi.core.domain_types import SYSTEM_NAMESPACE
from contractapi.core.signature import HandlerDescriptor
from contractapi.schemas.metadata import (
    ChaincodeMetadata, ContractMetadata, FunctionMetadata, ParameterMetadata,
)


def _type_name(annotation: object) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)


def describe_function(descriptor: HandlerDescriptor) -> FunctionMetadata:
    return FunctionMetadata(
        name=descriptor.name,
        qualified_name=descriptor.qualified_name,
        parameters=[
            ParameterMetadata(name=p.name, kind=p.kind, type=_type_name(p.annotation))
            for p in descriptor.value_params
        ],
        returns=list(descriptor.returns),
    )


def describe_group(group: RegisteredGroup) -> ContractMetadata:
    return ContractMetadata(
        name=group.name,
        namespace=group.namespace,
        context_type=group.context_factory.context_type.__name__,
        functions=[describe_function(d) for _, d in sorted(group.handlers.items())],
        has_before_hook=group.before is not None,
        has_after_hook=group.after is not None,
        has_unknown_hook=group.unknown is not None,
    )


def build_system_group(metadata: Callable[[], ChaincodeMetadata]) -> RegisteredGroup:
    """System group whose GetMetadata reads the chaincode lazily."""

    def get_metadata() -> str:
        return metadata().model_dump_json()

    return ContractGroup(
        {"GetMetadata": get_metadata},
        namespace=SYSTEM_NAMESPACE,
        name="SystemContract",
    ).seal()
