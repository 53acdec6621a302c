"""Contract Metadata Schemas - Pydantic description of everything a chaincode exposes.

Invariants:
    - One ContractMetadata per registered group, user groups first, system last
    - Parameter kinds and return kinds use the domain enum values
"""

from pydantic import BaseModel, Field

from contractapi.core.domain_types import ParamKind, ReturnKind


class ParameterMetadata(BaseModel):
    name: str
    kind: ParamKind
    type: str


class FunctionMetadata(BaseModel):
    name: str
    qualified_name: str
    parameters: list[ParameterMetadata] = Field(default_factory=list)
    returns: list[ReturnKind] = Field(default_factory=list)


class ContractMetadata(BaseModel):
    name: str
    namespace: str
    context_type: str
    functions: list[FunctionMetadata] = Field(default_factory=list)
    has_before_hook: bool = False
    has_after_hook: bool = False
    has_unknown_hook: bool = False


class ChaincodeMetadata(BaseModel):
    default_namespace_contract: str | None = None
    contracts: list[ContractMetadata] = Field(default_factory=list)
