"""Invocation Router - tests for namespace resolution and registration-time checks.

Tests cover:
    - Two namespaces exposing the same function name never cross-dispatch
    - Duplicate namespaces, a second default group and the system namespace
      are rejected while building
    - Unknown namespace -> RoutingError response, or the configured fallback
    - invoke_args() parses the transport argument convention
    - Metadata lists every group and function
    - Read round-trip against a seeded store
"""

import json

import pytest

from contractapi.core.contract import ContractGroup
from contractapi.core.domain_types import SYSTEM_NAMESPACE
from contractapi.core.errors import RegistrationError
from contractapi.core.invocation import InvocationRequest
from contractapi.core.transaction_context import TransactionContext
from contractapi.infrastructure.state_store import MemoryStateStore
from contractapi.services.invocation_router import Chaincode, create_chaincode


def _creator(tag: str, calls: list):
    def create(ctx: TransactionContext, asset_id: str) -> str:
        calls.append((tag, asset_id))
        return f"{tag}:{asset_id}"
    return create


def read(ctx: TransactionContext, asset_id: str) -> tuple[str, Exception | None]:
    existing = ctx.get_stub().get_state(asset_id)
    if existing is None:
        return "", Exception(f"Cannot read asset. Asset with id {asset_id} does not exist")
    return existing.decode(), None


@pytest.fixture
def calls():
    return []


@pytest.fixture
def chaincode(calls):
    return create_chaincode(
        ContractGroup({"Create": _creator("a", calls)}, namespace="a"),
        ContractGroup({"Create": _creator("b", calls)}, namespace="b"),
        ContractGroup({"Read": read}),
    )


def test_namespaces_never_cross_dispatch(chaincode, calls, store):
    assert chaincode.invoke("a:Create", ["X"], store).payload == "a:X"
    assert chaincode.invoke("b:Create", ["X"], store).payload == "b:X"
    assert calls == [("a", "X"), ("b", "X")]


def test_invoke_request_uses_exact_namespace(chaincode, calls, store):
    chaincode.invoke_request(InvocationRequest("a", "Create", ("X",)), store)
    assert calls == [("a", "X")]


def test_default_namespace_has_no_prefix(chaincode):
    store = MemoryStateStore({"ASSET_1": b"Updated"})
    response = chaincode.invoke("Read", ["ASSET_1"], store)
    assert response.payload == "Updated"
    assert response.error is None


def test_read_missing_asset_is_error(chaincode, store):
    response = chaincode.invoke("Read", ["ASSET_9"], store)
    assert response.error == "Cannot read asset. Asset with id ASSET_9 does not exist"


def test_invoke_args_takes_function_from_first_arg(chaincode, calls, store):
    assert chaincode.invoke_args(["b:Create", "Y"], store).payload == "b:Y"


def test_invoke_args_empty_is_argument_error(chaincode, store):
    assert chaincode.invoke_args([], store).error_code == "ARGUMENT_ERROR"


def test_unknown_namespace_is_routing_error(chaincode, calls, store):
    response = chaincode.invoke("c:Create", ["X"], store)
    assert response.error_code == "ROUTING_ERROR"
    assert response.error == "Contract not found with name c"
    assert calls == []


def test_unknown_function_in_known_namespace_is_not_found(chaincode, store):
    response = chaincode.invoke("a:Delete", ["X"], store)
    assert response.error_code == "ROUTING_ERROR"
    assert "Function Delete not found" in response.error


def test_fallback_handles_unknown_namespace(store):
    def fallback(args: list[str]) -> Exception:
        return Exception(f"nothing here for {args}")

    chaincode = Chaincode(ContractGroup({"Read": read}), fallback=fallback)
    response = chaincode.invoke("zzz:Read", ["ASSET_1"], store)
    assert response.error == "nothing here for ['ASSET_1']"


def test_duplicate_namespace_is_rejected():
    def ping() -> str: ...

    with pytest.raises(RegistrationError, match="already registered"):
        create_chaincode(
            ContractGroup({"Ping": ping}, namespace="a"),
            ContractGroup({"Pong": ping}, namespace="a"),
        )


def test_second_default_namespace_is_rejected():
    def ping() -> str: ...

    with pytest.raises(RegistrationError, match="only one contract group may use the default"):
        create_chaincode(ContractGroup({"Ping": ping}), ContractGroup({"Pong": ping}))


def test_system_namespace_is_reserved():
    def ping() -> str: ...

    with pytest.raises(RegistrationError, match="reserved"):
        create_chaincode(ContractGroup({"Ping": ping}, namespace=SYSTEM_NAMESPACE))


def test_empty_chaincode_is_rejected():
    with pytest.raises(RegistrationError):
        Chaincode()


def test_illegal_handler_fails_before_serving():
    def broken(asset_id: str, ctx: TransactionContext) -> None: ...

    with pytest.raises(RegistrationError, match="context parameter must be the first"):
        create_chaincode(ContractGroup({"Broken": broken}, namespace="a"))


def test_descriptors_index_qualified_names(chaincode):
    names = set(chaincode.descriptors())
    assert {"a:Create", "b:Create", "Read"} <= names
    assert f"{SYSTEM_NAMESPACE}:GetMetadata" in names
    assert chaincode.resolve("a", "Create").qualified_name == "a:Create"
    assert chaincode.resolve("zzz", "Create") is None
    assert chaincode.namespaces == ("a", "b", "")


def test_metadata_lists_groups_and_functions(chaincode):
    metadata = chaincode.metadata()
    by_namespace = {c.namespace: c for c in metadata.contracts}
    assert set(by_namespace) == {"a", "b", "", SYSTEM_NAMESPACE}
    read_fn = by_namespace[""].functions[0]
    assert read_fn.name == "Read"
    assert [p.name for p in read_fn.parameters] == ["asset_id"]
    assert [r.value for r in read_fn.returns] == ["string", "error"]
    assert metadata.default_namespace_contract == "default"


def test_get_metadata_system_function(chaincode, store):
    response = chaincode.invoke(f"{SYSTEM_NAMESPACE}:GetMetadata", [], store)
    assert response.ok
    body = json.loads(response.payload)
    assert {c["namespace"] for c in body["contracts"]} >= {"a", "b"}


def test_system_contract_can_be_disabled(store):
    chaincode = Chaincode(ContractGroup({"Read": read}), include_system_contract=False)
    response = chaincode.invoke(f"{SYSTEM_NAMESPACE}:GetMetadata", [], store)
    assert response.error_code == "ROUTING_ERROR"


def test_failed_call_does_not_affect_next_call(chaincode, calls, store):
    chaincode.invoke("a:Create", [], store)
    chaincode.invoke("a:Create", ["X", "extra"], store)
    assert chaincode.invoke("a:Create", ["X"], store).payload == "a:X"
