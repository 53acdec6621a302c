"""Contract Groups - tests for sealing, setters and convention-based discovery.

Tests cover:
    - Contract subclasses expose public methods only, renamed by @transaction
    - Setters feed the sealed group (namespace, context, hooks)
    - Sealing rejects bad handlers, bad hooks and bad function names
    - Sealed handler table is read-only
"""

import pytest

from contractapi.core.contract import Contract, ContractGroup, transaction
from contractapi.core.errors import RegistrationError
from contractapi.core.transaction_context import TransactionContext


class AssetContext(TransactionContext):
    pass


class OtherContext(TransactionContext):
    pass


class Assets(Contract):

    @transaction("Create")
    def create(self, ctx: TransactionContext, asset_id: str) -> None: ...

    def read(self, ctx: TransactionContext, asset_id: str) -> str:
        return asset_id

    def _helper(self) -> None: ...


def before(ctx: AssetContext, asset_id: str) -> Exception | None: ...


def test_contract_exposes_public_methods():
    group = Assets().seal()
    assert set(group.handlers) == {"Create", "read"}
    assert group.name == "Assets"


def test_contract_does_not_expose_base_methods():
    names = set(Assets().get_handlers())
    assert "set_namespace" not in names
    assert "seal" not in names
    assert "_helper" not in names


def test_setters_configure_sealed_group():
    contract = Assets()
    contract.set_namespace("org.example.assets")
    contract.set_transaction_context_handler(AssetContext())
    contract.set_before_transaction(before)
    group = contract.seal()
    assert group.namespace == "org.example.assets"
    assert group.context_factory.context_type is AssetContext
    assert group.before.name == "before"
    assert group.handlers["Create"].qualified_name == "org.example.assets:Create"


def test_explicit_group_handlers():
    def ping() -> str:
        return "pong"

    group = ContractGroup({"Ping": ping}, namespace="sys").seal()
    assert group.name == "sys"
    assert group.handlers["Ping"].func is ping


def test_sealed_handlers_are_read_only():
    group = Assets().seal()
    with pytest.raises(TypeError):
        group.handlers["Delete"] = group.handlers["read"]


def test_add_handler_twice_is_rejected():
    def ping() -> str: ...

    group = ContractGroup()
    group.add_handler("Ping", ping)
    with pytest.raises(RegistrationError, match="registered twice"):
        group.add_handler("Ping", ping)


def test_function_name_with_separator_is_rejected():
    def ping() -> str: ...

    with pytest.raises(RegistrationError, match="invalid function name"):
        ContractGroup({"a:Ping": ping}).seal()


def test_before_hook_longer_than_a_handler_is_rejected():
    def too_long(ctx: TransactionContext, a: str, b: str) -> None: ...

    contract = Assets()
    contract.set_before_transaction(too_long)
    with pytest.raises(RegistrationError, match="before hook 'too_long'"):
        contract.seal()


def test_hook_with_other_concrete_context_is_rejected():
    def other(ctx: OtherContext) -> None: ...

    contract = Assets()
    contract.set_transaction_context_handler(AssetContext)
    contract.set_after_transaction(other)
    with pytest.raises(RegistrationError, match="after hook expects context OtherContext"):
        contract.seal()


def test_handler_context_must_match_group_context():
    def handler(ctx: AssetContext) -> None: ...

    with pytest.raises(RegistrationError):
        ContractGroup({"Run": handler}).seal()


def test_bad_unknown_hook_is_rejected():
    def unknown(name: str) -> Exception: ...

    contract = Assets()
    contract.set_unknown_transaction(unknown)
    with pytest.raises(RegistrationError):
        contract.seal()


def test_context_needing_arguments_fails_at_seal():
    class NeedsTenant(TransactionContext):
        def __init__(self, tenant):
            self.tenant = tenant

    def read(ctx: NeedsTenant, asset_id: str) -> str: ...

    with pytest.raises(RegistrationError, match="NeedsTenant must be constructible"):
        ContractGroup({"Read": read}, context_type=NeedsTenant).seal()
