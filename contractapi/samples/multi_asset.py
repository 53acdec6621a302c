"""Multi Asset - two namespaced contracts sharing a custom context and hooks.

Namespaces:
    org.example.assets.simple   plain string assets
    org.example.assets.complex  JSON assets {"owner": str, "value": int}
"""

from pydantic import BaseModel, ValidationError

from contractapi.core.contract import Contract, transaction
from contractapi.core.errors import HandlerError, StateStoreError
from contractapi.core.transaction_context import CallDataKey, TransactionContext
from contractapi.services.invocation_router import Chaincode, create_chaincode

SIMPLE_NAMESPACE = "org.example.assets.simple"
COMPLEX_NAMESPACE = "org.example.assets.complex"

EXISTING_ASSET: CallDataKey[bytes | None] = CallDataKey("existing_asset")


class ComplexAssetRecord(BaseModel):
    owner: str
    value: int


class CustomTransactionContext(TransactionContext):
    """Context with the pre-fetched asset and a JSON writer."""

    @property
    def call_data(self) -> bytes | None:
        return self.get_call_data(EXISTING_ASSET, None)

    def put_complex_asset(self, asset_id: str, asset: ComplexAssetRecord) -> None:
        try:
            self.get_stub().put_state(asset_id, asset.model_dump_json().encode())
        except StateStoreError:
            raise HandlerError("Unable to interact with world state")


def get_asset(ctx: CustomTransactionContext, asset_id: str) -> Exception | None:
    try:
        existing = ctx.get_stub().get_state(asset_id)
    except StateStoreError:
        return Exception("Unable to interact with world state")
    ctx.set_call_data(EXISTING_ASSET, existing)
    return None


def handle_unknown(args: list[str]) -> Exception:
    return Exception(f"Unknown function name passed with args {args}")


def _configure(contract: Contract, namespace: str) -> Contract:
    contract.set_transaction_context_handler(CustomTransactionContext)
    contract.set_before_transaction(get_asset)
    contract.set_unknown_transaction(handle_unknown)
    contract.set_namespace(namespace)
    return contract


class SimpleAsset(Contract):

    @transaction("Create")
    def create(self, ctx: CustomTransactionContext, asset_id: str) -> None:
        if ctx.call_data is not None:
            raise HandlerError(f"Cannot create asset. Asset with id {asset_id} already exists")
        ctx.get_stub().put_state(asset_id, b"Initialised")

    @transaction("Update")
    def update(self, ctx: CustomTransactionContext, asset_id: str, value: str) -> None:
        if ctx.call_data is None:
            raise HandlerError(f"Cannot update asset. Asset with id {asset_id} does not exist")
        ctx.get_stub().put_state(asset_id, value.encode())

    @transaction("Read")
    def read(self, ctx: CustomTransactionContext, asset_id: str) -> str:
        if ctx.call_data is None:
            raise HandlerError(f"Cannot read asset. Asset with id {asset_id} does not exist")
        return ctx.call_data.decode()


class ComplexAsset(Contract):

    @staticmethod
    def _load(ctx: CustomTransactionContext, asset_id: str) -> ComplexAssetRecord:
        if ctx.call_data is None:
            raise HandlerError(f"Cannot update asset. Asset with id {asset_id} does not exist")
        try:
            return ComplexAssetRecord.model_validate_json(ctx.call_data)
        except ValidationError:
            raise HandlerError(f"Asset with id {asset_id} is not a ComplexAsset")

    @transaction("Create")
    def create(self, ctx: CustomTransactionContext, asset_id: str) -> None:
        if ctx.call_data is not None:
            raise HandlerError(f"Cannot create asset. Asset with id {asset_id} already exists")
        ctx.put_complex_asset(asset_id, ComplexAssetRecord(owner="Regulator", value=0))

    @transaction("UpdateOwner")
    def update_owner(self, ctx: CustomTransactionContext, asset_id: str, new_owner: str) -> None:
        asset = self._load(ctx, asset_id)
        asset.owner = new_owner
        ctx.put_complex_asset(asset_id, asset)

    @transaction("UpdateValue")
    def update_value(
        self, ctx: CustomTransactionContext, asset_id: str, additional_value: str,
    ) -> None:
        """Add additional_value, an integer literal, to the asset's value."""
        asset = self._load(ctx, asset_id)
        try:
            asset.value += int(additional_value)
        except ValueError:
            raise HandlerError(
                f"Cannot use passed value {additional_value} as value. It is not an integer",
            )
        ctx.put_complex_asset(asset_id, asset)

    @transaction("Read")
    def read(self, ctx: CustomTransactionContext, asset_id: str) -> tuple[str, Exception | None]:
        if ctx.call_data is None:
            return "", Exception(f"Cannot read asset. Asset with id {asset_id} does not exist")
        try:
            ComplexAssetRecord.model_validate_json(ctx.call_data)
        except ValidationError:
            return "", Exception(f"Asset with id {asset_id} is not a ComplexAsset")
        return ctx.call_data.decode(), None


def build_chaincode() -> Chaincode:
    return create_chaincode(
        _configure(SimpleAsset(), SIMPLE_NAMESPACE),
        _configure(ComplexAsset(), COMPLEX_NAMESPACE),
    )
