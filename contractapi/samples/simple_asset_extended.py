"""Simple Asset (extended) - custom context, before hook and unknown hook.

The before hook loads the asset once into the call-data slot; handlers read it
from there instead of hitting the store again. Errors are raised as HandlerError.
"""

from contractapi.core.contract import Contract, transaction
from contractapi.core.errors import HandlerError, StateStoreError
from contractapi.core.transaction_context import CallDataKey, TransactionContext
from contractapi.services.invocation_router import Chaincode, create_chaincode

EXISTING_ASSET: CallDataKey[bytes | None] = CallDataKey("existing_asset")


class CustomTransactionContext(TransactionContext):
    """Context carrying the asset fetched by the before hook."""

    @property
    def call_data(self) -> bytes | None:
        return self.get_call_data(EXISTING_ASSET, None)


def get_asset(ctx: CustomTransactionContext, asset_id: str) -> Exception | None:
    """Before hook: fetch the asset named by the first argument."""
    try:
        existing = ctx.get_stub().get_state(asset_id)
    except StateStoreError:
        return Exception("Unable to interact with world state")
    ctx.set_call_data(EXISTING_ASSET, existing)
    return None


def handle_unknown(args: list[str]) -> Exception:
    return Exception(f"Unknown function name passed with args {args}")


class SimpleAsset(Contract):

    def __init__(self):
        super().__init__()
        self.set_transaction_context_handler(CustomTransactionContext)
        self.set_before_transaction(get_asset)
        self.set_unknown_transaction(handle_unknown)

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


def build_chaincode() -> Chaincode:
    return create_chaincode(SimpleAsset())
