"""Simple Asset - Contract subclass reading and writing plain string assets.

Handlers return their errors as values (`Exception | None`) instead of raising.
"""

from contractapi.core.contract import Contract, transaction
from contractapi.core.errors import StateStoreError
from contractapi.core.transaction_context import TransactionContext
from contractapi.services.invocation_router import Chaincode, create_chaincode

WORLD_STATE_ERROR = "Unable to interact with world state"


class SimpleAsset(Contract):

    @transaction("Create")
    def create(self, ctx: TransactionContext, asset_id: str) -> Exception | None:
        """Initialise an asset with the given id."""
        stub = ctx.get_stub()
        try:
            existing = stub.get_state(asset_id)
        except StateStoreError:
            return Exception(WORLD_STATE_ERROR)
        if existing is not None:
            return Exception(f"Cannot create asset. Asset with id {asset_id} already exists")
        try:
            stub.put_state(asset_id, b"Initialised")
        except StateStoreError:
            return Exception(WORLD_STATE_ERROR)
        return None

    @transaction("Update")
    def update(self, ctx: TransactionContext, asset_id: str, value: str) -> Exception | None:
        stub = ctx.get_stub()
        try:
            existing = stub.get_state(asset_id)
        except StateStoreError:
            return Exception(WORLD_STATE_ERROR)
        if existing is None:
            return Exception(f"Cannot update asset. Asset with id {asset_id} does not exist")
        try:
            stub.put_state(asset_id, value.encode())
        except StateStoreError:
            return Exception(WORLD_STATE_ERROR)
        return None

    @transaction("Read")
    def read(self, ctx: TransactionContext, asset_id: str) -> tuple[str, Exception | None]:
        try:
            existing = ctx.get_stub().get_state(asset_id)
        except StateStoreError:
            return "", Exception(WORLD_STATE_ERROR)
        if existing is None:
            return "", Exception(f"Cannot read asset. Asset with id {asset_id} does not exist")
        return existing.decode(), None


def build_chaincode() -> Chaincode:
    return create_chaincode(SimpleAsset())
