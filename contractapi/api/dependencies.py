"""Request Dependencies - chaincode and state store held on app.state.

A missing collaborator raises ChaincodeUnavailableError, which the domain
error handler turns into a 503 envelope.
"""

from fastapi import Request

from contractapi.core.errors import ChaincodeUnavailableError
from contractapi.core.store_protocols import StateStore
from contractapi.services.invocation_router import Chaincode


def get_chaincode(request: Request) -> Chaincode:
    chaincode = getattr(request.app.state, "chaincode", None)
    if chaincode is None:
        raise ChaincodeUnavailableError("Chaincode")
    return chaincode


def get_store(request: Request) -> StateStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise ChaincodeUnavailableError("State store")
    return store
