"""Invoke Routes - HTTP transport for chaincode invocations and metadata.

Invariants:
    - POST /api/v1/invoke always answers with an InvokeResponse body
    - Per-call failures map to 4xx by error code; the router itself never raises
    - GET /api/v1/metadata lists every contract group and function
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from contractapi.api.dependencies import get_chaincode, get_store
from contractapi.core.store_protocols import StateStore
from contractapi.schemas.invoke import InvokeRequest, InvokeResponse
from contractapi.schemas.metadata import ChaincodeMetadata
from contractapi.services.invocation_router import Chaincode

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["invoke"])

_STATUS_BY_CODE = {
    "ARGUMENT_ERROR": 400,
    "HANDLER_ERROR": 400,
    "RESULT_ERROR": 500,
    "ROUTING_ERROR": 404,
    "STATE_STORE_ERROR": 503,
}


@router.post("/invoke", response_model=InvokeResponse)
def invoke(
    body: InvokeRequest,
    chaincode: Chaincode = Depends(get_chaincode),
    store: StateStore = Depends(get_store),
):
    """Run one invocation synchronously and relay its response."""
    response = chaincode.invoke_args(body.transport_args(), store, body.tx_id)
    content = InvokeResponse(**response.to_dict())
    if response.ok:
        return content
    return JSONResponse(
        status_code=_STATUS_BY_CODE.get(response.error_code, 400),
        content=content.model_dump(),
    )


@router.get("/metadata", response_model=ChaincodeMetadata)
def metadata(chaincode: Chaincode = Depends(get_chaincode)):
    return chaincode.metadata()
