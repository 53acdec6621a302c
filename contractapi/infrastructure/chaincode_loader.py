"""Chaincode Loader - builds the configured chaincode and state store at start-up.

Invariants:
    - load_chaincode() imports "module:callable" and requires a Chaincode back
    - A RegistrationError from the factory propagates: the process must not serve
"""

import importlib
import logging

from contractapi.config import Settings
from contractapi.core.store_protocols import StateStore
from contractapi.infrastructure.state_store import MemoryStateStore, SqlStateStore
from contractapi.services.invocation_router import Chaincode

logger = logging.getLogger(__name__)


def load_chaincode(factory_path: str) -> Chaincode:
    module_name, _, attr = factory_path.partition(":")
    module = importlib.import_module(module_name)
    factory = getattr(module, attr)
    chaincode = factory()
    if not isinstance(chaincode, Chaincode):
        raise TypeError(f"{factory_path} returned {type(chaincode).__name__}, not Chaincode")
    logger.info(f"Loaded chaincode from {factory_path}")
    return chaincode


def build_state_store(settings: Settings) -> StateStore:
    if settings.state_store == "sql":
        return SqlStateStore(settings.database_url)
    return MemoryStateStore()
