"""contractapi HTTP Transport - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ContractAPIError -> structured JSON responses
    - Chaincode and state store are built once in lifespan unless injected
    - A RegistrationError while loading the chaincode aborts start-up

Design Decisions:
    - create_app() factory so tests inject a chaincode and store directly
    - Lifespan over @app.on_event: FastAPI recommended pattern
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contractapi.api.error_handlers import register_error_handlers
from contractapi.api.routes import health, invoke
from contractapi.config import get_settings
from contractapi.core.store_protocols import StateStore
from contractapi.infrastructure.chaincode_loader import build_state_store, load_chaincode
from contractapi.infrastructure.observability import setup_logging
from contractapi.services.invocation_router import Chaincode

logger = logging.getLogger(__name__)


def create_app(
    chaincode: Chaincode | None = None, store: StateStore | None = None,
) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        app.state.chaincode = chaincode or load_chaincode(settings.chaincode_factory)
        app.state.store = store or build_state_store(settings)
        logger.info("contractapi started")
        yield
        dispose = getattr(app.state.store, "dispose", None)
        if dispose is not None:
            dispose()
        logger.info("contractapi shutting down")

    app = FastAPI(title="contractapi", version="0.1.0", lifespan=lifespan)
    # Set eagerly too, so an injected chaincode works without running lifespan
    app.state.chaincode = chaincode
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(invoke.router)
    register_error_handlers(app)
    return app


app = create_app()
