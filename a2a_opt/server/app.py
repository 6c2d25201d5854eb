"""FastAPI binding of the OPT JSON-RPC handler.

Run with any ASGI server, e.g. ``uvicorn a2a_opt.server.app:create_app --factory``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from a2a_opt.core.errors.errors import InvalidRequestError, OPTError, ParseError
from a2a_opt.core.settings.settings import OPTSettings, load_settings
from a2a_opt.extension.activation import is_opt_activated
from a2a_opt.extension.agent_card import create_extension_declaration
from a2a_opt.extension.constants import A2A_EXTENSIONS_HEADER, OPT_EXTENSION_URI
from a2a_opt.providers.store.base import OPTStore
from a2a_opt.providers.store.factory import create_store
from a2a_opt.rpc.handler import OPTHandler, echo_request_id
from a2a_opt.rpc.models import JsonRpcError, JsonRpcResponse, RequestId

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    """Set the root log level, installing a handler if none exists."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def _error_body(request_id: RequestId, error: OPTError) -> dict[str, Any]:
    return JsonRpcResponse(id=request_id, error=JsonRpcError(**error.to_rpc_error())).to_dict()


def create_app(settings: OPTSettings | None = None, store: OPTStore | None = None) -> FastAPI:
    """Create the application.

    Args:
        settings: Settings to use; loaded from the environment when omitted
        store: Store to serve; created from settings.store_provider when omitted
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)
    if store is None:
        store = create_store(settings.store_provider, settings.store_settings())
    handler = OPTHandler(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        logger.info(f"Starting OPT server with store '{store.name}'")
        await store.initialize()
        yield
        logger.info("Shutting down OPT server...")
        await store.shutdown()

    app = FastAPI(
        title="A2A OPT",
        description="Objective / Plan / Task hierarchy extension for A2A agents",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.handler = handler

    @app.post("/rpc")
    async def rpc(request: Request) -> JSONResponse:
        """JSON-RPC endpoint. Errors are reported in the body with HTTP 200."""
        activated = is_opt_activated(request.headers)
        headers = {A2A_EXTENSIONS_HEADER: OPT_EXTENSION_URI} if activated else None

        try:
            body = await request.json()
        except ValueError as e:
            logger.debug(f"Rejecting undecodable request body: {e}")
            return JSONResponse(_error_body(None, ParseError(str(e), cause=e)), headers=headers)

        if not isinstance(body, dict):
            error = InvalidRequestError("Invalid Request: body must be a JSON object")
            return JSONResponse(_error_body(None, error), headers=headers)

        if settings.require_activation and not activated:
            error = InvalidRequestError(
                f"Extension not activated: send {A2A_EXTENSIONS_HEADER}: {OPT_EXTENSION_URI}"
            )
            return JSONResponse(_error_body(echo_request_id(body.get("id")), error), headers=headers)

        response = await handler.handle(body)
        return JSONResponse(response.to_dict(), headers=headers)

    @app.get("/extension")
    async def extension() -> dict[str, Any]:
        """Agent card entry for the OPT extension."""
        declaration = create_extension_declaration(
            settings.extension_params(), required=settings.extension_required
        )
        return declaration.to_wire()

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
