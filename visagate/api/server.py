"""FastAPI server exposing the visa lookup handlers."""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from visagate.datasource.ivisa import IVisaSource
from visagate.datastore.engine import close_db, get_session_factory, init_db
from visagate.services.client import ProviderClient, ProviderConfig
from visagate.services.visa_lookup import (
    CachedLookupHandler,
    VisaEligibilityHandler,
    VisaOptionsHandler,
)
from visagate.settings import Settings, global_settings

# Every verb is routed so that non-POST calls get the JSON 405 envelope.
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class VisaServer:
    """HTTP server for the visa lookup endpoints."""

    def __init__(
        self,
        eligibility_handler: VisaEligibilityHandler,
        options_handler: VisaOptionsHandler,
        app: FastAPI | None = None,
    ):
        self.eligibility_handler = eligibility_handler
        self.options_handler = options_handler
        self.app = app or FastAPI(title="VisaGate")

        # Register routes
        self.app.api_route("/visa-eligibility", methods=ROUTED_METHODS)(
            self.handle_eligibility
        )
        self.app.api_route("/visa-options", methods=ROUTED_METHODS)(
            self.handle_options
        )
        self.app.get("/health")(self.health_check)

    async def handle_eligibility(self, request: Request) -> JSONResponse:
        """Merged iVisa + KITAS options for a destination/nationality pair."""
        return await self._dispatch(self.eligibility_handler, request)

    async def handle_options(self, request: Request) -> JSONResponse:
        """Raw provider visa options for a destination/nationality pair."""
        return await self._dispatch(self.options_handler, request)

    async def health_check(self) -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "visagate"}

    @staticmethod
    async def _dispatch(handler: CachedLookupHandler, request: Request) -> JSONResponse:
        body: Any = None
        if request.method == "POST":
            try:
                body = await request.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.debug(f"Unparseable request body: {e}")

        result = await handler.handle(request.method, body)
        return JSONResponse(status_code=result.status_code, content=result.body)


def create_visa_server(
    eligibility_handler: VisaEligibilityHandler,
    options_handler: VisaOptionsHandler,
) -> FastAPI:
    """Create FastAPI app around prebuilt handlers.

    Args:
        eligibility_handler: handler for /visa-eligibility
        options_handler: handler for /visa-options

    Returns:
        FastAPI app
    """
    server = VisaServer(eligibility_handler, options_handler)
    return server.app


def create_app(settings: Settings = global_settings) -> FastAPI:
    """Create the production app from settings.

    The database is opened on startup; the database and provider clients
    are released on shutdown.
    """
    ivisa_client = ProviderClient(
        ProviderConfig(
            service_id=IVisaSource.SERVICE_ID,
            url=settings.ivisa_api_url,
            api_key=settings.ivisa_api_key,
            user_agent="VisaEligibilityFunction/1.0",
            timeout=settings.upstream_timeout,
        )
    )
    visa_client = ProviderClient(
        ProviderConfig(
            service_id="visa-api",
            url=settings.visa_api_url,
            api_key=settings.visa_api_key,
            user_agent="VisaOptionsFunction/1.0",
            timeout=settings.upstream_timeout,
        )
    )

    source = IVisaSource(ivisa_client)

    def open_session() -> AsyncSession:
        # The engine only exists once the lifespan has started
        return get_session_factory()()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Initializing database...")
        await init_db(settings.database_url, echo=settings.database_echo)
        if not source.is_configured():
            logger.warning("IVISA_API_KEY is not set; iVisa requests may be rejected")
        logger.info("VisaGate ready")
        try:
            yield
        finally:
            await ivisa_client.close()
            await visa_client.close()
            await close_db()
            logger.info("VisaGate stopped")

    server = VisaServer(
        VisaEligibilityHandler(open_session, source),
        VisaOptionsHandler(open_session, visa_client),
        app=FastAPI(title="VisaGate", lifespan=lifespan),
    )
    return server.app
