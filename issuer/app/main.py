"""
FastAPI entrypoint for the document issuance service.

The lifespan wires one shared httpx.AsyncClient, the issuance client,
the state tracker and the dispatcher onto ``app.state``. The tracker
lives exactly as long as the application; issuance history is not
persisted across restarts.
"""

import logging
import sys
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from issuer.app.api.documents import router as documents_router
from issuer.app.config import Settings, get_settings
from issuer.app.dispatcher import DocumentDispatcher
from issuer.app.events import LoggingEventEmitter
from issuer.app.services.issuance_client import IssuanceClient
from issuer.app.state.tracker import IssuanceStateTracker

logger = logging.getLogger("issuer.main")


def get_app_version() -> str:
    try:
        return version("gov-document-issuer")
    except PackageNotFoundError:
        return "0.1.0"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    ``settings`` and ``transport`` are injection points; by default
    settings come from the environment and the real network is used.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --------------------------------------------------------------
        # Load and validate configuration (FAIL FAST)
        # --------------------------------------------------------------
        try:
            resolved = settings or get_settings()
        except Exception:
            logger.exception("invalid_issuer_configuration")
            raise

        configure_logging(resolved)
        logger.info(
            "issuer_startup version=%s base_url=%s",
            get_app_version(),
            resolved.api_base_url,
        )

        http_client = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(resolved.request_timeout_seconds),
            headers={"User-Agent": f"gov-document-issuer/{get_app_version()}"},
        )

        app.state.settings = resolved
        app.state.http_client = http_client
        app.state.dispatcher = DocumentDispatcher(
            client=IssuanceClient(http_client, resolved),
            tracker=IssuanceStateTracker(),
            emitter=LoggingEventEmitter(),
        )

        try:
            yield
        finally:
            logger.info("issuer_shutdown")
            await http_client.aclose()

    app = FastAPI(
        title="gov-document-issuer",
        description="Typed government document issuance dispatcher",
        version=get_app_version(),
        lifespan=lifespan,
    )

    app.include_router(documents_router, prefix="/documents")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", summary="Service health check")
    def health_check() -> JSONResponse:
        return JSONResponse(content={"status": "ok", "service": "issuer"})

    return app


app = create_app()
