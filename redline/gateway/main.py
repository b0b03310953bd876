"""FastAPI gateway application entry point.

Run with ``uvicorn redline.gateway.main:app``.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import redline.logging
from redline import __version__
from redline.gateway.api.v1 import router as v1_router
from redline.gateway.middleware import CorrelationIdMiddleware, setup_exception_handlers
from redline.pipeline.table import TableStore

logger = structlog.get_logger()


def create_app(store: TableStore | None = None) -> FastAPI:
    """Build the gateway application.

    Args:
        store: Table store to serve; a fresh empty one by default

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Redline",
        description="Entity alignment, redaction and aggregation for transcripts",
        version=__version__,
    )
    app.state.table_store = store if store is not None else TableStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Generates request_id for every request
    app.add_middleware(CorrelationIdMiddleware)

    setup_exception_handlers(app)

    app.include_router(v1_router)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


redline.logging.configure("gateway")
app = create_app()
logger.info("gateway_ready", version=__version__)
