"""Search service main application."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from libs.common.config import SearchConfig
from libs.common.logging import configure_logging
from libs.common.tracing import configure_tracing, instrument_app
from libs.document_store.factory import create_document_store_from_config
from .api.routes import router as api_router
from .hybrid.search_manager import SearchManager
from .runtime.metrics import get_metrics_collector

logger = structlog.get_logger("search_service")

SERVICE_NAME = "search-service"


def build_search_manager(config: SearchConfig) -> Optional[SearchManager]:
    """Create the search manager, or ``None`` if the store cannot be built.

    The API still starts without a store; search requests then answer 503.
    """
    try:
        store = create_document_store_from_config(config)
    except Exception as e:
        logger.error("Failed to create document store", error=str(e))
        return None
    return SearchManager(
        store,
        config=config,
        metrics_collector=get_metrics_collector(SERVICE_NAME),
    )


def create_app(
    config: Optional[SearchConfig] = None,
    search_manager: Optional[SearchManager] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Parameters
    - config: service configuration (read from the environment by default)
    - search_manager: prebuilt manager; when omitted one is created at startup
    """
    config = config or SearchConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        configure_logging(SERVICE_NAME, config.ml_log_level, config.ml_log_format)

        if config.ml_tracing_enabled:
            tracer = configure_tracing(SERVICE_NAME, config.ml_otel_exporter)
            if tracer:
                logger.info("OpenTelemetry tracing enabled", exporter=config.ml_otel_exporter)
            else:
                logger.warning("Tracing initialization failed")
        else:
            logger.info("OpenTelemetry tracing disabled via configuration")

        logger.info("Starting search service")
        if app.state.search_manager is None:
            app.state.search_manager = build_search_manager(config)
        if app.state.search_manager is not None and not app.state.search_manager.health_check():
            logger.warning("Document store is not reachable; search may fail until it recovers")

        logger.info("Search service started successfully")

        yield

        logger.info("Shutting down search service")
        if app.state.search_manager is not None:
            app.state.search_manager.close()
        logger.info("Search service shutdown complete")

    app = FastAPI(
        title="Search Service",
        description="Basic, full-text, TF-IDF vector and hybrid document search",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.search_manager = search_manager
    app.state.metrics_collector = get_metrics_collector(SERVICE_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(api_router, prefix="/api")

    if config.ml_tracing_enabled:
        instrument_app(app)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Collect metrics for HTTP requests."""
        start_time = time.time()

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            logger.error("Unhandled request error", path=request.url.path, error=str(e))
            status_code = 500
            response = JSONResponse(
                status_code=500,
                content={"success": False, "error": "Internal server error"}
            )

        app.state.metrics_collector.record_http_request(
            method=request.method,
            endpoint=request.url.path,
            status=status_code,
            duration=time.time() - start_time
        )
        return response

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        search_manager = app.state.search_manager
        if search_manager is not None and search_manager.health_check():
            return {"status": "healthy", "service": SERVICE_NAME}
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "service": SERVICE_NAME}
        )

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=app.state.metrics_collector.get_metrics(),
            media_type="text/plain"
        )

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "health": "/health",
                "metrics": "/metrics",
                "search": "/api/search?query=<query>&mode=<mode>&page=<page>&limit=<limit>",
                "status": "/api/status"
            }
        }

    return app


app = create_app()


def main():
    """Run the service with uvicorn."""
    config = SearchConfig()
    uvicorn.run(
        "service_search.app.main:app",
        host="0.0.0.0",
        port=config.ml_search_port,
        log_level=config.ml_log_level.lower()
    )


if __name__ == "__main__":
    main()
