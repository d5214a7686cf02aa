"""
FastAPI server for the assignment API. create_app(app) builds the ASGI app; run_api_server(app)
serves it with uvicorn using api.host / api.port from config.
Docs: http://<host>:<port>/docs
"""
import logging
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI

from onelook.assignments.api import get_router

logger = logging.getLogger(__name__)


def create_app(onelook_app: Any) -> FastAPI:
    """Create FastAPI app with routes that use the given OneLookApp instance."""
    app = FastAPI(title="OneLook API", description="Unified assignment deadlines")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(get_router(onelook_app), prefix="/api")
    return app


def run_api_server(onelook_app: Any, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the API in the foreground until interrupted."""
    api_config = onelook_app.config.get_section("api")
    host = host or api_config.get("host", "127.0.0.1")
    port = int(port or api_config.get("port", 8765))
    fastapi_app = create_app(onelook_app)
    logger.info(f"API server listening at http://{host}:{port} (docs at /docs)")
    uvicorn.run(fastapi_app, host=host, port=port, log_config=None)
