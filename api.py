#!/usr/bin/env python3
"""
XSLT Gateway REST API

This module provides the FastAPI-based HTTP surface of the gateway. A request
names a transformer in the path and carries the target URL as the raw query
string:

    GET /catalog?http://example.com/catalog.xml

The gateway fetches the URL, renders it through catalog.xslt and returns the
result. Problems are returned as text/plain with the problem's status code
(400 for a bad target URL, 502 for upstream failures); anything unexpected
is logged with a full report and answered with a 500.

Usage:
    # Start the API server
    uvicorn api:app --host 0.0.0.0 --port 8000

    # Or programmatically
    from api import create_app
    app = create_app()
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from xslt_gateway import __version__
from xslt_gateway.config import GatewayConfig, configure_logging, get_config
from xslt_gateway.errors import report_exception
from xslt_gateway.fetch import FetchClient, HttpFetchClient
from xslt_gateway.transform import StyleSheetLibrary, Transformer

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "This is nowhere to be found."


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class HealthStatus(BaseModel):
    """Health check response."""
    status: str = "healthy"
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class GatewayInfo(BaseModel):
    """Gateway configuration and available transformers."""
    version: str
    stylesheet_dir: str
    transformers: List[str] = Field(default_factory=list)


# ============================================================================
# API ENDPOINTS
# ============================================================================

def create_app(config: Optional[GatewayConfig] = None,
               fetch_client: Optional[FetchClient] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Gateway configuration (defaults to the current configuration)
        fetch_client: Upstream client shared by all requests (defaults to an
            HttpFetchClient built from config)
    """
    config = config or get_config()
    configure_logging(config.log_level)

    owns_client = fetch_client is None
    if owns_client:
        fetch_client = HttpFetchClient(
            timeout=config.fetch_timeout,
            verify=config.verify_tls,
            user_agent=config.user_agent,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Serving style sheets from {app.state.library.base_dir.resolve()}")
        yield
        if owns_client:
            fetch_client.close()

    app = FastAPI(
        title="XSLT Gateway",
        description="""
Fetches a remote XML document and renders it through a local XSLT style sheet.

## Usage

`GET /{transformer}?{url}` - renders `url` through `{transformer}.xslt`.

- **400**: the target URL is not valid
- **502**: upstream answered with a status other than 200, could not be
  reached, or returned a document the style sheet cannot render
- **500**: unexpected failure, details are in the server log
        """,
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url=None,
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.library = StyleSheetLibrary(config.stylesheet_path)
    app.state.fetch_client = fetch_client

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    # ========================================================================
    # HEALTH & INFO ENDPOINTS
    # ========================================================================

    @app.get("/api/v1/health", response_model=HealthStatus, tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return HealthStatus()

    @app.get("/api/v1/info", response_model=GatewayInfo, tags=["System"])
    async def get_info(request: Request):
        """Get gateway configuration and the available transformers."""
        library: StyleSheetLibrary = request.app.state.library
        return GatewayInfo(
            version=__version__,
            stylesheet_dir=str(library.base_dir.resolve()),
            transformers=library.names(),
        )

    # ========================================================================
    # TRANSFORMATION ENDPOINT
    # ========================================================================

    @app.get("/{transformer_name}", tags=["Transformation"])
    def transform(transformer_name: str, request: Request):
        """
        Render the URL given as query string through a named style sheet.

        Runs synchronously in the worker threadpool: fetching and rendering
        both block until done.
        """
        url = request.url.query
        try:
            transformer = Transformer.get(
                transformer_name,
                library=request.app.state.library,
                fetch_client=request.app.state.fetch_client,
            )
            output = transformer.transform(url)
            if transformer.has_problems():
                problem = transformer.problems[0]
                return PlainTextResponse(problem.message, status_code=problem.code)
            return Response(content=output, media_type=transformer.media_type)
        except Exception as e:
            return PlainTextResponse(report_exception(e, logger), status_code=500)

    return app


# Create default app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
