"""
HTTP API Server for topic sentiment analysis.

Endpoints:
    POST /api/analyze   {"query": "..."} -> summary + ranked results
    GET  /health        liveness and embedding model status

Error mapping:
    missing / blank query -> 400 {"error": "Query required", "category": "validation", ...}
    anything unexpected   -> 500 {"error": "Failed to analyze"} (no detail leaked)
    source failures       -> absorbed, listed in ``degraded_sources``
"""

from __future__ import annotations

import argparse
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..container import ApplicationContainer, close_sources, create_container
from ..shared.exceptions import InvalidQueryError
from ..shared.settings import Settings

logger = logging.getLogger(__name__)


# Pydantic models for API requests / responses
class AnalyzeRequest(BaseModel):
    """Analysis request body."""
    query: Optional[str] = None


class ResultItem(BaseModel):
    """One ranked, sentiment-labelled item."""
    source: str
    title: str
    text: Optional[str] = None
    url: Optional[str] = None
    sentiment: str
    relevance: Optional[float] = None


class DegradedSourceModel(BaseModel):
    """A source that failed for this request."""
    source: str
    reason: str
    retryable: bool = False


class AnalyzeResponse(BaseModel):
    """Summary plus ranked results."""
    query: str
    total: int
    counts: dict[str, int]
    percentages: dict[str, int]
    results: list[ResultItem]
    degraded_sources: list[DegradedSourceModel] = []
    ranking_degraded: bool = False


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str
    category: Optional[str] = None
    severity: Optional[str] = None
    retryable: Optional[bool] = None
    suggestion: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    embedding_model: str
    model_loaded: bool


def create_api_server(container: ApplicationContainer | None = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        container: Pre-built container (tests inject one with overrides).
            Defaults to one configured from the environment.

    Returns:
        Configured FastAPI instance.
    """
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("HTTP API server started")
        yield
        logger.info("HTTP API server shutting down")
        await close_sources(container)

    app = FastAPI(
        title="Topic Sentiment API",
        description="Public sentiment about a topic, aggregated from news, "
                    "encyclopedia and discussion sources.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.container = container

    # The dashboard front end is served from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content=InvalidQueryError(None).to_dict())

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        embedder = container.embedder()
        return HealthResponse(
            status="healthy",
            embedding_model=getattr(embedder, "model_name", type(embedder).__name__),
            model_loaded=bool(getattr(embedder, "is_loaded", False)),
        )

    @app.post(
        "/api/analyze",
        response_model=AnalyzeResponse,
        response_model_exclude_unset=True,
        responses={
            400: {"model": ErrorResponse, "description": "Query missing or blank"},
            500: {"model": ErrorResponse, "description": "Unexpected failure"},
        },
    )
    async def analyze(payload: AnalyzeRequest):
        """
        Analyze public sentiment about ``payload.query``.

        Sources that fail are skipped; the response is built from the rest.
        """
        try:
            report = await container.aggregator().run(payload.query)
        except InvalidQueryError as e:
            return JSONResponse(status_code=400, content=e.to_dict())
        except Exception:
            logger.exception(f"Analysis failed for query {payload.query!r}")
            return JSONResponse(status_code=500, content={"error": "Failed to analyze"})

        return AnalyzeResponse.model_validate(report.to_dict())

    return app


def run_api_server(
    host: str | None = None,
    port: int | None = None,
    settings: Settings | None = None,
) -> None:
    """
    Run the HTTP API server.

    Args:
        host: Host to bind to (default from SENTIMENT_API_HOST, else 127.0.0.1)
        port: Port to bind to (default from SENTIMENT_API_PORT, else 8000)
        settings: Explicit settings (default: read from environment)
    """
    import uvicorn

    settings = settings or Settings.from_env()
    app = create_api_server(create_container(settings))

    host = host or settings.api_host
    port = port or settings.api_port
    logger.info(f"Starting HTTP API server on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")


def main() -> None:
    parser = argparse.ArgumentParser(description="Topic Sentiment HTTP API Server")
    parser.add_argument("--host", default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    run_api_server(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
