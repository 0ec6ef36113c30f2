"""
HTTP API Server for the Media Hunter browser client.

Endpoints:
    GET /api/search    Aggregated, re-ranked stock-media search
    GET /api/download  Streams a provider file back as an attachment
    GET /api/health    Liveness probe

Validation failures are 400s and never reach the aggregator. Provider and
ranking failures are absorbed by the aggregator; only unexpected errors
become 500s.
"""

from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from urllib.parse import quote

import httpx
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from media_hunter.application.search import normalize_search_params
from media_hunter.container import ApplicationContainer, config_from_env
from media_hunter.core.exceptions import ValidationError
from media_hunter.infrastructure.sources.base_client import USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 4000
DOWNLOAD_TIMEOUT = 30.0

_UNSAFE_FILENAME_CHARS = re.compile(r'["\\/\x00-\x1f\x7f]')


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    message: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str


router = APIRouter(prefix="/api")


def _create_download_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=DOWNLOAD_TIMEOUT,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


def _safe_filename(filename: str | None) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("", filename or "").strip()
    return cleaned or "download"


def _content_disposition(filename: str | None) -> str:
    """Attachment header value; non-ASCII names get an RFC 5987 filename*."""
    name = _safe_filename(filename)
    fallback = name.encode("ascii", "ignore").decode("ascii").strip() or "download"
    if fallback == name:
        return f'attachment; filename="{name}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(exclude_none=True),
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


@router.get(
    "/search",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid parameter"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
    },
)
async def search(
    request: Request,
    query: str | None = Query(default=None, description="Search text"),
    media_type: str | None = Query(default=None, alias="type", description="all|image|video|audio|gif"),
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None, alias="perPage", description="Clamped to 50"),
    orientation: str | None = Query(default=None, description="landscape|portrait|square"),
    color: str | None = Query(default=None),
    order_by: str | None = Query(default=None, alias="orderBy", description="relevant|popular|latest"),
):
    """
    Search every provider and return the merged result set.

    Returns:
        AggregateResult JSON: items, totalResults, page, perPage, sources
    """
    try:
        normalized = normalize_search_params(
            query=query,
            media_type=media_type,
            page=page,
            per_page=per_page,
            orientation=orientation,
            color=color,
            order_by=order_by,
        )
    except ValidationError as e:
        return _error(400, str(e), e.context.suggestion)

    container: ApplicationContainer = request.app.state.container
    try:
        aggregator = container.aggregator()
        result = await aggregator.search_all(normalized)
    except Exception as e:
        logger.exception(f"Search failed at aggregation stage for query={normalized.text!r} type={normalized.media_type}")
        return _error(500, "Internal server error", str(e))

    return result.to_dict()


@router.get(
    "/download",
    responses={
        400: {"model": ErrorResponse, "description": "Missing url"},
        500: {"model": ErrorResponse, "description": "Upstream fetch failed"},
    },
)
async def download(
    url: str | None = Query(default=None, description="File URL produced by a search result"),
    filename: str | None = Query(default=None, description="Attachment filename"),
):
    """Stream the bytes at ``url`` back as an attachment."""
    if not url:
        return _error(400, "URL parameter is required")
    if not url.startswith(("http://", "https://")):
        return _error(400, "URL must be http(s)")

    headers = {"Content-Disposition": _content_disposition(filename)}

    client = _create_download_client()
    upstream: httpx.Response | None = None
    try:
        upstream = await client.send(client.build_request("GET", url), stream=True)
        upstream.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Download error for {url}: {e}")
        if upstream is not None:
            await upstream.aclose()
        await client.aclose()
        return _error(500, "Download failed", str(e))

    # aiter_bytes() decodes gzip/br, so an encoded body's length no longer applies
    content_length = upstream.headers.get("content-length")
    if content_length and upstream.headers.get("content-encoding", "identity") == "identity":
        headers["Content-Length"] = content_length

    async def body() -> AsyncIterator[bytes]:
        try:
            async for chunk in upstream.aiter_bytes():
                yield chunk
        finally:
            await upstream.aclose()
            await client.aclose()

    return StreamingResponse(
        body(),
        media_type=upstream.headers.get("content-type", "application/octet-stream"),
        headers=headers,
    )


def create_api_server(container: ApplicationContainer | None = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        container: Pre-configured DI container. If None, one is built from
            environment variables.

    Returns:
        Configured FastAPI instance.
    """
    if container is None:
        container = ApplicationContainer()
        container.config.from_dict(config_from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Media Hunter API starting")
        yield
        logger.info("Media Hunter API shutting down")
        await container.aggregator().close()

    app = FastAPI(
        title="Media Hunter API",
        description="Aggregated stock-media search across Pexels, Pixabay, Giphy and Freesound.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.config.cors_origins() or [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def run_api_server(host: str = DEFAULT_API_HOST, port: int = DEFAULT_API_PORT) -> None:
    """
    Run the HTTP API server.

    Args:
        host: Host to bind to (default: 127.0.0.1 for local only)
        port: Port to bind to (default: 4000)
    """
    import uvicorn

    logger.info(f"Starting Media Hunter API on {host}:{port}")
    uvicorn.run(create_api_server(), host=host, port=port, log_level="info")
