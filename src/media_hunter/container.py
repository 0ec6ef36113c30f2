"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management.

Usage::

    from media_hunter.container import ApplicationContainer, config_from_env

    container = ApplicationContainer()
    container.config.from_dict(config_from_env())

    aggregator = container.aggregator()

    # In tests, override any provider:
    container.aggregator.override(providers.Object(fake_aggregator))
"""

from __future__ import annotations

import logging
import os
from typing import Any

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:5174"

_API_KEY_ENV = {
    "pexels": "PEXELS_API_KEY",
    "pixabay": "PIXABAY_API_KEY",
    "giphy": "GIPHY_API_KEY",
    "freesound": "FREESOUND_API_KEY",
}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


def config_from_env() -> dict[str, Any]:
    """
    Read application settings from environment variables.

    Environment Variables:
        PEXELS_API_KEY, PIXABAY_API_KEY, GIPHY_API_KEY, FREESOUND_API_KEY
        MEDIA_HUNTER_EMBEDDING_MODEL: sentence-transformers model name
        MEDIA_HUNTER_PROVIDER_TIMEOUT: seconds per provider search (default 15)
        MEDIA_HUNTER_HTTP_TIMEOUT: seconds per provider HTTP request (default 10)
        MEDIA_HUNTER_EMBEDDING_TIMEOUT: seconds per embedding call (default 30)
        MEDIA_HUNTER_RERANK: "false" disables semantic re-ranking
        CORS_ORIGINS: comma-separated allowed origins
    """
    return {
        "api_keys": {source: (os.environ.get(env, "").strip() or None) for source, env in _API_KEY_ENV.items()},
        "embedding_model": os.environ.get("MEDIA_HUNTER_EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL),
        "provider_timeout": float(os.environ.get("MEDIA_HUNTER_PROVIDER_TIMEOUT", "15")),
        "http_timeout": float(os.environ.get("MEDIA_HUNTER_HTTP_TIMEOUT", "10")),
        "embedding_timeout": float(os.environ.get("MEDIA_HUNTER_EMBEDDING_TIMEOUT", "30")),
        "rerank_enabled": _env_flag("MEDIA_HUNTER_RERANK", True),
        "cors_origins": [
            o.strip() for o in os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",") if o.strip()
        ],
    }


def _create_providers(api_keys: dict[str, str | None] | None, http_timeout: float | None) -> list[Any]:
    """Lazy factory for the provider list (avoids top-level httpx client creation)."""
    from media_hunter.infrastructure.sources import create_providers

    return create_providers(api_keys or {}, timeout=http_timeout or 10.0)


def _create_embedding_cache() -> object:
    from media_hunter.infrastructure.cache import EmbeddingCache

    return EmbeddingCache(max_size=10_000, ttl=3600.0)


def _create_embedding_client(model_name: str | None, timeout: float | None, cache: Any) -> object:
    from media_hunter.infrastructure.embedding import EmbeddingClient

    return EmbeddingClient(
        model_name=model_name or DEFAULT_EMBEDDING_MODEL,
        timeout=timeout or 30.0,
        cache=cache,
    )


def _create_reranker(enabled: bool | None, embedding_client: Any) -> object | None:
    if enabled is False:
        logger.info("Semantic re-ranking disabled")
        return None

    from media_hunter.application.search import SemanticReranker

    return SemanticReranker(embedding_client)


def _create_aggregator(providers_list: list[Any], reranker: Any, provider_timeout: float | None) -> object:
    from media_hunter.application.search import SearchAggregator

    return SearchAggregator(providers_list, reranker, provider_timeout=provider_timeout or 15.0)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for Media Hunter.

    Manages creation and lifecycle of all core services:
    - ``media_providers``: one adapter per stock-media source
    - ``embedding_client``: process-wide sentence-embedding model handle
    - ``reranker``: semantic re-ranker (None when disabled)
    - ``aggregator``: search fan-out and merge
    """

    config = providers.Configuration()

    media_providers = providers.Singleton(
        _create_providers,
        api_keys=config.api_keys,
        http_timeout=config.http_timeout,
    )

    embedding_cache = providers.Singleton(_create_embedding_cache)

    embedding_client = providers.Singleton(
        _create_embedding_client,
        model_name=config.embedding_model,
        timeout=config.embedding_timeout,
        cache=embedding_cache,
    )

    reranker = providers.Singleton(
        _create_reranker,
        enabled=config.rerank_enabled,
        embedding_client=embedding_client,
    )

    aggregator = providers.Singleton(
        _create_aggregator,
        providers_list=media_providers,
        reranker=reranker,
        provider_timeout=config.provider_timeout,
    )


__all__ = ["ApplicationContainer", "config_from_env"]
