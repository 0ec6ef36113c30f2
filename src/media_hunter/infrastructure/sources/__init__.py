"""
Media Provider Registry

Fixed, explicit list of the stock-media sources searched by the aggregator.

Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                   SearchAggregator                       │
    │  ┌──────────┬──────────┬──────────┬──────────────────┐  │
    │  │  Pexels  │ Pixabay  │  Giphy   │    Freesound     │  │
    │  │photo+vid │ img+vid  │   gif    │      audio       │  │
    │  └──────────┴──────────┴──────────┴──────────────────┘  │
    └─────────────────────────────────────────────────────────┘

A provider whose API key is missing is replaced by a MisconfiguredProvider
that fails every search with a new ConfigurationError carrying the same
message, so only that source degrades.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from media_hunter.core.exceptions import ConfigurationError

from .base_client import BaseAPIClient, BaseMediaProvider
from .freesound import FreesoundClient
from .giphy import GiphyClient
from .pexels import PexelsClient
from .pixabay import PixabayClient

if TYPE_CHECKING:
    from collections.abc import Mapping

    from media_hunter.domain.entities.media import MediaSource, NormalizedQuery, ProviderResult

logger = logging.getLogger(__name__)

# Registration order is the interleaving order
PROVIDER_CLASSES: tuple[type[BaseMediaProvider], ...] = (
    PexelsClient,
    PixabayClient,
    GiphyClient,
    FreesoundClient,
)


class MisconfiguredProvider:
    """Stand-in for an adapter that could not be constructed."""

    def __init__(self, source: MediaSource, error: ConfigurationError):
        self.source = source
        self.error = error

    async def search(self, query: NormalizedQuery) -> ProviderResult:
        # Never re-raise self.error: its traceback would grow on every call
        raise ConfigurationError(str(self.error), source=self.source.value)

    async def close(self) -> None:
        return None


def create_providers(
    api_keys: Mapping[str, str | None],
    timeout: float = 10.0,
) -> list[BaseMediaProvider | MisconfiguredProvider]:
    """
    Build one provider per registered source.

    Args:
        api_keys: API key per source value ("pexels", "pixabay", ...)
        timeout: Per-request HTTP timeout in seconds

    Returns:
        Providers in registration order; misconfigured sources are included
        as MisconfiguredProvider so they still show up in diagnostics.
    """
    providers: list[BaseMediaProvider | MisconfiguredProvider] = []
    for provider_cls in PROVIDER_CLASSES:
        source = provider_cls.source
        try:
            providers.append(provider_cls(api_keys.get(source.value), timeout=timeout))
        except ConfigurationError as e:
            logger.warning(f"{source.display_name} disabled: {e}")
            providers.append(MisconfiguredProvider(source, e))
    return providers


__all__ = [
    "PROVIDER_CLASSES",
    "BaseAPIClient",
    "BaseMediaProvider",
    "FreesoundClient",
    "GiphyClient",
    "MisconfiguredProvider",
    "PexelsClient",
    "PixabayClient",
    "create_providers",
]
