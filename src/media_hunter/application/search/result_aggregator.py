"""
SearchAggregator - Multi-Source Fan-Out, Merging and Ranking

Pipeline for one search:
1. Dispatch the query to every configured provider concurrently, each call
   isolated and bounded by a timeout
2. Fold outcomes: failures become per-source error entries, never exceptions
3. Flatten successful items (within-source order preserved) and sum totals
4. Interleave round-robin across sources for visual variety
5. Re-rank semantically when the query has text; fall back to interleaved
   order if ranking fails
6. Report a diagnostic summary for every configured source

Architecture Decision:
    Providers are anything with a ``source`` attribute and an async
    ``search(query)``. The aggregator does not know about HTTP or API keys;
    a misconfigured provider is just one whose search always fails.

Example:
    >>> aggregator = SearchAggregator(create_providers(keys), SemanticReranker(EmbeddingClient()))
    >>> result = await aggregator.search_all(NormalizedQuery(text="ocean waves"))
    >>> [s.to_dict() for s in result.sources]
    [{'source': 'pexels', 'count': 40}, {'source': 'pixabay', 'count': 40},
     {'source': 'giphy', 'count': 20}, {'source': 'freesound', 'count': 20}]
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Protocol

from media_hunter.core.async_utils import gather_with_errors
from media_hunter.core.exceptions import ErrorSeverity, MediaHunterError
from media_hunter.domain.entities.media import (
    AggregateResult,
    MediaItem,
    MediaSource,
    NormalizedQuery,
    ProviderResult,
    SourceOutcome,
    SourceSummary,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .reranker import Reranker

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 15.0

_LOG_LEVELS = {
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.TRANSIENT: logging.WARNING,
    ErrorSeverity.ERROR: logging.WARNING,
    ErrorSeverity.CRITICAL: logging.ERROR,
}


class MediaProvider(Protocol):
    source: MediaSource

    async def search(self, query: NormalizedQuery) -> ProviderResult: ...


def interleave_results(
    items: Iterable[MediaItem],
    source_order: Sequence[MediaSource] = (),
) -> list[MediaItem]:
    """
    Round-robin merge of items across sources.

    Items are grouped by source (within-source order kept). Each round takes
    the next item from every source that still has one, in ``source_order``;
    sources missing from ``source_order`` follow in first-seen order.

    Example:
        counts (3, 1, 0, 5) over sources (A, B, C, D) give
        A1 B1 D1 A2 D2 A3 D3 D4 D5
    """
    by_source: dict[MediaSource, list[MediaItem]] = defaultdict(list)
    for item in items:
        by_source[item.source].append(item)

    order = [s for s in source_order if s in by_source]
    order += [s for s in by_source if s not in order]

    result: list[MediaItem] = []
    index = 0
    added = True
    while added:
        added = False
        for source in order:
            bucket = by_source[source]
            if index < len(bucket):
                result.append(bucket[index])
                added = True
        index += 1
    return result


class SearchAggregator:
    """
    Fans a query out to all providers and merges their results.

    Usage:
        aggregator = SearchAggregator(providers, reranker, provider_timeout=10)
        result = await aggregator.search_all(query)
    """

    def __init__(
        self,
        providers: Sequence[MediaProvider],
        reranker: Reranker | None = None,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
    ) -> None:
        self._providers = list(providers)
        self._reranker = reranker
        self._provider_timeout = provider_timeout

    @property
    def providers(self) -> list[MediaProvider]:
        return list(self._providers)

    @property
    def source_order(self) -> list[MediaSource]:
        return [p.source for p in self._providers]

    async def search_all(self, query: NormalizedQuery) -> AggregateResult:
        """Search every provider and return the merged, ordered result set."""
        outcomes = await self._collect_outcomes(query)

        all_items: list[MediaItem] = []
        total_results = 0
        for outcome in outcomes:
            if not outcome.ok:
                continue
            all_items.extend(outcome.items)
            total_results += outcome.total

        interleaved = interleave_results(all_items, self.source_order)
        ranked = await self._rank(query, interleaved)

        logger.info(
            f"Search '{query.text}' type={query.media_type}: {len(ranked)} items, "
            f"{sum(1 for o in outcomes if not o.ok)}/{len(outcomes)} sources failed"
        )

        return AggregateResult(
            items=ranked,
            total_results=total_results,
            page=query.page,
            per_page=query.per_page,
            sources=[
                SourceSummary(source=o.source, count=len(o.items), error=o.error)
                for o in outcomes
            ],
        )

    async def _collect_outcomes(self, query: NormalizedQuery) -> list[SourceOutcome]:
        results = await gather_with_errors(
            *(self._search_one(p, query) for p in self._providers),
            return_exceptions=True,
        )

        outcomes: list[SourceOutcome] = []
        for provider, result in zip(self._providers, results, strict=True):
            if isinstance(result, Exception):
                message = _describe_failure(result, self._provider_timeout)
                _log_failure(provider.source, result, message)
                outcomes.append(SourceOutcome(source=provider.source, error=message))
            else:
                outcomes.append(SourceOutcome(source=provider.source, items=list(result.items), total=result.total))
        return outcomes

    async def _search_one(self, provider: MediaProvider, query: NormalizedQuery) -> ProviderResult:
        return await asyncio.wait_for(provider.search(query), timeout=self._provider_timeout)

    async def _rank(self, query: NormalizedQuery, items: list[MediaItem]) -> list[MediaItem]:
        if not query.has_text or self._reranker is None or not items:
            return items
        try:
            return await self._reranker.rerank(query.text, items)
        except Exception:
            logger.exception(f"Re-ranking failed for query '{query.text}', using interleaved order")
            return items

    async def close(self) -> None:
        """Close provider HTTP clients."""
        for provider in self._providers:
            close = getattr(provider, "close", None)
            if close is not None:
                await close()


def _describe_failure(error: Exception, timeout: float) -> str:
    if isinstance(error, TimeoutError):
        return f"timed out after {timeout:g}s"
    return str(error) or type(error).__name__


def _log_failure(source: MediaSource, error: Exception, message: str) -> None:
    level = logging.WARNING
    hint = ""
    if isinstance(error, MediaHunterError):
        level = _LOG_LEVELS[error.severity]
        if error.retryable:
            hint = " (retryable"
            if error.context.retry_after:
                hint += f", retry after {error.context.retry_after:g}s"
            hint += ")"
    logger.log(level, f"[{source.value}] Search error: {message}{hint}")
