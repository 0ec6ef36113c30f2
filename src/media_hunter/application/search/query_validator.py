"""
QueryValidator - HTTP boundary normalization of search parameters

Turns raw query-string values into an immutable NormalizedQuery, or raises
a ValidationError the HTTP layer reports as 400. The aggregation core is
never invoked with an invalid request.

Rules:
- query: required, trimmed, must be non-empty
- type: all|image|video|audio|gif, anything else normalizes to "all"
- page: integer >= 1, default 1
- perPage: integer, clamped to 1..50, default 20
- orientation / orderBy: optional, must be a known value when given
- color: optional free text, passed through to providers

Example:
    >>> q = normalize_search_params(query=" cats ", media_type="gif", per_page="500")
    >>> q.text, q.media_type, q.per_page
    ('cats', <MediaType.GIF: 'gif'>, 50)
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from media_hunter.core.exceptions import InvalidParameterError, InvalidQueryError
from media_hunter.domain.entities.media import (
    ALL_TYPES,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    MediaType,
    NormalizedQuery,
    OrderBy,
    Orientation,
)

E = TypeVar("E", bound=Enum)


def normalize_media_type(raw: str | None) -> MediaType | str:
    """Map a raw ``type`` value onto a MediaType; unknown values become "all"."""
    if raw:
        try:
            return MediaType(raw.strip().lower())
        except ValueError:
            pass
    return ALL_TYPES


def _parse_int(name: str, raw: str | int | None, default: int) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidParameterError(name, raw, "an integer") from None


def _parse_enum(name: str, raw: str | None, enum_cls: type[E]) -> E | None:
    if raw is None or not raw.strip():
        return None
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        allowed = "|".join(member.value for member in enum_cls)
        raise InvalidParameterError(name, raw, allowed) from None


def normalize_search_params(
    query: str | None,
    media_type: str | None = None,
    page: str | int | None = None,
    per_page: str | int | None = None,
    orientation: str | None = None,
    color: str | None = None,
    order_by: str | None = None,
) -> NormalizedQuery:
    """
    Build a NormalizedQuery from raw request parameters.

    Raises:
        InvalidQueryError: query missing or blank
        InvalidParameterError: malformed page/perPage/orientation/orderBy
    """
    if query is None or not query.strip():
        raise InvalidQueryError()

    page_number = _parse_int("page", page, 1)
    if page_number < 1:
        raise InvalidParameterError("page", page, "an integer >= 1")

    page_size = _parse_int("perPage", per_page, DEFAULT_PER_PAGE)
    page_size = min(max(page_size, 1), MAX_PER_PAGE)

    return NormalizedQuery(
        text=query.strip(),
        media_type=normalize_media_type(media_type),
        page=page_number,
        per_page=page_size,
        orientation=_parse_enum("orientation", orientation, Orientation),
        color=color.strip() if color and color.strip() else None,
        order_by=_parse_enum("orderBy", order_by, OrderBy),
    )
