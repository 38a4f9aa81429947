"""Sort and pagination validation.

Caller-supplied sort fields are mapped onto the fixed
``SORTABLE_MOVIE_PROPERTIES`` allow-list before they can reach query text.
Anything outside it is rejected; nothing is escaped or quoted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from movie_atlas.errors import InvalidOrder, InvalidPagination, InvalidSort
from movie_atlas.schema import SORTABLE_MOVIE_PROPERTIES


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @property
    def cypher(self) -> str:
        return "ASC" if self is SortOrder.ASC else "DESC"


_ORDER_TOKENS: dict[str, SortOrder] = {
    "asc": SortOrder.ASC,
    "ascending": SortOrder.ASC,
    "desc": SortOrder.DESC,
    "descending": SortOrder.DESC,
}

_SORTABLE: frozenset[str] = frozenset(SORTABLE_MOVIE_PROPERTIES)


@dataclass(frozen=True)
class SortSpec:
    """A validated (field, direction) pair, safe to render into Cypher."""

    field: str
    order: SortOrder

    @property
    def direction(self) -> str:
        return self.order.cypher


def parse_order(order: str | SortOrder) -> SortOrder:
    """Map an order token onto ``SortOrder``; raise ``InvalidOrder`` otherwise."""
    if isinstance(order, SortOrder):
        return order
    if isinstance(order, str):
        parsed = _ORDER_TOKENS.get(order.strip().lower())
        if parsed is not None:
            return parsed
    logger.warning("Rejected sort order {!r}", order)
    raise InvalidOrder(order)


def validate_sort(field: str, order: str | SortOrder = SortOrder.ASC) -> SortSpec:
    """Validate a caller's sort field and direction.

    The field is compared verbatim against the allow-list (no case folding or
    trimming), so the returned ``SortSpec.field`` is always an allow-list entry.
    """
    if not isinstance(field, str) or field not in _SORTABLE:
        logger.warning("Rejected sort field {!r}", field)
        raise InvalidSort(str(field), SORTABLE_MOVIE_PROPERTIES)
    return SortSpec(field=field, order=parse_order(order))


def validate_page(limit: int, skip: int, *, max_limit: int | None = None) -> tuple[int, int]:
    """Check ``limit``/``skip`` are non-negative ints (bools rejected) and within *max_limit*."""
    for name, value in (("limit", limit), ("skip", skip)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidPagination(name, value)
    if max_limit is not None and limit > max_limit:
        raise InvalidPagination("limit", limit, f"must not exceed {max_limit}")
    return limit, skip
