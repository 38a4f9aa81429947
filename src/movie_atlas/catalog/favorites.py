"""Favorite-set resolution for the per-user ``favorite`` flag."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from movie_atlas.catalog.queries import FAVORITE_IDS_QUERY

if TYPE_CHECKING:
    from movie_atlas.graph.client import GraphTransaction

_EMPTY: frozenset[str] = frozenset()


async def resolve_favorites(tx: GraphTransaction, user_id: str | None) -> frozenset[str]:
    """Return the ids of the movies *user_id* has favorited.

    Runs on the caller's open transaction so the set and the listing that
    uses it see the same snapshot.  No user means no query at all; an
    unknown user or one without favorites yields the empty set.
    """
    if user_id is None:
        return _EMPTY
    rows = await tx.run(FAVORITE_IDS_QUERY, {"userId": user_id})
    favorites = frozenset(row["id"] for row in rows if row.get("id") is not None)
    logger.debug("Resolved {} favorites for user {}", len(favorites), user_id)
    return favorites
