"""Public catalog operations.

Each call validates its sort and pagination input up front, then opens one
read transaction, resolves the caller's favorite set inside it, runs a single
listing/detail/similarity query with that set bound as ``$favorites``, and
projects the rows.  Validation failures never open a session.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from loguru import logger

from movie_atlas.catalog.favorites import resolve_favorites
from movie_atlas.catalog.projection import project_movie, project_movie_detail, project_movies
from movie_atlas.catalog.queries import (
    ADD_FAVORITE_QUERY,
    FIND_BY_ID_QUERY,
    REMOVE_FAVORITE_QUERY,
    ListingMode,
    build_listing_query,
    listing_params,
)
from movie_atlas.catalog.similarity import SIMILAR_MOVIES_QUERY, rank_similar
from movie_atlas.catalog.sorting import SortOrder, validate_page, validate_sort
from movie_atlas.errors import NotFound
from movie_atlas.settings import CatalogSettings
from movie_atlas.telemetry import get_metrics, get_tracer

if TYPE_CHECKING:
    from collections.abc import Iterator

    from movie_atlas.graph.client import GraphClient

_tracer = get_tracer(__name__)


@contextmanager
def _instrumented(operation: str) -> Iterator[dict[str, Any]]:
    """Span + count + latency for one catalog call. Callers set ``stats["rows"]``."""
    metrics = get_metrics()
    attrs = {"operation": operation}
    stats: dict[str, Any] = {"rows": 0}
    t0 = time.monotonic()
    with _tracer.start_as_current_span(f"catalog.{operation}", attributes=attrs):
        try:
            yield stats
        finally:
            elapsed = time.monotonic() - t0
            metrics.query_count.add(1, attrs)
            metrics.query_latency.record(elapsed, attrs)
            metrics.query_rows.record(stats["rows"], attrs)
            logger.debug("{} returned {} rows in {:.1f}ms", operation, stats["rows"], elapsed * 1000)


class _CatalogBase:
    def __init__(self, graph: GraphClient, settings: CatalogSettings | None = None) -> None:
        self._graph = graph
        self._settings = settings or CatalogSettings()

    async def _listing(
        self,
        mode: ListingMode,
        value: str | None,
        *,
        sort: str | None,
        order: str | SortOrder | None,
        limit: int | None,
        skip: int,
        user_id: str | None,
    ) -> list[dict[str, Any]]:
        spec = validate_sort(
            self._settings.default_sort if sort is None else sort,
            self._settings.default_order if order is None else order,
        )
        limit, skip = validate_page(
            self._settings.default_limit if limit is None else limit,
            skip,
            max_limit=self._settings.max_limit,
        )
        query = build_listing_query(mode, spec)

        with _instrumented(f"list_{mode}") as stats:
            async with self._graph.read_transaction() as tx:
                favorites = await resolve_favorites(tx, user_id)
                params = listing_params(mode, limit=limit, skip=skip, favorites=favorites, value=value)
                rows = await tx.run(query, params)
            stats["rows"] = len(rows)
        return project_movies(rows)


class MovieService(_CatalogBase):
    """Read-only movie catalog queries with a per-user ``favorite`` flag."""

    async def list_all(
        self,
        sort: str | None = None,
        order: str | SortOrder | None = None,
        limit: int | None = None,
        skip: int = 0,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Paginated list of every movie that has a value for *sort*."""
        return await self._listing(
            ListingMode.ALL, None, sort=sort, order=order, limit=limit, skip=skip, user_id=user_id
        )

    async def list_by_genre(
        self,
        name: str,
        sort: str | None = None,
        order: str | SortOrder | None = None,
        limit: int | None = None,
        skip: int = 0,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Movies in the genre named exactly *name*."""
        return await self._listing(
            ListingMode.GENRE, name, sort=sort, order=order, limit=limit, skip=skip, user_id=user_id
        )

    async def list_by_actor(
        self,
        person_id: str,
        sort: str | None = None,
        order: str | SortOrder | None = None,
        limit: int | None = None,
        skip: int = 0,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Movies the person *person_id* acted in."""
        return await self._listing(
            ListingMode.ACTOR, person_id, sort=sort, order=order, limit=limit, skip=skip, user_id=user_id
        )

    async def list_by_director(
        self,
        person_id: str,
        sort: str | None = None,
        order: str | SortOrder | None = None,
        limit: int | None = None,
        skip: int = 0,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Movies the person *person_id* directed."""
        return await self._listing(
            ListingMode.DIRECTOR, person_id, sort=sort, order=order, limit=limit, skip=skip, user_id=user_id
        )

    async def find_by_id(self, movie_id: str, user_id: str | None = None) -> dict[str, Any]:
        """One movie with its actors (and roles), directors, genres and ``ratingCount``.

        Raises ``NotFound`` when no movie has ``tmdbId == movie_id``.
        """
        with _instrumented("find_by_id") as stats:
            async with self._graph.read_transaction() as tx:
                favorites = await resolve_favorites(tx, user_id)
                row = await tx.single(FIND_BY_ID_QUERY, {"id": movie_id, "favorites": sorted(favorites)})
            stats["rows"] = 0 if row is None else 1
        return project_movie_detail(row, movie_id)

    async def list_similar(
        self,
        movie_id: str,
        limit: int | None = None,
        skip: int = 0,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Movies ranked by rating-weighted shared actors, directors and genres.

        Every row carries ``score`` and ``inCommon``.  An unknown *movie_id*
        yields an empty list.
        """
        limit, skip = validate_page(
            self._settings.default_limit if limit is None else limit,
            skip,
            max_limit=self._settings.max_limit,
        )
        with _instrumented("list_similar") as stats:
            async with self._graph.read_transaction() as tx:
                favorites = await resolve_favorites(tx, user_id)
                rows = await tx.run(
                    SIMILAR_MOVIES_QUERY,
                    {"id": movie_id, "skip": skip, "limit": limit, "favorites": sorted(favorites)},
                )
            stats["rows"] = len(rows)
        return rank_similar(rows, movie_id)


class FavoriteService(_CatalogBase):
    """A user's "My Favorites" list and the single-edge changes to it."""

    async def list_favorites(
        self,
        user_id: str,
        sort: str | None = None,
        order: str | SortOrder | None = None,
        limit: int | None = None,
        skip: int = 0,
    ) -> list[dict[str, Any]]:
        """The user's favorite movies; every row has ``favorite=True``."""
        return await self._listing(
            ListingMode.FAVORITES, user_id, sort=sort, order=order, limit=limit, skip=skip, user_id=user_id
        )

    async def add_favorite(self, user_id: str, movie_id: str) -> dict[str, Any]:
        """Create (or keep) the ``HAS_FAVORITE`` edge; ``NotFound`` if user or movie is missing."""
        with _instrumented("add_favorite") as stats:
            async with self._graph.write_transaction() as tx:
                row = await tx.single(ADD_FAVORITE_QUERY, {"userId": user_id, "movieId": movie_id})
            stats["rows"] = 0 if row is None else 1
        if row is None:
            raise NotFound(
                movie_id,
                message=f"Couldn't create a favorite relationship for User {user_id!r} and Movie {movie_id!r}",
            )
        logger.info("User {} favorited movie {}", user_id, movie_id)
        return project_movie(row)

    async def remove_favorite(self, user_id: str, movie_id: str) -> dict[str, Any]:
        """Delete the ``HAS_FAVORITE`` edge; ``NotFound`` if it does not exist."""
        with _instrumented("remove_favorite") as stats:
            async with self._graph.write_transaction() as tx:
                row = await tx.single(REMOVE_FAVORITE_QUERY, {"userId": user_id, "movieId": movie_id})
            stats["rows"] = 0 if row is None else 1
        if row is None:
            raise NotFound(
                movie_id,
                message=f"Couldn't delete a favorite relationship for User {user_id!r} and Movie {movie_id!r}",
            )
        logger.info("User {} removed favorite movie {}", user_id, movie_id)
        return project_movie(row)
