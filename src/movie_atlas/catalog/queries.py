"""Cypher composition for catalog listings and detail lookups.

Every listing mode is a traversal pattern that binds ``m`` to a ``:Movie``;
``build_listing_query`` wraps the pattern with the shared filter, projection,
ordering and pagination.  Only schema identifiers and validated ``SortSpec``
fields are rendered into the text — ids, names, ``skip``, ``limit`` and the
favorite-id set are always bound parameters.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from movie_atlas.schema import GENRE_ID, MOVIE_ID, PERSON_ID, USER_ID, NodeLabel, RelType

if TYPE_CHECKING:
    from movie_atlas.catalog.sorting import SortSpec


class ListingMode(StrEnum):
    ALL = "all"
    GENRE = "genre"
    ACTOR = "actor"
    DIRECTOR = "director"
    FAVORITES = "favorites"


_M = NodeLabel.MOVIE

_PATTERNS: dict[ListingMode, str] = {
    ListingMode.ALL: f"(m:{_M})",
    ListingMode.GENRE: f"(m:{_M})-[:{RelType.IN_GENRE}]->(:{NodeLabel.GENRE} {{{GENRE_ID}: $name}})",
    ListingMode.ACTOR: f"(:{NodeLabel.PERSON} {{{PERSON_ID}: $id}})-[:{RelType.ACTED_IN}]->(m:{_M})",
    ListingMode.DIRECTOR: f"(:{NodeLabel.PERSON} {{{PERSON_ID}: $id}})-[:{RelType.DIRECTED}]->(m:{_M})",
    ListingMode.FAVORITES: f"(:{NodeLabel.USER} {{{USER_ID}: $userId}})-[:{RelType.HAS_FAVORITE}]->(m:{_M})",
}

# Parameter each mode's pattern expects besides skip/limit/favorites.
_MODE_PARAM: dict[ListingMode, str | None] = {
    ListingMode.ALL: None,
    ListingMode.GENRE: "name",
    ListingMode.ACTOR: "id",
    ListingMode.DIRECTOR: "id",
    ListingMode.FAVORITES: "userId",
}


def build_listing_query(mode: ListingMode, sort: SortSpec) -> str:
    """Render the paginated listing query for *mode* ordered by *sort*."""
    prop = f"m.{sort.field}"
    return (
        f"MATCH {_PATTERNS[mode]} "
        f"WHERE {prop} IS NOT NULL "
        f"RETURN m {{ .*, favorite: m.{MOVIE_ID} IN $favorites }} AS movie "
        f"ORDER BY {prop} {sort.direction} "
        "SKIP $skip LIMIT $limit"
    )


def listing_params(
    mode: ListingMode,
    *,
    limit: int,
    skip: int,
    favorites: frozenset[str],
    value: str | None = None,
) -> dict[str, Any]:
    """Bound parameters for a listing query."""
    params: dict[str, Any] = {"skip": skip, "limit": limit, "favorites": sorted(favorites)}
    name = _MODE_PARAM[mode]
    if name is not None:
        if value is None:
            msg = f"Listing mode {mode} requires a {name!r} value"
            raise ValueError(msg)
        params[name] = value
    return params


FAVORITE_IDS_QUERY = (
    f"MATCH (:{NodeLabel.USER} {{{USER_ID}: $userId}})-[:{RelType.HAS_FAVORITE}]->(m:{_M}) "
    f"RETURN m.{MOVIE_ID} AS id"
)

FIND_BY_ID_QUERY = (
    f"MATCH (m:{_M} {{{MOVIE_ID}: $id}}) "
    "RETURN m { .*, "
    f"actors: [ (a)-[r:{RelType.ACTED_IN}]->(m) | a {{ .*, role: r.role }} ], "
    f"directors: [ (d)-[:{RelType.DIRECTED}]->(m) | d {{ .* }} ], "
    f"genres: [ (m)-[:{RelType.IN_GENRE}]->(g) | g {{ .{GENRE_ID} }} ], "
    f"ratingCount: size([ (m)<-[:{RelType.RATED}]-() | 1 ]), "
    f"favorite: m.{MOVIE_ID} IN $favorites "
    "} AS movie "
    "LIMIT 1"
)

ADD_FAVORITE_QUERY = (
    f"MATCH (u:{NodeLabel.USER} {{{USER_ID}: $userId}}) "
    f"MATCH (m:{_M} {{{MOVIE_ID}: $movieId}}) "
    f"MERGE (u)-[r:{RelType.HAS_FAVORITE}]->(m) "
    "ON CREATE SET r.createdAt = datetime() "
    "RETURN m { .*, favorite: true } AS movie"
)

REMOVE_FAVORITE_QUERY = (
    f"MATCH (:{NodeLabel.USER} {{{USER_ID}: $userId}})-[r:{RelType.HAS_FAVORITE}]->(m:{_M} {{{MOVIE_ID}: $movieId}}) "
    "DELETE r "
    "RETURN m { .*, favorite: false } AS movie"
)
