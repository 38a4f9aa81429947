"""Content-similarity ranking between movies.

Two movies are related when they share a first-degree connection: the same
genre, an actor who appears in both, or a director of both.  For every
candidate the number of shared-connection paths (``inCommon``) is multiplied
by its rating to give ``score``.  Candidates without a rating are skipped.
Ties on ``score`` fall back to ``tmdbId`` ascending so a fixed snapshot
always yields the same page.
"""

from __future__ import annotations

from typing import Any

from movie_atlas.catalog.projection import project_movie
from movie_atlas.schema import MOVIE_ID, RATING_PROPERTY, SIMILARITY_REL_TYPES, NodeLabel, rel_union

_RELS = rel_union(SIMILARITY_REL_TYPES)

SIMILAR_MOVIES_QUERY = (
    f"MATCH (target:{NodeLabel.MOVIE} {{{MOVIE_ID}: $id}})-[:{_RELS}]-(hub)-[:{_RELS}]-(m:{NodeLabel.MOVIE}) "
    f"WHERE m <> target AND m.{RATING_PROPERTY} IS NOT NULL "
    "WITH m, count(*) AS inCommon "
    f"WITH m, inCommon, m.{RATING_PROPERTY} * inCommon AS score "
    f"ORDER BY score DESC, m.{MOVIE_ID} ASC "
    "SKIP $skip LIMIT $limit "
    f"RETURN m {{ .*, score: score, inCommon: inCommon, favorite: m.{MOVIE_ID} IN $favorites }} AS movie"
)


def similarity_score(rating: float, in_common: int) -> float:
    """Rating-weighted overlap score."""
    return rating * in_common


def _rank_key(movie: dict[str, Any]) -> tuple[float, Any]:
    # ids compare as stored, matching the ORDER BY in SIMILAR_MOVIES_QUERY
    return (-float(movie["score"]), movie.get(MOVIE_ID))


def rank_similar(rows: list[dict[str, Any]], target_id: str) -> list[dict[str, Any]]:
    """Project similarity rows and enforce the ranking invariants.

    Drops the target itself and unrated candidates, fills in ``score`` when
    the store omitted it, and orders by score descending then ``tmdbId``.
    The sort is stable and matches the query's own ORDER BY, so a page
    fetched with SKIP/LIMIT keeps its order.
    """
    ranked: list[dict[str, Any]] = []
    for row in rows:
        movie = project_movie(row)
        if movie.get(MOVIE_ID) == target_id:
            continue
        rating = movie.get(RATING_PROPERTY)
        if rating is None:
            continue
        if movie.get("score") is None:
            movie["score"] = similarity_score(rating, int(movie.get("inCommon", 1)))
        ranked.append(movie)
    ranked.sort(key=_rank_key)
    return ranked
