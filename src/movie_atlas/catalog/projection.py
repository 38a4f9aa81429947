"""Shape raw store rows into the public movie result maps."""

from __future__ import annotations

from typing import Any

from neo4j.time import Date, DateTime, Duration, Time

from movie_atlas.errors import NotFound

_TEMPORAL = (Date, DateTime, Time, Duration)

_DETAIL_LISTS = ("actors", "directors", "genres")


def to_plain(value: Any) -> Any:
    """Recursively convert driver values into JSON-friendly Python values.

    Temporal types become ISO-8601 strings; maps and lists are copied.
    """
    if isinstance(value, _TEMPORAL):
        return value.iso_format()
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [to_plain(v) for v in value]
    return value


def project_movie(row: dict[str, Any], key: str = "movie") -> dict[str, Any]:
    """Flatten one listing row into a movie map with a boolean ``favorite``."""
    movie = to_plain(dict(row[key]))
    movie["favorite"] = bool(movie.get("favorite", False))
    return movie


def project_movies(rows: list[dict[str, Any]], key: str = "movie") -> list[dict[str, Any]]:
    return [project_movie(row, key) for row in rows]


def project_movie_detail(row: dict[str, Any] | None, movie_id: str) -> dict[str, Any]:
    """Project a detail lookup row, raising ``NotFound`` when the movie is absent."""
    if row is None or row.get("movie") is None:
        raise NotFound(movie_id)
    movie = project_movie(row)
    for name in _DETAIL_LISTS:
        movie[name] = list(movie.get(name) or [])
    movie["ratingCount"] = int(movie.get("ratingCount") or 0)
    return movie
