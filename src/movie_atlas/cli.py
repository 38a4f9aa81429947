"""CLI entrypoint for Movie Atlas."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING, Any

import typer
from loguru import logger

from movie_atlas.errors import CatalogError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from movie_atlas.catalog.service import FavoriteService, MovieService
    from movie_atlas.graph.client import GraphClient

app = typer.Typer(
    name="movie-atlas",
    help="Movie Atlas — browse a movie graph, find similar titles, manage favorites.",
    no_args_is_help=True,
)

favorites_app = typer.Typer(name="favorites", help="Manage a user's favorite movies.", no_args_is_help=True)
app.add_typer(favorites_app)

_EXIT_INVALID = 1
_EXIT_FAILED = 2


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors."),
) -> None:
    """Configure logging before any command runs."""
    from movie_atlas.settings import AtlasSettings

    level = AtlasSettings().logging.level
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


@app.command()
def ping() -> None:
    """Check that the graph store is reachable."""

    async def _ping(graph: GraphClient, _movies: MovieService, _favorites: FavoriteService) -> dict[str, Any]:
        return {"uri": graph.uri, "ok": await graph.ping()}

    _run(_ping)


@app.command()
def movies(
    genre: str | None = typer.Option(None, "--genre", help="Only movies in this genre (exact name)."),
    actor: str | None = typer.Option(None, "--actor", help="Only movies this person (tmdbId) acted in."),
    director: str | None = typer.Option(None, "--director", help="Only movies this person (tmdbId) directed."),
    sort: str | None = typer.Option(None, "--sort", "-s", help="Movie property to sort by (default: title)."),
    order: str | None = typer.Option(None, "--order", "-o", help="asc or desc (default: asc)."),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Page size (default: 6)."),
    skip: int = typer.Option(0, "--skip", help="Rows to skip."),
    user: str | None = typer.Option(None, "--user", "-u", help="User id for the favorite flag."),
) -> None:
    """List movies, optionally filtered by genre, actor or director."""
    filters = [f for f in (genre, actor, director) if f is not None]
    if len(filters) > 1:
        typer.echo("Use at most one of --genre, --actor, --director.", err=True)
        raise typer.Exit(code=_EXIT_INVALID)

    async def _list(_graph: GraphClient, svc: MovieService, _favorites: FavoriteService) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {"sort": sort, "order": order, "limit": limit, "skip": skip, "user_id": user}
        if genre is not None:
            return await svc.list_by_genre(genre, **kwargs)
        if actor is not None:
            return await svc.list_by_actor(actor, **kwargs)
        if director is not None:
            return await svc.list_by_director(director, **kwargs)
        return await svc.list_all(**kwargs)

    _run(_list)


@app.command()
def movie(
    movie_id: str = typer.Argument(..., help="tmdbId of the movie."),
    user: str | None = typer.Option(None, "--user", "-u", help="User id for the favorite flag."),
) -> None:
    """Show one movie with its cast, directors, genres and rating count."""

    async def _find(_graph: GraphClient, svc: MovieService, _favorites: FavoriteService) -> dict[str, Any]:
        return await svc.find_by_id(movie_id, user_id=user)

    _run(_find)


@app.command()
def similar(
    movie_id: str = typer.Argument(..., help="tmdbId of the movie to compare against."),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Page size (default: 6)."),
    skip: int = typer.Option(0, "--skip", help="Rows to skip."),
    user: str | None = typer.Option(None, "--user", "-u", help="User id for the favorite flag."),
) -> None:
    """List movies similar to MOVIE_ID, best match first."""

    async def _similar(_graph: GraphClient, svc: MovieService, _favorites: FavoriteService) -> list[dict[str, Any]]:
        return await svc.list_similar(movie_id, limit=limit, skip=skip, user_id=user)

    _run(_similar)


@favorites_app.command("list")
def favorites_list(
    user: str = typer.Argument(..., help="User id."),
    sort: str | None = typer.Option(None, "--sort", "-s", help="Movie property to sort by (default: title)."),
    order: str | None = typer.Option(None, "--order", "-o", help="asc or desc (default: asc)."),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Page size (default: 6)."),
    skip: int = typer.Option(0, "--skip", help="Rows to skip."),
) -> None:
    """List a user's favorite movies."""

    async def _list(_graph: GraphClient, _movies: MovieService, svc: FavoriteService) -> list[dict[str, Any]]:
        return await svc.list_favorites(user, sort=sort, order=order, limit=limit, skip=skip)

    _run(_list)


@favorites_app.command("add")
def favorites_add(
    user: str = typer.Argument(..., help="User id."),
    movie_id: str = typer.Argument(..., help="tmdbId of the movie."),
) -> None:
    """Mark a movie as a user's favorite."""

    async def _add(_graph: GraphClient, _movies: MovieService, svc: FavoriteService) -> dict[str, Any]:
        return await svc.add_favorite(user, movie_id)

    _run(_add)


@favorites_app.command("remove")
def favorites_remove(
    user: str = typer.Argument(..., help="User id."),
    movie_id: str = typer.Argument(..., help="tmdbId of the movie."),
) -> None:
    """Remove a movie from a user's favorites."""

    async def _remove(_graph: GraphClient, _movies: MovieService, svc: FavoriteService) -> dict[str, Any]:
        return await svc.remove_favorite(user, movie_id)

    _run(_remove)


# ---------------------------------------------------------------------------
# Async helpers
# ---------------------------------------------------------------------------


def _run(action: Callable[[GraphClient, MovieService, FavoriteService], Awaitable[Any]]) -> None:
    """Run *action* against freshly built services and print its result as JSON."""
    try:
        result = asyncio.run(_with_services(action))
    except ValidationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=_EXIT_INVALID) from exc
    except CatalogError as exc:
        logger.error("{}", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=_EXIT_FAILED) from exc
    typer.echo(json.dumps(result, indent=2, default=str))


async def _with_services(action: Callable[[GraphClient, MovieService, FavoriteService], Awaitable[Any]]) -> Any:
    from movie_atlas.catalog.service import FavoriteService, MovieService
    from movie_atlas.graph import GraphClient
    from movie_atlas.settings import AtlasSettings
    from movie_atlas.telemetry import init_telemetry, shutdown_telemetry

    settings = AtlasSettings()
    init_telemetry(settings.observability)
    graph = GraphClient(settings)
    try:
        return await action(graph, MovieService(graph, settings.catalog), FavoriteService(graph, settings.catalog))
    finally:
        await graph.close()
        shutdown_telemetry()
