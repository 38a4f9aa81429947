"""Integration tests for the catalog services against a live Neo4j.

Requires a running Neo4j 5 instance (see MOVIE_ATLAS_NEO4J__* settings).
The ``graph_client`` fixture seeds the catalog defined in conftest.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from movie_atlas.catalog.service import FavoriteService, MovieService
from movie_atlas.errors import InvalidSort, NotFound

if TYPE_CHECKING:
    from movie_atlas.graph.client import GraphClient


pytestmark = [pytest.mark.integration]

ANT_MAN = "102899"
AQUAMAN = "297802"
BATMAN = "268"
UNRATED = "999"


# ---------------------------------------------------------------------------
# Connectivity
# ---------------------------------------------------------------------------


async def test_ping(graph_client: GraphClient):
    assert await graph_client.ping() is True


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


async def test_list_all_first_page_by_title(graph_client: GraphClient):
    movies = await MovieService(graph_client).list_all(sort="title", order="asc", limit=2, skip=0)
    assert [m["title"] for m in movies] == ["Ant-Man", "Aquaman"]
    assert all(m["favorite"] is False for m in movies)


async def test_list_all_skip(graph_client: GraphClient):
    movies = await MovieService(graph_client).list_all(limit=2, skip=2)
    assert [m["title"] for m in movies] == ["Batman", "Zz Unrated"]


async def test_sort_excludes_rows_missing_the_field(graph_client: GraphClient):
    movies = await MovieService(graph_client).list_all(sort="imdbRating", order="desc", limit=10)
    assert [m["tmdbId"] for m in movies] == [BATMAN, ANT_MAN, AQUAMAN]
    ratings = [m["imdbRating"] for m in movies]
    assert ratings == sorted(ratings, reverse=True)


async def test_favorite_flag_for_user(graph_client: GraphClient):
    movies = await MovieService(graph_client).list_all(limit=10, user_id="u-alice")
    flags = {m["tmdbId"]: m["favorite"] for m in movies}
    assert flags == {ANT_MAN: False, AQUAMAN: False, BATMAN: True, UNRATED: False}


async def test_unknown_user_has_no_favorites(graph_client: GraphClient):
    movies = await MovieService(graph_client).list_all(limit=10, user_id="u-nobody")
    assert all(m["favorite"] is False for m in movies)


async def test_list_by_genre(graph_client: GraphClient):
    svc = MovieService(graph_client)
    assert [m["title"] for m in await svc.list_by_genre("Comedy")] == ["Ant-Man"]
    assert len(await svc.list_by_genre("Action", limit=10)) == 4
    assert await svc.list_by_genre("action") == []


async def test_list_by_actor_and_director(graph_client: GraphClient):
    svc = MovieService(graph_client)
    assert [m["title"] for m in await svc.list_by_actor("2232")] == ["Ant-Man", "Batman"]
    assert [m["title"] for m in await svc.list_by_director("510", user_id="u-alice")] == ["Batman"]
    assert (await svc.list_by_director("510", user_id="u-alice"))[0]["favorite"] is True


async def test_injection_attempt_rejected(graph_client: GraphClient):
    with pytest.raises(InvalidSort):
        await MovieService(graph_client).list_all(sort="title IS NOT NULL DETACH DELETE m //")
    records = await graph_client.execute("MATCH (m:Movie) RETURN count(m) AS n")
    assert records[0]["n"] == 4


# ---------------------------------------------------------------------------
# Detail lookup
# ---------------------------------------------------------------------------


async def test_find_by_id(graph_client: GraphClient):
    movie = await MovieService(graph_client).find_by_id(ANT_MAN)

    assert movie["title"] == "Ant-Man"
    assert sorted((a["name"], a["role"]) for a in movie["actors"]) == [
        ("Michael Keaton", "Vulture"),
        ("Paul Rudd", "Scott Lang"),
    ]
    assert [d["name"] for d in movie["directors"]] == ["Peyton Reed"]
    assert sorted(g["name"] for g in movie["genres"]) == ["Action", "Comedy"]
    assert movie["ratingCount"] == 2
    assert movie["favorite"] is False


async def test_find_by_id_favorite(graph_client: GraphClient):
    movie = await MovieService(graph_client).find_by_id(BATMAN, user_id="u-alice")
    assert movie["favorite"] is True
    assert movie["ratingCount"] == 0


async def test_find_by_id_missing(graph_client: GraphClient):
    with pytest.raises(NotFound, match="'does-not-exist'"):
        await MovieService(graph_client).find_by_id("does-not-exist")


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------


async def test_similar_ranking(graph_client: GraphClient):
    movies = await MovieService(graph_client).list_similar(ANT_MAN, limit=10)

    ids = [m["tmdbId"] for m in movies]
    assert ids == [BATMAN, AQUAMAN]
    assert ANT_MAN not in ids
    assert UNRATED not in ids
    batman = movies[0]
    assert batman["inCommon"] == 2
    assert batman["score"] == pytest.approx(15.0)
    assert movies[1]["score"] == pytest.approx(6.8)


async def test_similar_pagination_and_favorites(graph_client: GraphClient):
    page = await MovieService(graph_client).list_similar(ANT_MAN, limit=1, skip=1, user_id="u-alice")
    assert [m["tmdbId"] for m in page] == [AQUAMAN]
    assert page[0]["favorite"] is False


async def test_similar_unknown_movie(graph_client: GraphClient):
    assert await MovieService(graph_client).list_similar("nope") == []


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------


async def test_favorite_roundtrip(graph_client: GraphClient):
    favs = FavoriteService(graph_client)
    movies = MovieService(graph_client)

    added = await favs.add_favorite("u-bob", AQUAMAN)
    assert added["favorite"] is True
    assert [m["tmdbId"] for m in await favs.list_favorites("u-bob")] == [AQUAMAN]
    assert (await movies.find_by_id(AQUAMAN, user_id="u-bob"))["favorite"] is True

    removed = await favs.remove_favorite("u-bob", AQUAMAN)
    assert removed["favorite"] is False
    assert await favs.list_favorites("u-bob") == []


async def test_add_favorite_twice_keeps_one_edge(graph_client: GraphClient):
    favs = FavoriteService(graph_client)
    await favs.add_favorite("u-alice", BATMAN)
    records = await graph_client.execute(
        "MATCH (:User {userId: 'u-alice'})-[r:HAS_FAVORITE]->(:Movie {tmdbId: $id}) RETURN count(r) AS n",
        {"id": BATMAN},
    )
    assert records[0]["n"] == 1


async def test_favorite_not_found(graph_client: GraphClient):
    favs = FavoriteService(graph_client)
    with pytest.raises(NotFound):
        await favs.add_favorite("u-ghost", BATMAN)
    with pytest.raises(NotFound):
        await favs.remove_favorite("u-bob", BATMAN)
