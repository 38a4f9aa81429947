"""Shared test fixtures for Movie Atlas."""

from __future__ import annotations

import pytest
from fakes import FakeGraph, FakeTransaction

from movie_atlas.graph.client import GraphClient
from movie_atlas.settings import AtlasSettings


@pytest.fixture
def fake_tx() -> FakeTransaction:
    return FakeTransaction()


@pytest.fixture
def fake_graph(fake_tx: FakeTransaction) -> FakeGraph:
    return FakeGraph(fake_tx)


# ---------------------------------------------------------------------------
# Live Neo4j (integration tests)
# ---------------------------------------------------------------------------

SEED_CATALOG = """
CREATE (antman:Movie {tmdbId: '102899', title: 'Ant-Man', imdbRating: 7.3, year: 2015})
CREATE (aquaman:Movie {tmdbId: '297802', title: 'Aquaman', imdbRating: 6.8, year: 2018})
CREATE (batman:Movie {tmdbId: '268', title: 'Batman', imdbRating: 7.5, year: 1989})
CREATE (unrated:Movie {tmdbId: '999', title: 'Zz Unrated', year: 2001})
CREATE (action:Genre {name: 'Action'})
CREATE (comedy:Genre {name: 'Comedy'})
CREATE (rudd:Person {tmdbId: '22226', name: 'Paul Rudd'})
CREATE (keaton:Person {tmdbId: '2232', name: 'Michael Keaton'})
CREATE (burton:Person {tmdbId: '510', name: 'Tim Burton'})
CREATE (reed:Person {tmdbId: '59026', name: 'Peyton Reed'})
CREATE (alice:User {userId: 'u-alice', name: 'Alice'})
CREATE (bob:User {userId: 'u-bob', name: 'Bob'})
CREATE (antman)-[:IN_GENRE]->(action)
CREATE (antman)-[:IN_GENRE]->(comedy)
CREATE (aquaman)-[:IN_GENRE]->(action)
CREATE (batman)-[:IN_GENRE]->(action)
CREATE (unrated)-[:IN_GENRE]->(action)
CREATE (rudd)-[:ACTED_IN {role: 'Scott Lang'}]->(antman)
CREATE (keaton)-[:ACTED_IN {role: 'Batman'}]->(batman)
CREATE (keaton)-[:ACTED_IN {role: 'Vulture'}]->(antman)
CREATE (burton)-[:DIRECTED]->(batman)
CREATE (reed)-[:DIRECTED]->(antman)
CREATE (alice)-[:RATED {rating: 4}]->(antman)
CREATE (bob)-[:RATED {rating: 5}]->(antman)
CREATE (alice)-[:HAS_FAVORITE]->(batman)
"""


@pytest.fixture
def settings() -> AtlasSettings:
    """Default settings (env / movie-atlas.toml may point at another Neo4j)."""
    return AtlasSettings()


@pytest.fixture
async def graph_client(settings):
    """Async GraphClient fixture — skips if Neo4j is unreachable.

    Wipes the database and loads a small catalog before each test.
    """
    client = GraphClient(settings)
    try:
        await client.ping()
    except Exception:
        await client.close()
        pytest.skip("Neo4j not available")

    await client.execute_write("MATCH (n) DETACH DELETE n")
    await client.execute_write(SEED_CATALOG)

    yield client

    await client.execute_write("MATCH (n) DETACH DELETE n")
    await client.close()
