"""Graph package — Neo4j client and scoped transactions."""

from __future__ import annotations

from movie_atlas.graph.client import GraphClient, GraphTransaction, to_store_error

__all__ = [
    "GraphClient",
    "GraphTransaction",
    "to_store_error",
]
