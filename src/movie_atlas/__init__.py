"""Movie Atlas — catalog browsing and similarity queries over a Neo4j movie graph."""

from __future__ import annotations

from movie_atlas.catalog import FavoriteService, MovieService, SortOrder
from movie_atlas.errors import (
    CatalogError,
    InvalidOrder,
    InvalidPagination,
    InvalidSort,
    NotFound,
    StoreError,
    StoreUnavailable,
    ValidationError,
)
from movie_atlas.graph import GraphClient
from movie_atlas.settings import AtlasSettings

__all__ = [
    "AtlasSettings",
    "CatalogError",
    "FavoriteService",
    "GraphClient",
    "InvalidOrder",
    "InvalidPagination",
    "InvalidSort",
    "MovieService",
    "NotFound",
    "SortOrder",
    "StoreError",
    "StoreUnavailable",
    "ValidationError",
]
