"""Catalog package — listing, detail, similarity and favorites queries."""

from __future__ import annotations

from movie_atlas.catalog.favorites import resolve_favorites
from movie_atlas.catalog.projection import project_movie, project_movie_detail, project_movies
from movie_atlas.catalog.queries import ListingMode, build_listing_query, listing_params
from movie_atlas.catalog.service import FavoriteService, MovieService
from movie_atlas.catalog.similarity import SIMILAR_MOVIES_QUERY, rank_similar, similarity_score
from movie_atlas.catalog.sorting import SortOrder, SortSpec, parse_order, validate_page, validate_sort

__all__ = [
    "SIMILAR_MOVIES_QUERY",
    "FavoriteService",
    "ListingMode",
    "MovieService",
    "SortOrder",
    "SortSpec",
    "build_listing_query",
    "listing_params",
    "parse_order",
    "project_movie",
    "project_movie_detail",
    "project_movies",
    "rank_similar",
    "resolve_favorites",
    "similarity_score",
    "validate_page",
    "validate_sort",
]
