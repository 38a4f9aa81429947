"""Graph schema definitions for the movie catalog.

Defines node labels, relationship types, and the property names the query
layer is allowed to splice into Cypher text.  Everything else reaches the
store as a bound parameter.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Node labels
# ---------------------------------------------------------------------------


class NodeLabel(StrEnum):
    MOVIE = "Movie"
    PERSON = "Person"
    GENRE = "Genre"
    USER = "User"


# ---------------------------------------------------------------------------
# Relationship types
# ---------------------------------------------------------------------------


class RelType(StrEnum):
    ACTED_IN = "ACTED_IN"
    DIRECTED = "DIRECTED"
    IN_GENRE = "IN_GENRE"
    RATED = "RATED"
    HAS_FAVORITE = "HAS_FAVORITE"


# Edges that count as a shared first-degree connection between two movies.
SIMILARITY_REL_TYPES: tuple[RelType, ...] = (RelType.IN_GENRE, RelType.ACTED_IN, RelType.DIRECTED)

# ---------------------------------------------------------------------------
# Identity and property names
# ---------------------------------------------------------------------------

MOVIE_ID = "tmdbId"
PERSON_ID = "tmdbId"
GENRE_ID = "name"
USER_ID = "userId"

RATING_PROPERTY = "imdbRating"

# Movie properties a caller may sort by.  Fixed at import time; never extended
# from request data.
SORTABLE_MOVIE_PROPERTIES: tuple[str, ...] = (
    "title",
    "released",
    "imdbRating",
    "imdbVotes",
    "year",
    "runtime",
    "budget",
    "revenue",
    "tmdbId",
)


def rel_union(types: tuple[RelType, ...]) -> str:
    """Render relationship types as a Cypher alternation, e.g. ``A|B|C``."""
    return "|".join(str(t) for t in types)
