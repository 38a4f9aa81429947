"""Unit tests for graph schema definitions."""

from __future__ import annotations

import re

from movie_atlas.schema import (
    SIMILARITY_REL_TYPES,
    SORTABLE_MOVIE_PROPERTIES,
    NodeLabel,
    RelType,
    rel_union,
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def test_labels_and_rel_types_are_plain_identifiers():
    for value in [*NodeLabel, *RelType]:
        assert _IDENTIFIER.match(value)


def test_sortable_properties_are_plain_identifiers():
    assert "title" in SORTABLE_MOVIE_PROPERTIES
    assert len(set(SORTABLE_MOVIE_PROPERTIES)) == len(SORTABLE_MOVIE_PROPERTIES)
    for prop in SORTABLE_MOVIE_PROPERTIES:
        assert _IDENTIFIER.match(prop)


def test_favorite_is_never_sortable():
    assert "favorite" not in SORTABLE_MOVIE_PROPERTIES


def test_rel_union():
    assert rel_union(SIMILARITY_REL_TYPES) == "IN_GENRE|ACTED_IN|DIRECTED"
    assert rel_union((RelType.RATED,)) == "RATED"
