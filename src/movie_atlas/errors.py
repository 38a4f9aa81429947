"""Error taxonomy for catalog queries."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for every error raised by Movie Atlas."""


class ValidationError(CatalogError, ValueError):
    """Caller input rejected before any query text is built."""


class InvalidSort(ValidationError):
    """Raised when a sort field is not in the sortable-property allow-list."""

    def __init__(self, field: str, allowed: tuple[str, ...] = ()) -> None:
        self.field = field
        self.allowed = allowed
        hint = f" (expected one of: {', '.join(allowed)})" if allowed else ""
        super().__init__(f"Cannot sort by {field!r}{hint}")


class InvalidOrder(ValidationError):
    """Raised when a sort direction token is neither ascending nor descending."""

    def __init__(self, order: object) -> None:
        self.order = order
        super().__init__(f"Invalid sort order {order!r} (expected 'asc' or 'desc')")


class InvalidPagination(ValidationError):
    """Raised when ``limit`` or ``skip`` is negative, non-integer, or too large."""

    def __init__(self, name: str, value: object, reason: str = "must be a non-negative integer") -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}={value!r}: {reason}")


class NotFound(CatalogError):
    """Raised when the requested primary entity does not exist."""

    def __init__(self, identifier: str, kind: str = "movie", message: str | None = None) -> None:
        self.identifier = identifier
        self.kind = kind
        super().__init__(message or f"Could not find a {kind} with the id {identifier!r}")


class StoreError(CatalogError):
    """A graph-store failure, wrapped with the driver's original message."""


class StoreUnavailable(StoreError):
    """The graph store could not be reached or timed out. Not retried."""
