"""GeoSpatial Bounded Context - Error Hierarchy.

Custom exceptions for geospatial data model operations.
"""

from __future__ import annotations


class GeoSpatialError(Exception):
    """Base error for geospatial operations."""


class DecodeError(GeoSpatialError):
    """Structured map is missing a required key or holds a malformed value.

    Attributes:
        key: Dotted path of the offending key (e.g. ``Edges.0.StartPoint``)
        reason: Human-readable description of the problem
    """

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Cannot decode '{key}': {reason}")

    def nested(self, parent: str) -> "DecodeError":
        """Return a copy of this error with ``parent`` prefixed to the key."""
        return DecodeError(f"{parent}.{self.key}", self.reason)


class EmptyPolygonError(GeoSpatialError):
    """Operation requires at least one edge but the polygon has none."""


class StreamError(GeoSpatialError):
    """Handler stream is unreadable, unwritable, or holds malformed data."""


class HandlerNotRegisteredError(GeoSpatialError):
    """No handler is registered for the requested format identifier.

    Attributes:
        format_id: The format identifier that was looked up
    """

    def __init__(self, format_id: str) -> None:
        self.format_id = format_id
        super().__init__(f"No handler registered for format '{format_id}'")
