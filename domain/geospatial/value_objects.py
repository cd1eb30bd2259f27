"""GeoSpatial Bounded Context - Value Objects.

Geometric data model shared by every geospatial data set: points, edges and
polygons. All validation occurs through Pydantic, both at construction time
and on assignment.

These are mutable, not frozen: a polygon's start point and its edges can be
rewritten in place. Containers copy what they are given
(an edge owns its points, a polygon owns its edges), so mutating the caller's
object afterwards never leaks into the container.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from enum import IntEnum
from typing import Annotated, Any, Self

import numpy as np
from numpy.typing import NDArray
from pydantic import (
    AllowInfNan,
    Field,
    FiniteFloat,
    Strict,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from domain.geospatial import services
from domain.geospatial.errors import DecodeError, EmptyPolygonError
from domain.geospatial.transfer import DataTransferable, require

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Document Keys
# ---------------------------------------------------------------------------
POINT_KEY = "Point"
START_POINT_KEY = "StartPoint"
END_POINT_KEY = "EndPoint"
EDGES_KEY = "Edges"

Vector3 = tuple[float, float, float]

# Elements are strict so numeric strings and booleans are rejected; the
# container stays lax so lists decode.
_Coordinate = Annotated[float, Strict(), AllowInfNan(False)]
_VECTOR3 = TypeAdapter(tuple[_Coordinate, _Coordinate, _Coordinate])


def _decode_vector(value: Any, key: str) -> Vector3:
    """Validate ``value`` as a finite 3-vector or raise DecodeError."""
    if isinstance(value, GeoPoint):
        return value.point
    try:
        return _VECTOR3.validate_python(value)
    except ValidationError as e:
        raise DecodeError(
            key, f"expected a 3-float vector, got {value!r} ({e.error_count()} errors)"
        ) from e


def _decode_list(data: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = require(data, key)
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise DecodeError(key, f"expected a list, got {type(value).__name__}")
    return value


def _decode_mapping(value: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(key, f"expected a mapping, got {type(value).__name__}")
    return value


# ---------------------------------------------------------------------------
# Land Cover
# ---------------------------------------------------------------------------
class GeoLandCoverType(IntEnum):
    """Land-cover class of an individual sample (rock, sand, water, urban...)."""

    UNKNOWN = -1
    WATER = 0
    COUNT = 1  # Number of known classes, not a class itself


# ---------------------------------------------------------------------------
# GeoPoint
# ---------------------------------------------------------------------------
class GeoPoint(DataTransferable):
    """Single 3D coordinate, the atomic unit of all geometry.

    Typically marks a landmark or another place of interest. Compared by
    value: ``GeoPoint(x=1, y=2) == GeoPoint(x=1, y=2)``.
    """

    x: FiniteFloat = 0.0
    y: FiniteFloat = 0.0
    z: FiniteFloat = 0.0

    @classmethod
    def from_vector(cls, vector: Iterable[float]) -> Self:
        x, y, z = _decode_vector(vector, POINT_KEY)
        return cls(x=x, y=y, z=z)

    @property
    def point(self) -> Vector3:
        """The coordinate as an ``(x, y, z)`` tuple."""
        return (self.x, self.y, self.z)

    @point.setter
    def point(self, value: Iterable[float]) -> None:
        self._assign(_decode_vector(value, POINT_KEY))

    def as_array(self) -> NDArray[np.float64]:
        return np.array(self.point, dtype=np.float64)

    def translated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> Self:
        return type(self)(x=self.x + dx, y=self.y + dy, z=self.z + dz)

    def _assign(self, vector: Vector3) -> None:
        self.x, self.y, self.z = vector

    def to_kvp(self) -> dict[str, Any]:
        data = super().to_kvp()
        data[POINT_KEY] = self.point
        return data

    def from_kvp(self, kvp: Mapping[str, Any]) -> Self:
        super().from_kvp(kvp)
        self._assign(_decode_vector(require(kvp, POINT_KEY), POINT_KEY))
        return self

    def to_structured_map(self) -> dict[str, Any]:
        data = super().to_structured_map()
        data[POINT_KEY] = list(self.point)
        return data

    def from_structured_map(self, data: Mapping[str, Any]) -> Self:
        super().from_structured_map(data)
        self._assign(_decode_vector(require(data, POINT_KEY), POINT_KEY))
        return self


# ---------------------------------------------------------------------------
# GeoEdge
# ---------------------------------------------------------------------------
class GeoEdge(DataTransferable):
    """Line segment between two points.

    Usually a piece of a boundary, e.g. between land and water. Both endpoints
    are copied on construction and assignment. ``start_point == end_point`` is
    legal and yields a zero-length edge.
    """

    start_point: GeoPoint = Field(default_factory=GeoPoint)
    end_point: GeoPoint = Field(default_factory=GeoPoint)

    @field_validator("start_point", "end_point", mode="before")
    @classmethod
    def _coerce_point(cls, value: Any) -> Any:
        # Accept bare (x, y, z) vectors alongside GeoPoint instances and dicts
        if isinstance(value, (list, tuple)):
            try:
                return GeoPoint.from_vector(value)
            except DecodeError:
                return value  # let Pydantic report the type error
        return value

    @field_validator("start_point", "end_point", mode="after")
    @classmethod
    def _own_point(cls, value: GeoPoint) -> GeoPoint:
        return value.duplicate()

    def distance(self) -> float:
        """Euclidean length of the edge, recomputed on every call."""
        return services.euclidean_distance(self.start_point.point, self.end_point.point)

    def geodesic_distance(self) -> float:
        """WGS84 geodesic length in meters, reading x as longitude, y as latitude."""
        return services.geodesic_distance(self.start_point.point, self.end_point.point)

    def translated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> Self:
        return type(self)(
            start_point=self.start_point.translated(dx, dy, dz),
            end_point=self.end_point.translated(dx, dy, dz),
        )

    def to_kvp(self) -> dict[str, Any]:
        data = super().to_kvp()
        data[START_POINT_KEY] = self.start_point.point
        data[END_POINT_KEY] = self.end_point.point
        return data

    def from_kvp(self, kvp: Mapping[str, Any]) -> Self:
        super().from_kvp(kvp)
        start = _decode_vector(require(kvp, START_POINT_KEY), START_POINT_KEY)
        end = _decode_vector(require(kvp, END_POINT_KEY), END_POINT_KEY)
        self.start_point = start
        self.end_point = end
        return self

    def to_structured_map(self) -> dict[str, Any]:
        data = super().to_structured_map()
        data[START_POINT_KEY] = self.start_point.to_structured_map()
        data[END_POINT_KEY] = self.end_point.to_structured_map()
        return data

    def from_structured_map(self, data: Mapping[str, Any]) -> Self:
        super().from_structured_map(data)
        start = self._decode_point(data, START_POINT_KEY)
        end = self._decode_point(data, END_POINT_KEY)
        self.start_point = start
        self.end_point = end
        return self

    @staticmethod
    def _decode_point(data: Mapping[str, Any], key: str) -> GeoPoint:
        document = _decode_mapping(require(data, key), key)
        try:
            return GeoPoint.decode(document)
        except DecodeError as e:
            raise e.nested(key) from e


# ---------------------------------------------------------------------------
# GeoPolygon
# ---------------------------------------------------------------------------
class GeoPolygon(DataTransferable):
    """Ordered sequence of edges approximating a closed boundary.

    Describes enclosed areas of a data set such as lakes or parks.

    Invariants:
        - ``start_point`` is always ``edges[0].start_point``; it is derived on
          every access, never cached, so the two cannot drift apart.
        - Indexed access accepts ``0 <= index < len(polygon)`` only. Reads
          outside that range return None and writes are ignored; negative
          indices do not wrap around.

    Not enforced: edges need not form a connected ring (see ``is_closed``).
    """

    edges: list[GeoEdge] = Field(default_factory=list)

    @field_validator("edges", mode="after")
    @classmethod
    def _own_edges(cls, value: list[GeoEdge]) -> list[GeoEdge]:
        return [edge.duplicate() for edge in value]

    @classmethod
    def from_vertices(cls, vertices: Iterable[GeoPoint | Iterable[float]]) -> Self:
        """Build a closed ring with one edge per consecutive vertex pair.

        The last vertex is joined back to the first.
        """
        points = [
            v if isinstance(v, GeoPoint) else GeoPoint.from_vector(v) for v in vertices
        ]
        count = len(points)
        return cls(
            edges=[
                GeoEdge(start_point=points[i], end_point=points[(i + 1) % count])
                for i in range(count)
            ]
        )

    def __len__(self) -> int:
        return len(self.edges)

    # -----------------------------------------------------------------------
    # Start point
    # -----------------------------------------------------------------------
    @property
    def start_point(self) -> GeoPoint | None:
        """Start point of the first edge, or None when there are no edges."""
        if not self.edges:
            return None
        return self.edges[0].start_point

    @start_point.setter
    def start_point(self, point: GeoPoint) -> None:
        if not self.edges:
            raise EmptyPolygonError("Cannot set start point of a polygon with no edges")
        self.edges[0].start_point = point

    # -----------------------------------------------------------------------
    # Indexed access
    # -----------------------------------------------------------------------
    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self.edges)

    def edge_at(self, index: int) -> GeoEdge | None:
        """Return the edge at ``index``, or None when out of range."""
        if not self._in_range(index):
            return None
        return self.edges[index]

    def set_edge_at(self, index: int, edge: GeoEdge) -> None:
        """Replace the edge at ``index``; out-of-range writes are ignored."""
        if not self._in_range(index):
            logger.debug(
                "Ignoring edge write at index %d (polygon has %d edges)",
                index,
                len(self.edges),
            )
            return
        self.edges[index] = edge.duplicate()

    def add_edge(self, edge: GeoEdge) -> None:
        self.edges.append(edge.duplicate())

    # -----------------------------------------------------------------------
    # Derived geometry
    # -----------------------------------------------------------------------
    def vertices(self) -> list[Vector3]:
        """Start point of every edge, in order."""
        return [edge.start_point.point for edge in self.edges]

    def signed_area(self) -> float:
        """Shoelace area over the edges' start points; positive when CCW."""
        return services.shoelace_signed_area(self.vertices())

    def area(self) -> float:
        """Absolute planar area. Zero for fewer than three edges."""
        return abs(self.signed_area())

    def perimeter(self) -> float:
        return sum((edge.distance() for edge in self.edges), 0.0)

    def geodesic_area(self) -> float:
        """WGS84 geodesic area in square meters (x = longitude, y = latitude)."""
        return services.geodesic_area(self.vertices())

    def is_closed(self) -> bool:
        """True if each edge ends where the next one (wrapping) starts."""
        count = len(self.edges)
        if count == 0:
            return False
        return all(
            self.edges[i].end_point == self.edges[(i + 1) % count].start_point
            for i in range(count)
        )

    def translated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> Self:
        return type(self)(edges=[edge.translated(dx, dy, dz) for edge in self.edges])

    # -----------------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------------
    def to_kvp(self) -> dict[str, Any]:
        data = super().to_kvp()
        data[EDGES_KEY] = [edge.to_kvp() for edge in self.edges]
        return data

    def from_kvp(self, kvp: Mapping[str, Any]) -> Self:
        super().from_kvp(kvp)
        self.edges = self._decode_edges(kvp, use_kvp=True)
        return self

    def to_structured_map(self) -> dict[str, Any]:
        data = super().to_structured_map()
        data[EDGES_KEY] = [edge.to_structured_map() for edge in self.edges]
        return data

    def from_structured_map(self, data: Mapping[str, Any]) -> Self:
        super().from_structured_map(data)
        self.edges = self._decode_edges(data, use_kvp=False)
        return self

    @staticmethod
    def _decode_edges(data: Mapping[str, Any], *, use_kvp: bool) -> list[GeoEdge]:
        edges: list[GeoEdge] = []
        for i, item in enumerate(_decode_list(data, EDGES_KEY)):
            key = f"{EDGES_KEY}.{i}"
            document = _decode_mapping(item, key)
            try:
                if use_kvp:
                    edges.append(GeoEdge().from_kvp(document))
                else:
                    edges.append(GeoEdge.decode(document))
            except DecodeError as e:
                raise e.nested(key) from e
        return edges
