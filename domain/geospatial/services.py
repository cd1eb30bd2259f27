"""GeoSpatial Bounded Context - Domain Services.

Pure geometry over raw coordinate triples ``(x, y, z)``.
NO I/O operations. Value objects delegate their derived attributes here so the
formulas live in one place and can be tested without building entities.

Planar functions treat ``x``/``y`` as Cartesian coordinates. Geodesic
functions interpret ``x`` as longitude and ``y`` as latitude in degrees on the
WGS84 ellipsoid; they never reproject.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray
from pyproj import Geod

Coordinate = Sequence[float]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
WGS84_ELLIPSOID = "WGS84"

_geod = Geod(ellps=WGS84_ELLIPSOID)


def _as_coords(vertices: Sequence[Coordinate]) -> NDArray[np.float64]:
    """Stack vertices into an (N, 3) float64 array."""
    return np.asarray(vertices, dtype=np.float64).reshape(-1, 3)


# ---------------------------------------------------------------------------
# Planar Distance
# ---------------------------------------------------------------------------
def euclidean_distance(start: Coordinate, end: Coordinate) -> float:
    """Euclidean length of ``end - start`` in 3D.

    Zero for coincident points.
    """
    delta = np.asarray(end, dtype=np.float64) - np.asarray(start, dtype=np.float64)
    return float(np.linalg.norm(delta))


# ---------------------------------------------------------------------------
# Shoelace Area
# ---------------------------------------------------------------------------
def shoelace_signed_area(vertices: Sequence[Coordinate]) -> float:
    """Signed planar area of the ring through ``vertices`` (z ignored).

    Uses the shoelace formula::

        A = 1/2 * sum(x[i] * y[i+1] - x[i+1] * y[i])

    with ``i + 1`` wrapping to the first vertex. Counter-clockwise rings are
    positive, clockwise rings negative. Fewer than three vertices enclose no
    area and return 0.

    Example:
        >>> shoelace_signed_area([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)])
        1.0
    """
    coords = _as_coords(vertices)
    if len(coords) < 3:
        return 0.0

    xs = coords[:, 0]
    ys = coords[:, 1]
    cross = np.dot(xs, np.roll(ys, -1)) - np.dot(np.roll(xs, -1), ys)
    return float(cross / 2.0)


def shoelace_area(vertices: Sequence[Coordinate]) -> float:
    """Absolute planar area of the ring through ``vertices``."""
    return abs(shoelace_signed_area(vertices))


# ---------------------------------------------------------------------------
# Bounding Box
# ---------------------------------------------------------------------------
def bounding_box(
    vertices: Sequence[Coordinate],
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Return ``(min_corner, max_corner)`` of the vertices.

    Raises:
        ValueError: If ``vertices`` is empty
    """
    coords = _as_coords(vertices)
    if len(coords) == 0:
        raise ValueError("Cannot compute bounding box of zero vertices")
    lo = coords.min(axis=0)
    hi = coords.max(axis=0)
    return (
        (float(lo[0]), float(lo[1]), float(lo[2])),
        (float(hi[0]), float(hi[1]), float(hi[2])),
    )


# ---------------------------------------------------------------------------
# Geodesic Measures (WGS84)
# ---------------------------------------------------------------------------
def _check_latitudes(lats: NDArray[np.float64]) -> None:
    if np.any(np.abs(lats) > 90.0):
        raise ValueError("Latitude (y) must be within [-90, 90] degrees")


def geodesic_distance(start: Coordinate, end: Coordinate) -> float:
    """Geodesic distance in meters between two lon/lat coordinates.

    Args:
        start: ``(lon, lat, ...)`` in degrees
        end: ``(lon, lat, ...)`` in degrees

    Returns:
        Distance in meters (always positive)

    Raises:
        ValueError: If a latitude is outside [-90, 90]
    """
    coords = _as_coords([start, end])
    _check_latitudes(coords[:, 1])
    _, _, distance = _geod.inv(coords[0, 0], coords[0, 1], coords[1, 0], coords[1, 1])
    return float(abs(distance))


def geodesic_area(vertices: Sequence[Coordinate]) -> float:
    """Geodesic area in square meters of the lon/lat ring through ``vertices``.

    Fewer than three vertices return 0.

    Raises:
        ValueError: If a latitude is outside [-90, 90]
    """
    coords = _as_coords(vertices)
    if len(coords) < 3:
        return 0.0
    _check_latitudes(coords[:, 1])
    area, _ = _geod.polygon_area_perimeter(coords[:, 0], coords[:, 1])
    return float(abs(area))
