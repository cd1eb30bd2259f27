"""Root pytest configuration for all tests.

Provides small geometry fixtures shared by the domain and infrastructure
tests. Everything is built in memory; no fixture files are needed.
"""

import pytest

from domain.geospatial.value_objects import GeoEdge, GeoPoint, GeoPolygon


def create_unit_square() -> GeoPolygon:
    """Counter-clockwise unit square (0,0) -> (1,0) -> (1,1) -> (0,1)."""
    corners = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]
    edges = [
        GeoEdge(
            start_point=GeoPoint.from_vector(corners[i]),
            end_point=GeoPoint.from_vector(corners[(i + 1) % 4]),
        )
        for i in range(4)
    ]
    return GeoPolygon(edges=edges)


@pytest.fixture
def unit_square() -> GeoPolygon:
    return create_unit_square()


@pytest.fixture
def lake() -> GeoPolygon:
    """Irregular closed ring with known area 12 (3x4 rectangle at z=10)."""
    return GeoPolygon.from_vertices(
        [(2.0, 1.0, 10.0), (5.0, 1.0, 10.0), (5.0, 5.0, 10.0), (2.0, 5.0, 10.0)]
    )
