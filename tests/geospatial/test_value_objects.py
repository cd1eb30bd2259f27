"""Tests for the geospatial value objects.

Entities are created directly in memory; the domain layer has no I/O.
"""

from __future__ import annotations

import logging
import math

import pytest
from pydantic import ValidationError

from domain.geospatial.errors import DecodeError, EmptyPolygonError
from domain.geospatial.value_objects import (
    GeoEdge,
    GeoLandCoverType,
    GeoPoint,
    GeoPolygon,
)


# ===========================================================================
# GeoPoint
# ===========================================================================
def test_point_defaults_to_origin():
    assert GeoPoint().point == (0.0, 0.0, 0.0)


def test_point_value_equality():
    assert GeoPoint(x=1, y=2, z=3) == GeoPoint(x=1.0, y=2.0, z=3.0)
    assert GeoPoint(x=1, y=2, z=3) != GeoPoint(x=1, y=2, z=4)


def test_point_duplicate_is_independent():
    """Mutating a duplicate never changes the original."""
    original = GeoPoint(x=1.0, y=2.0, z=3.0)
    copy = original.duplicate()

    assert copy == original
    assert copy is not original

    copy.x = 99.0
    copy.point = (7.0, 8.0, 9.0)

    assert original.point == (1.0, 2.0, 3.0)


def test_point_setter_validates_vector():
    p = GeoPoint()
    p.point = [4, 5, 6]
    assert p.point == (4.0, 5.0, 6.0)

    with pytest.raises(DecodeError):
        p.point = (1.0, 2.0)
    assert p.point == (4.0, 5.0, 6.0)


def test_point_rejects_non_finite_coordinates():
    with pytest.raises(ValidationError):
        GeoPoint(x=math.nan)

    p = GeoPoint()
    with pytest.raises(ValidationError):
        p.z = math.inf


def test_point_as_array():
    arr = GeoPoint(x=1.0, y=2.0, z=3.0).as_array()
    assert arr.shape == (3,)
    assert arr.tolist() == [1.0, 2.0, 3.0]


# ===========================================================================
# GeoEdge
# ===========================================================================
def test_edge_distance_is_euclidean():
    edge = GeoEdge(start_point=(1.0, 2.0, 3.0), end_point=(4.0, 6.0, 15.0))
    assert edge.distance() == pytest.approx(13.0)


def test_degenerate_edge_has_zero_distance():
    p = GeoPoint(x=3.5, y=-1.0, z=2.0)
    edge = GeoEdge(start_point=p, end_point=p)
    assert edge.distance() == 0.0


def test_edge_distance_recomputed_after_mutation():
    edge = GeoEdge(start_point=(0.0, 0.0, 0.0), end_point=(3.0, 4.0, 0.0))
    assert edge.distance() == pytest.approx(5.0)

    edge.end_point = GeoPoint(x=6.0, y=8.0)
    assert edge.distance() == pytest.approx(10.0)


def test_edge_owns_its_points():
    """Points handed to an edge are copied, not shared."""
    start = GeoPoint(x=1.0)
    edge = GeoEdge(start_point=start, end_point=GeoPoint(x=2.0))

    start.x = 50.0
    assert edge.start_point.x == 1.0

    replacement = GeoPoint(y=5.0)
    edge.start_point = replacement
    replacement.y = -5.0
    assert edge.start_point.y == 5.0


def test_edge_duplicate_copies_both_endpoints():
    edge = GeoEdge(start_point=(0.0, 0.0, 0.0), end_point=(1.0, 1.0, 1.0))
    copy = edge.duplicate()

    copy.start_point.x = 10.0
    copy.end_point.z = -1.0

    assert edge.start_point.point == (0.0, 0.0, 0.0)
    assert edge.end_point.point == (1.0, 1.0, 1.0)


def test_edge_rejects_malformed_point():
    with pytest.raises(ValidationError):
        GeoEdge(start_point=(1.0, 2.0), end_point=(0.0, 0.0, 0.0))


def test_edge_translated():
    edge = GeoEdge(start_point=(0.0, 0.0, 0.0), end_point=(1.0, 0.0, 0.0))
    moved = edge.translated(dx=2.0, dz=1.0)

    assert moved.start_point.point == (2.0, 0.0, 1.0)
    assert moved.end_point.point == (3.0, 0.0, 1.0)
    assert edge.start_point.point == (0.0, 0.0, 0.0)


# ===========================================================================
# GeoPolygon - start point
# ===========================================================================
def test_polygon_scenario_unit_square(unit_square):
    """Unit square: area 1 and start point at the origin."""
    assert unit_square.area() == 1.0
    assert unit_square.start_point == GeoPoint(x=0.0, y=0.0, z=0.0)


def test_set_start_point_rewrites_first_edge(unit_square):
    p = GeoPoint(x=-1.0, y=-1.0, z=0.5)

    unit_square.start_point = p

    assert unit_square.edge_at(0).start_point == p
    assert unit_square.start_point == p


def test_first_edge_write_moves_start_point(unit_square):
    """Start point is derived from edge 0, so the reverse direction also holds."""
    unit_square.edge_at(0).start_point = GeoPoint(x=0.25, y=0.25)
    assert unit_square.start_point == GeoPoint(x=0.25, y=0.25)

    unit_square.set_edge_at(0, GeoEdge(start_point=(9.0, 9.0, 9.0)))
    assert unit_square.start_point == GeoPoint(x=9.0, y=9.0, z=9.0)


def test_empty_polygon_start_point():
    polygon = GeoPolygon()
    assert polygon.start_point is None

    with pytest.raises(EmptyPolygonError):
        polygon.start_point = GeoPoint()


# ===========================================================================
# GeoPolygon - indexed access
# ===========================================================================
def test_edge_at_in_range(unit_square):
    assert unit_square.edge_at(0).end_point == GeoPoint(x=1.0)
    assert unit_square.edge_at(3).start_point == GeoPoint(y=1.0)


@pytest.mark.parametrize("index", [-1, -4, 4, 5, 100])
def test_edge_at_out_of_range_returns_none(unit_square, index):
    """Index == len is out of range too (strict upper bound)."""
    assert unit_square.edge_at(index) is None


def test_edge_at_on_empty_polygon():
    assert GeoPolygon().edge_at(0) is None


@pytest.mark.parametrize("index", [-1, 4, 10])
def test_set_edge_at_out_of_range_is_ignored(unit_square, index, caplog):
    before = unit_square.duplicate()

    with caplog.at_level(logging.DEBUG, logger="domain.geospatial.value_objects"):
        unit_square.set_edge_at(index, GeoEdge(start_point=(5.0, 5.0, 5.0)))

    assert unit_square == before
    assert len(unit_square) == 4
    assert "Ignoring edge write" in caplog.text


def test_set_edge_at_copies_edge(unit_square):
    edge = GeoEdge(start_point=(1.0, 0.0, 0.0), end_point=(2.0, 2.0, 0.0))
    unit_square.set_edge_at(1, edge)

    edge.end_point = GeoPoint()
    assert unit_square.edge_at(1).end_point == GeoPoint(x=2.0, y=2.0)


def test_polygon_owns_its_edges():
    edge = GeoEdge(start_point=(0.0, 0.0, 0.0), end_point=(1.0, 0.0, 0.0))
    polygon = GeoPolygon(edges=[edge])
    polygon.add_edge(edge)

    edge.start_point = GeoPoint(x=42.0)

    assert polygon.edge_at(0).start_point == GeoPoint()
    assert polygon.edge_at(1).start_point == GeoPoint()


# ===========================================================================
# GeoPolygon - derived geometry
# ===========================================================================
def test_area_with_zero_or_one_edge_is_zero():
    assert GeoPolygon().area() == 0.0

    single = GeoPolygon(edges=[GeoEdge(start_point=(3.0, 4.0, 0.0))])
    assert single.area() == 0.0


def test_area_is_orientation_independent(unit_square):
    clockwise = GeoPolygon.from_vertices(
        [(0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 1.0, 0.0), (1.0, 0.0, 0.0)]
    )

    assert unit_square.signed_area() == pytest.approx(1.0)
    assert clockwise.signed_area() == pytest.approx(-1.0)
    assert clockwise.area() == pytest.approx(1.0)


def test_area_uses_start_points_and_ignores_z(lake):
    assert lake.area() == pytest.approx(12.0)


def test_area_recomputed_after_start_point_change(unit_square):
    unit_square.start_point = GeoPoint(x=-1.0, y=0.0)
    # Trapezoid (-1,0) (1,0) (1,1) (0,1)
    assert unit_square.area() == pytest.approx(1.5)


def test_perimeter(unit_square, lake):
    assert unit_square.perimeter() == pytest.approx(4.0)
    assert lake.perimeter() == pytest.approx(14.0)
    assert GeoPolygon().perimeter() == 0.0


def test_from_vertices_builds_closed_ring(lake):
    assert len(lake) == 4
    assert lake.is_closed()
    assert lake.edge_at(3).end_point == lake.start_point


def test_is_closed_detects_gaps(unit_square):
    assert unit_square.is_closed()

    unit_square.set_edge_at(
        2, GeoEdge(start_point=(1.0, 1.0, 0.0), end_point=(0.5, 1.0, 0.0))
    )
    assert not unit_square.is_closed()
    assert not GeoPolygon().is_closed()


def test_unconnected_edges_are_allowed():
    polygon = GeoPolygon(
        edges=[
            GeoEdge(start_point=(0.0, 0.0, 0.0), end_point=(1.0, 0.0, 0.0)),
            GeoEdge(start_point=(5.0, 5.0, 0.0), end_point=(6.0, 5.0, 0.0)),
        ]
    )
    assert len(polygon) == 2
    assert not polygon.is_closed()


def test_polygon_translated_keeps_area(lake):
    moved = lake.translated(dx=-2.0, dy=-1.0, dz=-10.0)

    assert moved.start_point == GeoPoint()
    assert moved.area() == pytest.approx(lake.area())
    assert lake.start_point == GeoPoint(x=2.0, y=1.0, z=10.0)


def test_polygon_duplicate_is_deep(unit_square):
    copy = unit_square.duplicate()
    copy.start_point = GeoPoint(x=7.0)
    copy.edge_at(2).end_point.y = 3.0

    assert unit_square.start_point == GeoPoint()
    assert unit_square.edge_at(2).end_point == GeoPoint(y=1.0)


# ===========================================================================
# GeoLandCoverType
# ===========================================================================
def test_land_cover_values():
    assert GeoLandCoverType.UNKNOWN == -1
    assert GeoLandCoverType.WATER == 0
    assert GeoLandCoverType.COUNT == 1
    assert GeoLandCoverType(0) is GeoLandCoverType.WATER
