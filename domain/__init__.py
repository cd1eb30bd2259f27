"""GeoSpatial Data Domain Layer.

This package contains the core data model organized by bounded contexts:
- geospatial: Points, edges, polygons, their serialization and format handlers
"""

from domain import geospatial

__all__ = ["geospatial"]
