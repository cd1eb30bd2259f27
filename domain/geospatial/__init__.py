"""GeoSpatial Bounded Context.

Common in-memory representation for imported geographic data sets:
- Value Objects: GeoPoint, GeoEdge, GeoPolygon, GeoLandCoverType
- Serialization: DataTransferable (KVP and structured-map encodings)
- Services: distance, shoelace area, geodesic measures
- Ports: GeoHandler (import / export / process slots)
"""
