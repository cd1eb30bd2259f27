"""Infrastructure Layer.

Adapters that move the geospatial data model across byte streams and select
format handlers. This layer handles I/O; the domain layer never does.
"""
