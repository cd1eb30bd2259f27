"""Infrastructure adapters for the geospatial bounded context.

This module provides the handler implementations behind the GeoHandler port
and the registry that selects them by format identifier.
"""

from .base_handler import FormatHandler
from .document_adapter import StructuredDocumentHandler
from .registry import GeoHandlerRegistry

__all__ = ["FormatHandler", "GeoHandlerRegistry", "StructuredDocumentHandler"]
