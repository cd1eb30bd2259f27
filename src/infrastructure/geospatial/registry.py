"""GeoHandlerRegistry - format identifier to handler lookup.

Handlers register explicitly under a format identifier (e.g. ``"dem"``,
``"lcc"``) so callers can ask which formats are available before dispatching.
Identifiers are case-insensitive and stripped of surrounding whitespace.

Threading: writes are guarded by a lock; reads are plain dict lookups.
"""

from __future__ import annotations

import logging
import threading

from domain.geospatial.errors import HandlerNotRegisteredError
from domain.geospatial.handlers import GeoHandler

logger = logging.getLogger(__name__)


def _normalize_format_id(format_id: str) -> str:
    key = format_id.strip().lower()
    if not key:
        raise ValueError("Format identifier must not be empty")
    return key


class GeoHandlerRegistry:
    """Registry of GeoHandler instances keyed by format identifier.

    Example:
        registry = GeoHandlerRegistry()
        registry.register("geodoc", StructuredDocumentHandler())

        handler = registry.get("GeoDoc")
    """

    def __init__(self) -> None:
        self._handlers: dict[str, GeoHandler] = {}
        self._lock = threading.Lock()

    def register(self, format_id: str, handler: GeoHandler) -> None:
        """Register ``handler`` for ``format_id``.

        Raises:
            ValueError: If the identifier is empty or already registered
        """
        key = _normalize_format_id(format_id)
        with self._lock:
            if key in self._handlers:
                raise ValueError(f"Format '{key}' already registered")
            self._handlers[key] = handler
        logger.info(
            "Registered geo handler %s for format '%s'", type(handler).__name__, key
        )

    def unregister(self, format_id: str) -> None:
        key = _normalize_format_id(format_id)
        with self._lock:
            if key not in self._handlers:
                raise HandlerNotRegisteredError(key)
            del self._handlers[key]
        logger.info("Unregistered geo handler for format '%s'", key)

    def get(self, format_id: str) -> GeoHandler:
        """Return the handler for ``format_id``.

        Raises:
            HandlerNotRegisteredError: If no handler is registered
        """
        key = _normalize_format_id(format_id)
        try:
            return self._handlers[key]
        except KeyError:
            raise HandlerNotRegisteredError(key) from None

    def available_formats(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, format_id: object) -> bool:
        if not isinstance(format_id, str) or not format_id.strip():
            return False
        return _normalize_format_id(format_id) in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
