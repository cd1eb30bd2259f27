"""Structured-document handler.

Reads and writes the model's own structured-map encoding so polygon sets can
cross process or storage boundaries through any byte stream::

    {"Polygons": [{"Type": "GeoPolygon", "Edges": [...]}, ...]}

encoded as UTF-8 JSON. This is the native document of the data model, not an
external geospatial format.

Lifecycle of an import (the stream stays open; the caller owns it):
1) Read until EOF, or stop once more than ``max_bytes`` bytes arrived
2) Parse JSON and validate the top-level document
3) Decode every polygon; any DecodeError rejects the whole document
4) Replace ``polygons`` only after everything decoded
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import BinaryIO

import pydantic_core
from pydantic import ValidationError

from domain.geospatial import services
from domain.geospatial.errors import DecodeError, GeoSpatialError, StreamError
from domain.geospatial.handlers import HandlerEvent
from domain.geospatial.value_objects import GeoPoint, GeoPolygon

from .base_handler import FormatHandler

logger = logging.getLogger(__name__)

DOCUMENT_POLYGONS_KEY = "Polygons"


class StructuredDocumentHandler(FormatHandler):
    """GeoHandler for JSON structured-map documents.

    Parameters
    ----------
    polygons: Iterable[GeoPolygon] | None
        Initial polygons owned by the handler (copied). Imports replace them
        and exports write them.
    max_bytes: int | None
        Optional size budget for imported documents. Larger payloads are
        rejected without being parsed.

    Processing options (``HandlerEvent.options``):
        normalize: translate all polygons so the minimum corner of their
            combined bounding box sits at the origin
        offset: ``(dx, dy, dz)`` translation applied after normalization;
            a malformed offset raises DecodeError, and a translation that
            overflows the finite float range raises GeoSpatialError
    """

    format_id = "geodoc"

    def __init__(
        self,
        polygons: Iterable[GeoPolygon] | None = None,
        max_bytes: int | None = None,
    ) -> None:
        super().__init__()
        self.polygons: list[GeoPolygon] = [p.duplicate() for p in polygons or ()]
        self.max_bytes = max_bytes

    def read_stream(self, stream: BinaryIO, event: HandlerEvent) -> bool:
        try:
            raw = self._read_budgeted(stream)
        except OSError as e:
            raise StreamError(f"Read failed: {e}") from e

        if self.max_bytes is not None and len(raw) > self.max_bytes:
            raise StreamError(f"Document exceeds budget of {self.max_bytes}B")
        if not raw:
            raise StreamError("Empty document")

        try:
            document = pydantic_core.from_json(raw)
        except ValueError as e:
            raise StreamError(f"Malformed JSON document: {e}") from e

        if not isinstance(document, dict):
            raise StreamError("Document root must be an object")
        items = document.get(DOCUMENT_POLYGONS_KEY)
        if not isinstance(items, list):
            raise StreamError(f"Document has no '{DOCUMENT_POLYGONS_KEY}' list")

        polygons: list[GeoPolygon] = []
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise StreamError(f"{DOCUMENT_POLYGONS_KEY}.{i}: expected an object")
            try:
                polygons.append(GeoPolygon.decode(item))
            except DecodeError as e:
                raise StreamError(f"{DOCUMENT_POLYGONS_KEY}.{i}: {e}") from e

        self.polygons = polygons
        logger.debug("Document: imported %d polygons", len(polygons))
        return True

    def write_stream(self, stream: BinaryIO, event: HandlerEvent) -> bool:
        payload = pydantic_core.to_json(
            {DOCUMENT_POLYGONS_KEY: [p.to_structured_map() for p in self.polygons]}
        )
        try:
            stream.write(payload)
        except (OSError, TypeError, ValueError) as e:
            raise StreamError(f"Write failed: {e}") from e
        logger.debug(
            "Document: exported %d polygons (%d bytes)", len(self.polygons), len(payload)
        )
        return True

    def post_process(self, event: HandlerEvent) -> None:
        if event.options.get("normalize"):
            vertices = [
                point.point
                for polygon in self.polygons
                for edge in polygon.edges
                for point in (edge.start_point, edge.end_point)
            ]
            if vertices:
                (min_x, min_y, min_z), _ = services.bounding_box(vertices)
                self._translate(-min_x, -min_y, -min_z)

        offset = event.options.get("offset")
        if offset is not None:
            self._translate(*GeoPoint.from_vector(offset).point)

    def _read_budgeted(self, stream: BinaryIO) -> bytes:
        if self.max_bytes is None:
            return stream.read()

        # Raw streams may return short reads before EOF
        chunks: list[bytes] = []
        total = 0
        while total <= self.max_bytes:
            chunk = stream.read(self.max_bytes + 1 - total)
            if not chunk:
                break
            chunks.append(chunk)
            total += len(chunk)
        return b"".join(chunks)

    def _translate(self, dx: float, dy: float, dz: float) -> None:
        try:
            translated = [p.translated(dx, dy, dz) for p in self.polygons]
        except ValidationError as e:
            raise GeoSpatialError(
                f"Translation by ({dx}, {dy}, {dz}) leaves finite range"
            ) from e
        self.polygons = translated
