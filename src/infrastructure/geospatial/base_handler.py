"""Slot-based implementation of the GeoHandler port.

FormatHandler holds the three handler slots and wraps them with the checks
every format needs:

1) Reject missing, closed, unreadable (import) or unwritable (export) streams
2) Call the slot with the caller's stream and a HandlerEvent
3) Convert StreamError raised by the slot into a False result

Subclasses implement ``read_stream``/``write_stream``/``post_process``, which
become the default slots. Any slot can be replaced, at construction or by
plain assignment, without touching the others.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

from domain.geospatial.errors import StreamError
from domain.geospatial.handlers import (
    GeoExporter,
    GeoImporter,
    GeoProcessor,
    HandlerEvent,
)

# Module-level logger (reused across all handlers)
logger = logging.getLogger(__name__)


def _is_readable(stream: Any) -> bool:
    if stream is None or getattr(stream, "closed", False):
        return False
    readable = getattr(stream, "readable", None)
    if callable(readable):
        return bool(readable())
    return callable(getattr(stream, "read", None))


def _is_writable(stream: Any) -> bool:
    if stream is None or getattr(stream, "closed", False):
        return False
    writable = getattr(stream, "writable", None)
    if callable(writable):
        return bool(writable())
    return callable(getattr(stream, "write", None))


class FormatHandler:
    """Base GeoHandler with independently replaceable slots.

    Parameters
    ----------
    importer, exporter, processor:
        Optional replacements for the default slots (``read_stream``,
        ``write_stream`` and ``post_process``).
    """

    format_id: str = ""

    def __init__(
        self,
        importer: GeoImporter | None = None,
        exporter: GeoExporter | None = None,
        processor: GeoProcessor | None = None,
    ) -> None:
        self.importer: GeoImporter = (
            importer if importer is not None else self.read_stream
        )
        self.exporter: GeoExporter = (
            exporter if exporter is not None else self.write_stream
        )
        self.processor: GeoProcessor = (
            processor if processor is not None else self.post_process
        )

    # -----------------------------------------------------------------------
    # Default slots
    # -----------------------------------------------------------------------
    def read_stream(self, stream: BinaryIO, event: HandlerEvent) -> bool:
        """Populate target structures from ``stream``. Nothing by default."""
        return False

    def write_stream(self, stream: BinaryIO, event: HandlerEvent) -> bool:
        """Write owned structures to ``stream``. Nothing by default."""
        return False

    def post_process(self, event: HandlerEvent) -> None:
        pass

    # -----------------------------------------------------------------------
    # Entry points
    # -----------------------------------------------------------------------
    def _event(self, event: HandlerEvent | None) -> HandlerEvent:
        if event is None:
            return HandlerEvent(format_id=self.format_id)
        return event

    def import_data(
        self, stream: BinaryIO | None, event: HandlerEvent | None = None
    ) -> bool:
        """Run the importer slot; False if the stream is unusable or malformed."""
        if not _is_readable(stream):
            logger.warning("Import (%s): stream is not readable", self.format_id or "?")
            return False
        try:
            ok = bool(self.importer(stream, self._event(event)))
        except StreamError as e:
            logger.warning("Import (%s) failed: %s", self.format_id or "?", e)
            return False
        logger.debug("Import (%s) finished: success=%s", self.format_id or "?", ok)
        return ok

    def export_data(
        self, stream: BinaryIO | None, event: HandlerEvent | None = None
    ) -> bool:
        """Run the exporter slot; False if the stream is unusable."""
        if not _is_writable(stream):
            logger.warning("Export (%s): stream is not writable", self.format_id or "?")
            return False
        try:
            ok = bool(self.exporter(stream, self._event(event)))
        except StreamError as e:
            logger.warning("Export (%s) failed: %s", self.format_id or "?", e)
            return False
        logger.debug("Export (%s) finished: success=%s", self.format_id or "?", ok)
        return ok

    def process(self, event: HandlerEvent | None = None) -> None:
        self.processor(self._event(event))
