"""Domain Port(s) for GeoSpatial format handlers.

A handler translates between a raw byte stream in some external format (DEM,
land-cover classification, ...) and the geometric data model. It exposes three
independently assignable slots, so one concrete type can serve several
formats by swapping implementations:

- importer: read a stream and populate the handler's target structures
- exporter: write the handler's structures to a stream
- processor: format-specific post-processing (e.g. coordinate normalization)

Importers and exporters report failure through their boolean result, never by
raising. Streams belong to the caller; handlers must not close them.
No concrete I/O here.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, BinaryIO, Protocol

from pydantic import BaseModel, ConfigDict, Field


class HandlerEvent(BaseModel):
    """Options passed to every handler slot.

    Attributes:
        format_id: Identifier of the data set format being handled
        options: Format-specific settings (e.g. ``{"normalize": True}``)
    """

    format_id: str = ""
    options: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


GeoImporter = Callable[[BinaryIO, HandlerEvent], bool]
GeoExporter = Callable[[BinaryIO, HandlerEvent], bool]
GeoProcessor = Callable[[HandlerEvent], None]


class GeoHandler(Protocol):
    """Port for adapters that normalize an external format into the model.

    Implementations live in infrastructure and register themselves with a
    registry keyed by format identifier.
    """

    importer: GeoImporter
    exporter: GeoExporter
    processor: GeoProcessor
