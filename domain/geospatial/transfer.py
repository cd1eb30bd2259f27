"""GeoSpatial Bounded Context - Serialization Contract.

Every geospatial entity can be duplicated and converted to and from two
representations:

- KVP: a flat mapping from field names to loosely typed values
- Structured map: a nested, self-describing document (maps, lists, vectors)
  that can be encoded to JSON bytes

The base class contributes the shared fields (currently ``"Type"``) and
subclasses merge their own fields on top of them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

import pydantic_core
from pydantic import BaseModel, ConfigDict

from domain.geospatial.errors import DecodeError

TYPE_KEY = "Type"


class DataTransferable(BaseModel):
    """Base for entities that cross process or storage boundaries.

    Subclasses override ``to_kvp``/``to_structured_map`` by calling
    ``super()`` first and adding their own fields, and override the ``from_*``
    methods by calling ``super()`` (which validates the base fields) before
    decoding their own.
    """

    model_config = ConfigDict(validate_assignment=True)

    @classmethod
    def type_name(cls) -> str:
        return cls.__name__

    def duplicate(self) -> Self:
        """Return a deep copy that shares no storage with this instance."""
        return self.model_copy(deep=True)

    # -----------------------------------------------------------------------
    # KVP
    # -----------------------------------------------------------------------
    def to_kvp(self) -> dict[str, Any]:
        return {TYPE_KEY: self.type_name()}

    def from_kvp(self, kvp: Mapping[str, Any]) -> Self:
        self._check_base_fields(kvp)
        return self

    # -----------------------------------------------------------------------
    # Structured map
    # -----------------------------------------------------------------------
    def to_structured_map(self) -> dict[str, Any]:
        return {TYPE_KEY: self.type_name()}

    def from_structured_map(self, data: Mapping[str, Any]) -> Self:
        self._check_base_fields(data)
        return self

    @classmethod
    def decode(cls, data: Mapping[str, Any]) -> Self:
        """Build a new instance from a structured map.

        Raises:
            DecodeError: If a required field is missing or malformed
        """
        return cls().from_structured_map(data)

    def to_bytes(self) -> bytes:
        """Encode the structured map as JSON bytes."""
        return pydantic_core.to_json(self.to_structured_map())

    @classmethod
    def from_bytes(cls, raw: bytes) -> Self:
        """Decode an instance from JSON bytes produced by ``to_bytes``."""
        try:
            data = pydantic_core.from_json(raw)
        except ValueError as e:
            raise DecodeError("<document>", f"invalid JSON: {e}") from e
        return cls.decode(data)

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------
    def _check_base_fields(self, data: Any) -> None:
        if not isinstance(data, Mapping):
            raise DecodeError(
                "<document>", f"expected a mapping, got {type(data).__name__}"
            )
        # "Type" is optional so minimal documents still decode
        declared = data.get(TYPE_KEY)
        if declared is not None and declared != self.type_name():
            raise DecodeError(
                TYPE_KEY, f"expected '{self.type_name()}', got '{declared}'"
            )


def require(data: Mapping[str, Any], key: str) -> Any:
    """Return ``data[key]`` or raise DecodeError if the key is absent."""
    if key not in data:
        raise DecodeError(key, "missing required key")
    return data[key]
