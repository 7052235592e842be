# src/core/models.py - v2
"""Shared Pydantic domain models: LayerDescriptor, CharacterDefinition.

Field aliases (bodyTypeName, fileName, zPos, variant) are the wire names used
by request bodies and definition files; Python code uses the field names.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lpcsheet.core.errors import InvalidDefinition


class LayerDescriptor(BaseModel):
    """One visual component of a character (body, hair, weapon...).

    ``identifier`` names a sprite-asset family, not a single file: it is
    combined with an animation name to find the actual asset.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    identifier: str = Field(alias="fileName")
    z_order: int | float = Field(alias="zPos")
    variant_tag: str | None = Field(default=None, alias="variant")

    @field_validator("z_order", mode="before")
    @classmethod
    def _require_number(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("zPos must be a number")
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("zPos must be finite")
        return v


class CharacterDefinition(BaseModel):
    """A body type plus the layers stacked on top of it.

    Semantically invariant under reordering of ``layers``; the fingerprint
    relies on that, the compositor only on z_order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    body_type_tag: str = Field(alias="bodyTypeName")
    layers: tuple[LayerDescriptor, ...]

    def to_payload(self) -> dict[str, Any]:
        """Wire form, in the layer order it was received."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def validate_definition(definition: CharacterDefinition) -> None:
    """Check compositing preconditions.

    Raises:
        InvalidDefinition: Empty body type tag, empty layer list, or a layer
            without an identifier.
    """
    if not definition.body_type_tag:
        raise InvalidDefinition("Definition must include a non-empty bodyTypeName")
    if not definition.layers:
        raise InvalidDefinition("layers array cannot be empty")
    for index, layer in enumerate(definition.layers):
        if not layer.identifier:
            raise InvalidDefinition(f"Layer {index} has an empty fileName")


def parse_definition(payload: CharacterDefinition | Mapping[str, Any]) -> CharacterDefinition:
    """Build and validate a CharacterDefinition from a wire payload.

    Raises:
        InvalidDefinition: The payload is not a mapping, has the wrong shape,
            or fails the compositing preconditions.
    """
    if isinstance(payload, CharacterDefinition):
        definition = payload
    elif isinstance(payload, Mapping):
        try:
            definition = CharacterDefinition.model_validate(dict(payload))
        except ValidationError as e:
            raise InvalidDefinition(_summarize(e)) from e
    else:
        raise InvalidDefinition(
            f"Definition must be an object, got {type(payload).__name__}"
        )
    validate_definition(definition)
    return definition


def payload_tag(payload: Any) -> str:
    """Best-effort body type tag for error reporting on unparsed payloads."""
    if isinstance(payload, CharacterDefinition):
        return payload.body_type_tag
    if isinstance(payload, Mapping):
        tag = payload.get("bodyTypeName", payload.get("body_type_tag"))
        if isinstance(tag, str):
            return tag
    return "<unknown>"


def _summarize(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "Invalid definition: " + "; ".join(parts)
