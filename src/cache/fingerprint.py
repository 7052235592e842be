# src/cache/fingerprint.py - v4
"""Deterministic cache keys for character definitions.

The fingerprint hashes a canonical JSON rendering of the definition with
layers sorted by identifier in code-point order, so input order never
changes it. Key names and number formatting follow the request wire format
(bodyTypeName / fileName / zPos / variant, integral numbers without a decimal
point, absent variant omitted). Sheets cached under a locale-collated key
order, or with an explicit null variant, hash differently and are regenerated.
"""

from __future__ import annotations

import hashlib
import json
import re
from collections.abc import Iterable
from typing import Any

from lpcsheet.core.models import CharacterDefinition, LayerDescriptor

FINGERPRINT_LENGTH = 64

_FINGERPRINT_RE = re.compile(rf"^[0-9a-f]{{{FINGERPRINT_LENGTH}}}$")


def compute_fingerprint(body_type_tag: str, layers: Iterable[LayerDescriptor]) -> str:
    """Compute the order-insensitive SHA-256 fingerprint of a definition.

    Args:
        body_type_tag: Body type the layers are drawn for.
        layers: Layer descriptors in any order.

    Returns:
        64-char lowercase hex digest.
    """
    ordered = sorted(layers, key=lambda layer: layer.identifier)
    canonical = {
        "bodyTypeName": body_type_tag,
        "layers": [_canonical_layer(layer) for layer in ordered],
    }
    return hashlib.sha256(_dumps(canonical).encode("utf-8")).hexdigest()


def fingerprint_definition(definition: CharacterDefinition) -> str:
    return compute_fingerprint(definition.body_type_tag, definition.layers)


def request_key(definition: CharacterDefinition) -> str:
    """Order-sensitive key: the definition serialized exactly as received."""
    payload = {
        "bodyTypeName": definition.body_type_tag,
        "layers": [_canonical_layer(layer) for layer in definition.layers],
    }
    return _dumps(payload)


def is_fingerprint(value: str) -> bool:
    """True if ``value`` has the shape of a fingerprint (64 lowercase hex)."""
    return bool(_FINGERPRINT_RE.match(value))


def _canonical_layer(layer: LayerDescriptor) -> dict[str, Any]:
    data: dict[str, Any] = {
        "fileName": layer.identifier,
        "zPos": _canonical_number(layer.z_order),
    }
    if layer.variant_tag is not None:
        data["variant"] = layer.variant_tag
    return data


def _canonical_number(value: int | float) -> int | float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
