# tests/unit/cache/test_unit_fingerprint.py - v2
"""Tests for cache/fingerprint.py - deterministic, order-insensitive keys."""

from __future__ import annotations

import hashlib

from lpcsheet.cache.fingerprint import (
    FINGERPRINT_LENGTH,
    compute_fingerprint,
    fingerprint_definition,
    is_fingerprint,
    request_key,
)
from lpcsheet.core.models import CharacterDefinition, LayerDescriptor


def _layer(name: str, z: int | float, variant: str | None = None) -> LayerDescriptor:
    return LayerDescriptor(identifier=name, z_order=z, variant_tag=variant)


class TestComputeFingerprint:
    def test_shape(self, male_definition):
        fp = fingerprint_definition(male_definition)
        assert len(fp) == FINGERPRINT_LENGTH
        assert is_fingerprint(fp)

    def test_order_insensitive(self, male_definition, male_definition_swapped):
        assert fingerprint_definition(male_definition) == fingerprint_definition(
            male_definition_swapped
        )

    def test_matches_canonical_wire_format(self):
        canonical = (
            '{"bodyTypeName":"male","layers":['
            '{"fileName":"body/light","zPos":10},'
            '{"fileName":"hair/brown","zPos":120,"variant":"brown"}]}'
        )
        expected = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
        fp = compute_fingerprint(
            "male", [_layer("hair/brown", 120, "brown"), _layer("body/light", 10)]
        )
        assert fp == expected

    def test_integral_float_same_as_int(self):
        assert compute_fingerprint("male", [_layer("a", 10.0)]) == compute_fingerprint(
            "male", [_layer("a", 10)]
        )

    def test_fractional_z_differs(self):
        assert compute_fingerprint("male", [_layer("a", 10.5)]) != compute_fingerprint(
            "male", [_layer("a", 10)]
        )

    def test_body_type_matters(self):
        layers = [_layer("a", 1)]
        assert compute_fingerprint("male", layers) != compute_fingerprint("female", layers)

    def test_variant_matters(self):
        assert compute_fingerprint("male", [_layer("a", 1, "red")]) != compute_fingerprint(
            "male", [_layer("a", 1)]
        )

    def test_z_order_matters(self):
        assert compute_fingerprint("male", [_layer("a", 1)]) != compute_fingerprint(
            "male", [_layer("a", 2)]
        )


class TestRequestKey:
    def test_order_sensitive(self, male_definition, male_definition_swapped):
        assert request_key(male_definition) != request_key(male_definition_swapped)

    def test_stable(self, male_payload):
        a = CharacterDefinition.model_validate(male_payload)
        b = CharacterDefinition.model_validate(male_payload)
        assert request_key(a) == request_key(b)


class TestIsFingerprint:
    def test_valid(self):
        assert is_fingerprint("0123456789abcdef" * 4)

    def test_uppercase_rejected(self):
        assert not is_fingerprint("A" * 64)

    def test_wrong_length(self):
        assert not is_fingerprint("a" * 63)
        assert not is_fingerprint("a" * 65)

    def test_path_like(self):
        assert not is_fingerprint("../" + "a" * 61)
