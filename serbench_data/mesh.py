"""Mesh dataset: triangles of single-precision vectors, with protobuf encoding."""

from __future__ import annotations

import random
import struct
from dataclasses import dataclass, field

from .protowire import DecodeError, Encoder, WireType, as_float32, iter_fields


def _f32(value: float) -> float:
    """Round a float to the nearest single-precision value."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _expect_wire(number: int, actual: WireType, expected: WireType) -> None:
    if actual is not expected:
        raise DecodeError(
            f"field {number} has wire type {actual.name}, expected {expected.name}"
        )


@dataclass(frozen=True)
class Vector3:
    """A point or direction with single-precision components."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        for name in ("x", "y", "z"):
            object.__setattr__(self, name, _f32(getattr(self, name)))

    @classmethod
    def generate(cls, rng: random.Random) -> Vector3:
        """Random vector with each component in [0, 1)."""
        return cls(rng.random(), rng.random(), rng.random())

    def to_protobuf(self) -> bytes:
        return (
            Encoder()
            .float32(1, self.x, False)
            .float32(2, self.y, False)
            .float32(3, self.z, False)
            .to_bytes()
        )

    @classmethod
    def from_protobuf(cls, data: bytes) -> Vector3:
        coords = {1: 0.0, 2: 0.0, 3: 0.0}
        for number, wire_type, value in iter_fields(data):
            if number in coords:
                _expect_wire(number, wire_type, WireType.FIXED32)
                coords[number] = as_float32(value)
        return cls(coords[1], coords[2], coords[3])


_TRIANGLE_FIELDS = {1: "v0", 2: "v1", 3: "v2", 4: "normal"}


@dataclass(frozen=True)
class Triangle:
    """Three vertices and a normal."""

    v0: Vector3
    v1: Vector3
    v2: Vector3
    normal: Vector3

    @classmethod
    def generate(cls, rng: random.Random) -> Triangle:
        return cls(
            Vector3.generate(rng),
            Vector3.generate(rng),
            Vector3.generate(rng),
            Vector3.generate(rng),
        )

    def to_protobuf(self) -> bytes:
        encoder = Encoder()
        for number, name in _TRIANGLE_FIELDS.items():
            encoder.message(number, getattr(self, name).to_protobuf())
        return encoder.to_bytes()

    @classmethod
    def from_protobuf(cls, data: bytes) -> Triangle:
        # Repeated occurrences of an embedded message merge, which is the
        # same as decoding their concatenated payloads.
        parts: dict[int, bytearray] = {}
        for number, wire_type, value in iter_fields(data):
            if number in _TRIANGLE_FIELDS:
                _expect_wire(number, wire_type, WireType.LENGTH_DELIMITED)
                parts.setdefault(number, bytearray()).extend(value)
        for number, name in _TRIANGLE_FIELDS.items():
            if number not in parts:
                raise DecodeError(f"triangle is missing field {name!r}")
        return cls(*(Vector3.from_protobuf(bytes(parts[n])) for n in _TRIANGLE_FIELDS))


@dataclass
class Mesh:
    """A list of triangles."""

    triangles: list[Triangle] = field(default_factory=list)

    def to_protobuf(self) -> bytes:
        encoder = Encoder()
        for triangle in self.triangles:
            encoder.message(1, triangle.to_protobuf())
        return encoder.to_bytes()

    @classmethod
    def from_protobuf(cls, data: bytes) -> Mesh:
        triangles = []
        for number, wire_type, value in iter_fields(data):
            if number == 1:
                _expect_wire(number, wire_type, WireType.LENGTH_DELIMITED)
                triangles.append(Triangle.from_protobuf(value))
        return cls(triangles)