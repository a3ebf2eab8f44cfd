"""Protobuf encoding of the smaller Minecraft save-data messages."""

from __future__ import annotations

from typing import Any, Callable

from .minecraft_models import Abilities, Entity, Item, RecipeBook
from .protowire import (
    DecodeError,
    Encoder,
    WireType,
    as_float32,
    as_float64,
    as_int32,
    as_int64,
    as_string,
    as_uint32,
    iter_fields,
)

_VARINT = WireType.VARINT
_LEN = WireType.LENGTH_DELIMITED

# Field kind -> (expected wire type, converter of the raw value).
_KINDS: dict[str, tuple[WireType, Callable[[Any], Any]]] = {
    "int32": (_VARINT, as_int32),
    "int64": (_VARINT, as_int64),
    "uint32": (_VARINT, as_uint32),
    "bool": (_VARINT, lambda raw: raw != 0),
    "float": (WireType.FIXED32, as_float32),
    "double": (WireType.FIXED64, as_float64),
    "string": (_LEN, as_string),
    "message": (_LEN, bytes),
    "strings": (_LEN, as_string),
}


def _collect(data: bytes, schema: dict[int, str]) -> dict[int, Any]:
    """Decode the fields named in ``schema``; unknown fields are skipped.

    Scalars keep their last occurrence, embedded messages merge by
    concatenating their payloads, and repeated strings accumulate in a list.
    """
    fields: dict[int, Any] = {}
    for number, wire_type, raw in iter_fields(data):
        kind = schema.get(number)
        if kind is None:
            continue
        expected, convert = _KINDS[kind]
        if wire_type is not expected:
            raise DecodeError(
                f"field {number} has wire type {wire_type.name}, "
                f"expected {expected.name}"
            )
        value = convert(raw)
        if kind == "message":
            fields[number] = fields.get(number, b"") + value
        elif kind == "strings":
            fields.setdefault(number, []).append(value)
        else:
            fields[number] = value
    return fields


def _require(fields: dict[int, Any], number: int, name: str) -> Any:
    try:
        return fields[number]
    except KeyError:
        raise DecodeError(f"missing required field {name!r}") from None


def _narrow(name: str, value: int, bits: int, signed: bool) -> int:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        raise DecodeError(f"{name} value {value} does not fit in {bits} bits")
    return value


def _encode_vector3d(vec: tuple[float, float, float]) -> bytes:
    x, y, z = vec
    return Encoder().float64(1, x).float64(2, y).float64(3, z).to_bytes()


def _decode_vector3d(data: bytes) -> tuple[float, float, float]:
    fields = _collect(data, {1: "double", 2: "double", 3: "double"})
    return (fields.get(1, 0.0), fields.get(2, 0.0), fields.get(3, 0.0))


def _encode_vector2f(vec: tuple[float, float]) -> bytes:
    x, y = vec
    return Encoder().float32(1, x).float32(2, y).to_bytes()


def _decode_vector2f(data: bytes) -> tuple[float, float]:
    fields = _collect(data, {1: "float", 2: "float"})
    return (fields.get(1, 0.0), fields.get(2, 0.0))


def _encode_uuid(uuid: tuple[int, int, int, int]) -> bytes:
    encoder = Encoder()
    for number, part in enumerate(uuid, start=1):
        encoder.uint32(number, part)
    return encoder.to_bytes()


def _decode_uuid(data: bytes) -> tuple[int, int, int, int]:
    fields = _collect(data, {1: "uint32", 2: "uint32", 3: "uint32", 4: "uint32"})
    return (fields.get(1, 0), fields.get(2, 0), fields.get(3, 0), fields.get(4, 0))


def encode_item(item: Item) -> bytes:
    """Encode an item as a protobuf message."""
    return (
        Encoder()
        .int32(1, item.count)
        .uint32(2, item.slot)
        .string(3, item.id)
        .to_bytes()
    )


def decode_item(data: bytes) -> Item:
    """Decode an item; counts and slots that do not fit a byte are rejected."""
    fields = _collect(data, {1: "int32", 2: "uint32", 3: "string"})
    return Item(
        count=_narrow("count", fields.get(1, 0), 8, signed=True),
        slot=_narrow("slot", fields.get(2, 0), 8, signed=False),
        id=fields.get(3, ""),
    )


_ABILITY_FLAGS = ("may_fly", "flying", "invulnerable", "may_build", "instabuild")


def encode_abilities(abilities: Abilities) -> bytes:
    """Encode player abilities as a protobuf message."""
    encoder = (
        Encoder().float32(1, abilities.walk_speed).float32(2, abilities.fly_speed)
    )
    for number, name in enumerate(_ABILITY_FLAGS, start=3):
        encoder.boolean(number, getattr(abilities, name))
    return encoder.to_bytes()


def decode_abilities(data: bytes) -> Abilities:
    """Decode player abilities."""
    schema = {1: "float", 2: "float"}
    schema.update({n: "bool" for n in range(3, 3 + len(_ABILITY_FLAGS))})
    fields = _collect(data, schema)
    flags = {
        name: fields.get(number, False)
        for number, name in enumerate(_ABILITY_FLAGS, start=3)
    }
    return Abilities(
        walk_speed=fields.get(1, 0.0), fly_speed=fields.get(2, 0.0), **flags
    )


_ENTITY_SCHEMA = {
    1: "string",
    2: "message",
    3: "message",
    4: "message",
    5: "float",
    6: "uint32",
    7: "uint32",
    8: "bool",
    9: "bool",
    10: "bool",
    11: "int32",
    12: "message",
    13: "string",
    14: "bool",
    15: "bool",
    16: "bool",
}


def encode_entity(entity: Entity) -> bytes:
    """Encode an entity as a protobuf message."""
    encoder = (
        Encoder()
        .string(1, entity.id)
        .message(2, _encode_vector3d(entity.pos))
        .message(3, _encode_vector3d(entity.motion))
        .message(4, _encode_vector2f(entity.rotation))
        .float32(5, entity.fall_distance)
        .uint32(6, entity.fire)
        .uint32(7, entity.air)
        .boolean(8, entity.on_ground)
        .boolean(9, entity.no_gravity)
        .boolean(10, entity.invulnerable)
        .int32(11, entity.portal_cooldown)
        .message(12, _encode_uuid(entity.uuid))
    )
    if entity.custom_name is not None:
        encoder.string(13, entity.custom_name, True)
    return (
        encoder.boolean(14, entity.custom_name_visible)
        .boolean(15, entity.silent)
        .boolean(16, entity.glowing)
        .to_bytes()
    )


def decode_entity(data: bytes) -> Entity:
    """Decode an entity; position, motion, rotation and uuid must be present."""
    fields = _collect(data, _ENTITY_SCHEMA)
    return Entity(
        id=fields.get(1, ""),
        pos=_decode_vector3d(_require(fields, 2, "pos")),
        motion=_decode_vector3d(_require(fields, 3, "motion")),
        rotation=_decode_vector2f(_require(fields, 4, "rotation")),
        fall_distance=fields.get(5, 0.0),
        fire=_narrow("fire", fields.get(6, 0), 16, signed=False),
        air=_narrow("air", fields.get(7, 0), 16, signed=False),
        on_ground=fields.get(8, False),
        no_gravity=fields.get(9, False),
        invulnerable=fields.get(10, False),
        portal_cooldown=fields.get(11, 0),
        uuid=_decode_uuid(_require(fields, 12, "uuid")),
        custom_name=fields.get(13),
        custom_name_visible=fields.get(14, False),
        silent=fields.get(15, False),
        glowing=fields.get(16, False),
    )


_RECIPE_BOOK_FLAGS = (
    "is_filtering_craftable",
    "is_gui_open",
    "is_furnace_filtering_craftable",
    "is_furnace_gui_open",
    "is_blasting_furnace_filtering_craftable",
    "is_blasting_furnace_gui_open",
    "is_smoker_filtering_craftable",
    "is_smoker_gui_open",
)


def encode_recipe_book(book: RecipeBook) -> bytes:
    """Encode a recipe book as a protobuf message."""
    encoder = Encoder()
    for recipe in book.recipes:
        encoder.string(1, recipe, True)
    for name in book.to_be_displayed:
        encoder.string(2, name, True)
    for number, flag in enumerate(_RECIPE_BOOK_FLAGS, start=3):
        encoder.boolean(number, getattr(book, flag))
    return encoder.to_bytes()


def decode_recipe_book(data: bytes) -> RecipeBook:
    """Decode a recipe book."""
    schema = {1: "strings", 2: "strings"}
    schema.update({n: "bool" for n in range(3, 3 + len(_RECIPE_BOOK_FLAGS))})
    fields = _collect(data, schema)
    flags = {
        flag: fields.get(number, False)
        for number, flag in enumerate(_RECIPE_BOOK_FLAGS, start=3)
    }
    return RecipeBook(
        recipes=fields.get(1, []), to_be_displayed=fields.get(2, []), **flags
    )