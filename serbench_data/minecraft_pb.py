"""Protobuf encoding of Minecraft players and player collections."""

from __future__ import annotations

from .minecraft_models import GameType, Player, Players
from .minecraft_pb_parts import (
    _collect,
    _decode_uuid,
    _decode_vector3d,
    _encode_uuid,
    _encode_vector3d,
    _narrow,
    _require,
    decode_abilities,
    decode_entity,
    decode_item,
    decode_recipe_book,
    encode_abilities,
    encode_entity,
    encode_item,
    encode_recipe_book,
)
from .protowire import DecodeError, Encoder, WireType, iter_fields

_PLAYER_SCHEMA = {
    1: "int32",
    2: "int32",
    3: "int64",
    4: "string",
    5: "uint32",
    6: "message",
    7: "string",
    8: "int64",
    9: "int64",
    10: "int64",
    11: "bool",
    12: "uint32",
    13: "float",
    14: "float",
    15: "uint32",
    16: "uint32",
    17: "float",
    18: "int32",
    19: "int32",
    22: "message",
    23: "message",
    24: "message",
    25: "message",
    26: "message",
    27: "bool",
    28: "message",
}

_INVENTORY = 20
_ENDER_ITEMS = 21


def _repeated_messages(data: bytes, numbers: tuple[int, ...]) -> dict[int, list[bytes]]:
    """Collect every occurrence of the repeated message fields in ``numbers``."""
    found: dict[int, list[bytes]] = {number: [] for number in numbers}
    for number, wire_type, raw in iter_fields(data):
        if number not in found:
            continue
        if wire_type is not WireType.LENGTH_DELIMITED:
            raise DecodeError(
                f"field {number} has wire type {wire_type.name}, "
                f"expected {WireType.LENGTH_DELIMITED.name}"
            )
        found[number].append(bytes(raw))
    return found


def _game_type(name: str, value: int) -> GameType:
    try:
        return GameType(value)
    except ValueError:
        raise DecodeError(f"{name} has unknown game type {value}") from None


def _encode_vehicle(vehicle: tuple[tuple[int, int, int, int], object]) -> bytes:
    uuid, entity = vehicle
    return (
        Encoder()
        .message(1, _encode_uuid(uuid))
        .message(2, encode_entity(entity))
        .to_bytes()
    )


def _decode_vehicle(data: bytes):
    fields = _collect(data, {1: "message", 2: "message"})
    uuid = _decode_uuid(_require(fields, 1, "root_vehicle.uuid"))
    entity = decode_entity(_require(fields, 2, "root_vehicle.entity"))
    return uuid, entity


def encode_player(player: Player) -> bytes:
    """Encode a player as a protobuf message."""
    encoder = (
        Encoder()
        .int32(1, int(player.game_type))
        .int32(2, int(player.previous_game_type))
        .int64(3, player.score)
        .string(4, player.dimension)
        .uint32(5, player.selected_item_slot)
        .message(6, encode_item(player.selected_item))
    )
    if player.spawn_dimension is not None:
        encoder.string(7, player.spawn_dimension, True)
    encoder.int64(8, player.spawn_x).int64(9, player.spawn_y).int64(10, player.spawn_z)
    if player.spawn_forced is not None:
        encoder.boolean(11, player.spawn_forced, True)
    (
        encoder.uint32(12, player.sleep_timer)
        .float32(13, player.food_exhaustion_level)
        .float32(14, player.food_saturation_level)
        .uint32(15, player.food_tick_timer)
        .uint32(16, player.xp_level)
        .float32(17, player.xp_p)
        .int32(18, player.xp_total)
        .int32(19, player.xp_seed)
    )
    for item in player.inventory:
        encoder.message(_INVENTORY, encode_item(item))
    for item in player.ender_items:
        encoder.message(_ENDER_ITEMS, encode_item(item))
    encoder.message(22, encode_abilities(player.abilities))
    if player.entered_nether_position is not None:
        encoder.message(23, _encode_vector3d(player.entered_nether_position))
    if player.root_vehicle is not None:
        encoder.message(24, _encode_vehicle(player.root_vehicle))
    if player.shoulder_entity_left is not None:
        encoder.message(25, encode_entity(player.shoulder_entity_left))
    if player.shoulder_entity_right is not None:
        encoder.message(26, encode_entity(player.shoulder_entity_right))
    encoder.boolean(27, player.seen_credits)
    encoder.message(28, encode_recipe_book(player.recipe_book))
    return encoder.to_bytes()


def decode_player(data: bytes) -> Player:
    """Decode a player; selected item, abilities and recipe book must be present."""
    fields = _collect(data, _PLAYER_SCHEMA)
    repeated = _repeated_messages(data, (_INVENTORY, _ENDER_ITEMS))

    nether = fields.get(23)
    vehicle = fields.get(24)
    left = fields.get(25)
    right = fields.get(26)
    return Player(
        game_type=_game_type("game_type", fields.get(1, 0)),
        previous_game_type=_game_type("previous_game_type", fields.get(2, 0)),
        score=fields.get(3, 0),
        dimension=fields.get(4, ""),
        selected_item_slot=fields.get(5, 0),
        selected_item=decode_item(_require(fields, 6, "selected_item")),
        spawn_dimension=fields.get(7),
        spawn_x=fields.get(8, 0),
        spawn_y=fields.get(9, 0),
        spawn_z=fields.get(10, 0),
        spawn_forced=fields.get(11),
        sleep_timer=_narrow("sleep_timer", fields.get(12, 0), 16, signed=False),
        food_exhaustion_level=fields.get(13, 0.0),
        food_saturation_level=fields.get(14, 0.0),
        food_tick_timer=fields.get(15, 0),
        xp_level=fields.get(16, 0),
        xp_p=fields.get(17, 0.0),
        xp_total=fields.get(18, 0),
        xp_seed=fields.get(19, 0),
        inventory=[decode_item(raw) for raw in repeated[_INVENTORY]],
        ender_items=[decode_item(raw) for raw in repeated[_ENDER_ITEMS]],
        abilities=decode_abilities(_require(fields, 22, "abilities")),
        entered_nether_position=None if nether is None else _decode_vector3d(nether),
        root_vehicle=None if vehicle is None else _decode_vehicle(vehicle),
        shoulder_entity_left=None if left is None else decode_entity(left),
        shoulder_entity_right=None if right is None else decode_entity(right),
        seen_credits=fields.get(27, False),
        recipe_book=decode_recipe_book(_require(fields, 28, "recipe_book")),
    )


def encode_players(players: Players) -> bytes:
    """Encode a collection of players as a protobuf message."""
    encoder = Encoder()
    for player in players.players:
        encoder.message(1, encode_player(player))
    return encoder.to_bytes()


def decode_players(data: bytes) -> Players:
    """Decode a collection of players."""
    raw_players = _repeated_messages(data, (1,))[1]
    return Players([decode_player(raw) for raw in raw_players])