import random

import pytest

from serbench_data.minecraft_models import Abilities, Entity, Item, RecipeBook
from serbench_data.minecraft_pb_parts import (
    decode_abilities,
    decode_entity,
    decode_item,
    decode_recipe_book,
    encode_abilities,
    encode_entity,
    encode_item,
    encode_recipe_book,
)
from serbench_data.protowire import DecodeError, Encoder

SEEDS = range(25)


def _entity_required_fields(encoder: Encoder) -> Encoder:
    return encoder.message(2, b"").message(3, b"").message(4, b"").message(12, b"")


def test_default_item_encodes_to_nothing():
    assert encode_item(Item()) == b""
    assert decode_item(b"") == Item()


def test_item_wire_bytes():
    assert encode_item(Item(count=1, slot=2, id="dirt")) == b"\x08\x01\x10\x02\x1a\x04dirt"


@pytest.mark.parametrize("seed", SEEDS)
def test_item_round_trip(seed):
    item = Item.generate(random.Random(seed))
    assert decode_item(encode_item(item)) == item


def test_negative_item_count_round_trip():
    item = Item(count=-128, slot=255, id="steak")
    assert decode_item(encode_item(item)) == item


def test_item_count_out_of_range_rejected():
    data = Encoder().int32(1, 200).to_bytes()
    with pytest.raises(DecodeError):
        decode_item(data)


def test_item_slot_out_of_range_rejected():
    data = Encoder().uint32(2, 256).to_bytes()
    with pytest.raises(DecodeError):
        decode_item(data)


def test_item_wrong_wire_type_rejected():
    data = Encoder().string(1, "x").to_bytes()
    with pytest.raises(DecodeError):
        decode_item(data)


def test_item_unknown_fields_skipped():
    data = encode_item(Item(count=3, slot=4, id="sand")) + Encoder().string(9, "x").to_bytes()
    assert decode_item(data) == Item(count=3, slot=4, id="sand")


@pytest.mark.parametrize("seed", SEEDS)
def test_abilities_round_trip(seed):
    abilities = Abilities.generate(random.Random(seed))
    assert decode_abilities(encode_abilities(abilities)) == abilities


def test_default_abilities_empty():
    assert encode_abilities(Abilities()) == b""
    assert decode_abilities(b"") == Abilities()


@pytest.mark.parametrize("seed", SEEDS)
def test_entity_round_trip(seed):
    entity = Entity.generate(random.Random(seed))
    assert decode_entity(encode_entity(entity)) == entity


def test_default_entity_has_empty_sub_messages():
    assert encode_entity(Entity()) == b"\x12\x00\x1a\x00\x22\x00\x62\x00"
    assert decode_entity(encode_entity(Entity())) == Entity()


def test_empty_custom_name_is_kept():
    entity = Entity(custom_name="")
    decoded = decode_entity(encode_entity(entity))
    assert decoded.custom_name == ""


def test_absent_custom_name_stays_none():
    decoded = decode_entity(encode_entity(Entity(custom_name=None)))
    assert decoded.custom_name is None


def test_entity_missing_position_rejected():
    with pytest.raises(DecodeError):
        decode_entity(b"")


def test_entity_fire_out_of_range_rejected():
    data = _entity_required_fields(Encoder()).uint32(6, 70000).to_bytes()
    with pytest.raises(DecodeError):
        decode_entity(data)


def test_entity_repeated_position_merges():
    first = Encoder().float64(1, 1.5).to_bytes()
    second = Encoder().float64(2, 2.5).to_bytes()
    data = (
        Encoder()
        .message(2, first)
        .message(2, second)
        .message(3, b"")
        .message(4, b"")
        .message(12, b"")
        .to_bytes()
    )
    assert decode_entity(data).pos == (1.5, 2.5, 0.0)


def test_entity_negative_portal_cooldown_round_trip():
    entity = Entity(portal_cooldown=-(1 << 31), uuid=(1, 2, 3, (1 << 32) - 1))
    decoded = decode_entity(encode_entity(entity))
    assert decoded.portal_cooldown == -(1 << 31)
    assert decoded.uuid == (1, 2, 3, (1 << 32) - 1)


@pytest.mark.parametrize("seed", SEEDS)
def test_recipe_book_round_trip(seed):
    book = RecipeBook.generate(random.Random(seed))
    assert decode_recipe_book(encode_recipe_book(book)) == book


def test_recipe_book_keeps_empty_strings_and_order():
    book = RecipeBook(recipes=["", "tnt", ""], to_be_displayed=["bow"], is_gui_open=True)
    decoded = decode_recipe_book(encode_recipe_book(book))
    assert decoded.recipes == ["", "tnt", ""]
    assert decoded.to_be_displayed == ["bow"]
    assert decoded.is_gui_open is True
    assert decoded.is_smoker_gui_open is False


def test_recipe_book_invalid_utf8_rejected():
    data = b"\x0a\x01\xff"
    with pytest.raises(DecodeError):
        decode_recipe_book(data)