"""Minecraft save-data dataset: players, entities, items and their generation."""

from __future__ import annotations

import random
import struct
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, TypeVar

T = TypeVar("T")

ITEM_IDS = (
    "dirt",
    "stone",
    "pickaxe",
    "sand",
    "gravel",
    "shovel",
    "chestplate",
    "steak",
)
ENTITY_IDS = ("cow", "sheep", "zombie", "skeleton", "spider", "creeper", "parrot", "bee")
CUSTOM_NAMES = (
    "rainbow",
    "princess",
    "steve",
    "johnny",
    "missy",
    "coward",
    "fairy",
    "howard",
)
RECIPES = (
    "pickaxe",
    "torch",
    "bow",
    "crafting table",
    "furnace",
    "shears",
    "arrow",
    "tnt",
)
DIMENSIONS = ("overworld", "nether", "end")

MAX_RECIPES = 30
MAX_DISPLAYED_RECIPES = 10
MAX_ITEMS = 40
MAX_ENDER_ITEMS = 27


def _f32(value: float) -> float:
    """Round a float to the nearest single-precision value."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _check_int(name: str, value: int, bits: int, signed: bool) -> None:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        raise ValueError(f"{name} out of range [{low}, {high}]: {value}")


def _rand_int(rng: random.Random, bits: int, signed: bool) -> int:
    raw = rng.getrandbits(bits)
    if signed and raw >= 1 << (bits - 1):
        raw -= 1 << bits
    return raw


def _rand_bool(rng: random.Random) -> bool:
    return rng.random() < 0.5


def _rand_option(rng: random.Random, make: Callable[[], T]) -> Optional[T]:
    return make() if _rand_bool(rng) else None


def _rand_len(rng: random.Random, limit: int) -> int:
    return rng.randrange(limit)


def _rand_uuid(rng: random.Random) -> tuple[int, int, int, int]:
    return tuple(rng.getrandbits(32) for _ in range(4))  # type: ignore[return-value]


def _rand_vec3d(rng: random.Random) -> tuple[float, float, float]:
    return (rng.random(), rng.random(), rng.random())


def _check_uuid(name: str, uuid: tuple[int, ...]) -> tuple[int, int, int, int]:
    uuid = tuple(uuid)
    if len(uuid) != 4:
        raise ValueError(f"{name} must have 4 parts, got {len(uuid)}")
    for part in uuid:
        _check_int(name, part, 32, signed=False)
    return uuid  # type: ignore[return-value]


def _check_vec3d(name: str, vec: tuple[float, ...]) -> tuple[float, float, float]:
    vec = tuple(float(v) for v in vec)
    if len(vec) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(vec)}")
    return vec  # type: ignore[return-value]


class GameType(IntEnum):
    """Game mode of a player."""

    SURVIVAL = 0
    CREATIVE = 1
    ADVENTURE = 2
    SPECTATOR = 3

    @classmethod
    def generate(cls, rng: random.Random) -> GameType:
        return cls(rng.randrange(4))

    def as_str_name(self) -> str:
        """Name of the value as used in the schema definition."""
        return self.name

    @classmethod
    def from_str_name(cls, value: str) -> Optional[GameType]:
        """Value for a schema name, or None if there is no such name."""
        return cls.__members__.get(value)


@dataclass
class Item:
    """A stack of items in an inventory slot."""

    count: int = 0
    slot: int = 0
    id: str = ""

    def __post_init__(self) -> None:
        _check_int("count", self.count, 8, signed=True)
        _check_int("slot", self.slot, 8, signed=False)

    @classmethod
    def generate(cls, rng: random.Random) -> Item:
        return cls(
            count=_rand_int(rng, 8, signed=True),
            slot=_rand_int(rng, 8, signed=False),
            id=rng.choice(ITEM_IDS),
        )


@dataclass
class Abilities:
    """Movement and building permissions of a player."""

    walk_speed: float = 0.0
    fly_speed: float = 0.0
    may_fly: bool = False
    flying: bool = False
    invulnerable: bool = False
    may_build: bool = False
    instabuild: bool = False

    def __post_init__(self) -> None:
        self.walk_speed = _f32(self.walk_speed)
        self.fly_speed = _f32(self.fly_speed)

    @classmethod
    def generate(cls, rng: random.Random) -> Abilities:
        return cls(
            walk_speed=rng.random(),
            fly_speed=rng.random(),
            may_fly=_rand_bool(rng),
            flying=_rand_bool(rng),
            invulnerable=_rand_bool(rng),
            may_build=_rand_bool(rng),
            instabuild=_rand_bool(rng),
        )


@dataclass
class Entity:
    """A mob or other entity in the world."""

    id: str = ""
    pos: tuple[float, float, float] = (0.0, 0.0, 0.0)
    motion: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float] = (0.0, 0.0)
    fall_distance: float = 0.0
    fire: int = 0
    air: int = 0
    on_ground: bool = False
    no_gravity: bool = False
    invulnerable: bool = False
    portal_cooldown: int = 0
    uuid: tuple[int, int, int, int] = (0, 0, 0, 0)
    custom_name: Optional[str] = None
    custom_name_visible: bool = False
    silent: bool = False
    glowing: bool = False

    def __post_init__(self) -> None:
        self.pos = _check_vec3d("pos", self.pos)
        self.motion = _check_vec3d("motion", self.motion)
        rotation = tuple(self.rotation)
        if len(rotation) != 2:
            raise ValueError(f"rotation must have 2 components, got {len(rotation)}")
        self.rotation = (_f32(rotation[0]), _f32(rotation[1]))
        self.fall_distance = _f32(self.fall_distance)
        _check_int("fire", self.fire, 16, signed=False)
        _check_int("air", self.air, 16, signed=False)
        _check_int("portal_cooldown", self.portal_cooldown, 32, signed=True)
        self.uuid = _check_uuid("uuid", self.uuid)

    @classmethod
    def generate(cls, rng: random.Random) -> Entity:
        return cls(
            id=rng.choice(ENTITY_IDS),
            pos=_rand_vec3d(rng),
            motion=_rand_vec3d(rng),
            rotation=(rng.random(), rng.random()),
            fall_distance=rng.random(),
            fire=_rand_int(rng, 16, signed=False),
            air=_rand_int(rng, 16, signed=False),
            on_ground=_rand_bool(rng),
            no_gravity=_rand_bool(rng),
            invulnerable=_rand_bool(rng),
            portal_cooldown=_rand_int(rng, 32, signed=True),
            uuid=_rand_uuid(rng),
            custom_name=_rand_option(rng, lambda: rng.choice(CUSTOM_NAMES)),
            custom_name_visible=_rand_bool(rng),
            silent=_rand_bool(rng),
            glowing=_rand_bool(rng),
        )


@dataclass
class RecipeBook:
    """Known recipes and recipe-book interface state."""

    recipes: list[str] = field(default_factory=list)
    to_be_displayed: list[str] = field(default_factory=list)
    is_filtering_craftable: bool = False
    is_gui_open: bool = False
    is_furnace_filtering_craftable: bool = False
    is_furnace_gui_open: bool = False
    is_blasting_furnace_filtering_craftable: bool = False
    is_blasting_furnace_gui_open: bool = False
    is_smoker_filtering_craftable: bool = False
    is_smoker_gui_open: bool = False

    @classmethod
    def generate(cls, rng: random.Random) -> RecipeBook:
        recipes = [rng.choice(RECIPES) for _ in range(_rand_len(rng, MAX_RECIPES))]
        displayed = [
            rng.choice(RECIPES) for _ in range(_rand_len(rng, MAX_DISPLAYED_RECIPES))
        ]
        return cls(
            recipes=recipes,
            to_be_displayed=displayed,
            is_filtering_craftable=_rand_bool(rng),
            is_gui_open=_rand_bool(rng),
            is_furnace_filtering_craftable=_rand_bool(rng),
            is_furnace_gui_open=_rand_bool(rng),
            is_blasting_furnace_filtering_craftable=_rand_bool(rng),
            is_blasting_furnace_gui_open=_rand_bool(rng),
            is_smoker_filtering_craftable=_rand_bool(rng),
            is_smoker_gui_open=_rand_bool(rng),
        )


Vehicle = tuple[tuple[int, int, int, int], Entity]


@dataclass
class Player:
    """Saved state of one player."""

    game_type: GameType = GameType.SURVIVAL
    previous_game_type: GameType = GameType.SURVIVAL
    score: int = 0
    dimension: str = ""
    selected_item_slot: int = 0
    selected_item: Item = field(default_factory=Item)
    spawn_dimension: Optional[str] = None
    spawn_x: int = 0
    spawn_y: int = 0
    spawn_z: int = 0
    spawn_forced: Optional[bool] = None
    sleep_timer: int = 0
    food_exhaustion_level: float = 0.0
    food_saturation_level: float = 0.0
    food_tick_timer: int = 0
    xp_level: int = 0
    xp_p: float = 0.0
    xp_total: int = 0
    xp_seed: int = 0
    inventory: list[Item] = field(default_factory=list)
    ender_items: list[Item] = field(default_factory=list)
    abilities: Abilities = field(default_factory=Abilities)
    entered_nether_position: Optional[tuple[float, float, float]] = None
    root_vehicle: Optional[Vehicle] = None
    shoulder_entity_left: Optional[Entity] = None
    shoulder_entity_right: Optional[Entity] = None
    seen_credits: bool = False
    recipe_book: RecipeBook = field(default_factory=RecipeBook)

    def __post_init__(self) -> None:
        self.game_type = GameType(self.game_type)
        self.previous_game_type = GameType(self.previous_game_type)
        _check_int("score", self.score, 64, signed=True)
        _check_int("selected_item_slot", self.selected_item_slot, 32, signed=False)
        for name in ("spawn_x", "spawn_y", "spawn_z"):
            _check_int(name, getattr(self, name), 64, signed=True)
        _check_int("sleep_timer", self.sleep_timer, 16, signed=False)
        self.food_exhaustion_level = _f32(self.food_exhaustion_level)
        self.food_saturation_level = _f32(self.food_saturation_level)
        _check_int("food_tick_timer", self.food_tick_timer, 32, signed=False)
        _check_int("xp_level", self.xp_level, 32, signed=False)
        self.xp_p = _f32(self.xp_p)
        _check_int("xp_total", self.xp_total, 32, signed=True)
        _check_int("xp_seed", self.xp_seed, 32, signed=True)
        if self.entered_nether_position is not None:
            self.entered_nether_position = _check_vec3d(
                "entered_nether_position", self.entered_nether_position
            )
        if self.root_vehicle is not None:
            uuid, entity = self.root_vehicle
            self.root_vehicle = (_check_uuid("root_vehicle uuid", uuid), entity)

    @classmethod
    def generate(cls, rng: random.Random) -> Player:
        return cls(
            game_type=GameType.generate(rng),
            previous_game_type=GameType.generate(rng),
            score=_rand_int(rng, 64, signed=True),
            dimension=rng.choice(DIMENSIONS),
            selected_item_slot=_rand_int(rng, 32, signed=False),
            selected_item=Item.generate(rng),
            spawn_dimension=_rand_option(rng, lambda: rng.choice(DIMENSIONS)),
            spawn_x=_rand_int(rng, 64, signed=True),
            spawn_y=_rand_int(rng, 64, signed=True),
            spawn_z=_rand_int(rng, 64, signed=True),
            spawn_forced=_rand_option(rng, lambda: _rand_bool(rng)),
            sleep_timer=_rand_int(rng, 16, signed=False),
            food_exhaustion_level=rng.random(),
            food_saturation_level=rng.random(),
            food_tick_timer=_rand_int(rng, 32, signed=False),
            xp_level=_rand_int(rng, 32, signed=False),
            xp_p=rng.random(),
            xp_total=_rand_int(rng, 32, signed=True),
            xp_seed=_rand_int(rng, 32, signed=True),
            inventory=[Item.generate(rng) for _ in range(_rand_len(rng, MAX_ITEMS))],
            ender_items=[
                Item.generate(rng) for _ in range(_rand_len(rng, MAX_ENDER_ITEMS))
            ],
            abilities=Abilities.generate(rng),
            entered_nether_position=_rand_option(rng, lambda: _rand_vec3d(rng)),
            root_vehicle=_rand_option(
                rng, lambda: (_rand_uuid(rng), Entity.generate(rng))
            ),
            shoulder_entity_left=_rand_option(rng, lambda: Entity.generate(rng)),
            shoulder_entity_right=_rand_option(rng, lambda: Entity.generate(rng)),
            seen_credits=_rand_bool(rng),
            recipe_book=RecipeBook.generate(rng),
        )


@dataclass
class Players:
    """A collection of saved players."""

    players: list[Player] = field(default_factory=list)