# serbench_data

Data models for serialization benchmarks, with seeded random generation and a
hand-written protocol buffers wire encoding that needs no generated code and
no third-party libraries.

Two datasets are included:

- **Mesh** (`serbench_data.mesh`): `Vector3`, `Triangle` and `Mesh`. A mesh is
  a list of triangles, each made of three vertices and a normal. Vector
  components are rounded to 32-bit float precision when a `Vector3` is built.
- **Minecraft save data** (`serbench_data.minecraft_models`): `GameType`,
  `Item`, `Abilities`, `Entity`, `RecipeBook`, `Player` and `Players`. Integer
  fields are checked against the range of their fixed-width type when a model
  is built (a `ValueError` otherwise), and single-precision fields are rounded
  to 32-bit float precision.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Generating data

`Vector3`, `Triangle`, `GameType`, `Item`, `Abilities`, `Entity`, `RecipeBook`
and `Player` have a `generate` class method that takes a `random.Random`, so
the same seed always gives the same data. `Mesh` and `Players` are built from
lists of generated records:

```python
import random

from serbench_data.mesh import Mesh, Triangle
from serbench_data.minecraft_models import Player, Players

rng = random.Random(42)
mesh = Mesh(triangles=[Triangle.generate(rng) for _ in range(1000)])
players = Players(players=[Player.generate(rng) for _ in range(100)])
```

`GameType` also has `as_str_name()` and `from_str_name(name)`, which map to and
from the schema names `SURVIVAL`, `CREATIVE`, `ADVENTURE` and `SPECTATOR`;
`from_str_name` returns `None` for an unknown name.

## Protocol buffers encoding

Mesh models encode and decode through methods:

```python
data = mesh.to_protobuf()
assert Mesh.from_protobuf(data) == mesh
```

`Vector3` and `Triangle` have the same `to_protobuf` / `from_protobuf` pair.

The save data is encoded by functions in `serbench_data.minecraft_pb`:

```python
from serbench_data.minecraft_pb import decode_players, encode_players

data = encode_players(players)
assert decode_players(data) == players
```

`encode_player` and `decode_player` handle a single player. The functions in
`serbench_data.minecraft_pb_parts` (`encode_item` / `decode_item`,
`encode_abilities` / `decode_abilities`, `encode_entity` / `decode_entity`,
`encode_recipe_book` / `decode_recipe_book`) handle the nested records.

Decoding skips unknown fields, keeps the last value of a repeated scalar and
merges repeated embedded messages. Embedded messages that the models require
(a triangle's vertices and normal, an entity's position, motion, rotation and
uuid, a player's selected item, abilities and recipe book) must be present.
Values that do not fit their model field, such as an item count outside a
signed byte or an unknown game type, raise `DecodeError`.

## Wire format helpers

`serbench_data.protowire` holds the low-level pieces:

- `encode_varint(value)` and `decode_varint(data, offset)`;
- `iter_fields(data)`, which yields `(field number, wire type, value)` for each
  field, with varints as ints and other wire types as raw bytes;
- `as_int32`, `as_int64`, `as_uint32`, `as_float32`, `as_float64` and
  `as_string`, which interpret those raw values;
- `Encoder`, a chainable builder with `int32`, `int64`, `uint32`, `boolean`,
  `float32`, `float64`, `string`, `message` and `to_bytes`. Scalars equal to
  their default are left out unless `keep_default` is true; values out of
  range for their type raise `ValueError`;
- the `WireType` enumeration and `DecodeError` (a `ValueError`), raised for
  malformed or truncated input.

## What this package does not do

It provides the data models and the protobuf encoding only. There is no
command-line tool, no timing or benchmark runner, and no encoding into any
other serialization format.