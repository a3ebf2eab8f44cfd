"""Benchmark datasets (meshes and game save data) with random generation and protobuf wire encoding."""

__version__ = "0.1.0"
__all__ = ["protowire", "mesh", "minecraft_models", "minecraft_pb_parts", "minecraft_pb"]