[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "serbench_data"
version = "0.1.0"
description = "Benchmark datasets (meshes and game save data) with seeded random generation and protobuf wire encoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["serialization", "benchmark", "protobuf", "dataset", "mesh"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["serbench_data"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
