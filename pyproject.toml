[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rastaproto"
version = "0.1.0"
description = "RaSTA safety and redundancy layer packets, checksums and queues"
requires-python = ">=3.10"
dependencies = []
keywords = ["rasta", "railway", "safety", "protocol", "crc", "md4", "blake2"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rastaproto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
