[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tradeproto"
version = "0.1.0"
description = "Trade account, balance and order models with JSON and Cap'n Proto wire encodings"
requires-python = ">=3.10"
dependencies = []
keywords = ["serialization", "json", "capnproto", "binary", "trade"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tradeproto = "tradeproto.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tradeproto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
