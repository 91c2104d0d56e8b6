[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tablelog"
version = "0.3.2"
description = "Embedded, transactional key value store with typed tables backed by an append-only log"
requires-python = ">=3.10"
keywords = ["database", "embedded", "key-value", "log", "transactional"]
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
    "Topic :: Database :: Database Engines/Servers",
]
dependencies = [
    "portalocker",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tablelog-example = "tablelog.example:main"

[tool.hatch.build.targets.wheel]
packages = ["tablelog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
