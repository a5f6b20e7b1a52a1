[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metablocks"
version = "0.1.0"
description = "A rolling-block puzzle with buttons, bridges and transporters, plus a shortest-path solver and a Monte Carlo level generator"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["puzzle", "game", "rolling-block", "solver", "monte-carlo", "level-generator"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
metablocks = "metablocks.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["metablocks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
