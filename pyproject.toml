[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "mazefps"
version = "0.1.0"
description = "Authoritative UDP game server for a maze-based multiplayer first person shooter"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "server", "fps", "multiplayer", "maze", "ecs", "udp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: First Person Shooters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mazefps-server = "mazefps.server:main"

[tool.setuptools.packages.find]
include = ["mazefps*"]

[tool.pytest.ini_options]
addopts = "-ra"
