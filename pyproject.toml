[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pillarguard"
version = "0.1.0"
description = "Game logic for a top-down tower-defence shooter: guard the pillar against waves of monsters."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "tower-defence", "shooter", "tilemap", "waves"]
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
    "Topic :: Games/Entertainment :: Real Time Strategy",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pillarguard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
