[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "katanacore"
version = "0.1.0"
description = "Physics, collision, timing, input-replay and rewind core for a 2D side-scrolling action game"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "2d", "collision", "physics", "platformer", "replay", "slow-motion", "rewind"]
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
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["katanacore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
