[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbcore"
version = "0.1.0"
description = "Game Boy and Game Boy Color emulation core: audio unit, CPU instruction helpers, interrupts and VRAM DMA"
requires-python = ">=3.10"
keywords = ["gameboy", "emulator", "apu", "sm83", "audio", "cpu"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gbcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
