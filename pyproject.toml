[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "psxhw"
version = "0.1.0"
description = "Models of PlayStation hardware devices: RAM, timers, joypad port, SPU registers and GPU command decoding"
requires-python = ">=3.10"
keywords = ["emulator", "playstation", "psx", "gpu", "hardware"]
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
packages = ["psxhw"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
