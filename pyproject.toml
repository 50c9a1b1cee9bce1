[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "twinsamples"
version = "0.1.0"
description = "In-vehicle digital twin sample providers and consumers: simulated vehicle signals, managed MQTT topics and image streaming."
requires-python = ">=3.10"
keywords = ["digital twin", "vehicle", "mqtt", "dtmi", "simulation"]
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
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Embedded Systems",
]
dependencies = [
    "pyyaml",
    "paho-mqtt",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["twinsamples"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
