[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "keyboard_qa"
version = "0.1.0"
description = "In-memory simulation of a bonding-curve key market and a paid question-and-answer app built on it"
requires-python = ">=3.10"
dependencies = []
keywords = ["bonding-curve", "keys", "questions", "answers", "simulation", "smart-contract"]
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
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["keyboard_qa"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
