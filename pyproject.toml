[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parenshell"
version = "0.1.0"
description = "A small shell language with closures, blocks, maps and exceptions, and an interpreter for it"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "interpreter", "scripting", "language", "repl"]
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
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
parenshell = "parenshell.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["parenshell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
