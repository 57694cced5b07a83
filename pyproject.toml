[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rsfsm"
version = "0.1.0"
description = "Finite state machines built from a compact text specification, with enter/exit handlers, parameterised events and error propagation"
requires-python = ">=3.10"
dependencies = []
keywords = ["fsm", "state machine", "finite state machine", "events", "transitions"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rsfsm-blinky = "rsfsm.blinky:main"
rsfsm-coin-machine = "rsfsm.coin_machine:main"

[tool.hatch.build.targets.wheel]
packages = ["rsfsm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
