[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jetorm"
version = "0.1.0"
description = "Building blocks for repository-style SQL access: composable query specifications, pagination values, transactions with savepoints, and entity validation."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sql",
    "specification",
    "query",
    "pagination",
    "transactions",
    "savepoint",
    "validation",
    "dataclasses",
]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jetorm"]

[tool.hatch.build.targets.sdist]
include = ["jetorm", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
check_untyped_defs = true
