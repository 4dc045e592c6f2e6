[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chessexplorer"
version = "0.1.0"
description = "Compact binary data model for a chess opening explorer: entries, statistics, keys and metrics"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "opening explorer", "database", "binary format", "statistics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["chessexplorer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
