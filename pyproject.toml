[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "notevault"
version = "0.1.0"
description = "Inspect, query, rank and search a directory of Markdown notes"
requires-python = ">=3.10"
keywords = ["markdown", "notes", "zettelkasten", "bm25", "pagerank", "frontmatter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Markup :: Markdown",
    "Topic :: Text Processing :: Indexing",
]
dependencies = [
    "pyyaml",
    "markdown-it-py",
    "tabulate",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[project.scripts]
notevault = "notevault.app:main"

[tool.hatch.build.targets.wheel]
packages = ["notevault"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
