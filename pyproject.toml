[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "caretedit"
version = "0.1.0"
description = "A small terminal text editor with incremental search and Rust syntax highlighting"
requires-python = ">=3.10"
keywords = ["editor", "terminal", "text", "tui", "syntax-highlighting", "grapheme"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]
dependencies = [
    "regex",
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
caretedit = "caretedit.editor:main"

[tool.hatch.build.targets.wheel]
packages = ["caretedit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
