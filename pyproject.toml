[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zeget"
version = "2.0.0rc0"
description = "Find, verify and extract prebuilt release binaries from GitHub releases and direct URLs"
requires-python = ">=3.10"
keywords = ["github", "releases", "binaries", "checksum", "sha256", "archives", "extraction"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
    "Topic :: System :: Archiving",
]
dependencies = [
    "zstandard",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["zeget"]

[tool.hatch.build.targets.sdist]
include = ["zeget", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
