[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clitree"
version = "0.1.0"
description = "Describe command-line applications as trees of commands, flags and typed positional arguments."
requires-python = ">=3.10"
dependencies = []
keywords = ["cli", "command-line", "arguments", "subcommands", "flags"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Environment :: Console",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clitree"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
