[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pestmeta"
version = "0.1.0"
description = "AST, parser-node model and optimizer passes for PEG grammars with weighted choices"
requires-python = ">=3.10"
dependencies = []
keywords = ["peg", "parser", "grammar", "ast", "optimizer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pestmeta"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
