[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ferast"
version = "0.1.0"
description = "Parser, syntax tree dump and constant folding for a small brace-delimited scripting language"
requires-python = ">=3.10"
dependencies = []
keywords = ["parser", "ast", "syntax-tree", "compiler", "constant-folding"]
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
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ferast"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
