[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crabserve"
version = "0.1.1"
description = "A lightweight HTTP server for serving static files"
requires-python = ">=3.10"
dependencies = []
keywords = ["cli", "http-server", "static-files"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
crabserve = "crabserve.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["crabserve"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
