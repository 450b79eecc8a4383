[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zaplite"
version = "0.1.0"
description = "Structured logging cores, tees, write syncers, in-memory log observers and a gRPC-style logger"
requires-python = ">=3.11"
dependencies = []
keywords = ["logging", "structured-logging", "testing", "observer", "grpc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zaplite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
