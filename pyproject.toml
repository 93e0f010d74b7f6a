[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smtpwire"
version = "0.1.0"
description = "Parsing and building of SMTP commands, addresses, enhanced status codes and DATA streams"
requires-python = ">=3.10"
keywords = ["smtp", "email", "parser", "protocol", "mta", "dot-stuffing"]
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
    "Topic :: Communications :: Email :: Mail Transport Agents",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "idna",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["smtpwire"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
