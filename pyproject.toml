[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emitkey"
version = "0.1.0"
description = "Channel parsing, channel-scoped security keys, key ciphers and licenses for a publish/subscribe broker"
requires-python = ">=3.10"
dependencies = []
keywords = ["pubsub", "mqtt", "channel", "security-key", "salsa20", "xtea", "murmur3", "license"]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["emitkey"]

[tool.hatch.build.targets.sdist]
include = ["emitkey", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
