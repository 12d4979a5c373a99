[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "corepki"
version = "3.3.0"
description = "Helpers for common PKCS #11 operations and ECDSA signature format conversion"
requires-python = ">=3.10"
dependencies = []
keywords = ["pkcs11", "cryptoki", "ecdsa", "signature", "asn1", "token"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
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
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["corepki"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
