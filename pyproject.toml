[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qrencoder"
version = "0.1.0"
description = "QR Code data encoding: input segments, padded codeword streams, Reed-Solomon ECC and symbol frames"
requires-python = ">=3.10"
dependencies = []
keywords = ["qr", "qrcode", "barcode", "reed-solomon", "2d-code", "encoder"]
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
    "Topic :: Multimedia :: Graphics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qrencoder"]

[tool.hatch.build.targets.sdist]
include = ["qrencoder", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
