[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ziptide"
version = "0.1.0"
description = "Read ZIP archives from seekable sources or in-memory bytes, with CRC32-checked decompression."
requires-python = ">=3.10"
dependencies = [
    "zstandard",
]
keywords = ["zip", "archive", "deflate", "zstd", "zip64", "extract"]
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
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ziptide-extract = "ziptide.extract:main"

[tool.hatch.build.targets.wheel]
packages = ["ziptide"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
