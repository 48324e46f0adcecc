[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chromaprint"
version = "1.4.4"
description = "Building blocks for audio fingerprinting: integral-image filters, quantizers, chroma normalisation, audio slicing, PCM reading and result formatting"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "fingerprint", "chroma", "acoustic", "signal processing", "pcm", "resampling"]
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
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["chromaprint"]

[tool.hatch.build.targets.sdist]
include = ["chromaprint", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
