[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mlxir"
version = "1.5.2"
description = "EEPROM decoding, calibration and temperature calculation for MLX90641 thermal infrared array data, with image filters for 32x24 thermal arrays"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "mlx90640",
    "mlx90641",
    "thermal",
    "infrared",
    "thermopile",
    "calibration",
    "image-filter",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Instrument Drivers",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["mlxir"]

[tool.hatch.build.targets.sdist]
include = [
    "mlxir",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
