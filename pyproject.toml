[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "knnmof"
version = "0.1.0"
description = "Daily-to-hourly rainfall disaggregation by k-nearest-neighbour method of fragments, conditioned on circulation patterns and seasonality"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "rainfall",
    "precipitation",
    "disaggregation",
    "method of fragments",
    "k-nearest neighbours",
    "circulation patterns",
    "hydrology",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Hydrology",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
knnmof = "knnmof.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["knnmof"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
