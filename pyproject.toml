[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dcsim"
version = "0.1.0"
description = "Monte Carlo ray tracing and line-shape fitting for double crystal X-ray spectrometers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "x-ray",
    "spectrometer",
    "double-crystal",
    "monte-carlo",
    "diffraction",
    "voigt",
    "levenberg-marquardt",
    "spline",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dcsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
