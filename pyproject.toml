[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "corrofem"
version = "1.0.0"
description = "Electro-chemical corrosion building blocks for finite element simulations: surface and volume reactions, metal-surface element systems and boundary constraints"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "corrosion",
    "electrochemistry",
    "finite-element",
    "butler-volmer",
    "reactions",
    "electroneutrality",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Chemistry",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["corrofem"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
