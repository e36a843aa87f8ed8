[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clucu"
version = "0.1.0"
description = "Galaxy-cluster cosmology: parameter derivation, neutrino densities, NFW haloes, halo bias and mass functions, and survey covariances"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = [
    "cosmology",
    "galaxy clusters",
    "halo mass function",
    "halo bias",
    "concentration",
    "neutrinos",
    "covariance",
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
    "Topic :: Scientific/Engineering :: Astronomy",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["clucu"]

[tool.pytest.ini_options]
addopts = "-ra"
