"""Galaxy-cluster cosmology: parameters, neutrino densities, halo statistics and survey covariances."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "parameters",
    "neutrino",
    "halo",
    "cosmology",
    "halo_bias",
    "concentration",
    "massfunction",
    "covariance",
]