"""Covariance matrices of cluster number counts and angular power spectra."""

from __future__ import annotations

import math
from typing import Callable

import numpy as np
from scipy.integrate import quad
from scipy.special import j1

from .errors import ParameterError

_LOG10_ELL_MIN = -3.0
_LOG10_ELL_MAX = 3.0
_CHI_EPS = 1.0e-15
_QUAD_LIMIT = 500


def survey_window(delta_omega: float, ell):
    """Window 2 J1(x)/x of a circular footprint of solid angle ``delta_omega`` (sr)."""
    if delta_omega <= 0.0:
        raise ParameterError(f"survey solid angle must be positive, got {delta_omega!r}")
    theta = math.sqrt(delta_omega / math.pi)
    x = theta * np.asarray(ell, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        window = np.where(x == 0.0, 1.0, 2.0 * j1(x) / x)
    if window.ndim == 0:
        return float(window)
    return window


def sampling_variance(delta_omega: float, chi1: float, chi2: float,
                      weight1: Callable[[float], float],
                      weight2: Callable[[float], float] | None,
                      power: Callable[[float, float], float],
                      chi_to_z: Callable[[float], float],
                      epsrel: float = 1.0e-8) -> float:
    """Super-sample variance of counts in one redshift shell between comoving distances.

    ``weight1`` and ``weight2`` give the bias-weighted abundance of the two mass bins
    as functions of redshift; ``weight2=None`` means the same bin twice.  ``power(k, z)``
    is the matter power spectrum (Mpc^3) and ``chi_to_z`` maps comoving distance (Mpc)
    to redshift.
    """
    if chi2 < chi1:
        raise ParameterError(f"chi2={chi2!r} must not be below chi1={chi1!r}")

    def ell_integrand(log10_ell: float, chi: float, z: float) -> float:
        ell = 10.0 ** log10_ell
        ws = survey_window(delta_omega, ell)
        pk = power(ell / chi, z)
        return ws * ws * pk * ell * ell * math.log(10.0) / (2.0 * math.pi)

    def chi_integrand(chi: float) -> float:
        if chi < _CHI_EPS:
            return 0.0
        z = chi_to_z(chi)
        wh = weight1(z)
        whh = wh if weight2 is None else weight2(z)
        inner, _ = quad(ell_integrand, _LOG10_ELL_MIN, _LOG10_ELL_MAX, args=(chi, z),
                        epsabs=0.0, epsrel=epsrel, limit=_QUAD_LIMIT)
        return wh * whh * inner / (chi * chi)

    if chi2 == chi1:
        return 0.0
    outer, _ = quad(chi_integrand, chi1, chi2, epsabs=0.0, epsrel=epsrel, limit=_QUAD_LIMIT)
    return outer * delta_omega ** 2


def cov_nn(counts, sampling) -> np.ndarray:
    """Number-count covariance: Poisson term plus sampling variance, shape (m, m, z, z).

    ``counts`` has shape (m, z) and ``sampling`` shape (m, m, z).
    """
    n = np.asarray(counts, dtype=float)
    sv = np.asarray(sampling, dtype=float)
    if n.ndim != 2 or sv.shape != (n.shape[0], n.shape[0], n.shape[1]):
        raise ParameterError(
            f"counts {n.shape} and sampling {sv.shape} shapes do not match")
    nm, nz = n.shape
    result = np.zeros((nm, nm, nz, nz))
    idx = np.arange(nz)
    result[:, :, idx, idx] = sv + np.eye(nm)[:, :, None] * n[:, None, :]
    return result


def _prefactor(ell, delta_omega: float, n_ell_data: int) -> np.ndarray:
    grid = np.asarray(ell, dtype=float)
    if grid.ndim != 1 or len(grid) < 2:
        raise ParameterError("the multipole grid needs at least two points")
    if n_ell_data != len(grid):
        raise ParameterError(
            f"spectra have {n_ell_data} multipoles but the grid has {len(grid)}")
    if delta_omega <= 0.0:
        raise ParameterError(f"survey solid angle must be positive, got {delta_omega!r}")
    lo = grid[:-1]
    width = np.diff(grid)
    return (4.0 * math.pi / delta_omega) / ((2.0 * lo + 1.0) * width)


def cov_hhhh(ell, delta_omega: float, cl_hh_hat) -> np.ndarray:
    """Gaussian covariance of cluster auto spectra, shape (m, m, m, m, z, z, ell-1)."""
    c = np.asarray(cl_hh_hat, dtype=float)
    if c.ndim != 4 or c.shape[0] != c.shape[1]:
        raise ParameterError(f"cl_hh_hat must have shape (m, m, z, ell), got {c.shape}")
    p = _prefactor(ell, delta_omega, c.shape[3])
    c = c[..., :-1]
    nm, _, nz, nl = c.shape
    term = (np.einsum("aczl,bdzl->abcdzl", c, c)
            + np.einsum("adzl,bczl->abcdzl", c, c)) * p
    result = np.zeros((nm, nm, nm, nm, nz, nz, nl))
    idx = np.arange(nz)
    result[:, :, :, :, idx, idx, :] = term
    return result


def cov_hkhh(ell, delta_omega: float, cl_hh_hat, cl_hk) -> np.ndarray:
    """Cross covariance of cluster-lensing and cluster auto spectra, shape (m, m, m, z, z, ell-1)."""
    c = np.asarray(cl_hh_hat, dtype=float)
    k = np.asarray(cl_hk, dtype=float)
    if c.ndim != 4 or k.shape != (c.shape[0], c.shape[2], c.shape[3]):
        raise ParameterError(f"cl_hh_hat {c.shape} and cl_hk {k.shape} shapes do not match")
    p = _prefactor(ell, delta_omega, c.shape[3])
    c = c[..., :-1]
    k = k[..., :-1]
    nm, _, nz, nl = c.shape
    term = (np.einsum("tbzl,azl->tbazl", c, k)
            + np.einsum("tazl,bzl->tbazl", c, k)) * p
    result = np.zeros((nm, nm, nm, nz, nz, nl))
    idx = np.arange(nz)
    result[:, :, :, idx, idx, :] = term
    return result


def cov_hkhk(ell, delta_omega: float, cl_hh_hat, cl_kk_hat, cl_hk) -> np.ndarray:
    """Gaussian covariance of cluster-lensing cross spectra, shape (m, m, z, z, ell-1)."""
    c = np.asarray(cl_hh_hat, dtype=float)
    kk = np.asarray(cl_kk_hat, dtype=float)
    k = np.asarray(cl_hk, dtype=float)
    if (c.ndim != 4 or kk.shape != (c.shape[3],)
            or k.shape != (c.shape[0], c.shape[2], c.shape[3])):
        raise ParameterError(
            f"cl_hh_hat {c.shape}, cl_kk_hat {kk.shape} and cl_hk {k.shape} do not match")
    p = _prefactor(ell, delta_omega, c.shape[3])
    c = c[..., :-1]
    kk = kk[:-1]
    k = k[..., :-1]
    nz = c.shape[2]
    auto = np.einsum("abzl,l->abzl", c, kk)
    result = np.einsum("azl,bwl->abzwl", k, k)
    idx = np.arange(nz)
    result[:, :, idx, idx, :] += auto
    return result * p