"""NFW halo profile helpers: overdensities, concentration and mass conversion."""

from __future__ import annotations

import math
from typing import Iterable

from scipy.special import sici

from .errors import ParameterError, RootFindingError
from .parameters import HaloDefinition

_MAX_ITER = 100
_EPSREL = 1e-4


def dc_nakamura_suto(omega_m_z: float) -> float:
    """Critical collapse overdensity for a given Omega_m(z)."""
    dc0 = (3.0 / 20.0) * (12.0 * math.pi) ** (2.0 / 3.0)
    return dc0 * (1.0 + 0.012299 * math.log10(omega_m_z))


def dv_nakamura_suto(omega_m_z: float) -> float:
    """Virial overdensity relative to the mean matter density."""
    return 18.0 * math.pi ** 2 * omega_m_z ** -0.573


def nfw_mc(c: float) -> float:
    """Dimensionless NFW enclosed mass m(c) = ln(1+c) - c/(1+c)."""
    return math.log(1.0 + c) - c / (1.0 + c)


def nfw_fx(x: float) -> float:
    """The function x^3 (1+x) / ((1+x) ln(1+x) - x), linearised for small x."""
    if x > 0.01:
        xp1 = 1.0 + x
        return xp1 * x ** 3 / (xp1 * math.log(xp1) - x)
    return 2.0 * x


def _nfw_fdf(x: float, offset: float) -> tuple[float, float]:
    if x > 0.01:
        xp1 = 1.0 + x
        lxp1 = math.log(xp1)
        den = 1.0 / (xp1 * lxp1 - x)
        return (
            xp1 * x ** 3 * den - offset,
            x * x * (3.0 * xp1 * xp1 * lxp1 - x * (4.0 * x + 3.0)) * den * den,
        )
    return 2.0 * x - offset, 2.0


def _convert_single(d_factor: float, c_old: float) -> float:
    offset = d_factor * nfw_fx(c_old)
    c = c_old
    for _ in range(_MAX_ITER):
        y, dy = _nfw_fdf(c, offset)
        if dy == 0.0 or not math.isfinite(y) or not math.isfinite(dy):
            break
        previous = c
        c = c - y / dy
        if abs(c - previous) < _EPSREL * abs(c):
            return c
    raise RootFindingError("NR solver failed to find a root")


def convert_concentration(delta_old: float, delta_new: float,
                          concentrations: Iterable[float]) -> list[float]:
    """Convert NFW concentrations between overdensity definitions."""
    d_factor = delta_old / delta_new
    return [_convert_single(d_factor, c) for c in concentrations]


_FACTORS = {
    HaloDefinition.DELTA_200M: (200.0, "m"),
    HaloDefinition.DELTA_200C: (200.0, "c"),
    HaloDefinition.DELTA_500M: (500.0, "m"),
    HaloDefinition.DELTA_500C: (500.0, "c"),
    HaloDefinition.DELTA_180M: (180.0, "m"),
}


def rho_delta(halo_definition: HaloDefinition, rho_m: float, rho_crit: float,
              omega_m_z: float | None = None) -> float:
    """Threshold density (M_sun/Mpc^3) that defines a halo's boundary."""
    if halo_definition is HaloDefinition.DELTA_VIR:
        if omega_m_z is None:
            raise ParameterError("the virial definition needs Omega_m(z)")
        return dv_nakamura_suto(omega_m_z) * rho_m
    try:
        factor, reference = _FACTORS[halo_definition]
    except KeyError:
        raise ParameterError(f"wrong type in rho_delta: {halo_definition!r}") from None
    return factor * (rho_m if reference == "m" else rho_crit)


def mass_old_to_new(c_old: float, d_factor: float, mass: float) -> float:
    """Convert a halo mass given its concentration and the density ratio old/new."""
    c_new = _convert_single(d_factor, c_old)
    return nfw_mc(c_new) / nfw_mc(c_old) * mass


def nfw_scale(c: float, rho: float, mass: float) -> tuple[float, float]:
    """Return the NFW scale density (M_sun/Mpc^3) and scale radius (Mpc)."""
    mc = nfw_mc(c)
    rhos = c ** 3 / (3.0 * mc) * rho
    rs = (mass / (4.0 * math.pi * rhos * mc)) ** (1.0 / 3.0)
    return rhos, rs


def nfw_uk(k: float, mass: float, z: float, c: float, rho: float) -> float:
    """Normalised Fourier transform of the truncated NFW profile."""
    _, rs = nfw_scale(c, rho, mass)
    x = (1.0 + z) * k * rs
    si_hi, ci_hi = sici((1.0 + c) * x)
    si_lo, ci_lo = sici(x)
    amplitude = 1.0 / nfw_mc(c)
    return amplitude * (
        math.sin(x) * (si_hi - si_lo)
        + math.cos(x) * (ci_hi - ci_lo)
        - math.sin(c * x) / ((1.0 + c) * x)
    )