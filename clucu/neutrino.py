"""Phase-space density and pressure of massive relic fermions, and neutrino mass splitting."""

from __future__ import annotations

import math
from functools import lru_cache

import numpy as np
from scipy.integrate import quad
from scipy.interpolate import Akima1DInterpolator

from .errors import ParameterError, SplineError, UnphysicalNeutrinoMassError
from .parameters import CONSTANTS, NeutrinoHierarchy

MNUT_MIN = 1e-4
MNUT_MAX = 1e5
MNUT_N = 1000
_P_MAX = 1000.0
_EPSREL = 1e-7
_BREAKPOINTS = (1.0, 5.0, 20.0, 50.0)


def _fermi(p: float) -> float:
    e = math.exp(-p)
    return e / (1.0 + e)


def _density_integrand(p: float, m: float) -> float:
    return _fermi(p) * math.sqrt(p * p + m * m) * p * p * 2.0 / (2.0 * math.pi ** 2)


def _pressure_integrand(p: float, m: float) -> float:
    energy = math.sqrt(p * p + m * m)
    if energy == 0.0:
        return 0.0
    return _fermi(p) * p * p / (3.0 * energy) * p * p * 2.0 / (2.0 * math.pi ** 2)


def _build_table(integrand) -> Akima1DInterpolator:
    log_m = np.linspace(math.log(MNUT_MIN), math.log(MNUT_MAX), MNUT_N)
    values = np.array([
        quad(integrand, 0.0, _P_MAX, args=(math.exp(lm),), points=_BREAKPOINTS,
             limit=200, epsabs=0.0, epsrel=_EPSREL)[0]
        for lm in log_m
    ])
    return Akima1DInterpolator(log_m, values)


@lru_cache(maxsize=None)
def _density_table() -> Akima1DInterpolator:
    return _build_table(_density_integrand)


@lru_cache(maxsize=None)
def _pressure_table() -> Akima1DInterpolator:
    return _build_table(_pressure_integrand)


def _evaluate(table: Akima1DInterpolator, mass: float, temperature: float) -> float:
    if temperature <= 0.0:
        raise SplineError(f"temperature {temperature!r} K must be positive")
    m_over_t = mass / temperature * (CONSTANTS.EV_IN_J / CONSTANTS.KBOLTZ)
    if not (MNUT_MIN <= m_over_t <= MNUT_MAX):
        raise SplineError(
            f"m/T={m_over_t:.3e} is outside interpolation range [{MNUT_MIN:.2e},{MNUT_MAX:.2e}]"
        )
    result = float(table(math.log(m_over_t)))
    result *= temperature ** 4
    result *= 60.0 / math.pi ** 2 * CONSTANTS.STBOLTZ / CONSTANTS.CLIGHT ** 3
    result *= CONSTANTS.MPC_TO_METER ** 3 / CONSTANTS.SOLAR_MASS
    return result


def density_wdm(mass: float, temperature: float) -> float:
    """Energy density (M_sun/Mpc^3) of a fermion of mass in eV at temperature in K."""
    return _evaluate(_density_table(), mass, temperature)


def pressure_wdm(mass: float, temperature: float) -> float:
    """Pressure (M_sun/Mpc^3, c=1) of a fermion of mass in eV at temperature in K."""
    return _evaluate(_pressure_table(), mass, temperature)


def eos_wdm(mass: float, temperature: float) -> float:
    """Equation-of-state parameter w = p / rho."""
    return pressure_wdm(mass, temperature) / density_wdm(mass, temperature)


def _hierarchical(sum_mass: float, delta13: float, name: str) -> list[float]:
    d12 = CONSTANTS.DELTAM12_sq
    disc = -6.0 * d12 + 12.0 * delta13 + 4.0 * sum_mass * sum_mass
    if disc >= 0.0:
        root = math.sqrt(disc)
        a = 2.0 / 3.0 * sum_mass - root / 6.0
        if a != 0.0:
            masses = [
                a - 0.25 * d12 / a,
                a + 0.25 * d12 / a,
                -sum_mass / 3.0 + root / 3.0,
            ]
            if all(m >= 0.0 for m in masses):
                return masses
    if sum_mass < 1e-14:
        return [0.0, 0.0, 0.0]
    raise UnphysicalNeutrinoMassError(
        "Sum of neutrinos masses for this Omeganu value is incompatible "
        f"with the {name} mass hierarchy."
    )


def neutrino_mass_split(sum_mass: float, hierarchy: NeutrinoHierarchy) -> list[float]:
    """Split a summed neutrino mass (eV) into individual masses for a hierarchy."""
    if hierarchy is NeutrinoHierarchy.NORMAL:
        return _hierarchical(sum_mass, CONSTANTS.DELTAM13_sq_pos, "normal")
    if hierarchy is NeutrinoHierarchy.INVERTED:
        return _hierarchical(sum_mass, CONSTANTS.DELTAM13_sq_neg, "inverted")
    if hierarchy is NeutrinoHierarchy.EQUAL:
        return [sum_mass / 3.0] * 3
    if hierarchy is NeutrinoHierarchy.SINGLE:
        return [sum_mass]
    raise ParameterError(f"cannot split neutrino masses for hierarchy {hierarchy!r}")