"""Halo concentration-mass relations."""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

from .errors import ParameterError
from .parameters import ConcentrationMethod, HaloDefinition

if TYPE_CHECKING:
    from .cosmology import Cosmology

_DELTA_C = 1.686

_DUFFY = {
    HaloDefinition.DELTA_200M: (10.14, -0.081, -1.01),
    HaloDefinition.DELTA_200C: (5.71, -0.084, -0.47),
}

_BHATTACHARYA = {
    HaloDefinition.DELTA_VIR: (7.7, 0.9, -0.29),
    HaloDefinition.DELTA_200M: (9.0, 1.15, -0.29),
    HaloDefinition.DELTA_200C: (5.9, 0.54, -0.35),
}


def duffy2008(cosmo: "Cosmology", halo_definition: HaloDefinition,
              mass: float, z: float) -> float:
    """Duffy et al. (2008) power law; virial coefficients come from the survey."""
    if halo_definition is HaloDefinition.DELTA_VIR:
        s = cosmo.survey
        if not s.a_vir > 0:
            raise ParameterError("virial Duffy coefficients are not set in the survey")
        a, b, c = s.a_vir, s.b_vir, s.c_vir
    else:
        try:
            a, b, c = _DUFFY[halo_definition]
        except KeyError:
            raise ParameterError(
                f"wrong type in ConcentrationDuffy2008: {halo_definition!r}") from None
    pivot = 2.0e12 / cosmo.params.h
    return a * (mass / pivot) ** b * (1.0 + z) ** c


def bhattacharya2013(halo_definition: HaloDefinition, growth: float, sigma: float) -> float:
    """Bhattacharya et al. (2013) relation from the growth factor and sigma(M)."""
    try:
        a, b, c = _BHATTACHARYA[halo_definition]
    except KeyError:
        raise ParameterError(
            f"wrong type in ConcentrationBhattacharya2013: {halo_definition!r}") from None
    nu = _DELTA_C / sigma
    return a * growth ** b * nu ** c


def diemer2015(halo_definition: HaloDefinition, slope: float, sigma: float) -> float:
    """Diemer & Kravtsov (2015) relation from the local power-spectrum slope."""
    if halo_definition is not HaloDefinition.DELTA_200C:
        warnings.warn("wrong type in ConcentrationDiemer2015", RuntimeWarning, stacklevel=2)
    phi_0 = 6.58
    phi_1 = 1.27
    eta_0 = 7.28
    eta_1 = 1.56
    alpha = 1.08
    beta = 1.77
    nu = _DELTA_C / sigma
    c_min = phi_0 + slope * phi_1
    nu_min = eta_0 + slope * eta_1
    return 0.5 * c_min * ((nu_min / nu) ** alpha + (nu / nu_min) ** beta)


def _require(value: float | None, name: str, method: ConcentrationMethod) -> float:
    if value is None:
        raise ParameterError(f"{method.value} concentration needs {name}")
    return value


def concentration(cosmo: "Cosmology", halo_definition: HaloDefinition, mass: float,
                  z: float, growth: float | None = None, sigma: float | None = None,
                  slope: float | None = None) -> float:
    """Concentration from the relation chosen in the cosmology's configuration."""
    method = cosmo.config.halo_concentration_method
    if method is ConcentrationMethod.DUFFY2008:
        return duffy2008(cosmo, halo_definition, mass, z)
    if method is ConcentrationMethod.BHATTACHARYA2013:
        return bhattacharya2013(halo_definition,
                                _require(growth, "the growth factor", method),
                                _require(sigma, "sigma(M)", method))
    if method is ConcentrationMethod.DIEMER2015:
        return diemer2015(halo_definition,
                          _require(slope, "the power-spectrum slope", method),
                          _require(sigma, "sigma(M)", method))
    raise ParameterError(f"wrong type in concentration: {method!r}")