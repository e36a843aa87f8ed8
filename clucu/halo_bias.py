"""Linear halo bias fitting functions and scale-dependent bias corrections."""

from __future__ import annotations

import math
import warnings
from typing import TYPE_CHECKING, Callable

from .errors import ParameterError
from .parameters import BiasMethod, HaloDefinition

if TYPE_CHECKING:
    from .cosmology import Cosmology

_DELTA_CRIT = 1.68647


def bias_press1974(sigma: float) -> float:
    """Press-Schechter peak-background bias."""
    delta_crit = 1.686
    nu2 = (delta_crit / sigma) ** 2
    return 1.0 + (nu2 - 1.0) / delta_crit


def bias_sheth1999(sigma: float) -> float:
    """Sheth & Tormen (1999) bias."""
    a = 0.707
    p = 0.3
    anu2 = a * (_DELTA_CRIT / sigma) ** 2
    return 1.0 + (anu2 - 1.0) / _DELTA_CRIT + 2.0 * p / _DELTA_CRIT / (1.0 + anu2 ** p)


def bias_sheth2001(sigma: float) -> float:
    """Sheth, Mo & Tormen (2001) bias for FoF haloes."""
    a = 0.707
    b = 0.5
    c = 0.6
    nu = _DELTA_CRIT / sigma
    anu2 = a * nu * nu
    sqrt_a = math.sqrt(a)
    term1 = sqrt_a * anu2
    term2 = sqrt_a * b * anu2 ** (1.0 - c)
    term3 = -anu2 ** c / (anu2 ** c + b * (1.0 - c) * (1.0 - 0.5 * c))
    return 1.0 + (term1 + term2 + term3) / (sqrt_a * _DELTA_CRIT)


def bias_tinker2010(sigma: float,
                    halo_definition: HaloDefinition = HaloDefinition.DELTA_200M) -> float:
    """Tinker et al. (2010) bias, calibrated for 200 times the mean density."""
    if halo_definition is not HaloDefinition.DELTA_200M:
        warnings.warn("wrong type in HaloBiasTinker10", RuntimeWarning, stacklevel=2)
    ld = math.log10(200.0)
    xp = math.exp(-((4.0 / ld) ** 4))
    big_a = 1.0 + 0.24 * ld * xp
    a = 0.44 * ld - 0.88
    big_b = 0.183
    b = 1.5
    big_c = 0.019 + 0.107 * ld + 0.19 * xp
    c = 2.4
    nu = _DELTA_CRIT / sigma
    nua = nu ** a
    return 1.0 - big_a * nua / (nua + _DELTA_CRIT ** a) + big_b * nu ** b + big_c * nu ** c


def bias_bhattacharya2011(sigma: float) -> float:
    """Bhattacharya et al. (2011) bias for FoF haloes."""
    a = 0.788
    az = 0.01
    p = 0.807
    q = 1.795
    nu = _DELTA_CRIT / sigma
    a = a * a ** az
    anu2 = a * nu * nu
    return 1.0 + (anu2 - q) / _DELTA_CRIT + 2.0 * p / _DELTA_CRIT / (1.0 + anu2 ** p)


_SIMPLE: dict[BiasMethod, Callable[[float], float]] = {
    BiasMethod.PRESS1974: bias_press1974,
    BiasMethod.SHETH1999: bias_sheth1999,
    BiasMethod.SHETH2001: bias_sheth2001,
    BiasMethod.BHATTACHARYA2011: bias_bhattacharya2011,
}


def halo_bias_sigma(method: BiasMethod, sigma: float,
                    halo_definition: HaloDefinition = HaloDefinition.DELTA_200M) -> float:
    """Evaluate the bias fitting function selected by ``method``."""
    if method is BiasMethod.TINKER2010:
        return bias_tinker2010(sigma, halo_definition)
    try:
        return _SIMPLE[method](sigma)
    except KeyError:
        raise ParameterError(f"unknown bias method {method!r}") from None


def gisdb_factor(cosmo: "Cosmology", k: float, z: float) -> float:
    """Scale-dependent bias correction from growth-induced effects and neutrinos; k in 1/Mpc."""
    if not cosmo.gisdb:
        return 1.0
    if k <= 0.0:
        raise ParameterError(f"wavenumber must be positive, got {k!r}")
    p = cosmo.params
    if p.t_cmb <= 0.0 or p.omh2 <= 0.0:
        raise ParameterError("T_CMB and Omega_m h^2 must be derived before the bias correction")
    alpha = 4.0
    delta_lcdm = 4.8e-3
    theta_cmb = p.t_cmb / 2.7
    k_eq = 0.0746 * p.omh2 / theta_cmb ** 2
    k_fs = (0.08 / math.sqrt(1.0 + z)) * (p.m_nu_sum / 0.1) * p.h
    f_nu = p.onuh2_mass_sum / p.omh2
    delta_l = 0.6 * f_nu
    delta_q = 1.6

    r_lcdm = 1.0 + delta_lcdm * math.tanh(alpha * k / k_eq)
    if k_fs > 0.0:
        step = math.tanh(math.log(5.0 * k / k_fs) / delta_q)
    else:
        step = 1.0
    r_nu = 1.0 + 0.5 * delta_l * (step + 1.0)
    return r_lcdm * r_nu


def ng_bias_factor(cosmo: "Cosmology", k: float, growth: float, transfer: float) -> float:
    """Scale-dependent bias from local primordial non-Gaussianity f_NL."""
    h0 = cosmo.hubble0()
    p = cosmo.params
    delta_c = 1.686
    return p.f_nl * delta_c * 3.0 * p.omega_m * h0 * h0 / transfer / growth / k / k