"""Halo mass function fitting formulae, non-Gaussian corrections and abundances."""

from __future__ import annotations

import math
import warnings
from typing import TYPE_CHECKING

import numpy as np
from scipy.interpolate import CubicSpline

from .errors import NotComputedError, ParameterError, SplineError
from .halo_bias import gisdb_factor, halo_bias_sigma
from .parameters import CONSTANTS, HaloDefinition, MassFunctionMethod

if TYPE_CHECKING:
    from .cosmology import Cosmology

_DELTA_CRIT = 1.68647


def mf_press1974(sigma: float) -> float:
    """Press & Schechter (1974) multiplicity function."""
    nu = _DELTA_CRIT / sigma
    return math.sqrt(2.0 / math.pi) * nu * math.exp(-0.5 * nu * nu)


def mf_sheth1999(sigma: float) -> float:
    """Sheth & Tormen (1999) multiplicity function."""
    big_a = 0.3222
    a = 0.707
    p = 0.3
    nu = _DELTA_CRIT / sigma
    anu2 = a * nu * nu
    return big_a * math.sqrt(2.0 * a / math.pi) * (1.0 + anu2 ** -p) * nu * math.exp(-anu2 / 2.0)


def mf_jenkins2001(sigma: float) -> float:
    """Jenkins et al. (2001) multiplicity function for 180 times the mean density."""
    return 0.301 * math.exp(-abs(math.log(1.0 / sigma) + 0.64) ** 3.82)


def mf_tinker2008(sigma: float, z: float) -> float:
    """Tinker et al. (2008) multiplicity function for 200 times the mean density."""
    delta = 200.0
    alpha = 10.0 ** (-((0.75 / math.log10(delta / 75.0)) ** 1.2))
    big_a = 0.186 * (1.0 + z) ** -0.14
    a = 1.47 * (1.0 + z) ** -0.06
    b = 2.57 * (1.0 + z) ** -alpha
    c = 1.19
    return big_a * ((sigma / b) ** -a + 1.0) * math.exp(-c / sigma ** 2)


def mf_bhattacharya2011(sigma: float, z: float) -> float:
    """Bhattacharya et al. (2011) multiplicity function for FoF haloes."""
    big_a = 0.333 * (1.0 + z) ** -0.11
    a = 0.788 * (1.0 + z) ** -0.01
    p = 0.807
    q = 1.795
    nu = _DELTA_CRIT / sigma
    anu2 = a * nu * nu
    return (big_a * math.sqrt(2.0 / math.pi) * math.exp(-0.5 * anu2)
            * (1.0 + anu2 ** -p) * (nu * math.sqrt(a)) ** q)


_BOCQUET = {
    HaloDefinition.DELTA_200M: (0.228, 2.15, 1.69, 1.30, 0.285, -0.058, -0.366, -0.045),
    HaloDefinition.DELTA_200C: (0.202, 2.21, 2.00, 1.57, 1.147, 0.375, -1.074, -0.196),
    HaloDefinition.DELTA_500C: (0.180, 2.29, 2.44, 1.97, 1.088, 0.150, -1.008, -0.322),
}


def mf_bocquet2016(sigma: float, z: float, halo_definition: HaloDefinition) -> float:
    """Bocquet et al. (2016) hydrodynamical multiplicity function."""
    try:
        a0, aa0, b0, c0, az, aaz, bz, cz = _BOCQUET[halo_definition]
    except KeyError:
        raise ParameterError(f"wrong type in MassFuncBocquet2016: {halo_definition!r}") from None
    zp1 = 1.0 + z
    big_a = a0 * zp1 ** az
    a = aa0 * zp1 ** aaz
    b = b0 * zp1 ** bz
    c = c0 * zp1 ** cz
    return big_a * ((sigma / b) ** -a + 1.0) * math.exp(-c / sigma / sigma)


def sigma_s3(cosmo: "Cosmology", mass: float) -> float:
    """sigma(M) times the skewness S3(M) for local f_NL; mass in M_sun."""
    p = cosmo.params
    om, ob, h = p.omega_m, p.omega_b, p.h
    gamma = om * h * math.exp(-ob * (1.0 + math.sqrt(2.0 * h) / om))
    m10 = mass * h / 1e10 * gamma ** 3 / p.omh2
    index = -0.0272 - 0.11 * (p.n_s - 0.96) - 0.0008 * math.log10(m10)
    return 8.66e-5 * p.f_nl * om * gamma ** -1.4 * p.sigma8 * m10 ** index


class SigmaS3Table:
    """Cubic spline of sigma*S3 in log10 of the halo mass."""

    def __init__(self, cosmo: "Cosmology") -> None:
        s = cosmo.spline_settings
        n = s.log10m_spline_nm
        if n < 3:
            raise SplineError("Error creating linear spacing in m")
        log10m = np.linspace(s.log10m_spline_min, s.log10m_spline_max, n)
        if log10m[-1] > 10e17:
            raise SplineError("Error creating linear spacing in m")
        values = np.array([sigma_s3(cosmo, 10.0 ** m) for m in log10m])
        if not np.all(np.isfinite(values)):
            raise SplineError("Error creating sigmaS3 spline")
        self.log10m_min = float(log10m[0])
        self.log10m_max = float(log10m[-1])
        self._spline = CubicSpline(log10m, values, bc_type="natural")

    def _locate(self, mass: float) -> float:
        x = math.log10(mass)
        if not self.log10m_min <= x <= self.log10m_max:
            raise SplineError(
                f"m={mass:.2e} is outside interpolation range "
                f"[{10.0 ** self.log10m_min:.2e},{10.0 ** self.log10m_max:.2e}]"
            )
        return x

    def value(self, mass: float) -> float:
        """sigma*S3 at the given mass."""
        return float(self._spline(self._locate(mass)))

    def derivative(self, mass: float) -> float:
        """d(sigma*S3)/d log10 M at the given mass."""
        return float(self._spline(self._locate(mass), 1))


def ng_hmf_factor(cosmo: "Cosmology", sigma: float, mass: float,
                  dlnsigma_dlnm: float, table: SigmaS3Table | None = None) -> float:
    """Multiplicative mass-function correction from primordial non-Gaussianity."""
    if abs(cosmo.params.f_nl) < 1.0e-15:
        return 1.0
    if table is None:
        raise NotComputedError("sigmaS3 splines have not been precomputed!")
    s3 = table.value(mass)
    ds3_dlog10m = table.derivative(mass)
    nu = 1.686 / sigma
    ds3_dlnnu = -ds3_dlog10m / dlnsigma_dlnm
    return 1.0 + (nu ** 3 - 3.0 * nu) * s3 / 6.0 - (nu - 1.0 / nu) * ds3_dlnnu / 6.0


def fitting_function(cosmo: "Cosmology", sigma: float, mass: float, z: float,
                     dlnsigma_dlnm: float, table: SigmaS3Table | None = None) -> float:
    """Multiplicity function f(sigma) chosen by the configuration, with the f_NL correction."""
    method = cosmo.config.mass_function_method
    definition = cosmo.config.halo_define_method
    if method is MassFunctionMethod.PRESS1974:
        result = mf_press1974(sigma)
    elif method is MassFunctionMethod.SHETH1999:
        result = mf_sheth1999(sigma)
    elif method is MassFunctionMethod.JENKINS2001:
        if definition is not HaloDefinition.DELTA_180M:
            warnings.warn("wrong type in MassFuncJenkins2001", RuntimeWarning, stacklevel=2)
        result = mf_jenkins2001(sigma)
    elif method is MassFunctionMethod.TINKER2008:
        result = mf_tinker2008(sigma, z)
    elif method is MassFunctionMethod.BHATTACHARYA2011:
        result = mf_bhattacharya2011(sigma, z)
    elif method is MassFunctionMethod.BOCQUET2016:
        result = mf_bocquet2016(sigma, z, definition)
    else:
        raise ParameterError(f"unknown mass function method {method!r}")
    return result * ng_hmf_factor(cosmo, sigma, mass, dlnsigma_dlnm, table)


def _mean_matter_density(cosmo: "Cosmology") -> float:
    p = cosmo.params
    return p.omega_m * CONSTANTS.RHO_CRITICAL * p.h * p.h


def halo_dn_dlnm(cosmo: "Cosmology", mass: float, z: float, sigma: float,
                 dlnsigma_dlnm: float, table: SigmaS3Table | None = None) -> float:
    """Comoving halo number density per unit ln M, in 1/Mpc^3."""
    f_sigma = fitting_function(cosmo, sigma, mass, z, dlnsigma_dlnm, table)
    return _mean_matter_density(cosmo) * f_sigma * abs(dlnsigma_dlnm) / mass


def _bias(cosmo: "Cosmology", sigma: float) -> float:
    return halo_bias_sigma(cosmo.config.bias_function_method, sigma,
                           cosmo.config.halo_define_method)


def halo_dndlnm_bias(cosmo: "Cosmology", mass: float, z: float, sigma: float,
                     dlnsigma_dlnm: float, table: SigmaS3Table | None = None) -> float:
    """Mass function weighted by the linear halo bias."""
    dn = halo_dn_dlnm(cosmo, mass, z, sigma, dlnsigma_dlnm, table)
    return dn * _bias(cosmo, sigma)


def halo_dndlnm_bias_k(cosmo: "Cosmology", mass: float, z: float, k: float, sigma: float,
                       dlnsigma_dlnm: float, table: SigmaS3Table | None = None) -> float:
    """Mass function weighted by the scale-dependent halo bias at wavenumber k (1/Mpc)."""
    dn = halo_dn_dlnm(cosmo, mass, z, sigma, dlnsigma_dlnm, table)
    bias = _bias(cosmo, sigma)
    return dn * ((bias - 1.0) * gisdb_factor(cosmo, k, z) + 1.0)