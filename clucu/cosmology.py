"""Cosmology container: parameter derivation and survey binning grids."""

from __future__ import annotations

import copy
import math
import sys
import warnings
from dataclasses import dataclass, field, replace

import numpy as np

from .errors import NotComputedError, ParameterError
from .neutrino import density_wdm, neutrino_mass_split
from .parameters import (
    CONSTANTS,
    Configuration,
    IntegrationSettings,
    NeutrinoHierarchy,
    Parameters,
    SplineSettings,
    Survey,
)

_NEUTRINO_MASS_FACTOR = 93.14  # eV per unit of Omega_nu h^2


def _isnormal(x: float) -> bool:
    return math.isfinite(x) and abs(x) >= sys.float_info.min


def linear_spacing(start: float, stop: float, n: int) -> np.ndarray:
    """Return ``n`` evenly spaced values from ``start`` to ``stop`` inclusive."""
    if n < 1:
        raise ParameterError(f"a spacing needs at least one point, got {n}")
    return np.linspace(start, stop, n)


def log10_spacing(start: float, stop: float, n: int) -> np.ndarray:
    """Return ``n`` values evenly spaced in log10 from ``start`` to ``stop``."""
    if start <= 0.0 or stop <= 0.0:
        raise ParameterError("logarithmic spacing needs positive end points")
    return 10.0 ** linear_spacing(math.log10(start), math.log10(stop), n)


def linlog_spacing(xmin: float, xminlog: float, xmax: float,
                   nlin: int, nlog: int) -> np.ndarray:
    """Linear spacing up to ``xminlog`` followed by log spacing up to ``xmax``.

    The two parts share the point ``xminlog``, so ``nlin + nlog - 1`` values result.
    """
    if nlin < 1 or nlog < 1:
        raise ParameterError("linlog spacing needs at least one point in each part")
    linear = linear_spacing(xmin, xminlog, nlin)
    logarithmic = log10_spacing(xminlog, xmax, nlog)
    return np.concatenate((linear[:-1], logarithmic))


def _curvature(params: Parameters) -> None:
    if abs(params.omega_k) < 1e-6:
        params.k_sign = 0
    elif params.omega_k > 0:
        params.k_sign = -1
    else:
        params.k_sign = 1
    params.sqrtk = math.sqrt(abs(params.omega_k)) * params.h / CONSTANTS.CLIGHT_HMPC


def _amplitude(params: Parameters) -> None:
    if _isnormal(params.a_s) and not _isnormal(params.delta_zeta):
        params.delta_zeta = math.sqrt(params.a_s)
    elif not _isnormal(params.a_s) and _isnormal(params.delta_zeta):
        params.a_s = params.delta_zeta ** 2


def _photon_density() -> float:
    return 4.0 * CONSTANTS.STBOLTZ / CONSTANTS.CLIGHT ** 3 * CONSTANTS.T_CMB ** 4


def _relativistic_neutrinos(params: Parameters) -> float:
    """Set the number of relativistic species and return their density in kg/m^3."""
    params.n_nu_rel = params.neff - params.n_nu_mass * CONSTANTS.TNCDM ** 4 / (4.0 / 11.0) ** (4.0 / 3.0)
    t_nu = params.t_cmb * (4.0 / 11.0) ** (1.0 / 3.0)
    return (params.n_nu_rel * 7.0 / 8.0 * 4.0 * CONSTANTS.STBOLTZ
            / CONSTANTS.CLIGHT ** 3 * t_nu ** 4)


def _apply_split(params: Parameters) -> None:
    masses = neutrino_mass_split(params.m_nu_sum, params.neutrino_hierarchy)
    params.n_nu_mass = len(masses)
    params.m_nu[:len(masses)] = masses


def _critical_density_si() -> float:
    """Critical density today divided by h^2, in kg/m^3."""
    return CONSTANTS.RHO_CRITICAL * CONSTANTS.SOLAR_MASS / CONSTANTS.MPC_TO_METER ** 3


def derive_parameters_known_h(params: Parameters) -> Parameters:
    """Complete a parameter set whose Hubble constant is known."""
    p = copy.deepcopy(params)
    _amplitude(p)
    if _isnormal(p.h) and not _isnormal(p.h0):
        p.h0 = p.h * 100.0
    elif not _isnormal(p.h) and _isnormal(p.h0):
        p.h = p.h0 / 100.0
    _curvature(p)

    h2 = p.h * p.h
    p.t_cmb = CONSTANTS.T_CMB
    rho_crit = _critical_density_si() * h2
    p.omega_g = _photon_density() / rho_crit

    def add(i: int) -> None:
        p.n_nu_mass += 1
        p.m_nu_sum += p.m_nu[i]
        p.omega_nu_mass_sum += p.omega_nu_mass[i]
        p.onuh2_mass_sum += p.onuh2_mass[i]

    if p.neutrino_hierarchy is NeutrinoHierarchy.SPLIT:
        m_given = _isnormal(p.m_nu[0])
        om_given = _isnormal(p.omega_nu_mass[0])
        oh_given = _isnormal(p.onuh2_mass[0])
        if m_given and not om_given and not oh_given:
            for i in range(3):
                if p.m_nu[i] > 0:
                    p.onuh2_mass[i] = density_wdm(
                        p.m_nu[i], p.t_cmb * CONSTANTS.TNCDM) / CONSTANTS.RHO_CRITICAL
                    p.omega_nu_mass[i] = p.onuh2_mass[i] / h2
                    add(i)
        elif not m_given and om_given and not oh_given:
            for i in range(3):
                if p.omega_nu_mass[i] > 0:
                    p.onuh2_mass[i] = p.omega_nu_mass[i] * h2
                    p.m_nu[i] = p.onuh2_mass[i] / _NEUTRINO_MASS_FACTOR
                    add(i)
        elif not m_given and not om_given and oh_given:
            for i in range(3):
                if p.onuh2_mass[i] > 0:
                    p.omega_nu_mass[i] = p.onuh2_mass[i] / h2
                    p.m_nu[i] = p.onuh2_mass[i] / _NEUTRINO_MASS_FACTOR
                    add(i)
    else:
        m_given = _isnormal(p.m_nu_sum)
        om_given = _isnormal(p.omega_nu_mass_sum)
        oh_given = _isnormal(p.onuh2_mass_sum)
        if m_given and not om_given and not oh_given:
            p.omega_nu_mass_sum = p.m_nu_sum / _NEUTRINO_MASS_FACTOR / h2
            p.onuh2_mass_sum = p.m_nu_sum / _NEUTRINO_MASS_FACTOR
        elif not m_given and om_given and not oh_given:
            p.m_nu_sum = p.omega_nu_mass_sum * _NEUTRINO_MASS_FACTOR * h2
            p.onuh2_mass_sum = p.omega_nu_mass_sum * h2
        elif not m_given and not om_given and oh_given:
            p.m_nu_sum = p.onuh2_mass_sum * _NEUTRINO_MASS_FACTOR
            p.omega_nu_mass_sum = p.onuh2_mass_sum / h2
        _apply_split(p)
        for i in range(p.n_nu_mass):
            p.onuh2_mass[i] = p.m_nu[i] / _NEUTRINO_MASS_FACTOR
            p.omega_nu_mass[i] = p.onuh2_mass[i] / h2

    p.omega_nu_rel = _relativistic_neutrinos(p) / rho_crit
    p.onuh2_rel = p.omega_nu_rel * h2

    if ((not _isnormal(p.omega_b) and _isnormal(p.obh2))
            or (not _isnormal(p.omega_c) and _isnormal(p.och2))
            or (not _isnormal(p.omega_m) and _isnormal(p.omh2))):
        p.omega_c = p.och2 / h2
        p.omega_b = p.obh2 / h2
        p.omega_m = p.omh2 / h2
    if _isnormal(p.omega_b) and _isnormal(p.omega_c):
        p.omega_m = p.omega_b + p.omega_c + p.omega_nu_mass_sum
    elif _isnormal(p.omega_m) and _isnormal(p.omega_c):
        p.omega_b = p.omega_m - p.omega_c - p.omega_nu_mass_sum
    elif _isnormal(p.omega_m) and _isnormal(p.omega_b):
        p.omega_c = p.omega_m - p.omega_b - p.omega_nu_mass_sum
    p.ogh2 = p.omega_g * h2
    p.och2 = p.omega_c * h2
    p.obh2 = p.omega_b * h2
    p.omh2 = p.omega_m * h2

    p.omega_l = 1.0 - p.omega_m - p.omega_g - p.omega_nu_rel - p.omega_k
    return p


def derive_parameters_known_omega_l(params: Parameters) -> Parameters:
    """Complete a parameter set given Omega_Lambda and physical densities; h is derived."""
    p = copy.deepcopy(params)
    _amplitude(p)

    p.t_cmb = CONSTANTS.T_CMB
    rho_crit = _critical_density_si()
    p.ogh2 = _photon_density() / rho_crit

    if p.neutrino_hierarchy is NeutrinoHierarchy.SPLIT:
        m_given = _isnormal(p.m_nu[0])
        om_given = _isnormal(p.omega_nu_mass[0])
        oh_given = _isnormal(p.onuh2_mass[0])
        if m_given and not om_given and not oh_given:
            for i in range(3):
                if p.m_nu[i] > 0:
                    p.n_nu_mass += 1
                    p.onuh2_mass[i] = density_wdm(
                        p.m_nu[i], p.t_cmb * CONSTANTS.TNCDM) / CONSTANTS.RHO_CRITICAL
                    p.m_nu_sum += p.m_nu[i]
                    p.onuh2_mass_sum += p.onuh2_mass[i]
        elif not m_given and not om_given and oh_given:
            for i in range(3):
                if p.onuh2_mass[i] > 0:
                    p.n_nu_mass += 1
                    p.m_nu[i] = p.onuh2_mass[i] / _NEUTRINO_MASS_FACTOR
                    p.m_nu_sum += p.m_nu[i]
                    p.onuh2_mass_sum += p.onuh2_mass[i]
    else:
        m_given = _isnormal(p.m_nu_sum)
        om_given = _isnormal(p.omega_nu_mass_sum)
        oh_given = _isnormal(p.onuh2_mass_sum)
        if m_given and not om_given and not oh_given:
            p.onuh2_mass_sum = p.m_nu_sum / _NEUTRINO_MASS_FACTOR
        elif not m_given and not om_given and oh_given:
            p.m_nu_sum = p.onuh2_mass_sum * _NEUTRINO_MASS_FACTOR
        else:
            warnings.warn("wrong in neutrino", RuntimeWarning, stacklevel=2)
        _apply_split(p)
        for i in range(p.n_nu_mass):
            p.onuh2_mass[i] = p.m_nu[i] / _NEUTRINO_MASS_FACTOR

    p.onuh2_rel = _relativistic_neutrinos(p) / rho_crit

    if _isnormal(p.obh2) and _isnormal(p.och2):
        p.omh2 = p.obh2 + p.och2 + p.onuh2_mass_sum
    elif _isnormal(p.omh2) and _isnormal(p.och2):
        p.obh2 = p.omh2 - p.och2 - p.onuh2_mass_sum
    elif _isnormal(p.omh2) and _isnormal(p.obh2):
        p.och2 = p.omh2 - p.obh2 - p.onuh2_mass_sum
    else:
        warnings.warn("wrong in b,c,m", RuntimeWarning, stacklevel=2)

    p.h = math.sqrt((p.omh2 + p.ogh2 + p.onuh2_rel) / (1.0 - p.omega_l - p.omega_k))
    p.h0 = 100.0 * p.h
    h2 = p.h * p.h
    for i in range(p.n_nu_mass):
        p.omega_nu_mass[i] = p.onuh2_mass[i] / h2
    p.omega_nu_mass_sum = p.onuh2_mass_sum / h2
    p.omega_nu_rel = p.onuh2_rel / h2
    p.omega_g = p.ogh2 / h2
    p.omega_b = p.obh2 / h2
    p.omega_m = p.omh2 / h2
    p.omega_c = p.och2 / h2
    _curvature(p)
    return p


def _resolve_survey(survey: Survey, h: float) -> Survey:
    s = copy.deepcopy(survey)
    if not _isnormal(s.mass_ob_min) and _isnormal(s.mass_ob_min_h):
        s.mass_ob_min = s.mass_ob_min_h / h
        s.mass_ob_max = s.mass_ob_max_h / h
        s.mass_ob_maxc = s.mass_ob_maxc_h / h
    s.delta_omega = s.survey_area * (math.pi / 180.0) ** 2
    return s


def _count(low: float, high: float, step: float) -> int:
    return int((high - low) / step + 0.5) + 1


@dataclass
class SurveyGrids:
    """Redshift, wavenumber, multipole and observable-mass grids of a survey."""

    delta_omega: float
    spline_z: np.ndarray
    zob: np.ndarray
    zobp: np.ndarray
    k1: np.ndarray
    k2: np.ndarray
    ell: np.ndarray
    ln_mass_ob: np.ndarray
    log10_mass_ob: np.ndarray
    mass_ob: np.ndarray
    nbin_zob: np.ndarray = field(repr=False)
    nbin_mzob: np.ndarray = field(repr=False)
    shift_perp: np.ndarray = field(repr=False)
    shift_para: np.ndarray = field(repr=False)

    @property
    def n_zob(self) -> int:
        return len(self.zob)

    @property
    def n_zobp(self) -> int:
        return len(self.zobp)

    @property
    def n_mob(self) -> int:
        return len(self.mass_ob)

    @property
    def n_ell(self) -> int:
        return len(self.ell)


def _mass_grids(s: Survey) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    if s.dln_mass_ob > 1.0e-5:
        lo, hi = math.log(s.mass_ob_min), math.log(s.mass_ob_max)
        ln_m = linear_spacing(lo, hi, _count(lo, hi, s.dln_mass_ob))
        mass = np.exp(ln_m)
        return ln_m, np.log10(mass), mass
    if s.dlog10_mass_ob > 1.0e-5:
        lo = math.log10(s.mass_ob_min)
        if s.mass_ob_maxc > 1.0e-5:
            n = int((math.log10(s.mass_ob_maxc) - lo) / s.dlog10_mass_ob + 0.5) + 2
            log10_m = np.array(
                [lo + s.dlog10_mass_ob * i for i in range(n - 1)] + [math.log10(s.mass_ob_max)]
            )
        else:
            hi = math.log10(s.mass_ob_max)
            log10_m = linear_spacing(lo, hi, _count(lo, hi, s.dlog10_mass_ob))
        mass = 10.0 ** log10_m
        return np.log(mass), log10_m, mass
    empty = np.empty(0)
    return empty, empty.copy(), empty.copy()


def build_survey_grids(survey: Survey, h: float) -> SurveyGrids:
    """Build the binning grids of a survey for a Hubble parameter ``h``."""
    s = _resolve_survey(survey, h)
    spline_z = linlog_spacing(0.0, s.spline_z_minlog, s.spline_z_max,
                              s.spline_z_nlin, s.spline_z_nlog)
    zob = linear_spacing(s.zob_min, s.zob_max, _count(s.zob_min, s.zob_max, s.zob_bin))
    zobp = linear_spacing(s.zobp_min, s.zobp_max, _count(s.zobp_min, s.zobp_max, s.zobp_bin))
    k1 = linear_spacing(s.k1_min, s.k1_max, _count(s.k1_min, s.k1_max, s.k1_bin))
    k2 = linear_spacing(s.k2_min, s.k2_max, _count(s.k2_min, s.k2_max, s.k2_bin))
    ell = log10_spacing(1.0, 1.0e4, _count(0.0, 4.0, 0.1))
    ln_m, log10_m, mass = _mass_grids(s)
    return SurveyGrids(
        delta_omega=s.delta_omega,
        spline_z=spline_z,
        zob=zob,
        zobp=zobp,
        k1=k1,
        k2=k2,
        ell=ell,
        ln_mass_ob=ln_m,
        log10_mass_ob=log10_m,
        mass_ob=mass,
        nbin_zob=np.zeros(len(zob)),
        nbin_mzob=np.zeros((len(mass), len(zob))),
        shift_perp=np.ones(len(zobp)),
        shift_para=np.ones(len(zobp)),
    )


class Cosmology:
    """A cosmological model together with its survey and numerical settings."""

    def __init__(self, config: Configuration | None = None,
                 params: Parameters | None = None,
                 survey: Survey | None = None) -> None:
        self.config = copy.deepcopy(config) if config is not None else Configuration()
        self.params = copy.deepcopy(params) if params is not None else Parameters()
        self.survey = copy.deepcopy(survey) if survey is not None else Survey()
        self.spline_settings = SplineSettings()
        self.integration = IntegrationSettings()
        self.name = "cosmo_name"
        self.classname = "cosmo_classname"
        self.cosmo_id = 0
        self.class_id = 0
        self.thread_num = 1
        self.gisdb = True
        self.grids: SurveyGrids | None = None

    def initialize(self) -> "Cosmology":
        """Derive the missing parameters and build the survey grids."""
        p = self.params
        if not _isnormal(p.h) and not _isnormal(p.h0) and _isnormal(p.omega_l):
            self.params = derive_parameters_known_omega_l(p)
        elif (_isnormal(p.h) or _isnormal(p.h0)) and not _isnormal(p.omega_l):
            self.params = derive_parameters_known_h(p)
        self.survey = _resolve_survey(self.survey, self.params.h)
        self.grids = build_survey_grids(self.survey, self.params.h)
        return self

    def hubble0(self) -> float:
        """Hubble constant today in 1/Mpc."""
        if not _isnormal(self.params.h):
            raise NotComputedError("the Hubble parameter has not been derived yet")
        return self.params.h / CONSTANTS.CLIGHT_HMPC

    def __repr__(self) -> str:
        return f"Cosmology(name={self.name!r}, h={self.params.h!r})"


def create_cosmology(config: Configuration, params: Parameters, survey: Survey) -> Cosmology:
    """Create a cosmology from its parts; call ``initialize`` before use."""
    return Cosmology(config, params, survey)


__all__ = [
    "SurveyGrids",
    "Cosmology",
    "linear_spacing",
    "log10_spacing",
    "linlog_spacing",
    "derive_parameters_known_h",
    "derive_parameters_known_omega_l",
    "build_survey_grids",
    "create_cosmology",
    "replace",
]