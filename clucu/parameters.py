"""Physical constants, method choices, and parameter sets with named presets."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from .errors import ParameterError

NAN = math.nan


@dataclass(frozen=True)
class Constants:
    """Physical constants in SI units unless stated otherwise."""

    CLIGHT_HMPC: float = 2997.92458  # speed of light in Mpc/h units
    GNEWT: float = 6.67408e-11
    SOLAR_MASS: float = 1.98847e30
    MPC_TO_METER: float = 3.08567758149e22
    PC_TO_METER: float = 3.08567758149e16
    RHO_CRITICAL: float = 2.77536627e11  # h^2 M_sun / Mpc^3
    KBOLTZ: float = 1.38064852e-23
    STBOLTZ: float = 5.670367e-8
    HPLANCK: float = 6.626070040e-34
    CLIGHT: float = 299792458.0
    EV_IN_J: float = 1.6021766208e-19
    T_CMB: float = 2.7255
    TNCDM: float = 0.71611
    DELTAM12_sq: float = 7.62e-5
    DELTAM13_sq_pos: float = 2.55e-3
    DELTAM13_sq_neg: float = -2.43e-3

    @property
    def K_TO_EV(self) -> float:
        """Conversion factor from Kelvin to electron-volts."""
        return self.KBOLTZ / self.EV_IN_J


CONSTANTS = Constants()


class NeutrinoHierarchy(Enum):
    NORMAL = "normal"
    INVERTED = "inverted"
    EQUAL = "equal"
    SINGLE = "single"
    SPLIT = "split"


class PowerSpectrumMethod(Enum):
    BOLTZMANN_CLASS = "boltzmann_class"
    EISENSTEIN_HU = "eisenstein_hu"


class MassFunctionMethod(Enum):
    PRESS1974 = "press1974"
    SHETH1999 = "sheth1999"
    JENKINS2001 = "jenkins2001"
    TINKER2008 = "tinker2008"
    BHATTACHARYA2011 = "bhattacharya2011"
    BOCQUET2016 = "bocquet2016"


class BiasMethod(Enum):
    PRESS1974 = "press1974"
    SHETH1999 = "sheth1999"
    SHETH2001 = "sheth2001"
    TINKER2010 = "tinker2010"
    BHATTACHARYA2011 = "bhattacharya2011"


class ConcentrationMethod(Enum):
    DUFFY2008 = "duffy2008"
    BHATTACHARYA2013 = "bhattacharya2013"
    DIEMER2015 = "diemer2015"


class MassObservableMethod(Enum):
    MURATA2019 = "murata2019"
    OGURI2011 = "oguri2011"


class HaloDefinition(Enum):
    DELTA_200M = "200m"
    DELTA_200C = "200c"
    DELTA_500M = "500m"
    DELTA_500C = "500c"
    DELTA_180M = "180m"
    DELTA_VIR = "vir"


@dataclass
class Configuration:
    """Choice of the fitting formulae used throughout a calculation."""

    matter_power_spectrum_method: PowerSpectrumMethod = PowerSpectrumMethod.BOLTZMANN_CLASS
    mass_function_method: MassFunctionMethod = MassFunctionMethod.TINKER2008
    bias_function_method: BiasMethod = BiasMethod.SHETH2001
    halo_concentration_method: ConcentrationMethod = ConcentrationMethod.DUFFY2008
    mass_observable_method: MassObservableMethod = MassObservableMethod.MURATA2019
    halo_define_method: HaloDefinition = HaloDefinition.DELTA_200M


def _triple() -> list[float]:
    return [0.0, 0.0, 0.0]


@dataclass
class Parameters:
    """Cosmological parameters; zero or NaN marks a value still to be derived."""

    neff: float = 0.0
    n_nu_mass: int = 0
    neutrino_hierarchy: NeutrinoHierarchy = NeutrinoHierarchy.NORMAL
    m_nu: list[float] = field(default_factory=_triple)
    omega_nu_mass: list[float] = field(default_factory=_triple)
    onuh2_mass: list[float] = field(default_factory=_triple)
    m_nu_sum: float = 0.0
    omega_nu_mass_sum: float = 0.0
    onuh2_mass_sum: float = 0.0
    n_nu_rel: float = 0.0
    omega_nu_rel: float = 0.0
    onuh2_rel: float = 0.0

    h0: float = 0.0
    h: float = 0.0
    obh2: float = 0.0
    och2: float = 0.0
    omh2: float = 0.0
    ogh2: float = 0.0
    omega_b: float = 0.0
    omega_c: float = 0.0
    omega_m: float = 0.0
    omega_g: float = 0.0
    omega_l: float = 0.0
    omega_k: float = 0.0
    w0: float = 0.0
    wa: float = 0.0
    k_sign: int = 0
    sqrtk: float = 0.0
    t_cmb: float = 0.0

    n_s: float = 0.0
    alpha_s: float = 0.0
    k_pivot: float = 0.0
    sigma8: float = 0.0
    delta_zeta: float = 0.0
    a_s: float = 0.0
    tau_reio: float = 0.0
    f_nl: float = 0.0


@dataclass
class Survey:
    """Survey description: footprint, observable-mass relation and binning."""

    flux: float = 0.0
    log10_asz: float = 0.0
    beta_sz: float = 0.0
    gamma_sz: float = 0.0

    a_vir: float = 0.0
    b_vir: float = 0.0
    c_vir: float = 0.0
    f_cen0: float = 0.0
    p_cen_m: float = 0.0
    p_cen_z: float = 0.0
    sigma_s0: float = 0.0
    p_sigma_m: float = 0.0
    p_sigma_z: float = 0.0
    ln_m_b0: float = 0.0
    q_b: list[float] = field(default_factory=_triple)
    s_b: list[float] = field(default_factory=_triple)
    sigma_ln_m0: float = 0.0
    q_sigma_lnm: list[float] = field(default_factory=_triple)
    s_sigma_lnm: list[float] = field(default_factory=_triple)
    source_redshift: float = 0.0

    mass_ob_a: float = 0.0
    mass_ob_b: float = 0.0
    mass_ob_bz: float = 0.0
    mass_ob_cz: float = 0.0
    mass_ob_sigma0: float = 0.0
    mass_ob_q: float = 0.0
    mass_ob_qz: float = 0.0
    mass_ob_pz: float = 0.0

    survey_area: float = 0.0
    delta_omega: float = 0.0
    redshift_sigma0: float = 0.0
    mass_ob_min: float = 0.0
    mass_ob_max: float = 0.0
    mass_ob_maxc: float = 0.0
    mass_ob_min_h: float = 0.0
    mass_ob_max_h: float = 0.0
    mass_ob_maxc_h: float = 0.0
    dln_mass_ob: float = 0.0
    dlog10_mass_ob: float = 0.0

    spline_z_minlog: float = 0.0
    spline_z_max: float = 0.0
    spline_z_nlin: int = 0
    spline_z_nlog: int = 0

    zob_min: float = 0.0
    zob_max: float = 0.0
    zob_bin: float = 0.0
    zobp_min: float = 0.0
    zobp_max: float = 0.0
    zobp_bin: float = 0.0
    k1_min: float = 0.0
    k1_max: float = 0.0
    k1_bin: float = 0.0
    k2_min: float = 0.0
    k2_max: float = 0.0
    k2_bin: float = 0.0


@dataclass
class SplineSettings:
    """Ranges and sizes of the interpolation tables."""

    z_spline_min: float = 0.0
    z_spline_minlog_pk: float = 2.0
    z_spline_max_pk: float = 3.0
    z_spline_nlin_pk: int = 100
    z_spline_nlog_pk: int = 2
    z_spline_minlog_sm: float = 2.0
    z_spline_max_sm: float = 3.0
    z_spline_nlin_sm: int = 100
    z_spline_nlog_sm: int = 2
    z_spline_minlog_bg: float = 2.0
    z_spline_max_bg: float = 10000.0
    z_spline_nlin_bg: int = 250
    z_spline_nlog_bg: int = 250
    log10m_spline_min: float = 5.0
    log10m_spline_max: float = 17.0
    log10m_spline_nm: int = 100
    k_max_spline: float = 50.0
    k_max: float = 1e3
    k_min: float = 5e-5
    dlogk_integration: float = 0.025
    dchi_integration: float = 5.0
    n_k: int = 167
    n_k_3dcor: int = 100000
    ell_min_corr: float = 0.01
    ell_max_corr: float = 60000.0
    n_ell_corr: int = 5000
    z_spline_type: str | None = "cspline"
    k_spline_type: str | None = None
    m_spline_type: str | None = None
    d_spline_type: str | None = None
    pnl_spline_type: str | None = None
    plin_spline_type: str | None = "bicubic"
    corr_spline_type: str | None = None


@dataclass
class IntegrationSettings:
    """Tolerances and iteration limits of the numerical routines."""

    n_iteration: int = 1000
    integration_gauss_kronrod_points: int = 41
    integration_epsrel: float = 1e-4
    integration_limber_gauss_kronrod_points: int = 41
    integration_limber_epsrel: float = 1e-4
    integration_distance_epsrel: float = 1e-6
    integration_sigmar_epsrel: float = 1e-7
    integration_knl_epsrel: float = 1e-5
    root_epsrel: float = 1e-4
    root_n_iteration: int = 1000
    ode_growth_epsrel: float = 1e-6
    eps_scalefac_growth: float = 1e-6
    hm_mmin: float = 1e7
    hm_mmax: float = 1e18
    hm_epsabs: float = 0.0
    hm_epsrel: float = 1e-4
    hm_limit: int = 1000
    hm_int_method: int = 41
    nz_norm_spline_integration: bool = True
    lensing_kernel_spline_integration: bool = True
    integration_mass_true_epsrel: float = 1e-8
    integration_z_true_epsrel: float = 1e-5
    integration_mass_ob_epsrel: float = 1e-5
    integration_z_ob_epsrel: float = 1e-5


_CONFIGURATIONS: dict[str, Callable[[], Configuration]] = {
    "default": Configuration,
    "oguri": lambda: Configuration(
        matter_power_spectrum_method=PowerSpectrumMethod.EISENSTEIN_HU,
        mass_function_method=MassFunctionMethod.BHATTACHARYA2011,
        bias_function_method=BiasMethod.BHATTACHARYA2011,
        halo_concentration_method=ConcentrationMethod.DUFFY2008,
        mass_observable_method=MassObservableMethod.OGURI2011,
        halo_define_method=HaloDefinition.DELTA_VIR,
    ),
}

_PARAMETERS: dict[str, Callable[[], Parameters]] = {
    "default": lambda: Parameters(
        neff=3.046, n_nu_mass=1, onuh2_mass_sum=6.442e-4,
        neutrino_hierarchy=NeutrinoHierarchy.SINGLE,
        h0=NAN, h=NAN, obh2=0.022, omh2=0.1430, omega_l=0.6847,
        w0=-1.0, wa=0.0, omega_k=0.0,
        n_s=0.9665, alpha_s=0.0, k_pivot=0.05, sigma8=0.8102,
        delta_zeta=NAN, a_s=NAN,
    ),
    "planck2018": lambda: Parameters(
        neff=3.046, n_nu_mass=0,
        h0=NAN, h=NAN, obh2=0.0224, och2=0.120, omega_l=0.6847,
        w0=-1.0, wa=0.0, omega_k=0.0,
        n_s=0.965, alpha_s=0.0, k_pivot=0.05, sigma8=0.811,
        delta_zeta=NAN, a_s=NAN,
    ),
    "wmap9": lambda: Parameters(
        neff=3.046, n_nu_mass=0,
        h0=NAN, h=NAN, obh2=0.02264, och2=0.1138, omega_l=0.721,
        w0=-1.0, wa=0.0, omega_k=0.0,
        n_s=0.972, alpha_s=0.0, k_pivot=0.05, sigma8=0.821,
        delta_zeta=NAN, a_s=NAN,
    ),
    "wmap5": lambda: Parameters(
        neff=3.046, n_nu_mass=0,
        h0=NAN, h=0.7, omega_b=0.0462, omega_m=0.279,
        w0=-1.0, wa=0.0, omega_k=0.0,
        n_s=0.96, alpha_s=0.0, k_pivot=0.02, sigma8=NAN,
        delta_zeta=math.sqrt(2.21e-9), tau_reio=0.089,
    ),
    "oguri": lambda: Parameters(
        neff=3.046, n_nu_mass=0,
        h0=NAN, h=NAN, obh2=0.0226, omh2=0.134, omega_l=0.734,
        w0=-1.0, wa=0.0, omega_k=0.0,
        n_s=0.963, alpha_s=0.0, k_pivot=0.002, sigma8=NAN,
        delta_zeta=4.89e-5, tau_reio=0.089,
    ),
}

_BINNING = dict(
    k1_min=0.005, k1_max=0.15, k1_bin=0.005,
    k2_min=0.005, k2_max=0.15, k2_bin=0.005,
)


def _sz_like(flux: float, log10_asz: float, beta_sz: float, area: float) -> Survey:
    return Survey(
        flux=flux, log10_asz=log10_asz, beta_sz=beta_sz, gamma_sz=0.0,
        survey_area=area, redshift_sigma0=0.0, mass_ob_min=NAN,
        spline_z_minlog=2.0, spline_z_max=2.2, spline_z_nlin=80, spline_z_nlog=3,
        zob_min=0.0, zob_max=2.0, zob_bin=0.05,
        zobp_min=0.0, zobp_max=2.0, zobp_bin=0.2,
        **_BINNING,
    )


_SURVEYS: dict[str, Callable[[], Survey]] = {
    "sze": lambda: _sz_like(5.0, 8.9, 1.68, 4000.0),
    "xray_deep": lambda: _sz_like(2.25e-14, -4.159, 1.807, 150.0),
    "xray_wide": lambda: _sz_like(1.75e-13, -4.159, 1.807, 6000.0),
    "csst": lambda: Survey(
        mass_ob_a=3.15, mass_ob_b=0.86, mass_ob_bz=-0.21, mass_ob_cz=0.0,
        mass_ob_sigma0=0.32, mass_ob_q=-0.08, mass_ob_qz=0.03, mass_ob_pz=0.0,
        survey_area=17500.0, redshift_sigma0=0.001,
        mass_ob_min=15.0, mass_ob_max=300.0, dln_mass_ob=0.3, dlog10_mass_ob=NAN,
        spline_z_minlog=1.52, spline_z_max=1.7, spline_z_nlin=80, spline_z_nlog=3,
        zob_min=0.0, zob_max=1.5, zob_bin=0.05,
        zobp_min=0.0, zobp_max=1.4, zobp_bin=0.2,
        **_BINNING,
    ),
    "csst2": lambda: Survey(
        mass_ob_a=79.8, mass_ob_b=0.93, mass_ob_bz=-0.49, mass_ob_sigma0=0.217,
        mass_ob_q=0.01, mass_ob_qz=1.0, ln_m_b0=0.0, s_b=[0.0, 0.0, 0.0],
        survey_area=17500.0, redshift_sigma0=0.001,
        mass_ob_min=NAN, mass_ob_max=NAN,
        mass_ob_min_h=1.0e14, mass_ob_max_h=1.0e16,
        dln_mass_ob=NAN, dlog10_mass_ob=0.2,
        spline_z_minlog=1.52, spline_z_max=1.7, spline_z_nlin=80, spline_z_nlog=3,
        zob_min=0.0, zob_max=1.5, zob_bin=0.05,
        zobp_min=0.0, zobp_max=1.5, zobp_bin=0.1,
        **_BINNING,
    ),
    "oguri": lambda: Survey(
        a_vir=7.85, b_vir=-0.081, c_vir=-0.71,
        f_cen0=0.75, p_cen_m=0.05, p_cen_z=0.0,
        sigma_s0=0.42, p_sigma_m=0.0, p_sigma_z=0.0,
        ln_m_b0=0.0, q_b=[0.0, 0.0, 0.0], s_b=[0.0, 0.0, 0.0],
        sigma_ln_m0=0.3, q_sigma_lnm=[0.0, 0.0, 0.0], s_sigma_lnm=[0.0, 0.0, 0.0],
        source_redshift=1.0,
        mass_ob_a=0.0, mass_ob_sigma0=0.3,
        survey_area=2000.0, redshift_sigma0=0.0,
        mass_ob_min=NAN, mass_ob_max=NAN,
        mass_ob_min_h=1.0e14, mass_ob_max_h=1.0e16,
        dln_mass_ob=NAN, dlog10_mass_ob=0.2,
        spline_z_minlog=1.52, spline_z_max=1.7, spline_z_nlin=80, spline_z_nlog=3,
        zob_min=0.0, zob_max=1.4, zob_bin=0.1,
        zobp_min=0.0, zobp_max=1.4, zobp_bin=0.1,
        **_BINNING,
    ),
}


def _lookup(table: dict, name: str, kind: str):
    try:
        factory = table[name.lower()]
    except KeyError:
        known = ", ".join(sorted(table))
        raise ParameterError(f"unknown {kind} preset {name!r}; known: {known}") from None
    return factory()


def preset_configuration(name: str) -> Configuration:
    """Return a fresh copy of a named method configuration."""
    return _lookup(_CONFIGURATIONS, name, "configuration")


def preset_parameters(name: str) -> Parameters:
    """Return a fresh copy of a named cosmological parameter set."""
    return _lookup(_PARAMETERS, name, "parameter")


def preset_survey(name: str) -> Survey:
    """Return a fresh copy of a named survey description."""
    return _lookup(_SURVEYS, name, "survey")