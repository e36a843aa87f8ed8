import math

import pytest
from scipy.integrate import quad

from clucu.cosmology import Cosmology
from clucu.errors import NotComputedError, ParameterError, SplineError
from clucu.halo_bias import bias_sheth2001
from clucu.massfunction import (
    SigmaS3Table,
    fitting_function,
    halo_dn_dlnm,
    halo_dndlnm_bias,
    halo_dndlnm_bias_k,
    mf_bhattacharya2011,
    mf_bocquet2016,
    mf_jenkins2001,
    mf_press1974,
    mf_sheth1999,
    mf_tinker2008,
    ng_hmf_factor,
    sigma_s3,
)
from clucu.parameters import HaloDefinition, Parameters


def _cosmo(f_nl=0.0, gisdb=True):
    params = Parameters(h=0.7, omega_m=0.3, omega_b=0.05, omh2=0.147, n_s=0.96,
                        sigma8=0.8, f_nl=f_nl, t_cmb=2.7255)
    cosmo = Cosmology(params=params)
    cosmo.gisdb = gisdb
    return cosmo


def _normalisation(func, lower):
    return quad(lambda t: func(1.68647 / math.exp(t)), lower, 4.0, limit=200)[0]


def test_press1974_is_normalised():
    assert _normalisation(mf_press1974, -15.0) == pytest.approx(1.0, rel=1e-6)


def test_sheth1999_is_normalised():
    assert _normalisation(mf_sheth1999, -30.0) == pytest.approx(1.0, rel=1e-3)


def test_jenkins_peak_value():
    assert mf_jenkins2001(math.exp(0.64)) == pytest.approx(0.301)


def test_tinker_large_sigma_limit():
    assert mf_tinker2008(1e6, 0.0) == pytest.approx(0.186, rel=1e-6)


def test_bhattacharya_suppressed_for_large_sigma():
    assert mf_bhattacharya2011(1e3, 0.5) < mf_bhattacharya2011(1.0, 0.5)


def test_bocquet_large_sigma_limit():
    assert mf_bocquet2016(1e6, 0.0, HaloDefinition.DELTA_200M) == pytest.approx(0.228, rel=1e-6)


def test_bocquet_unsupported_definition_raises():
    with pytest.raises(ParameterError):
        mf_bocquet2016(1.0, 0.0, HaloDefinition.DELTA_VIR)


def test_sigma_s3_vanishes_without_fnl():
    assert sigma_s3(_cosmo(), 1e14) == 0.0


def test_sigma_s3_table_matches_function():
    cosmo = _cosmo(f_nl=10.0)
    table = SigmaS3Table(cosmo)
    assert table.value(1e10) == pytest.approx(sigma_s3(cosmo, 1e10), rel=1e-4)
    step = 1e-3
    numeric = (sigma_s3(cosmo, 10 ** (10 + step)) - sigma_s3(cosmo, 10 ** (10 - step))) / (2 * step)
    assert table.derivative(1e10) == pytest.approx(numeric, rel=1e-3)


def test_sigma_s3_table_out_of_range():
    table = SigmaS3Table(_cosmo(f_nl=10.0))
    with pytest.raises(SplineError):
        table.value(1e20)


def test_ng_factor_is_one_without_fnl():
    assert ng_hmf_factor(_cosmo(), 0.9, 1e14, 0.3) == 1.0


def test_ng_factor_needs_table():
    with pytest.raises(NotComputedError):
        ng_hmf_factor(_cosmo(f_nl=10.0), 0.9, 1e14, 0.3)


def test_ng_factor_independent_of_slope_at_unit_peak_height():
    cosmo = _cosmo(f_nl=10.0)
    table = SigmaS3Table(cosmo)
    first = ng_hmf_factor(cosmo, 1.686, 1e14, 0.3, table)
    second = ng_hmf_factor(cosmo, 1.686, 1e14, 0.7, table)
    assert first == pytest.approx(second)


def test_fitting_function_uses_configured_method():
    assert fitting_function(_cosmo(), 0.8, 1e14, 0.4, 0.3) == pytest.approx(mf_tinker2008(0.8, 0.4))


def test_dn_dlnm_linear_in_slope_magnitude():
    cosmo = _cosmo()
    base = halo_dn_dlnm(cosmo, 1e14, 0.3, 0.9, 0.2)
    assert halo_dn_dlnm(cosmo, 1e14, 0.3, 0.9, 0.4) == pytest.approx(2.0 * base)
    assert halo_dn_dlnm(cosmo, 1e14, 0.3, 0.9, -0.2) == pytest.approx(base)


def test_dndlnm_bias_multiplies_by_bias():
    cosmo = _cosmo()
    dn = halo_dn_dlnm(cosmo, 1e14, 0.3, 0.9, 0.2)
    assert halo_dndlnm_bias(cosmo, 1e14, 0.3, 0.9, 0.2) == pytest.approx(dn * bias_sheth2001(0.9))


def test_dndlnm_bias_k_without_correction_equals_plain_bias():
    cosmo = _cosmo(gisdb=False)
    assert halo_dndlnm_bias_k(cosmo, 1e14, 0.3, 0.05, 0.9, 0.2) == pytest.approx(
        halo_dndlnm_bias(cosmo, 1e14, 0.3, 0.9, 0.2))