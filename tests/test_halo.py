import math

import pytest

from clucu.errors import ParameterError, RootFindingError
from clucu.halo import (
    convert_concentration,
    dc_nakamura_suto,
    dv_nakamura_suto,
    mass_old_to_new,
    nfw_fx,
    nfw_mc,
    nfw_scale,
    nfw_uk,
    rho_delta,
)
from clucu.parameters import HaloDefinition


def test_dc_einstein_de_sitter():
    assert dc_nakamura_suto(1.0) == pytest.approx((3.0 / 20.0) * (12.0 * math.pi) ** (2.0 / 3.0))


def test_dv_einstein_de_sitter():
    assert dv_nakamura_suto(1.0) == pytest.approx(18.0 * math.pi ** 2)


def test_dv_grows_for_low_density():
    assert dv_nakamura_suto(0.3) > dv_nakamura_suto(1.0)


def test_nfw_mc_zero():
    assert nfw_mc(0.0) == 0.0


def test_nfw_fx_small_argument_is_linear():
    assert nfw_fx(0.005) == pytest.approx(0.01)


def test_nfw_fx_increasing():
    assert nfw_fx(2.0) < nfw_fx(5.0) < nfw_fx(10.0)


def test_convert_identity():
    result = convert_concentration(200.0, 200.0, [4.0, 7.5])
    assert result == pytest.approx([4.0, 7.5], rel=1e-4)


def test_convert_empty():
    assert convert_concentration(200.0, 500.0, []) == []


def test_convert_solves_equation():
    (c_new,) = convert_concentration(200.0, 500.0, [5.0])
    assert nfw_fx(c_new) == pytest.approx(200.0 / 500.0 * nfw_fx(5.0), rel=1e-6)
    assert c_new < 5.0


def test_convert_round_trip():
    (forward,) = convert_concentration(200.0, 500.0, [6.0])
    (back,) = convert_concentration(500.0, 200.0, [forward])
    assert back == pytest.approx(6.0, rel=1e-5)


def test_convert_nan_fails():
    with pytest.raises(RootFindingError):
        convert_concentration(200.0, 500.0, [math.nan])


def test_rho_delta_mean_and_critical():
    assert rho_delta(HaloDefinition.DELTA_200M, 3.0, 10.0) == pytest.approx(600.0)
    assert rho_delta(HaloDefinition.DELTA_500C, 3.0, 10.0) == pytest.approx(5000.0)
    assert rho_delta(HaloDefinition.DELTA_180M, 3.0, 10.0) == pytest.approx(540.0)


def test_rho_delta_virial():
    value = rho_delta(HaloDefinition.DELTA_VIR, 2.0, 10.0, 1.0)
    assert value == pytest.approx(2.0 * 18.0 * math.pi ** 2)


def test_rho_delta_virial_needs_omega():
    with pytest.raises(ParameterError):
        rho_delta(HaloDefinition.DELTA_VIR, 2.0, 10.0)


def test_mass_conversion_identity():
    assert mass_old_to_new(5.0, 1.0, 1e14) == pytest.approx(1e14, rel=1e-4)


def test_mass_conversion_to_higher_overdensity_shrinks():
    assert mass_old_to_new(5.0, 200.0 / 500.0, 1e14) < 1e14


def test_nfw_scale_recovers_mass():
    c, rho, mass = 5.0, 1e13, 1e14
    rhos, rs = nfw_scale(c, rho, mass)
    assert 4.0 * math.pi * rhos * rs ** 3 * nfw_mc(c) == pytest.approx(mass)
    assert rs * c == pytest.approx((3.0 * mass / (4.0 * math.pi * rho)) ** (1.0 / 3.0))


def test_nfw_uk_normalised_at_large_scale():
    assert nfw_uk(1e-6, 1e14, 0.0, 5.0, 1e13) == pytest.approx(1.0, rel=1e-6)


def test_nfw_uk_drops_on_small_scales():
    assert nfw_uk(50.0, 1e14, 0.0, 5.0, 1e13) < nfw_uk(0.1, 1e14, 0.0, 5.0, 1e13) < 1.0