import math

import pytest

from clucu.errors import ParameterError, SplineError, UnphysicalNeutrinoMassError
from clucu.neutrino import density_wdm, eos_wdm, neutrino_mass_split, pressure_wdm
from clucu.parameters import CONSTANTS, NeutrinoHierarchy

T_NU = CONSTANTS.TNCDM * CONSTANTS.T_CMB


def test_single_hierarchy_keeps_sum():
    assert neutrino_mass_split(0.06, NeutrinoHierarchy.SINGLE) == [0.06]


def test_equal_hierarchy_splits_evenly():
    masses = neutrino_mass_split(0.3, NeutrinoHierarchy.EQUAL)
    assert len(masses) == 3
    assert all(m == pytest.approx(0.1) for m in masses)


@pytest.mark.parametrize(
    "hierarchy,total",
    [(NeutrinoHierarchy.NORMAL, 0.06), (NeutrinoHierarchy.INVERTED, 0.11)],
)
def test_hierarchy_preserves_sum_and_small_splitting(hierarchy, total):
    masses = neutrino_mass_split(total, hierarchy)
    assert sum(masses) == pytest.approx(total, rel=1e-10)
    assert masses[1] ** 2 - masses[0] ** 2 == pytest.approx(CONSTANTS.DELTAM12_sq, rel=1e-8)
    assert all(m >= 0 for m in masses)


def test_normal_below_limit_raises():
    with pytest.raises(UnphysicalNeutrinoMassError):
        neutrino_mass_split(0.01, NeutrinoHierarchy.NORMAL)


def test_inverted_below_limit_raises():
    with pytest.raises(UnphysicalNeutrinoMassError):
        neutrino_mass_split(0.05, NeutrinoHierarchy.INVERTED)


def test_zero_sum_gives_zero_masses():
    assert neutrino_mass_split(0.0, NeutrinoHierarchy.NORMAL) == [0.0, 0.0, 0.0]


def test_split_hierarchy_rejected():
    with pytest.raises(ParameterError):
        neutrino_mass_split(0.06, NeutrinoHierarchy.SPLIT)


def test_relativistic_density_matches_massless_fermion():
    expected = (
        7.0 / 8.0 * 4.0 * CONSTANTS.STBOLTZ / CONSTANTS.CLIGHT ** 3 * T_NU ** 4
        * CONSTANTS.MPC_TO_METER ** 3 / CONSTANTS.SOLAR_MASS
    )
    assert density_wdm(1e-7, T_NU) == pytest.approx(expected, rel=1e-4)


def test_relativistic_equation_of_state():
    assert eos_wdm(1e-7, T_NU) == pytest.approx(1.0 / 3.0, rel=1e-4)


def test_nonrelativistic_equation_of_state_is_small():
    w = eos_wdm(1.0, T_NU)
    assert 0.0 < w < 1e-5


def test_nonrelativistic_density_scales_as_cube_of_temperature():
    ratio = density_wdm(1.0, 2.0 * T_NU) / density_wdm(1.0, T_NU)
    assert ratio == pytest.approx(8.0, rel=1e-3)


def test_pressure_below_density_over_three():
    for mass in (1e-3, 0.06, 0.5):
        assert pressure_wdm(mass, T_NU) < density_wdm(mass, T_NU) / 3.0


def test_zero_mass_is_out_of_range():
    with pytest.raises(SplineError):
        density_wdm(0.0, T_NU)


def test_nonpositive_temperature_rejected():
    with pytest.raises(SplineError):
        pressure_wdm(0.1, 0.0)


def test_density_grows_with_mass():
    assert density_wdm(0.1, T_NU) > density_wdm(0.01, T_NU) > 0
    assert math.isfinite(density_wdm(0.1, T_NU))