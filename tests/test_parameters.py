import math

import pytest

from clucu.errors import ParameterError
from clucu.parameters import (
    BiasMethod,
    Configuration,
    HaloDefinition,
    IntegrationSettings,
    MassFunctionMethod,
    MassObservableMethod,
    NeutrinoHierarchy,
    PowerSpectrumMethod,
    SplineSettings,
    preset_configuration,
    preset_parameters,
    preset_survey,
)


def test_default_configuration_matches_source():
    cfg = preset_configuration("default")
    assert cfg == Configuration()
    assert cfg.mass_function_method is MassFunctionMethod.TINKER2008
    assert cfg.bias_function_method is BiasMethod.SHETH2001
    assert cfg.halo_define_method is HaloDefinition.DELTA_200M


def test_oguri_configuration():
    cfg = preset_configuration("oguri")
    assert cfg.matter_power_spectrum_method is PowerSpectrumMethod.EISENSTEIN_HU
    assert cfg.mass_observable_method is MassObservableMethod.OGURI2011
    assert cfg.halo_define_method is HaloDefinition.DELTA_VIR


def test_default_parameters():
    p = preset_parameters("default")
    assert p.omega_l == 0.6847
    assert p.omh2 == 0.1430
    assert p.n_nu_mass == 1
    assert p.neutrino_hierarchy is NeutrinoHierarchy.SINGLE
    assert math.isnan(p.h) and math.isnan(p.h0)


def test_wmap5_parameters():
    p = preset_parameters("wmap5")
    assert p.h == 0.7
    assert p.delta_zeta ** 2 == pytest.approx(2.21e-9)
    assert math.isnan(p.sigma8)


def test_presets_are_independent_copies():
    a = preset_parameters("planck2018")
    a.m_nu[0] = 0.5
    a.och2 = 1.0
    b = preset_parameters("planck2018")
    assert b.m_nu == [0.0, 0.0, 0.0]
    assert b.och2 == 0.120


def test_preset_names_case_insensitive():
    assert preset_parameters("WMAP9") == preset_parameters("wmap9")


@pytest.mark.parametrize("func", [preset_configuration, preset_parameters, preset_survey])
def test_unknown_preset_raises(func):
    with pytest.raises(ParameterError):
        func("no-such-preset")


def test_csst_survey():
    s = preset_survey("csst")
    assert s.mass_ob_min == 15
    assert s.mass_ob_max == 300
    assert s.dln_mass_ob == 0.3
    assert math.isnan(s.dlog10_mass_ob)


def test_oguri_survey_uses_h_masses():
    s = preset_survey("oguri")
    assert math.isnan(s.mass_ob_min)
    assert s.mass_ob_min_h == 1.0e14
    assert s.a_vir == 7.85


def test_xray_surveys_share_relation_but_not_flux():
    deep = preset_survey("xray_deep")
    wide = preset_survey("xray_wide")
    assert deep.log10_asz == wide.log10_asz
    assert deep.survey_area < wide.survey_area
    assert deep.flux < wide.flux


def test_settings_defaults():
    s = SplineSettings()
    assert s.log10m_spline_nm == 100
    assert s.z_spline_type == "cspline"
    g = IntegrationSettings()
    assert g.integration_sigmar_epsrel == 1e-7
    assert g.hm_mmax == 1e18