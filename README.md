# clucu

A library for galaxy-cluster cosmology. It completes cosmological
parameter sets and builds survey binning grids, computes the density and
pressure of massive relic neutrinos, handles NFW halo profiles and
mass-definition conversions, and provides halo concentration, halo bias
and halo mass function fits together with the covariance matrices of
cluster counts and angular power spectra.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `clucu.errors` | `ClucuError` (carries `message` and a numeric `code`) and its subclasses `SplineError`, `RootFindingError`, `UnphysicalNeutrinoMassError`, `NotComputedError`, `ParameterError` |
| `clucu.parameters` | `Constants`, the enums `NeutrinoHierarchy`, `PowerSpectrumMethod`, `MassFunctionMethod`, `BiasMethod`, `ConcentrationMethod`, `MassObservableMethod`, `HaloDefinition`; the dataclasses `Configuration`, `Parameters`, `Survey`, `SplineSettings`, `IntegrationSettings`; and `preset_configuration`, `preset_parameters`, `preset_survey` |
| `clucu.cosmology` | `Cosmology`, `create_cosmology`, `SurveyGrids`, `build_survey_grids`, `derive_parameters_known_h`, `derive_parameters_known_omega_l`, and the spacings `linear_spacing`, `log10_spacing`, `linlog_spacing` |
| `clucu.neutrino` | `density_wdm`, `pressure_wdm`, `eos_wdm`, `neutrino_mass_split` |
| `clucu.halo` | `dc_nakamura_suto`, `dv_nakamura_suto`, `nfw_mc`, `nfw_fx`, `convert_concentration`, `rho_delta`, `mass_old_to_new`, `nfw_scale`, `nfw_uk` |
| `clucu.concentration` | `duffy2008`, `bhattacharya2013`, `diemer2015`, and `concentration`, which picks one from the configuration |
| `clucu.halo_bias` | `bias_press1974`, `bias_sheth1999`, `bias_sheth2001`, `bias_tinker2010`, `bias_bhattacharya2011`, `halo_bias_sigma`, `gisdb_factor`, `ng_bias_factor` |
| `clucu.massfunction` | `mf_press1974`, `mf_sheth1999`, `mf_jenkins2001`, `mf_tinker2008`, `mf_bhattacharya2011`, `mf_bocquet2016`, `sigma_s3`, `SigmaS3Table`, `ng_hmf_factor`, `fitting_function`, `halo_dn_dlnm`, `halo_dndlnm_bias`, `halo_dndlnm_bias_k` |
| `clucu.covariance` | `survey_window`, `sampling_variance`, `cov_nn`, `cov_hhhh`, `cov_hkhh`, `cov_hkhk` |

## Example

```python
from clucu.cosmology import create_cosmology
from clucu.parameters import (
    NeutrinoHierarchy,
    preset_configuration,
    preset_parameters,
    preset_survey,
)
from clucu.neutrino import neutrino_mass_split
from clucu.halo_bias import bias_sheth2001
from clucu.massfunction import mf_tinker2008

cosmo = create_cosmology(
    preset_configuration("default"),
    preset_parameters("default"),
    preset_survey("csst"),
).initialize()
print(cosmo.params.h, cosmo.params.omega_m, cosmo.hubble0())
print(cosmo.grids.n_zob, cosmo.grids.n_mob)

masses = neutrino_mass_split(0.06, NeutrinoHierarchy.NORMAL)  # three masses in eV

sigma = 0.8
print(bias_sheth2001(sigma), mf_tinker2008(sigma, 0.5))
```

`create_cosmology` only stores copies of its inputs; `Cosmology.initialize`
derives the missing parameters (from a known `h`/`H0`, or from a known
`omega_l` and physical densities) and builds the survey grids in
`cosmo.grids`.

Unknown preset names raise `ParameterError`; an unphysical neutrino mass
sum for a hierarchy raises `UnphysicalNeutrinoMassError`; a failed NFW
concentration root search raises `RootFindingError`; values outside an
interpolation table raise `SplineError`; and a non-zero `f_nl` without a
`SigmaS3Table` raises `NotComputedError`.

## What the package does not do

The package has no linear power spectrum, transfer function, growth
factor, `sigma(M)` or distance calculations of its own. Functions that
need them take them as arguments: for example `halo_dn_dlnm` takes
`sigma` and `dlnsigma_dlnm`, `ng_bias_factor` takes the growth factor and
transfer function, and `sampling_variance` takes the power spectrum,
the redshift weights and the distance-to-redshift mapping as callables.
It writes no output files and has no command-line interface.