################################################################################
# Copyright (c) 2026, National Research Foundation (SARAO)
#
# Licensed under the BSD 3-Clause License (the "License"); you may not use
# this file except in compliance with the License. You may obtain a copy
# of the License at
#
#   https://opensource.org/licenses/BSD-3-Clause
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

"""Tests for the interferometric module."""

from dataclasses import FrozenInstanceError

import astropy.units as u
import numpy as np
import pytest

import atminterf
from atminterf.atmosphere.insitu import get_atm_interf_met
from atminterf.atmosphere.polynomial import get_atm_interf_pol
from atminterf.delay import AtmosphericDelay, InterfOptions


def test_interferometric_delay_basic():
    """Test basic interferometric delay model properties."""
    delay_model = atminterf.InterferometricDelay()
    print(repr(delay_model))
    assert delay_model.model_id == "polynomial"
    with pytest.raises(ValueError, match="available ones are"):
        atminterf.InterferometricDelay("unknown")
    delay_model2 = atminterf.InterferometricDelay("polynomial", {})
    assert delay_model == delay_model2, "Delay models should be equal"
    try:
        assert hash(delay_model) == hash(delay_model2), "Hashes should be equal"
    except TypeError:
        pytest.fail("InterferometricDelay object not hashable")
    with pytest.raises(FrozenInstanceError):
        delay_model.model_id = "it's frozen, so the model_id can't be changed"
    delay_model = atminterf.InterferometricDelay(options={"H_approximate": True})
    assert delay_model.options == InterfOptions(H_approximate=True)


def test_units():
    delay_model = atminterf.InterferometricDelay()
    elevation = np.arange(5.0, 60.0) * u.deg
    delay = delay_model(elevation, 10 * u.m)
    assert isinstance(delay, AtmosphericDelay)
    expected = get_atm_interf_pol(elevation.value, 10.0)
    for name in ("dt", "da", "dg", "Ht", "Ha", "Hg"):
        actual = getattr(delay, name)
        assert actual.unit == u.m
        np.testing.assert_array_equal(actual.value, getattr(expected, name))
    assert delay.de.unit == u.deg
    assert delay.N.unit == u.dimensionless_unscaled
    # Alternative units give the same answer
    other = delay_model(elevation.to(u.rad), 1000 * u.cm)
    np.testing.assert_allclose(other.dt, delay.dt, rtol=1e-12)
    with pytest.raises(TypeError):
        delay_model(30.0, 10 * u.m)
    with pytest.raises(u.UnitsError):
        delay_model(30 * u.m, 10 * u.m)


def test_meteo_model_with_quantities():
    delay_model = atminterf.InterferometricDelay("meteo")
    elevation = np.arange(5.0, 60.0) * u.deg
    delay = delay_model(
        elevation,
        2 * u.m,
        pressure=950 * u.hPa,
        temperature=20 * u.deg_C,
        specific_humidity=0.01,
        lapse_rate=-5 * u.K / u.km,
    )
    expected = get_atm_interf_met(elevation.value, 2.0, 95000.0, 293.15, 0.01, -5e-3)
    np.testing.assert_allclose(delay.dt.to_value(u.m), expected.dt, rtol=1e-12)
    np.testing.assert_allclose(delay.Ht.to_value(u.m), expected.Ht, rtol=1e-9)


def test_delays_only():
    delay_model = atminterf.InterferometricDelay("meteo")
    delay = delay_model(30 * u.deg, 10 * u.m, heights=False)
    assert delay.Ht is None and delay.Ha is None and delay.Hg is None
    assert delay.dt.unit == u.m
    assert delay.dt.isscalar


def test_public_api():
    assert "InterferometricDelay" in atminterf.__all__
    assert "get_atm_interf_gen" in atminterf.__all__
    assert "logger" in dir(atminterf)
    assert not any(name.startswith("_") for name in atminterf.__all__[:-1])
