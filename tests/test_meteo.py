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

"""Tests for the meteo module."""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from atminterf.meteo import (
    METEO,
    REFRACTIVITY_COEFFICIENTS,
    calculate_density_mixed_gas,
    calculate_density_virtual,
    calculate_refractivity,
    get_refractivity_coefficients,
    logavg,
    partial_pressure_to_specific_humidity,
    reduce_pressure,
    specific_humidity_to_partial_pressure,
)


def test_constants():
    assert METEO.g_c == pytest.approx(9.80665)
    assert METEO.R_dry == pytest.approx(287.06, abs=0.01)
    assert METEO.R_wet == pytest.approx(461.5, abs=0.1)
    with pytest.raises(FrozenInstanceError):
        METEO.std_pressure = 0.0


def test_refractivity_standard_atmosphere():
    """Dry air at sea level has the textbook refractivity."""
    refr = calculate_refractivity(101325.0, 288.15)
    assert refr.total == pytest.approx(272.87, abs=0.01)
    assert refr.wet == 0.0
    assert refr.nonhydro == 0.0
    assert refr.hydro == pytest.approx(refr.total)


@pytest.mark.parametrize("ref", list(REFRACTIVITY_COEFFICIENTS) + [None])
def test_refractivity_decompositions(ref):
    """Both decompositions of moist-air refractivity add up to the total."""
    pressure = np.array([70000.0, 90000.0, 101325.0])
    temperature = np.array([250.0, 280.0, 300.0])
    specific_humidity = np.array([0.001, 0.01, 0.02])
    refr = calculate_refractivity(pressure, temperature, specific_humidity, ref)
    np.testing.assert_allclose(refr.dry + refr.wet, refr.total, rtol=1e-12)
    np.testing.assert_allclose(refr.hydro + refr.nonhydro, refr.total, rtol=1e-12)
    assert np.all(refr.wet > 0)
    # Wetter air is more refractive
    assert np.all(np.diff(refr.wet) > 0)


def test_refractivity_coefficients():
    assert get_refractivity_coefficients() == pytest.approx((0.776, 0.648, 3776.0))
    assert get_refractivity_coefficients("Rueguer Best Average") == (
        get_refractivity_coefficients("rueguer2002")
    )
    with pytest.raises(ValueError, match="available ones are"):
        get_refractivity_coefficients("unknown")


def test_humidity_conversion():
    pressure = 100000.0
    specific_humidity = np.array([0.0, 0.005, 0.02])
    partial_pressure = specific_humidity_to_partial_pressure(
        pressure, specific_humidity
    )
    assert partial_pressure[0] == 0.0
    assert partial_pressure[1] == pytest.approx(801.4, abs=0.5)
    np.testing.assert_allclose(
        partial_pressure_to_specific_humidity(pressure, partial_pressure),
        specific_humidity,
        atol=1e-15,
    )


def test_density():
    """Both formulations of moist-air density agree."""
    temperature = np.array([260.0, 290.0, 310.0])
    pressure = np.array([80000.0, 100000.0, 101325.0])
    partial_pressure = np.array([100.0, 1500.0, 4000.0])
    mixed = calculate_density_mixed_gas(temperature, pressure, partial_pressure)
    virtual = calculate_density_virtual(temperature, pressure, partial_pressure)
    np.testing.assert_allclose(mixed, virtual, rtol=1e-12)
    assert calculate_density_mixed_gas(288.15, 101325.0, 0.0) == pytest.approx(
        1.225, abs=1e-3
    )
    # Moist air is lighter than dry air
    assert np.all(mixed < calculate_density_mixed_gas(temperature, pressure, 0.0))


# U.S. Standard Atmosphere 1976: geopotential altitude [m], pressure [Pa], temp [K]
_US_STANDARD_ATMOSPHERE = [
    (20000.0, 5474.89, 216.65),
    (25000.0, 2511.02, 221.65),
    (30000.0, 1171.87, 226.65),
    (32000.0, 868.02, 228.65),
    (35000.0, 558.92, 237.05),
    (40000.0, 277.52, 251.05),
    (45000.0, 143.13, 265.05),
    (47000.0, 110.91, 270.65),
]
_LAYERS = list(zip(_US_STANDARD_ATMOSPHERE[:-1], _US_STANDARD_ATMOSPHERE[1:]))


@pytest.mark.parametrize("lower,upper", _LAYERS)
def test_reduce_pressure_standard_atmosphere(lower, upper):
    """Reduction between layer boundaries of the standard atmosphere."""
    h0, P0, T0 = lower
    h1, P1, T1 = upper
    lapse_rate = (T1 - T0) / (h1 - h0)
    P, T = reduce_pressure(P0, T0, lapse_rate, h1 - h0)
    assert P == pytest.approx(P1, rel=1e-3)
    assert T == pytest.approx(T1, rel=1e-6)


def test_reduce_pressure_properties():
    P, T = reduce_pressure(101325.0, 288.15)
    assert P == 101325.0 and T == 288.15
    # Going down increases pressure and (with standard lapse rate) temperature
    P, T = reduce_pressure(101325.0, 288.15, height_diff=-100.0)
    assert P > 101325.0
    assert T == pytest.approx(288.8)
    # Isothermal layer matches the limit of a tiny lapse rate
    P_iso, T_iso = reduce_pressure(101325.0, 288.15, 0.0, 1000.0)
    P_lim, _ = reduce_pressure(101325.0, 288.15, -1e-9, 1000.0)
    assert T_iso == 288.15
    assert P_iso == pytest.approx(P_lim, rel=1e-6)
    assert P_iso == pytest.approx(101325.0 * np.exp(-1000.0 / 8434.5), rel=1e-3)
    # Inputs are broadcast against each other
    P, T = reduce_pressure(
        [100000.0, 90000.0], 280.0, [0.0, -0.0065], [[10.0], [20.0]]
    )
    assert P.shape == T.shape == (2, 2)


def test_logavg():
    assert logavg(1.0, 100.0) == pytest.approx(10.0)
    assert logavg(2.0, 2.0) == pytest.approx(2.0)
    a = np.array([1e-4, 2e-4])
    np.testing.assert_allclose(logavg(a, a), a)
    assert logavg(1.0, 4.0) < (1.0 + 4.0) / 2
