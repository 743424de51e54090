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

"""Tests for the conversion module."""

import numpy as np
import pytest

from atminterf.conversion import (
    celsius_to_fahrenheit,
    celsius_to_kelvin,
    cosd,
    cotd,
    cscd,
    hpa_to_pascal,
    kelvin_to_celsius,
    mbar_to_inches_mercury,
    pascal_to_mbar,
    scalar_or_array,
    sind,
    tand,
)


def test_scalar_or_array():
    """Scalars come back as Python floats, arrays stay arrays."""
    assert isinstance(scalar_or_array(np.float64(1.5)), float)
    assert isinstance(scalar_or_array(np.array(1.5)), float)
    assert scalar_or_array(np.arange(3)).shape == (3,)


@pytest.mark.parametrize("angle", [0.0, 180.0, -180.0, 360.0, 720.0])
def test_sind_exact_zeros(angle):
    assert sind(angle) == 0.0


@pytest.mark.parametrize("angle", [90.0, -90.0, 270.0, 450.0])
def test_cosd_exact_zeros(angle):
    assert cosd(angle) == 0.0


def test_trig_values():
    """Degree-based functions agree with their radian counterparts."""
    angle = np.linspace(-85.0, 85.0, 35)
    np.testing.assert_allclose(sind(angle), np.sin(np.radians(angle)), atol=1e-15)
    np.testing.assert_allclose(cosd(angle), np.cos(np.radians(angle)), atol=1e-15)
    np.testing.assert_allclose(tand(angle), np.tan(np.radians(angle)), rtol=1e-12)
    assert tand(45.0) == pytest.approx(1.0)
    assert cotd(45.0) == pytest.approx(1.0)
    assert cscd(30.0) == pytest.approx(2.0)
    assert sind(90.0) == 1.0


def test_trig_singularities():
    """Poles produce infinities without raising or warning."""
    with np.errstate(all="raise"):
        assert np.isinf(tand(90.0))
        assert np.isinf(cotd(0.0))
        assert np.isinf(cscd(180.0))
        assert cotd(90.0) == 0.0
        assert np.isnan(sind(np.inf))


def test_trig_shapes():
    angle = np.zeros((2, 3))
    assert sind(angle).shape == (2, 3)
    assert cosd(angle).shape == (2, 3)
    assert isinstance(sind(30.0), float)


def test_unit_conversions():
    assert pascal_to_mbar(101325.0) == pytest.approx(1013.25)
    assert hpa_to_pascal(1013.25) == pytest.approx(101325.0)
    assert mbar_to_inches_mercury(1013.25) == pytest.approx(29.92, abs=0.01)
    assert kelvin_to_celsius(273.15) == pytest.approx(0.0)
    assert celsius_to_kelvin(-273.15) == pytest.approx(0.0)
    assert celsius_to_fahrenheit(100.0) == pytest.approx(212.0)
    assert celsius_to_fahrenheit(-40.0) == pytest.approx(-40.0)
    np.testing.assert_allclose(kelvin_to_celsius([273.15, 283.15]), [0.0, 10.0])
