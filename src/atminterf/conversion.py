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

"""Degree-based trigonometry and meteorological unit conversions."""

import numpy as np


def scalar_or_array(x):
    """Turn 0-D arrays into Python floats and leave other arrays alone."""
    x = np.asarray(x)
    return x if x.ndim else x.item()


# -------------------------------------------------------------------------------------
# --- Trigonometric functions of angles in degrees
# -------------------------------------------------------------------------------------


def sind(angle_deg):
    """Sine of angle in degrees, exactly zero at integer multiples of 180 degrees.

    Parameters
    ----------
    angle_deg : float or array
        Angle, in degrees

    Returns
    -------
    sine : float or array
        Sine of angle (a float if input is a scalar)
    """
    angle_deg = np.asarray(angle_deg, dtype=float)
    with np.errstate(invalid="ignore"):
        exact_zero = np.mod(angle_deg, 180.0) == 0.0
        result = np.where(exact_zero, 0.0, np.sin(np.radians(angle_deg)))
    return scalar_or_array(result)


def cosd(angle_deg):
    """Cosine of angle in degrees, exactly zero at odd multiples of 90 degrees.

    Parameters
    ----------
    angle_deg : float or array
        Angle, in degrees

    Returns
    -------
    cosine : float or array
        Cosine of angle (a float if input is a scalar)
    """
    angle_deg = np.asarray(angle_deg, dtype=float)
    with np.errstate(invalid="ignore"):
        exact_zero = np.mod(angle_deg - 90.0, 180.0) == 0.0
        result = np.where(exact_zero, 0.0, np.cos(np.radians(angle_deg)))
    return scalar_or_array(result)


def tand(angle_deg):
    """Tangent of angle in degrees (infinite at odd multiples of 90 degrees)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.divide(sind(angle_deg), cosd(angle_deg))


def cotd(angle_deg):
    """Cotangent of angle in degrees (infinite at multiples of 180 degrees)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.divide(cosd(angle_deg), sind(angle_deg))


def cscd(angle_deg):
    """Cosecant of angle in degrees (infinite at multiples of 180 degrees)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.divide(1.0, sind(angle_deg))


# -------------------------------------------------------------------------------------
# --- Pressure and temperature unit conversions
# -------------------------------------------------------------------------------------


def pascal_to_mbar(pressure_Pa):
    """Convert pressure from pascal to millibar (equivalent to hectopascal)."""
    return np.divide(pressure_Pa, 100.0)


def hpa_to_pascal(pressure_hPa):
    """Convert pressure from hectopascal (or millibar) to pascal."""
    return np.multiply(pressure_hPa, 100.0)


def mbar_to_inches_mercury(pressure_mbar):
    """Convert pressure from millibar to inches of mercury."""
    return np.multiply(pressure_mbar, 0.029530)


def kelvin_to_celsius(temperature_K):
    """Convert temperature from kelvin to degrees Celsius."""
    return np.subtract(temperature_K, 273.15)


def celsius_to_kelvin(temperature_C):
    """Convert temperature from degrees Celsius to kelvin."""
    return np.add(temperature_C, 273.15)


def celsius_to_fahrenheit(temperature_C):
    """Convert temperature from degrees Celsius to degrees Fahrenheit."""
    return np.add(32.0, np.multiply(temperature_C, 9.0 / 5.0))
