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

"""Atmospheric model based on in-situ meteorological measurements.

The layer refractivity follows from the pressure, temperature and humidity
measured at the antenna, and the elevation bending from Bennett's formula.
"""

import numpy as np

from ..bending import BendingOptions, get_bending_bennet
from ..conversion import scalar_or_array
from ..delay import get_atm_interf_gen
from ..meteo import METEO, calculate_refractivity, logavg, reduce_pressure


def get_atm_met(
    elevation,
    height,
    pressure=None,
    temperature=None,
    specific_humidity=None,
    lapse_rate=None,
    thin=False,
    ref=None,
    bending_opt=None,
):
    """Refractivity and bending from in-situ meteorological data.

    Parameters
    ----------
    elevation : float or array
        Satellite elevation angle, in degrees
    height : float or array
        Antenna height above reflector, in metres
    pressure : float or array, optional
        Pressure at the antenna, in Pa (defaults to standard pressure)
    temperature : float or array, optional
        Temperature at the antenna, in K (defaults to standard temperature)
    specific_humidity : float or array, optional
        Specific humidity at the antenna, in kg/kg (defaults to dry air)
    lapse_rate : float or array, optional
        Temperature lapse rate, in K/m (defaults to standard lapse rate)
    thin : bool, optional
        True to assume a thin layer, i.e. use the antenna conditions for the
        whole layer instead of reducing them to the reflecting surface
    ref : str, optional
        Refractivity coefficients reference (see
        :func:`~atminterf.meteo.calculate_refractivity`)
    bending_opt : :class:`~atminterf.bending.BendingOptions` or dict, optional
        Options for the Bennett bending model

    Returns
    -------
    N : float or array
        Layer average refractivity (n - 1, unitless)
    de : float or array
        Elevation bending, in degrees
    der : float or array or None
        Rate of change of bending with respect to elevation angle, in degrees
        per degree, or None if the bending formulation has no analytic rate
        (the Bowditch form), in which case it has to be found numerically
    """
    if pressure is None:
        pressure = METEO.std_pressure
    if temperature is None:
        temperature = METEO.std_temperature
    if specific_humidity is None:
        specific_humidity = 0.0

    antenna = 1e-6 * calculate_refractivity(
        pressure, temperature, specific_humidity, ref
    ).total
    if thin:
        N = antenna
    else:
        # The reflecting surface is below the antenna
        surface_pressure, surface_temperature = reduce_pressure(
            pressure, temperature, lapse_rate, -np.asarray(height, dtype=float)
        )
        surface = 1e-6 * calculate_refractivity(
            surface_pressure, surface_temperature, specific_humidity, ref
        ).total
        N = logavg(surface, antenna)

    bending_opt = BendingOptions.merge(bending_opt)
    de, der = get_bending_bennet(elevation, pressure, temperature, bending_opt)
    if not bending_opt.analytic_rate:
        # Leave the rate to numerical differentiation of the bending
        return scalar_or_array(N), de, None
    # Bennett's formula is differentiated with respect to the apparent
    # elevation e + de; the chain rule gives the rate w.r.t. vacuum elevation.
    with np.errstate(divide="ignore", invalid="ignore"):
        der = np.asarray(der) / (1.0 - np.asarray(der))
    return scalar_or_array(N), de, scalar_or_array(der)


def get_atm_interf_met(
    elevation,
    height,
    pressure=None,
    temperature=None,
    specific_humidity=None,
    lapse_rate=None,
    thin=False,
    ref=None,
    bending_opt=None,
    opt=None,
    heights=True,
):
    """Closed-form interferometric atmospheric delay, in-situ meteorological data.

    See :func:`get_atm_met` for the model parameters and
    :func:`~atminterf.delay.get_atm_interf_gen` for `opt` and `heights`.

    Returns
    -------
    delay : :class:`~atminterf.delay.AtmosphericDelay`
        Delays, altimetry corrections and atmospheric model values
    """
    N, de, der = get_atm_met(
        elevation,
        height,
        pressure,
        temperature,
        specific_humidity,
        lapse_rate,
        thin,
        ref,
        bending_opt,
    )
    return get_atm_interf_gen(elevation, height, N, de, der, opt, heights)
