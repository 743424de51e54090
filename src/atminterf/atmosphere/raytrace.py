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

"""Atmospheric model based on the results of an external ray tracer.

The ray tracer is any callable ``tracer(elevation, height, pos, date)`` that
returns a :class:`RayTrace` for the requested series of elevation angles.
"""

from dataclasses import dataclass

import numpy as np

from ..conversion import scalar_or_array
from ..delay import InterfOptions, get_atm_interf_gen
from ..gradient import gradient_all


@dataclass(frozen=True)
class RayTrace:
    """Ray-traced propagation quantities along a series of elevation angles.

    Parameters
    ----------
    n : array
        Layer average index of refraction (unitless)
    elev_geom : array
        Geometric (vacuum) elevation angle, in degrees
    elev_appar : array
        Apparent (refracted) elevation angle, in degrees
    """

    n: np.ndarray
    elev_geom: np.ndarray
    elev_appar: np.ndarray


def get_atm_rtr(
    elevation,
    height,
    tracer,
    pos=None,
    date=None,
    n_zenith_only=False,
    use_input_elev=False,
    numerical_noend=True,
):
    """Refractivity and bending from ray-traced results.

    Parameters
    ----------
    elevation : array
        Satellite elevation angles, in degrees
    height : float or array
        Antenna height above reflector, in metres
    tracer : callable
        Ray tracer, ``tracer(elevation, height, pos, date) -> RayTrace``
    pos : sequence, optional
        Geodetic (latitude, longitude, altitude) of antenna, in degrees,
        degrees and metres (passed through to the tracer)
    date : optional
        Date (passed through to the tracer)
    n_zenith_only : bool, optional
        True to use the index of refraction at zenith for all elevations
    use_input_elev : bool, optional
        True to differentiate the bending with respect to the input elevation
        angles instead of the traced geometric ones
    numerical_noend : bool, optional
        True to discard the end points of the numerical bending rate

    Returns
    -------
    N : float or array
        Layer average refractivity (n - 1, unitless)
    de : array
        Elevation bending, in degrees
    der : array
        Rate of change of bending with elevation, in degrees per degree

    Raises
    ------
    ValueError
        If zenith-only refractivity is requested but the series does not
        contain exactly one zenith elevation
    """
    if pos is None:
        pos = (0.0, 0.0, 0.0)
    elevation = np.asarray(elevation, dtype=float)
    trace = tracer(elevation, height, pos, date)
    N = np.asarray(trace.n, dtype=float) - 1
    if n_zenith_only:
        zenith = elevation == 90
        if np.count_nonzero(zenith) != 1:
            raise ValueError(
                "Zenith-only refractivity needs exactly one elevation of 90 "
                f"degrees, found {np.count_nonzero(zenith)}"
            )
        N = N[zenith].item()
    elev_geom = np.asarray(trace.elev_geom, dtype=float)
    de = np.asarray(trace.elev_appar, dtype=float) - elev_geom
    coords = elevation if use_input_elev else elev_geom
    der = gradient_all(de, coords, noend=numerical_noend)
    return scalar_or_array(N), scalar_or_array(de), der


def get_atm_interf_rtr(
    elevation,
    height,
    tracer,
    pos=None,
    date=None,
    n_zenith_only=False,
    use_input_elev=False,
    opt=None,
    heights=True,
):
    """Closed-form interferometric atmospheric delay, ray-traced atmosphere.

    See :func:`get_atm_rtr` for the model parameters and
    :func:`~atminterf.delay.get_atm_interf_gen` for `opt` and `heights`
    (the `numerical_noend` option also applies to the bending rate).

    Returns
    -------
    delay : :class:`~atminterf.delay.AtmosphericDelay`
        Delays, altimetry corrections and atmospheric model values
    """
    opt = InterfOptions.merge(opt)
    N, de, der = get_atm_rtr(
        elevation,
        height,
        tracer,
        pos,
        date,
        n_zenith_only,
        use_input_elev,
        opt.numerical_noend,
    )
    return get_atm_interf_gen(elevation, height, N, de, der, opt, heights)
