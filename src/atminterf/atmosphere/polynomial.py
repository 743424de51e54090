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

"""Polynomial atmospheric model.

Refractivity is a simple function of altitude and elevation bending a simple
function of elevation angle, both specified by a handful of coefficients.
"""

import numpy as np

from ..conversion import cotd, cscd, scalar_or_array
from ..delay import get_atm_interf_gen
from ..meteo import logavg

# Credit: T. Nikolaidou and F. Geremia-Nievinski (unpublished)
# Mean refractivity N0 (N = n - 1) at the ellipsoid and its lapse rate dN/dh [1/m]
DEFAULT_REFRACTIVITY_COEFS = (0.00025617, -2.44e-08)
# Coefficients (a, b, c) in de = c * (1 - cot(e + a / (b + e)) / cot(90 + a / (b + 90)))
DEFAULT_BENDING_COEFS = (5.56947472121108, 1.88401692297586, 1.55363613681730e-05)


def polynomial_refractivity(N_coeff, altitude):
    """Refractivity at given altitude.

    Parameters
    ----------
    N_coeff : sequence of 2 or 3 floats
        Either (N0, dN/dh) for a linear profile N0 + h dN/dh, or
        (N0, dN/dh, dlnN/dh) for a linear profile that additionally decays
        exponentially, (N0 + h dN/dh) exp(h dlnN/dh)
    altitude : float or array
        Ellipsoidal height, in metres

    Returns
    -------
    N : float or array
        Refractivity (n - 1, unitless)

    Raises
    ------
    ValueError
        If the number of coefficients is not 2 or 3

    Notes
    -----
    The exponential factor scales the whole linear profile, so that N equals
    N0 at zero altitude for both forms. Adding exp(h dlnN/dh) to N0 instead
    would give N close to 1 at the ground and drop the dN/dh term.
    """
    N_coeff = tuple(N_coeff)
    altitude = np.asarray(altitude, dtype=float)
    if len(N_coeff) == 2:
        N0, dN_dh = N_coeff
        return N0 + altitude * dN_dh
    if len(N_coeff) == 3:
        N0, dN_dh, dlogN_dh = N_coeff
        return (N0 + altitude * dN_dh) * np.exp(altitude * dlogN_dh)
    raise ValueError(f"Refractivity model needs 2 or 3 coefficients, not {N_coeff}")


def layer_refractivity(N_coeff, altitude, height):
    """Average refractivity of the layer between antenna and reflecting surface.

    Parameters
    ----------
    N_coeff : sequence of 2 or 3 floats
        Refractivity coefficients (see :func:`polynomial_refractivity`)
    altitude : float or array
        Ellipsoidal height of the antenna, in metres
    height : float or array
        Antenna height above reflector, in metres

    Returns
    -------
    N : float or array
        Logarithmic mean of refractivity at antenna and surface
    """
    antenna = polynomial_refractivity(N_coeff, altitude)
    surface = polynomial_refractivity(N_coeff, np.subtract(altitude, height))
    return logavg(surface, antenna)


def polynomial_bending(de_coeff, elevation):
    """Elevation bending and its rate of change from the cotangent-ratio model.

    Parameters
    ----------
    de_coeff : sequence of 3 floats
        Bending coefficients (a, b, c)
    elevation : float or array
        Satellite elevation angle, in degrees

    Returns
    -------
    de : float or array
        Elevation bending, in degrees
    der : float or array
        Rate of change of bending with respect to elevation angle (analytic),
        in degrees per degree

    Raises
    ------
    ValueError
        If the number of coefficients is not 3
    """
    try:
        a, b, c = de_coeff
    except ValueError as err:
        raise ValueError(
            f"Bending model needs 3 coefficients (a, b, c), not {tuple(de_coeff)}"
        ) from err
    elevation = np.asarray(elevation, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        num_arg = elevation + a / (b + elevation)
        den = cotd(90.0 + a / (b + 90.0))
        de = c * (1.0 - cotd(num_arg) / den)
        # The denominator does not depend on elevation
        dnum_arg_de = 1.0 - a / (b + elevation) ** 2
        dnum_de = -(np.pi / 180.0) * cscd(num_arg) ** 2 * dnum_arg_de
        der = -c * dnum_de / den
    return scalar_or_array(de), scalar_or_array(der)


def get_atm_pol(elevation, height, N_coeff=None, de_coeff=None, altitude=None):
    """Refractivity and bending of the polynomial atmospheric model.

    Parameters
    ----------
    elevation : float or array
        Satellite elevation angle, in degrees
    height : float or array
        Antenna height above reflector, in metres
    N_coeff : sequence of floats, optional
        Refractivity coefficients (defaults to :data:`DEFAULT_REFRACTIVITY_COEFS`)
    de_coeff : sequence of floats, optional
        Bending coefficients (defaults to :data:`DEFAULT_BENDING_COEFS`)
    altitude : float or array, optional
        Ellipsoidal height of the antenna, in metres (defaults to 0)

    Returns
    -------
    N : float or array
        Layer average refractivity (n - 1, unitless)
    de : float or array
        Elevation bending, in degrees
    der : float or array
        Rate of change of bending with elevation, in degrees per degree
    """
    if N_coeff is None:
        N_coeff = DEFAULT_REFRACTIVITY_COEFS
    if de_coeff is None:
        de_coeff = DEFAULT_BENDING_COEFS
    if altitude is None:
        altitude = 0.0
    N = layer_refractivity(N_coeff, altitude, height)
    de, der = polynomial_bending(de_coeff, elevation)
    return scalar_or_array(N), de, der


def get_atm_interf_pol(
    elevation,
    height,
    N_coeff=None,
    de_coeff=None,
    altitude=None,
    opt=None,
    heights=True,
):
    """Closed-form interferometric atmospheric delay, polynomial model.

    See :func:`get_atm_pol` for the model parameters and
    :func:`~atminterf.delay.get_atm_interf_gen` for `opt` and `heights`.

    Returns
    -------
    delay : :class:`~atminterf.delay.AtmosphericDelay`
        Delays, altimetry corrections and atmospheric model values
    """
    N, de, der = get_atm_pol(elevation, height, N_coeff, de_coeff, altitude)
    return get_atm_interf_gen(elevation, height, N, de, der, opt, heights)
