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

"""Closed-form interferometric atmospheric delay and altimetry correction.

In ground-based GNSS reflectometry the direct and reflected signals interfere
at the antenna, and the reflector height is retrieved from the interferometric
delay between them. The atmosphere between antenna and reflecting surface adds
an along-path delay (due to the refractivity of the layer) and a geometric
delay (due to the bending of the ray), which bias the retrieved height. This
module turns the layer refractivity and elevation bending into these delays
and their corresponding altimetry corrections.

All angles are in degrees and all lengths in metres.
"""

import warnings
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .conversion import cosd, cscd, scalar_or_array, sind, tand
from .gradient import gradient_all
from .options import merge_options

ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class InterfOptions:
    """Options selecting how the altimetry corrections are computed.

    Parameters
    ----------
    H_approximate : bool, optional
        True to use the small-bending linearised height formulas instead of
        the exact ones
    H_hybrid : bool, optional
        True to obtain the heights via numerical differentiation of the
        closed-form delays with respect to the sine of elevation angle
    der_numerical : bool, optional
        True to differentiate the bending numerically, even if its rate of
        change with elevation is supplied
    numerical_noend : bool, optional
        True to discard the end points of numerically differentiated series
    """

    H_approximate: bool = False
    H_hybrid: bool = False
    der_numerical: bool = False
    numerical_noend: bool = True

    @classmethod
    def merge(cls, opt=None):
        """Overlay `opt` (None, instance or partial mapping) on the defaults."""
        return merge_options(cls(), opt)


@dataclass(frozen=True)
class AtmosphericDelay:
    """Interferometric atmospheric delays and altimetry corrections.

    The delays satisfy ``dt == da + dg`` and the corrections satisfy
    ``Ht == Ha + Hg``. The corrections are None if they were not requested.

    Parameters
    ----------
    dt, da, dg : float or array
        Total, along-path and geometric delay, in metres
    Ht, Ha, Hg : float or array or None
        Total, along-path and geometric altimetry correction, in metres
    N : float or array
        Layer average refractivity (n - 1, unitless)
    de : float or array
        Elevation bending, in degrees
    der : float or array or None
        Rate of change of elevation bending with respect to elevation angle,
        in degrees per degree
    """

    dt: ArrayLike
    da: ArrayLike
    dg: ArrayLike
    Ht: Optional[ArrayLike] = None
    Ha: Optional[ArrayLike] = None
    Hg: Optional[ArrayLike] = None
    N: Optional[ArrayLike] = None
    de: Optional[ArrayLike] = None
    der: Optional[ArrayLike] = None


def get_height_from_delay(delay, elevation, noend=True):
    """Height equivalent to an interferometric delay, by numerical inversion.

    An interferometric delay series d(e) = 2 H sin(e) corresponds to a height
    H = 1/2 dd / d(sin e). This evaluates that derivative numerically along
    the series of elevation angles.

    Parameters
    ----------
    delay : array
        Delay series, in metres
    elevation : array
        Elevation angles of the series, in degrees
    noend : bool, optional
        True to discard the end points of the series (set to NaN)

    Returns
    -------
    height : array
        Equivalent height, in metres (NaN for a single sample)
    """
    return 0.5 * gradient_all(delay, sind(elevation), noend=noend)


def get_atm_interf_gen(
    elevation, height, refractivity, bending, bending_rate=None, opt=None, heights=True
):
    """Closed-form interferometric atmospheric delay, generic.

    Parameters
    ----------
    elevation : float or array
        Satellite elevation angle, in degrees
    height : float or array
        Antenna height above reflector (or reflector depth), in metres
    refractivity : float or array
        Layer average refractivity (N = n - 1, NOT 1e6 * (n - 1), unitless)
    bending : float or array
        Satellite elevation angle bending, in degrees
    bending_rate : float or array, optional
        Rate of change of bending with respect to elevation angle, in degrees
        per degree (obtained numerically from `bending` if not given)
    opt : :class:`InterfOptions` or dict, optional
        Options for the altimetry correction
    heights : bool, optional
        True to compute the altimetry corrections as well as the delays

    Returns
    -------
    delay : :class:`AtmosphericDelay`
        Delays, altimetry corrections (if requested) and atmospheric inputs

    Warns
    -----
    RuntimeWarning
        If the bending rate has to be differentiated numerically from a single
        sample or turns out to be exactly zero, in which case the affected
        altimetry corrections are NaN
    """
    opt = InterfOptions.merge(opt)
    inputs = (elevation, height, refractivity, bending)
    e, H, N, de = np.broadcast_arrays(*(np.asarray(x, dtype=float) for x in inputs))
    der = bending_rate
    with np.errstate(divide="ignore", invalid="ignore"):
        sin_refracted = sind(e + de)
        da = 2 * H * N / sin_refracted
        dg = 2 * H * (sin_refracted - sind(e))
    dt = da + dg

    def result(Ht=None, Ha=None, Hg=None, der=None):
        outputs = (dt, da, dg, Ht, Ha, Hg, N, de, der)
        return AtmosphericDelay(
            *(None if x is None else scalar_or_array(x) for x in outputs)
        )

    if not heights:
        return result(der=der)

    if opt.H_hybrid:
        Ha = -get_height_from_delay(da, e, opt.numerical_noend)
        Hg = -get_height_from_delay(dg, e, opt.numerical_noend)
        Ht = -get_height_from_delay(dt, e, opt.numerical_noend)
        return result(Ht, Ha, Hg, der=np.full(de.shape, np.nan))

    if der is None or opt.der_numerical:
        der = gradient_all(de, e, noend=opt.numerical_noend)
        degenerate = der == 0
        if de.size < 2 or np.any(degenerate):
            warnings.warn(
                "Input bending rate (dde/de) invalid; "
                "geometric altimetry correction unavailable",
                RuntimeWarning,
                stacklevel=2,
            )
            der[degenerate] = np.nan
    der = np.asarray(der, dtype=float)

    with np.errstate(divide="ignore", invalid="ignore"):
        if opt.H_approximate:
            tmp = np.radians(de) * tand(e)
            Ha = H * N * cscd(e + de) ** 2 * (1 - tmp) * (1 + der)
            Hg = -H * der + H * tmp
        else:
            Ha = H * N * cscd(e + de) ** 2 * cosd(e + de) / cosd(e) * (1 + der)
            Hg = -H * der + H * (sind(de) * tand(e) + 1 - cosd(de)) * (1 + der)
    Ht = Ha + Hg
    return result(Ht, Ha, Hg, der=der)


def compute_delay(elevation, height, refractivity, bending):
    """Total, along-path and geometric interferometric delays only.

    This skips the altimetry corrections, which are more expensive to
    compute (see :func:`get_atm_interf_gen` for parameters).

    Returns
    -------
    dt, da, dg : float or array
        Total, along-path and geometric delay, in metres
    """
    delay = get_atm_interf_gen(elevation, height, refractivity, bending, heights=False)
    return delay.dt, delay.da, delay.dg


def compute_delay_and_height(
    elevation, height, refractivity, bending, bending_rate=None, opt=None
):
    """Interferometric delays together with their altimetry corrections."""
    return get_atm_interf_gen(
        elevation, height, refractivity, bending, bending_rate, opt, heights=True
    )
