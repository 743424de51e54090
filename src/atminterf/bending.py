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

"""Elevation bending model of Bennett (1982).

This predicts the refractive bending of the satellite elevation angle as a
function of the unrefracted (vacuum) elevation angle, optionally corrected
for the surface pressure and temperature. All angles are in degrees.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .conversion import (
    celsius_to_fahrenheit,
    cotd,
    cscd,
    kelvin_to_celsius,
    mbar_to_inches_mercury,
    pascal_to_mbar,
    scalar_or_array,
)
from .options import merge_options

logger = logging.getLogger(__name__)

_FORMS = {
    "bennet": "bennet",
    "newer": "bennet",
    "bowditch": "bowditch",
    "older": "bowditch",
}


@dataclass(frozen=True)
class BendingOptions:
    """Options for the Bennett bending model.

    Parameters
    ----------
    tol : float or array, optional
        Elevation angle tolerance of the fixed-point inversion, in degrees.
        The default is the numeric precision at the scale of the elevation
        angle (but no finer than at 1 degree). Set to infinity to disable
        the inversion and evaluate the formula once.
    form : {'bennet', 'newer', 'bowditch', 'older'}, optional
        Formulation of the pressure / temperature correction
    ignore_PT : bool, optional
        True if pressure and temperature should be ignored
    max_iter : int, optional
        Maximum number of fixed-point iterations

    Raises
    ------
    ValueError
        If the formulation is unknown or `max_iter` is less than 1
    """

    tol: Optional[float] = None
    form: str = "bennet"
    ignore_PT: bool = False
    max_iter: int = 50

    def __post_init__(self):
        """Check that the formulation and iteration count are valid."""
        if str(self.form).lower() not in _FORMS:
            raise ValueError(
                f"Unknown bending formulation {self.form!r}, "
                f"available ones are {list(_FORMS)}"
            )
        if self.max_iter < 1:
            raise ValueError(
                f"Bending inversion needs at least one iteration, not "
                f"max_iter={self.max_iter!r}"
            )

    @property
    def analytic_rate(self):
        """True if the formulation provides the rate of change of bending."""
        return self.ignore_PT or _FORMS[str(self.form).lower()] == "bennet"

    @classmethod
    def merge(cls, opt=None):
        """Overlay `opt` (None, instance or partial mapping) on the defaults."""
        return merge_options(cls(), opt)


def bennet_refraction(
    elevation, pressure=None, temperature=None, form="bennet", ignore_PT=False
):
    """Evaluate Bennett's refraction formula at apparent elevation angle.

    Parameters
    ----------
    elevation : float or array
        Apparent (refracted) elevation angle, in degrees
    pressure : float or array, optional
        Surface pressure, in Pa
    temperature : float or array, optional
        Surface temperature, in K
    form : {'bennet', 'newer', 'bowditch', 'older'}, optional
        Formulation of the pressure / temperature correction
    ignore_PT : bool, optional
        True if pressure and temperature should be ignored

    Returns
    -------
    de : array
        Elevation bending (refracted minus vacuum), in degrees
    der : array
        Rate of change of `de` with respect to `elevation`, in degrees per
        degree (NaN for the Bowditch form, which has no analytic derivative)

    Notes
    -----
    The mean refraction in arc-minutes is formula G on p. 257 of
    [Bennett1982]_, in terms of the apparent altitude in degrees. The
    correction for non-standard conditions is the formula on p. 258, either
    the one recommended by Bennett or the older one from Bowditch (with
    pressure in inches of mercury and temperature in degrees Fahrenheit).
    The formula argument is clipped at 90 degrees to avoid negative
    refraction near the zenith.

    References
    ----------
    .. [Bennett1982] G.G. Bennett, "The calculation of astronomical refraction
       in marine navigation," Journal of Navigation, vol. 35, no. 2,
       pp. 255-259, 1982. DOI: 10.1017/S0373463300022037
    """
    form = _FORMS[str(form).lower()]
    elevation = np.asarray(elevation, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        arg = np.minimum(elevation + 7.31 / (elevation + 4.4), 90.0)
        Rm = cotd(arg)
        darg_de = 1.0 - 7.31 / (elevation + 4.4) ** 2
        Rmr = -(np.pi / 180.0) * cscd(arg) ** 2 * darg_de
        if pressure is None or temperature is None or ignore_PT:
            return Rm / 60.0, Rmr / 60.0

        pressure_mbar = pascal_to_mbar(pressure)
        temperature_C = kelvin_to_celsius(temperature)
        if form == "bennet":
            num = (pressure_mbar - 80.0) / 930.0
            den = 1.0 + 8e-5 * (Rm + 39.0) * (temperature_C - 10.0)
            k = num / den
            R = k * Rm
            dk = -(num / den**2) * 8e-5 * (temperature_C - 10.0) * Rmr
            dR = dk * Rm + k * Rmr
            return R / 60.0, dR / 60.0
        pressure_inHg = mbar_to_inches_mercury(pressure_mbar)
        temperature_F = celsius_to_fahrenheit(temperature_C)
        R = (510.0 / (460.0 + temperature_F)) * (pressure_inHg / 29.83) * Rm
        return R / 60.0, np.full(np.shape(R), np.nan)


def get_bending_bennet(elevation, pressure=None, temperature=None, opt=None):
    """Elevation bending for unrefracted elevation angle, after Bennett (1982).

    Bennett's formula is expressed in terms of the apparent elevation angle,
    e' = e + de, while the input is the vacuum elevation angle e. The bending
    is therefore found by fixed-point iteration of de = f(e + de), starting
    from de = 0, until successive estimates change by less than the tolerance.

    Parameters
    ----------
    elevation : float or array
        Unrefracted / vacuum elevation angle, in degrees
    pressure : float or array, optional
        Surface pressure, in Pa
    temperature : float or array, optional
        Surface temperature, in K
    opt : :class:`BendingOptions` or dict, optional
        Model options (tolerance, formulation, ...)

    Returns
    -------
    de : float or array
        Elevation bending (refracted minus vacuum), in degrees, or NaN
        where the iteration did not converge
    der : float or array
        Rate of change of bending with respect to the apparent elevation
        angle of the final evaluation, in degrees per degree
    """
    opt = BendingOptions.merge(opt)
    elevation = np.asarray(elevation, dtype=float)
    kwargs = dict(form=opt.form, ignore_PT=opt.ignore_PT)
    if opt.tol is not None and np.all(np.isinf(opt.tol)):
        de, der = bennet_refraction(elevation, pressure, temperature, **kwargs)
        return scalar_or_array(de), scalar_or_array(der)

    if opt.tol is None:
        tol = np.spacing(np.maximum(np.abs(elevation), 1.0))
    else:
        tol = opt.tol
    de0 = np.zeros_like(elevation)
    for iteration in range(opt.max_iter):
        de, der = bennet_refraction(elevation + de0, pressure, temperature, **kwargs)
        delta = np.abs(de - de0)
        converged = (delta < tol) | ~np.isfinite(de)
        if np.all(converged):
            break
        de0 = de
    else:
        logger.warning(
            "Bending inversion did not converge in %d iterations - "
            "%d samples set to NaN, worst change %g degrees",
            iteration + 1,
            np.count_nonzero(~converged),
            np.max(delta[~converged]),
        )
        de = np.where(converged, de, np.nan)
        der = np.where(converged, der, np.nan)
    return scalar_or_array(de), scalar_or_array(der)


def get_bending_saemundsson(elevation):
    """Elevation bending for unrefracted elevation angle, after Saemundsson (1986).

    This closed form is the approximate inverse of Bennett's formula for
    standard conditions, which makes it a handy cross-check of the fixed-point
    inversion in :func:`get_bending_bennet`.

    Parameters
    ----------
    elevation : float or array
        Unrefracted / vacuum elevation angle, in degrees

    Returns
    -------
    de : float or array
        Elevation bending (refracted minus vacuum), in degrees

    References
    ----------
    .. [Saemundsson1986] T. Saemundsson, "Astronomical refraction," Sky and
       Telescope, vol. 72, p. 70, 1986.
    """
    elevation = np.asarray(elevation, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        R = 1.02 * cotd(elevation + 10.3 / (elevation + 5.11))
    return scalar_or_array(R / 60.0)

