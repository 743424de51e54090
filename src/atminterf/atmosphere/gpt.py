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

"""Atmospheric model based on the Global Pressure and Temperature climatology.

The weather at the antenna (and at the reflecting surface) is predicted by one
of the GPT family of empirical models, given position and date, and then fed
into the in-situ meteorological model.
"""

import enum
import logging
from functools import partial

import erfa
import numpy as np
from astropy.time import Time

from ..conversion import celsius_to_kelvin, hpa_to_pascal
from ..meteo import logavg, partial_pressure_to_specific_humidity
from .gpt2 import GRID_FILES, MissingExternalData, gpt2
from .insitu import get_atm_interf_met, get_atm_met

logger = logging.getLogger(__name__)

# Modified Julian Date of 2000-01-01, used for the static climatology
STATIC_MJD = 51544.0


class GptVersion(enum.Enum):
    """Version of the Global Pressure and Temperature climatology."""

    GPT1 = "1"
    GPT2 = "2"
    GPT2W = "2w"

    @classmethod
    def parse(cls, version):
        """Turn `version` (member, int or case-insensitive string) into a member."""
        if isinstance(version, cls):
            return version
        key = str(version).strip().lower()
        key = {"2w5": "2w"}.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown GPT version {version!r}, available ones are "
                f"{[v.value for v in cls] + ['2w5']}"
            ) from None


_CLIMATOLOGIES = {
    GptVersion.GPT2: partial(gpt2, grid_file=GRID_FILES["2"]),
    GptVersion.GPT2W: partial(gpt2, grid_file=GRID_FILES["2w"]),
}


def register_climatology(version, func):
    """Register a climatology backend for a GPT version.

    Parameters
    ----------
    version : :class:`GptVersion`, int or str
        GPT version served by the backend
    func : callable
        Signature ``func(mjd, lat, lon, h_ell, static)`` with latitude and
        longitude in radians and ellipsoidal height in metres, returning a
        :class:`~atminterf.atmosphere.gpt2.GridWeather`
    """
    _CLIMATOLOGIES[GptVersion.parse(version)] = func


def get_climatology(version):
    """Climatology backend of GPT version.

    Raises
    ------
    ValueError
        If the version is unknown
    MissingExternalData
        If no backend is available for the version
    """
    version = GptVersion.parse(version)
    try:
        return _CLIMATOLOGIES[version]
    except KeyError:
        raise MissingExternalData(
            f"No climatology available for GPT version {version.value!r}; "
            "provide one via register_climatology()"
        ) from None


def _mjd_erfa(year, month, day):
    """MJD at 0h of calendar date via ERFA (Gregorian calendar)."""
    whole_day = np.floor(day)
    _, mjd = erfa.cal2jd(year, month, whole_day.astype(int))
    return mjd + (day - whole_day)


def _mjd_internal(year, month, day):
    """MJD at 0h of calendar date via the Fliegel-Van Flandern day number."""
    whole_day = np.floor(day).astype(int)
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    jdn = whole_day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400
    return jdn - 32045 - 2400001 + (day - whole_day)


MJD_CONVERTERS = {"erfa": _mjd_erfa, "internal": _mjd_internal}


def date_to_mjd(date, converter="erfa"):
    """Modified Julian Date of calendar date.

    Parameters
    ----------
    date : :class:`~astropy.time.Time` or sequence or array
        Either an Astropy time or (year, month, day) triplets along the last
        axis, where the day may be fractional
    converter : {'erfa', 'internal'}, optional
        Name of calendar conversion in :data:`MJD_CONVERTERS` (ignored for
        Astropy times)

    Returns
    -------
    mjd : float or array
        Modified Julian Date (UTC)
    """
    if isinstance(date, Time):
        return date.utc.mjd
    try:
        to_mjd = MJD_CONVERTERS[converter]
    except KeyError:
        raise ValueError(
            f"Unknown date converter {converter!r}, "
            f"available ones are {list(MJD_CONVERTERS)}"
        ) from None
    date = np.asarray(date, dtype=float)
    if date.shape[-1:] != (3,):
        raise ValueError(f"Date should be (year, month, day), not {date.tolist()}")
    year = date[..., 0].astype(int)
    month = date[..., 1].astype(int)
    mjd = to_mjd(year, month, date[..., 2])
    return mjd if np.ndim(mjd) else float(mjd)


def get_meteo(pos, date=None, version="2", height=None, date_converter="erfa"):
    """Climatological weather at position and date.

    Parameters
    ----------
    pos : sequence or array, or None
        Geodetic (latitude, longitude, altitude) along the last axis, in
        degrees, degrees and metres (defaults to (0, 0, 0))
    date : :class:`~astropy.time.Time` or sequence, optional
        Date (see :func:`date_to_mjd`), or None for the static climatology
    version : :class:`GptVersion`, int or str, optional
        GPT version
    height : float or array, optional
        Depth below the given altitude at which to evaluate the weather, in
        metres (e.g. antenna height above reflector, to get surface weather)
    date_converter : str, optional
        Calendar conversion (see :func:`date_to_mjd`)

    Returns
    -------
    pressure : float or array
        Pressure, in Pa
    temperature : float or array
        Temperature, in K
    specific_humidity : float or array
        Specific humidity, in kg/kg
    """
    climatology = get_climatology(version)
    if pos is None:
        pos = (0.0, 0.0, 0.0)
    pos = np.asarray(pos, dtype=float)
    lat, lon, alt = pos[..., 0], pos[..., 1], pos[..., 2]
    if height is not None:
        alt = alt - np.asarray(height, dtype=float)
    if date is None:
        static, mjd = True, STATIC_MJD
    else:
        static, mjd = False, date_to_mjd(date, date_converter)
    weather = climatology(mjd, np.radians(lat), np.radians(lon), alt, static)
    pressure = hpa_to_pascal(weather.p)
    temperature = celsius_to_kelvin(weather.T)
    specific_humidity = partial_pressure_to_specific_humidity(
        pressure, hpa_to_pascal(weather.e)
    )
    return pressure, temperature, specific_humidity


def _layer_meteo(height, pos, date, version, thin, date_converter):
    """Weather for the in-situ model, and whether it describes a thin layer."""
    version = GptVersion.parse(version)
    if pos is None:
        logger.debug("No position given, using standard atmosphere")
        return None, None, None, thin
    antenna = get_meteo(pos, date, version, None, date_converter)
    if thin:
        return antenna + (True,)
    surface = get_meteo(pos, date, version, height, date_converter)
    pressure = logavg(antenna[0], surface[0])
    temperature = (antenna[1] + surface[1]) / 2
    specific_humidity = (antenna[2] + surface[2]) / 2
    # The layer average is already done, so skip the in-situ altitude reduction
    return pressure, temperature, specific_humidity, True


def get_atm_gpt(
    elevation,
    height,
    pos=None,
    date=None,
    version="2",
    thin=False,
    ref=None,
    bending_opt=None,
    date_converter="erfa",
):
    """Refractivity and bending from the GPT climatology.

    Parameters
    ----------
    elevation : float or array
        Satellite elevation angle, in degrees
    height : float or array
        Antenna height above reflector, in metres
    pos : sequence or array, optional
        Geodetic (latitude, longitude, altitude) of the antenna, in degrees,
        degrees and metres (standard atmosphere if None)
    date : :class:`~astropy.time.Time` or sequence, optional
        Date (see :func:`date_to_mjd`), or None for the static climatology
    version : :class:`GptVersion`, int or str, optional
        GPT version
    thin : bool, optional
        True to use the antenna weather for the whole layer, otherwise the
        antenna and surface weather are averaged
    ref, bending_opt
        See :func:`~atminterf.atmosphere.insitu.get_atm_met`
    date_converter : str, optional
        Calendar conversion (see :func:`date_to_mjd`)

    Returns
    -------
    N, de, der : float or array
        Layer refractivity, elevation bending and its rate (see
        :func:`~atminterf.atmosphere.insitu.get_atm_met`)
    """
    pressure, temperature, specific_humidity, thin = _layer_meteo(
        height, pos, date, version, thin, date_converter
    )
    return get_atm_met(
        elevation,
        height,
        pressure,
        temperature,
        specific_humidity,
        thin=thin,
        ref=ref,
        bending_opt=bending_opt,
    )


def get_atm_interf_gpt(
    elevation,
    height,
    pos=None,
    date=None,
    version="2",
    thin=False,
    ref=None,
    bending_opt=None,
    date_converter="erfa",
    opt=None,
    heights=True,
):
    """Closed-form interferometric atmospheric delay, GPT climatology.

    See :func:`get_atm_gpt` for the model parameters and
    :func:`~atminterf.delay.get_atm_interf_gen` for `opt` and `heights`.

    Returns
    -------
    delay : :class:`~atminterf.delay.AtmosphericDelay`
        Delays, altimetry corrections and atmospheric model values
    """
    pressure, temperature, specific_humidity, thin = _layer_meteo(
        height, pos, date, version, thin, date_converter
    )
    return get_atm_interf_met(
        elevation,
        height,
        pressure,
        temperature,
        specific_humidity,
        thin=thin,
        ref=ref,
        bending_opt=bending_opt,
        opt=opt,
        heights=heights,
    )
