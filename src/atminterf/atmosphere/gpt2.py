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

"""Global Pressure and Temperature 2 (GPT2) empirical climatology.

This evaluates the surface meteorology of [Lagler2013]_ (and its wet variant
GPT2w of [Boehm2015]_) on the 5-degree global grid distributed by the Vienna
University of Technology. The grid files are not bundled; they are found on
a process-wide search path (see :func:`set_grid_path`).

References
----------
.. [Lagler2013] K. Lagler, M. Schindelegger, J. Boehm, H. Krasna and T. Nilsson,
   "GPT2: Empirical slant delay model for radio space geodetic techniques,"
   Geophysical Research Letters, vol. 40, no. 6, pp. 1069-1073, 2013.
.. [Boehm2015] J. Boehm, G. Moeller, M. Schindelegger, G. Pain and R. Weber,
   "Development of an improved empirical model for slant delays in the
   troposphere (GPT2w)," GPS Solutions, vol. 19, no. 3, pp. 433-441, 2015.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import numpy as np

from ..conversion import scalar_or_array

logger = logging.getLogger(__name__)

GRID_URL = "https://vmf.geo.tuwien.ac.at/codes/"
GRID_FILES = {"2": "gpt2_5.grd", "2w": "gpt2_5w.grd"}

# Grid spacing in degrees and number of cells in polar distance and longitude
GRID_STEP = 5.0
N_POD = 36
N_LON = 72

# Standard gravity [m/s^2], molar mass of dry air [kg/mol], gas constant [J/K/mol]
_GM = 9.80665
_DMTR = 28.965e-3
_RG = 8.3143

_grid_path = []


class MissingExternalData(Exception):
    """A climatology grid file could not be found."""


def set_grid_path(*dirs):
    """Set the directories searched for climatology grid files (in order)."""
    _grid_path[:] = [os.fspath(d) for d in dirs]


def reset_grid_path():
    """Revert to searching only the current working directory."""
    _grid_path[:] = []


def get_grid_path():
    """Directories searched for climatology grid files, in order."""
    return list(_grid_path) + [os.getcwd()]


def find_grid_file(name):
    """Locate climatology grid file `name` on the grid search path.

    Parameters
    ----------
    name : str
        File name (or path) of grid, e.g. 'gpt2_5.grd'

    Returns
    -------
    path : str
        Full path of existing grid file

    Raises
    ------
    MissingExternalData
        If the file is not found in any of the search directories
    """
    if os.path.isabs(name):
        if os.path.isfile(name):
            return name
        search_path = [os.path.dirname(name)]
    else:
        search_path = get_grid_path()
        for directory in search_path:
            path = os.path.join(directory, name)
            if os.path.isfile(path):
                return path
    raise MissingExternalData(
        f"Missing climatology grid file {os.path.basename(name)!r} "
        f"(searched {search_path}); please download it from {GRID_URL}"
    )


@dataclass(frozen=True)
class ClimatologyGrid:
    """Coefficients of the gridded climatology, one row per grid cell.

    Each seasonal quantity has 5 columns: mean, annual cosine and sine, and
    semi-annual cosine and sine amplitudes.
    """

    p: np.ndarray  # pressure [Pa]
    T: np.ndarray  # temperature [K]
    Q: np.ndarray  # specific humidity [kg/kg]
    dT: np.ndarray  # temperature lapse rate [K/m]
    undu: np.ndarray  # geoid undulation [m]
    Hs: np.ndarray  # orthometric height of grid cell [m]
    ah: np.ndarray  # hydrostatic mapping function coefficient
    aw: np.ndarray  # wet mapping function coefficient
    la: Optional[np.ndarray] = None  # water vapour decrease factor (GPT2w only)


@lru_cache(maxsize=None)
def load_grid(path):
    """Load climatology grid file, caching the result per path.

    Parameters
    ----------
    path : str
        Path of grid file in the VMF format (a header line starting with '%'
        followed by one row per 5-degree cell)

    Returns
    -------
    grid : :class:`ClimatologyGrid`
        Grid coefficients

    Raises
    ------
    ValueError
        If the file does not contain the expected number of grid cells
    """
    data = np.loadtxt(path, comments="%", ndmin=2)
    if data.shape[0] != N_POD * N_LON or data.shape[1] < 34:
        raise ValueError(
            f"Climatology grid {path!r} has shape {data.shape}, "
            f"expected ({N_POD * N_LON}, >=34)"
        )
    logger.debug("Loaded climatology grid %r with %d points", path, data.shape[0])
    return ClimatologyGrid(
        p=data[:, 2:7],
        T=data[:, 7:12],
        Q=data[:, 12:17] / 1000.0,
        dT=data[:, 17:22] / 1000.0,
        undu=data[:, 22],
        Hs=data[:, 23],
        ah=data[:, 24:29] / 1000.0,
        aw=data[:, 29:34] / 1000.0,
        la=data[:, 34:39] if data.shape[1] >= 39 else None,
    )


@dataclass(frozen=True)
class GridWeather:
    """Climatological surface weather at requested stations.

    Parameters
    ----------
    p : float or array
        Pressure, in hPa
    T : float or array
        Temperature, in degrees Celsius
    dT : float or array
        Temperature lapse rate, in K/km
    e : float or array
        Water vapour partial pressure, in hPa
    ah, aw : float or array
        Hydrostatic and wet mapping function coefficients (VMF1)
    undu : float or array
        Geoid undulation, in metres
    """

    p: np.ndarray
    T: np.ndarray
    dT: np.ndarray
    e: np.ndarray
    ah: np.ndarray
    aw: np.ndarray
    undu: np.ndarray


def _seasonal(coeffs, harmonics):
    """Evaluate mean plus annual and semi-annual terms for each station."""
    return np.sum(coeffs * harmonics, axis=-1)


def _cell_weather(grid, index, harmonics, h_ell):
    """Surface weather reduced to station height, for the given grid cells."""
    undu = grid.undu[index]
    redh = h_ell - undu - grid.Hs[index]
    T0 = _seasonal(grid.T[index], harmonics)
    p0 = _seasonal(grid.p[index], harmonics)
    Q = _seasonal(grid.Q[index], harmonics)
    dT = _seasonal(grid.dT[index], harmonics)
    Tv = T0 * (1 + 0.6077 * Q)
    c = _GM * _DMTR / (_RG * Tv)
    p = p0 * np.exp(-c * redh) / 100.0
    if grid.la is None:
        e = None
    else:
        la = _seasonal(grid.la[index], harmonics)
        e0 = Q * p0 / (0.622 + 0.378 * Q) / 100.0
        e = e0 * (100.0 * p / p0) ** (la + 1)
    return dict(
        p=p,
        T=T0 + dT * redh - 273.15,
        dT=dT * 1000.0,
        Q=Q,
        e=e,
        ah=_seasonal(grid.ah[index], harmonics),
        aw=_seasonal(grid.aw[index], harmonics),
        undu=undu,
    )


def gpt2(mjd, lat, lon, h_ell, static=False, grid_file=GRID_FILES["2"]):
    """Climatological surface weather from the GPT2 / GPT2w 5-degree grid.

    Parameters
    ----------
    mjd : float or array
        Modified Julian Date
    lat, lon : float or array
        Geodetic latitude and longitude of stations, in radians
    h_ell : float or array
        Ellipsoidal height of stations, in metres
    static : bool, optional
        True to ignore the annual and semi-annual variations
    grid_file : str, optional
        Name or path of grid file (see :func:`find_grid_file`)

    Returns
    -------
    weather : :class:`GridWeather`
        Climatological weather at the stations

    Raises
    ------
    MissingExternalData
        If the grid file cannot be found

    Notes
    -----
    Stations within half a grid cell of the poles take the values of the
    nearest grid cell, while all other stations interpolate bilinearly
    between the four surrounding cells.
    """
    grid = load_grid(find_grid_file(grid_file))
    mjd, lat, lon, h_ell = np.broadcast_arrays(
        *(np.asarray(x, dtype=float) for x in (mjd, lat, lon, h_ell))
    )
    phase = 2 * np.pi * (mjd - 51544.5) / 365.25
    if static:
        cos1 = sin1 = cos2 = sin2 = np.zeros_like(phase)
    else:
        cos1, sin1 = np.cos(phase), np.sin(phase)
        cos2, sin2 = np.cos(2 * phase), np.sin(2 * phase)
    harmonics = np.stack([np.ones_like(phase), cos1, sin1, cos2, sin2], axis=-1)
    harmonics = harmonics[..., np.newaxis, :]

    # Polar distance and positive longitude in degrees
    ppod = np.degrees(np.pi / 2 - lat)
    plon = np.degrees(np.where(lon < 0, lon + 2 * np.pi, lon))
    ipod = np.floor((ppod + GRID_STEP) / GRID_STEP).astype(int)
    ilon = np.floor((plon + GRID_STEP) / GRID_STEP).astype(int)
    diffpod = (ppod - (ipod * GRID_STEP - GRID_STEP / 2)) / GRID_STEP
    difflon = (plon - (ilon * GRID_STEP - GRID_STEP / 2)) / GRID_STEP
    ipod = np.where(ipod > N_POD, N_POD, ipod)
    ilon = np.where(ilon > N_LON, 1, ilon)
    bilinear = (ppod > GRID_STEP / 2) & (ppod < 180.0 - GRID_STEP / 2)

    # Neighbouring cells, clipped at the poles where they are not used anyway
    ipod1 = np.clip(ipod + np.sign(diffpod).astype(int), 1, N_POD)
    ilon1 = ilon + np.sign(difflon).astype(int)
    ilon1 = np.where(ilon1 > N_LON, 1, np.where(ilon1 < 1, N_LON, ilon1))
    index = np.stack(
        [
            (ipod - 1) * N_LON + ilon - 1,
            (ipod1 - 1) * N_LON + ilon - 1,
            (ipod - 1) * N_LON + ilon1 - 1,
            (ipod1 - 1) * N_LON + ilon1 - 1,
        ],
        axis=-1,
    )
    cells = _cell_weather(grid, index, harmonics, h_ell[..., np.newaxis])

    dpod = np.abs(diffpod)
    dlon = np.abs(difflon)
    weights = np.stack(
        [
            (1 - dpod) * (1 - dlon),
            dpod * (1 - dlon),
            (1 - dpod) * dlon,
            dpod * dlon,
        ],
        axis=-1,
    )

    def interpolate(values):
        return np.where(bilinear, np.sum(weights * values, axis=-1), values[..., 0])

    weather = {
        name: interpolate(cells[name])
        for name in ("p", "T", "dT", "ah", "aw", "undu")
    }
    if cells["e"] is None:
        Q = interpolate(cells["Q"])
        weather["e"] = Q * weather["p"] / (0.622 + 0.378 * Q)
    else:
        weather["e"] = interpolate(cells["e"])
    return GridWeather(**{k: scalar_or_array(v) for k, v in weather.items()})
