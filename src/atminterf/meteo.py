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

"""Meteorological primitives.

This provides the radio refractivity of moist air as a function of pressure,
temperature and humidity, the density of the air mixture, humidity unit
conversions and the reduction of pressure and temperature along a constant
temperature lapse rate. All quantities are in SI units (pascal, kelvin,
kg/kg and metres) unless stated otherwise.
"""

from dataclasses import dataclass

import astropy.constants as const
import astropy.units as u
import numpy as np


@dataclass(frozen=True)
class MeteoConstants:
    """Physical constants and standard atmosphere used by the models.

    Parameters
    ----------
    g_c : float
        Standard acceleration of gravity, in m/s^2
    R : float
        Universal (molar) gas constant, in J/K/mol
    M_dry, M_wet : float
        Molar masses of dry air and water vapour, in kg/mol
    std_pressure : float
        Standard pressure at sea level, in Pa
    std_temperature : float
        Standard temperature at sea level, in K
    std_lapse_rate : float
        Standard temperature lapse rate, in K/m (change in temperature per
        metre increase in altitude, hence negative in the troposphere)
    """

    g_c: float = const.g0.to_value(u.m / u.s**2)
    R: float = const.R.to_value(u.J / u.K / u.mol)
    M_dry: float = 28.9644e-3
    M_wet: float = 18.01528e-3
    std_pressure: float = 101325.0
    std_temperature: float = 288.15
    std_lapse_rate: float = -6.5e-3

    @property
    def R_dry(self):
        """Specific gas constant of dry air, in J/K/kg."""
        return self.R / self.M_dry

    @property
    def R_wet(self):
        """Specific gas constant of water vapour, in J/K/kg."""
        return self.R / self.M_wet


METEO = MeteoConstants()

# -------------------------------------------------------------------------------------
# --- Humidity and density
# -------------------------------------------------------------------------------------


def specific_humidity_to_partial_pressure(pressure, specific_humidity):
    """Partial pressure of water vapour (Pa) from specific humidity (kg/kg)."""
    eps = METEO.M_wet / METEO.M_dry
    s = np.asarray(specific_humidity, dtype=float)
    return s * pressure / (eps + (1.0 - eps) * s)


def partial_pressure_to_specific_humidity(pressure, partial_pressure):
    """Specific humidity (kg/kg) from partial pressure of water vapour (Pa)."""
    eps = METEO.M_wet / METEO.M_dry
    e = np.asarray(partial_pressure, dtype=float)
    return eps * e / (pressure - (1.0 - eps) * e)


def virtual_temperature(pressure, temperature, partial_pressure):
    """Virtual temperature (K) of moist air.

    This is the temperature that dry air would need to have the same density
    as the moist air at the same total pressure.
    """
    eps = METEO.M_wet / METEO.M_dry
    return temperature / (1.0 - (partial_pressure / pressure) * (1.0 - eps))


def calculate_density_mixed_gas(temperature, pressure, partial_pressure):
    """Density of moist air as sum of its dry-air and water-vapour components.

    Following Saastamoinen (1972, p. 248), the density of the mixture is
    the sum of the densities of the dry-air and water-vapour components,
    each given by its own equation of state.

    Parameters
    ----------
    temperature : float or array
        Air temperature, in K
    pressure : float or array
        Total air pressure, in Pa
    partial_pressure : float or array
        Partial pressure of water vapour, in Pa

    Returns
    -------
    density : float or array
        Density of the air mixture, in kg/m^3
    """
    dry_pressure = pressure - partial_pressure
    density_dry = dry_pressure / (METEO.R_dry * temperature)
    density_wet = partial_pressure / (METEO.R_wet * temperature)
    return density_dry + density_wet


def calculate_density_virtual(temperature, pressure, partial_pressure):
    """Density of moist air via the virtual temperature.

    This retains the gas constant for dry air while using the virtual
    temperature in place of the temperature (see "Gas constant" in the AMS
    Glossary). It is equivalent to :func:`calculate_density_mixed_gas`.
    """
    T_v = virtual_temperature(pressure, temperature, partial_pressure)
    return (pressure / T_v) / METEO.R_dry


# -------------------------------------------------------------------------------------
# --- Radio refractivity
# -------------------------------------------------------------------------------------

# Refractivity coefficients (k1 [K/mbar], k2 [K/mbar], k3 [K^2/mbar])
REFRACTIVITY_COEFFICIENTS = {
    "thayer1974": (77.60, 64.8, 3.776e5),
    "rueguer2002": (77.6890, 71.2952, 375463.0),
    "rueguer best available": (77.695, 71.97, 375406.0),
    "iugg1963": (77.624, 64.700, 371897.0),
    "bevis1994": (77.60, 70.4, 3.739e5),
}
_REFRACTIVITY_ALIASES = {"rueguer best average": "rueguer2002"}
DEFAULT_REFRACTIVITY_REF = "thayer1974"


def get_refractivity_coefficients(ref=None):
    """Refractivity coefficients in pressure units of pascal.

    Parameters
    ----------
    ref : str, optional
        Name of published coefficient set (case-insensitive), one of the keys
        of :data:`REFRACTIVITY_COEFFICIENTS` or 'rueguer best average'
        (defaults to Thayer 1974)

    Returns
    -------
    k1, k2, k3 : float
        Coefficients in K/Pa, K/Pa and K^2/Pa, respectively

    Raises
    ------
    ValueError
        If the coefficient reference is unknown
    """
    if ref is None:
        ref = DEFAULT_REFRACTIVITY_REF
    key = str(ref).lower()
    key = _REFRACTIVITY_ALIASES.get(key, key)
    try:
        k1, k2, k3 = REFRACTIVITY_COEFFICIENTS[key]
    except KeyError as err:
        available = list(REFRACTIVITY_COEFFICIENTS) + list(_REFRACTIVITY_ALIASES)
        raise ValueError(
            f"Unknown refractivity coefficients reference {ref!r}, "
            f"available ones are {available}"
        ) from err
    # Convert from mbar (equivalent to hPa) to Pa
    return k1 / 100.0, k2 / 100.0, k3 / 100.0


@dataclass(frozen=True)
class Refractivity:
    """Total refractivity and its two alternative decompositions.

    All values are in N-units, i.e. 1e6 * (n - 1) for refractive index n.
    The total equals both `dry` + `wet` and `hydro` + `nonhydro`.
    """

    total: np.ndarray
    hydro: np.ndarray
    nonhydro: np.ndarray
    dry: np.ndarray
    wet: np.ndarray


def calculate_refractivity(pressure, temperature, specific_humidity=0.0, ref=None):
    """Radio refractivity of moist air from meteorological parameters.

    Parameters
    ----------
    pressure : float or array
        Total air pressure, in Pa
    temperature : float or array
        Air temperature, in K
    specific_humidity : float or array, optional
        Specific humidity, in kg/kg (defaults to dry air)
    ref : str, optional
        Reference for refractivity coefficients (see
        :func:`get_refractivity_coefficients`), defaults to Thayer (1974)

    Returns
    -------
    refractivity : :class:`Refractivity`
        Total refractivity with dry/wet and hydrostatic/non-hydrostatic
        components, in N-units (1e6 * (n - 1))

    Notes
    -----
    The compressibilities of dry and moist air depart from unity by less than
    1 part in 10^3 under typical conditions [Langley1996]_ and are taken as
    one. The dry / wet split follows [Langley1996]_ and [Thayer1974]_, while
    the hydrostatic / non-hydrostatic split follows equations A6 and A7 of
    [Davis1985]_, which needs the density of the air mixture.

    References
    ----------
    .. [Langley1996] R.B. Langley, "Propagation of the GPS signals," in GPS
       for Geodesy, edited by A. Kleusberg and P.J.G. Teunissen, Springer,
       pp. 103-140, 1996.
    .. [Thayer1974] G.D. Thayer, "An improved equation for the radio
       refractive index of air," Radio Science, vol. 9, no. 10, pp. 803-807,
       1974. DOI: 10.1029/RS009i010p00803
    .. [Davis1985] J.L. Davis, T.A. Herring, I.I. Shapiro, A.E.E. Rogers,
       G. Elgered, "Geodesy by radio interferometry: Effects of atmospheric
       modeling errors on estimates of baseline length," Radio Science,
       vol. 20, no. 6, pp. 1593-1607, 1985. DOI: 10.1029/rs020i006p01593
    """
    k1, k2, k3 = get_refractivity_coefficients(ref)
    pressure = np.asarray(pressure, dtype=float)
    temperature = np.asarray(temperature, dtype=float)
    P_w = specific_humidity_to_partial_pressure(pressure, specific_humidity)
    P_d = pressure - P_w

    N_dry = k1 * (P_d / temperature)
    N_wet = k2 * (P_w / temperature) + k3 * (P_w / temperature**2)

    k2_prime = k2 - (METEO.M_wet / METEO.M_dry) * k1
    density = calculate_density_mixed_gas(temperature, pressure, P_w)
    N_hydro = k1 * METEO.R_dry * density
    N_nonhydro = k2_prime * (P_w / temperature) + k3 * (P_w / temperature**2)

    return Refractivity(
        total=N_dry + N_wet,
        hydro=N_hydro,
        nonhydro=N_nonhydro,
        dry=N_dry,
        wet=N_wet,
    )


# -------------------------------------------------------------------------------------
# --- Vertical reduction and averaging
# -------------------------------------------------------------------------------------


def reduce_pressure(pressure, temperature, lapse_rate=None, height_diff=0.0):
    """Reduce pressure and temperature to another altitude.

    This assumes hydrostatic equilibrium of dry air with a temperature that
    changes linearly with altitude. A zero lapse rate gives an isothermal
    layer.

    Parameters
    ----------
    pressure : float or array
        Pressure at reference altitude, in Pa
    temperature : float or array
        Temperature at reference altitude, in K
    lapse_rate : float or array, optional
        Temperature change per metre of altitude increase, in K/m (defaults
        to the standard -6.5 K/km)
    height_diff : float or array, optional
        Altitude of target relative to reference altitude, in m

    Returns
    -------
    pressure, temperature : array
        Pressure (Pa) and temperature (K) at target altitude
    """
    if lapse_rate is None:
        lapse_rate = METEO.std_lapse_rate
    inputs = (pressure, temperature, lapse_rate, height_diff)
    P0, T0, lapse_rate, dh = np.broadcast_arrays(
        *(np.asarray(x, dtype=float) for x in inputs)
    )
    T = T0 + lapse_rate * dh
    isothermal = lapse_rate == 0.0
    with np.errstate(divide="ignore", invalid="ignore"):
        polytropic = P0 * (T / T0) ** (-METEO.g_c / (METEO.R_dry * lapse_rate))
    P = np.where(
        isothermal, P0 * np.exp(-METEO.g_c * dh / (METEO.R_dry * T0)), polytropic
    )
    return P, T


def logavg(a, b):
    """Logarithmic mean of two positive quantities.

    For quantities decaying exponentially with altitude, the vertical average
    over a layer corresponds to the value at the layer's centre of mass,
    which is below the midpoint and equals this mean of the boundary values.
    """
    return np.exp((np.log(a) + np.log(b)) / 2.0)
