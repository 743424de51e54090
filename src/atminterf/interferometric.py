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

"""Interferometric atmospheric delay with physical units."""

from dataclasses import dataclass, field
from typing import Callable

import astropy.units as u

from .atmosphere.gpt import get_atm_interf_gpt
from .atmosphere.insitu import get_atm_interf_met
from .atmosphere.polynomial import get_atm_interf_pol
from .delay import AtmosphericDelay, InterfOptions

_MODELS = {
    "polynomial": get_atm_interf_pol,
    "meteo": get_atm_interf_met,
    "gpt": get_atm_interf_gpt,
}

# Units of model parameters that may be passed as Quantities
_PARAMETER_UNITS = {
    "altitude": u.m,
    "pressure": u.Pa,
    "temperature": u.K,
    "specific_humidity": u.dimensionless_unscaled,
    "lapse_rate": u.K / u.m,
}

_OUTPUT_UNITS = dict(
    dt=u.m,
    da=u.m,
    dg=u.m,
    Ht=u.m,
    Ha=u.m,
    Hg=u.m,
    N=u.dimensionless_unscaled,
    de=u.deg,
    der=u.dimensionless_unscaled,
)


@dataclass(frozen=True)
class InterferometricDelay:
    """Atmospheric delay and altimetry correction of a GNSS reflectometry setup.

    An antenna at a given height above a reflecting surface (water, snow or
    soil) receives both the direct and the reflected satellite signal. This
    calculates the extra interferometric delay between the two signals due to
    the atmospheric layer between antenna and surface, as well as the
    corresponding bias in the retrieved reflector height.

    Parameters
    ----------
    model_id : {'polynomial', 'meteo', 'gpt'}, optional
        Atmospheric model: polynomial refractivity and bending coefficients,
        in-situ meteorological measurements or the GPT climatology
    options : :class:`~atminterf.delay.InterfOptions` or dict, optional
        Options for the altimetry correction

    Raises
    ------
    ValueError
        If the specified atmospheric model is unknown
    """

    model_id: str = "polynomial"
    options: InterfOptions = InterfOptions()
    _model: Callable = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Pick underlying atmospheric `_model` based on `model_id`."""
        try:
            model = _MODELS[self.model_id]
        except KeyError as err:
            raise ValueError(
                f"Unknown atmospheric model {self.model_id!r}, "
                f"available ones are {list(_MODELS.keys())}"
            ) from err
        # Set attributes on base class because this class is frozen
        super().__setattr__("_model", model)
        super().__setattr__("options", InterfOptions.merge(self.options))

    @u.quantity_input
    def __call__(self, elevation: u.deg, height: u.m, heights=True, **model_kwargs):
        """Calculate interferometric delays and altimetry corrections.

        Parameters
        ----------
        elevation : :class:`~astropy.units.Quantity`
            Satellite elevation angle (unrefracted / vacuum)
        height : :class:`~astropy.units.Quantity`
            Antenna height above reflecting surface
        heights : bool, optional
            True to calculate the altimetry corrections as well as the delays
        model_kwargs : dict, optional
            Extra parameters of the atmospheric model, such as `pressure` and
            `temperature` for the 'meteo' model or `pos` and `date` for the
            'gpt' model (Quantities are converted to the appropriate units)

        Returns
        -------
        delay : :class:`~atminterf.delay.AtmosphericDelay`
            Delays and altimetry corrections (lengths as Quantities in metres,
            elevation bending in degrees)
        """
        kwargs = {}
        for name, value in model_kwargs.items():
            if isinstance(value, u.Quantity):
                value = value.to_value(_PARAMETER_UNITS.get(name), u.temperature())
            kwargs[name] = value
        delay = self._model(
            elevation.to_value(u.deg),
            height.to_value(u.m),
            opt=self.options,
            heights=heights,
            **kwargs,
        )
        return AtmosphericDelay(
            **{
                name: None if value is None else value * _OUTPUT_UNITS[name]
                for name, value in vars(delay).items()
            }
        )
