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

"""
Interferometric atmospheric delay for GNSS reflectometry.

This provides closed-form expressions for the atmospheric delay between the
direct and reflected signals received by a GNSS antenna above a reflecting
surface, and the corresponding correction to the retrieved reflector height.
The atmosphere is described by polynomial coefficients, in-situ meteorology,
the GPT climatology or the output of an external ray tracer.
"""

import logging as _logging
from types import ModuleType as _ModuleType

from ._version import __version__
from .atmosphere.gpt import (
    GptVersion,
    date_to_mjd,
    get_atm_gpt,
    get_atm_interf_gpt,
    get_meteo,
    register_climatology,
)
from .atmosphere.gpt2 import (
    MissingExternalData,
    get_grid_path,
    reset_grid_path,
    set_grid_path,
)
from .atmosphere.insitu import get_atm_interf_met, get_atm_met
from .atmosphere.polynomial import get_atm_interf_pol, get_atm_pol
from .atmosphere.raytrace import RayTrace, get_atm_interf_rtr, get_atm_rtr
from .bending import BendingOptions, get_bending_bennet, get_bending_saemundsson
from .delay import (
    AtmosphericDelay,
    InterfOptions,
    compute_delay,
    compute_delay_and_height,
    get_atm_interf_gen,
    get_height_from_delay,
)
from .gradient import gradient_all, gradient_all_noend
from .interferometric import InterferometricDelay
from .meteo import (
    calculate_density_mixed_gas,
    calculate_refractivity,
    logavg,
    reduce_pressure,
)


# Setup library logger and add a print-like handler used when no logging is configured
class _NoConfigFilter(_logging.Filter):
    """Filter which only allows event if top-level logging is not configured."""

    def filter(self, record):
        return 1 if not _logging.root.handlers else 0


_no_config_handler = _logging.StreamHandler()
_no_config_handler.setFormatter(_logging.Formatter(_logging.BASIC_FORMAT))
_no_config_handler.addFilter(_NoConfigFilter())
logger = _logging.getLogger(__name__)
logger.addHandler(_no_config_handler)

# Document public API in __all__ / __dir__ by discarding modules and private variables
__all__ = [
    n
    for n, o in globals().items()
    if not isinstance(o, _ModuleType) and not n.startswith("_")
]
__all__ += ["__version__"]


def __dir__():
    """Tab completion in IPython seems to respect this."""
    return __all__
