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

"""Shared pytest utilities."""

import numpy as np


def assert_nan_pattern_equal(x, y):
    """Check that two arrays have the same shape and NaN pattern."""
    x = np.asarray(x)
    y = np.asarray(y)
    np.testing.assert_array_equal(
        0 * x, 0 * y, "Array shapes and/or NaN patterns differ"
    )


def write_gpt2_grid(
    path,
    p=101325.0,
    T=288.15,
    Q=5.0,
    dT=-6.5,
    undu=0.0,
    Hs=0.0,
    annual=0.0,
    wet=False,
):
    """Write a synthetic GPT2 / GPT2w 5-degree grid file.

    Parameters
    ----------
    path : str or :class:`pathlib.Path`
        Output file
    p, T, Q, dT, undu, Hs : float or callable, optional
        Mean pressure [Pa], temperature [K], specific humidity [g/kg], lapse
        rate [K/km], geoid undulation [m] and orthometric grid height [m],
        either constant or as a function of latitude and longitude in degrees
    annual : float, optional
        Annual cosine amplitude of temperature [K]
    wet : bool, optional
        True to add the extra GPT2w columns (water vapour decrease factor of
        zero and mean temperature)
    """

    def value(quantity, lat, lon):
        return quantity(lat, lon) if callable(quantity) else quantity

    rows = []
    for lat in np.arange(87.5, -90.0, -5.0):
        for lon in np.arange(2.5, 360.0, 5.0):
            row = [lat, lon]
            row += [value(p, lat, lon), 0, 0, 0, 0]
            row += [value(T, lat, lon), annual, 0, 0, 0]
            row += [value(Q, lat, lon), 0, 0, 0, 0]
            row += [value(dT, lat, lon), 0, 0, 0, 0]
            row += [value(undu, lat, lon), value(Hs, lat, lon)]
            row += [1.2, 0, 0, 0, 0]
            row += [0.5, 0, 0, 0, 0]
            if wet:
                row += [0, 0, 0, 0, 0]
                row += [value(T, lat, lon) - 10, 0, 0, 0, 0]
            rows.append(row)
    header = "% lat lon p T Q dT undu Hs ah aw (synthetic grid, 5 terms each)"
    np.savetxt(path, np.array(rows), fmt="%.6f", header=header, comments="")
