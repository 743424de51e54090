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

"""Column-wise numerical gradient.

The delay engine needs the rate of change of elevation bending and of the
delays themselves with respect to elevation angle, sampled along a series of
observations. This provides the finite-difference gradient for that purpose,
with a variant that refuses to report the inaccurate one-sided differences
at the ends of the series.
"""

import numpy as np


def first_nonsingleton_axis(shape):
    """Index of first dimension of `shape` that is not of length 1 (or 0 if none)."""
    for axis, length in enumerate(shape):
        if length != 1:
            return axis
    return 0


def gradient_all(values, coords=None, axis=None, noend=False):
    """Numerical gradient of each column of an array along one axis.

    This uses second-order centred differences in the interior of the series
    and first-order one-sided differences at the boundaries, just like
    :func:`numpy.gradient`.

    Parameters
    ----------
    values : float or array
        Sampled series (or array of series) to differentiate
    coords : float or array, optional
        Coordinates of the samples. This can be a scalar sample spacing,
        a 1-D vector of coordinates along `axis`, or an array with the same
        shape as `values` giving separate coordinates for each column.
        The default is unit spacing.
    axis : int, optional
        Axis along which to differentiate (default is first non-singleton axis)
    noend : bool, optional
        True if the first and last samples along `axis` should be set to NaN

    Returns
    -------
    gradient : array
        Derivative of `values` with respect to `coords`, with the same shape
        as `values`. A series with fewer than two samples yields NaN.
    """
    values = np.asarray(values, dtype=float)
    if axis is None:
        axis = first_nonsingleton_axis(values.shape)
    if values.ndim == 0 or values.shape[axis] < 2:
        return np.full(values.shape, np.nan)
    with np.errstate(divide="ignore", invalid="ignore"):
        if coords is None:
            gradient = np.gradient(values, axis=axis)
        elif np.ndim(coords) > 1:
            # Column-wise coordinates: chain rule via index-based gradients
            coords = np.broadcast_to(np.asarray(coords, dtype=float), values.shape)
            gradient = np.gradient(values, axis=axis) / np.gradient(coords, axis=axis)
        else:
            gradient = np.gradient(values, np.asarray(coords, dtype=float), axis=axis)
    if noend:
        _disable_end_points(gradient, axis)
    return gradient


def gradient_all_noend(values, coords=None, axis=None):
    """Numerical gradient of each column with disabled end-points.

    The one-sided differences at the start and end of a series are
    materially less accurate than the centred differences in its interior.
    This variant of :func:`gradient_all` therefore marks them as invalid
    (NaN) so that callers cannot silently trust them.

    Parameters
    ----------
    values : float or array
        Sampled series (or array of series) to differentiate
    coords : float or array, optional
        Coordinates of the samples (see :func:`gradient_all`)
    axis : int, optional
        Axis along which to differentiate (default is first non-singleton axis)

    Returns
    -------
    gradient : array
        Derivative of `values` with respect to `coords`, NaN at the end-points
    """
    return gradient_all(values, coords, axis, noend=True)


def _disable_end_points(gradient, axis):
    """Set first and last samples of `gradient` along `axis` to NaN in-place."""
    index = [slice(None)] * gradient.ndim
    for end in (0, -1):
        index[axis] = end
        gradient[tuple(index)] = np.nan
