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

"""Tests for the gradient module."""

import numpy as np
import pytest

from atminterf.gradient import (
    first_nonsingleton_axis,
    gradient_all,
    gradient_all_noend,
)


@pytest.mark.parametrize(
    "shape,axis", [((5,), 0), ((1, 5), 1), ((1, 1, 4), 2), ((3, 4), 0), ((1,), 0)]
)
def test_first_nonsingleton_axis(shape, axis):
    assert first_nonsingleton_axis(shape) == axis


def test_gradient_of_quadratic():
    """Centred differences are exact for a quadratic in the interior."""
    x = np.linspace(0.0, 2.0, 11)
    y = x**2
    grad = gradient_all(y, x)
    np.testing.assert_allclose(grad[1:-1], 2 * x[1:-1], rtol=1e-12)
    # One-sided differences at the ends are less accurate
    assert grad[0] != pytest.approx(0.0)
    grad_noend = gradient_all(y, x, noend=True)
    assert np.isnan(grad_noend[0]) and np.isnan(grad_noend[-1])
    np.testing.assert_array_equal(grad_noend[1:-1], grad[1:-1])
    np.testing.assert_array_equal(gradient_all_noend(y, x), grad_noend)


def test_gradient_unit_spacing():
    np.testing.assert_allclose(gradient_all([1.0, 3.0, 5.0, 7.0]), 2.0)


def test_gradient_columnwise():
    """Each column of a 2-D array is differentiated along the first axis."""
    x = np.linspace(0.0, 1.0, 6)
    values = np.column_stack([3 * x, -x, np.full_like(x, 2.0)])
    grad = gradient_all(values, x)
    np.testing.assert_allclose(grad, np.tile([3.0, -1.0, 0.0], (6, 1)), atol=1e-12)
    # Separate coordinates per column
    coords = np.column_stack([x, 2 * x, x + 1])
    grad = gradient_all(values, coords)
    np.testing.assert_allclose(grad, np.tile([3.0, -0.5, 0.0], (6, 1)), atol=1e-12)


def test_gradient_row_vector():
    """A row vector is differentiated along its non-singleton axis."""
    x = np.arange(5.0)[np.newaxis, :]
    grad = gradient_all(4 * x, x)
    assert grad.shape == (1, 5)
    np.testing.assert_allclose(grad, 4.0)


@pytest.mark.parametrize("values", [3.0, [3.0], np.ones((1, 1))])
def test_gradient_degenerate(values):
    """Series with fewer than two samples have an undefined gradient."""
    grad = gradient_all(values)
    assert np.shape(grad) == np.shape(values)
    assert np.all(np.isnan(grad))
