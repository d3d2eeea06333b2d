################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for input validation helpers."""

from __future__ import annotations

import numpy as np
import pytest

from covariance_dynamics.math_utils.validation import SYM_TOL
from covariance_dynamics.math_utils.validation import as_finite_float
from covariance_dynamics.math_utils.validation import as_flat_vector
from covariance_dynamics.math_utils.validation import as_square_matrix
from covariance_dynamics.math_utils.validation import is_symmetric


def test_as_square_matrix_copies() -> None:
    """The result should be a float64 copy."""
    source: list[list[int]] = [[1, 2], [2, 1]]
    matrix: np.ndarray = as_square_matrix(source, "C")
    assert matrix.dtype == np.float64
    np.testing.assert_array_equal(matrix, [[1.0, 2.0], [2.0, 1.0]])


@pytest.mark.parametrize(
    "value",
    [
        np.ones(3),
        np.ones((2, 3)),
        np.array([[1.0, np.nan], [0.0, 1.0]]),
    ],
)
def test_as_square_matrix_rejects(value: np.ndarray) -> None:
    """Non-square or non-finite input must raise ValueError."""
    with pytest.raises(ValueError):
        as_square_matrix(value, "C")


def test_is_symmetric_tolerance() -> None:
    """Asymmetry below the tolerance is accepted."""
    small: np.ndarray = np.array([[1.0, 0.5 + 0.1 * SYM_TOL], [0.5, 1.0]])
    large: np.ndarray = np.array([[1.0, 0.5 + 10.0 * SYM_TOL], [0.5, 1.0]])
    assert is_symmetric(small)
    assert not is_symmetric(large)
    assert is_symmetric(large, tol=1e-6)


def test_as_finite_float() -> None:
    """Scalars should coerce to finite floats."""
    assert as_finite_float(3, "x") == 3.0
    assert isinstance(as_finite_float(np.float32(0.5), "x"), float)
    for bad in (True, "abc", None, float("inf"), float("nan")):
        with pytest.raises(ValueError):
            as_finite_float(bad, "x")


def test_as_flat_vector() -> None:
    """Only one-dimensional input is accepted."""
    np.testing.assert_array_equal(as_flat_vector([1, 2, 3], "u"), [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        as_flat_vector(np.zeros((2, 2)), "u")
