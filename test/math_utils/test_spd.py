################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for SPD cone utilities."""

from __future__ import annotations

import numpy as np
import pytest

from covariance_dynamics.math_utils.spd import SPD_FLOOR
from covariance_dynamics.math_utils.spd import NumericalBreakdown
from covariance_dynamics.math_utils.spd import cholesky_lower
from covariance_dynamics.math_utils.spd import is_spd
from covariance_dynamics.math_utils.spd import min_eigenvalue
from covariance_dynamics.math_utils.spd import project_to_spd
from covariance_dynamics.math_utils.spd import symmetric_sqrt
from covariance_dynamics.math_utils.spd import symmetrize


def _with_spectrum(eigvals: np.ndarray, seed: int) -> np.ndarray:
    """Return a symmetric matrix with a random eigenbasis and given spectrum."""
    rng: np.random.Generator = np.random.default_rng(seed)
    size: int = eigvals.size
    Q, _ = np.linalg.qr(rng.standard_normal((size, size)))
    return symmetrize((Q * eigvals) @ Q.T)


def test_symmetrize() -> None:
    """symmetrize should return the symmetric part."""
    mat: np.ndarray = np.array([[1.0, 2.0], [0.0, 3.0]])
    expected: np.ndarray = np.array([[1.0, 1.0], [1.0, 3.0]])
    np.testing.assert_allclose(symmetrize(mat), expected)


def test_is_spd() -> None:
    """is_spd should separate definite from indefinite matrices."""
    assert is_spd(np.eye(3))
    assert not is_spd(np.diag([1.0, 0.0, 2.0]))
    assert not is_spd(np.diag([1.0, -1e-3, 2.0]))
    assert not is_spd(np.array([[np.nan, 0.0], [0.0, 1.0]]))


def test_min_eigenvalue() -> None:
    """min_eigenvalue should return the bottom of the spectrum."""
    C: np.ndarray = _with_spectrum(np.array([0.25, 1.0, 4.0]), seed=1)
    assert min_eigenvalue(C) == pytest.approx(0.25)


def test_project_keeps_spd_matrix() -> None:
    """A well-conditioned SPD matrix should pass through unchanged."""
    C: np.ndarray = _with_spectrum(np.array([0.5, 1.0, 3.0]), seed=2)
    np.testing.assert_allclose(project_to_spd(C), C, atol=1e-14)


def test_project_clips_negative_eigenvalues() -> None:
    """Negative eigenvalues should be lifted to the floor."""
    C: np.ndarray = _with_spectrum(np.array([-0.5, 1.0, 2.0]), seed=3)
    projected: np.ndarray = project_to_spd(C)
    eigvals: np.ndarray = np.linalg.eigvalsh(projected)
    assert eigvals[0] >= SPD_FLOOR
    np.testing.assert_allclose(eigvals[1:], [1.0, 2.0], atol=1e-12)


def test_project_custom_floor() -> None:
    """A custom floor should bound the spectrum from below."""
    C: np.ndarray = np.diag([-1.0, 0.0, 2.0])
    projected: np.ndarray = project_to_spd(C, floor=0.1)
    np.testing.assert_allclose(projected, np.diag([0.1, 0.1, 2.0]), atol=1e-14)


def test_project_symmetrizes_input() -> None:
    """Asymmetric input should be projected from its symmetric part."""
    C: np.ndarray = np.array([[2.0, 0.4], [0.0, 1.0]])
    projected: np.ndarray = project_to_spd(C)
    np.testing.assert_array_equal(projected, projected.T)
    np.testing.assert_allclose(projected, [[2.0, 0.2], [0.2, 1.0]])


@pytest.mark.parametrize("seed", range(8))
def test_project_near_singular_property(seed: int) -> None:
    """Near-singular matrices should project to an exactly symmetric SPD."""
    rng: np.random.Generator = np.random.default_rng(100 + seed)
    size: int = int(rng.integers(2, 7))
    eigvals: np.ndarray = rng.uniform(0.1, 5.0, size=size)
    eigvals[0] = rng.choice([0.0, 1e-14, -1e-12, 1e-11])
    C: np.ndarray = _with_spectrum(eigvals, seed=seed)

    projected: np.ndarray = project_to_spd(C)

    np.testing.assert_array_equal(projected, projected.T)
    np.testing.assert_array_equal(symmetrize(projected), projected)
    assert np.linalg.eigvalsh(projected)[0] >= SPD_FLOOR


@pytest.mark.parametrize("seed", range(200))
def test_project_reaches_floor_on_wide_spectrum(seed: int) -> None:
    """Rebuild roundoff on a wide spectrum must not push below the floor."""
    C: np.ndarray = _with_spectrum(np.array([-1e-3, 1.0, 10.0, 100.0]), seed=seed)

    projected: np.ndarray = project_to_spd(C)

    np.testing.assert_array_equal(projected, projected.T)
    assert np.linalg.eigvalsh(projected)[0] >= SPD_FLOOR
    assert is_spd(projected)


def test_project_reaches_custom_floor_on_large_matrix() -> None:
    """The floor holds for a custom floor far below the roundoff of ||C||."""
    C: np.ndarray = _with_spectrum(np.array([-1.0, 1.0, 1e4, 1e6]), seed=9)
    projected: np.ndarray = project_to_spd(C, floor=1e-12)
    assert np.linalg.eigvalsh(projected)[0] >= 1e-12


@pytest.mark.parametrize("seed", range(5))
def test_project_idempotent(seed: int) -> None:
    """Projecting twice should equal projecting once."""
    C: np.ndarray = _with_spectrum(np.array([-1.0, 1e-13, 0.5, 2.0]), seed=seed)
    once: np.ndarray = project_to_spd(C)
    twice: np.ndarray = project_to_spd(once)
    np.testing.assert_allclose(twice, once, rtol=0.0, atol=1e-13)


def test_project_rejects_bad_floor() -> None:
    """The floor must be strictly positive."""
    with pytest.raises(ValueError):
        project_to_spd(np.eye(2), floor=0.0)


def test_project_rejects_non_finite() -> None:
    """Non-finite input is a numerical breakdown."""
    with pytest.raises(NumericalBreakdown):
        project_to_spd(np.array([[np.inf, 0.0], [0.0, 1.0]]))


def test_cholesky_lower() -> None:
    """The Cholesky factor should be lower triangular and reproduce C."""
    C: np.ndarray = _with_spectrum(np.array([0.5, 1.0, 3.0]), seed=4)
    F: np.ndarray = cholesky_lower(C)
    np.testing.assert_allclose(F, np.tril(F))
    np.testing.assert_allclose(F @ F.T, C, atol=1e-12)


def test_cholesky_failure_is_breakdown() -> None:
    """An indefinite matrix should raise NumericalBreakdown."""
    with pytest.raises(NumericalBreakdown):
        cholesky_lower(np.diag([1.0, -1.0]))


def test_symmetric_sqrt() -> None:
    """The square root should be symmetric and square back to C."""
    C: np.ndarray = _with_spectrum(np.array([0.2, 1.0, 9.0]), seed=5)
    S: np.ndarray = symmetric_sqrt(C)
    np.testing.assert_array_equal(S, S.T)
    np.testing.assert_allclose(S @ S, C, atol=1e-12)
    assert np.linalg.eigvalsh(S)[0] > 0.0
