################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the geometric operators."""

from __future__ import annotations

import numpy as np
import pytest

from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.models.kernels import CorrelationLaplacian
from covariance_dynamics.models.operators import GrowthDiagnostics
from covariance_dynamics.models.operators import OperatorBounds
from covariance_dynamics.models.operators import check_operator_symmetry
from covariance_dynamics.models.operators import curvature
from covariance_dynamics.models.operators import growth_diagnostics
from covariance_dynamics.models.operators import laplacian
from covariance_dynamics.models.operators import operator_bounds
from covariance_dynamics.models.operators import transport


def _random_spd(size: int, seed: int) -> np.ndarray:
    """Return a random, reasonably conditioned SPD matrix."""
    rng: np.random.Generator = np.random.default_rng(seed)
    A: np.ndarray = rng.standard_normal((size, size))
    C: np.ndarray = A @ A.T + 0.1 * np.eye(size)
    return 0.5 * (C + C.T)


@pytest.mark.parametrize("normalize", [True, False])
@pytest.mark.parametrize("seed", range(6))
def test_laplacian_invariants(seed: int, normalize: bool) -> None:
    """L should be symmetric, PSD and have zero row sums."""
    params: CovMemoryParams = CovMemoryParams.defaults(4).replace(
        laplacian=CorrelationLaplacian(alpha=1.5, normalize=normalize)
    )
    C: np.ndarray = _random_spd(4, seed)
    L: np.ndarray = laplacian(C, params)

    np.testing.assert_allclose(L, L.T, atol=1e-14)
    assert np.linalg.eigvalsh(L)[0] >= -1e-12
    np.testing.assert_allclose(L @ np.ones(4), np.zeros(4), atol=1e-12)


def test_laplacian_of_diagonal_covariance_vanishes() -> None:
    """Uncorrelated coordinates should have no interaction."""
    params: CovMemoryParams = CovMemoryParams.defaults(3)
    C: np.ndarray = np.diag([1.0, 2.0, 3.0])
    np.testing.assert_allclose(laplacian(C, params), np.zeros((3, 3)))
    np.testing.assert_allclose(transport(C, params), np.zeros((3, 3)))
    np.testing.assert_allclose(curvature(C, params), np.zeros((3, 3)))


@pytest.mark.parametrize("seed", range(6))
def test_transport_and_curvature_symmetric(seed: int) -> None:
    """T(C) and K(C) should be symmetric for symmetric C."""
    params: CovMemoryParams = CovMemoryParams.defaults(5)
    C: np.ndarray = _random_spd(5, seed)
    T: np.ndarray = transport(C, params)
    K: np.ndarray = curvature(C, params)
    np.testing.assert_allclose(T, T.T, rtol=0.0, atol=1e-12)
    np.testing.assert_allclose(K, K.T, rtol=0.0, atol=1e-12)
    assert check_operator_symmetry(C, params)


def test_transport_is_jordan_product() -> None:
    """T(C) should equal C L + L C."""
    params: CovMemoryParams = CovMemoryParams.defaults(3)
    C: np.ndarray = _random_spd(3, 11)
    L: np.ndarray = laplacian(C, params)
    np.testing.assert_allclose(transport(C, params), C @ L + L @ C, atol=1e-12)


@pytest.mark.parametrize("seed", range(4))
def test_curvature_coefficient_non_negative(seed: int) -> None:
    """K(C) should be tr(C L) C with tr(C L) >= 0."""
    params: CovMemoryParams = CovMemoryParams.defaults(4)
    C: np.ndarray = _random_spd(4, seed)
    L: np.ndarray = laplacian(C, params)
    coefficient: float = float(np.trace(C @ L))
    assert coefficient >= -1e-12
    np.testing.assert_allclose(curvature(C, params), coefficient * C, atol=1e-12)


def test_two_by_two_values() -> None:
    """Check operator values on a hand-computed 2 x 2 example."""
    params: CovMemoryParams = CovMemoryParams.defaults(2)
    C: np.ndarray = np.array([[1.0, 0.5], [0.5, 1.0]])
    w: float = 0.5 / 1.5
    expected_L: np.ndarray = np.array([[w, -w], [-w, w]])
    np.testing.assert_allclose(laplacian(C, params), expected_L)
    # C L = (1 - 0.5) L because L annihilates the ones vector
    np.testing.assert_allclose(transport(C, params), 2.0 * 0.5 * expected_L)
    np.testing.assert_allclose(curvature(C, params), (0.5 * 2.0 * w) * C)


def test_operator_diagnostics() -> None:
    """Diagnostics should report non-negative, consistent norms."""
    params: CovMemoryParams = CovMemoryParams.defaults(3)
    C: np.ndarray = _random_spd(3, 21)

    bounds: OperatorBounds = operator_bounds(C, params)
    assert bounds.laplacian_norm >= 0.0
    assert bounds.transport_norm >= 0.0
    assert bounds.curvature_norm >= 0.0
    assert bounds.laplacian_norm == pytest.approx(
        np.linalg.norm(laplacian(C, params), ord=2)
    )

    growth: GrowthDiagnostics = growth_diagnostics(C, params)
    norm_C: float = float(np.linalg.norm(C, ord=2))
    assert growth.laplacian_growth == pytest.approx(
        bounds.laplacian_norm / (1.0 + norm_C)
    )
    assert growth.transport_growth == pytest.approx(
        bounds.transport_norm / (1.0 + norm_C)
    )
    assert growth.curvature_growth == pytest.approx(
        bounds.curvature_norm / (1.0 + norm_C**2)
    )
