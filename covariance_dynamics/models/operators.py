################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Geometric operators acting on the covariance matrix.

Equations:
    L(C) = diag(W 1) - W,  W_ij = f(|R_ij|),  R = D^-1 C D^-1
    T(C) = C L(C) + L(C) C
    K(C) = tr(C L(C)) C

L is symmetric positive semidefinite with zero row sums. T is the Jordan
product of two symmetric matrices and K rescales C without touching its
eigenvectors, so both stay symmetric. For PSD C, tr(C L) >= 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from covariance_dynamics.config.model_params import CovMemoryParams


# Relative tolerance used by the operator symmetry diagnostic
OPERATOR_SYM_RTOL: float = 1e-10


@dataclass(frozen=True)
class OperatorBounds:
    """Spectral norms of the geometric operators at one covariance.

    Attributes:
        laplacian_norm: ||L(C)||_2
        transport_norm: ||T(C)||_2
        curvature_norm: ||K(C)||_2
    """

    laplacian_norm: float
    transport_norm: float
    curvature_norm: float


@dataclass(frozen=True)
class GrowthDiagnostics:
    """Operator norms relative to the size of C.

    Attributes:
        laplacian_growth: ||L|| / (1 + ||C||)
        transport_growth: ||T|| / (1 + ||C||)
        curvature_growth: ||K|| / (1 + ||C||^2)
    """

    laplacian_growth: float
    transport_growth: float
    curvature_growth: float


def laplacian(C: np.ndarray, params: CovMemoryParams) -> np.ndarray:
    """Return the interaction Laplacian L(C) for the configured operator."""
    return params.laplacian.laplacian(C)


def transport(
    C: np.ndarray, params: CovMemoryParams, L: Optional[np.ndarray] = None
) -> np.ndarray:
    """Return T(C) = C L + L C, reusing L when the caller already built it."""
    mat: np.ndarray = np.asarray(C, dtype=np.float64)
    if L is None:
        L = laplacian(mat, params)
    return mat @ L + L @ mat


def curvature(
    C: np.ndarray, params: CovMemoryParams, L: Optional[np.ndarray] = None
) -> np.ndarray:
    """Return K(C) = tr(C L) C, reusing L when the caller already built it."""
    mat: np.ndarray = np.asarray(C, dtype=np.float64)
    if L is None:
        L = laplacian(mat, params)
    # tr(C L) without forming the product
    coupling: float = float(np.sum(mat * L.T))
    return coupling * mat


def operator_bounds(C: np.ndarray, params: CovMemoryParams) -> OperatorBounds:
    """Return spectral norms of L, T and K at C."""
    L: np.ndarray = laplacian(C, params)
    return OperatorBounds(
        laplacian_norm=_opnorm(L),
        transport_norm=_opnorm(transport(C, params, L)),
        curvature_norm=_opnorm(curvature(C, params, L)),
    )


def check_operator_symmetry(C: np.ndarray, params: CovMemoryParams) -> bool:
    """Return True when L, T and K are all symmetric at C."""
    L: np.ndarray = laplacian(C, params)
    for op in (L, transport(C, params, L), curvature(C, params, L)):
        scale: float = max(1.0, float(np.max(np.abs(op))))
        if not np.allclose(op, op.T, rtol=0.0, atol=OPERATOR_SYM_RTOL * scale):
            return False
    return True


def growth_diagnostics(C: np.ndarray, params: CovMemoryParams) -> GrowthDiagnostics:
    """Return operator growth ratios with respect to ||C||."""
    norm_C: float = _opnorm(np.asarray(C, dtype=np.float64))
    bounds: OperatorBounds = operator_bounds(C, params)
    return GrowthDiagnostics(
        laplacian_growth=bounds.laplacian_norm / (1.0 + norm_C),
        transport_growth=bounds.transport_norm / (1.0 + norm_C),
        curvature_growth=bounds.curvature_norm / (1.0 + norm_C * norm_C),
    )


def _opnorm(matrix: np.ndarray) -> float:
    """Return the spectral norm of a matrix."""
    return float(np.linalg.norm(matrix, ord=2))
