################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Validation helpers for matrix and scalar model inputs."""

from __future__ import annotations

from typing import Any

import numpy as np


# Symmetry tolerance for covariance and reference matrices
SYM_TOL: float = 1e-9


def as_square_matrix(value: Any, name: str) -> np.ndarray:
    """Return a finite float64 square matrix or raise ValueError."""
    matrix: np.ndarray = np.array(value, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"{name} must be a square matrix")
    if not np.all(np.isfinite(matrix)):
        raise ValueError(f"{name} must be finite")
    return matrix


def is_symmetric(matrix: np.ndarray, *, tol: float = SYM_TOL) -> bool:
    """Return True when a square matrix is symmetric within tol."""
    return bool(np.allclose(matrix, matrix.T, rtol=0.0, atol=tol))


def as_finite_float(value: Any, name: str) -> float:
    """Return a finite Python float or raise ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number")
    try:
        result: float = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number") from exc
    if not np.isfinite(result):
        raise ValueError(f"{name} must be finite")
    return result


def as_flat_vector(value: Any, name: str) -> np.ndarray:
    """Return a one-dimensional float64 view of an array-like value."""
    vector: np.ndarray = np.asarray(value, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional")
    return vector
