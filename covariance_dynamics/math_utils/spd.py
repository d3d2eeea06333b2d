################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Linear algebra on the cone of symmetric positive-definite matrices."""

from __future__ import annotations

import numpy as np


# Default eigenvalue floor used when projecting onto the SPD cone
SPD_FLOOR: float = 1e-10

# Machine epsilon of float64
_EPS: float = float(np.finfo(np.float64).eps)

# Roundoff multiple of n * eps * ||C|| added above the floor before rebuilding
_ROUNDOFF_ULPS: float = 4.0

# Diagonal shifts tried when the rebuilt spectrum still falls below the floor
_MAX_FLOOR_SHIFTS: int = 4


class NumericalBreakdown(Exception):
    """Raised when a decomposition fails or produces non-finite output."""


def symmetrize(C: np.ndarray) -> np.ndarray:
    """Return the symmetric part 0.5 * (C + C^T) of a square matrix."""
    mat: np.ndarray = np.asarray(C, dtype=np.float64)
    return 0.5 * (mat + mat.T)


def min_eigenvalue(C: np.ndarray) -> float:
    """Return the smallest eigenvalue of the symmetric part of C."""
    sym: np.ndarray = symmetrize(C)
    if not np.all(np.isfinite(sym)):
        raise NumericalBreakdown("matrix contains non-finite values")
    try:
        eigvals: np.ndarray = np.linalg.eigvalsh(sym)
    except np.linalg.LinAlgError as exc:
        raise NumericalBreakdown("eigendecomposition failed") from exc
    return float(eigvals[0])


def is_spd(C: np.ndarray) -> bool:
    """Return True when C is finite and its symmetric part is positive-definite.

    Symmetry itself is not checked here; callers that care about asymmetry
    compare C against its transpose first.
    """
    mat: np.ndarray = np.asarray(C, dtype=np.float64)
    if not np.all(np.isfinite(mat)):
        return False
    return min_eigenvalue(mat) > 0.0


def project_to_spd(C: np.ndarray, floor: float = SPD_FLOOR) -> np.ndarray:
    """Project a square matrix onto the SPD cone by eigenvalue clipping.

    The input is symmetrized, eigendecomposed and rebuilt with every
    eigenvalue replaced by max(eigenvalue, floor + margin), where the margin
    covers the roundoff of the rebuild. The rebuilt matrix is symmetrized
    once more so that it is exactly symmetric. If its recomputed minimum
    eigenvalue still falls below the floor, the diagonal is shifted until
    it does not.

    This is a numerical safeguard for the invariant guard. It is never part
    of the drift or diffusion fields.

    Args:
        C: Square matrix to project
        floor: Strictly positive lower bound for the eigenvalues

    Returns:
        Exactly symmetric matrix whose eigvalsh minimum is >= floor

    Raises:
        NumericalBreakdown: The input is not finite, a decomposition fails
            or the floor cannot be reached
    """
    if not np.isfinite(floor) or floor <= 0.0:
        raise ValueError("floor must be positive")
    sym: np.ndarray = symmetrize(C)
    if not np.all(np.isfinite(sym)):
        raise NumericalBreakdown("cannot project a non-finite matrix")

    # Already inside the cone, rebuilding would only add roundoff
    if min_eigenvalue(sym) >= floor:
        return sym

    eigvals: np.ndarray
    eigvecs: np.ndarray
    try:
        eigvals, eigvecs = np.linalg.eigh(sym)
    except np.linalg.LinAlgError as exc:
        raise NumericalBreakdown("eigendecomposition failed") from exc

    # Roundoff of V diag(lam) V^T is bounded by a few ulps of ||C||
    margin: float = (
        _ROUNDOFF_ULPS * sym.shape[0] * _EPS * float(np.max(np.abs(eigvals)))
    )
    clipped: np.ndarray = np.maximum(eigvals, floor + margin)
    projected: np.ndarray = symmetrize((eigvecs * clipped) @ eigvecs.T)

    eye: np.ndarray = np.eye(sym.shape[0], dtype=np.float64)
    for _ in range(_MAX_FLOOR_SHIFTS):
        lam_min: float = min_eigenvalue(projected)
        if lam_min >= floor:
            return projected
        # Diagonal shifts keep exact symmetry
        projected = projected + (floor - lam_min + margin) * eye

    raise NumericalBreakdown("projection could not reach the eigenvalue floor")


def cholesky_lower(C: np.ndarray) -> np.ndarray:
    """Return the lower Cholesky factor F of C with C = F F^T.

    Only the lower triangle of C is read. Failure is evidence that C has
    left the SPD cone and is reported as NumericalBreakdown.
    """
    mat: np.ndarray = np.asarray(C, dtype=np.float64)
    if not np.all(np.isfinite(mat)):
        raise NumericalBreakdown("cannot factor a non-finite matrix")
    try:
        return np.linalg.cholesky(mat)
    except np.linalg.LinAlgError as exc:
        raise NumericalBreakdown("Cholesky factorization failed") from exc


def symmetric_sqrt(C: np.ndarray) -> np.ndarray:
    """Return the principal square root S of an SPD matrix, S @ S = C.

    The root is recovered from the Cholesky factor: with F = W diag(s) V^T,
    C = F F^T = W diag(s)^2 W^T and therefore S = W diag(s) W^T.
    """
    F: np.ndarray = cholesky_lower(C)
    W: np.ndarray
    s: np.ndarray
    try:
        W, s, _ = np.linalg.svd(F)
    except np.linalg.LinAlgError as exc:
        raise NumericalBreakdown("singular value decomposition failed") from exc
    return symmetrize((W * s) @ W.T)
