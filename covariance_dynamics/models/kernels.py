################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Memory kernels and interaction operators used by the covariance model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol
from typing import runtime_checkable

import numpy as np


class KernelError(Exception):
    """Raised when a kernel or operator is constructed with invalid values."""


@runtime_checkable
class MemoryKernel(Protocol):
    """Capability set of a memory kernel with a finite Markovian lift.

    drift(psi, I) is the right-hand side of the auxiliary ODE that carries
    the history integral of psi.
    """

    def decay_rate(self) -> float:
        ...

    def drift(self, psi: float, I: float) -> float:
        ...


@runtime_checkable
class InteractionOperator(Protocol):
    """Capability set of a covariance-induced interaction operator.

    Attributes:
        alpha: Interaction strength
        normalize: True when edge weights are saturated
    """

    alpha: float
    normalize: bool

    def weights(self, C: np.ndarray) -> np.ndarray:
        ...

    def degree(self, W: np.ndarray) -> np.ndarray:
        ...

    def laplacian(self, C: np.ndarray) -> np.ndarray:
        ...


@dataclass(frozen=True)
class ExponentialMemory:
    """Exponential memory kernel with decay rate eta.

    The history integral

        I_t = int_0^t exp(-eta (t - s)) psi_s ds

    is carried exactly by the auxiliary ODE dI = (-eta I + psi) dt.

    Attributes:
        eta: Memory decay rate, strictly positive
    """

    eta: float

    def __post_init__(self) -> None:
        """Validate the decay rate."""
        eta: float = float(self.eta)
        if not np.isfinite(eta) or eta <= 0.0:
            raise KernelError("eta must be positive")
        object.__setattr__(self, "eta", eta)

    def decay_rate(self) -> float:
        """Return the decay rate of the memory variable."""
        return self.eta

    def drift(self, psi: float, I: float) -> float:
        """Return dI/dt = -eta * I + psi."""
        return -self.eta * I + psi


@dataclass(frozen=True)
class CorrelationLaplacian:
    """Graph Laplacian built from the correlation structure of C.

    The covariance is rescaled to a correlation matrix R, every pair of
    distinct coordinates is joined by an edge of weight alpha * |R_ij|
    (or alpha * |R_ij| / (1 + |R_ij|) when normalized) and the Laplacian
    L = diag(W 1) - W is returned.

    Attributes:
        alpha: Interaction strength, strictly positive
        normalize: Saturate edge weights with w / (1 + w)
    """

    alpha: float = 1.0
    normalize: bool = True

    def __post_init__(self) -> None:
        """Validate the interaction strength."""
        alpha: float = float(self.alpha)
        if not np.isfinite(alpha) or alpha <= 0.0:
            raise KernelError("alpha must be positive")
        if not isinstance(self.normalize, (bool, np.bool_)):
            raise KernelError("normalize must be a bool")
        object.__setattr__(self, "alpha", alpha)
        object.__setattr__(self, "normalize", bool(self.normalize))

    def correlation(self, C: np.ndarray) -> np.ndarray:
        """Return R = D^-1 C D^-1 with D = diag(sqrt(C_ii)).

        Rows with a zero (or non-positive) diagonal get an inverse scale of
        zero, which isolates the coordinate instead of dividing by zero.
        """
        mat: np.ndarray = np.asarray(C, dtype=np.float64)
        if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
            raise ValueError("C must be a square matrix")
        diag: np.ndarray = np.diag(mat)
        inv_scale: np.ndarray = np.zeros_like(diag)
        positive: np.ndarray = diag > 0.0
        inv_scale[positive] = 1.0 / np.sqrt(diag[positive])
        return inv_scale[:, np.newaxis] * mat * inv_scale[np.newaxis, :]

    def weights(self, C: np.ndarray) -> np.ndarray:
        """Return the symmetric edge-weight matrix with a zero diagonal."""
        abs_R: np.ndarray = np.abs(self.correlation(C))
        W: np.ndarray
        if self.normalize:
            W = self.alpha * abs_R / (1.0 + abs_R)
        else:
            W = self.alpha * abs_R
        np.fill_diagonal(W, 0.0)
        return 0.5 * (W + W.T)

    def degree(self, W: np.ndarray) -> np.ndarray:
        """Return the weighted degree of every vertex."""
        return np.sum(W, axis=1)

    def laplacian(self, C: np.ndarray) -> np.ndarray:
        """Return L = diag(deg) - W."""
        W: np.ndarray = self.weights(C)
        return np.diag(self.degree(W)) - W
