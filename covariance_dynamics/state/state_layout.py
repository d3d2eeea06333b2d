################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Flat state vector layout shared with external integrators.

Layout of a vector u of length n^2 + 2 (0-based indices):

    u[0 : n^2]   row-major (C-order) flattening of C
    u[n^2]       flux psi
    u[n^2 + 1]   memory I

This module is the only place that knows the layout. Every other module
reads and writes flat vectors through the accessors and packers below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.math_utils.spd import is_spd
from covariance_dynamics.math_utils.spd import symmetrize
from covariance_dynamics.math_utils.validation import SYM_TOL
from covariance_dynamics.math_utils.validation import as_flat_vector
from covariance_dynamics.math_utils.validation import is_symmetric
from covariance_dynamics.state.model_state import CovMemoryState
from covariance_dynamics.state.model_state import StateIncrement
from covariance_dynamics.state.model_state import lyapunov_value


# Number of scalar auxiliary entries that follow vec(C)
NUM_AUXILIARY: int = 2


class DimensionError(Exception):
    """Raised when a flat vector does not match the n^2 + 2 layout."""


@dataclass(frozen=True)
class StateLayout:
    """Index layout of the flat state vector for dimension n.

    Attributes:
        n: Covariance dimension
    """

    n: int

    def __post_init__(self) -> None:
        """Validate the covariance dimension."""
        if not isinstance(self.n, int) or isinstance(self.n, bool) or self.n <= 0:
            raise DimensionError("n must be a positive int")

    @classmethod
    def for_params(cls, params: CovMemoryParams) -> StateLayout:
        """Return the layout matching a parameter set."""
        return cls(params.n)

    def dim(self) -> int:
        """Return the total length of the flat vector."""
        return self.n * self.n + NUM_AUXILIARY

    def covariance_slice(self) -> slice:
        """Return the slice holding vec(C)."""
        return slice(0, self.n * self.n)

    def flux_index(self) -> int:
        """Return the index of psi."""
        return self.n * self.n

    def memory_index(self) -> int:
        """Return the index of I."""
        return self.n * self.n + 1

    def check_length(self, u: np.ndarray, name: str = "u") -> None:
        """Raise DimensionError unless len(u) == n^2 + 2."""
        if len(u) != self.dim():
            raise DimensionError(
                f"{name} must have length {self.dim()}, got {len(u)}"
            )

    def covariance(self, u: np.ndarray) -> np.ndarray:
        """Return a copy of C as stored, without symmetrization."""
        return np.array(u[self.covariance_slice()], dtype=np.float64).reshape(
            (self.n, self.n)
        )

    def flux(self, u: np.ndarray) -> float:
        """Return psi."""
        return float(u[self.flux_index()])

    def memory(self, u: np.ndarray) -> float:
        """Return I."""
        return float(u[self.memory_index()])

    def pack(self, C: np.ndarray, psi: float, I: float) -> np.ndarray:
        """Return a new flat vector holding (C, psi, I)."""
        u: np.ndarray = np.empty(self.dim(), dtype=np.float64)
        self.pack_into(u, C, psi, I)
        return u

    def pack_into(self, u: np.ndarray, C: np.ndarray, psi: float, I: float) -> None:
        """Write (C, psi, I) into an existing flat vector."""
        self.check_length(u)
        mat: np.ndarray = np.asarray(C, dtype=np.float64)
        if mat.shape != (self.n, self.n):
            raise DimensionError(f"C must have shape ({self.n}, {self.n})")
        u[self.covariance_slice()] = mat.reshape(-1)
        u[self.flux_index()] = psi
        u[self.memory_index()] = I

    def write_covariance(self, u: np.ndarray, C: np.ndarray) -> None:
        """Overwrite only the covariance block of u."""
        self.pack_into(u, C, self.flux(u), self.memory(u))


StateLike = Union[CovMemoryState, StateIncrement]


def state_dimension(params: CovMemoryParams) -> int:
    """Return the length n^2 + 2 of the flat state vector."""
    return StateLayout.for_params(params).dim()


def flatten(state: StateLike) -> np.ndarray:
    """Return the flat vector [vec(C), psi, I] for a state or increment."""
    C: np.ndarray = np.asarray(state.C, dtype=np.float64)
    if C.ndim != 2 or C.shape[0] != C.shape[1]:
        raise DimensionError("C must be a square matrix")
    layout: StateLayout = StateLayout(int(C.shape[0]))
    return layout.pack(C, state.psi, state.I)


def unflatten(u: np.ndarray, params: CovMemoryParams) -> CovMemoryState:
    """Rebuild a validated state, symmetrizing C to absorb roundoff."""
    layout: StateLayout = _checked_layout(u, params)
    C: np.ndarray = symmetrize(layout.covariance(u))
    return CovMemoryState(C=C, psi=layout.flux(u), I=layout.memory(u))


def get_covariance(u: np.ndarray, params: CovMemoryParams) -> np.ndarray:
    """Return C from a flat vector as stored, asymmetry included."""
    return _checked_layout(u, params).covariance(u)


def get_flux(u: np.ndarray, params: CovMemoryParams) -> float:
    """Return psi from a flat vector."""
    return _checked_layout(u, params).flux(u)


def get_memory(u: np.ndarray, params: CovMemoryParams) -> float:
    """Return I from a flat vector."""
    return _checked_layout(u, params).memory(u)


def check_state_vector(u: np.ndarray, params: CovMemoryParams) -> bool:
    """Return True when the flat vector satisfies every model invariant."""
    layout: StateLayout = _checked_layout(u, params)
    C: np.ndarray = layout.covariance(u)
    return (
        is_symmetric(C, tol=SYM_TOL)
        and is_spd(C)
        and layout.flux(u) >= 0.0
        and layout.memory(u) >= 0.0
    )


def lyapunov_from_vector(u: np.ndarray, params: CovMemoryParams) -> float:
    """Evaluate the Lyapunov function on a flat vector without validation."""
    layout: StateLayout = _checked_layout(u, params)
    return lyapunov_value(
        symmetrize(layout.covariance(u)), layout.flux(u), layout.memory(u)
    )


def _checked_layout(u: np.ndarray, params: CovMemoryParams) -> StateLayout:
    """Return the layout for params after checking the vector length."""
    layout: StateLayout = StateLayout.for_params(params)
    layout.check_length(as_flat_vector(u, "u"))
    return layout
