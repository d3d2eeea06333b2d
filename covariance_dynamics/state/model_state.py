################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Structured state of the lifted covariance-flux-memory system."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from covariance_dynamics.math_utils.spd import NumericalBreakdown
from covariance_dynamics.math_utils.spd import is_spd
from covariance_dynamics.math_utils.validation import SYM_TOL
from covariance_dynamics.math_utils.validation import as_finite_float
from covariance_dynamics.math_utils.validation import as_square_matrix
from covariance_dynamics.math_utils.validation import is_symmetric


class InvalidStateError(Exception):
    """Raised when a state violates its construction preconditions."""


@dataclass(frozen=True)
class CovMemoryState:
    """Lifted state (C, psi, I).

    Attributes:
        C: Symmetric covariance matrix with shape (n, n)
        psi: Non-negative CIR-type flux
        I: Non-negative exponential-memory integral of psi
    """

    C: np.ndarray
    psi: float
    I: float

    def __post_init__(self) -> None:
        """Validate shape, finiteness, symmetry and non-negativity."""
        try:
            C: np.ndarray = as_square_matrix(self.C, "C")
            psi: float = as_finite_float(self.psi, "psi")
            I: float = as_finite_float(self.I, "I")
        except ValueError as exc:
            raise InvalidStateError(str(exc)) from exc
        if not is_symmetric(C, tol=SYM_TOL):
            raise InvalidStateError("C must be symmetric")
        if psi < 0.0:
            raise InvalidStateError("psi must be non-negative")
        if I < 0.0:
            raise InvalidStateError("I must be non-negative")
        object.__setattr__(self, "C", C)
        object.__setattr__(self, "psi", psi)
        object.__setattr__(self, "I", I)

    def dim(self) -> int:
        """Return the covariance dimension n."""
        return int(self.C.shape[0])

    def is_valid(self) -> bool:
        """Return True when C is also positive-definite."""
        return is_spd(self.C)


@dataclass(frozen=True)
class StateIncrement:
    """Unvalidated (dC, dpsi, dI) triple produced by the drift or diffusion.

    Attributes:
        C: Matrix part with shape (n, n)
        psi: Flux part, any sign
        I: Memory part, any sign
    """

    C: np.ndarray
    psi: float
    I: float


def check_state(state: CovMemoryState) -> bool:
    """Return True when the state satisfies every model invariant."""
    return state.is_valid() and state.psi >= 0.0 and state.I >= 0.0


def lyapunov(state: CovMemoryState) -> float:
    """Return V(C, psi, I) = tr(C) + tr(C^-1) + psi + I.

    Raises:
        NumericalBreakdown: C is singular or the inverse is not finite
    """
    return lyapunov_value(state.C, state.psi, state.I)


def lyapunov_value(C: np.ndarray, psi: float, I: float) -> float:
    """Evaluate the Lyapunov function on unpacked components."""
    try:
        C_inv: np.ndarray = np.linalg.inv(C)
    except np.linalg.LinAlgError as exc:
        raise NumericalBreakdown("covariance is not invertible") from exc
    value: float = float(np.trace(C) + np.trace(C_inv) + psi + I)
    if not np.isfinite(value):
        raise NumericalBreakdown("Lyapunov function is not finite")
    return value
