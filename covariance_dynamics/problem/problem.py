################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Packaging of the model into callbacks for an external SDE integrator."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any
from typing import Optional

import numpy as np

from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.guard.invariant_guard import GuardReport
from covariance_dynamics.guard.invariant_guard import InvariantGuard
from covariance_dynamics.guard.invariant_guard import default_combined_guard
from covariance_dynamics.models.diffusion_model import DiffusionField
from covariance_dynamics.models.drift_model import DriftField
from covariance_dynamics.state.model_state import CovMemoryState
from covariance_dynamics.state.state_layout import StateLayout
from covariance_dynamics.state.state_layout import flatten


_LOG: logging.Logger = logging.getLogger(__name__)

# Sentinel selecting the default combined guard
_DEFAULT_GUARD: Any = object()


class ProblemAssemblyError(Exception):
    """Raised when a problem cannot be assembled from its inputs."""


def build_initial_state(
    params: CovMemoryParams,
    C0: Optional[np.ndarray] = None,
    psi0: float = 0.0,
    I0: float = 0.0,
) -> np.ndarray:
    """Return a validated flat initial state.

    Args:
        params: Model parameters
        C0: Initial covariance, defaults to params.C_bar
        psi0: Initial flux, non-negative
        I0: Initial memory, non-negative

    Raises:
        InvalidStateError: C0 is not symmetric or psi0, I0 are negative
        DimensionError: C0 does not have shape (n, n)
    """
    C: np.ndarray = np.array(params.C_bar if C0 is None else C0, dtype=np.float64)
    state: CovMemoryState = CovMemoryState(C=C, psi=psi0, I=I0)
    u0: np.ndarray = flatten(state)
    StateLayout.for_params(params).check_length(u0, "u0")
    return u0


@dataclass(frozen=True)
class ProblemHandle:
    """Bundle of everything an external integrator needs.

    Attributes:
        params: Shared, immutable model parameters
        u0: Read-only flat initial state
        t_span: Integration interval (t0, t1)
        guard: Post-step hook, or None when invariant repair is disabled
        noise: False when the diffusion callback is bound to a no-op
    """

    params: CovMemoryParams
    u0: np.ndarray
    t_span: tuple[float, float]
    guard: Optional[InvariantGuard]
    noise: bool

    def dim(self) -> int:
        """Return the flat state length n^2 + 2."""
        return self.params.dimension

    def is_stochastic(self) -> bool:
        """Return True when the diffusion callback is active."""
        return self.noise

    def drift(self, u: np.ndarray, t: float) -> np.ndarray:
        """Return the drift du at (u, t)."""
        return DriftField.drift(u, self.params, t)

    def diffusion(self, u: np.ndarray, t: float) -> np.ndarray:
        """Return the diffusion at (u, t), all zeros when noise is off."""
        if not self.noise:
            StateLayout.for_params(self.params).check_length(u)
            return np.zeros(self.dim(), dtype=np.float64)
        return DiffusionField.diffusion(u, self.params, t)

    def drift_into(self, du: np.ndarray, u: np.ndarray, t: float) -> None:
        """Write the drift at (u, t) into du."""
        DriftField.drift_into(du, u, self.params, t)

    def diffusion_into(self, du: np.ndarray, u: np.ndarray, t: float) -> None:
        """Write the diffusion at (u, t) into du."""
        if not self.noise:
            layout: StateLayout = StateLayout.for_params(self.params)
            layout.check_length(du, "du")
            layout.check_length(u)
            du[:] = 0.0
            return
        DiffusionField.diffusion_into(du, u, self.params, t)

    def post_step(self, u: np.ndarray, t: float) -> Optional[GuardReport]:
        """Apply the guard to an accepted step in place."""
        if self.guard is None:
            return None
        return self.guard(u, self.params, t)


def assemble_problem(
    params: CovMemoryParams,
    u0: Any,
    t_span: tuple[float, float],
    guard: Optional[InvariantGuard] = _DEFAULT_GUARD,
    noise: bool = True,
) -> ProblemHandle:
    """Bundle parameters, initial state and callbacks for an integrator.

    Args:
        params: Model parameters
        u0: Flat initial state or a CovMemoryState
        t_span: Integration interval (t0, t1) with t0 < t1
        guard: Post-step hook, the combined guard when omitted, None to
            disable invariant repair
        noise: False binds the diffusion callback to a no-op

    Raises:
        DimensionError: u0 does not have length n^2 + 2
        ProblemAssemblyError: t_span is malformed
    """
    u0_vec: np.ndarray
    if isinstance(u0, CovMemoryState):
        u0_vec = flatten(u0)
    else:
        u0_vec = np.array(u0, dtype=np.float64)
        if u0_vec.ndim != 1:
            raise ProblemAssemblyError("u0 must be one-dimensional")
    StateLayout.for_params(params).check_length(u0_vec, "u0")
    u0_vec.setflags(write=False)

    span: tuple[float, float] = _validate_span(t_span)

    if guard is _DEFAULT_GUARD:
        guard = default_combined_guard()

    _LOG.debug(
        "Assembled problem: n=%d dim=%d span=%s noise=%s guard=%s",
        params.n,
        params.dimension,
        span,
        noise,
        guard is not None,
    )

    return ProblemHandle(
        params=params,
        u0=u0_vec,
        t_span=span,
        guard=guard,
        noise=bool(noise),
    )


def assemble_default_problem(
    params: CovMemoryParams,
    t_span: tuple[float, float],
    C0: Optional[np.ndarray] = None,
    psi0: float = 0.0,
    I0: float = 0.0,
    **kwargs: Any,
) -> ProblemHandle:
    """Assemble a problem starting from build_initial_state defaults."""
    u0: np.ndarray = build_initial_state(params, C0=C0, psi0=psi0, I0=I0)
    return assemble_problem(params, u0, t_span, **kwargs)


def assemble_ode_problem(
    params: CovMemoryParams,
    u0: Any,
    t_span: tuple[float, float],
    guard: Optional[InvariantGuard] = _DEFAULT_GUARD,
) -> ProblemHandle:
    """Assemble the deterministic, noise-free variant of the model."""
    return assemble_problem(params, u0, t_span, guard=guard, noise=False)


def _validate_span(t_span: Any) -> tuple[float, float]:
    """Return (t0, t1) as floats or raise ProblemAssemblyError."""
    try:
        t0_raw, t1_raw = t_span
        t0: float = float(t0_raw)
        t1: float = float(t1_raw)
    except (TypeError, ValueError) as exc:
        raise ProblemAssemblyError("t_span must be a pair of numbers") from exc
    if not math.isfinite(t0) or not math.isfinite(t1):
        raise ProblemAssemblyError("t_span must be finite")
    if t1 <= t0:
        raise ProblemAssemblyError("t_span must satisfy t0 < t1")
    return (t0, t1)
