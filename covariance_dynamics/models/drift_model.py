################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Deterministic drift of the lifted covariance-flux-memory system."""

from __future__ import annotations

import numpy as np

from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.math_utils.spd import NumericalBreakdown
from covariance_dynamics.models.operators import curvature
from covariance_dynamics.models.operators import laplacian
from covariance_dynamics.models.operators import transport
from covariance_dynamics.state.model_state import CovMemoryState
from covariance_dynamics.state.model_state import StateIncrement
from covariance_dynamics.state.state_layout import StateLayout
from covariance_dynamics.state.state_layout import flatten


class DriftField:
    """Deterministic vector field of the lifted model.

    Responsibility:
        Map a state (C, psi, I) to its time derivative, either structured or
        as a flat vector for an external integrator.

    Equations:
        dC/dt   = -lam (C - C_bar) + psi T(C) + I K(C)
        dpsi/dt = -beta psi
        dI/dt   = -eta I + psi

    Determinism and edge cases:
        - The psi term is skipped when psi == 0 and the I term when I == 0.
          Both are exactly zero in that case, so only the operator cost is
          saved. L(C) is built at most once per evaluation.
        - t is accepted for interface symmetry and is unused.
        - Non-finite output raises NumericalBreakdown instead of being
          handed to the integrator.
    """

    @staticmethod
    def covariance_drift(
        C: np.ndarray, psi: float, I: float, params: CovMemoryParams
    ) -> np.ndarray:
        """Return dC/dt."""
        mat: np.ndarray = np.asarray(C, dtype=np.float64)
        dC: np.ndarray = -params.lam * (mat - params.C_bar)
        if psi == 0.0 and I == 0.0:
            return dC
        L: np.ndarray = laplacian(mat, params)
        if psi != 0.0:
            dC = dC + psi * transport(mat, params, L)
        if I != 0.0:
            dC = dC + I * curvature(mat, params, L)
        return dC

    @staticmethod
    def flux_drift(psi: float, params: CovMemoryParams) -> float:
        """Return dpsi/dt = -beta psi."""
        return -params.beta * psi

    @staticmethod
    def memory_drift(psi: float, I: float, params: CovMemoryParams) -> float:
        """Return dI/dt from the memory kernel."""
        return params.memory.drift(psi, I)

    @staticmethod
    def structured_drift(
        state: CovMemoryState, params: CovMemoryParams
    ) -> StateIncrement:
        """Return the drift of a structured state."""
        return StateIncrement(
            C=DriftField.covariance_drift(state.C, state.psi, state.I, params),
            psi=DriftField.flux_drift(state.psi, params),
            I=DriftField.memory_drift(state.psi, state.I, params),
        )

    @staticmethod
    def drift(u: np.ndarray, params: CovMemoryParams, t: float = 0.0) -> np.ndarray:
        """Return the flat drift vector du for a flat state vector u."""
        _ = t
        layout: StateLayout = StateLayout.for_params(params)
        layout.check_length(u)

        C: np.ndarray = layout.covariance(u)
        psi: float = layout.flux(u)
        I: float = layout.memory(u)

        increment: StateIncrement = StateIncrement(
            C=DriftField.covariance_drift(C, psi, I, params),
            psi=DriftField.flux_drift(psi, params),
            I=DriftField.memory_drift(psi, I, params),
        )
        du: np.ndarray = flatten(increment)
        if not np.all(np.isfinite(du)):
            raise NumericalBreakdown("drift produced non-finite values")
        return du

    @staticmethod
    def drift_into(
        du: np.ndarray, u: np.ndarray, params: CovMemoryParams, t: float = 0.0
    ) -> None:
        """Write the flat drift of u into the caller's buffer du."""
        StateLayout.for_params(params).check_length(du, "du")
        du[:] = DriftField.drift(u, params, t)


covariance_drift = DriftField.covariance_drift
flux_drift = DriftField.flux_drift
memory_drift = DriftField.memory_drift
structured_drift = DriftField.structured_drift
drift = DriftField.drift
drift_into = DriftField.drift_into
