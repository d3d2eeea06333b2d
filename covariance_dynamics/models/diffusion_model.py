################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Structured stochastic forcing of the lifted covariance model."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.math_utils.spd import NumericalBreakdown
from covariance_dynamics.math_utils.spd import symmetric_sqrt
from covariance_dynamics.state.model_state import CovMemoryState
from covariance_dynamics.state.model_state import StateIncrement
from covariance_dynamics.state.state_layout import StateLayout
from covariance_dynamics.state.state_layout import flatten


@dataclass(frozen=True)
class DiffusionDiagnostics:
    """Magnitudes of the diffusion components at one state.

    Attributes:
        covariance_norm: Spectral norm of the covariance diffusion
        flux_abs: Absolute flux diffusion coefficient
        memory_abs: Absolute memory diffusion coefficient, always zero
    """

    covariance_norm: float
    flux_abs: float
    memory_abs: float


class DiffusionField:
    """Diagonal-noise diffusion coefficients of the lifted model.

    Equations:
        Sigma_C(C) = eps (S U + U S),  S = C^(1/2)
        sigma_psi(psi) = sigma_psi sqrt(max(psi, 0))
        sigma_I = 0

    The square root S is taken from the Cholesky factor of C. A failed
    factorization means C has already left the SPD cone; it is raised as
    NumericalBreakdown and never repaired here, since repair belongs to the
    invariant guard between steps.

    The max() in the flux term absorbs roundoff inside one evaluation only.
    Systematic negativity of psi is left for the guard.
    """

    @staticmethod
    def covariance_diffusion(C: np.ndarray, params: CovMemoryParams) -> np.ndarray:
        """Return eps (S U + U S) with S the symmetric square root of C."""
        S: np.ndarray = symmetric_sqrt(C)
        return params.eps * (S @ params.U + params.U @ S)

    @staticmethod
    def flux_diffusion(psi: float, params: CovMemoryParams) -> float:
        """Return the CIR diffusion coefficient of psi."""
        return params.sigma_psi * math.sqrt(max(psi, 0.0))

    @staticmethod
    def memory_diffusion(params: CovMemoryParams) -> float:
        """Return the memory diffusion coefficient, identically zero."""
        _ = params
        return 0.0

    @staticmethod
    def structured_diffusion(
        state: CovMemoryState, params: CovMemoryParams
    ) -> StateIncrement:
        """Return the diffusion coefficients of a structured state."""
        return StateIncrement(
            C=DiffusionField.covariance_diffusion(state.C, params),
            psi=DiffusionField.flux_diffusion(state.psi, params),
            I=DiffusionField.memory_diffusion(params),
        )

    @staticmethod
    def diffusion(
        u: np.ndarray, params: CovMemoryParams, t: float = 0.0
    ) -> np.ndarray:
        """Return the flat diffusion vector for a flat state vector u."""
        _ = t
        layout: StateLayout = StateLayout.for_params(params)
        layout.check_length(u)

        C: np.ndarray = layout.covariance(u)
        psi: float = layout.flux(u)

        increment: StateIncrement = StateIncrement(
            C=DiffusionField.covariance_diffusion(C, params),
            psi=DiffusionField.flux_diffusion(psi, params),
            I=DiffusionField.memory_diffusion(params),
        )
        du: np.ndarray = flatten(increment)
        if not np.all(np.isfinite(du)):
            raise NumericalBreakdown("diffusion produced non-finite values")
        return du

    @staticmethod
    def diffusion_into(
        du: np.ndarray, u: np.ndarray, params: CovMemoryParams, t: float = 0.0
    ) -> None:
        """Write the flat diffusion of u into the caller's buffer du."""
        StateLayout.for_params(params).check_length(du, "du")
        du[:] = DiffusionField.diffusion(u, params, t)

    @staticmethod
    def diagnostics(
        state: CovMemoryState, params: CovMemoryParams
    ) -> DiffusionDiagnostics:
        """Return component magnitudes of the diffusion at a state."""
        increment: StateIncrement = DiffusionField.structured_diffusion(state, params)
        return DiffusionDiagnostics(
            covariance_norm=float(np.linalg.norm(increment.C, ord=2)),
            flux_abs=abs(increment.psi),
            memory_abs=abs(increment.I),
        )


covariance_diffusion = DiffusionField.covariance_diffusion
flux_diffusion = DiffusionField.flux_diffusion
memory_diffusion = DiffusionField.memory_diffusion
structured_diffusion = DiffusionField.structured_diffusion
diffusion = DiffusionField.diffusion
diffusion_into = DiffusionField.diffusion_into
diffusion_diagnostics = DiffusionField.diagnostics
