################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Post-step detection and repair of invariant violations."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.math_utils.spd import SPD_FLOOR
from covariance_dynamics.math_utils.spd import min_eigenvalue
from covariance_dynamics.math_utils.spd import project_to_spd
from covariance_dynamics.math_utils.validation import SYM_TOL
from covariance_dynamics.math_utils.validation import is_symmetric
from covariance_dynamics.state.state_layout import StateLayout


_LOG: logging.Logger = logging.getLogger(__name__)


class GuardCheck(enum.Enum):
    """Invariant checks that a guard can run after a step."""

    SPD = "spd"
    AUXILIARY = "auxiliary"


@dataclass(frozen=True)
class GuardReport:
    """Outcome of one guard invocation.

    Attributes:
        spd_repaired: True when the covariance was projected onto the cone
        auxiliary_repaired: True when psi or I was clamped to zero
        min_eigenvalue: Smallest eigenvalue of C before any repair, when the
            SPD check ran and C was finite
    """

    spd_repaired: bool = False
    auxiliary_repaired: bool = False
    min_eigenvalue: float | None = None

    def any_repaired(self) -> bool:
        """Return True when at least one repair was applied."""
        return self.spd_repaired or self.auxiliary_repaired


def covariance_violation(C: np.ndarray) -> tuple[bool, float | None]:
    """Return (violated, min eigenvalue) for a covariance as stored.

    The eigenvalue is None when C is not finite, which always counts as a
    violation.
    """
    if not np.all(np.isfinite(C)):
        return True, None
    lam_min: float = min_eigenvalue(C)
    return not is_symmetric(C, tol=SYM_TOL) or lam_min <= 0.0, lam_min


def spd_violation(u: np.ndarray, params: CovMemoryParams) -> bool:
    """Return True when C is asymmetric or not positive-definite."""
    layout: StateLayout = StateLayout.for_params(params)
    layout.check_length(u)
    violated: bool
    violated, _ = covariance_violation(layout.covariance(u))
    return violated


def auxiliary_violation(u: np.ndarray, params: CovMemoryParams) -> bool:
    """Return True when psi or I is negative."""
    layout: StateLayout = StateLayout.for_params(params)
    layout.check_length(u)
    return layout.flux(u) < 0.0 or layout.memory(u) < 0.0


def enforce_spd(
    u: np.ndarray, params: CovMemoryParams, floor: float = SPD_FLOOR
) -> None:
    """Symmetrize and eigen-clip C, rewriting it in place."""
    layout: StateLayout = StateLayout.for_params(params)
    layout.write_covariance(u, project_to_spd(layout.covariance(u), floor))


def enforce_auxiliary(u: np.ndarray, params: CovMemoryParams) -> None:
    """Clamp psi and I to be non-negative, in place."""
    layout: StateLayout = StateLayout.for_params(params)
    C: np.ndarray = layout.covariance(u)
    layout.pack_into(u, C, max(layout.flux(u), 0.0), max(layout.memory(u), 0.0))


def violates_invariants(u: np.ndarray, params: CovMemoryParams) -> bool:
    """Return True when any invariant is violated. Never modifies u."""
    return spd_violation(u, params) or auxiliary_violation(u, params)


class InvariantGuard:
    """Post-step hook restoring the admissible state space.

    An external integrator calls the guard after each accepted step with
    its state buffer. Each enabled check runs in order and repairs the
    buffer in place only when it fires. Soft invariant drift is expected
    under explicit discretization and is therefore repaired, not raised.
    """

    def __init__(
        self,
        checks: Iterable[GuardCheck] = (GuardCheck.SPD, GuardCheck.AUXILIARY),
        *,
        floor: float = SPD_FLOOR,
    ) -> None:
        """Initialize the guard with its enabled checks and eigenvalue floor."""
        self._checks: tuple[GuardCheck, ...] = tuple(checks)
        for check in self._checks:
            if not isinstance(check, GuardCheck):
                raise ValueError("checks must be GuardCheck members")
        if len(set(self._checks)) != len(self._checks):
            raise ValueError("checks must be unique")
        if not np.isfinite(floor) or floor <= 0.0:
            raise ValueError("floor must be positive")
        self._floor: float = float(floor)

    def checks(self) -> tuple[GuardCheck, ...]:
        """Return the enabled checks in execution order."""
        return self._checks

    def floor(self) -> float:
        """Return the eigenvalue floor used for SPD repair."""
        return self._floor

    def __call__(
        self, u: np.ndarray, params: CovMemoryParams, t: float = 0.0
    ) -> GuardReport:
        """Run the enabled checks on u, repairing it in place."""
        layout: StateLayout = StateLayout.for_params(params)
        layout.check_length(u)

        spd_repaired: bool = False
        auxiliary_repaired: bool = False
        lam_min: float | None = None

        for check in self._checks:
            if check is GuardCheck.SPD:
                violated: bool
                violated, lam_min = covariance_violation(layout.covariance(u))
                if violated:
                    enforce_spd(u, params, self._floor)
                    spd_repaired = True
                    _LOG.debug(
                        "Projected covariance onto SPD cone at t=%s (min eig %s)",
                        t,
                        lam_min,
                    )
            elif check is GuardCheck.AUXILIARY:
                if auxiliary_violation(u, params):
                    _LOG.debug(
                        "Clamping auxiliaries at t=%s (psi=%s, I=%s)",
                        t,
                        layout.flux(u),
                        layout.memory(u),
                    )
                    enforce_auxiliary(u, params)
                    auxiliary_repaired = True

        return GuardReport(
            spd_repaired=spd_repaired,
            auxiliary_repaired=auxiliary_repaired,
            min_eigenvalue=lam_min,
        )


def spd_guard(floor: float = SPD_FLOOR) -> InvariantGuard:
    """Return a guard that only repairs the covariance."""
    return InvariantGuard((GuardCheck.SPD,), floor=floor)


def auxiliary_guard() -> InvariantGuard:
    """Return a guard that only clamps psi and I."""
    return InvariantGuard((GuardCheck.AUXILIARY,))


def default_combined_guard(floor: float = SPD_FLOOR) -> InvariantGuard:
    """Return the default guard running the SPD and auxiliary checks."""
    return InvariantGuard((GuardCheck.SPD, GuardCheck.AUXILIARY), floor=floor)
