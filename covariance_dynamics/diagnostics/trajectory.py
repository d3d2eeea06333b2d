################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Read-only diagnostics over saved trajectories of flat state vectors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from typing import Iterable

import numpy as np

from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.math_utils.spd import min_eigenvalue
from covariance_dynamics.math_utils.spd import symmetrize
from covariance_dynamics.state.model_state import CovMemoryState
from covariance_dynamics.state.state_layout import get_covariance
from covariance_dynamics.state.state_layout import lyapunov_from_vector
from covariance_dynamics.state.state_layout import unflatten


VectorObservable = Callable[[np.ndarray, CovMemoryParams], float]
StateObservable = Callable[[CovMemoryState], float]


class TrajectoryError(Exception):
    """Raised when a trajectory cannot be analyzed."""


@dataclass(frozen=True)
class ConsistencyReport:
    """Summary of numerical consistency along a trajectory.

    Attributes:
        lyapunov_mean: Mean of V over the samples
        min_eigen_min: Smallest covariance eigenvalue seen
        condition_max: Largest covariance condition number seen
        ergodicity_lyapunov: Ergodicity error of V
    """

    lyapunov_mean: float
    min_eigen_min: float
    condition_max: float
    ergodicity_lyapunov: float


def _samples(trajectory: Iterable[np.ndarray]) -> list[np.ndarray]:
    """Return the trajectory as a non-empty list of 1D arrays."""
    samples: list[np.ndarray] = [
        np.asarray(u, dtype=np.float64) for u in trajectory
    ]
    if not samples:
        raise TrajectoryError("trajectory must contain at least one sample")
    return samples


def lyapunov_trajectory(
    trajectory: Iterable[np.ndarray], params: CovMemoryParams
) -> np.ndarray:
    """Return V(u_i) for every sample."""
    return np.array(
        [lyapunov_from_vector(u, params) for u in _samples(trajectory)],
        dtype=np.float64,
    )


def min_eigen_trajectory(
    trajectory: Iterable[np.ndarray], params: CovMemoryParams
) -> np.ndarray:
    """Return the minimum eigenvalue of C for every sample."""
    return np.array(
        [
            min_eigenvalue(get_covariance(u, params))
            for u in _samples(trajectory)
        ],
        dtype=np.float64,
    )


def condition_number_trajectory(
    trajectory: Iterable[np.ndarray], params: CovMemoryParams
) -> np.ndarray:
    """Return the 2-norm condition number of C for every sample."""
    return np.array(
        [
            float(np.linalg.cond(symmetrize(get_covariance(u, params))))
            for u in _samples(trajectory)
        ],
        dtype=np.float64,
    )


def time_average(
    trajectory: Iterable[np.ndarray],
    params: CovMemoryParams,
    observable: VectorObservable,
) -> float:
    """Return the sample mean of observable(u, params)."""
    values: np.ndarray = _evaluate(trajectory, params, observable)
    return float(np.mean(values))


def state_time_average(
    trajectory: Iterable[np.ndarray],
    params: CovMemoryParams,
    observable: StateObservable,
) -> float:
    """Return the sample mean of observable(state) over unflattened states."""
    values: list[float] = [
        float(observable(unflatten(u, params))) for u in _samples(trajectory)
    ]
    return float(np.mean(values))


def ergodicity_error(
    trajectory: Iterable[np.ndarray],
    params: CovMemoryParams,
    observable: VectorObservable,
) -> float:
    """Return max_k |running mean up to k - overall mean| of an observable."""
    values: np.ndarray = _evaluate(trajectory, params, observable)
    running: np.ndarray = np.cumsum(values) / np.arange(1, values.size + 1)
    return float(np.max(np.abs(running - np.mean(values))))


def consistency_report(
    trajectory: Iterable[np.ndarray], params: CovMemoryParams
) -> ConsistencyReport:
    """Return the numerical consistency summary of a trajectory."""
    samples: list[np.ndarray] = _samples(trajectory)
    return ConsistencyReport(
        lyapunov_mean=float(np.mean(lyapunov_trajectory(samples, params))),
        min_eigen_min=float(np.min(min_eigen_trajectory(samples, params))),
        condition_max=float(np.max(condition_number_trajectory(samples, params))),
        ergodicity_lyapunov=ergodicity_error(samples, params, lyapunov_from_vector),
    )


def _evaluate(
    trajectory: Iterable[np.ndarray],
    params: CovMemoryParams,
    observable: VectorObservable,
) -> np.ndarray:
    """Evaluate a vector observable on every sample."""
    return np.array(
        [float(observable(u, params)) for u in _samples(trajectory)],
        dtype=np.float64,
    )
