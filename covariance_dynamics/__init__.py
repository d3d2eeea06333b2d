################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################


"""Stochastic covariance dynamics on the SPD cone with a Markovian memory lift.

The flat state layout shared with external integrators is
[row-major vec(C), psi, I], of length n^2 + 2.
"""

from covariance_dynamics.config.model_params import ConfigurationError
from covariance_dynamics.config.model_params import CovMemoryParams
from covariance_dynamics.diagnostics.trajectory import ConsistencyReport
from covariance_dynamics.diagnostics.trajectory import condition_number_trajectory
from covariance_dynamics.diagnostics.trajectory import consistency_report
from covariance_dynamics.diagnostics.trajectory import ergodicity_error
from covariance_dynamics.diagnostics.trajectory import lyapunov_trajectory
from covariance_dynamics.diagnostics.trajectory import min_eigen_trajectory
from covariance_dynamics.diagnostics.trajectory import state_time_average
from covariance_dynamics.diagnostics.trajectory import time_average
from covariance_dynamics.guard.invariant_guard import GuardCheck
from covariance_dynamics.guard.invariant_guard import GuardReport
from covariance_dynamics.guard.invariant_guard import InvariantGuard
from covariance_dynamics.guard.invariant_guard import auxiliary_guard
from covariance_dynamics.guard.invariant_guard import default_combined_guard
from covariance_dynamics.guard.invariant_guard import spd_guard
from covariance_dynamics.guard.invariant_guard import violates_invariants
from covariance_dynamics.math_utils.spd import NumericalBreakdown
from covariance_dynamics.math_utils.spd import project_to_spd
from covariance_dynamics.models.diffusion_model import DiffusionField
from covariance_dynamics.models.diffusion_model import covariance_diffusion
from covariance_dynamics.models.diffusion_model import diffusion
from covariance_dynamics.models.diffusion_model import diffusion_into
from covariance_dynamics.models.diffusion_model import flux_diffusion
from covariance_dynamics.models.drift_model import DriftField
from covariance_dynamics.models.drift_model import drift
from covariance_dynamics.models.drift_model import drift_into
from covariance_dynamics.models.kernels import CorrelationLaplacian
from covariance_dynamics.models.kernels import ExponentialMemory
from covariance_dynamics.models.operators import curvature
from covariance_dynamics.models.operators import laplacian
from covariance_dynamics.models.operators import transport
from covariance_dynamics.problem.problem import ProblemAssemblyError
from covariance_dynamics.problem.problem import ProblemHandle
from covariance_dynamics.problem.problem import assemble_default_problem
from covariance_dynamics.problem.problem import assemble_ode_problem
from covariance_dynamics.problem.problem import assemble_problem
from covariance_dynamics.problem.problem import build_initial_state
from covariance_dynamics.state.model_state import CovMemoryState
from covariance_dynamics.state.model_state import InvalidStateError
from covariance_dynamics.state.model_state import StateIncrement
from covariance_dynamics.state.model_state import lyapunov
from covariance_dynamics.state.state_layout import DimensionError
from covariance_dynamics.state.state_layout import StateLayout
from covariance_dynamics.state.state_layout import flatten
from covariance_dynamics.state.state_layout import get_covariance
from covariance_dynamics.state.state_layout import get_flux
from covariance_dynamics.state.state_layout import get_memory
from covariance_dynamics.state.state_layout import state_dimension
from covariance_dynamics.state.state_layout import unflatten


__all__ = [
    "ConfigurationError",
    "ConsistencyReport",
    "CorrelationLaplacian",
    "CovMemoryParams",
    "CovMemoryState",
    "DiffusionField",
    "DimensionError",
    "DriftField",
    "ExponentialMemory",
    "GuardCheck",
    "GuardReport",
    "InvalidStateError",
    "InvariantGuard",
    "NumericalBreakdown",
    "ProblemAssemblyError",
    "ProblemHandle",
    "StateIncrement",
    "StateLayout",
    "assemble_default_problem",
    "assemble_ode_problem",
    "assemble_problem",
    "auxiliary_guard",
    "build_initial_state",
    "condition_number_trajectory",
    "consistency_report",
    "covariance_diffusion",
    "curvature",
    "default_combined_guard",
    "diffusion",
    "diffusion_into",
    "drift",
    "drift_into",
    "ergodicity_error",
    "flatten",
    "flux_diffusion",
    "get_covariance",
    "get_flux",
    "get_memory",
    "laplacian",
    "lyapunov",
    "lyapunov_trajectory",
    "min_eigen_trajectory",
    "project_to_spd",
    "spd_guard",
    "state_dimension",
    "state_time_average",
    "time_average",
    "transport",
    "unflatten",
    "violates_invariants",
]
