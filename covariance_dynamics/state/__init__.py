################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Structured state and flat vector layout."""

from covariance_dynamics.state.model_state import CovMemoryState
from covariance_dynamics.state.model_state import InvalidStateError
from covariance_dynamics.state.model_state import StateIncrement
from covariance_dynamics.state.state_layout import DimensionError
from covariance_dynamics.state.state_layout import StateLayout


__all__ = [
    "CovMemoryState",
    "DimensionError",
    "InvalidStateError",
    "StateIncrement",
    "StateLayout",
]
