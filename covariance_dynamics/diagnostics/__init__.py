################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Trajectory diagnostics."""

from covariance_dynamics.diagnostics.trajectory import ConsistencyReport
from covariance_dynamics.diagnostics.trajectory import TrajectoryError


__all__ = [
    "ConsistencyReport",
    "TrajectoryError",
]
