################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Problem assembly for external integrators."""

from covariance_dynamics.problem.problem import ProblemAssemblyError
from covariance_dynamics.problem.problem import ProblemHandle


__all__ = [
    "ProblemAssemblyError",
    "ProblemHandle",
]
