################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Numerical helpers for symmetric positive-definite matrices."""

from covariance_dynamics.math_utils.spd import NumericalBreakdown
from covariance_dynamics.math_utils.spd import project_to_spd
from covariance_dynamics.math_utils.spd import symmetrize


__all__ = [
    "NumericalBreakdown",
    "project_to_spd",
    "symmetrize",
]
