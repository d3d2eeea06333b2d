################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Post-step invariant guard."""

from covariance_dynamics.guard.invariant_guard import GuardCheck
from covariance_dynamics.guard.invariant_guard import GuardReport
from covariance_dynamics.guard.invariant_guard import InvariantGuard


__all__ = [
    "GuardCheck",
    "GuardReport",
    "InvariantGuard",
]
