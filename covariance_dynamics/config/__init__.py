################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Model parameter configuration."""

from covariance_dynamics.config.model_params import ConfigurationError
from covariance_dynamics.config.model_params import CovMemoryParams


__all__ = [
    "ConfigurationError",
    "CovMemoryParams",
]
