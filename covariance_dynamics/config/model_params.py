################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of covariance-dynamics
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Immutable, validated parameter set of the covariance-memory model."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import fields
from dataclasses import replace
from typing import Any

import numpy as np

from covariance_dynamics.math_utils.validation import as_finite_float
from covariance_dynamics.math_utils.validation import as_square_matrix
from covariance_dynamics.math_utils.validation import is_symmetric
from covariance_dynamics.models.kernels import CorrelationLaplacian
from covariance_dynamics.models.kernels import ExponentialMemory
from covariance_dynamics.models.kernels import InteractionOperator
from covariance_dynamics.models.kernels import KernelError
from covariance_dynamics.models.kernels import MemoryKernel


# Covariance mean-reversion rate used by defaults()
DEFAULT_LAMBDA: float = 1.0
# Flux decay rate used by defaults()
DEFAULT_BETA: float = 1.0
# Flux noise intensity used by defaults()
DEFAULT_SIGMA_PSI: float = 0.2
# Covariance noise intensity used by defaults()
DEFAULT_EPS: float = 0.1
# Memory decay rate used by defaults()
DEFAULT_ETA: float = 2.0
# Interaction strength of the correlation Laplacian
DEFAULT_ALPHA: float = 1.0
# Saturate Laplacian edge weights with w / (1 + w)
DEFAULT_NORMALIZE: bool = True


class ConfigurationError(Exception):
    """Raised when model parameter validation fails."""


def _require_dimension(n: Any) -> int:
    """Return n as a Python int or raise unless it is a positive integer."""
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise ConfigurationError("n must be an int")
    if n <= 0:
        raise ConfigurationError("n must be positive")
    return int(n)


def _require_positive(value: float, name: str) -> None:
    """Require a positive value."""
    if value <= 0.0:
        raise ConfigurationError(f"{name} must be positive")


def _require_non_negative(value: float, name: str) -> None:
    """Require a non-negative value."""
    if value < 0.0:
        raise ConfigurationError(f"{name} must be non-negative")


def _coerce_float(value: Any, name: str) -> float:
    """Coerce a scalar parameter to a finite float."""
    try:
        return as_finite_float(value, name)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def _coerce_matrix(value: Any, n: int, name: str) -> np.ndarray:
    """Coerce a reference matrix to a read-only symmetric (n, n) array."""
    try:
        matrix: np.ndarray = as_square_matrix(value, name)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    if matrix.shape != (n, n):
        raise ConfigurationError(f"{name} must have shape ({n}, {n})")
    if not is_symmetric(matrix):
        raise ConfigurationError(f"{name} must be symmetric")
    matrix.setflags(write=False)
    return matrix


@dataclass(frozen=True)
class CovMemoryParams:
    """Parameters of the lifted covariance-flux-memory model.

    The object is validated once at construction and is immutable
    afterwards, including its matrices, so one instance can be shared by any
    number of concurrent trajectory evaluations.

    Attributes:
        n: Matrix dimension
        lam: Mean-reversion rate of the covariance
        C_bar: Reference covariance with shape (n, n)
        beta: Decay rate of the flux variable
        sigma_psi: Noise intensity of the flux variable
        eps: Noise intensity of the covariance
        U: Noise geometry matrix with shape (n, n)
        memory: Memory kernel carrying the decay rate eta, ExponentialMemory
            unless a custom MemoryKernel is supplied
        laplacian: Interaction operator carrying alpha and normalize,
            CorrelationLaplacian unless a custom InteractionOperator is
            supplied
    """

    n: int
    lam: float
    C_bar: np.ndarray
    beta: float
    sigma_psi: float
    eps: float
    U: np.ndarray
    memory: MemoryKernel
    laplacian: InteractionOperator

    def __post_init__(self) -> None:
        """Coerce arrays and scalars, then validate all invariants."""
        n: int = _require_dimension(self.n)
        object.__setattr__(self, "n", n)

        lam: float = _coerce_float(self.lam, "lam")
        beta: float = _coerce_float(self.beta, "beta")
        sigma_psi: float = _coerce_float(self.sigma_psi, "sigma_psi")
        eps: float = _coerce_float(self.eps, "eps")
        _require_positive(lam, "lam")
        _require_positive(beta, "beta")
        _require_non_negative(sigma_psi, "sigma_psi")
        _require_non_negative(eps, "eps")
        object.__setattr__(self, "lam", lam)
        object.__setattr__(self, "beta", beta)
        object.__setattr__(self, "sigma_psi", sigma_psi)
        object.__setattr__(self, "eps", eps)

        object.__setattr__(self, "C_bar", _coerce_matrix(self.C_bar, n, "C_bar"))
        object.__setattr__(self, "U", _coerce_matrix(self.U, n, "U"))

        if not isinstance(self.memory, MemoryKernel):
            raise ConfigurationError("memory must implement MemoryKernel")
        if not isinstance(self.laplacian, InteractionOperator):
            raise ConfigurationError("laplacian must implement InteractionOperator")

    @classmethod
    def create(
        cls,
        n: int,
        *,
        lam: float,
        C_bar: Any,
        beta: float,
        sigma_psi: float,
        eps: float,
        U: Any,
        eta: float,
        alpha: float = DEFAULT_ALPHA,
        normalize: bool = DEFAULT_NORMALIZE,
    ) -> CovMemoryParams:
        """Build parameters for the exponential-memory model."""
        try:
            memory: ExponentialMemory = ExponentialMemory(eta=eta)
            laplacian: CorrelationLaplacian = CorrelationLaplacian(
                alpha=alpha, normalize=normalize
            )
        except (KernelError, TypeError, ValueError) as exc:
            raise ConfigurationError(str(exc)) from exc
        return cls(
            n=n,
            lam=lam,
            C_bar=C_bar,
            beta=beta,
            sigma_psi=sigma_psi,
            eps=eps,
            U=U,
            memory=memory,
            laplacian=laplacian,
        )

    @classmethod
    def defaults(cls, n: int) -> CovMemoryParams:
        """Return the reference parameter set with identity C_bar and U."""
        eye: np.ndarray = np.eye(_require_dimension(n), dtype=np.float64)
        return cls.create(
            n,
            lam=DEFAULT_LAMBDA,
            C_bar=eye,
            beta=DEFAULT_BETA,
            sigma_psi=DEFAULT_SIGMA_PSI,
            eps=DEFAULT_EPS,
            U=eye.copy(),
            eta=DEFAULT_ETA,
        )

    @property
    def eta(self) -> float:
        """Return the memory decay rate."""
        return self.memory.decay_rate()

    @property
    def alpha(self) -> float:
        """Return the Laplacian interaction strength."""
        return self.laplacian.alpha

    @property
    def normalize(self) -> bool:
        """Return True when Laplacian weights are normalized."""
        return self.laplacian.normalize

    @property
    def dimension(self) -> int:
        """Return the length n^2 + 2 of the flat state vector."""
        return self.n * self.n + 2

    def replace(self, **overrides: Any) -> CovMemoryParams:
        """Return a revalidated copy with the given fields replaced."""
        return replace(self, **overrides)

    def as_nested_dict(self) -> dict[str, Any]:
        """Return a nested dict representation for debugging."""
        return _dataclass_to_dict(self)


def _dataclass_to_dict(value: Any) -> Any:
    """Convert dataclasses and numpy arrays into plain Python values."""
    if hasattr(value, "__dataclass_fields__"):
        return {
            field.name: _dataclass_to_dict(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value
