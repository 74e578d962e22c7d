from __future__ import annotations

import abc
import os
from typing import TYPE_CHECKING

import numpy as np

from marquardt.data import validate_network_to_data

if TYPE_CHECKING:
    from marquardt.data import TrainingSet
    from marquardt.network import FeedForwardNetwork

__all__ = [
    "HessianEngine",
    "ThreadSettings",
    "gauss_newton_terms",
]


class ThreadSettings:
    """Thread count of a Hessian engine that can run multithreaded.

    A count of zero selects the number of workers automatically.
    """

    def __init__(self, count: int = 0):
        self.count = count

    @property
    def count(self) -> int:
        return self._count

    @count.setter
    def count(self, value: int):
        value = int(value)
        if value < 0:
            raise ValueError(f"Thread count must be non-negative, got {value}")
        self._count = value

    def resolve(self) -> int:
        """Number of workers to actually use."""
        if self._count == 0:
            return os.cpu_count() or 1
        return self._count

    def __repr__(self):
        return f"ThreadSettings(count={self._count})"


def gauss_newton_terms(jac, errors, significance):
    """Gauss-Newton contributions of a batch of samples.

    Args:
        jac: output Jacobians, shape ``(batch, n_out, n_weights)``
        errors: ``ideal - actual``, shape ``(batch, n_out)``
        significance: per-sample weights, shape ``(batch,)``

    Returns:
        hessian: ``sum_k s_k J_k^T J_k``
        gradient: ``sum_k s_k J_k^T e_k``
        sse: ``0.5 * sum_k s_k |e_k|^2``
    """
    weighted = significance[:, None, None] * jac
    hessian = np.einsum("bow,bov->wv", weighted, jac)
    gradient = np.einsum("bow,bo->w", weighted, errors)
    sse = 0.5 * float(np.sum(significance[:, None] * errors**2))
    return hessian, gradient, sse


class HessianEngine(metaclass=abc.ABCMeta):
    """Computes the Gauss-Newton Hessian, gradient and SSE of a network.

    Concrete engines differ only in how the Jacobian of the network outputs
    with respect to the parameters is obtained.  After :py:meth:`compute`:

    - ``hessian`` holds ``J^T S J``, a symmetric ``(n, n)`` array that callers
      may modify in place (e.g. to damp the diagonal)
    - ``gradient`` holds ``J^T S (ideal - actual)``, the direction that reduces
      the error
    - ``sse`` holds the sum-squared error at the current parameters

    where ``S`` is the diagonal matrix of sample significances.

    Engines that can split the work across threads expose a
    :py:class:`ThreadSettings` instance as ``threads``; for all others
    ``threads`` is ``None``.
    """

    threads: ThreadSettings | None = None

    def __init__(self):
        self.network = None
        self.training = None
        self.hessian = np.zeros((0, 0))
        self.gradient = np.zeros(0)
        self.sse = 0.0

    def initialize(self, network: FeedForwardNetwork, training: TrainingSet) -> None:
        """Attach the engine to a network and training set.

        Raises
        ------
        ConfigurationError
            If the training data does not fit the network, or the network does
            not fit this engine.
        """
        validate_network_to_data(network, training)
        self.network = network
        self.training = training
        n = network.weight_count
        self.hessian = np.zeros((n, n))
        self.gradient = np.zeros(n)
        self.sse = 0.0

    def clear(self) -> None:
        """Reset the accumulated Hessian, gradient and SSE."""
        self.hessian.fill(0.0)
        self.gradient.fill(0.0)
        self.sse = 0.0

    def compute(self) -> None:
        """Fill ``hessian``, ``gradient`` and ``sse`` at the current parameters."""
        if self.network is None:
            raise RuntimeError(
                f"{type(self).__name__} must be initialized before computing"
            )
        hessian, gradient, sse = self._compute(self.network.to_array())
        # Write into the existing buffers so references stay valid
        self.hessian[...] = hessian
        self.gradient[...] = gradient
        self.sse = sse

    @abc.abstractmethod
    def _compute(self, params: np.ndarray):
        """Return ``(hessian, gradient, sse)`` for the given parameters."""

    @property
    def weight_count(self) -> int:
        return self.gradient.size

    def __repr__(self):
        return f"{type(self).__name__}()"
