from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from marquardt.data import TrainingSet
    from marquardt.network import FeedForwardNetwork

__all__ = ["ErrorCalculation", "calculate_sse"]


class ErrorCalculation:
    """Accumulate significance-weighted squared errors.

    The sum-squared error is defined as

        SSE = 0.5 * sum_k sum_j s_k * (ideal_kj - actual_kj)^2

    where ``s_k`` is the significance of sample ``k``.  The Hessian engines
    report their SSE with the same definition, so the two can be compared
    directly.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.global_error = 0.0
        self.set_size = 0

    def update_error(self, actual, ideal, significance=1.0) -> None:
        """Add the error of one sample, or of a batch of samples.

        Args:
            actual: network output, shape ``(n_out,)`` or ``(batch, n_out)``
            ideal: target output with the same shape as ``actual``
            significance: scalar, or one weight per sample of the batch
        """
        actual = np.atleast_2d(actual)
        ideal = np.atleast_2d(ideal)
        if actual.shape != ideal.shape:
            raise ValueError(
                f"Output shape {actual.shape} does not match ideal shape {ideal.shape}"
            )
        significance = np.broadcast_to(
            np.asarray(significance, dtype=float), (actual.shape[0],)
        )
        delta = ideal - actual
        self.global_error += float(np.sum(significance[:, None] * delta**2))
        self.set_size += delta.size

    def calculate_sse(self) -> float:
        return 0.5 * self.global_error

    def calculate_mse(self) -> float:
        if self.set_size == 0:
            return 0.0
        return self.global_error / self.set_size

    def calculate_rms(self) -> float:
        return float(np.sqrt(self.calculate_mse()))


def calculate_sse(network: FeedForwardNetwork, training: TrainingSet) -> float:
    """SSE of the network over the whole training set at its current parameters."""
    result = ErrorCalculation()
    for pair in training:
        actual = network.compute(pair.input)
        result.update_error(actual, pair.ideal, pair.significance)
    return result.calculate_sse()
