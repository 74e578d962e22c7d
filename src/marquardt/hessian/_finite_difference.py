from __future__ import annotations

import numpy as np

from marquardt.error import ConfigurationError

from ._base import HessianEngine, gauss_newton_terms

__all__ = ["FiniteDifferenceHessian"]


class FiniteDifferenceHessian(HessianEngine):
    """Gauss-Newton Hessian with Jacobians from central differences.

    Each parameter is perturbed by ``h = step * max(1, |w_i|)`` in both
    directions and the network is evaluated on a perturbed copy of the
    parameter vector, so the network's installed parameters are never changed.
    This engine runs on the calling thread only and is limited to networks
    with a single output neuron.

    Parameters
    ----------
    step : float, optional
        Relative perturbation size.  Default is 1e-6.
    """

    def __init__(self, step: float = 1e-6):
        super().__init__()
        if not step > 0.0:
            raise ValueError(f"Finite difference step must be positive, got {step}")
        self.step = step

    def initialize(self, network, training) -> None:
        if network.output_count != 1:
            raise ConfigurationError(
                f"{type(self).__name__} requires a network with a single output "
                f"neuron, got {network.output_count}"
            )
        super().initialize(network, training)

    def _compute(self, params):
        network = self.network
        inputs = self.training.inputs
        outputs = network.evaluate(params, inputs)

        jac = np.empty((len(self.training), network.output_count, params.size))
        for i in range(params.size):
            h = self.step * max(1.0, abs(params[i]))
            plus, minus = params.copy(), params.copy()
            plus[i] += h
            minus[i] -= h
            jac[:, :, i] = (
                network.evaluate(plus, inputs) - network.evaluate(minus, inputs)
            ) / (2.0 * h)

        errors = self.training.ideals - outputs
        return gauss_newton_terms(jac, errors, self.training.significance)

    def __repr__(self):
        return f"FiniteDifferenceHessian(step={self.step})"
