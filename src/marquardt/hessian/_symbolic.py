from __future__ import annotations

import casadi as cs
import numpy as np

from ._base import HessianEngine, ThreadSettings, gauss_newton_terms

__all__ = ["SymbolicHessian"]


class SymbolicHessian(HessianEngine):
    """Gauss-Newton Hessian with Jacobians from CasADi automatic differentiation.

    On initialization the network output is built as a CasADi ``SX``
    expression of one input vector and the parameter vector, and differentiated
    symbolically.  Each call to :py:meth:`compute` evaluates the resulting
    function over every training sample with ``Function.map``, using the
    ``"thread"`` parallelization when more than one worker is requested.

    Parameters
    ----------
    thread_count : int, optional
        Maximum number of CasADi worker threads.  Zero (the default) uses one
        worker per CPU.
    """

    def __init__(self, thread_count: int = 0):
        super().__init__()
        self.threads = ThreadSettings(thread_count)
        self._func = None
        self._mapped = None
        self._mapped_workers = None

    def initialize(self, network, training) -> None:
        super().initialize(network, training)

        x = cs.SX.sym("x", network.input_count)
        w = cs.SX.sym("w", network.weight_count)
        y = network.symbolic(x, w)
        self._func = cs.Function(
            "network_jacobian",
            [x, w],
            [y, cs.jacobian(y, w)],
            ["x", "w"],
            ["y", "jac"],
        )
        self._mapped = None

    def _mapped_func(self):
        # Rebuild only when the requested thread count changes
        workers = self.threads.resolve()
        if self._mapped is None or workers != self._mapped_workers:
            n = len(self.training)
            if workers > 1:
                self._mapped = self._func.map(n, "thread", workers)
            else:
                self._mapped = self._func.map(n, "serial")
            self._mapped_workers = workers
        return self._mapped

    def _compute(self, params):
        n = len(self.training)
        n_out = self.network.output_count
        n_w = params.size
        if n == 0:
            return np.zeros((n_w, n_w)), np.zeros(n_w), 0.0

        # Mapped functions take one column per sample and concatenate the
        # outputs horizontally.
        X = np.ascontiguousarray(self.training.inputs.T)
        W = np.tile(params[:, None], (1, n))
        y, jac = self._mapped_func()(X, W)

        outputs = y.full().reshape(n_out, n).T
        jac = jac.full().reshape(n_out, n, n_w).transpose(1, 0, 2)

        errors = self.training.ideals - outputs
        return gauss_newton_terms(jac, errors, self.training.significance)

    def __repr__(self):
        return f"SymbolicHessian(thread_count={self.threads.count})"
