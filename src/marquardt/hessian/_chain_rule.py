from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ._base import HessianEngine, ThreadSettings, gauss_newton_terms

__all__ = ["ChainRuleHessian", "network_jacobian"]


def network_jacobian(network, params, inputs):
    """Outputs and output Jacobians of a network by back-propagation.

    Parameters
    ----------
    network : FeedForwardNetwork
        Network defining the layer structure and activations.
    params : ndarray, shape (n_weights,)
        Flat parameter vector at which to evaluate.
    inputs : ndarray, shape (batch, n_in)
        Batch of network inputs.

    Returns
    -------
    outputs : ndarray, shape (batch, n_out)
        Network outputs.
    jac : ndarray, shape (batch, n_out, n_weights)
        Derivative of every output with respect to every parameter, in the
        same order as the flat parameter vector.
    """
    zs, acts = network.forward_trace(params, inputs)
    layers = network.unpack(params)

    # delta[b, o, j] = d(output o) / d(pre-activation j of the current layer)
    out_deriv = network.activations[-1].derivative(zs[-1], acts[-1])
    delta = np.eye(network.output_count)[None, :, :] * out_deriv[:, None, :]

    parts = []
    for l in reversed(range(len(layers))):
        W, _b = layers[l]
        a_prev = acts[l]
        batch, n_out, n_l = delta.shape
        dW = np.einsum("boj,bi->boji", delta, a_prev).reshape(
            batch, n_out, n_l * a_prev.shape[1]
        )
        parts.append(delta)  # bias
        parts.append(dW)
        if l > 0:
            deriv = network.activations[l - 1].derivative(zs[l - 1], acts[l])
            delta = (delta @ W) * deriv[:, None, :]

    return acts[-1], np.concatenate(parts[::-1], axis=2)


class ChainRuleHessian(HessianEngine):
    """Gauss-Newton Hessian with Jacobians from the chain rule.

    The training set is split into contiguous chunks that are processed by a
    pool of worker threads.  Each worker returns its partial Hessian, gradient
    and SSE, and the partial results are summed once all workers finish.

    Parameters
    ----------
    thread_count : int, optional
        Number of worker threads.  Zero (the default) uses one worker per
        CPU; one evaluates everything on the calling thread.
    """

    def __init__(self, thread_count: int = 0):
        super().__init__()
        self.threads = ThreadSettings(thread_count)

    def _compute_chunk(self, params, start, stop):
        training = self.training
        outputs, jac = network_jacobian(
            self.network, params, training.inputs[start:stop]
        )
        errors = training.ideals[start:stop] - outputs
        return gauss_newton_terms(jac, errors, training.significance[start:stop])

    def _compute(self, params):
        n = len(self.training)
        workers = min(self.threads.resolve(), n)
        if workers <= 1:
            return self._compute_chunk(params, 0, n)

        bounds = np.linspace(0, n, workers + 1).astype(int)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._compute_chunk, params, start, stop)
                for start, stop in zip(bounds[:-1], bounds[1:])
            ]
            parts = [future.result() for future in futures]

        hessian = sum(part[0] for part in parts)
        gradient = sum(part[1] for part in parts)
        sse = sum(part[2] for part in parts)
        return hessian, gradient, sse

    def __repr__(self):
        return f"ChainRuleHessian(thread_count={self.threads.count})"
