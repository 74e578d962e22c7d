from __future__ import annotations

import copy
from typing import Sequence

import casadi as cs
import numpy as np

from ._activation import Activation, get_activation

__all__ = ["FeedForwardNetwork"]


class FeedForwardNetwork:
    """Fully-connected feed-forward network with a flat parameter vector.

    Every layer computes ``a_l = f_l(W_l a_{l-1} + b_l)``.  All trainable values
    are stored in a single 1D array, laid out layer by layer as the row-major
    weight matrix ``W_l`` (shape ``(n_l, n_{l-1})``) followed by the bias
    ``b_l``.  Trainers read and write the parameters only through
    :py:meth:`to_array` and :py:meth:`from_array`.

    Parameters
    ----------
    layers : sequence of int
        Number of neurons in each layer, starting with the input layer and
        ending with the output layer.  At least two layers are required.
    activation : str or Activation, optional
        Activation of the hidden layers.  Default is ``"tanh"``.
    output_activation : str or Activation, optional
        Activation of the output layer.  Default is ``"linear"``.

    Examples
    --------
    >>> net = FeedForwardNetwork([2, 3, 1])
    >>> net.weight_count
    13
    >>> net.randomize(seed=0)
    >>> net.compute(np.array([0.0, 1.0])).shape
    (1,)
    """

    def __init__(
        self,
        layers: Sequence[int],
        activation: str | Activation = "tanh",
        output_activation: str | Activation = "linear",
    ):
        layers = tuple(int(n) for n in layers)
        if len(layers) < 2:
            raise ValueError(
                f"A network needs at least an input and an output layer, got {layers}"
            )
        if any(n < 1 for n in layers):
            raise ValueError(f"Layer sizes must be positive, got {layers}")

        self.layers = layers
        hidden = get_activation(activation)
        self.activations: tuple[Activation, ...] = tuple(
            [hidden] * (len(layers) - 2) + [get_activation(output_activation)]
        )

        # (weight offset, bias offset, end) for each layer
        self._slices = []
        offset = 0
        for n_in, n_out in zip(layers[:-1], layers[1:]):
            w_end = offset + n_out * n_in
            self._slices.append((offset, w_end, w_end + n_out))
            offset = w_end + n_out

        self._params = np.zeros(offset)

    @property
    def input_count(self) -> int:
        return self.layers[0]

    @property
    def output_count(self) -> int:
        return self.layers[-1]

    @property
    def weight_count(self) -> int:
        """Total number of trainable weights and biases."""
        return self._params.size

    def to_array(self) -> np.ndarray:
        """Return a copy of the current parameter vector."""
        return self._params.copy()

    def from_array(self, params) -> None:
        """Replace the parameter vector with a copy of ``params``."""
        params = np.asarray(params, dtype=float)
        if params.shape != self._params.shape:
            raise ValueError(
                f"Expected a parameter vector of shape {self._params.shape}, "
                f"got {params.shape}"
            )
        self._params = params.copy()

    def randomize(self, seed=None, scale: float = 1.0) -> None:
        """Draw all parameters uniformly from ``[-scale, scale]``."""
        rng = np.random.default_rng(seed)
        self._params = rng.uniform(-scale, scale, size=self.weight_count)

    def copy(self) -> FeedForwardNetwork:
        """Independent copy with the same structure and parameters."""
        net = copy.copy(self)
        net._params = self._params.copy()
        return net

    def unpack(self, params: np.ndarray) -> list[tuple[np.ndarray, np.ndarray]]:
        """Split a flat parameter vector into ``(W, b)`` views for each layer."""
        unpacked = []
        for (n_in, n_out), (w0, b0, end) in zip(
            zip(self.layers[:-1], self.layers[1:]), self._slices
        ):
            unpacked.append((params[w0:b0].reshape(n_out, n_in), params[b0:end]))
        return unpacked

    def forward_trace(self, params: np.ndarray, inputs: np.ndarray):
        """Evaluate a batch and keep the intermediate values of every layer.

        Args:
            params: flat parameter vector
            inputs: batch of inputs, shape ``(batch, input_count)``

        Returns:
            zs: pre-activations of each layer, each of shape ``(batch, n_l)``
            activations: layer outputs, starting with ``inputs`` itself, so
                that ``activations[-1]`` is the network output
        """
        a = inputs
        zs, activations = [], [a]
        for (W, b), f in zip(self.unpack(params), self.activations):
            z = a @ W.T + b
            a = f(z)
            zs.append(z)
            activations.append(a)
        return zs, activations

    def evaluate(self, params, inputs) -> np.ndarray:
        """Evaluate the network for an arbitrary parameter vector.

        ``inputs`` may be a single vector of length ``input_count`` or a batch
        of shape ``(batch, input_count)``; the output has the matching rank.
        """
        inputs = np.asarray(inputs, dtype=float)
        single = inputs.ndim == 1
        batch = np.atleast_2d(inputs)
        if batch.ndim != 2 or batch.shape[1] != self.input_count:
            raise ValueError(
                f"Expected inputs with {self.input_count} columns, got shape "
                f"{inputs.shape}"
            )
        _, activations = self.forward_trace(np.asarray(params, dtype=float), batch)
        out = activations[-1]
        return out[0] if single else out

    def compute(self, inputs) -> np.ndarray:
        """Evaluate the network at its current parameters."""
        return self.evaluate(self._params, inputs)

    def symbolic(self, x, w):
        """Build the network output as a CasADi expression.

        Args:
            x: symbolic input column, shape ``(input_count, 1)``
            w: symbolic parameter column, shape ``(weight_count, 1)``

        Returns:
            Symbolic output column of shape ``(output_count, 1)``.
        """
        a = x
        for (n_in, n_out), (w0, b0, end), f in zip(
            zip(self.layers[:-1], self.layers[1:]), self._slices, self.activations
        ):
            # CasADi reshapes column-major, so the transpose recovers the
            # row-major layout of the flat parameter vector.
            W = cs.reshape(w[w0:b0], n_in, n_out).T
            a = f.symbolic(cs.mtimes(W, a) + w[b0:end])
        return a

    def __repr__(self):
        names = ", ".join(f.name for f in self.activations)
        return f"FeedForwardNetwork(layers={list(self.layers)}, activations=[{names}])"
