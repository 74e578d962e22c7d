"""Activation functions with their derivatives and CasADi counterparts."""

from __future__ import annotations

import abc

import casadi as cs
import numpy as np

__all__ = [
    "Activation",
    "Linear",
    "Sigmoid",
    "Tanh",
    "ReLU",
    "ACTIVATIONS",
    "get_activation",
]


class Activation(metaclass=abc.ABCMeta):
    name: str

    @abc.abstractmethod
    def __call__(self, z: np.ndarray) -> np.ndarray:
        """Evaluate the activation elementwise."""

    @abc.abstractmethod
    def derivative(self, z: np.ndarray, a: np.ndarray) -> np.ndarray:
        """Derivative with respect to the pre-activation.

        Args:
            z: pre-activation values
            a: activation values, ``a = self(z)``

        Returns:
            Elementwise derivative ``da/dz``.
        """

    @abc.abstractmethod
    def symbolic(self, z):
        """Evaluate the activation on a CasADi symbolic expression."""

    def __repr__(self):
        return f"{type(self).__name__}()"


class Linear(Activation):
    name = "linear"

    def __call__(self, z):
        return z

    def derivative(self, z, a):
        return np.ones_like(z)

    def symbolic(self, z):
        return z


class Sigmoid(Activation):
    name = "sigmoid"

    def __call__(self, z):
        return 1.0 / (1.0 + np.exp(-z))

    def derivative(self, z, a):
        return a * (1.0 - a)

    def symbolic(self, z):
        return 1.0 / (1.0 + cs.exp(-z))


class Tanh(Activation):
    name = "tanh"

    def __call__(self, z):
        return np.tanh(z)

    def derivative(self, z, a):
        return 1.0 - a**2

    def symbolic(self, z):
        return cs.tanh(z)


class ReLU(Activation):
    name = "relu"

    def __call__(self, z):
        return np.maximum(z, 0.0)

    def derivative(self, z, a):
        return (z > 0.0).astype(float)

    def symbolic(self, z):
        return cs.fmax(z, 0.0)


ACTIVATIONS = {cls.name: cls for cls in (Linear, Sigmoid, Tanh, ReLU)}


def get_activation(activation: str | Activation) -> Activation:
    """Look up an activation by name, passing instances through unchanged."""
    if isinstance(activation, Activation):
        return activation
    if activation not in ACTIVATIONS:
        raise ValueError(
            f"Unknown activation '{activation}'. "
            f"Supported activations are: {', '.join(ACTIVATIONS)}."
        )
    return ACTIVATIONS[activation]()
