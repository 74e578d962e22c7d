"""Feed-forward networks trained by the second-order trainers"""
from ._activation import (
    ACTIVATIONS,
    Activation,
    Linear,
    ReLU,
    Sigmoid,
    Tanh,
    get_activation,
)
from ._network import FeedForwardNetwork

__all__ = [
    "FeedForwardNetwork",
    "Activation",
    "Linear",
    "Sigmoid",
    "Tanh",
    "ReLU",
    "ACTIVATIONS",
    "get_activation",
]
