"""Exceptions raised by the training components."""

import numpy as np

__all__ = [
    "TrainingError",
    "ConfigurationError",
    "CapabilityError",
    "UnsupportedOperationError",
    "SingularMatrixError",
]


class TrainingError(Exception):
    """Base class for errors raised while setting up or running training."""


class ConfigurationError(TrainingError, ValueError):
    """The network and training data cannot be used together."""


class CapabilityError(TrainingError):
    """The Hessian engine in use does not provide the requested capability."""


class UnsupportedOperationError(TrainingError, NotImplementedError):
    """The trainer does not support the requested operation."""


class SingularMatrixError(TrainingError, np.linalg.LinAlgError):
    """Attempted to solve with a singular decomposition."""
