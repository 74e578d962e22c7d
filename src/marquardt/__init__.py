"""Levenberg-Marquardt training for feed-forward neural networks"""
from . import error
from .data import DataPair, TrainingSet
from .hessian import (
    ChainRuleHessian,
    FiniteDifferenceHessian,
    HessianEngine,
    SymbolicHessian,
)
from .linalg import LUDecomposition
from .network import FeedForwardNetwork
from .train import (
    ErrorCalculation,
    LevenbergMarquardt,
    LMIterationResult,
    LMStatus,
    calculate_sse,
)
from . import config

__all__ = [
    "error",
    "config",
    "DataPair",
    "TrainingSet",
    "FeedForwardNetwork",
    "HessianEngine",
    "ChainRuleHessian",
    "FiniteDifferenceHessian",
    "SymbolicHessian",
    "LUDecomposition",
    "ErrorCalculation",
    "calculate_sse",
    "LevenbergMarquardt",
    "LMStatus",
    "LMIterationResult",
]
