"""Second-order training of feed-forward networks"""
from ._error import ErrorCalculation, calculate_sse
from ._lm import (
    LAMBDA_INITIAL,
    LAMBDA_MAX,
    SCALE_LAMBDA,
    LevenbergMarquardt,
    LMIterationResult,
    LMProgress,
    LMStatus,
)

__all__ = [
    "LevenbergMarquardt",
    "LMStatus",
    "LMIterationResult",
    "LMProgress",
    "ErrorCalculation",
    "calculate_sse",
    "SCALE_LAMBDA",
    "LAMBDA_MAX",
    "LAMBDA_INITIAL",
]
