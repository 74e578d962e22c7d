"""Dense linear algebra used by the trainers"""
from ._lu import LUDecomposition

__all__ = [
    "LUDecomposition",
]
