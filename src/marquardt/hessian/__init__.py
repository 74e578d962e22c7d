"""Hessian approximations for Gauss-Newton type trainers"""
from ._base import HessianEngine, ThreadSettings, gauss_newton_terms
from ._chain_rule import ChainRuleHessian, network_jacobian
from ._finite_difference import FiniteDifferenceHessian
from ._symbolic import SymbolicHessian

__all__ = [
    "HessianEngine",
    "ThreadSettings",
    "ChainRuleHessian",
    "FiniteDifferenceHessian",
    "SymbolicHessian",
    "gauss_newton_terms",
    "network_jacobian",
]
