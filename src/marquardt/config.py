"""Declarative configuration of networks, Hessian engines and trainers.

Configuration classes are Pydantic models with a ``type`` discriminator, so a
whole training setup can be validated and serialized from plain data, e.g.

>>> cfg = TrainerConfig.model_validate(
...     {"hessian": {"type": "finite-difference", "step": 1e-5}, "nprint": 10}
... )
>>> cfg.hessian
FiniteDifferenceHessianConfig(step=1e-05)
"""

from __future__ import annotations

from typing import Annotated, Literal, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from marquardt.hessian import (
    ChainRuleHessian,
    FiniteDifferenceHessian,
    SymbolicHessian,
)
from marquardt.network import ACTIVATIONS, FeedForwardNetwork
from marquardt.train import LevenbergMarquardt

__all__ = [
    "ComponentConfig",
    "UnionConfig",
    "ChainRuleHessianConfig",
    "FiniteDifferenceHessianConfig",
    "SymbolicHessianConfig",
    "HessianConfig",
    "NetworkConfig",
    "TrainerConfig",
]


class ComponentConfig(BaseModel):
    """Configuration of one buildable component, tagged with a ``type`` name.

    The tag is given in the class statement, e.g.
    ``class MyConfig(ComponentConfig, type="mine")``, and becomes a literal
    ``type`` field so that :py:class:`UnionConfig` can pick the right class
    when validating plain data.  Subclasses implement ``build()``.
    """

    model_config = ConfigDict(extra="forbid")

    def __init_subclass__(cls, type: str | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if type is not None:
            cls.__annotations__ = {"type": Literal[type], **cls.__annotations__}
            cls.type = type

    # The tag is implied by the class name
    def __repr_args__(self):
        return [(k, v) for k, v in super().__repr_args__() if k != "type"]

    def build(self, *args, **kwargs):
        raise NotImplementedError(f"{type(self).__name__} does not implement build()")


class UnionConfig:
    """``UnionConfig[A, B]`` is a union of component configs keyed on ``type``."""

    def __class_getitem__(cls, item) -> Type:
        members = item if isinstance(item, tuple) else (item,)
        bad = [m for m in members if not _is_config_class(m)]
        if bad:
            raise TypeError(
                f"UnionConfig members must be ComponentConfig classes, got {bad}"
            )
        return Annotated[Union[members], Field(discriminator="type")]


def _is_config_class(obj) -> bool:
    return isinstance(obj, type) and issubclass(obj, ComponentConfig)


#
# Hessian engines
#
class ChainRuleHessianConfig(ComponentConfig, type="chain-rule"):
    thread_count: int = Field(default=0, ge=0)

    def build(self) -> ChainRuleHessian:
        return ChainRuleHessian(thread_count=self.thread_count)


class FiniteDifferenceHessianConfig(ComponentConfig, type="finite-difference"):
    step: float = Field(default=1e-6, gt=0.0)

    def build(self) -> FiniteDifferenceHessian:
        return FiniteDifferenceHessian(step=self.step)


class SymbolicHessianConfig(ComponentConfig, type="symbolic"):
    thread_count: int = Field(default=0, ge=0)

    def build(self) -> SymbolicHessian:
        return SymbolicHessian(thread_count=self.thread_count)


HessianConfig = UnionConfig[
    ChainRuleHessianConfig,
    FiniteDifferenceHessianConfig,
    SymbolicHessianConfig,
]


#
# Networks and trainers
#
ActivationName = Literal[tuple(ACTIVATIONS)]


class NetworkConfig(ComponentConfig, type="feedforward"):
    """Fully-connected network with randomly initialized parameters."""

    layers: list[int] = Field(min_length=2)
    activation: ActivationName = "tanh"
    output_activation: ActivationName = "linear"
    seed: int | None = None

    @field_validator("layers")
    @classmethod
    def _check_layers(cls, layers):
        if any(n < 1 for n in layers):
            raise ValueError(f"Layer sizes must be positive, got {layers}")
        return layers

    def build(self) -> FeedForwardNetwork:
        network = FeedForwardNetwork(
            self.layers,
            activation=self.activation,
            output_activation=self.output_activation,
        )
        network.randomize(seed=self.seed)
        return network


class TrainerConfig(ComponentConfig, type="levenberg-marquardt"):
    """Levenberg-Marquardt trainer and the Hessian engine it uses."""

    hessian: HessianConfig = Field(default_factory=ChainRuleHessianConfig)
    nprint: int = Field(default=0, ge=0)

    def build(self, network, training) -> LevenbergMarquardt:
        return LevenbergMarquardt(
            network,
            training,
            hessian=self.hessian.build(),
            nprint=self.nprint,
        )
