from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .models import Proposer, SessionConfig, Variant


class SkewPolicy(ABC):
    """Decides who proposes in a round and where party A's mean share sits."""

    allows_counter: bool = False

    def proposer_for_round(self, round_index: int) -> Optional[Proposer]:
        return None

    @abstractmethod
    def mean_share_a(self, round_index: int, proposer: Optional[Proposer]) -> float: ...


class ConstantSkewPolicy(SkewPolicy):
    """A fixed mean share for A on every round, regardless of proposer."""

    def __init__(self, mean_a: float = 0.30) -> None:
        self.mean_a = mean_a

    def mean_share_a(self, round_index: int, proposer: Optional[Proposer]) -> float:
        return self.mean_a


class AlternatingProposerPolicy(SkewPolicy):
    """A proposes on odd rounds, B on even ones; each skews toward itself."""

    allows_counter = True

    def __init__(self, bias: float = 0.08) -> None:
        self.bias = bias

    def proposer_for_round(self, round_index: int) -> Optional[Proposer]:
        return Proposer.for_round(round_index)

    def mean_share_a(self, round_index: int, proposer: Optional[Proposer]) -> float:
        if proposer is None:
            proposer = Proposer.for_round(round_index)
        if proposer is Proposer.A:
            return 0.5 + self.bias
        return 0.5 - self.bias


def policy_from_config(config: SessionConfig) -> SkewPolicy:
    if config.variant is Variant.ALTERNATING:
        return AlternatingProposerPolicy(bias=config.proposer_bias)
    return ConstantSkewPolicy(mean_a=config.mean_a)
