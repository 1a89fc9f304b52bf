"""
Offer generation: turns a round number and proposer into a skewed random split.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .models import MIN_SHAPE, Offer, Proposer, SessionConfig
from .policies import SkewPolicy, policy_from_config
from .sampling import RandomSampler

logger = logging.getLogger(__name__)


class OfferGenerator:
    """
    Draws offers from a Beta distribution whose mean comes from the skew
    policy and whose concentration grows with the round, so later offers
    cluster more tightly around the mean.
    """

    def __init__(
        self,
        policy: SkewPolicy,
        sampler: Optional[RandomSampler] = None,
        concentration_base: float = 16.0,
        concentration_step: float = 4.0,
    ):
        self.policy = policy
        self.sampler = sampler if sampler is not None else RandomSampler()
        self.concentration_base = concentration_base
        self.concentration_step = concentration_step

    @classmethod
    def from_config(
        cls, config: SessionConfig, sampler: Optional[RandomSampler] = None
    ) -> "OfferGenerator":
        if sampler is None:
            sampler = RandomSampler.from_seed(
                config.seed, max_iterations=config.max_sampler_iterations
            )
        base, step = config.concentration_growth()
        return cls(
            policy=policy_from_config(config),
            sampler=sampler,
            concentration_base=base,
            concentration_step=step,
        )

    def concentration(self, round_num: int) -> float:
        return self.concentration_base + self.concentration_step * round_num

    def parameters(
        self, round_num: int, proposer: Optional[Proposer] = None
    ) -> Tuple[float, float]:
        """Return the (alpha, beta) pair used for A's share on a round."""
        conc = self.concentration(round_num)
        mean_a = self.policy.mean_share_a(round_num, proposer)
        alpha = max(mean_a * conc, MIN_SHAPE)
        beta = max((1.0 - mean_a) * conc, MIN_SHAPE)
        return alpha, beta

    def draw(self, round_num: int, proposer: Optional[Proposer] = None) -> Offer:
        alpha, beta = self.parameters(round_num, proposer)
        offer = Offer.from_share_a(self.sampler.beta(alpha, beta))
        logger.debug(
            f"Round {round_num} offer (proposer={proposer.value if proposer else '-'}): "
            f"A={offer.share_a:.4f} B={offer.share_b:.4f} "
            f"[alpha={alpha:.2f}, beta={beta:.2f}]"
        )
        return offer
