from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import numpy as np

from .generator import OfferGenerator
from .models import Proposer, SessionStatus, SessionView


def sample_shares(
    generator: OfferGenerator,
    round_num: int,
    samples: int,
    proposer: Optional[Proposer] = None,
) -> np.ndarray:
    """Draw ``samples`` offers for one round and return A's shares."""
    if proposer is None:
        proposer = generator.policy.proposer_for_round(round_num)
    return np.array(
        [generator.draw(round_num, proposer).share_a for _ in range(samples)]
    )


def offer_statistics(
    generator: OfferGenerator,
    rounds: Iterable[int],
    samples: int = 2000,
) -> List[Dict[str, float]]:
    """Empirical mean and spread of A's share for each round, next to the
    Beta parameters that produced them."""
    stats = []
    for r in rounds:
        proposer = generator.policy.proposer_for_round(r)
        alpha, beta = generator.parameters(r, proposer)
        shares = sample_shares(generator, r, samples, proposer)
        stats.append({
            "round": r,
            "proposer": proposer.value if proposer else None,
            "concentration": generator.concentration(r),
            "alpha": alpha,
            "beta": beta,
            "expected_mean": alpha / (alpha + beta),
            "mean": float(np.mean(shares)),
            "std": float(np.std(shares)),
            "variance": float(np.var(shares)),
        })
    return stats


def summarize_sessions(views: Iterable[SessionView]) -> dict:
    outs: List[SessionView] = list(views)
    n = len(outs) or 1
    accepted = [v for v in outs if v.status is SessionStatus.ACCEPTED]
    rejected = [v for v in outs if v.status is SessionStatus.REJECTED]
    return {
        "count": len(outs),
        "agreement_rate": len(accepted) / n,
        "impasse_rate": len(rejected) / n,
        "avg_rounds": sum(v.round for v in outs) / n,
        "avg_decisions": sum(len(v.history) for v in outs) / n,
        "avg_accepted_share_a": (
            float(np.mean([v.offer.share_a for v in accepted])) if accepted else None
        ),
        "avg_accepted_share_b": (
            float(np.mean([v.offer.share_b for v in accepted])) if accepted else None
        ),
    }
