"""
Core data models for the bargaining simulator.
Defines offers, transcript entries, session views, and session configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field


MAX_ROUNDS = 5
MIN_SHAPE = 1e-6


# ===== ENUMS =====

class Variant(str, Enum):
    """The two game configurations the engine supports."""

    FIXED_SKEW = "fixed_skew"    # A proposes every round, mean A share fixed
    ALTERNATING = "alternating"  # proposer alternates and skews in its own favour


class Proposer(str, Enum):
    """Party whose favour skews the current round's offer."""

    A = "A"
    B = "B"

    @classmethod
    def for_round(cls, round_num: int) -> "Proposer":
        return cls.A if round_num % 2 == 1 else cls.B


class Decision(str, Enum):
    """Responder decisions recorded in the transcript."""

    ACCEPT = "accept"
    REJECT = "reject"
    COUNTER = "counter"


class SessionStatus(str, Enum):
    """Lifecycle status of a negotiation session."""

    IN_PROGRESS = "in_progress"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# ===== OFFERS & TRANSCRIPT =====

def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class Offer:
    """A two-way split of the pie between parties A and B."""

    share_a: float
    share_b: float

    @classmethod
    def from_share_a(cls, share_a: float) -> "Offer":
        a = clamp01(share_a)
        return cls(share_a=a, share_b=1.0 - a)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.share_a, self.share_b)


class HistoryEntry(BaseModel):
    """One immutable line of the negotiation transcript."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    round: int = Field(ge=0)
    proposer: Optional[Proposer] = None
    offer_a: float = Field(alias="offerA", ge=0, le=1)
    offer_b: float = Field(alias="offerB", ge=0, le=1)
    decision: Decision
    counter_value: Optional[float] = Field(None, alias="counterValue", ge=0, le=1)
    timestamp: datetime

    def to_dict(self) -> dict:
        """Convert to the camelCase mapping used by the JSON export."""
        return self.model_dump(mode="json", by_alias=True)


class SessionView(BaseModel):
    """Read-only snapshot of a session handed to presentation code."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    variant: Variant
    round: int
    max_rounds: int
    proposer: Optional[Proposer] = None
    offer: Optional[Offer] = None
    status: SessionStatus
    history: Tuple[HistoryEntry, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return self.status is not SessionStatus.IN_PROGRESS


# ===== CONFIGURATION =====

VARIANT_CONCENTRATION = {
    Variant.FIXED_SKEW: (16.0, 4.0),
    Variant.ALTERNATING: (14.0, 6.0),
}


class SessionConfig(BaseModel):
    """Parameters for one bargaining session."""

    variant: Variant = Variant.FIXED_SKEW
    max_rounds: int = Field(MAX_ROUNDS, ge=0)

    # Concentration grows linearly with the round: base + step * round.
    # Left unset, both default per variant.
    concentration_base: Optional[float] = Field(None, gt=0)
    concentration_step: Optional[float] = Field(None, gt=0)

    mean_a: float = Field(0.30, ge=0, le=1)
    proposer_bias: float = Field(0.08, ge=0, le=0.5)

    max_sampler_iterations: int = Field(10_000, ge=1)
    seed: Optional[int] = None

    def concentration_growth(self) -> Tuple[float, float]:
        """Resolve (base, step), falling back to the variant defaults."""
        base, step = VARIANT_CONCENTRATION[self.variant]
        if self.concentration_base is not None:
            base = self.concentration_base
        if self.concentration_step is not None:
            step = self.concentration_step
        return base, step

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SessionConfig":
        """Load a session configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self) -> str:
        """Export configuration to YAML format."""
        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)
