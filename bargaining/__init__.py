from .errors import BargainingError, SamplingError, TranscriptFormatError, UnsupportedDecisionError
from .generator import OfferGenerator
from .models import (
    MAX_ROUNDS,
    Decision,
    HistoryEntry,
    Offer,
    Proposer,
    SessionConfig,
    SessionStatus,
    SessionView,
    Variant,
)
from .policies import AlternatingProposerPolicy, ConstantSkewPolicy, SkewPolicy
from .sampling import RandomSampler
from .session import NegotiationSession

__all__ = [
    "MAX_ROUNDS",
    "AlternatingProposerPolicy",
    "BargainingError",
    "ConstantSkewPolicy",
    "Decision",
    "HistoryEntry",
    "NegotiationSession",
    "Offer",
    "OfferGenerator",
    "Proposer",
    "RandomSampler",
    "SamplingError",
    "SessionConfig",
    "SessionStatus",
    "SessionView",
    "SkewPolicy",
    "TranscriptFormatError",
    "UnsupportedDecisionError",
    "Variant",
]
