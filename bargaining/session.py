"""
Round-progression state machine for a single bargaining session.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Tuple

from .errors import UnsupportedDecisionError
from .generator import OfferGenerator
from .models import (
    Decision,
    HistoryEntry,
    Offer,
    Proposer,
    SessionConfig,
    SessionStatus,
    SessionView,
    clamp01,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


SESSION_ID_FORMAT = "%Y%m%d%H%M%S"


def new_session_id(now: datetime) -> str:
    """14-character ``yyyyMMddHHmmss`` id in UTC."""
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime(SESSION_ID_FORMAT)


def parse_counter_value(raw: Any) -> Optional[float]:
    """Parse a raw counter-offer input.

    Unparsable or non-finite input yields ``None``; anything else is clamped
    to ``[0, 1]``.
    """
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return clamp01(value)


class NegotiationSession:
    """
    Owns the round counter, termination flags, proposer rotation, and the
    append-only history of one session.

    - ``start()`` opens round 1 and draws its offer.
    - ``accept()`` ends the session as accepted.
    - ``reject()`` and ``counter()`` advance to the next round, or end the
      session as rejected after the final round.

    Decisions made once the session has ended are ignored. Every transition
    returns the resulting :class:`SessionView`.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        generator: Optional[OfferGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config if config is not None else SessionConfig()
        self.generator = generator if generator is not None else OfferGenerator.from_config(self.config)
        self.clock: Clock = clock if clock is not None else utc_now
        self.max_rounds: int = self.config.max_rounds
        self._init_state()

    def _init_state(self) -> None:
        self.session_id: str = new_session_id(self.clock())
        self.round: int = 0
        self.accepted: bool = False
        self.finished: bool = False
        self.current_proposer: Optional[Proposer] = None
        self.current_offer: Optional[Offer] = None
        self._history: List[HistoryEntry] = []

    # ---------- State ----------
    @property
    def history(self) -> Tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def status(self) -> SessionStatus:
        if self.accepted:
            return SessionStatus.ACCEPTED
        if self.finished:
            return SessionStatus.REJECTED
        return SessionStatus.IN_PROGRESS

    @property
    def in_progress(self) -> bool:
        return not (self.accepted or self.finished)

    @property
    def started(self) -> bool:
        return self.round > 0 or self.finished

    def view(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            variant=self.config.variant,
            round=self.round,
            max_rounds=self.max_rounds,
            proposer=self.current_proposer,
            offer=self.current_offer,
            status=self.status,
            history=self.history,
        )

    # ---------- Transitions ----------
    def start(self) -> SessionView:
        if self.started:
            return self.view()
        logger.info(
            f"Session {self.session_id} started "
            f"({self.config.variant.value}, max_rounds={self.max_rounds})"
        )
        self._next_offer()
        return self.view()

    def reset(self) -> SessionView:
        previous = self.session_id
        self._init_state()
        if self.session_id <= previous:
            # ids stay unique when the clock has not moved on a full second
            bumped = datetime.strptime(previous, SESSION_ID_FORMAT) + timedelta(seconds=1)
            self.session_id = bumped.strftime(SESSION_ID_FORMAT)
        logger.info(f"Session {previous} reset, new session {self.session_id}")
        return self.start()

    def accept(self) -> SessionView:
        if not self.in_progress or self.current_offer is None:
            return self.view()
        self._log(Decision.ACCEPT)
        self.accepted = True
        logger.info(
            f"Session {self.session_id} accepted in round {self.round}: "
            f"A={self.current_offer.share_a:.4f} B={self.current_offer.share_b:.4f}"
        )
        return self.view()

    def reject(self) -> SessionView:
        if not self.in_progress or self.current_offer is None:
            return self.view()
        self._log(Decision.REJECT)
        self._advance()
        return self.view()

    def counter(self, value: Any) -> SessionView:
        """Record a counter-offer for A's share and move on to the next round.

        The counter value is kept for the transcript only; it does not shape
        the next generated offer.

        Raises:
            UnsupportedDecisionError: on a variant without counter-offers.
        """
        if not self.generator.policy.allows_counter:
            raise UnsupportedDecisionError(
                f"Counter-offers are not available in the {self.config.variant.value} variant"
            )
        if not self.in_progress or self.current_offer is None:
            return self.view()
        self._log(Decision.COUNTER, parse_counter_value(value))
        self._advance()
        return self.view()

    # ---------- Helpers ----------
    def _advance(self) -> None:
        if self.round >= self.max_rounds:
            self._finish()
        else:
            self._next_offer()

    def _next_offer(self) -> None:
        if self.round >= self.max_rounds:
            self._finish()
            return
        self.round += 1
        self.current_proposer = self.generator.policy.proposer_for_round(self.round)
        self.current_offer = self.generator.draw(self.round, self.current_proposer)

    def _finish(self) -> None:
        self.finished = True
        logger.info(
            f"Session {self.session_id} ended without agreement after "
            f"{self.round} rounds"
        )

    def _log(self, decision: Decision, counter_value: Optional[float] = None) -> None:
        offer = self.current_offer
        self._history.append(
            HistoryEntry(
                session_id=self.session_id,
                round=self.round,
                proposer=self.current_proposer,
                offer_a=offer.share_a,
                offer_b=offer.share_b,
                decision=decision,
                counter_value=counter_value,
                timestamp=self.clock(),
            )
        )
