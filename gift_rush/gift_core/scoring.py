"""
Scoring System
==============

Compares the loaded gifts against the needed order and turns mismatches
into a life penalty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from gift_rush.gift_core.gift_catalog import GiftCategory

logger = logging.getLogger(__name__)


@dataclass
class RoundResult:
    """Outcome of one round."""
    round_number: int
    matches: int
    penalty: int
    chosen: Tuple[GiftCategory, ...]
    needed: Tuple[GiftCategory, ...]
    overflow: bool = False

    @property
    def perfect(self) -> bool:
        return self.penalty == 0

    @property
    def slot_matches(self) -> Tuple[bool, ...]:
        """Per-slot match flags, in needed order."""
        return tuple(
            i < len(self.chosen) and self.chosen[i] is needed
            for i, needed in enumerate(self.needed)
        )

    def __repr__(self) -> str:
        return f"RoundResult(round={self.round_number}, matches={self.matches}, penalty={self.penalty})"


def count_matches(
    chosen: Sequence[GiftCategory],
    needed: Sequence[GiftCategory]
) -> int:
    """
    Count position-for-position matches.

    Chosen gifts past the needed length are ignored; missing chosen
    entries count as mismatches.
    """
    return sum(1 for got, want in zip(chosen, needed) if got is want)


def score_round(
    chosen: Sequence[GiftCategory],
    needed: Sequence[GiftCategory],
    round_number: int = 0,
    overflow: bool = False
) -> RoundResult:
    """
    Score a round.

    Args:
        chosen: Categories of the chosen gifts, in selection order.
        needed: The target order.
        round_number: Round being scored (for reporting).
        overflow: True if the round ended because the stack overflowed.

    Returns:
        RoundResult with matches and penalty = len(needed) - matches.
    """
    matches = count_matches(chosen, needed)
    return RoundResult(
        round_number=round_number,
        matches=matches,
        penalty=len(needed) - matches,
        chosen=tuple(chosen[:len(needed)]),
        needed=tuple(needed),
        overflow=overflow
    )


class ScoreTracker:
    """
    Accumulates round results over a session.
    """

    def __init__(self):
        self._history: List[RoundResult] = []

    @property
    def total_matches(self) -> int:
        """Correct gifts loaded over the session."""
        return sum(r.matches for r in self._history)

    @property
    def rounds_played(self) -> int:
        return len(self._history)

    @property
    def perfect_rounds(self) -> int:
        return sum(1 for r in self._history if r.perfect)

    @property
    def history(self) -> Tuple[RoundResult, ...]:
        return tuple(self._history)

    @property
    def last_result(self) -> Optional[RoundResult]:
        return self._history[-1] if self._history else None

    def record(self, result: RoundResult) -> RoundResult:
        """Add a result to the history."""
        self._history.append(result)
        logger.info(
            "Round %d scored: %d/%d matches, penalty %d%s",
            result.round_number, result.matches, len(result.needed),
            result.penalty, " (overflow)" if result.overflow else ""
        )
        return result

    def reset(self) -> None:
        """Forget all results."""
        self._history.clear()
