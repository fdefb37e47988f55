"""Outcome buckets used to color arrows."""

from __future__ import annotations

from enum import StrEnum

WINNING_THRESHOLD_CP = 150
LOSING_THRESHOLD_CP = -150


class Outcome(StrEnum):
    """Big-picture result a move keeps for the side that plays it."""

    WINNING = "Winning"
    DRAWN = "Drawn"
    LOSING = "Losing"


def classify_score(score_cp: int) -> Outcome:
    """Bucket a side-to-move score; both thresholds are exclusive."""
    if score_cp > WINNING_THRESHOLD_CP:
        return Outcome.WINNING
    if score_cp < LOSING_THRESHOLD_CP:
        return Outcome.LOSING
    return Outcome.DRAWN
