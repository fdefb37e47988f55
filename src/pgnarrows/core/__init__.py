"""Core game model and notation handling."""

from pgnarrows.core.models import (
    MAX_COMMENTS,
    MAX_EVALUATIONS,
    Game,
    GameMove,
    MoveEvaluation,
)

__all__ = [
    "MAX_COMMENTS",
    "MAX_EVALUATIONS",
    "Game",
    "GameMove",
    "MoveEvaluation",
]
