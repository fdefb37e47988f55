"""Game and move records filled in stage by stage."""

from __future__ import annotations

from dataclasses import dataclass, field

from pgnarrows.errors import CapacityError, ResolutionError

MAX_COMMENTS = 10
MAX_EVALUATIONS = 128


@dataclass(slots=True)
class MoveEvaluation:
    """Engine score for one legal reply, from the mover's point of view."""

    lan: str
    score_cp: int


@dataclass(slots=True)
class GameMove:
    """A single mainline ply extracted from PGN movetext."""

    move_number: int
    san: str
    lan: str | None = None
    annotation: str = ""
    comments: list[str] = field(default_factory=list)
    evaluations: list[MoveEvaluation] = field(default_factory=list)

    def assign_lan(self, lan: str) -> None:
        """Store the resolved coordinate move; allowed exactly once."""
        if self.lan is not None:
            raise ResolutionError(
                f"move {self.san!r} already resolved to {self.lan!r}"
            )
        if len(lan) not in (4, 5):
            raise ResolutionError(f"invalid coordinate move {lan!r} for {self.san!r}")
        self.lan = lan

    def record_evaluation(self, lan: str, score_cp: int) -> None:
        """Merge a score for *lan*; a later score replaces an earlier one."""
        for evaluation in self.evaluations:
            if evaluation.lan == lan:
                evaluation.score_cp = score_cp
                return
        if len(self.evaluations) >= MAX_EVALUATIONS:
            raise CapacityError(
                f"exceeded the maximum number of move evaluations ({MAX_EVALUATIONS})"
            )
        self.evaluations.append(MoveEvaluation(lan=lan, score_cp=score_cp))

    def best_score(self) -> int | None:
        """Return the highest recorded score, or ``None`` before analysis."""
        if not self.evaluations:
            return None
        return max(evaluation.score_cp for evaluation in self.evaluations)


@dataclass(slots=True)
class Game:
    """Parsed PGN game: tags in appearance order plus the mainline."""

    tags: list[str] = field(default_factory=list)
    moves: list[GameMove] = field(default_factory=list)
    result: str | None = None

    @staticmethod
    def is_white_ply(ply: int) -> bool:
        """White moves on even plies since games start from the initial position."""
        return ply % 2 == 0

    @staticmethod
    def move_number_for(ply: int) -> int:
        return ply // 2 + 1

    def lan_prefix(self, upto: int) -> list[str]:
        """Return the resolved coordinate moves for plies ``0..upto``."""
        prefix: list[str] = []
        for move in self.moves[:upto]:
            if move.lan is None:
                raise ResolutionError(
                    f"move {move.san!r} needed before it was resolved"
                )
            prefix.append(move.lan)
        return prefix
