"""Per-ply SAN resolution and engine evaluation of a parsed game."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Sequence
from typing import Protocol

from pgnarrows.core.models import Game, GameMove
from pgnarrows.core.notation import board_field, resolve_san
from pgnarrows.engine.uci import iter_info_scores
from pgnarrows.errors import EngineProtocolError

_LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class AnalysisEngine(Protocol):
    """Engine queries the analyzer relies on."""

    def set_position(self, lans: Sequence[str]) -> None: ...

    def fen(self) -> str: ...

    def legal_moves(self) -> frozenset[str]: ...

    def evaluate(self, time_ms: int) -> str: ...


def merge_engine_output(
    move: GameMove,
    output: str,
    legal_moves: Collection[str],
) -> int:
    """Fold scored ``info`` lines from *output* into *move*'s evaluations.

    Moves outside *legal_moves* are dropped: they come from a search of a
    different position whose output was still arriving. Returns the number
    of lines accepted.
    """
    accepted = 0
    for info in iter_info_scores(output):
        if info.lan not in legal_moves:
            _LOGGER.debug("Discarding %s: not legal in this position", info.lan)
            continue
        move.record_evaluation(info.lan, info.score_cp)
        accepted += 1
    return accepted


class GameAnalyzer:
    """Fills in coordinate moves and reply evaluations for every ply."""

    __slots__ = ("_engine", "_analysis_time_ms")

    def __init__(self, engine: AnalysisEngine, *, analysis_time_ms: int = 1000) -> None:
        self._engine = engine
        self._analysis_time_ms = analysis_time_ms

    def resolve_moves(
        self,
        game: Game,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Resolve each SAN move to LAN, replaying the game from the start."""
        total = len(game.moves)
        for ply, move in enumerate(game.moves):
            self._engine.set_position(game.lan_prefix(ply))
            fen = self._engine.fen()
            try:
                lan = resolve_san(
                    move.san,
                    Game.is_white_ply(ply),
                    board_field(fen),
                    self._engine.legal_moves,
                )
            except ValueError as exc:
                raise EngineProtocolError(
                    f"Malformed FEN from engine: {fen!r}"
                ) from exc
            move.assign_lan(lan)
            _LOGGER.debug("Ply %d: %s -> %s", ply + 1, move.san, lan)
            if on_progress is not None:
                on_progress(ply + 1, total)

    def analyze_position(self, game: Game, ply: int) -> None:
        """Evaluate every legal reply in the position before *ply*."""
        move = game.moves[ply]
        self._engine.set_position(game.lan_prefix(ply))
        output = self._engine.evaluate(self._analysis_time_ms)
        legal = self._engine.legal_moves()
        accepted = merge_engine_output(move, output, legal)
        _LOGGER.debug(
            "Ply %d: %d info lines accepted, %d replies scored",
            ply + 1,
            accepted,
            len(move.evaluations),
        )

    def analyze_game(
        self,
        game: Game,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Evaluate every position of an already resolved game."""
        total = len(game.moves)
        for ply in range(total):
            self.analyze_position(game, ply)
            if on_progress is not None:
                on_progress(ply + 1, total)

    def print_positions(self, game: Game) -> list[str]:
        """Return ``N. SAN FEN`` lines, the FEN being the position after each move."""
        lines: list[str] = []
        for ply, move in enumerate(game.moves):
            self._engine.set_position(game.lan_prefix(ply + 1))
            fen = self._engine.fen()
            number = Game.move_number_for(ply)
            dots = "." if Game.is_white_ply(ply) else "..."
            lines.append(f"{number}{dots} {move.san} {fen}")
        return lines
