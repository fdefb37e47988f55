"""Render evaluations as ``%cal`` arrow comments in PGN output."""

from __future__ import annotations

from pgnarrows.analysis.models import Outcome, classify_score
from pgnarrows.core.models import Game, GameMove

KEEPS_OUTCOME_COLOR = "G"
LOSES_OUTCOME_COLOR = "R"


def position_outcome(move: GameMove) -> Outcome | None:
    """Classify the best reply available before *move* was played."""
    best = move.best_score()
    if best is None:
        return None
    return classify_score(best)


def move_arrows(move: GameMove) -> list[str]:
    """Return one ``%cal`` arrow per evaluated reply.

    Replies that keep the position's best outcome are green, the rest red.
    A lost position gets no arrows, since every reply is equally bad.
    """
    best = position_outcome(move)
    if best is None or best is Outcome.LOSING:
        return []
    arrows: list[str] = []
    for evaluation in move.evaluations:
        if classify_score(evaluation.score_cp) is best:
            color = KEEPS_OUTCOME_COLOR
        else:
            color = LOSES_OUTCOME_COLOR
        arrows.append(color + evaluation.lan)
    return arrows


def arrow_comment(move: GameMove) -> str | None:
    """Build the PGN comment carrying the arrows for *move*, if any."""
    arrows = move_arrows(move)
    if not arrows:
        return None
    return f"{{ [%cal {','.join(arrows)}] }}"


def render_movetext(game: Game) -> str:
    """Build mainline movetext with each arrow comment before its move."""
    parts: list[str] = []
    for ply, move in enumerate(game.moves):
        number = Game.move_number_for(ply)
        comment = arrow_comment(move)
        if comment is not None:
            parts.append(comment)
        if Game.is_white_ply(ply):
            parts.append(f"{number}.")
        elif comment is not None:
            parts.append(f"{number}...")
        parts.append(move.san)
    if game.result is not None:
        parts.append(game.result)
    return " ".join(parts)


def render_annotated_pgn(game: Game) -> str:
    """Build the annotated PGN document: tags, blank line, movetext."""
    lines = [f"[{tag}]" for tag in game.tags]
    lines.append("")
    lines.append(render_movetext(game))
    lines.append("")
    return "\n".join(lines)
