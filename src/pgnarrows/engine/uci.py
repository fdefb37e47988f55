"""Parsing helpers for UCI engine output."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

INFO_PREFIX = "info"
PERFT_MARKER = "Nodes searched"
FEN_MARKER = "Fen"
FEN_PREFIX = "Fen: "
BESTMOVE_MARKER = "bestmove"
MATE_SCORE_CP = 10_000

_LAN_RE = re.compile(r"[a-h][1-8][a-h][1-8][qrbn]?")


@dataclass(slots=True, frozen=True)
class InfoScore:
    """First principal-variation move of an ``info`` line and its score."""

    lan: str
    score_cp: int


def is_lan(text: str) -> bool:
    """Return True when *text* is shaped like a coordinate move."""
    return _LAN_RE.fullmatch(text) is not None


def parse_score(line: str) -> int | None:
    """Return the centipawn score of an ``info`` line.

    Forced mates become ``±MATE_SCORE_CP``; ``mate 0`` (side to move is
    mated) counts as lost.
    """
    tokens = line.split()
    try:
        idx = tokens.index("score")
        kind = tokens[idx + 1]
        value = int(tokens[idx + 2])
    except (ValueError, IndexError):
        return None
    if kind == "cp":
        return value
    if kind == "mate":
        return MATE_SCORE_CP if value > 0 else -MATE_SCORE_CP
    return None


def find_pv_move(line: str) -> str | None:
    """Return the first move after ``pv``, or ``None``."""
    tokens = line.split()
    try:
        move = tokens[tokens.index("pv") + 1]
    except (ValueError, IndexError):
        return None
    return move if is_lan(move) else None


def parse_info_line(line: str) -> InfoScore | None:
    """Extract the scored move from one analysis line, if it carries both."""
    if not line.startswith(INFO_PREFIX):
        return None
    score = parse_score(line)
    move = find_pv_move(line)
    if score is None or move is None:
        return None
    return InfoScore(lan=move, score_cp=score)


def iter_info_scores(output: str) -> Iterator[InfoScore]:
    """Yield every scored ``info`` line in *output*, in arrival order."""
    for line in output.splitlines():
        info = parse_info_line(line)
        if info is not None:
            yield info


def parse_perft_moves(output: str) -> frozenset[str]:
    """Collect the moves listed by ``go perft 1``.

    Each move line looks like ``e2e4: 1``; the ``Nodes searched`` summary and
    any unrelated chatter are skipped.
    """
    moves: set[str] = set()
    for line in output.splitlines():
        head, sep, _ = line.partition(":")
        if not sep:
            continue
        head = head.strip()
        if head == PERFT_MARKER or not is_lan(head):
            continue
        moves.add(head)
    return frozenset(moves)


def parse_fen_line(output: str) -> str | None:
    """Return the FEN from the first ``Fen: `` line of a board display."""
    for line in output.splitlines():
        if line.startswith(FEN_PREFIX):
            return line[len(FEN_PREFIX) :].strip()
    return None
