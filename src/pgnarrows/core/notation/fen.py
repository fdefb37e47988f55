"""FEN board-field scanning."""

from __future__ import annotations

from collections.abc import Iterator

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

FILES = "abcdefgh"
RANKS = "12345678"


def square_name(file: int, rank: int) -> str:
    """Return the algebraic name for 0-based *file* and 1-based *rank*."""
    return f"{FILES[file]}{rank}"


def board_field(fen: str) -> str:
    """Return the piece-placement field of a FEN string."""
    parts = fen.split()
    if not parts:
        raise ValueError(f"Invalid FEN (empty): {fen!r}")
    return parts[0]


def iter_pieces(board: str) -> Iterator[tuple[str, str]]:
    """Yield ``(square, piece_char)`` for every occupied square.

    Squares are visited rank 8 to 1 and file a to h, the order in which the
    FEN placement field lists them.
    """
    rank = 8
    file = 0
    for ch in board:
        if ch == " ":
            break
        if ch == "/":
            rank -= 1
            file = 0
            continue
        if ch.isdigit():
            file += int(ch)
            continue
        if not (0 <= file < 8 and 1 <= rank <= 8):
            raise ValueError(f"Invalid FEN board: {board!r}")
        yield square_name(file, rank), ch
        file += 1
