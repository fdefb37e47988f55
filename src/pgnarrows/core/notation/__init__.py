"""Notation package: FEN scanning, PGN parsing, SAN resolution."""

from pgnarrows.core.notation.fen import STARTING_FEN, board_field, iter_pieces
from pgnarrows.core.notation.pgn import PGN_RESULT_TOKENS, parse_pgn
from pgnarrows.core.notation.san import (
    SanDetails,
    find_candidate_squares,
    parse_san_details,
    resolve_san,
)

__all__ = [
    "PGN_RESULT_TOKENS",
    "STARTING_FEN",
    "SanDetails",
    "board_field",
    "find_candidate_squares",
    "iter_pieces",
    "parse_pgn",
    "parse_san_details",
    "resolve_san",
]
