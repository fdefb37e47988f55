"""SAN (Standard Algebraic Notation) to coordinate-move resolution."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass

from pgnarrows.core.notation.fen import FILES, RANKS, iter_pieces
from pgnarrows.errors import ResolutionError

_LOGGER = logging.getLogger(__name__)

_PIECE_LETTERS = "KQRBN"
_PROMOTION_PIECES = "QRBN"
_CASTLING = {
    "O-O": "g",
    "O-O-O": "c",
    "0-0": "g",
    "0-0-0": "c",
}

LegalMovesQuery = Callable[[], Collection[str]]


@dataclass(slots=True, frozen=True)
class SanDetails:
    """Components of one SAN token.

    ``piece`` is one of ``KQRBN`` for pieces, or the origin file ``a``-``h``
    for pawn moves.
    """

    is_white: bool
    piece: str
    is_capture: bool
    disambiguation: str
    destination: str
    promotion: str | None = None
    check: str | None = None

    @property
    def is_pawn(self) -> bool:
        return self.piece in FILES

    def to_lan(self, start_square: str) -> str:
        """Build the coordinate move leaving from *start_square*."""
        lan = start_square + self.destination
        if self.promotion is not None:
            lan += self.promotion.lower()
        return lan


def parse_san_details(san: str, is_white: bool) -> SanDetails:
    """Split *san* into piece, disambiguation, destination and suffixes."""
    core = san
    check: str | None = None
    if core and core[-1] in "+#":
        check = core[-1]
        core = core[:-1]

    promotion: str | None = None
    if len(core) > 2 and core[-2] == "=":
        promotion = core[-1]
        core = core[:-2]
        if promotion not in _PROMOTION_PIECES:
            raise ResolutionError(f"Invalid promotion piece in {san!r}")

    castle_file = _CASTLING.get(core)
    if castle_file is not None:
        rank = "1" if is_white else "8"
        return SanDetails(
            is_white=is_white,
            piece="K",
            is_capture=False,
            disambiguation="",
            destination=castle_file + rank,
            check=check,
        )

    if len(core) < 2:
        raise ResolutionError(f"SAN move too short: {san!r}")
    destination = core[-2:]
    if destination[0] not in FILES or destination[1] not in RANKS:
        raise ResolutionError(f"Invalid destination square in {san!r}")
    is_capture = len(core) >= 3 and core[-3] == "x"

    lead = core[0]
    if lead not in _PIECE_LETTERS and lead not in FILES:
        raise ResolutionError(f"Unknown piece in {san!r}")

    # Everything between the piece letter (or pawn file) and the destination,
    # minus the capture marker.
    disambiguation = core[1:-2]
    if disambiguation.endswith("x"):
        disambiguation = disambiguation[:-1]
    if lead in FILES and disambiguation:
        raise ResolutionError(f"Unexpected pawn disambiguation in {san!r}")
    if len(disambiguation) > 2 or any(
        ch not in FILES and ch not in RANKS for ch in disambiguation
    ):
        raise ResolutionError(f"Invalid disambiguation in {san!r}")

    return SanDetails(
        is_white=is_white,
        piece=lead,
        is_capture=is_capture,
        disambiguation=disambiguation,
        destination=destination,
        promotion=promotion,
        check=check,
    )


def _piece_matches(fen_char: str, square: str, details: SanDetails) -> bool:
    if fen_char.isupper() != details.is_white:
        return False
    kind = fen_char.upper()
    if details.is_pawn:
        return kind == "P" and square[0] == details.piece
    return kind == details.piece


def _matches_disambiguation(square: str, disambiguation: str) -> bool:
    for ch in disambiguation:
        if ch in FILES and square[0] != ch:
            return False
        if ch in RANKS and square[1] != ch:
            return False
    return True


def find_candidate_squares(board: str, details: SanDetails) -> list[str]:
    """Return squares on *board* holding a piece that could have made the move."""
    return [
        square
        for square, fen_char in iter_pieces(board)
        if _piece_matches(fen_char, square, details)
        and _matches_disambiguation(square, details.disambiguation)
    ]


def find_start_square(
    board: str,
    details: SanDetails,
    legal_moves: LegalMovesQuery,
) -> str:
    """Pick the start square, asking for legal moves only if the board is ambiguous."""
    candidates = find_candidate_squares(board, details)
    if not candidates:
        raise ResolutionError(
            f"No candidate square for {details.piece} to {details.destination}"
        )
    if len(candidates) == 1:
        return candidates[0]

    _LOGGER.debug(
        "Candidates %s for %s; consulting legal moves", candidates, details.destination
    )
    legal = legal_moves()
    for square in candidates:
        for lan in legal:
            if lan[:2] == square and lan[2:4] == details.destination:
                return square
    raise ResolutionError(
        f"Failed to find starting square among {candidates} for {details.destination}"
    )


def resolve_san(
    san: str,
    is_white: bool,
    board: str,
    legal_moves: LegalMovesQuery,
) -> str:
    """Convert *san* into a coordinate move for the position in *board*."""
    details = parse_san_details(san, is_white)
    start = find_start_square(board, details, legal_moves)
    return details.to_lan(start)
