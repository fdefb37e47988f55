"""PGN parsing: tag section plus mainline movetext."""

from __future__ import annotations

import logging
import string

from pgnarrows.core.models import MAX_COMMENTS, Game, GameMove
from pgnarrows.errors import PgnSyntaxError

_LOGGER = logging.getLogger(__name__)

PGN_RESULT_TOKENS = ("1-0", "0-1", "1/2-1/2", "*")
_SAN_CHARS = frozenset(string.ascii_letters + string.digits + "x=O+#-")
_GLYPH_CHARS = frozenset("!?")


class _PgnReader:
    """Cursor over the buffered PGN text."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def skip_whitespace(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos].isspace():
            self._pos += 1

    def error(self, message: str) -> PgnSyntaxError:
        return PgnSyntaxError(message, self._pos)

    # -- tag section ---------------------------------------------------

    def read_tag(self) -> str:
        start = self._pos + 1
        end = self._text.find("]", start)
        if end < 0:
            raise self.error("Tag not properly closed with ']'")
        self._pos = end + 1
        return self._text[start:end].strip()

    # -- move section --------------------------------------------------

    def read_result(self) -> str | None:
        for token in PGN_RESULT_TOKENS:
            if self._text.startswith(token, self._pos):
                self._pos += len(token)
                return token
        return None

    def read_move_number(self) -> int:
        text = self._text
        start = self._pos
        while self._pos < len(text) and text[self._pos].isdigit():
            self._pos += 1
        number = int(text[start : self._pos])
        if self.peek() != ".":
            raise self.error("Expected dot after move number")
        # One dot for White, an ellipsis for Black; parity already tells us which.
        while self.peek() == ".":
            self._pos += 1
        return number

    def read_san(self) -> str:
        text = self._text
        start = self._pos
        while self._pos < len(text) and text[self._pos] in _SAN_CHARS:
            self._pos += 1
        return text[start : self._pos]

    def read_annotation(self) -> str:
        """Read ``!``/``?`` glyph runs and ``$n`` NAGs following a move."""
        text = self._text
        parts: list[str] = []
        while True:
            ch = self.peek()
            start = self._pos
            if ch in _GLYPH_CHARS:
                while self._pos < len(text) and text[self._pos] in _GLYPH_CHARS:
                    self._pos += 1
            elif ch == "$":
                self._pos += 1
                while self._pos < len(text) and text[self._pos].isdigit():
                    self._pos += 1
                if self._pos == start + 1:
                    raise self.error("Expected digits after '$'")
            else:
                return " ".join(parts)
            parts.append(text[start : self._pos])
            self.skip_whitespace()

    def read_comment(self) -> str:
        start = self._pos + 1
        end = self._text.find("}", start)
        if end < 0:
            raise self.error("Comment not properly closed with '}'")
        self._pos = end + 1
        return self._text[start:end]

    def skip_variation(self) -> None:
        """Advance past a parenthesized variation, nested ones included."""
        self._pos += 1  # '('
        while True:
            self.skip_whitespace()
            ch = self.peek()
            if not ch:
                raise self.error("Variation not properly closed with ')'")
            if ch == ")":
                self._pos += 1
                return
            if ch == "{":
                self.read_comment()
            elif ch == "(":
                self.skip_variation()
            elif self.read_result() is None:
                self.read_move(ply=0)

    def read_move(self, ply: int) -> GameMove:
        move_number = None
        # Zero-style castling ("0-0") also starts with a digit.
        if self.peek().isdigit() and not self._text.startswith("0-0", self._pos):
            move_number = self.read_move_number()
            self.skip_whitespace()

        san = self.read_san()
        if not san:
            ch = self.peek()
            if ch:
                raise self.error(f"Expected SAN move, found {ch!r}")
            raise self.error("Expected SAN move")
        self.skip_whitespace()

        annotation = self.read_annotation()

        comments: list[str] = []
        while self.peek() == "{":
            if len(comments) >= MAX_COMMENTS:
                raise self.error(f"More than {MAX_COMMENTS} comments on move {san!r}")
            comments.append(self.read_comment())
            self.skip_whitespace()

        while self.peek() == "(":
            self.skip_variation()
            self.skip_whitespace()

        return GameMove(
            move_number=move_number if move_number is not None else Game.move_number_for(ply),
            san=san,
            annotation=annotation,
            comments=comments,
        )


def parse_pgn(text: str) -> Game:
    """Parse a single PGN game into tags, mainline moves and result."""
    reader = _PgnReader(text)
    game = Game()

    reader.skip_whitespace()
    while reader.peek() == "[":
        game.tags.append(reader.read_tag())
        reader.skip_whitespace()

    while True:
        reader.skip_whitespace()
        if reader.at_end():
            break
        result = reader.read_result()
        if result is not None:
            game.result = result
            break
        if reader.peek() == "{":
            # Commentary outside any move, e.g. before the first move.
            reader.read_comment()
            continue
        game.moves.append(reader.read_move(ply=len(game.moves)))

    _LOGGER.debug(
        "Parsed %d tags and %d moves (result %s)",
        len(game.tags),
        len(game.moves),
        game.result,
    )
    return game
