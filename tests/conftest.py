"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import pytest

from pgnarrows.core.notation import STARTING_FEN

SAMPLE_PGN = """[Event "Test"]
[Result "*"]

1. e4 e5 2. Nf3 *
"""

AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
AFTER_E5 = "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2"
AFTER_NF3 = "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2"

_START_MOVES = (
    "a2a3 a2a4 b2b3 b2b4 c2c3 c2c4 d2d3 d2d4 e2e3 e2e4 "
    "f2f3 f2f4 g2g3 g2g4 h2h3 h2h4 b1a3 b1c3 g1f3 g1h3"
).split()
_AFTER_E4_MOVES = (
    "a7a6 a7a5 b7b6 b7b5 c7c6 c7c5 d7d6 d7d5 e7e6 e7e5 "
    "f7f6 f7f5 g7g6 g7g5 h7h6 h7h5 b8a6 b8c6 g8f6 g8h6"
).split()
_AFTER_E5_MOVES = (
    "a2a3 a2a4 b2b3 b2b4 c2c3 c2c4 d2d3 d2d4 f2f3 f2f4 g2g3 g2g4 h2h3 h2h4 "
    "b1a3 b1c3 g1e2 g1f3 g1h3 f1e2 f1d3 f1c4 f1b5 f1a6 "
    "d1e2 d1f3 d1g4 d1h5 e1e2"
).split()


@dataclass(slots=True, frozen=True)
class ScriptedPosition:
    """Canned engine answers for one position."""

    fen: str
    legal: Sequence[str] = ()
    info: Sequence[str] = ()
    bestmove: str = "0000"


class FakeEngineProcess:
    """In-memory ``ChildProcess`` that answers UCI commands from a script.

    Positions are keyed by the tuple of coordinate moves played from the
    start position. Output is handed out at most *read_chunk* bytes per
    :meth:`read_available` call when a chunk size is given. A *mute* engine
    records commands but never answers.
    """

    def __init__(
        self,
        positions: Mapping[tuple[str, ...], ScriptedPosition],
        *,
        read_chunk: int | None = None,
        mute: bool = False,
    ) -> None:
        self._positions = positions
        self._mute = mute
        self._read_chunk = read_chunk
        self._pending = bytearray()
        self._moves: tuple[str, ...] = ()
        self.sent: list[str] = []
        self.events: list[str] = []

    def emit(self, text: str) -> None:
        """Queue unsolicited engine output."""
        self._pending += text.encode()

    def start(self) -> None:
        self.events.append("start")

    def write(self, data: bytes) -> None:
        for line in data.decode().splitlines():
            self.sent.append(line)
            if not self._mute:
                self._respond(line)

    def read_available(self) -> bytes:
        size = len(self._pending) if self._read_chunk is None else self._read_chunk
        data = bytes(self._pending[:size])
        del self._pending[:size]
        return data

    def close_input(self) -> None:
        self.events.append("close_input")

    def wait(self) -> int:
        self.events.append("wait")
        return 0

    def _current(self) -> ScriptedPosition:
        try:
            return self._positions[self._moves]
        except KeyError:
            raise AssertionError(f"Unscripted position: {self._moves}") from None

    def _respond(self, command: str) -> None:
        if command == "uci":
            self.emit("id name FakeFish\nid author pytest\nuciok\n")
        elif command == "isready":
            self.emit("readyok\n")
        elif command.startswith("position startpos"):
            _, _, moves = command.partition(" moves ")
            self._moves = tuple(moves.split())
        elif command == "go perft 1":
            legal = self._current().legal
            lines = "".join(f"{lan}: 1\n" for lan in legal)
            self.emit(f"{lines}\nNodes searched: {len(legal)}\n\n")
        elif command == "d":
            fen = self._current().fen
            self.emit(
                "\n +---+---+---+---+---+---+---+---+\n\n"
                f"Fen: {fen}\nKey: 8F8F01D4562F59FB\nCheckers: \n"
            )
        elif command.startswith("go movetime"):
            self.emit("".join(f"{line}\n" for line in self._current().info))
        elif command == "stop":
            self.emit(f"bestmove {self._current().bestmove}\n")


def sample_positions() -> dict[tuple[str, ...], ScriptedPosition]:
    """Script for ``1. e4 e5 2. Nf3``."""
    return {
        (): ScriptedPosition(
            fen=STARTING_FEN,
            legal=_START_MOVES,
            info=(
                "info depth 12 seldepth 15 multipv 1 score cp 30 nodes 1000 pv e2e4 e7e5",
                "info depth 12 seldepth 14 multipv 2 score cp 25 nodes 1000 pv d2d4",
                "info depth 12 seldepth 14 multipv 3 score cp -200 nodes 1000 pv g2g4",
            ),
            bestmove="e2e4",
        ),
        ("e2e4",): ScriptedPosition(
            fen=AFTER_E4,
            legal=_AFTER_E4_MOVES,
            info=(
                # Tail of the previous search; d2d4 is not legal for Black here.
                "info depth 13 multipv 2 score cp 500 pv d2d4",
                "info depth 12 multipv 1 score cp 20 pv e7e5 g1f3",
                "info depth 12 multipv 2 score mate -3 pv f7f6 d1h5",
            ),
            bestmove="e7e5",
        ),
        ("e2e4", "e7e5"): ScriptedPosition(
            fen=AFTER_E5,
            legal=_AFTER_E5_MOVES,
            info=("info depth 12 multipv 1 score cp -300 pv g1f3",),
            bestmove="g1f3",
        ),
        ("e2e4", "e7e5", "g1f3"): ScriptedPosition(fen=AFTER_NF3),
    }


@pytest.fixture
def fake_engine() -> FakeEngineProcess:
    """Scripted engine for the sample game ``1. e4 e5 2. Nf3``."""
    return FakeEngineProcess(sample_positions())


@pytest.fixture
def make_engine() -> type[FakeEngineProcess]:
    """Factory for engines with a custom script."""
    return FakeEngineProcess


@pytest.fixture
def scripted_position() -> type[ScriptedPosition]:
    return ScriptedPosition


@pytest.fixture
def sample_script() -> dict[tuple[str, ...], ScriptedPosition]:
    return sample_positions()


@pytest.fixture
def sample_pgn() -> str:
    return SAMPLE_PGN


@pytest.fixture
def sample_fens() -> list[str]:
    """FENs after each ply of the sample game."""
    return [AFTER_E4, AFTER_E5, AFTER_NF3]

