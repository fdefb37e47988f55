"""Serialized request/response session with an external UCI engine."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from types import TracebackType
from typing import TYPE_CHECKING

from pgnarrows.core.notation.fen import board_field, iter_pieces
from pgnarrows.engine.uci import (
    BESTMOVE_MARKER,
    FEN_MARKER,
    PERFT_MARKER,
    parse_fen_line,
    parse_perft_moves,
)
from pgnarrows.errors import EngineProtocolError, EngineTimeout

if TYPE_CHECKING:
    from pgnarrows.config import AnalysisSettings
    from pgnarrows.engine.process import ChildProcess

_LOGGER = logging.getLogger(__name__)


class ResponseBuffer:
    """Append-only accumulator of everything the engine has written."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def append(self, chunk: bytes) -> None:
        self._data += chunk

    def since(self, start: int) -> bytes:
        return bytes(self._data[start:])

    def find(self, needle: bytes, start: int) -> int:
        return self._data.find(needle, start)


class ResponseWindow:
    """View of the bytes appended to a :class:`ResponseBuffer` after a mark.

    Output that arrived before the mark, such as the tail of a previous
    search, is never visible through the window.
    """

    __slots__ = ("_buffer", "_start")

    def __init__(self, buffer: ResponseBuffer, start: int) -> None:
        self._buffer = buffer
        self._start = start

    def read(self) -> bytes:
        return self._buffer.since(self._start)

    def text(self) -> str:
        return self.read().decode("utf-8", errors="replace")

    def contains(self, target: str) -> bool:
        return self._buffer.find(target.encode(), self._start) >= 0


class EngineSession:
    """Owns the engine process and drives it one command at a time."""

    __slots__ = (
        "_process",
        "_buffer",
        "_window",
        "_multipv",
        "_poll_interval_ms",
        "_marker_timeout_ms",
        "_is_started",
    )

    def __init__(
        self,
        process: ChildProcess,
        *,
        multipv: int = 500,
        poll_interval_ms: int = 10,
        marker_timeout_ms: int = 5000,
    ) -> None:
        self._process = process
        self._buffer = ResponseBuffer()
        self._window = ResponseWindow(self._buffer, 0)
        self._multipv = multipv
        self._poll_interval_ms = poll_interval_ms
        self._marker_timeout_ms = marker_timeout_ms
        self._is_started = False

    @classmethod
    def from_settings(
        cls, process: ChildProcess, settings: AnalysisSettings
    ) -> EngineSession:
        return cls(
            process,
            multipv=settings.multipv,
            poll_interval_ms=settings.poll_interval_ms,
            marker_timeout_ms=settings.marker_timeout_ms,
        )

    @property
    def is_started(self) -> bool:
        return self._is_started

    # -- lifecycle -----------------------------------------------------

    def start(self) -> None:
        """Launch the engine and run the UCI handshake."""
        if self._is_started:
            return
        self._process.start()
        self._is_started = True

        try:
            self.mark()
            self.send("uci\n")
            self.await_marker("uciok")
            self.send(f"setoption name MultiPV value {self._multipv}\n")
            self.send("ucinewgame\n")
            self.mark()
            self.send("isready\n")
            self.await_marker("readyok")
        except BaseException:
            # Reap the child even when the handshake fails.
            self.close()
            raise

    def close(self) -> int | None:
        """Close the engine's input and wait for it to exit.

        This is the only wait without a ceiling: a UCI engine exits as soon as
        its input reaches end of file.
        """
        if not self._is_started:
            return None
        self._is_started = False
        self._process.close_input()
        return self._process.wait()

    def __enter__(self) -> EngineSession:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -- primitives ----------------------------------------------------

    def mark(self) -> ResponseWindow:
        """Start a new response window at the current end of output."""
        self._window = ResponseWindow(self._buffer, len(self._buffer))
        return self._window

    def send(self, text: str) -> None:
        _LOGGER.debug("-> %s", text.rstrip())
        self._process.write(text.encode())

    def drain(self) -> int:
        """Move any available engine output into the accumulator."""
        data = self._process.read_available()
        if data:
            self._buffer.append(data)
            _LOGGER.debug("<- %d bytes", len(data))
        return len(data)

    def await_marker(self, target: str, timeout_ms: int | None = None) -> None:
        """Poll until *target* appears in the current window."""
        window = self._window
        self._poll_until(lambda: window.contains(target), target, timeout_ms)

    def read_new(self) -> str:
        """Return the output appended since the last :meth:`mark`."""
        return self._window.text()

    def set_position(self, lans: Sequence[str]) -> None:
        """Put the engine in the start position followed by *lans*."""
        if lans:
            self.send(f"position startpos moves {' '.join(lans)}\n")
        else:
            self.send("position startpos\n")

    # -- queries -------------------------------------------------------

    def legal_moves(self) -> frozenset[str]:
        """Return the coordinate moves legal in the current position."""
        window = self.mark()
        self.send("go perft 1\n")
        self.await_marker(PERFT_MARKER)
        return parse_perft_moves(window.text())

    def fen(self) -> str:
        """Return the FEN of the current position from the board display."""
        window = self.mark()
        self.send("d\n")
        self.await_marker(FEN_MARKER)
        # The marker can arrive before the rest of its line.
        self._poll_until(
            lambda: _complete_fen_line(window.text()) is not None, FEN_MARKER, None
        )
        fen = _complete_fen_line(window.text())
        if fen is None:
            raise EngineProtocolError("Failed to find the FEN in the engine output")
        try:
            list(iter_pieces(board_field(fen)))
        except ValueError as exc:
            raise EngineProtocolError(f"Malformed FEN from engine: {fen!r}") from exc
        return fen

    def evaluate(self, time_ms: int) -> str:
        """Search the current position for *time_ms* and return its output."""
        window = self.mark()
        self.send(f"go movetime {time_ms}\n")
        self._pump(time_ms)
        self.send("stop\n")
        self.await_marker(BESTMOVE_MARKER)
        return window.text()

    # -- helpers -------------------------------------------------------

    def _poll_until(
        self,
        done: Callable[[], bool],
        target: str,
        timeout_ms: int | None,
    ) -> None:
        limit_ms = self._marker_timeout_ms if timeout_ms is None else timeout_ms
        started = time.monotonic()
        while not done():
            if (time.monotonic() - started) * 1000 > limit_ms:
                raise EngineTimeout(target, limit_ms)
            time.sleep(self._poll_interval_ms / 1000)
            self.drain()

    def _pump(self, duration_ms: int) -> None:
        """Sleep for *duration_ms*, draining output so the pipe never fills."""
        deadline = time.monotonic() + duration_ms / 1000
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            time.sleep(min(remaining, self._poll_interval_ms / 1000))
            self.drain()


def _complete_fen_line(output: str) -> str | None:
    # Only newline-terminated lines count; the last fragment may be partial.
    complete, _, _ = output.rpartition("\n")
    return parse_fen_line(complete)
