"""Child process with a duplex byte stream, backed by ``QProcess``."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from PyQt6.QtCore import QCoreApplication, QProcess

from pgnarrows.errors import EngineProtocolError, EngineStartError

_LOGGER = logging.getLogger(__name__)


class ChildProcess(Protocol):
    """Minimal process interface the engine protocol is written against."""

    def start(self) -> None: ...

    def write(self, data: bytes) -> None: ...

    def read_available(self) -> bytes: ...

    def close_input(self) -> None: ...

    def wait(self) -> int: ...


def ensure_core_application() -> QCoreApplication:
    """Return the running ``QCoreApplication``, creating one if needed."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


class QtChildProcess:
    """Run *program* as a child with piped stdin/stdout.

    No event loop is used: reads and writes go through the blocking
    ``waitFor*`` calls with explicit timeouts, except :meth:`wait`.
    """

    __slots__ = ("_program", "_arguments", "_process", "_io_timeout_ms", "_app")

    def __init__(
        self,
        program: str,
        arguments: Sequence[str] = (),
        *,
        io_timeout_ms: int = 5000,
    ) -> None:
        self._program = program
        self._arguments = list(arguments)
        self._io_timeout_ms = io_timeout_ms
        self._process: QProcess | None = None
        self._app: QCoreApplication | None = None

    @property
    def application(self) -> QCoreApplication | None:
        """Application instance kept alive for this process, once started."""
        return self._app

    def start(self) -> None:
        # Held so the application outlives every QProcess it owns.
        self._app = ensure_core_application()
        process = QProcess()
        process.setProcessChannelMode(
            QProcess.ProcessChannelMode.ForwardedErrorChannel
        )
        process.start(self._program, self._arguments)
        if not process.waitForStarted(self._io_timeout_ms):
            message = process.errorString()
            raise EngineStartError(f"failed to launch {self._program!r}: {message}")
        _LOGGER.debug("Started %s (pid %s)", self._program, process.processId())
        self._process = process

    def write(self, data: bytes) -> None:
        process = self._require_process()
        process.write(data)
        # Without an event loop, QProcess only flushes its write buffer here.
        if not process.waitForBytesWritten(self._io_timeout_ms):
            raise EngineProtocolError(
                f"failed to write to {self._program!r}: {process.errorString()}"
            )

    def read_available(self) -> bytes:
        process = self._require_process()
        data = bytearray(process.readAllStandardOutput().data())
        while process.waitForReadyRead(0):
            data += process.readAllStandardOutput().data()
        return bytes(data)

    def close_input(self) -> None:
        self._require_process().closeWriteChannel()

    def wait(self) -> int:
        process = self._require_process()
        process.waitForFinished(-1)
        _LOGGER.debug("%s exited with status %d", self._program, process.exitCode())
        return process.exitCode()

    def _require_process(self) -> QProcess:
        if self._process is None:
            raise EngineStartError(f"{self._program!r} has not been started")
        return self._process
