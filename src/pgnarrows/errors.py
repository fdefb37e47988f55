"""Exception hierarchy for fatal analysis failures."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every condition that aborts a run."""

    category = "internal"


class PgnSyntaxError(AnalysisError):
    """Raised when the PGN input violates the supported grammar."""

    category = "grammar"

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} (at offset {offset})")
        self.offset = offset


class EngineTimeout(AnalysisError):
    """Raised when an awaited engine marker does not arrive in time."""

    category = "protocol"

    def __init__(self, target: str, timeout_ms: int) -> None:
        super().__init__(
            f"max wait time of {timeout_ms} ms exceeded while waiting for {target!r}"
        )
        self.target = target
        self.timeout_ms = timeout_ms


class EngineProtocolError(AnalysisError):
    """Raised when an engine response is missing an expected field."""

    category = "protocol"


class EngineStartError(AnalysisError):
    """Raised when the engine process cannot be launched."""

    category = "resource"


class CapacityError(AnalysisError):
    """Raised when a fixed capacity is exceeded."""

    category = "resource"


class ResolutionError(AnalysisError):
    """Raised when a SAN move cannot be mapped to a coordinate move."""

    category = "internal-consistency"
