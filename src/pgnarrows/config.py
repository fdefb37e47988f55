"""Runtime settings for a single analysis run."""

from __future__ import annotations

import os
from dataclasses import dataclass

ENGINE_ENV_VAR = "PGNARROWS_ENGINE"
DEFAULT_ENGINE = "stockfish"

# Whole-input ceiling; the game is always buffered before parsing.
MAX_INPUT_BYTES = 1 << 30


def default_engine_path() -> str:
    """Return the engine executable from the environment, or ``stockfish``."""
    return os.environ.get(ENGINE_ENV_VAR) or DEFAULT_ENGINE


@dataclass(slots=True, frozen=True)
class AnalysisSettings:
    """Engine and protocol limits used by the analyzer."""

    analysis_time_ms: int = 1000
    engine_path: str = DEFAULT_ENGINE
    multipv: int = 500
    poll_interval_ms: int = 10
    marker_timeout_ms: int = 5000

    def __post_init__(self) -> None:
        if self.analysis_time_ms < 0:
            raise ValueError("analysis time must not be negative")
        if self.multipv < 1:
            raise ValueError("multipv must be at least 1")
        if self.poll_interval_ms < 1:
            raise ValueError("poll interval must be at least 1 ms")
