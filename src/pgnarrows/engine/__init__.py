"""Engine package: child process, UCI output parsing and session protocol."""

from pgnarrows.engine.process import ChildProcess, QtChildProcess
from pgnarrows.engine.session import EngineSession, ResponseBuffer, ResponseWindow
from pgnarrows.engine.uci import (
    MATE_SCORE_CP,
    InfoScore,
    iter_info_scores,
    parse_info_line,
    parse_perft_moves,
)

__all__ = [
    "MATE_SCORE_CP",
    "ChildProcess",
    "EngineSession",
    "InfoScore",
    "QtChildProcess",
    "ResponseBuffer",
    "ResponseWindow",
    "iter_info_scores",
    "parse_info_line",
    "parse_perft_moves",
]
