"""Game analysis APIs."""

from pgnarrows.analysis.annotator import (
    arrow_comment,
    move_arrows,
    render_annotated_pgn,
    render_movetext,
)
from pgnarrows.analysis.models import Outcome, classify_score
from pgnarrows.analysis.service import (
    AnalysisEngine,
    GameAnalyzer,
    merge_engine_output,
)

__all__ = [
    "AnalysisEngine",
    "GameAnalyzer",
    "Outcome",
    "arrow_comment",
    "classify_score",
    "merge_engine_output",
    "move_arrows",
    "render_annotated_pgn",
    "render_movetext",
]
