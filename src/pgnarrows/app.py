"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from pgnarrows.analysis import GameAnalyzer, render_annotated_pgn
from pgnarrows.config import MAX_INPUT_BYTES, AnalysisSettings, default_engine_path
from pgnarrows.core.notation import parse_pgn
from pgnarrows.engine import ChildProcess, EngineSession, QtChildProcess
from pgnarrows.errors import AnalysisError, CapacityError

_LOGGER = logging.getLogger(__name__)

ProcessFactory = Callable[[AnalysisSettings], ChildProcess]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgnarrows",
        description=(
            "Annotate a PGN game with green/red arrows showing which replies "
            "keep the best available outcome."
        ),
        epilog=(
            "Unknown options are ignored, but must not take a separate value: "
            "use --name=value so the value is not read as the input file."
        ),
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="PGN file to read (default: standard input)",
    )
    parser.add_argument(
        "--analysis-time",
        dest="analysis_time_ms",
        type=int,
        default=1000,
        metavar="MS",
        help="engine think time per move in milliseconds (default: 1000)",
    )
    parser.add_argument(
        "--just-print-fen",
        action="store_true",
        help="print ply number, SAN and FEN for each move instead of analysing",
    )
    parser.add_argument(
        "--engine",
        default=None,
        help="UCI engine executable (default: $PGNARROWS_ENGINE or stockfish)",
    )
    parser.add_argument(
        "--multipv",
        type=int,
        default=500,
        help="number of principal variations requested from the engine",
    )
    parser.add_argument("-o", "--output", help="write the result here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> AnalysisSettings:
    return AnalysisSettings(
        analysis_time_ms=args.analysis_time_ms,
        engine_path=args.engine or default_engine_path(),
        multipv=args.multipv,
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_input(path: str | None) -> str:
    """Read the whole game; input beyond ``MAX_INPUT_BYTES`` is rejected."""
    if path is None:
        data = sys.stdin.buffer.read(MAX_INPUT_BYTES + 1)
    else:
        with Path(path).open("rb") as fh:
            data = fh.read(MAX_INPUT_BYTES + 1)
    if len(data) > MAX_INPUT_BYTES:
        raise CapacityError(f"input exceeds {MAX_INPUT_BYTES} bytes")
    return data.decode("utf-8", errors="replace")


def write_output(text: str, path: str | None) -> None:
    if path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    Path(path).write_text(text, encoding="utf-8")


def _log_progress(stage: str) -> Callable[[int, int], None]:
    def report(done: int, total: int) -> None:
        _LOGGER.info("%s %d/%d", stage, done, total)

    return report


def run(
    pgn_text: str,
    settings: AnalysisSettings,
    process: ChildProcess,
    *,
    just_print_fen: bool = False,
) -> str:
    """Parse, resolve and analyse one game, returning the text to emit."""
    game = parse_pgn(pgn_text)
    session = EngineSession.from_settings(process, settings)
    analyzer = GameAnalyzer(session, analysis_time_ms=settings.analysis_time_ms)

    with session:
        analyzer.resolve_moves(game, on_progress=_log_progress("Resolved"))
        if just_print_fen:
            return "".join(f"{line}\n" for line in analyzer.print_positions(game))
        analyzer.analyze_game(game, on_progress=_log_progress("Analysed"))
    return render_annotated_pgn(game)


def _default_process(settings: AnalysisSettings) -> ChildProcess:
    return QtChildProcess(settings.engine_path)


def main(
    argv: Sequence[str] | None = None,
    *,
    process_factory: ProcessFactory = _default_process,
) -> int:
    """Run the converter; returns the process exit status."""
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    stray = [arg for arg in unknown if not arg.startswith("-")]
    if stray:
        # An unknown option's value would otherwise be taken as the input file.
        parser.error(f"unexpected argument(s): {' '.join(stray)}")
    configure_logging(args.verbose)
    try:
        settings = settings_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        pgn_text = read_input(args.input)
        output = run(
            pgn_text,
            settings,
            process_factory(settings),
            just_print_fen=args.just_print_fen,
        )
        write_output(output, args.output)
    except AnalysisError as exc:
        _LOGGER.error("%s error: %s", exc.category, exc)
        return 1
    except OSError as exc:
        _LOGGER.error("resource error: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
