"""Tests for PGN movetext parsing."""

from __future__ import annotations

import pytest

from pgnarrows.core.models import MAX_COMMENTS
from pgnarrows.core.notation import parse_pgn
from pgnarrows.errors import PgnSyntaxError


class TestTags:
    def test_tags_kept_in_order_without_brackets(self) -> None:
        game = parse_pgn('[Event "Casual"]\n[White "A"]\n\n1. e4 *')
        assert game.tags == ['Event "Casual"', 'White "A"']

    def test_unclosed_tag_is_error(self) -> None:
        with pytest.raises(PgnSyntaxError, match="Tag not properly closed"):
            parse_pgn('[Event "Casual"\n1. e4')

    def test_no_tags(self) -> None:
        game = parse_pgn("1. d4 d5")
        assert game.tags == []
        assert [m.san for m in game.moves] == ["d4", "d5"]


class TestMovetext:
    def test_moves_numbers_comments_and_result(self) -> None:
        game = parse_pgn(
            '[Event "x"]\n\n1. e4 {best by test} e5 2. Nf3 Nc6 {a} {b} 1-0'
        )
        assert [m.san for m in game.moves] == ["e4", "e5", "Nf3", "Nc6"]
        assert [m.move_number for m in game.moves] == [1, 1, 2, 2]
        assert game.moves[0].comments == ["best by test"]
        assert game.moves[3].comments == ["a", "b"]
        assert game.result == "1-0"
        assert all(m.lan is None and m.evaluations == [] for m in game.moves)

    @pytest.mark.parametrize("token", ["1-0", "0-1", "1/2-1/2", "*"])
    def test_result_tokens(self, token: str) -> None:
        game = parse_pgn(f"1. e4 e5 {token}")
        assert game.result == token
        assert len(game.moves) == 2

    def test_parsing_stops_at_result(self) -> None:
        game = parse_pgn("1. e4 * 2. garbage ((")
        assert len(game.moves) == 1

    def test_end_of_input_without_result(self) -> None:
        game = parse_pgn("1. e4 e5 2. Nf3")
        assert game.result is None
        assert len(game.moves) == 3

    def test_black_ellipsis_number(self) -> None:
        game = parse_pgn("1. e4 {c} 1... e5 2.Nf3")
        assert [m.san for m in game.moves] == ["e4", "e5", "Nf3"]
        assert game.moves[1].move_number == 1

    def test_missing_numbers_derived_from_ply(self) -> None:
        game = parse_pgn("e4 e5 Nf3")
        assert [m.move_number for m in game.moves] == [1, 1, 2]

    def test_annotation_glyphs_and_nags(self) -> None:
        game = parse_pgn("1. e4!? e5?? $2 2. Nf3 $1 *")
        assert game.moves[0].annotation == "!?"
        assert game.moves[1].annotation == "?? $2"
        assert game.moves[2].annotation == "$1"

    def test_zero_style_castling(self) -> None:
        game = parse_pgn("1. e4 e5 2. Nf3 Nf6 3. Bc4 Bc5 4. 0-0 0-0 *")
        assert [m.san for m in game.moves][-2:] == ["0-0", "0-0"]
        assert game.result == "*"

    def test_variations_are_skipped(self) -> None:
        game = parse_pgn("1. e4 (1. d4 d5 (1... Nf6 2. c4) 2. c4) e5 2. Nf3 *")
        assert [m.san for m in game.moves] == ["e4", "e5", "Nf3"]

    def test_comment_before_first_move_is_ignored(self) -> None:
        game = parse_pgn("{Opening notes} 1. e4 e5")
        assert [m.san for m in game.moves] == ["e4", "e5"]
        assert game.moves[0].comments == []

    def test_comment_limit(self) -> None:
        comments = " ".join("{c}" for _ in range(MAX_COMMENTS))
        game = parse_pgn(f"1. e4 {comments} e5")
        assert len(game.moves[0].comments) == MAX_COMMENTS

        with pytest.raises(PgnSyntaxError, match="More than 10 comments"):
            parse_pgn(f"1. e4 {comments} {{one too many}} e5")


class TestGrammarErrors:
    def test_number_without_dot(self) -> None:
        with pytest.raises(PgnSyntaxError, match="Expected dot after move number"):
            parse_pgn("1 e4")

    def test_unclosed_comment(self) -> None:
        with pytest.raises(PgnSyntaxError, match="Comment not properly closed"):
            parse_pgn("1. e4 {never closed")

    def test_unclosed_variation(self) -> None:
        with pytest.raises(PgnSyntaxError, match="Variation not properly closed"):
            parse_pgn("1. e4 (1. d4 d5")

    def test_unexpected_character(self) -> None:
        with pytest.raises(PgnSyntaxError, match="Expected SAN move") as exc:
            parse_pgn("1. e4 ; e5")
        assert exc.value.offset == 6
        assert exc.value.category == "grammar"

    def test_number_with_nothing_after(self) -> None:
        with pytest.raises(PgnSyntaxError, match="Expected SAN move"):
            parse_pgn("1. e4 2.")
