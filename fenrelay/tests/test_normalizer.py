"""
Tests for position normalization.

Tests:
- Structured replies override the side to move
- Replies wrapped in extra text are still parsed
- Pattern fallback for free text
- Failures come back as results, not exceptions
"""

import logging

import pytest

from ..vision import normalize_detection, apply_side_to_move
from ..vision.normalizer import normalize_side
from .conftest import START_FEN


class TestStructuredReplies:
    """Replies in the requested JSON shape."""

    def test_side_to_move_overrides_fen(self):
        """sideToMove replaces the second FEN field."""
        reply = '{"fen":"rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1","sideToMove":"b"}'

        result = normalize_detection(reply)

        assert result.success
        assert result.structured
        assert result.fen == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b KQkq - 0 1"
        assert result.side_to_move == "b"

    def test_missing_side_defaults_to_white(self):
        reply = '{"fen":"8/8/8/8/8/8/8/K6k b - - 0 1"}'

        result = normalize_detection(reply)

        assert result.fen == "8/8/8/8/8/8/8/K6k w - - 0 1"

    def test_dict_reply(self, structured_reply):
        """An already parsed reply is accepted as-is."""
        result = normalize_detection(structured_reply)

        assert result.success
        assert result.fen == START_FEN.replace(" w ", " b ")

    def test_position_string_key(self):
        """positionString is accepted in place of fen."""
        result = normalize_detection({"positionString": START_FEN, "sideToMove": "black"})

        assert result.fen.split()[1] == "b"

    def test_json_inside_prose(self):
        """Surrounding text and code fences are tolerated."""
        reply = 'Here you go:\n```json\n{"fen": "%s", "sideToMove": "w"}\n```' % START_FEN

        result = normalize_detection(reply)

        assert result.success
        assert result.fen == START_FEN

    def test_placement_only_fen_left_alone(self):
        """A FEN without a side field is not padded."""
        result = normalize_detection('{"fen": "8/8/8/8/8/8/8/K6k", "sideToMove": "b"}')

        assert result.fen == "8/8/8/8/8/8/8/K6k"

    def test_structured_dict_without_fen_fails(self):
        result = normalize_detection({"sideToMove": "w"})

        assert not result.success


class TestPatternFallback:
    """Replies that are not JSON."""

    def test_fen_in_free_text(self):
        reply = "The position is %s as far as I can tell." % START_FEN

        result = normalize_detection(reply)

        assert result.success
        assert not result.structured
        assert result.fen == START_FEN

    def test_json_without_fen_falls_back(self):
        """A JSON object with no position falls back to the raw text."""
        reply = '{"note": "see below"} %s' % START_FEN

        result = normalize_detection(reply)

        assert result.fen == START_FEN

    @pytest.mark.parametrize("reply", [
        "",
        "   ",
        None,
        "I could not see any chessboard in this picture.",
        "{not valid json",
    ])
    def test_unusable_replies_fail(self, reply):
        """No position found is reported, never raised."""
        result = normalize_detection(reply)

        assert not result.success
        assert result.fen is None
        assert result.reason


class TestHelpers:

    def test_apply_side_to_move(self):
        assert apply_side_to_move(START_FEN, "b").split()[1] == "b"

    @pytest.mark.parametrize("value,expected", [
        ("w", "w"),
        ("b", "b"),
        ("White", "w"),
        ("BLACK", "b"),
        ("", "w"),
        (None, "w"),
        ("purple", "w"),
    ])
    def test_normalize_side(self, value, expected):
        assert normalize_side(value) == expected

    def test_unrecognized_side_is_logged(self, caplog):
        """A side value outside the known aliases falls back to white, loudly."""
        with caplog.at_level(logging.WARNING, logger="fenrelay.vision.normalizer"):
            result = normalize_detection({"fen": START_FEN, "sideToMove": "black to move"})

        assert result.fen.split()[1] == "w"
        assert "black to move" in caplog.text

    def test_absent_side_is_not_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="fenrelay.vision.normalizer"):
            normalize_side(None)

        assert caplog.text == ""
