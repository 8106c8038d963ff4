"""
Position Normalizer - Turns raw vision model output into one FEN string.

Two stages, tried in order:
1. Structured: parse the reply as JSON ({"fen": ..., "sideToMove": ...})
   and force the FEN's side-to-move field to the reported side.
2. Fallback: search the raw text for a FEN-shaped substring.

The outcome is always a DetectionResult; this module never raises on bad
model output.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import json
import logging
import re

logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")
FEN_PATTERN = re.compile(
    r"[rnbqkpRNBQKP1-8/]+\s+[wb]\s+[KQkq-]+\s+[a-h3-6-]+\s+\d+\s+\d+"
)

DEFAULT_SIDE_TO_MOVE = "w"
SIDE_ALIASES = {
    "w": "w",
    "white": "w",
    "b": "b",
    "black": "b",
}


@dataclass
class DetectionResult:
    """
    Outcome of reading a position out of a model reply.

    Exactly one of `fen` (success) or `reason` (failure) is meaningful.
    """
    success: bool
    fen: str | None = None
    side_to_move: str | None = None
    reason: str | None = None
    structured: bool = False

    @classmethod
    def ok(cls, fen: str, side_to_move: str | None, structured: bool) -> DetectionResult:
        return cls(success=True, fen=fen, side_to_move=side_to_move, structured=structured)

    @classmethod
    def failed(cls, reason: str) -> DetectionResult:
        return cls(success=False, reason=reason)


def normalize_side(value: Any) -> str:
    """Map a reported side to move onto "w"/"b", defaulting to white."""
    if value is None:
        return DEFAULT_SIDE_TO_MOVE
    if isinstance(value, str):
        side = SIDE_ALIASES.get(value.strip().lower())
        if side is not None:
            return side
    logger.warning("Unrecognized sideToMove %r, defaulting to white", value)
    return DEFAULT_SIDE_TO_MOVE


def apply_side_to_move(fen: str, side: str) -> str:
    """Replace the second FEN field with `side`; short FENs are left alone."""
    fields = fen.split()
    if len(fields) >= 2:
        fields[1] = side
        return " ".join(fields)
    return fen


def _parse_structured(output: str | dict[str, Any]) -> DetectionResult | None:
    if isinstance(output, dict):
        data = output
    else:
        match = JSON_OBJECT_PATTERN.search(output)
        candidate = match.group(0) if match else output
        try:
            data = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            return None

    if not isinstance(data, dict):
        return None

    fen = data.get("fen") or data.get("positionString")
    if not isinstance(fen, str) or not fen.strip():
        return None

    side = normalize_side(data.get("sideToMove"))
    return DetectionResult.ok(
        apply_side_to_move(fen.strip(), side),
        side_to_move=side,
        structured=True,
    )


def _extract_pattern(text: str) -> DetectionResult:
    match = FEN_PATTERN.search(text)
    if not match:
        return DetectionResult.failed("No position found in model output")
    fen = match.group(0)
    return DetectionResult.ok(fen, side_to_move=fen.split()[1], structured=False)


def normalize_detection(output: str | dict[str, Any] | None) -> DetectionResult:
    """
    Read a FEN out of whatever the vision model returned.

    Args:
        output: Raw reply text, or an already-parsed structured reply

    Returns:
        DetectionResult, successful when a position string was found
    """
    if output is None:
        return DetectionResult.failed("Empty model output")
    if isinstance(output, str):
        output = output.strip()
        if not output:
            return DetectionResult.failed("Empty model output")

    result = _parse_structured(output)
    if result is not None:
        return result

    if isinstance(output, dict):
        return DetectionResult.failed("Structured output has no position string")

    logger.warning("Could not parse model output as JSON, falling back to pattern extraction")
    return _extract_pattern(output)
