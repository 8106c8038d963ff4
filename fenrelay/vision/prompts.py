"""
Vision Prompts - Task description sent alongside the diagram photo.

The prompt asks for structured JSON with an explicit side-to-move field,
so the normalizer can override whatever the model put in the FEN itself.
"""

from dataclasses import dataclass


@dataclass
class VisionPrompts:
    """
    Collection of prompts for position detection.

    Only the diagram prompt is used by the relay; the placeholder in the
    output example is what the normalizer expects to read back.
    """

    @staticmethod
    def diagram_to_fen() -> str:
        """Prompt to read a printed chess diagram into FEN."""
        return """
You are reading a PRINTED CHESS DIAGRAM (for example from a book), not a
photo of a physical board. Transcribe the position exactly.

Orientation:
- The diagram is drawn from White's side
- Rank 8 is the top row, rank 1 is the bottom row
- Files a to h run left to right

Piece colors:
- White pieces are hollow / outlined
- Black pieces are solid / filled

Piece shapes:
- King (K/k): tallest, cross on top
- Queen (Q/q): tall, pointed crown
- Rook (R/r): tower with battlements
- Bishop (B/b): mitre with a slit
- Knight (N/n): horse head
- Pawn (P/p): smallest, round head

Procedure:
1. Read each rank from 8 down to 1, square by square from a to h
2. Write consecutive empty squares as a single digit (1-8)
3. Check that every rank adds up to exactly 8 squares
4. Check there are exactly 8 ranks separated by "/"
5. Look at the caption: "White to play/move" means "w",
   "Black to play/move" means "b"; if there is no caption use "w"

Return ONLY this JSON, with no other text:
{
  "fen": "<rank8>/<rank7>/<rank6>/<rank5>/<rank4>/<rank3>/<rank2>/<rank1> w KQkq - 0 1",
  "sideToMove": "w"
}

FEN reminders:
- Uppercase letters are White (KQRBNP), lowercase are Black (kqrbnp)
- Digits are runs of empty squares
- Example rank: black rook, two empty, black queen, one empty, black rook,
  black king, one empty is written "r2q1rk1"
"""
