"""
fenrelay - Chess position relay between a phone camera and a desktop board.

The mobile client uploads a photo of a diagram together with a pairing code.
The relay asks a vision model for the position and pushes the resulting FEN
to every desktop client that joined the same code.
"""

__version__ = "0.1.0"
