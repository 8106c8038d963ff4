"""
Vision Layer - Photo to position string.

Architecture:
    Photo -> VisionCollaborator -> raw reply -> normalize_detection -> FEN

The collaborator is an external model and is not trusted to follow the
requested output format; normalization is best effort and reports failure
as a value.
"""

from .collaborator import VisionCollaborator, GeminiCollaborator, StaticCollaborator
from .normalizer import DetectionResult, normalize_detection, apply_side_to_move
from .prompts import VisionPrompts

__all__ = [
    "VisionCollaborator",
    "GeminiCollaborator",
    "StaticCollaborator",
    "DetectionResult",
    "normalize_detection",
    "apply_side_to_move",
    "VisionPrompts",
]
