"""
配对引擎包
"""

from .engine import PairingEngine
from .scoring import NormalizedName, normalize_name, score_names, similarity

__all__ = [
    "PairingEngine",
    "NormalizedName",
    "normalize_name",
    "score_names",
    "similarity",
]
