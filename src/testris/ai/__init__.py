"""Heuristic autoplay: placement search and the paced autopilot."""

from .heuristic import BoardFeatures, HeuristicWeights, evaluate_position
from .move_finder import MoveCandidate, MoveFinder
from .autopilot import Autopilot

__all__ = [
    "BoardFeatures",
    "HeuristicWeights",
    "evaluate_position",
    "MoveCandidate",
    "MoveFinder",
    "Autopilot",
]
