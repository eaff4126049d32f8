"""
Order-k Markov chain modelling for discrete symbol sequences.

    * symbols: dense symbol <-> index table, index 0 reserved for the boundary.
    * chains: prefix -> suffix occurrence counts.
    * probabilities: lazily rebuilt cumulative tables for sampling.
    * decoder / scoring: sequence generation and likelihood scoring.

See model.MarkovModel for the façade that wires them together.
"""

from .errors import InvalidDepthError, MarkovError, SnapshotError
from .model import MarkovModel

__all__ = ["InvalidDepthError", "MarkovError", "MarkovModel", "SnapshotError"]
