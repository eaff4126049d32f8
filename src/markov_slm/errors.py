from __future__ import annotations

__all__ = ["MarkovError", "SnapshotError", "InvalidDepthError"]


class MarkovError(Exception):
    """Base class for structural failures raised by markov_slm."""


class SnapshotError(MarkovError, ValueError):
    """A serialized model is missing fields or carries inconsistent data."""


class InvalidDepthError(MarkovError, ValueError):
    """The chain depth is not a positive integer."""
