from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, List, Sequence, Tuple

from .chains import ChainCounter, windows
from .symbols import SymbolTable


@dataclass(frozen=True)
class TransitionScore:
    prefix: Tuple[Hashable, ...]
    suffix: Hashable
    likelihood: float


class Scorer:
    """Average per-step transition likelihood of a sequence under the chain counts."""

    def __init__(self, symbols: SymbolTable, counter: ChainCounter) -> None:
        self.symbols = symbols
        self.counter = counter

    def _padded(self, sequence: Sequence[Hashable]) -> List[Hashable]:
        boundary = self.symbols.boundary
        return [boundary] * self.counter.depth + list(sequence) + [boundary]

    def _likelihood(self, prefix: Tuple[int | None, ...], suffix: int | None) -> float:
        # Unseen symbols look up as None and can never match a recorded prefix.
        if suffix is None or None in prefix:
            return 0.0
        entry = self.counter.entry(prefix)
        if entry is None:
            return 0.0
        return entry.likelihood(suffix)

    def transitions(self, sequence: Sequence[Hashable]) -> List[TransitionScore]:
        depth = self.counter.depth
        padded = self._padded(sequence)
        indexes = [self.symbols.lookup(symbol) for symbol in padded]
        return [
            TransitionScore(
                prefix=tuple(padded[start : start + depth]),
                suffix=padded[start + depth],
                likelihood=self._likelihood(prefix, suffix),
            )
            for start, (prefix, suffix) in enumerate(windows(indexes, depth))
        ]

    def score(self, sequence: Sequence[Hashable]) -> float:
        if not sequence:
            return 0.0
        indexes = [self.symbols.lookup(symbol) for symbol in self._padded(sequence)]
        total = 0.0
        for prefix, suffix in windows(indexes, self.counter.depth):
            total += self._likelihood(prefix, suffix)
        return total / len(sequence)


__all__ = ["Scorer", "TransitionScore"]
