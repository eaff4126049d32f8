from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, Hashable, Iterable, List, Sequence

from .chains import ChainCounter
from .decoder import GenerationConfig, Generator
from .errors import InvalidDepthError, SnapshotError
from .probabilities import STALE, FreshIndex, ProbabilityState, rebuild
from .scoring import Scorer, TransitionScore
from .snapshot import dump_snapshot, load_snapshot
from .symbols import SymbolTable

logger = logging.getLogger(__name__)


class MarkovModel:
    """
    Order-k Markov chain over arbitrary hashable symbols.

    Training accumulates prefix -> suffix counts; the cumulative probability
    index used for sampling is rebuilt lazily after any write. The model is not
    thread-safe: serialize `train` against in-flight `generate` calls.
    """

    def __init__(self, depth: int = 1, boundary: Hashable = "") -> None:
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
            raise InvalidDepthError(f"depth must be a positive integer (got {depth!r})")
        self._depth = depth
        self.symbols = SymbolTable(boundary)
        self.chains = ChainCounter(depth)
        self._probabilities: ProbabilityState = STALE

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def probabilities(self) -> ProbabilityState:
        return self._probabilities

    def invalidate(self) -> None:
        self._probabilities = STALE

    def probability_index(self) -> FreshIndex:
        """Return the current index, rebuilding it when stale."""
        if not isinstance(self._probabilities, FreshIndex):
            self._probabilities = rebuild(self.chains)
        return self._probabilities

    # ------------------------------------------------------------------ #
    # Training
    # ------------------------------------------------------------------ #
    def train(self, sequence: Iterable[Hashable]) -> "MarkovModel":
        items = list(sequence)
        for symbol in items:
            self.symbols.intern(symbol)
        boundary = self.symbols.boundary
        padded = [boundary] * self._depth + items + [boundary]
        indexes = [self.symbols.lookup(symbol) for symbol in padded]
        recorded = self.chains.ingest(indexes)
        self.invalidate()
        logger.debug(
            "Trained on %d symbols (%d transitions, %d prefixes, %d symbols known)",
            len(items),
            recorded,
            len(self.chains),
            len(self.symbols),
        )
        return self

    # ------------------------------------------------------------------ #
    # Generation / scoring
    # ------------------------------------------------------------------ #
    def generate(
        self,
        min_length: int,
        max_length: int | None = None,
        *,
        rng: random.Random | None = None,
    ) -> List[Hashable]:
        config = GenerationConfig(min_length=min_length, max_length=max_length)
        generator = Generator(self.symbols, self._depth)
        return generator.generate(self.probability_index(), config, rng=rng)

    def score(self, sequence: Sequence[Hashable]) -> float:
        return Scorer(self.symbols, self.chains).score(list(sequence))

    def score_transitions(self, sequence: Sequence[Hashable]) -> List[TransitionScore]:
        return Scorer(self.symbols, self.chains).transitions(list(sequence))

    def transitions(self, prefix: Sequence[Hashable]) -> Dict[Hashable, int]:
        """Recorded suffix counts after `prefix` (given as symbols, boundary allowed)."""
        if len(prefix) != self._depth:
            raise ValueError(f"prefix must contain exactly {self._depth} symbol(s)")
        indexes = [self.symbols.lookup(symbol) for symbol in prefix]
        if None in indexes:
            return {}
        entry = self.chains.entry(indexes)
        if entry is None:
            return {}
        return {self.symbols.resolve(suffix): count for suffix, count in entry.suffixes.items()}

    # ------------------------------------------------------------------ #
    # Serialization
    # ------------------------------------------------------------------ #
    def to_snapshot(self) -> Dict[str, Any]:
        return dump_snapshot(self._depth, self.symbols, self.chains)

    @classmethod
    def from_snapshot(cls, data: Any) -> "MarkovModel":
        depth, symbols, chains = load_snapshot(data)
        model = cls(depth, boundary=symbols.boundary)
        model.symbols = symbols
        model.chains = chains
        return model

    def to_json(self) -> str:
        return json.dumps(self.to_snapshot(), ensure_ascii=False)

    @classmethod
    def from_json(cls, payload: str) -> "MarkovModel":
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
        return cls.from_snapshot(data)

    def save(self, path: str | Path) -> Path:
        target = Path(path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.to_json(), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: str | Path) -> "MarkovModel":
        source = Path(path).expanduser()
        return cls.from_json(source.read_text(encoding="utf-8"))

    def __repr__(self) -> str:
        return (
            f"MarkovModel(depth={self._depth}, symbols={len(self.symbols)}, "
            f"prefixes={len(self.chains)})"
        )


__all__ = ["MarkovModel"]
