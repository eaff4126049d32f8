from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Tuple

PrefixKey = Tuple[int, ...]

KEY_SEPARATOR = ","


@dataclass
class ChainEntry:
    """Suffix counts observed after one prefix, plus their running total."""

    suffixes: Dict[int, int] = field(default_factory=dict)
    total: int = 0

    def add(self, suffix: int, count: int = 1) -> None:
        self.suffixes[suffix] = self.suffixes.get(suffix, 0) + count
        self.total += count

    def likelihood(self, suffix: int) -> float:
        count = self.suffixes.get(suffix, 0)
        if not count or self.total <= 0:
            return 0.0
        return count / self.total


def encode_prefix(prefix: PrefixKey) -> str:
    return KEY_SEPARATOR.join(str(index) for index in prefix)


def windows(indexes: Sequence[int | None], depth: int) -> Iterator[Tuple[Tuple[int | None, ...], int | None]]:
    """Yield (prefix, suffix) for every depth-sized window of a padded sequence."""
    for start in range(len(indexes) - depth):
        yield tuple(indexes[start : start + depth]), indexes[start + depth]


class ChainCounter:
    """Prefix -> suffix occurrence counts for a fixed depth."""

    def __init__(self, depth: int) -> None:
        self.depth = depth
        self._entries: Dict[PrefixKey, ChainEntry] = {}

    def ingest(self, indexes: Sequence[int]) -> int:
        """Record every window of an already padded index sequence."""
        recorded = 0
        for prefix, suffix in windows(indexes, self.depth):
            self.add(prefix, suffix)
            recorded += 1
        return recorded

    def add(self, prefix: PrefixKey, suffix: int, count: int = 1) -> None:
        entry = self._entries.get(prefix)
        if entry is None:
            entry = ChainEntry()
            self._entries[prefix] = entry
        entry.add(suffix, count)

    def entry(self, prefix: Sequence[int | None]) -> ChainEntry | None:
        return self._entries.get(tuple(prefix))

    def count(self, prefix: Sequence[int | None], suffix: int) -> int:
        entry = self.entry(prefix)
        if entry is None:
            return 0
        return entry.suffixes.get(suffix, 0)

    def prefixes(self) -> List[PrefixKey]:
        return list(self._entries)

    def items(self) -> Iterator[Tuple[PrefixKey, ChainEntry]]:
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._entries


__all__ = [
    "ChainCounter",
    "ChainEntry",
    "PrefixKey",
    "encode_prefix",
    "windows",
]
