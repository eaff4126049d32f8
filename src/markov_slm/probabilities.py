from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence, Tuple, Union

from .chains import ChainCounter, PrefixKey

logger = logging.getLogger(__name__)

CumulativeTable = Tuple[Tuple[float, int], ...]


@dataclass(frozen=True)
class StaleIndex:
    """Marker state: the counts changed since the last rebuild."""


@dataclass(frozen=True)
class FreshIndex:
    """Per-prefix cumulative mass tables consistent with the chain counts."""

    tables: Mapping[PrefixKey, CumulativeTable] = field(default_factory=dict)

    def table(self, prefix: Sequence[int]) -> CumulativeTable | None:
        return self.tables.get(tuple(prefix))

    def sample(self, prefix: Sequence[int], draw: float) -> int | None:
        """
        Return the first suffix whose cumulative mass reaches `draw`.

        None means the prefix was never observed. A draw above the final
        cumulative value (rounding drift) resolves to the last suffix.
        """
        table = self.table(prefix)
        if not table:
            return None
        for upper, suffix in table:
            if draw <= upper:
                return suffix
        return table[-1][1]


ProbabilityState = Union[StaleIndex, FreshIndex]

STALE = StaleIndex()


def rebuild(counter: ChainCounter) -> FreshIndex:
    tables: Dict[PrefixKey, CumulativeTable] = {}
    for prefix, entry in counter.items():
        upper = 0.0
        cumulative = []
        for suffix in sorted(entry.suffixes):
            upper += entry.suffixes[suffix] / entry.total
            cumulative.append((upper, suffix))
        tables[prefix] = tuple(cumulative)
    logger.debug("Rebuilt probability index for %d prefixes", len(tables))
    return FreshIndex(tables)


__all__ = [
    "CumulativeTable",
    "FreshIndex",
    "ProbabilityState",
    "STALE",
    "StaleIndex",
    "rebuild",
]
