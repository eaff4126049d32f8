from __future__ import annotations

from typing import Dict, Hashable, Iterable, List

BOUNDARY_INDEX = 0


class SymbolTable:
    """Dense symbol <-> index mapping with index 0 pinned to the boundary symbol."""

    def __init__(self, boundary: Hashable = "") -> None:
        self.boundary = boundary
        self._symbols: List[Hashable] = [boundary]
        self._index: Dict[Hashable, int] = {boundary: BOUNDARY_INDEX}

    @classmethod
    def from_symbols(cls, symbols: Iterable[Hashable]) -> "SymbolTable":
        ordered = list(symbols)
        if not ordered:
            raise ValueError("symbol list must start with the boundary symbol")
        table = cls(ordered[0])
        for position, symbol in enumerate(ordered[1:], start=1):
            if symbol in table._index:
                raise ValueError(f"duplicate symbol {symbol!r} at position {position}")
            table.intern(symbol)
        return table

    def intern(self, symbol: Hashable) -> int:
        cached = self._index.get(symbol)
        if cached is not None:
            return cached
        index = len(self._symbols)
        self._symbols.append(symbol)
        self._index[symbol] = index
        return index

    def lookup(self, symbol: Hashable) -> int | None:
        try:
            return self._index.get(symbol)
        except TypeError:
            return None

    def resolve(self, index: int) -> Hashable:
        if index < 0 or index >= len(self._symbols):
            raise IndexError(f"unknown symbol index {index}")
        return self._symbols[index]

    def symbols(self) -> List[Hashable]:
        return list(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        try:
            return symbol in self._index
        except TypeError:
            return False


__all__ = ["BOUNDARY_INDEX", "SymbolTable"]
