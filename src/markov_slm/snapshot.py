"""
Flat snapshot codec for MarkovModel.

Layout (JSON friendly)::

    {
        "format": "markov-slm/1",
        "depth": 2,
        "symbols": ["", "a", "b"],
        "counts": {"0,0": {"total": 3, "suffixes": {"1": 2, "2": 1}}}
    }

The per-prefix total sits next to the suffix map so it can never be read back
as a suffix index.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Mapping, Set, Tuple

from .chains import KEY_SEPARATOR, ChainCounter, encode_prefix
from .errors import SnapshotError
from .symbols import SymbolTable

SNAPSHOT_FORMAT = "markov-slm/1"


def freeze_symbol(value: Any) -> Hashable:
    """JSON turns tuples into lists; turn them back so symbols stay hashable."""
    if isinstance(value, list):
        return tuple(freeze_symbol(item) for item in value)
    return value


def dump_snapshot(depth: int, symbols: SymbolTable, counter: ChainCounter) -> Dict[str, Any]:
    counts: Dict[str, Dict[str, Any]] = {}
    for prefix, entry in counter.items():
        counts[encode_prefix(prefix)] = {
            "total": entry.total,
            "suffixes": {str(suffix): count for suffix, count in sorted(entry.suffixes.items())},
        }
    return {
        "format": SNAPSHOT_FORMAT,
        "depth": depth,
        "symbols": symbols.symbols(),
        "counts": counts,
    }


def _require_int(value: Any, label: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"{label} must be an integer (got {value!r})")
    if value < minimum:
        raise SnapshotError(f"{label} must be >= {minimum} (got {value})")
    return value


def _parse_index(raw: Any, label: str, alphabet_size: int) -> int:
    if isinstance(raw, str) and raw.isascii() and raw.isdigit():
        index = int(raw)
    elif isinstance(raw, int) and not isinstance(raw, bool):
        index = raw
    else:
        raise SnapshotError(f"{label} {raw!r} is not an integer index")
    if index < 0 or index >= alphabet_size:
        raise SnapshotError(f"{label} {index} is outside the symbol table (size {alphabet_size})")
    return index


def load_snapshot(data: Any) -> Tuple[int, SymbolTable, ChainCounter]:
    """Validate a snapshot and rebuild its parts; any inconsistency raises SnapshotError."""
    if not isinstance(data, Mapping):
        raise SnapshotError(f"snapshot must be a mapping (got {type(data).__name__})")
    fmt = data.get("format", SNAPSHOT_FORMAT)
    if fmt != SNAPSHOT_FORMAT:
        raise SnapshotError(f"unsupported snapshot format {fmt!r}")
    for key in ("depth", "symbols", "counts"):
        if key not in data:
            raise SnapshotError(f"snapshot is missing the '{key}' field")

    depth = _require_int(data["depth"], "depth", 1)

    raw_symbols = data["symbols"]
    if not isinstance(raw_symbols, list):
        raise SnapshotError("symbols must be a list")
    try:
        symbols = SymbolTable.from_symbols(freeze_symbol(item) for item in raw_symbols)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"invalid symbols: {exc}") from exc
    alphabet_size = len(symbols)

    raw_counts = data["counts"]
    if not isinstance(raw_counts, Mapping):
        raise SnapshotError("counts must be a mapping of prefix keys")
    counter = ChainCounter(depth)
    for raw_prefix, raw_entry in raw_counts.items():
        if not isinstance(raw_prefix, str):
            raise SnapshotError(f"prefix key {raw_prefix!r} must be a string")
        prefix = tuple(
            _parse_index(part, f"prefix {raw_prefix!r} index", alphabet_size)
            for part in raw_prefix.split(KEY_SEPARATOR)
        )
        if len(prefix) != depth:
            raise SnapshotError(f"prefix key {raw_prefix!r} does not match depth {depth}")
        if prefix in counter:
            raise SnapshotError(f"prefix key {raw_prefix!r} appears more than once")
        if not isinstance(raw_entry, Mapping):
            raise SnapshotError(f"entry for prefix {raw_prefix!r} must be a mapping")
        total = _require_int(raw_entry.get("total"), f"total for prefix {raw_prefix!r}", 1)
        suffixes = raw_entry.get("suffixes")
        if not isinstance(suffixes, Mapping) or not suffixes:
            raise SnapshotError(f"prefix {raw_prefix!r} has no suffix counts")
        seen: Set[int] = set()
        for raw_suffix, raw_count in suffixes.items():
            suffix = _parse_index(raw_suffix, f"suffix under {raw_prefix!r}", alphabet_size)
            if suffix in seen:
                raise SnapshotError(f"suffix {suffix} repeated under prefix {raw_prefix!r}")
            seen.add(suffix)
            count = _require_int(raw_count, f"count for {raw_prefix!r} -> {raw_suffix!r}", 1)
            counter.add(prefix, suffix, count)
        entry = counter.entry(prefix)
        if entry is None or entry.total != total:
            raise SnapshotError(f"total for prefix {raw_prefix!r} does not match its suffix counts")
    return depth, symbols, counter


__all__ = ["SNAPSHOT_FORMAT", "dump_snapshot", "freeze_symbol", "load_snapshot"]
