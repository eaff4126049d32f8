from __future__ import annotations

import re
from typing import Iterable, List

TOKEN_PATTERN = re.compile(r"\w+|[^\w\s]", re.UNICODE)

TOKENIZER_MODES = ("char", "word")


def tokenize(text: str, mode: str = "char", *, lowercase: bool = False) -> List[str]:
    """Split raw text into training symbols (single characters or regex word tokens)."""
    if lowercase:
        text = text.lower()
    if mode == "char":
        return list(text)
    if mode == "word":
        return [match.group(0) for match in TOKEN_PATTERN.finditer(text)]
    raise ValueError(f"unknown tokenizer mode '{mode}' (expected one of {', '.join(TOKENIZER_MODES)})")


def detokenize(symbols: Iterable[object], mode: str = "char") -> str:
    if mode == "char":
        return "".join(str(symbol) for symbol in symbols)
    if mode == "word":
        pieces: List[str] = []
        for symbol in symbols:
            token = str(symbol)
            if not pieces:
                pieces.append(token)
            elif token[0].isalnum() or token[0] == "_":
                pieces.append(f" {token}")
            else:
                pieces.append(token)
        return "".join(pieces).strip()
    raise ValueError(f"unknown tokenizer mode '{mode}' (expected one of {', '.join(TOKENIZER_MODES)})")


__all__ = ["TOKEN_PATTERN", "TOKENIZER_MODES", "detokenize", "tokenize"]
