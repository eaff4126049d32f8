from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict

from .tokenizer import TOKENIZER_MODES


def _parse_env_file(path: Path) -> Dict[str, str]:
    """Minimal .env parser (no external dependency required)."""
    data: dict[str, str] = {}
    if not path.exists():
        return data
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip('"').strip("'")
    return data


@dataclass(frozen=True)
class MarkovSettings:
    depth: int
    snapshot_path: str
    tokenizer: str
    tokenizer_lowercase: bool
    min_length: int
    max_length: int
    seed: int | None
    env_file: Path | None


def load_settings(env_path: str | Path = ".env") -> MarkovSettings:
    """Load settings from .env (if present) + real environment."""
    env_file = Path(env_path)
    file_values = _parse_env_file(env_file)

    def read(key: str, default: str) -> str:
        return os.environ.get(key, file_values.get(key, default))

    def read_int(key: str, default: str, minimum: int) -> int:
        raw = read(key, default).strip()
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValueError(f"{key} must be an integer (got '{raw}')") from exc
        if value < minimum:
            raise ValueError(f"{key} must be >= {minimum} (got {value})")
        return value

    depth = read_int("MARKOV_SLM_DEPTH", "2", 1)
    snapshot_path = read("MARKOV_SLM_SNAPSHOT_PATH", "var/markov_slm.json")
    tokenizer = read("MARKOV_SLM_TOKENIZER", "char").strip().lower()
    if tokenizer not in TOKENIZER_MODES:
        raise ValueError(
            f"MARKOV_SLM_TOKENIZER must be one of {', '.join(TOKENIZER_MODES)} (got '{tokenizer}')"
        )
    lower_flag = read("MARKOV_SLM_TOKENIZER_LOWERCASE", "0").strip().lower()
    tokenizer_lowercase = lower_flag in {"1", "true", "yes", "on"}
    min_length = read_int("MARKOV_SLM_MIN_LENGTH", "8", 0)
    max_length = read_int("MARKOV_SLM_MAX_LENGTH", "24", 0)
    if max_length < min_length:
        raise ValueError(
            f"MARKOV_SLM_MAX_LENGTH ({max_length}) must be >= MARKOV_SLM_MIN_LENGTH ({min_length})"
        )
    seed_raw = read("MARKOV_SLM_SEED", "").strip()
    seed: int | None = None
    if seed_raw:
        try:
            seed = int(seed_raw)
        except ValueError as exc:
            raise ValueError(f"MARKOV_SLM_SEED must be an integer (got '{seed_raw}')") from exc

    env_file_used = env_file if env_file.exists() else None
    return MarkovSettings(
        depth=depth,
        snapshot_path=snapshot_path,
        tokenizer=tokenizer,
        tokenizer_lowercase=tokenizer_lowercase,
        min_length=min_length,
        max_length=max_length,
        seed=seed,
        env_file=env_file_used,
    )
