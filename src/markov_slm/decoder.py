from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Hashable, List

from .probabilities import FreshIndex
from .symbols import BOUNDARY_INDEX, SymbolTable

logger = logging.getLogger(__name__)

MAX_ABSORBING_DRAWS = 15


@dataclass
class GenerationConfig:
    min_length: int = 0
    max_length: int | None = None
    max_absorbing: int = MAX_ABSORBING_DRAWS

    def __post_init__(self) -> None:
        if self.max_length is None:
            self.max_length = self.min_length
        if self.min_length < 0:
            raise ValueError(f"min_length must be >= 0 (got {self.min_length})")
        if self.max_length < self.min_length:
            raise ValueError(
                f"max_length must be >= min_length (got {self.max_length} < {self.min_length})"
            )


class Generator:
    """Walks prefix -> sampled suffix transitions over a fresh probability index."""

    def __init__(self, symbols: SymbolTable, depth: int) -> None:
        self.symbols = symbols
        self.depth = depth

    def generate(
        self,
        index: FreshIndex,
        config: GenerationConfig,
        *,
        rng: random.Random | None = None,
    ) -> List[Hashable]:
        rng = rng or random
        max_length = int(config.max_length or 0)
        state = [BOUNDARY_INDEX] * self.depth
        output: List[Hashable] = []
        absorbing = 0
        while len(output) < max_length:
            suffix = index.sample(state, rng.random())
            if suffix is None:
                logger.debug("Unseen state %s after %d symbols; stopping", state, len(output))
                break
            if suffix == BOUNDARY_INDEX:
                # Boundary draws never advance the window.
                absorbing += 1
                if len(output) >= config.min_length or absorbing > config.max_absorbing:
                    break
                continue
            output.append(self.symbols.resolve(suffix))
            state.append(suffix)
            del state[0]
        return output


__all__ = ["GenerationConfig", "Generator", "MAX_ABSORBING_DRAWS"]
