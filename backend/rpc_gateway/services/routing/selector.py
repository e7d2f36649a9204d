from __future__ import annotations

import random
from typing import Optional, Sequence


class RandomEndpointSelector:
    """
    Uniform random choice over the healthy set. Each call is an independent
    draw; pass a seeded ``random.Random`` to make selections reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def choose(self, endpoints: Sequence[str]) -> str:
        if not endpoints:
            raise ValueError("cannot choose from an empty endpoint list")
        return self._rng.choice(endpoints)
