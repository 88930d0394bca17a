"""
core.rng
Deterministic RNG helpers that do NOT rely on Python's built-in hash().

Goal:
- Same (base_seed + inputs) => same Random stream across platforms & runs.
- Every stochastic step in core takes an explicit random.Random; the engine
  derives one per turn from the run seed.
"""

from __future__ import annotations

import hashlib
import json
import random
from typing import Any


def stable_int_seed(*parts: Any, salt: str = "ceo-dashboard") -> int:
    """Return a stable 32-bit integer seed derived from arbitrary inputs.

    Uses SHA-256 over a canonical JSON representation of `parts`.
    `default=str` covers enums and other non-JSON values.
    Output is 0..2**32-1 (works with random.Random).
    """
    payload = json.dumps(parts, sort_keys=True, ensure_ascii=False, separators=(",", ":"), default=str)
    h = hashlib.sha256((salt + "|" + payload).encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def rng_from(*parts: Any, base_seed: int) -> random.Random:
    """Create a Random instance from (base_seed + parts)."""
    seed = stable_int_seed(base_seed, *parts)
    return random.Random(seed)


def turn_rng(company_name: str, turn: int, *, base_seed: int) -> random.Random:
    """Random stream for one simulated month of one company's run."""
    return rng_from("turn", str(company_name), int(turn), base_seed=base_seed)


def roll(rng: random.Random, probability: float) -> bool:
    """One Bernoulli draw: True with the given probability."""
    return rng.random() < float(probability)
