from __future__ import annotations

import random
from dataclasses import replace
from typing import Iterable

import pytest

from core.state import GameState, default_start_state


class ScriptedRandom(random.Random):
    """random() replays the given values first, then falls back to a seeded stream."""

    def __init__(self, values: Iterable[float] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self._script = list(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self._script:
            return self._script.pop(0)
        return super().random()


@pytest.fixture
def state() -> GameState:
    return default_start_state("Test Corp")


@pytest.fixture
def scripted():
    return ScriptedRandom


def with_financials(s: GameState, **changes) -> GameState:
    return replace(s, financials=replace(s.financials, **changes))


@pytest.fixture
def set_fin():
    return with_financials
