"""engine.config

Engine configuration passed from UI.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.state import DEFAULT_COMPANY_NAME


@dataclass(frozen=True)
class EngineConfig:
    base_seed: int = 42
    company_name: str = DEFAULT_COMPANY_NAME
    auto_turn_interval: float = 1.5     # seconds between delegated turns
    manual_turn_delay: float = 0.5      # "busy" pause before a manual turn
    delegated_turn_delay: float = 0.1

    def __post_init__(self) -> None:
        if self.auto_turn_interval <= 0:
            raise ValueError(f"auto_turn_interval must be positive, got {self.auto_turn_interval!r}")
        if self.manual_turn_delay < 0 or self.delegated_turn_delay < 0:
            raise ValueError("turn delays cannot be negative")

    def turn_delay(self, delegated: bool) -> float:
        return float(self.delegated_turn_delay if delegated else self.manual_turn_delay)
