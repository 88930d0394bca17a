"""engine.sim_runner

Headless runner for quick sanity checks.

Plays a fully delegated game without any UI or timers, so it stays
deterministic and CI-friendly.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from core.state import AIDirective

from .config import EngineConfig
from .logging import financial_history, make_run_export
from .pipeline import advance_turn, new_game, set_ai_directive, toggle_delegation


def run_headless_sim(
    months: int = 24,
    directive: AIDirective = AIDirective.STABILIZE_COMPANY,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """Run a delegated simulation and return a summary."""
    cfg = config or EngineConfig(base_seed=123)

    initial = new_game(cfg)
    state = toggle_delegation(set_ai_directive(initial, directive))

    played = 0
    for _ in range(months):
        if state.is_game_over:
            break
        state = advance_turn(state, config=cfg)
        played += 1

    return {
        "months": played,
        "final": state,
        "history": financial_history(state),
        "export": make_run_export(seed=cfg.base_seed, config=cfg, initial_state=initial, final_state=state),
    }
