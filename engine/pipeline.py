"""engine.pipeline

Core month flow (headless).

Responsibilities:
- advance_turn(): one simulated month (delegate -> directive -> market -> rules)
- the small session transitions the UI calls directly: new game,
  directive change, delegation toggle

This layer is UI-agnostic.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Optional

from core.effects import apply_directive, simulate_market
from core.events import log_event, log_game_over
from core.policy import run_delegated_actions
from core.rng import turn_rng
from core.rules import check_win_loss
from core.state import AIDirective, EventType, GameState, default_start_state

from .config import EngineConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = EngineConfig()


def new_game(config: EngineConfig = DEFAULT_CONFIG) -> GameState:
    return default_start_state(config.company_name)


def set_ai_directive(state: GameState, directive: AIDirective) -> GameState:
    """Change the standing directive. Allowed while delegated."""
    if state.is_game_over:
        return state
    return replace(state, current_ai_directive=AIDirective(directive))


def toggle_delegation(state: GameState) -> GameState:
    if state.is_game_over:
        return state
    delegated = not state.is_delegated
    state = replace(state, is_delegated=delegated)
    if delegated:
        return log_event(
            state,
            EventType.GAME_MESSAGE,
            "AI delegation enabled",
            "The AI now handles strategic decisions, stock trades and turn progression.",
        )
    return log_event(
        state,
        EventType.GAME_MESSAGE,
        "AI delegation disabled",
        "From now on you make decisions, trade stock and advance turns yourself.",
    )


def advance_turn(
    state: GameState,
    rng: Optional[random.Random] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> GameState:
    """Advance the simulated economy by one month.

    Returns the input unchanged when the game is already over.
    """
    if state.is_game_over:
        return state

    turn = state.current_turn + 1
    if rng is None:
        rng = turn_rng(state.company_name, turn, base_seed=int(config.base_seed))

    fin = replace(state.financials, monthly_revenue=0.0, monthly_costs=0.0, monthly_profit=0.0)
    s = replace(state, current_turn=turn, financials=fin)

    # 1) delegate acts first; its actions may end the game
    if s.is_delegated:
        s = run_delegated_actions(s, rng)
    s = check_win_loss(s)
    if s.is_game_over:
        logger.debug("turn %s: game over after delegated actions", turn)
        return log_game_over(s)

    # 2) directive, 3) market, 4) rules
    s = apply_directive(s)
    s = simulate_market(s, rng)
    s = check_win_loss(s)

    if s.is_game_over:
        logger.debug("turn %s: game over (%s)", turn, s.game_over_message.splitlines()[0])
        return log_game_over(s)

    logger.debug("turn %s: cash=%.0f profit=%.0f price=%.2f", turn, s.financials.cash, s.financials.monthly_profit, s.financials.stock_price)
    return log_event(
        s,
        EventType.GAME_MESSAGE,
        f"Month {turn} begins",
        "Review the reports and make your strategic decisions.",
    )
