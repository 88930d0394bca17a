"""
core.policy
Delegated AI policy: what the AI delegate does on its own each month.

Three independent sub-policies, each behind its own probability roll:
1) pick and apply one strategic decision
2) trade own-company shares to keep the CEO's stake in a comfortable band
3) trade competitor shares (take profit / buy dips and weak rivals)

Every action goes through the same validated operations the CEO uses, with
Origin.AI so the log shows the delegate acted.
"""

from __future__ import annotations

import math
import random
from typing import List, Optional

from .decisions import (
    DecisionCategory,
    DecisionKind,
    StrategicDecision,
    apply_strategic_decision,
    get_available_decisions,
)
from .rng import roll
from .state import AIDirective, CompetitorStrength, GameState, Origin
from .trading import buy_ceo_shares, buy_competitor_shares, sell_ceo_share_count, sell_competitor_shares

DECISION_CHANCE = 0.30
OWN_TRADE_CHANCE = 0.25
COMPETITOR_TRADE_CHANCE = 0.20

MIN_AI_CASH_BUFFER = 25_000.0

TARGET_CEO_OWNERSHIP = 62.5
OWN_BUY_TRIGGER_CASH = 50_000.0 + MIN_AI_CASH_BUFFER
OWN_BUY_CASH_SHARE = 0.10
OWN_BUY_MAX_FLOAT_SHARE = 0.01
OWN_SELL_OWNERSHIP_THRESHOLD = 75.0
OWN_SELL_TRIGGER_CASH = 15_000.0
SAFE_OWNERSHIP_FLOOR = 55.0

COMP_BUY_TRIGGER_CASH = 75_000.0 + MIN_AI_CASH_BUFFER
COMP_SELL_TRIGGER_CASH = 20_000.0
COMP_BUY_CASH_SHARE = 0.05
COMP_MAX_BUY = 5_000
COMP_TAKE_PROFIT = 1.3
COMP_DIP = 0.9


def score_decision(state: GameState, decision: StrategicDecision) -> int:
    """Directive-specific preference for one decision (higher is better)."""
    cash = state.financials.cash
    cost = decision.cost
    score = 0
    if cost and cost > cash * 0.5:
        score -= 5

    directive = state.current_ai_directive
    if directive == AIDirective.TECH_INNOVATION_PRIORITY:
        if decision.category == DecisionCategory.RD:
            score += 10
        if decision.key.kind == DecisionKind.FUND_RD and any(
            p.id == decision.key.ref and p.progress > 50 for p in state.rd_projects
        ):
            score += 5
    elif directive in (AIDirective.MARKET_SHARE_EXPANSION, AIDirective.AGGRESSIVE_MARKET_EXPANSION):
        if decision.category == DecisionCategory.MARKETING:
            score += 10
    elif directive == AIDirective.PROFIT_MAXIMIZATION:
        if not cost or cost < 10_000:
            score += 5
    elif directive == AIDirective.COST_REDUCTION:
        if cost is not None and cost < 0:
            score += 10
        if cost and cost > 30_000:
            score -= 5
    elif directive == AIDirective.STABILIZE_COMPANY:
        if decision.key.kind == DecisionKind.REPAY_DEBT:
            score += 10
        if cost and cost > 25_000:
            score -= 3
    return score


def affordable_decisions(state: GameState) -> List[StrategicDecision]:
    cash = state.financials.cash
    return [d for d in get_available_decisions(state) if not d.cost or cash >= d.cost + MIN_AI_CASH_BUFFER]


def choose_decision(state: GameState) -> Optional[StrategicDecision]:
    """Best-scoring affordable decision; ties go to the cheaper one."""
    candidates = affordable_decisions(state)
    if not candidates:
        return None

    best: Optional[StrategicDecision] = None
    best_score = -1
    for d in candidates:
        score = score_decision(state, d)
        if score > best_score:
            best, best_score = d, score
        elif score == best_score and best is not None and d.cost and best.cost and d.cost < best.cost:
            best = d

    if best is None:
        best = min(candidates, key=lambda d: d.cost or 0)
    return best


def trade_own_shares(state: GameState, rng: random.Random) -> GameState:
    fin = state.financials
    ownership = fin.ceo_ownership_pct

    if ownership < TARGET_CEO_OWNERSHIP and fin.cash > OWN_BUY_TRIGGER_CASH and fin.monthly_profit >= 0:
        budget = min(fin.cash - OWN_BUY_TRIGGER_CASH, fin.cash * OWN_BUY_CASH_SHARE)
        shares = int(math.floor(budget / fin.stock_price))
        shares = min(shares, int(math.floor(fin.shares_outstanding * OWN_BUY_MAX_FLOAT_SHARE)))
        if shares > 0:
            return buy_ceo_shares(state, shares, origin=Origin.AI)
        return state

    if ownership > OWN_SELL_OWNERSHIP_THRESHOLD and fin.cash < OWN_SELL_TRIGGER_CASH:
        headroom = max(0, fin.ceo_shares - math.ceil(fin.shares_outstanding * (SAFE_OWNERSHIP_FLOOR / 100)))
        slice_pct = rng.random() * 1.5 + 0.5
        shares = min(headroom, int(math.floor(fin.ceo_shares * slice_pct / 100)))
        if shares > 0:
            return sell_ceo_share_count(state, shares, origin=Origin.AI)

    return state


def trade_competitor_shares(state: GameState, rng: random.Random) -> GameState:
    for competitor in state.competitors:
        if competitor.stock_price <= 0.01:
            continue
        fin = state.financials
        owned = fin.competitor_share_holdings.get(competitor.id, 0)

        if owned > 0 and (
            fin.cash < COMP_SELL_TRIGGER_CASH or competitor.stock_price > competitor.listing_price * COMP_TAKE_PROFIT
        ):
            shares = max(1, int(math.floor(owned * (rng.random() * 0.25 + 0.25))))
            if owned >= shares:
                state = sell_competitor_shares(state, competitor.id, shares, origin=Origin.AI)
        elif fin.cash > COMP_BUY_TRIGGER_CASH and (
            competitor.strength == CompetitorStrength.WEAK or competitor.stock_price < competitor.listing_price * COMP_DIP
        ):
            budget = min(fin.cash - COMP_BUY_TRIGGER_CASH, fin.cash * COMP_BUY_CASH_SHARE)
            shares = min(int(math.floor(budget / competitor.stock_price)), COMP_MAX_BUY)
            if shares > 0:
                state = buy_competitor_shares(state, competitor.id, shares, origin=Origin.AI)
    return state


def run_delegated_actions(state: GameState, rng: random.Random) -> GameState:
    """One month of autonomous play. Each sub-policy rolls its own chance."""
    if roll(rng, DECISION_CHANCE) and not state.is_game_over:
        decision = choose_decision(state)
        if decision is not None:
            state = apply_strategic_decision(state, decision.key, origin=Origin.AI)

    if roll(rng, OWN_TRADE_CHANCE) and state.financials.stock_price > 0.01 and not state.is_game_over:
        state = trade_own_shares(state, rng)

    if roll(rng, COMPETITOR_TRADE_CHANCE) and state.competitors and not state.is_game_over:
        state = trade_competitor_shares(state, rng)

    return state
