"""
core.effects
Economy / physics rules for one month:
- directive step: segment growth, stabilize debt paydown, R&D funding + progress
- market step: product sales, P&L, stock price, competitor prices, random news
"""

from __future__ import annotations

import math
import random
from dataclasses import replace
from typing import Tuple

from .directives import get_directive_spec
from .events import log_event, money
from .rng import roll
from .state import (
    AIDirective,
    EventType,
    GameState,
    ProductStatus,
    ProjectStatus,
    Sentiment,
    Severity,
    clamp,
    financials_to_dict,
)

MIN_STOCK_PRICE = 0.1
MIN_COMPETITOR_PRICE = 0.01
PRICE_SENSITIVITY = 0.15
MARKET_EVENT_CHANCE = 0.15
MIN_RD_PROGRESS = 5.0

# competitor drift: (U[0,1) - 0.48) * 0.08 -> roughly [-3.84%, +4.16%)
COMPETITOR_DRIFT_CENTER = 0.48
COMPETITOR_DRIFT_SCALE = 0.08


def _stabilize_paydown(state: GameState) -> Tuple[GameState, float]:
    fin = state.financials
    if fin.debt > 0 and fin.cash > fin.debt * 0.1:
        payment = min(fin.debt * 0.02, fin.cash * 0.1)
        return replace(state, financials=replace(fin, cash=fin.cash - payment, debt=fin.debt - payment)), payment
    return state, 0.0


def _advance_rd(state: GameState, innovation_focus: float) -> GameState:
    """Pay this month's R&D funding and move active projects forward."""
    cash = state.financials.cash
    disbursed = 0.0
    projects = []
    completed = []
    for p in state.rd_projects:
        if p.status == ProjectStatus.ACTIVE and p.monthly_funding > 0 and cash >= p.monthly_funding:
            cash -= p.monthly_funding
            disbursed += p.monthly_funding
            gain = p.monthly_funding / (p.cost_to_complete + p.monthly_funding) * 25 + innovation_focus * 100
            progress = min(100.0, p.progress + max(MIN_RD_PROGRESS, gain))
            if progress >= 100.0:
                p = replace(p, progress=progress, status=ProjectStatus.COMPLETED)
                completed.append(p)
            else:
                p = replace(p, progress=progress)
        projects.append(p)

    fin = state.financials
    state = replace(
        state,
        rd_projects=tuple(projects),
        financials=replace(fin, cash=cash, monthly_costs=fin.monthly_costs + disbursed),
    )
    for p in completed:
        state = log_event(
            state,
            EventType.AI_ACTION,
            "R&D complete!",
            f"{p.name} was developed successfully. Impact: {p.potential_impact}",
            severity=Severity.SUCCESS,
        )
    return state


def apply_directive(state: GameState) -> GameState:
    """Directive step: segment growth, stabilize paydown, R&D.

    Revenue and cost factors are descriptive only; sales are never scaled by them.
    """
    spec = get_directive_spec(state.current_ai_directive)

    if spec.segment_growth != 1.0:
        segments = tuple(
            replace(s, player_market_share=clamp(s.player_market_share * spec.segment_growth, 0.0, 100.0))
            if s.player_market_share > 0
            else s
            for s in state.market_segments
        )
        state = replace(state, market_segments=segments)

    paid = 0.0
    if spec.key == AIDirective.STABILIZE_COMPANY:
        state, paid = _stabilize_paydown(state)

    if paid > 0:
        state = log_event(state, EventType.AI_ACTION, "AI action: debt repayment", f"The AI repaid {money(paid)} of debt.")
    else:
        state = log_event(state, EventType.AI_ACTION, spec.focus_title, spec.focus_text)

    return _advance_rd(state, spec.innovation_focus)


def _units_sold(rng: random.Random, quality: float, sale_price: float, sentiment: Sentiment) -> int:
    demand = (quality / sale_price) * 10 if sale_price else 0.0
    if sentiment == Sentiment.POSITIVE:
        demand *= 1.2
    elif sentiment == Sentiment.NEGATIVE:
        demand *= 0.8
    return int(math.floor(rng.random() * 500 + demand * 50))


def next_stock_price(price: float, profit: float, market_cap: float) -> float:
    impact = (profit / (market_cap or 1)) * PRICE_SENSITIVITY
    if profit < 0:
        impact *= 0.8
    elif profit > 0:
        impact *= 1.1
    new_price = max(MIN_STOCK_PRICE, price * (1 + impact))
    if not math.isfinite(new_price):
        return MIN_STOCK_PRICE
    return new_price


def drift_competitor_price(rng: random.Random, price: float) -> float:
    fluctuation = (rng.random() - COMPETITOR_DRIFT_CENTER) * COMPETITOR_DRIFT_SCALE
    return round(max(MIN_COMPETITOR_PRICE, price * (1 + fluctuation)), 2)


def simulate_market(state: GameState, rng: random.Random) -> GameState:
    """Market step: sales, P&L, prices, optional news, monthly report."""
    fin = state.financials
    revenue = 0.0
    costs = fin.monthly_costs

    products = []
    for p in state.products:
        if p.status == ProductStatus.LAUNCHED:
            units = _units_sold(rng, p.quality, p.sale_price, state.global_market_sentiment)
            p = replace(p, units_sold_per_quarter=units)
            revenue += units * p.sale_price
            costs += units * p.production_cost
        products.append(p)

    profit = revenue - costs
    price = next_stock_price(fin.stock_price, profit, fin.market_cap)
    fin = replace(
        fin,
        monthly_revenue=revenue,
        monthly_costs=costs,
        monthly_profit=profit,
        cash=fin.cash + profit,
        stock_price=price,
        market_cap=price * fin.shares_outstanding,
    )

    competitors = tuple(replace(c, stock_price=drift_competitor_price(rng, c.stock_price)) for c in state.competitors)
    state = replace(state, products=tuple(products), financials=fin, competitors=competitors)

    if roll(rng, MARKET_EVENT_CHANCE):
        if roll(rng, 0.5):
            sentiment = Sentiment.POSITIVE if roll(rng, 0.5) else Sentiment.NEGATIVE
            state = replace(state, global_market_sentiment=sentiment)
            state = log_event(
                state,
                EventType.MARKET_NEWS,
                "Market sentiment shift",
                f"Economic indicators point to {sentiment.value} market sentiment.",
                severity=Severity.INFO if sentiment == Sentiment.POSITIVE else Severity.WARNING,
            )
        elif competitors:
            rival = competitors[int(rng.random() * len(competitors))]
            state = log_event(
                state,
                EventType.COMPETITOR_MOVE,
                f"{rival.name} announcement",
                f"{rival.name} launched a new marketing campaign that may shift market dynamics.",
            )

    return log_event(
        state,
        EventType.FINANCIAL_REPORT,
        f"Month {state.current_turn} financial report",
        f"Revenue: {money(revenue)}, net profit: {money(profit)}, cash: {money(fin.cash)}",
        data={"financials": financials_to_dict(fin)},
    )
