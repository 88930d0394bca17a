"""
core.decisions
Strategic decision catalog.

Decisions are derived from state on every query and never stored. Each one is
addressed by a DecisionKey (kind + target entity id) that stays stable for as
long as the triggering condition holds, so a UI can list decisions, let the
player pick one, and hand the key back to apply_strategic_decision().
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from .events import log_event, log_warning, money
from .rules import check_win_loss
from .state import (
    EventType,
    GameState,
    Origin,
    Product,
    ProductStatus,
    ProjectStatus,
    RDProject,
    Severity,
)

RD_KICKOFF_SHARE = 0.10        # upfront cost, fraction of cost_to_complete
RD_MONTHLY_SHARE = 0.05        # monthly funding once active
LAUNCH_COST = 50_000.0
MARKETING_COST = 20_000.0
DEBT_ISSUE_AMOUNT = 50_000.0
DEBT_REPAY_CAP = 25_000.0

LAUNCHED_MARKER = "(launched)"
NEW_PRODUCT_TAG = "new product"


class DecisionCategory(str, Enum):
    FINANCE = "finance"
    RD = "r&d"
    MARKETING = "marketing"
    OPERATIONS = "operations"
    MA = "m&a"


class DecisionKind(str, Enum):
    FUND_RD = "fund_rd"
    LAUNCH_PRODUCT = "launch_product"
    MARKETING_CAMPAIGN = "marketing_campaign"
    ISSUE_DEBT = "issue_debt"
    REPAY_DEBT = "repay_debt"


@dataclass(frozen=True)
class DecisionKey:
    kind: DecisionKind
    ref: str = ""   # target entity id (R&D project) when the kind has one

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.ref}" if self.ref else self.kind.value

    @staticmethod
    def parse(raw: str) -> "DecisionKey":
        kind, _, ref = str(raw).partition(":")
        return DecisionKey(DecisionKind(kind), ref)


Effect = Callable[[GameState, Origin], GameState]


@dataclass(frozen=True)
class StrategicDecision:
    key: DecisionKey
    title: str
    description: str
    category: DecisionCategory
    effect: Effect
    cost: Optional[float] = None

    @property
    def id(self) -> DecisionKey:
        return self.key


def _replace_project(state: GameState, project: RDProject) -> GameState:
    return replace(state, rd_projects=tuple(project if p.id == project.id else p for p in state.rd_projects))


def _product_name_from_impact(impact: str) -> str:
    """'New product: EcoLine Hub (v2)' -> 'EcoLine Hub'."""
    text = impact
    i = text.lower().find(NEW_PRODUCT_TAG + ":")
    if i >= 0:
        text = text[:i] + text[i + len(NEW_PRODUCT_TAG) + 1:]
    return text.split("(")[0].strip()


def _fund_rd(project: RDProject) -> StrategicDecision:
    cost = project.cost_to_complete * RD_KICKOFF_SHARE

    def effect(gs: GameState, origin: Origin) -> GameState:
        target = next((p for p in gs.rd_projects if p.id == project.id), None)
        if target is None:
            return gs
        target = replace(
            target,
            status=ProjectStatus.ACTIVE,
            monthly_funding=target.cost_to_complete * RD_MONTHLY_SHARE,
        )
        gs = _replace_project(gs, target)
        gs = replace(gs, financials=replace(gs.financials, cash=gs.financials.cash - cost))
        return log_event(
            gs,
            EventType.PLAYER_DECISION,
            "R&D project funded",
            f"{target.name} is now active.",
            severity=Severity.SUCCESS,
            origin=origin,
        )

    return StrategicDecision(
        key=DecisionKey(DecisionKind.FUND_RD, project.id),
        title=f"Fund R&D: {project.name}",
        description=f"Kick-off funding for {project.name}. Potential: {project.potential_impact}",
        category=DecisionCategory.RD,
        effect=effect,
        cost=cost,
    )


def _launch_product(project: RDProject, product_name: str) -> StrategicDecision:
    def effect(gs: GameState, origin: Origin) -> GameState:
        segment_id = gs.market_segments[0].id if gs.market_segments else "seg1"
        product = Product(
            id=f"prod-{project.id}",
            name=product_name,
            segment_id=segment_id,
            quality=70.0,
            production_cost=30.0,
            sale_price=60.0,
            units_sold_per_quarter=0,
            status=ProductStatus.LAUNCHED,
        )
        gs = replace(
            gs,
            products=(*gs.products, product),
            financials=replace(gs.financials, cash=gs.financials.cash - LAUNCH_COST),
        )
        rd = next((p for p in gs.rd_projects if p.id == project.id), None)
        if rd is not None:
            gs = _replace_project(gs, replace(rd, potential_impact=f"{rd.potential_impact} {LAUNCHED_MARKER}"))
        return log_event(
            gs,
            EventType.PLAYER_DECISION,
            "New product launched!",
            f"{product.name} is now on the market.",
            severity=Severity.SUCCESS,
            origin=origin,
        )

    return StrategicDecision(
        key=DecisionKey(DecisionKind.LAUNCH_PRODUCT, project.id),
        title=f"Launch product: {product_name}",
        description=f"Bring the product developed in {project.name} to market.",
        category=DecisionCategory.MARKETING,
        effect=effect,
        cost=LAUNCH_COST,
    )


def _marketing_campaign() -> StrategicDecision:
    def effect(gs: GameState, origin: Origin) -> GameState:
        gs = replace(gs, financials=replace(gs.financials, cash=gs.financials.cash - MARKETING_COST))
        return log_event(
            gs,
            EventType.PLAYER_DECISION,
            "Marketing campaign started",
            "The basic campaign is live.",
            severity=Severity.SUCCESS,
            origin=origin,
        )

    return StrategicDecision(
        key=DecisionKey(DecisionKind.MARKETING_CAMPAIGN),
        title="Start a basic marketing campaign",
        description="Run a general awareness campaign for our products. A small sales lift is expected.",
        category=DecisionCategory.MARKETING,
        effect=effect,
        cost=MARKETING_COST,
    )


def _issue_debt() -> StrategicDecision:
    def effect(gs: GameState, origin: Origin) -> GameState:
        fin = gs.financials
        gs = replace(gs, financials=replace(fin, cash=fin.cash + DEBT_ISSUE_AMOUNT, debt=fin.debt + DEBT_ISSUE_AMOUNT))
        return log_event(
            gs,
            EventType.PLAYER_DECISION,
            "Bonds issued",
            f"Raised {money(DEBT_ISSUE_AMOUNT)} through a bond issue.",
            severity=Severity.SUCCESS,
            origin=origin,
        )

    return StrategicDecision(
        key=DecisionKey(DecisionKind.ISSUE_DEBT),
        title=f"Issue small bond ({money(DEBT_ISSUE_AMOUNT)})",
        description="Raise capital through a bond issue. Debt and cash both increase.",
        category=DecisionCategory.FINANCE,
        effect=effect,
    )


def _repay_debt(amount: float) -> StrategicDecision:
    def effect(gs: GameState, origin: Origin) -> GameState:
        fin = gs.financials
        gs = replace(gs, financials=replace(fin, cash=fin.cash - amount, debt=fin.debt - amount))
        return log_event(
            gs,
            EventType.PLAYER_DECISION,
            "Debt repaid",
            f"Repaid {money(amount)} of debt.",
            severity=Severity.SUCCESS,
            origin=origin,
        )

    return StrategicDecision(
        key=DecisionKey(DecisionKind.REPAY_DEBT),
        title=f"Repay some debt ({money(amount)})",
        description="Pay down part of the bank loan to reduce the interest burden.",
        category=DecisionCategory.FINANCE,
        effect=effect,
        cost=amount,
    )


def get_available_decisions(state: GameState) -> List[StrategicDecision]:
    """All decisions currently on offer, in a fixed order."""
    decisions: List[StrategicDecision] = []
    fin = state.financials

    pending = next((p for p in state.rd_projects if p.status == ProjectStatus.PENDING), None)
    if pending is not None and fin.cash > pending.cost_to_complete * RD_KICKOFF_SHARE:
        decisions.append(_fund_rd(pending))

    ready = next(
        (
            p
            for p in state.rd_projects
            if p.status == ProjectStatus.COMPLETED
            and NEW_PRODUCT_TAG in p.potential_impact.lower()
            and LAUNCHED_MARKER not in p.potential_impact.lower()
        ),
        None,
    )
    if ready is not None:
        name = _product_name_from_impact(ready.potential_impact)
        if not any(prod.name == name for prod in state.products):
            decisions.append(_launch_product(ready, name))

    if fin.cash > MARKETING_COST:
        decisions.append(_marketing_campaign())

    if fin.debt < fin.total_assets * 0.8 and fin.cash < 50_000:
        decisions.append(_issue_debt())

    if fin.cash > 50_000 and fin.debt > 10_000:
        decisions.append(_repay_debt(min(fin.debt, DEBT_REPAY_CAP)))

    return decisions


def find_decision(state: GameState, key: DecisionKey) -> Optional[StrategicDecision]:
    return next((d for d in get_available_decisions(state) if d.key == key), None)


def apply_strategic_decision(state: GameState, key: DecisionKey, origin: Origin = Origin.PLAYER) -> GameState:
    """Run one decision's effect if it is on offer and affordable.

    Unknown or no-longer-offered keys return the state unchanged.
    """
    if state.is_game_over:
        return state
    decision = find_decision(state, key)
    if decision is None:
        return state
    if decision.cost and state.financials.cash < decision.cost:
        return log_warning(
            state,
            EventType.GAME_MESSAGE,
            "Decision failed",
            "Not enough cash for this decision.",
            origin,
        )
    return check_win_loss(decision.effect(state, origin))
