"""
core.state
Core domain data models (UI independent).

Every model is a frozen dataclass. Transitions never mutate a state in place;
they build a new one with dataclasses.replace(), so a caller's snapshot can be
kept around safely (history, charts, undo).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


class AIDirective(str, Enum):
    STABILIZE_COMPANY = "stabilize_company"
    PROFIT_MAXIMIZATION = "profit_maximization"
    MARKET_SHARE_EXPANSION = "market_share_expansion"
    TECH_INNOVATION_PRIORITY = "tech_innovation_priority"
    COST_REDUCTION = "cost_reduction"
    AGGRESSIVE_MARKET_EXPANSION = "aggressive_market_expansion"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class ProductStatus(str, Enum):
    IN_DEVELOPMENT = "in_development"
    LAUNCHED = "launched"
    DISCONTINUED = "discontinued"


class ProjectStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CompetitorStrength(str, Enum):
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class GrowthPotential(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EventType(str, Enum):
    AI_ACTION = "ai_action"
    MARKET_NEWS = "market_news"
    COMPETITOR_MOVE = "competitor_move"
    FINANCIAL_REPORT = "financial_report"
    PLAYER_DECISION = "player_decision"
    CRISIS_EVENT = "crisis_event"
    GAME_MESSAGE = "game_message"
    STOCK_TRADE = "stock_trade"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
    SUCCESS = "success"


class Origin(str, Enum):
    """Who initiated an action: the human CEO or the delegated AI."""

    PLAYER = "player"
    AI = "ai"


@dataclass(frozen=True)
class CompanyFinancials:
    """Company balance sheet + the CEO's personal holdings.

    monthly_* are per-turn accumulators: zeroed at the start of a turn and
    filled in by the directive and market steps.
    competitor_share_holdings never contains zero entries.
    """

    cash: float
    debt: float
    monthly_revenue: float
    monthly_costs: float
    monthly_profit: float
    total_assets: float
    total_liabilities: float
    stock_price: float
    shares_outstanding: int
    market_cap: float
    ceo_shares: int
    competitor_share_holdings: Dict[str, int] = field(default_factory=dict)

    @property
    def ceo_ownership_pct(self) -> float:
        if self.shares_outstanding <= 0:
            return 0.0
        return self.ceo_shares / self.shares_outstanding * 100.0


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    segment_id: str
    quality: float           # 0..100
    production_cost: float
    sale_price: float
    units_sold_per_quarter: int
    status: ProductStatus


@dataclass(frozen=True)
class Competitor:
    id: str
    name: str
    market_share: float      # 0..100
    stock_price: float
    strength: CompetitorStrength
    listing_price: float = 0.0   # stock price at game start; 0 means "use stock_price"

    def __post_init__(self) -> None:
        if not self.listing_price:
            object.__setattr__(self, "listing_price", float(self.stock_price))


@dataclass(frozen=True)
class MarketSegment:
    id: str
    name: str
    total_market_value: float
    player_market_share: float   # 0..100
    growth_potential: GrowthPotential
    trends: Tuple[str, ...] = ()
    icon: str = ""


@dataclass(frozen=True)
class RDProject:
    id: str
    name: str
    description: str
    progress: float          # 0..100
    cost_to_complete: float
    monthly_funding: float
    potential_impact: str
    status: ProjectStatus


@dataclass(frozen=True)
class GameEvent:
    id: str
    turn: int
    type: EventType
    title: str
    description: str
    severity: Severity = Severity.INFO
    data: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class GameState:
    """Root state. Replaced wholesale by every transition."""

    company_name: str
    current_turn: int
    current_ai_directive: AIDirective
    financials: CompanyFinancials
    products: Tuple[Product, ...] = ()
    competitors: Tuple[Competitor, ...] = ()
    market_segments: Tuple[MarketSegment, ...] = ()
    rd_projects: Tuple[RDProject, ...] = ()
    event_log: Tuple[GameEvent, ...] = ()
    global_market_sentiment: Sentiment = Sentiment.NEUTRAL
    is_game_over: bool = False
    game_over_message: str = ""
    is_delegated: bool = False

    def competitor(self, competitor_id: str) -> Optional[Competitor]:
        return next((c for c in self.competitors if c.id == competitor_id), None)


DEFAULT_COMPANY_NAME = "Yubab Inc."


def welcome_event(company_name: str) -> GameEvent:
    return GameEvent(
        id="evt-start",
        turn=0,
        type=EventType.GAME_MESSAGE,
        title="Welcome aboard, CEO!",
        description=f"You have taken over {company_name}, a company on the brink of bankruptcy. Good luck.",
        severity=Severity.INFO,
    )


def default_start_state(company_name: str = DEFAULT_COMPANY_NAME) -> GameState:
    """Baseline start state.

    Keep it in core so headless tests and UI share the same baseline.
    """
    name = (company_name or "").strip() or DEFAULT_COMPANY_NAME
    return GameState(
        company_name=name,
        current_turn=1,
        current_ai_directive=AIDirective.STABILIZE_COMPANY,
        financials=CompanyFinancials(
            cash=100_000.0,
            debt=100_000.0,
            monthly_revenue=0.0,
            monthly_costs=0.0,
            monthly_profit=0.0,
            total_assets=300_000.0,
            total_liabilities=200_000.0,
            stock_price=5.00,
            shares_outstanding=100_000,
            market_cap=5.00 * 100_000,
            ceo_shares=60_000,
            competitor_share_holdings={},
        ),
        products=(
            Product(
                id="prod1",
                name="Legacy Gadget Alpha",
                segment_id="seg1",
                quality=50.0,
                production_cost=12.0,
                sale_price=25.0,
                units_sold_per_quarter=0,
                status=ProductStatus.LAUNCHED,
            ),
        ),
        competitors=(
            Competitor(id="comp1", name="InnovaTech Inc.", market_share=30.0, stock_price=55.00, strength=CompetitorStrength.STRONG),
            Competitor(id="comp2", name="Global Devices Co.", market_share=25.0, stock_price=40.00, strength=CompetitorStrength.MODERATE),
            Competitor(id="comp3", name="Budgetronics", market_share=15.0, stock_price=12.00, strength=CompetitorStrength.WEAK),
        ),
        market_segments=(
            MarketSegment(
                id="seg1",
                name="Consumer Electronics",
                total_market_value=50_000_000.0,
                player_market_share=2.0,
                growth_potential=GrowthPotential.MEDIUM,
                trends=("miniaturisation", "connectivity"),
                icon="📱",
            ),
            MarketSegment(
                id="seg2",
                name="Sustainable Solutions",
                total_market_value=20_000_000.0,
                player_market_share=0.0,
                growth_potential=GrowthPotential.HIGH,
                trends=("green materials", "carbon neutral"),
                icon="🌿",
            ),
        ),
        rd_projects=(
            RDProject(
                id="rd1",
                name="Project Phoenix",
                description="Quality overhaul for Legacy Gadget Alpha.",
                progress=10.0,
                cost_to_complete=30_000.0,
                monthly_funding=5_000.0,
                potential_impact="Legacy Gadget Alpha quality +20",
                status=ProjectStatus.ACTIVE,
            ),
            RDProject(
                id="rd2",
                name="Green Initiative Research",
                description="Explore sustainable materials for a new product line.",
                progress=0.0,
                cost_to_complete=100_000.0,
                monthly_funding=0.0,
                potential_impact="New product: EcoLine Hub",
                status=ProjectStatus.PENDING,
            ),
        ),
        event_log=(welcome_event(name),),
        global_market_sentiment=Sentiment.NEUTRAL,
        is_game_over=False,
        game_over_message="",
        is_delegated=False,
    )


def financials_to_dict(f: CompanyFinancials) -> Dict[str, Any]:
    d = asdict(f)
    d["competitor_share_holdings"] = dict(f.competitor_share_holdings)
    return d


def state_to_dict(s: GameState) -> Dict[str, Any]:
    """JSON-friendly view (enums become their values)."""

    def _plain(x: Any) -> Any:
        if isinstance(x, Enum):
            return x.value
        if isinstance(x, dict):
            return {str(k): _plain(v) for k, v in x.items()}
        if isinstance(x, (list, tuple)):
            return [_plain(v) for v in x]
        return x

    return _plain(asdict(s))
