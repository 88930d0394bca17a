"""
core.directives
AI directive specifications (standing strategic posture).

Kept in core so balancing lives in one place, but UI can still display labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .state import AIDirective


@dataclass(frozen=True)
class DirectiveSpec:
    key: AIDirective
    label: str
    desc: str
    revenue_factor: float        # display only, market step does not apply it
    cost_factor: float
    innovation_focus: float
    segment_growth: float        # multiplier on player share per segment; 1.0 = none
    focus_title: str
    focus_text: str


DIRECTIVES: Dict[AIDirective, DirectiveSpec] = {
    AIDirective.STABILIZE_COMPANY: DirectiveSpec(
        key=AIDirective.STABILIZE_COMPANY,
        label="Stabilize company",
        desc="Hold course and chip away at debt when cash allows.",
        revenue_factor=1.0,
        cost_factor=1.0,
        innovation_focus=0.0,
        segment_growth=1.0,
        focus_title="AI focus: stability",
        focus_text="The AI is keeping operations at their current level and focusing on stability.",
    ),
    AIDirective.PROFIT_MAXIMIZATION: DirectiveSpec(
        key=AIDirective.PROFIT_MAXIMIZATION,
        label="Maximize profit",
        desc="Slightly better pricing and leaner costs.",
        revenue_factor=1.02,
        cost_factor=0.98,
        innovation_focus=0.0,
        segment_growth=1.0,
        focus_title="AI focus: profitability",
        focus_text="The AI is optimising for profitability. Expect a small revenue lift and cost savings.",
    ),
    AIDirective.MARKET_SHARE_EXPANSION: DirectiveSpec(
        key=AIDirective.MARKET_SHARE_EXPANSION,
        label="Expand market share",
        desc="Push sales in segments where the company is already present.",
        revenue_factor=1.05,
        cost_factor=1.01,
        innovation_focus=0.0,
        segment_growth=1.01,
        focus_title="AI focus: market share",
        focus_text="The AI is pushing market expansion with aggressive sales and marketing.",
    ),
    AIDirective.TECH_INNOVATION_PRIORITY: DirectiveSpec(
        key=AIDirective.TECH_INNOVATION_PRIORITY,
        label="Prioritize innovation",
        desc="R&D projects progress faster.",
        revenue_factor=1.0,
        cost_factor=1.0,
        innovation_focus=0.1,
        segment_growth=1.0,
        focus_title="AI focus: innovation",
        focus_text="The AI is prioritising R&D. Projects should complete sooner.",
    ),
    AIDirective.COST_REDUCTION: DirectiveSpec(
        key=AIDirective.COST_REDUCTION,
        label="Reduce cost",
        desc="Cut operating costs across the board.",
        revenue_factor=1.0,
        cost_factor=0.95,
        innovation_focus=0.0,
        segment_growth=1.0,
        focus_title="AI focus: cost reduction",
        focus_text="The AI is rolling out cost-cutting measures across operations.",
    ),
    AIDirective.AGGRESSIVE_MARKET_EXPANSION: DirectiveSpec(
        key=AIDirective.AGGRESSIVE_MARKET_EXPANSION,
        label="Aggressive expansion",
        desc="Big campaigns, higher costs, faster share growth.",
        revenue_factor=1.08,
        cost_factor=1.03,
        innovation_focus=0.0,
        segment_growth=1.03,
        focus_title="AI focus: aggressive expansion",
        focus_text="The AI is launching aggressive marketing campaigns and sales promotions.",
    ),
}


def get_directive_spec(directive: AIDirective) -> DirectiveSpec:
    return DIRECTIVES.get(directive, DIRECTIVES[AIDirective.STABILIZE_COMPANY])
