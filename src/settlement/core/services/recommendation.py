"""
Next-move recommendation.

The engine works in two steps. ``plan_next_move`` makes the numeric
decision: whose turn it is, which anchor to move toward (the settlement
goal when one is set, otherwise the midpoint of the latest demand and
offer) and how far to move. ``render_move_reasoning`` then turns that
decision into the rationale shown to the user. ``compute_recommendation``
combines both with the analytics confidence.

Step size is 70% of the distance to the anchor, scaled by
``1 + momentum / 100 * 0.3`` and bounded so that 5% of the current gap is
always left between the suggestion and the anchor. Once the gap is under
15% of the latest offer the movement is halved to keep closing moves small.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..models import MomentumTrend, MoveType, Party
from ..schemas import Move, NegotiationContext, Recommendation
from ..utils.money import format_money, round_money
from .analytics import DEFAULT_TUNING as DEFAULT_ANALYTICS_TUNING
from .analytics import AnalyticsTuning, confidence, midpoint, momentum, split_sides

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationTuning:
    """Business constants applied by the recommendation engine."""

    step_fraction: float = 0.7
    momentum_sensitivity: float = 0.3
    # share of the current gap kept between the suggestion and the anchor
    residual_gap_fraction: float = 0.05
    # gap / latest offer below which closing moves are damped
    closing_gap_ratio: float = 0.15
    closing_damping: float = 0.5
    converging_momentum: float = 5.0
    diverging_momentum: float = -5.0


DEFAULT_TUNING = RecommendationTuning()


@dataclass(frozen=True)
class MoveDecision:
    """Numeric outcome of the recommendation, before any text is rendered."""

    party: Party
    move_type: MoveType
    amount: float
    anchor: float
    anchored_to_goal: bool
    last_demand: float
    last_offer: float
    current_gap: float
    momentum: float
    damped: bool


def next_party(last_move: Move) -> Party:
    """Return the party expected to answer ``last_move``.

    A plaintiff or defendant move is answered by the other side. A
    mediator move is answered according to how it was framed: an offer
    calls for a plaintiff demand, a demand for a defendant offer.
    """
    if last_move.party == Party.plaintiff:
        return Party.defendant
    if last_move.party == Party.defendant:
        return Party.plaintiff
    return Party.plaintiff if last_move.type == MoveType.offer else Party.defendant


def momentum_trend(value: float, tuning: RecommendationTuning = DEFAULT_TUNING) -> MomentumTrend:
    if value > tuning.converging_momentum:
        return MomentumTrend.converging
    if value < tuning.diverging_momentum:
        return MomentumTrend.diverging
    return MomentumTrend.steady


def plan_next_move(
    context: NegotiationContext,
    moves: Sequence[Move],
    tuning: RecommendationTuning = DEFAULT_TUNING,
) -> Optional[MoveDecision]:
    """Decide the next move, or return ``None`` until both sides have moved."""
    if not moves:
        return None
    demands, offers = split_sides(moves)
    if not demands or not offers:
        return None

    last_demand = demands[-1]
    last_offer = offers[-1]
    current_gap = abs(last_demand - last_offer)
    party = next_party(moves[-1])

    trend = momentum(moves)
    adjustment = 1 + (trend / 100) * tuning.momentum_sensitivity

    anchored_to_goal = context.settlement_goal is not None
    anchor = context.settlement_goal if anchored_to_goal else midpoint(last_demand, last_offer)
    residual = current_gap * tuning.residual_gap_fraction

    if party == Party.plaintiff:
        step = (last_demand - anchor) * tuning.step_fraction * adjustment
        amount = max(anchor + residual, last_demand - step)
    else:
        step = (anchor - last_offer) * tuning.step_fraction * adjustment
        amount = min(anchor - residual, last_offer + step)

    damped = last_offer > 0 and current_gap / last_offer < tuning.closing_gap_ratio
    if damped:
        if party == Party.plaintiff:
            amount = last_demand - (last_demand - amount) * tuning.closing_damping
        else:
            amount = last_offer + (amount - last_offer) * tuning.closing_damping

    decision = MoveDecision(
        party=party,
        move_type=MoveType.demand if party == Party.plaintiff else MoveType.offer,
        amount=amount,
        anchor=anchor,
        anchored_to_goal=anchored_to_goal,
        last_demand=last_demand,
        last_offer=last_offer,
        current_gap=current_gap,
        momentum=trend,
        damped=damped,
    )
    logger.debug(
        "Next move for %s: %.2f toward %s %.2f (damped=%s)",
        party.value,
        amount,
        "goal" if anchored_to_goal else "midpoint",
        anchor,
        damped,
    )
    return decision


def render_move_reasoning(decision: MoveDecision, tuning: RecommendationTuning = DEFAULT_TUNING) -> str:
    """Render the rationale for a move decision."""
    if decision.last_offer > 0:
        gap_percent = decision.current_gap / decision.last_offer * 100
        parts = [f"Current gap: {format_money(decision.current_gap)} ({gap_percent:.1f}% of offer)."]
    else:
        parts = [f"Current gap: {format_money(decision.current_gap)}."]

    trend = momentum_trend(decision.momentum, tuning)
    if trend == MomentumTrend.converging:
        parts.append(f"Good convergence momentum ({decision.momentum:.1f}%). Make a modest move.")
    elif trend == MomentumTrend.diverging:
        parts.append(f"Diverging positions ({decision.momentum:.1f}%). More aggressive movement needed.")
    else:
        parts.append("Steady negotiation pace.")

    if decision.anchored_to_goal:
        parts.append(f"Moving toward settlement goal of {format_money(decision.anchor)}.")
    else:
        parts.append("Moving toward midpoint consensus.")
    return " ".join(parts)


def compute_recommendation(
    context: NegotiationContext,
    moves: Sequence[Move],
    tuning: RecommendationTuning = DEFAULT_TUNING,
    analytics_tuning: AnalyticsTuning = DEFAULT_ANALYTICS_TUNING,
) -> Optional[Recommendation]:
    """Recommend the next move for a negotiation."""
    decision = plan_next_move(context, moves, tuning)
    if decision is None:
        return None
    return Recommendation(
        party=decision.party,
        type=decision.move_type,
        suggested_amount=round_money(decision.amount),
        confidence=confidence(moves, analytics_tuning),
        reasoning=render_move_reasoning(decision, tuning),
    )
