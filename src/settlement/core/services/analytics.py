"""
Negotiation trajectory analytics.

Every function here is a pure computation over an ordered list of moves.
A trajectory needs at least one demand and one offer; when either side is
missing the metrics fall back to ``0`` or ``None`` instead of raising.
Demand/offer classification uses the move type, not the party, so a
mediator's proposal counts toward the side it was framed as.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models import MoveType, NegotiationStatus
from ..schemas import AnalyticsHistoryEntry, AnalyticsSnapshot, Move
from ..utils.money import round_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsTuning:
    """Weights and thresholds applied by the analytics engine."""

    # predicted settlement = latest midpoint * trend_weight + mean amount * history_weight
    trend_weight: float = 0.7
    history_weight: float = 0.3
    # confidence = convergence * convergence_weight + positive momentum * momentum_weight
    convergence_weight: float = 0.6
    momentum_weight: float = 0.4
    max_confidence: float = 100.0
    # gap below this fraction of the latest offer reads as settled
    settled_gap_ratio: float = 0.05


DEFAULT_TUNING = AnalyticsTuning()


def move_amount(move: Move) -> float:
    """Return a move's amount, refusing values no validated caller could send."""
    amount = float(move.amount)
    if not math.isfinite(amount):
        raise ValueError(f"Move amount must be finite, got {move.amount!r}")
    return amount


def split_sides(moves: Sequence[Move]) -> Tuple[List[float], List[float]]:
    """Return the demand amounts and offer amounts, each in move order."""
    demands: List[float] = []
    offers: List[float] = []
    for move in moves:
        if move.type == MoveType.demand:
            demands.append(move_amount(move))
        else:
            offers.append(move_amount(move))
    return demands, offers


def _trajectory(moves: Sequence[Move]) -> Optional[Tuple[List[float], List[float]]]:
    if len(moves) < 2:
        return None
    demands, offers = split_sides(moves)
    if not demands or not offers:
        return None
    return demands, offers


def midpoint(demand: float, offer: float) -> float:
    return (demand + offer) / 2


def momentum(moves: Sequence[Move]) -> float:
    """Average percentage both sides have moved toward each other.

    Demand movement is measured downward from the first demand and offer
    movement upward from the first offer. Positive means both sides are
    conceding; a zero first demand or first offer yields ``0``.
    """
    trajectory = _trajectory(moves)
    if trajectory is None:
        return 0.0
    demands, offers = trajectory
    first_demand, last_demand = demands[0], demands[-1]
    first_offer, last_offer = offers[0], offers[-1]
    if first_demand == 0 or first_offer == 0:
        return 0.0
    demand_movement = (first_demand - last_demand) / first_demand * 100
    offer_movement = (last_offer - first_offer) / first_offer * 100
    return (demand_movement + offer_movement) / 2


def convergence_rate(moves: Sequence[Move]) -> float:
    """Percentage of the opening gap that has been closed."""
    trajectory = _trajectory(moves)
    if trajectory is None:
        return 0.0
    demands, offers = trajectory
    initial_gap = abs(demands[0] - offers[0])
    if initial_gap == 0:
        return 0.0
    current_gap = abs(demands[-1] - offers[-1])
    return (initial_gap - current_gap) / initial_gap * 100


def midpoint_of_midpoints(moves: Sequence[Move]) -> Optional[float]:
    """Average midpoint of the i-th demand paired with the i-th offer."""
    trajectory = _trajectory(moves)
    if trajectory is None:
        return None
    demands, offers = trajectory
    midpoints = [midpoint(demand, offer) for demand, offer in zip(demands, offers)]
    return sum(midpoints) / len(midpoints)


def predict_settlement(moves: Sequence[Move], tuning: AnalyticsTuning = DEFAULT_TUNING) -> Optional[int]:
    """Blend the latest midpoint with the mean of every amount on record."""
    trajectory = _trajectory(moves)
    if trajectory is None:
        return None
    demands, offers = trajectory
    trend = midpoint(demands[-1], offers[-1])
    historical_midpoint = sum(move_amount(move) for move in moves) / len(moves)
    return round_money(trend * tuning.trend_weight + historical_midpoint * tuning.history_weight)


def confidence(moves: Sequence[Move], tuning: AnalyticsTuning = DEFAULT_TUNING) -> float:
    """Confidence in the prediction, always within ``[0, max_confidence]``."""
    if _trajectory(moves) is None:
        return 0.0
    score = (
        convergence_rate(moves) * tuning.convergence_weight
        + max(0.0, momentum(moves)) * tuning.momentum_weight
    )
    return min(tuning.max_confidence, max(0.0, score))


def determine_status(moves: Sequence[Move], tuning: AnalyticsTuning = DEFAULT_TUNING) -> NegotiationStatus:
    if not moves:
        return NegotiationStatus.initiated
    demands, offers = split_sides(moves)
    if not demands or not offers:
        return NegotiationStatus.active
    gap = abs(demands[-1] - offers[-1])
    last_offer = offers[-1]
    if last_offer == 0:
        return NegotiationStatus.settled if gap == 0 else NegotiationStatus.active
    if gap / last_offer < tuning.settled_gap_ratio:
        return NegotiationStatus.settled
    return NegotiationStatus.active


def _rounded(value: Optional[float]) -> Optional[int]:
    return None if value is None else round_money(value)


def compute_analytics(moves: Sequence[Move], tuning: AnalyticsTuning = DEFAULT_TUNING) -> AnalyticsSnapshot:
    """Compute the full analytics snapshot for a move list.

    The ``midpoint`` reported here is taken from the most recent demand
    and the most recent offer; it is ``None`` until both sides have moved.
    """
    demands, offers = split_sides(moves)
    current_midpoint = midpoint(demands[-1], offers[-1]) if demands and offers else None
    snapshot = AnalyticsSnapshot(
        midpoint=_rounded(current_midpoint),
        midpoint_of_midpoints=_rounded(midpoint_of_midpoints(moves)),
        momentum=momentum(moves),
        convergence_rate=convergence_rate(moves),
        predicted_settlement=predict_settlement(moves, tuning),
        confidence=confidence(moves, tuning),
        status=determine_status(moves, tuning),
    )
    logger.debug(
        "Analytics over %d moves: status=%s predicted=%s confidence=%.1f",
        len(moves),
        snapshot.status.value,
        snapshot.predicted_settlement,
        snapshot.confidence,
    )
    return snapshot


def compute_analytics_history(
    moves: Sequence[Move], tuning: AnalyticsTuning = DEFAULT_TUNING
) -> List[AnalyticsHistoryEntry]:
    """Replay the sequence, producing the snapshot recorded after each move."""
    return [
        AnalyticsHistoryEntry(index=index, move=move, analytics=compute_analytics(moves[: index + 1], tuning))
        for index, move in enumerate(moves)
    ]
