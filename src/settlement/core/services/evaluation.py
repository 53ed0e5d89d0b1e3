"""
Damages-based case evaluation.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..schemas import CaseEvaluation, NegotiationContext
from ..utils.money import round_money


@dataclass(frozen=True)
class EvaluationTuning:
    """Share of the adjusted case value a realistic settlement falls between."""

    range_low: float = 0.6
    range_high: float = 0.9
    default_liability_percentage: float = 100.0


DEFAULT_TUNING = EvaluationTuning()


def _liability(context: NegotiationContext, tuning: EvaluationTuning) -> float:
    if context.liability_percentage is None:
        return tuning.default_liability_percentage
    return context.liability_percentage


def _total_damages(context: NegotiationContext) -> Optional[float]:
    damages = (context.medical_specials, context.economic_damages, context.non_economic_damages)
    if all(value is None for value in damages):
        return None
    return sum(value or 0 for value in damages)


def adjusted_case_value(context: NegotiationContext, tuning: EvaluationTuning = DEFAULT_TUNING) -> Optional[int]:
    """Total damages scaled by the liability percentage.

    ``None`` means there is no usable evaluation: no damages were entered
    or they add up to zero.
    """
    total = _total_damages(context)
    if total is None or total <= 0:
        return None
    return round_money(total * _liability(context, tuning) / 100)


def settlement_range(value: float, tuning: EvaluationTuning = DEFAULT_TUNING) -> Tuple[int, int]:
    """Projected low and high settlement for an adjusted case value."""
    return round_money(value * tuning.range_low), round_money(value * tuning.range_high)


def evaluate_case(
    context: NegotiationContext,
    predicted_settlement: Optional[float] = None,
    tuning: EvaluationTuning = DEFAULT_TUNING,
) -> Optional[CaseEvaluation]:
    """Summarise the case evaluation, capping the high end at the policy limit.

    When a predicted settlement is supplied together with a policy limit
    the result also reports how much of the limit that prediction uses.
    """
    value = adjusted_case_value(context, tuning)
    if value is None:
        return None
    low, high = settlement_range(value, tuning)
    limit = context.policy_limit
    if limit is not None:
        high = min(high, round_money(limit))
    utilization = None
    if limit is not None and predicted_settlement is not None:
        utilization = predicted_settlement / limit * 100
    return CaseEvaluation(
        total_damages=round_money(_total_damages(context) or 0),
        liability_percentage=_liability(context, tuning),
        adjusted_value=value,
        settlement_low=low,
        settlement_high=high,
        policy_limit=None if limit is None else round_money(limit),
        policy_utilization=utilization,
    )
