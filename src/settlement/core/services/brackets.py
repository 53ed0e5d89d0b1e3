"""
Bracket suggestion.

A bracket is a pair of figures proposed together: the plaintiff agrees to
come down to ``plaintiff_amount`` if the defendant comes up to
``defendant_amount``. The suggestion is positioned against the best
reference available, in a fixed priority order that depends on which
sides have moved:

=============  ==================  ===============  ============  ========
Moves          1st                 2nd              3rd           4th
=============  ==================  ===============  ============  ========
both sides     case evaluation     settlement goal  midpoint
demand only    case evaluation     settlement goal  demand ratio
offer only     case evaluation     settlement goal  offer ratio
none           case evaluation     settlement goal  policy limit  fallback
=============  ==================  ===============  ============  ========

Each row is an ordered tuple of ``BracketStrategy`` objects; the first
whose guard accepts the inputs proposes the figures. The proposal is then
normalised (minimum amounts, ordering, policy-limit clamp) and finally
rendered into a rationale. Only the plaintiff's demands and the
defendant's offers anchor a bracket; mediator moves are ignored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..models import BracketAnchor, MoveState, MoveType, Party
from ..schemas import BracketSuggestion, Move, NegotiationContext
from ..utils.money import format_money, round_money
from .analytics import move_amount
from .evaluation import DEFAULT_TUNING as DEFAULT_EVALUATION_TUNING
from .evaluation import EvaluationTuning, adjusted_case_value, settlement_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BracketTuning:
    """Multipliers for every strategy plus the normalisation rules.

    The constants differ between strategies that look alike (for example
    the defendant share of the evaluation range is 0.9, 0.85, 0.8 or 0.75
    depending on which sides have moved); each is kept as its own entry.
    """

    both_evaluation_plaintiff: float = 1.1
    both_evaluation_defendant: float = 0.9
    both_goal_plaintiff: float = 1.15
    both_goal_defendant_step: float = 0.6
    both_midpoint_spread: float = 0.1

    demand_evaluation_plaintiff: float = 1.1
    demand_evaluation_defendant: float = 0.85
    demand_goal_plaintiff: float = 1.1
    demand_goal_defendant: float = 0.7
    demand_ratio_plaintiff: float = 0.85
    demand_ratio_defendant: float = 0.5

    offer_evaluation_plaintiff: float = 1.15
    offer_evaluation_defendant: float = 0.8
    offer_goal_plaintiff: float = 1.2
    offer_goal_defendant: float = 0.8
    offer_ratio_plaintiff: float = 2.5
    offer_ratio_defendant: float = 1.3

    opening_evaluation_plaintiff: float = 1.2
    opening_evaluation_defendant: float = 0.75
    opening_goal_plaintiff: float = 1.3
    opening_goal_defendant: float = 0.7
    opening_limit_plaintiff: float = 0.9
    opening_limit_defendant: float = 0.5
    fallback_plaintiff: float = 2_000_000
    fallback_defendant: float = 750_000

    minimum_amount: float = 1_000
    # ordering repair: plaintiff = defendant * repair_plaintiff, defendant = old plaintiff * repair_defendant
    repair_plaintiff: float = 1.5
    repair_defendant: float = 0.7
    limit_clamp: float = 0.95
    limit_defendant_ceiling: float = 0.7
    limit_defendant_clamp: float = 0.6

    evaluation: EvaluationTuning = field(default_factory=lambda: DEFAULT_EVALUATION_TUNING)


DEFAULT_TUNING = BracketTuning()


@dataclass(frozen=True)
class BracketInputs:
    """References a strategy may position the bracket against."""

    last_demand: Optional[float]
    last_offer: Optional[float]
    goal: Optional[float]
    policy_limit: Optional[float]
    case_value: Optional[int]
    range_low: Optional[int] = None
    range_high: Optional[int] = None

    @property
    def state(self) -> MoveState:
        if self.last_demand is not None and self.last_offer is not None:
            return MoveState.both
        if self.last_demand is not None:
            return MoveState.demand_only
        if self.last_offer is not None:
            return MoveState.offer_only
        return MoveState.none


Proposal = Tuple[float, float]


@dataclass(frozen=True)
class BracketStrategy:
    """One reference option: a guard and the figures it proposes."""

    anchor: BracketAnchor
    applies: Callable[[BracketInputs], bool]
    propose: Callable[[BracketInputs, BracketTuning], Proposal]


@dataclass(frozen=True)
class BracketDecision:
    """Numeric outcome of a bracket suggestion, before any text is rendered."""

    inputs: BracketInputs
    anchor: BracketAnchor
    proposed: Proposal
    plaintiff_amount: int
    defendant_amount: int
    limit_clamped: bool

    @property
    def state(self) -> MoveState:
        return self.inputs.state

    @property
    def evaluation_capped(self) -> bool:
        limit = self.inputs.policy_limit
        return self.anchor == BracketAnchor.evaluation and limit is not None and self.proposed[0] >= limit


def _capped(amount: float, limit: Optional[float], fallback: float) -> float:
    return min(amount, limit if limit is not None else fallback)


# Guards


def _has_value(inputs: BracketInputs) -> bool:
    return inputs.case_value is not None


def _value_within_range(inputs: BracketInputs) -> bool:
    return _has_value(inputs) and inputs.last_offer < inputs.case_value < inputs.last_demand


def _goal_within_range(inputs: BracketInputs) -> bool:
    return inputs.goal is not None and inputs.last_offer < inputs.goal < inputs.last_demand


def _value_below_demand(inputs: BracketInputs) -> bool:
    return _has_value(inputs) and inputs.case_value < inputs.last_demand


def _goal_below_demand(inputs: BracketInputs) -> bool:
    return inputs.goal is not None and inputs.goal < inputs.last_demand


def _value_above_offer(inputs: BracketInputs) -> bool:
    return _has_value(inputs) and inputs.case_value > inputs.last_offer


def _goal_above_offer(inputs: BracketInputs) -> bool:
    return inputs.goal is not None and inputs.goal > inputs.last_offer


def _positive_value(inputs: BracketInputs) -> bool:
    return _has_value(inputs) and inputs.case_value > 0


def _has_goal(inputs: BracketInputs) -> bool:
    return inputs.goal is not None


def _has_limit(inputs: BracketInputs) -> bool:
    return inputs.policy_limit is not None


def _always(inputs: BracketInputs) -> bool:
    return True


# Proposals


def _both_evaluation(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    high = inputs.range_high
    plaintiff = _capped(round_money(high * tuning.both_evaluation_plaintiff), inputs.policy_limit, high)
    return plaintiff, round_money(inputs.range_low * tuning.both_evaluation_defendant)


def _both_goal(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    goal, offer = inputs.goal, inputs.last_offer
    return (
        round_money(goal * tuning.both_goal_plaintiff),
        round_money(offer + (goal - offer) * tuning.both_goal_defendant_step),
    )


def _both_midpoint(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    gap = inputs.last_demand - inputs.last_offer
    center = inputs.last_offer + gap / 2
    spread = gap * tuning.both_midpoint_spread
    return round_money(center + spread), round_money(center - spread)


def _demand_evaluation(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    high = inputs.range_high * tuning.demand_evaluation_plaintiff
    return (
        _capped(round_money(high), inputs.policy_limit, high),
        round_money(inputs.range_low * tuning.demand_evaluation_defendant),
    )


def _demand_goal(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    return (
        round_money(inputs.goal * tuning.demand_goal_plaintiff),
        round_money(inputs.goal * tuning.demand_goal_defendant),
    )


def _demand_ratio(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    return (
        round_money(inputs.last_demand * tuning.demand_ratio_plaintiff),
        round_money(inputs.last_demand * tuning.demand_ratio_defendant),
    )


def _offer_evaluation(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    high = inputs.range_high * tuning.offer_evaluation_plaintiff
    return (
        _capped(round_money(high), inputs.policy_limit, high),
        max(round_money(inputs.range_low * tuning.offer_evaluation_defendant), inputs.last_offer),
    )


def _offer_goal(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    return (
        round_money(inputs.goal * tuning.offer_goal_plaintiff),
        round_money(inputs.goal * tuning.offer_goal_defendant),
    )


def _offer_ratio(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    return (
        round_money(inputs.last_offer * tuning.offer_ratio_plaintiff),
        round_money(inputs.last_offer * tuning.offer_ratio_defendant),
    )


def _opening_evaluation(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    high = inputs.range_high * tuning.opening_evaluation_plaintiff
    return (
        _capped(round_money(high), inputs.policy_limit, high),
        round_money(inputs.range_low * tuning.opening_evaluation_defendant),
    )


def _opening_goal(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    return (
        round_money(inputs.goal * tuning.opening_goal_plaintiff),
        round_money(inputs.goal * tuning.opening_goal_defendant),
    )


def _opening_limit(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    return (
        round_money(inputs.policy_limit * tuning.opening_limit_plaintiff),
        round_money(inputs.policy_limit * tuning.opening_limit_defendant),
    )


def _fallback(inputs: BracketInputs, tuning: BracketTuning) -> Proposal:
    return tuning.fallback_plaintiff, tuning.fallback_defendant


STRATEGIES: Dict[MoveState, Tuple[BracketStrategy, ...]] = {
    MoveState.both: (
        BracketStrategy(BracketAnchor.evaluation, _value_within_range, _both_evaluation),
        BracketStrategy(BracketAnchor.settlement_goal, _goal_within_range, _both_goal),
        BracketStrategy(BracketAnchor.midpoint, _always, _both_midpoint),
    ),
    MoveState.demand_only: (
        BracketStrategy(BracketAnchor.evaluation, _value_below_demand, _demand_evaluation),
        BracketStrategy(BracketAnchor.settlement_goal, _goal_below_demand, _demand_goal),
        BracketStrategy(BracketAnchor.demand_ratio, _always, _demand_ratio),
    ),
    MoveState.offer_only: (
        BracketStrategy(BracketAnchor.evaluation, _value_above_offer, _offer_evaluation),
        BracketStrategy(BracketAnchor.settlement_goal, _goal_above_offer, _offer_goal),
        BracketStrategy(BracketAnchor.offer_ratio, _always, _offer_ratio),
    ),
    MoveState.none: (
        BracketStrategy(BracketAnchor.evaluation, _positive_value, _opening_evaluation),
        BracketStrategy(BracketAnchor.settlement_goal, _has_goal, _opening_goal),
        BracketStrategy(BracketAnchor.policy_limit, _has_limit, _opening_limit),
        BracketStrategy(BracketAnchor.fallback, _always, _fallback),
    ),
}


def _last_amount(moves: Sequence[Move], party: Party, move_type: MoveType) -> Optional[float]:
    for move in reversed(moves):
        if move.party == party and move.type == move_type:
            return move_amount(move)
    return None


def gather_inputs(
    context: NegotiationContext,
    moves: Sequence[Move],
    tuning: BracketTuning = DEFAULT_TUNING,
) -> BracketInputs:
    """Collect the references available for positioning a bracket."""
    case_value = adjusted_case_value(context, tuning.evaluation)
    range_low = range_high = None
    if case_value is not None:
        range_low, range_high = settlement_range(case_value, tuning.evaluation)
    return BracketInputs(
        last_demand=_last_amount(moves, Party.plaintiff, MoveType.demand),
        last_offer=_last_amount(moves, Party.defendant, MoveType.offer),
        goal=context.settlement_goal,
        policy_limit=context.policy_limit,
        case_value=case_value,
        range_low=range_low,
        range_high=range_high,
    )


def select_strategy(inputs: BracketInputs) -> BracketStrategy:
    """Return the highest-priority strategy whose guard accepts ``inputs``."""
    for strategy in STRATEGIES[inputs.state]:
        if strategy.applies(inputs):
            return strategy
    raise LookupError(f"No bracket strategy accepts move state {inputs.state.value}")


def normalise(
    proposal: Proposal,
    policy_limit: Optional[float],
    tuning: BracketTuning = DEFAULT_TUNING,
) -> Tuple[int, int, bool]:
    """Apply the floor, ordering and policy-limit rules to a raw proposal.

    Returns the final plaintiff and defendant amounts and whether the
    policy limit clamp fired. A limit too small to hold a bracket above
    the floor cannot be honoured; the floor and ordering win.
    """
    plaintiff = max(proposal[0], tuning.minimum_amount)
    defendant = max(proposal[1], tuning.minimum_amount)

    if defendant >= plaintiff:
        plaintiff, defendant = defendant * tuning.repair_plaintiff, plaintiff * tuning.repair_defendant

    clamped = False
    if policy_limit is not None and plaintiff > policy_limit:
        plaintiff = round_money(policy_limit * tuning.limit_clamp)
        if defendant > plaintiff * tuning.limit_defendant_ceiling:
            defendant = round_money(plaintiff * tuning.limit_defendant_clamp)
        clamped = True

    plaintiff, defendant = round_money(plaintiff), round_money(defendant)

    if defendant < tuning.minimum_amount:
        defendant = round_money(tuning.minimum_amount)
    if plaintiff <= defendant:
        plaintiff = round_money(defendant * tuning.repair_plaintiff)
    return plaintiff, defendant, clamped


def suggest_bracket(
    context: NegotiationContext,
    moves: Sequence[Move],
    tuning: BracketTuning = DEFAULT_TUNING,
) -> BracketDecision:
    """Decide the bracket figures for a negotiation."""
    inputs = gather_inputs(context, moves, tuning)
    strategy = select_strategy(inputs)
    proposed = strategy.propose(inputs, tuning)
    plaintiff, defendant, clamped = normalise(proposed, inputs.policy_limit, tuning)
    logger.debug(
        "Bracket for %s anchored on %s: proposed %s -> %d/%d (limit clamp=%s)",
        inputs.state.value,
        strategy.anchor.value,
        proposed,
        plaintiff,
        defendant,
        clamped,
    )
    return BracketDecision(
        inputs=inputs,
        anchor=strategy.anchor,
        proposed=proposed,
        plaintiff_amount=plaintiff,
        defendant_amount=defendant,
        limit_clamped=clamped,
    )


# Rationale


def _evaluation_reasoning(decision: BracketDecision) -> str:
    inputs = decision.inputs
    value = format_money(inputs.case_value)
    if decision.state == MoveState.both:
        return (
            f"Based on case evaluation (adjusted value: {value}), projected settlement range of "
            f"{format_money(inputs.range_low)} - {format_money(inputs.range_high)}. "
            f"Last demand: {format_money(inputs.last_demand)}, last offer: {format_money(inputs.last_offer)}. "
            "Bracket positions parties within realistic settlement zone."
        )
    if decision.state == MoveState.demand_only:
        return (
            f"Based on case evaluation (adjusted value: {value}) and last demand of "
            f"{format_money(inputs.last_demand)}. No defendant offer yet - bracket provides realistic starting range."
        )
    if decision.state == MoveState.offer_only:
        return (
            f"Based on case evaluation (adjusted value: {value}) and last offer of "
            f"{format_money(inputs.last_offer)}. No plaintiff demand yet - bracket provides realistic starting range."
        )
    return (
        f"Based on case evaluation (adjusted value: {value}). "
        "No moves yet - bracket provides realistic opening range based on damages and liability."
    )


def _goal_reasoning(decision: BracketDecision) -> str:
    inputs = decision.inputs
    goal = format_money(inputs.goal)
    if decision.state == MoveState.both:
        return (
            f"Based on settlement goal of {goal}, last demand of {format_money(inputs.last_demand)}, "
            f"and last offer of {format_money(inputs.last_offer)}. "
            "This bracket positions both parties to move toward the settlement goal."
        )
    if decision.state == MoveState.demand_only:
        return (
            f"Based on settlement goal of {goal} and last demand of {format_money(inputs.last_demand)}. "
            "No defendant offer yet - bracket provides a starting negotiation range."
        )
    if decision.state == MoveState.offer_only:
        return (
            f"Based on settlement goal of {goal} and last offer of {format_money(inputs.last_offer)}. "
            "No plaintiff demand yet - bracket provides a starting negotiation range."
        )
    return f"Based on settlement goal of {goal}. No moves yet - bracket provides a starting negotiation range around the goal."


def _reference_reasoning(decision: BracketDecision) -> str:
    inputs = decision.inputs
    if decision.anchor == BracketAnchor.midpoint:
        text = (
            f"Based on last demand of {format_money(inputs.last_demand)} and last offer of "
            f"{format_money(inputs.last_offer)}. This bracket narrows the gap while leaving room for both parties to move."
        )
        if inputs.case_value is not None:
            text += f" (Note: Case evaluation suggests {format_money(inputs.case_value)} adjusted value.)"
        return text
    if decision.anchor == BracketAnchor.demand_ratio:
        return (
            f"Based on last demand of {format_money(inputs.last_demand)}. "
            "No defendant offer yet - bracket provides a reasonable negotiation range."
        )
    if decision.anchor == BracketAnchor.offer_ratio:
        return (
            f"Based on last offer of {format_money(inputs.last_offer)}. "
            "No plaintiff demand yet - bracket provides a reasonable negotiation range."
        )
    if decision.anchor == BracketAnchor.policy_limit:
        return (
            f"Based on policy limit of {format_money(inputs.policy_limit)}. "
            "No moves or settlement goal - bracket provides a range within policy limits."
        )
    return (
        "No moves, settlement goal, or policy limits available. "
        "Bracket uses typical personal injury negotiation amounts as a starting point."
    )


def render_bracket_reasoning(decision: BracketDecision) -> str:
    """Render the rationale for a bracket decision."""
    if decision.anchor == BracketAnchor.evaluation:
        text = _evaluation_reasoning(decision)
    elif decision.anchor == BracketAnchor.settlement_goal:
        text = _goal_reasoning(decision)
    else:
        text = _reference_reasoning(decision)
    limit = decision.inputs.policy_limit
    if decision.evaluation_capped:
        text += f" Capped at policy limit of {format_money(limit)}."
    if decision.limit_clamped:
        text += f" Amounts adjusted to respect policy limit of {format_money(limit)}."
    return text


def compute_bracket_suggestion(
    context: NegotiationContext,
    moves: Sequence[Move],
    tuning: BracketTuning = DEFAULT_TUNING,
) -> BracketSuggestion:
    """Suggest a bracket for a negotiation. Always returns a suggestion."""
    decision = suggest_bracket(context, moves, tuning)
    return BracketSuggestion(
        plaintiff_amount=decision.plaintiff_amount,
        defendant_amount=decision.defendant_amount,
        reasoning=render_bracket_reasoning(decision),
    )
