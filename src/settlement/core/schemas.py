"""
Pydantic models shared by the engines and the HTTP API.

``Move`` and ``NegotiationContext`` are the engines' inputs; the remaining
models are their outputs. Request models at the bottom describe the API
bodies and enforce the input boundary: finite non-negative amounts below
the money ceiling, constrained enums and chronologically ordered moves.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from .models import MoveType, NegotiationStatus, Party
from .utils.money import MAX_MONEY_VALUE, parse_money_input

MAX_NOTES_LENGTH = 5000


def _coerce_money(value: Any) -> Any:
    if isinstance(value, str):
        parsed = parse_money_input(value)
        if parsed is None:
            raise ValueError(f"{value!r} is not a valid money amount")
        return parsed
    return value


Money = Annotated[
    float,
    BeforeValidator(_coerce_money),
    Field(ge=0, le=MAX_MONEY_VALUE, allow_inf_nan=False),
]


class Move(BaseModel):
    """One negotiating step. Moves are immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    party: Party = Field(..., description="Who made the move.")
    type: MoveType = Field(..., description="Demand (plaintiff-style) or offer (defendant-style).")
    amount: Money = Field(..., description="Monetary value of the move.")
    timestamp: Optional[datetime] = Field(None, description="When the move was made.")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH, description="Free text, ignored by the engines.")


class NegotiationContext(BaseModel):
    """Read-only case data supplied alongside the moves.

    ``None`` always means unknown. A settlement goal of ``0`` is a goal;
    a non-positive policy limit is treated as no limit.
    """

    model_config = ConfigDict(frozen=True)

    settlement_goal: Optional[Money] = None
    policy_limits: Optional[Money] = None
    primary_coverage_limit: Optional[Money] = None
    medical_specials: Optional[Money] = None
    economic_damages: Optional[Money] = None
    non_economic_damages: Optional[Money] = None
    liability_percentage: Optional[float] = Field(None, ge=0, le=100, allow_inf_nan=False)

    @property
    def policy_limit(self) -> Optional[float]:
        """Effective coverage ceiling: explicit policy limits, else primary coverage."""
        for limit in (self.policy_limits, self.primary_coverage_limit):
            if limit is not None and limit > 0:
                return limit
        return None


class AnalyticsSnapshot(BaseModel):
    """Metrics derived from the full move list."""

    midpoint: Optional[int] = Field(None, description="Midpoint of the latest demand and latest offer.")
    midpoint_of_midpoints: Optional[int] = Field(None, description="Average of the paired demand/offer midpoints.")
    momentum: float = Field(0.0, description="Average percentage both sides moved since their first move.")
    convergence_rate: float = Field(0.0, description="Percentage of the initial gap closed so far.")
    predicted_settlement: Optional[int] = Field(None, description="Trajectory-weighted settlement prediction.")
    confidence: float = Field(0.0, ge=0, le=100, description="Confidence in the prediction, 0-100.")
    status: NegotiationStatus = Field(NegotiationStatus.initiated, description="Coarse negotiation status.")


class AnalyticsHistoryEntry(BaseModel):
    """Snapshot as it stood right after a given move was recorded."""

    index: int = Field(..., description="Zero-based position of the move in the sequence.")
    move: Move
    analytics: AnalyticsSnapshot


class Recommendation(BaseModel):
    """Suggested next move."""

    party: Party
    type: MoveType
    suggested_amount: int
    confidence: float = Field(..., ge=0, le=100)
    reasoning: str


class BracketSuggestion(BaseModel):
    """Suggested joint proposal range."""

    plaintiff_amount: int
    defendant_amount: int
    reasoning: str


class CaseEvaluation(BaseModel):
    """Damages-based valuation of the case."""

    total_damages: int
    liability_percentage: float
    adjusted_value: int
    settlement_low: int
    settlement_high: int
    policy_limit: Optional[int] = None
    policy_utilization: Optional[float] = Field(
        None, description="Predicted settlement as a percentage of the policy limit."
    )


class MovesRequest(BaseModel):
    """Request body carrying an ordered move list."""

    moves: List[Move] = Field(default_factory=list, description="Moves in ascending chronological order.")

    @model_validator(mode="after")
    def check_chronological(self) -> "MovesRequest":
        stamps = [move.timestamp for move in self.moves if move.timestamp is not None]
        try:
            ordered = all(earlier <= later for earlier, later in zip(stamps, stamps[1:]))
        except TypeError as exc:
            raise ValueError("move timestamps must be all timezone-aware or all naive") from exc
        if not ordered:
            raise ValueError("moves must be supplied in ascending timestamp order")
        return self


class NegotiationRequest(MovesRequest):
    """Request body carrying case context and an ordered move list."""

    context: NegotiationContext = Field(default_factory=NegotiationContext)
