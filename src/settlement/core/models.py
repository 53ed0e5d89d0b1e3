"""
Domain enumerations for the Settlement Tracker.

The engines exchange pydantic schemas (see ``schemas.py``); the value
sets those schemas are constrained to are defined here so the API layer
and the engines agree on them.
"""
from __future__ import annotations

import enum


class Party(str, enum.Enum):
    """Who made a move."""

    plaintiff = "plaintiff"
    defendant = "defendant"
    mediator = "mediator"


class MoveType(str, enum.Enum):
    """Kind of move: a plaintiff-style ask or a defendant-style counter."""

    demand = "demand"
    offer = "offer"


class NegotiationStatus(str, enum.Enum):
    """Coarse status derived from the move list."""

    initiated = "initiated"
    active = "active"
    settled = "settled"


class MomentumTrend(str, enum.Enum):
    """How the recommendation rationale characterises momentum."""

    converging = "converging"
    diverging = "diverging"
    steady = "steady"


class BracketAnchor(str, enum.Enum):
    """Reference a bracket suggestion was positioned against."""

    evaluation = "evaluation"
    settlement_goal = "settlement_goal"
    midpoint = "midpoint"
    demand_ratio = "demand_ratio"
    offer_ratio = "offer_ratio"
    policy_limit = "policy_limit"
    fallback = "fallback"


class MoveState(str, enum.Enum):
    """Which sides have an anchoring move on record."""

    both = "both"
    demand_only = "demand_only"
    offer_only = "offer_only"
    none = "none"
