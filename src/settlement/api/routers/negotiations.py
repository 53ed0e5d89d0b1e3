"""
Negotiation analytics API router.

Every endpoint receives the ordered move list (and, where needed, the
case context) in the request body and returns the engine output. Nothing
is stored: the caller owns the negotiation record and decides what to
persist.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, TypeVar

from fastapi import APIRouter, HTTPException, status

from ...core.schemas import (
    AnalyticsHistoryEntry,
    AnalyticsSnapshot,
    BracketSuggestion,
    CaseEvaluation,
    MovesRequest,
    NegotiationRequest,
    Recommendation,
)
from ...core.services import analytics as analytics_service
from ...core.services import brackets as brackets_service
from ...core.services import evaluation as evaluation_service
from ...core.services import recommendation as recommendation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/negotiations", tags=["negotiations"])

T = TypeVar("T")


def _run(compute: Callable[[], T], what: str) -> T:
    try:
        return compute()
    except ValueError as exc:
        logger.warning("Rejected %s request: %s", what, exc)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.post("/analytics", response_model=AnalyticsSnapshot)
async def analytics(req: MovesRequest) -> AnalyticsSnapshot:
    """Compute the analytics snapshot for a move list."""
    return _run(lambda: analytics_service.compute_analytics(req.moves), "analytics")


@router.post("/analytics/history", response_model=List[AnalyticsHistoryEntry])
async def analytics_history(req: MovesRequest) -> List[AnalyticsHistoryEntry]:
    """Replay the move list and return the snapshot after each move."""
    return _run(lambda: analytics_service.compute_analytics_history(req.moves), "analytics history")


@router.post("/recommend", response_model=Optional[Recommendation])
async def recommend(req: NegotiationRequest) -> Optional[Recommendation]:
    """Recommend the next move; ``null`` until both sides have moved."""
    return _run(
        lambda: recommendation_service.compute_recommendation(req.context, req.moves),
        "recommendation",
    )


@router.post("/brackets/suggest", response_model=BracketSuggestion)
async def suggest_bracket(req: NegotiationRequest) -> BracketSuggestion:
    """Suggest a plaintiff/defendant bracket."""
    return _run(
        lambda: brackets_service.compute_bracket_suggestion(req.context, req.moves),
        "bracket suggestion",
    )


@router.post("/evaluation", response_model=Optional[CaseEvaluation])
async def evaluation(req: NegotiationRequest) -> Optional[CaseEvaluation]:
    """Value the case from its damages; ``null`` without evaluation data."""

    def _evaluate() -> Optional[CaseEvaluation]:
        predicted = analytics_service.predict_settlement(req.moves)
        return evaluation_service.evaluate_case(req.context, predicted_settlement=predicted)

    return _run(_evaluate, "evaluation")
