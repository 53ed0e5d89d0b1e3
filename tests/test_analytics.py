"""
Unit tests for the trajectory analytics engine.
"""
import pytest

from settlement.core.models import MoveType, NegotiationStatus, Party
from settlement.core.schemas import Move
from settlement.core.services import analytics


def test_midpoint() -> None:
    assert analytics.midpoint(500000, 200000) == 350000


def test_converging_negotiation(moves) -> None:
    seq = moves(("demand", 250000), ("offer", 75000), ("demand", 200000), ("offer", 120000))
    assert analytics.momentum(seq) == pytest.approx(40.0)
    assert analytics.convergence_rate(seq) == pytest.approx(95000 / 175000 * 100)
    assert analytics.midpoint_of_midpoints(seq) == pytest.approx(161250)
    assert analytics.predict_settlement(seq) == 160375
    assert analytics.confidence(seq) == pytest.approx(95000 / 175000 * 60 + 16)
    assert analytics.determine_status(seq) == NegotiationStatus.active


def test_snapshot_for_single_exchange(moves) -> None:
    snapshot = analytics.compute_analytics(moves(("demand", 500000), ("offer", 200000)))
    assert snapshot.midpoint == 350000
    assert snapshot.midpoint_of_midpoints == 350000
    assert snapshot.predicted_settlement == 350000
    assert snapshot.momentum == 0
    assert snapshot.convergence_rate == 0
    assert snapshot.confidence == 0
    assert snapshot.status == NegotiationStatus.active


def test_snapshot_midpoint_uses_latest_moves(moves) -> None:
    seq = moves(("demand", 250000), ("offer", 75000), ("demand", 200000), ("offer", 120000))
    assert analytics.compute_analytics(seq).midpoint == 160000


@pytest.mark.parametrize(
    "steps",
    [
        (),
        (("demand", 100000),),
        (("offer", 100000),),
        (("demand", 100000), ("demand", 90000)),
        (("offer", 50000), ("offer", 60000)),
    ],
)
def test_degenerate_sequences_fall_back(moves, steps) -> None:
    seq = moves(*steps)
    assert analytics.momentum(seq) == 0
    assert analytics.convergence_rate(seq) == 0
    assert analytics.confidence(seq) == 0
    assert analytics.midpoint_of_midpoints(seq) is None
    assert analytics.predict_settlement(seq) is None
    snapshot = analytics.compute_analytics(seq)
    assert snapshot.midpoint is None
    assert snapshot.predicted_settlement is None


def test_status_progression(moves) -> None:
    assert analytics.determine_status([]) == NegotiationStatus.initiated
    assert analytics.determine_status(moves(("demand", 100000))) == NegotiationStatus.active
    assert analytics.determine_status(moves(("demand", 100000), ("offer", 98000))) == NegotiationStatus.settled
    assert analytics.determine_status(moves(("demand", 100000), ("offer", 90000))) == NegotiationStatus.active


def test_zero_amounts_do_not_divide(moves) -> None:
    zero_first_demand = moves(("demand", 0), ("offer", 100), ("demand", 50), ("offer", 100))
    assert analytics.momentum(zero_first_demand) == 0
    assert analytics.convergence_rate(zero_first_demand) == pytest.approx(50.0)

    zero_first_offer = moves(("demand", 1000), ("offer", 0), ("demand", 900), ("offer", 100))
    assert analytics.momentum(zero_first_offer) == 0

    equal_opening = moves(("demand", 1000), ("offer", 1000), ("demand", 1000), ("offer", 900))
    assert analytics.convergence_rate(equal_opening) == 0

    assert analytics.determine_status(moves(("demand", 0), ("offer", 0))) == NegotiationStatus.settled
    assert analytics.determine_status(moves(("demand", 100000), ("offer", 0))) == NegotiationStatus.active


def test_confidence_is_clamped(moves) -> None:
    runaway = moves(("demand", 200000), ("offer", 1000), ("demand", 100000), ("offer", 100000))
    assert analytics.confidence(runaway) == 100

    diverging = moves(("demand", 100000), ("offer", 50000), ("demand", 200000), ("offer", 10000))
    assert analytics.momentum(diverging) < 0
    assert analytics.convergence_rate(diverging) < 0
    assert analytics.confidence(diverging) == 0


def test_mediator_moves_count_by_type(moves) -> None:
    seq = moves(("demand", 300000), ("offer", 100000), ("offer", 200000, "mediator"))
    assert analytics.compute_analytics(seq).midpoint == 250000


def test_compute_analytics_is_deterministic(moves) -> None:
    seq = moves(("demand", 250000), ("offer", 75000), ("demand", 200000), ("offer", 120000))
    assert analytics.compute_analytics(seq) == analytics.compute_analytics(seq)


def test_history_replays_each_move(moves) -> None:
    seq = moves(("demand", 250000), ("offer", 75000), ("demand", 200000))
    history = analytics.compute_analytics_history(seq)
    assert [entry.index for entry in history] == [0, 1, 2]
    assert history[0].analytics.status == NegotiationStatus.active
    assert history[0].analytics.midpoint is None
    assert history[1].analytics.midpoint == 162500
    assert history[2].move == seq[2]
    assert history[2].analytics == analytics.compute_analytics(seq)


def test_non_finite_amount_is_a_contract_violation() -> None:
    broken = Move.model_construct(party=Party.plaintiff, type=MoveType.demand, amount=float("nan"))
    valid = Move(party=Party.defendant, type=MoveType.offer, amount=1000)
    with pytest.raises(ValueError):
        analytics.compute_analytics([broken, valid])
