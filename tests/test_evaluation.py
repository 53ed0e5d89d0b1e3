"""
Unit tests for the damages-based case evaluation.
"""
import pytest

from settlement.core.schemas import NegotiationContext
from settlement.core.services import evaluation


def test_no_damages_means_no_evaluation() -> None:
    assert evaluation.adjusted_case_value(NegotiationContext()) is None
    assert evaluation.adjusted_case_value(NegotiationContext(liability_percentage=80)) is None
    assert evaluation.evaluate_case(NegotiationContext(settlement_goal=100000)) is None


def test_zero_total_means_no_evaluation() -> None:
    context = NegotiationContext(medical_specials=0, economic_damages=0)
    assert evaluation.adjusted_case_value(context) is None


def test_liability_defaults_to_full() -> None:
    context = NegotiationContext(medical_specials=120000, non_economic_damages=30000)
    assert evaluation.adjusted_case_value(context) == 150000


def test_adjusted_value_rounds_half_up() -> None:
    context = NegotiationContext(economic_damages=5, liability_percentage=50)
    assert evaluation.adjusted_case_value(context) == 3


def test_evaluate_case_without_limit() -> None:
    context = NegotiationContext(
        medical_specials=100000, economic_damages=50000, non_economic_damages=250000, liability_percentage=50
    )
    result = evaluation.evaluate_case(context)
    assert result.total_damages == 400000
    assert result.liability_percentage == 50
    assert result.adjusted_value == 200000
    assert (result.settlement_low, result.settlement_high) == (120000, 180000)
    assert result.policy_limit is None
    assert result.policy_utilization is None


def test_evaluate_case_caps_range_and_reports_utilization() -> None:
    context = NegotiationContext(medical_specials=400000, primary_coverage_limit=300000)
    result = evaluation.evaluate_case(context, predicted_settlement=150000)
    assert result.settlement_high == 300000
    assert result.policy_limit == 300000
    assert result.policy_utilization == pytest.approx(50.0)
