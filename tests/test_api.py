"""
Integration tests for the negotiation API.

These tests build the FastAPI application with ``create_app`` and drive
it through httpx's ASGI transport, so no server is started.
"""
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from settlement.api.main import create_app

CONVERGING = [
    {"party": "plaintiff", "type": "demand", "amount": 250000, "timestamp": "2024-01-08T09:00:00"},
    {"party": "defendant", "type": "offer", "amount": 75000, "timestamp": "2024-01-09T09:00:00"},
    {"party": "plaintiff", "type": "demand", "amount": "200k", "timestamp": "2024-01-10T09:00:00"},
    {"party": "defendant", "type": "offer", "amount": "$120,000", "timestamp": "2024-01-11T09:00:00"},
]


@pytest.fixture()
def app() -> FastAPI:
    return create_app()


@pytest.fixture()
async def client(app: FastAPI):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


@pytest.mark.asyncio
async def test_analytics(client: AsyncClient) -> None:
    res = await client.post("/negotiations/analytics", json={"moves": CONVERGING})
    assert res.status_code == 200
    data = res.json()
    assert data["midpoint"] == 160000
    assert data["predicted_settlement"] == 160375
    assert data["momentum"] == pytest.approx(40.0)
    assert data["status"] == "active"


@pytest.mark.asyncio
async def test_analytics_for_empty_negotiation(client: AsyncClient) -> None:
    res = await client.post("/negotiations/analytics", json={"moves": []})
    assert res.status_code == 200
    assert res.json()["status"] == "initiated"


@pytest.mark.asyncio
async def test_analytics_history(client: AsyncClient) -> None:
    res = await client.post("/negotiations/analytics/history", json={"moves": CONVERGING})
    assert res.status_code == 200
    history = res.json()
    assert len(history) == 4
    assert history[-1]["analytics"]["predicted_settlement"] == 160375
    assert history[0]["move"]["amount"] == 250000


@pytest.mark.asyncio
async def test_recommend(client: AsyncClient) -> None:
    res = await client.post("/negotiations/recommend", json={"context": {}, "moves": CONVERGING})
    assert res.status_code == 200
    data = res.json()
    assert data["party"] == "plaintiff"
    assert data["type"] == "demand"
    assert data["suggested_amount"] == 168640
    assert data["reasoning"].startswith("Current gap: $80,000 (66.7% of offer).")


@pytest.mark.asyncio
async def test_recommend_without_both_sides(client: AsyncClient) -> None:
    res = await client.post("/negotiations/recommend", json={"moves": CONVERGING[:1]})
    assert res.status_code == 200
    assert res.json() is None


@pytest.mark.asyncio
async def test_bracket_fallback(client: AsyncClient) -> None:
    res = await client.post("/negotiations/brackets/suggest", json={"context": {}, "moves": []})
    assert res.status_code == 200
    data = res.json()
    assert data["plaintiff_amount"] == 2000000
    assert data["defendant_amount"] == 750000
    assert set(data) == {"plaintiff_amount", "defendant_amount", "reasoning"}


@pytest.mark.asyncio
async def test_bracket_with_goal(client: AsyncClient) -> None:
    res = await client.post(
        "/negotiations/brackets/suggest",
        json={"context": {"settlement_goal": "150k"}, "moves": CONVERGING},
    )
    assert res.status_code == 200
    data = res.json()
    assert (data["plaintiff_amount"], data["defendant_amount"]) == (172500, 138000)
    assert data["reasoning"].startswith("Based on settlement goal of $150,000")


@pytest.mark.asyncio
async def test_evaluation(client: AsyncClient) -> None:
    context = {"medical_specials": 100000, "non_economic_damages": 200000, "policy_limits": 320000}
    res = await client.post("/negotiations/evaluation", json={"context": context, "moves": CONVERGING})
    assert res.status_code == 200
    data = res.json()
    assert data["adjusted_value"] == 300000
    assert data["settlement_high"] == 270000
    assert data["policy_utilization"] == pytest.approx(160375 / 320000 * 100)


@pytest.mark.asyncio
async def test_evaluation_without_damages(client: AsyncClient) -> None:
    res = await client.post("/negotiations/evaluation", json={"moves": CONVERGING})
    assert res.status_code == 200
    assert res.json() is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"moves": [{"party": "plaintiff", "type": "demand", "amount": -5}]},
        {"moves": [{"party": "judge", "type": "demand", "amount": 5}]},
        {"moves": list(reversed(CONVERGING))},
        {"moves": CONVERGING, "context": {"liability_percentage": 150}},
    ],
)
async def test_invalid_input_is_rejected(client: AsyncClient, body: dict) -> None:
    res = await client.post("/negotiations/brackets/suggest", json=body)
    assert res.status_code == 422
