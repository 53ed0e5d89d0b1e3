"""
Shared fixtures for the engine and API tests.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, List, Tuple

import pytest

from settlement.core.config import get_settings
from settlement.core.models import MoveType, Party
from settlement.core.schemas import Move

START = datetime(2024, 1, 8, 9, 0, 0)


def _party_for(move_type: MoveType) -> Party:
    return Party.plaintiff if move_type == MoveType.demand else Party.defendant


def build_moves(*steps: Tuple) -> List[Move]:
    """Build a chronological move list.

    Each step is ``(type, amount)`` or ``(type, amount, party)``; the party
    defaults to the plaintiff for demands and the defendant for offers.
    """
    moves = []
    for index, step in enumerate(steps):
        move_type = MoveType(step[0])
        party = Party(step[2]) if len(step) > 2 else _party_for(move_type)
        moves.append(
            Move(
                party=party,
                type=move_type,
                amount=step[1],
                timestamp=START + timedelta(days=index),
            )
        )
    return moves


@pytest.fixture()
def moves() -> Callable[..., List[Move]]:
    return build_moves


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against a fresh test configuration."""
    monkeypatch.setenv("SETTLE_ENV", "test")
    monkeypatch.setenv("SETTLE_LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
