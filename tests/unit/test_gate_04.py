"""Unit тесты для GATE 4: Spend Limits (Min / AuthLimit / Max).

Coverage:
- Минимальная покупка
- Cap неавторизованного / авторизованного пользователя
- buy_for (privileged) всегда использует Max
- Headroom не отрицательный
"""

import pytest

from tokensale.core.domain import Limits
from tokensale.gatekeeper.gates.gate_03_round_capacity import Gate03Result
from tokensale.gatekeeper.gates.gate_04_spend_limits import Gate04SpendLimits
from tests.fakes import WAD


def _gate03(entry_allowed=True, block_reason=""):
    return Gate03Result(
        entry_allowed=entry_allowed,
        block_reason=block_reason,
        round_index=0,
        tier_price=30 * WAD // 100,
        sold_units=0,
        remaining=10_000_000 * WAD,
        details="",
    )


@pytest.fixture
def gate04():
    """Fixture для GATE 4."""
    return Gate04SpendLimits()


@pytest.fixture
def limits():
    return Limits(min=25 * WAD, auth_limit=7_500 * WAD, max=100_000 * WAD)


def test_gate04_pass_at_minimum(gate04, limits):
    result = gate04.evaluate(_gate03(), 25 * WAD, limits, committed=0, authorized=False)

    assert result.entry_allowed is True
    assert result.cap == 7_500 * WAD
    assert result.headroom == 7_500 * WAD


def test_gate04_blocks_below_minimum(gate04, limits):
    result = gate04.evaluate(_gate03(), 25 * WAD - 1, limits, committed=0, authorized=False)

    assert result.block_reason == "below_minimum"


def test_gate04_blocks_above_auth_limit(gate04, limits):
    """Неавторизованный: 7500.1 > AuthLimit"""
    result = gate04.evaluate(_gate03(), 75_001 * WAD // 10, limits, committed=0, authorized=False)

    assert result.entry_allowed is False
    assert result.block_reason == "above_maximum"


def test_gate04_authorized_uses_max(gate04, limits):
    result = gate04.evaluate(_gate03(), 75_001 * WAD // 10, limits, committed=0, authorized=True)

    assert result.entry_allowed is True
    assert result.cap == 100_000 * WAD


def test_gate04_privileged_uses_max_for_unauthorized(gate04, limits):
    """buy_for: cap = Max независимо от флага авторизации"""
    result = gate04.evaluate(
        _gate03(), 10_000 * WAD, limits, committed=0, authorized=False, privileged=True
    )

    assert result.entry_allowed is True
    assert result.cap == 100_000 * WAD


def test_gate04_cumulative_headroom(gate04, limits):
    result = gate04.evaluate(_gate03(), 26 * WAD, limits, committed=7_475 * WAD, authorized=False)

    assert result.block_reason == "above_maximum"
    assert result.headroom == 25 * WAD


def test_gate04_headroom_floors_at_zero(gate04, limits):
    """Funding выше cap (cap снижен после покупок) → headroom 0"""
    result = gate04.evaluate(_gate03(), 25 * WAD, limits, committed=8_000 * WAD, authorized=False)

    assert result.headroom == 0
    assert result.block_reason == "above_maximum"


def test_gate04_propagates_gate03_block(gate04, limits):
    result = gate04.evaluate(
        _gate03(False, "round_capacity_exceeded"), 25 * WAD, limits, committed=0, authorized=False
    )

    assert result.block_reason == "gate03_blocked: round_capacity_exceeded"
