"""Unit тесты для GATE 0: Channel Pause / Asset Whitelist / Sale Lifecycle.

Coverage:
- Pause канала (высший приоритет)
- Несконфигурированный актив
- Отсутствие OPERATOR у канала
- Состояние кампании и текущего раунда
"""

import pytest

from tokensale.core.domain import CampaignState, RoundState
from tokensale.gatekeeper.gates.gate_00_sale_killswitch import Gate00SaleKillswitch


@pytest.fixture
def gate00():
    """Fixture для GATE 0."""
    return Gate00SaleKillswitch()


@pytest.fixture
def live():
    """Параметры полностью открытой продажи."""
    return dict(
        paused=False,
        asset_configured=True,
        operator_granted=True,
        campaign_state=CampaignState.OPENED,
        round_state=RoundState.OPENED,
    )


def test_gate00_pass_when_sale_live(gate00, live):
    """Открытая кампания и раунд → PASS"""
    result = gate00.evaluate(**live)

    assert result.entry_allowed is True
    assert result.block_reason == ""
    assert "PASS" in result.details


def test_gate00_paused_has_priority(gate00, live):
    """Pause блокирует даже при прочих нарушениях"""
    live.update(paused=True, asset_configured=False, campaign_state=CampaignState.CLOSED)

    result = gate00.evaluate(**live)

    assert result.entry_allowed is False
    assert result.block_reason == "channel_paused"


def test_gate00_blocks_unknown_asset(gate00, live):
    live["asset_configured"] = False

    result = gate00.evaluate(**live)

    assert result.block_reason == "asset_undefined"


def test_gate00_blocks_channel_without_operator(gate00, live):
    live["operator_granted"] = False

    result = gate00.evaluate(**live)

    assert result.block_reason == "operator_not_granted"


@pytest.mark.parametrize("campaign_state", [CampaignState.NONE, CampaignState.CLOSED])
def test_gate00_blocks_campaign_not_open(gate00, live, campaign_state):
    live["campaign_state"] = campaign_state

    result = gate00.evaluate(**live)

    assert result.entry_allowed is False
    assert result.block_reason == "campaign_not_open"
    assert campaign_state.value in result.details


@pytest.mark.parametrize("round_state", [None, RoundState.NONE, RoundState.CLOSED])
def test_gate00_blocks_round_not_open(gate00, live, round_state):
    """Раунд не открывался / закрыт → блокировка"""
    live["round_state"] = round_state

    result = gate00.evaluate(**live)

    assert result.entry_allowed is False
    assert result.block_reason == "round_not_open"
    assert result.round_state == round_state
