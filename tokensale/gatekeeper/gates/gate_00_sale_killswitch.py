"""GATE 0: Channel Pause / Asset Whitelist / Sale Lifecycle

Первый gate в цепочке допуска покупки:
- Блокирует любые покупки на приостановленном канале
- Блокирует активы, не сконфигурированные в канале
- Блокирует канал без роли OPERATOR на ledger (commit был бы отклонён)
- Блокирует покупки вне открытой кампании / открытого раунда

Gate stateless: состояние ledger и канала передаётся снимком.
"""

from dataclasses import dataclass

from tokensale.core.domain.round import CampaignState, RoundState


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    entry_allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    paused: bool
    asset_configured: bool
    operator_granted: bool
    campaign_state: CampaignState
    round_state: RoundState | None  # None: ни один раунд не открывался

    # Детали
    details: str


class Gate00SaleKillswitch:
    """GATE 0: Channel Pause / Asset Whitelist / Sale Lifecycle.

    Порядок проверок:
    1. Pause канала → блокировка (высший приоритет)
    2. Актив не сконфигурирован → блокировка
    3. Канал не имеет OPERATOR на ledger → блокировка
    4. Кампания не OPENED → блокировка
    5. Текущий раунд не OPENED → блокировка
    """

    def __init__(self):
        """GATE 0 не требует зависимостей (stateless)."""
        pass

    def evaluate(
        self,
        paused: bool,
        asset_configured: bool,
        operator_granted: bool,
        campaign_state: CampaignState,
        round_state: RoundState | None,
    ) -> Gate00Result:
        """Оценка GATE 0.

        Args:
            paused: канал приостановлен
            asset_configured: актив платежа известен каналу
            operator_granted: канал держит OPERATOR на ledger
            campaign_state: состояние кампании ledger
            round_state: состояние текущего раунда (None если раунда нет)

        Returns:
            Gate00Result с решением о допуске
        """

        def blocked(reason: str, details: str) -> Gate00Result:
            return Gate00Result(
                entry_allowed=False,
                block_reason=reason,
                paused=paused,
                asset_configured=asset_configured,
                operator_granted=operator_granted,
                campaign_state=campaign_state,
                round_state=round_state,
                details=details,
            )

        if paused:
            return blocked("channel_paused", "Channel paused: purchases halted")

        if not asset_configured:
            return blocked("asset_undefined", "Payment asset is not configured for this channel")

        if not operator_granted:
            return blocked("operator_not_granted", "Channel lacks OPERATOR role on the ledger")

        if campaign_state != CampaignState.OPENED:
            return blocked(
                "campaign_not_open",
                f"Campaign state={campaign_state.value}, purchases require opened",
            )

        if round_state != RoundState.OPENED:
            state = round_state.value if round_state is not None else "undefined"
            return blocked(
                "round_not_open",
                f"Current round state={state}, purchases require opened",
            )

        return Gate00Result(
            entry_allowed=True,
            block_reason="",
            paused=paused,
            asset_configured=asset_configured,
            operator_granted=operator_granted,
            campaign_state=campaign_state,
            round_state=round_state,
            details="PASS: channel live, campaign and round opened",
        )
