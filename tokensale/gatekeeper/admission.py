"""
AdmissionPipeline — последовательный прогон GATE 0-5 для покупки

Порядок фиксирован:
    GATE 0 (pause/asset/lifecycle) → GATE 1 (sanity) → GATE 2 (valuation)
    → GATE 3 (capacity) → GATE 4 (limits) → GATE 5 (referral fees)

Gates не бросают исключений. Первая блокировка переводится в исключение
по таблице BLOCK_ERRORS; состояние при этом не изменяется (pipeline
только читает ledger).
"""

import logging
from dataclasses import dataclass
from typing import Final

from tokensale.core.access import Role
from tokensale.core.domain.purchase import PurchaseRequest
from tokensale.core.errors import (
    AboveMaximum,
    BelowMinimum,
    CapacityExceeded,
    InvalidParameter,
    InvalidState,
    OracleStale,
    Paused,
    SaleError,
    Unauthorized,
)
from tokensale.gatekeeper.gates import (
    Gate00SaleKillswitch,
    Gate01PaymentSanity,
    Gate02Valuation,
    Gate03RoundCapacity,
    Gate04SpendLimits,
    Gate05ReferralFees,
)
from tokensale.gatekeeper.valuation import PaymentValuation
from tokensale.ledger.sale_ledger import SaleLedger

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

BLOCK_ERRORS: Final[dict[str, type[SaleError]]] = {
    # GATE 0
    "channel_paused": Paused,
    "asset_undefined": InvalidParameter,
    "operator_not_granted": Unauthorized,
    "campaign_not_open": InvalidState,
    "round_not_open": InvalidState,
    # GATE 1
    "payer_null": InvalidParameter,
    "self_referral": InvalidParameter,
    "zero_amount": InvalidParameter,
    # GATE 2
    "oracle_stale": OracleStale,
    # GATE 3
    "round_capacity_exceeded": CapacityExceeded,
    # GATE 4
    "below_minimum": BelowMinimum,
    "above_maximum": AboveMaximum,
}


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class AdmissionDecision:
    """Допущенная покупка: всё, что нужно для commit и переводов."""

    request: PurchaseRequest
    funding: int
    sold_units: int
    round_index: int
    tier_price: int
    referrer: str | None
    first_fee: int
    second_fee: int
    net_amount: int


# =============================================================================
# PIPELINE
# =============================================================================


class AdmissionPipeline:
    """Прогон gates против текущего состояния ledger."""

    def __init__(self, ledger: SaleLedger):
        self.ledger = ledger
        self.gate00 = Gate00SaleKillswitch()
        self.gate01 = Gate01PaymentSanity()
        self.gate02 = Gate02Valuation()
        self.gate03 = Gate03RoundCapacity()
        self.gate04 = Gate04SpendLimits()
        self.gate05 = Gate05ReferralFees()

    def admit(
        self,
        request: PurchaseRequest,
        *,
        channel: str,
        paused: bool,
        asset_configured: bool,
        asset_decimals: int,
        valuation: PaymentValuation,
    ) -> AdmissionDecision:
        """
        Проверить покупку и рассчитать её эффекты.

        Args:
            request: запрос покупки
            channel: адрес канала (должен держать OPERATOR на ledger)
            paused: канал приостановлен
            asset_configured: актив платежа известен каналу
            asset_decimals: decimals актива платежа
            valuation: стратегия нормализации канала

        Returns:
            AdmissionDecision

        Raises:
            SaleError: подкласс по первой блокирующей причине
            OracleError: feed вернул неположительную цену
        """
        ledger = self.ledger
        current_round = ledger.current_round()

        g0 = self.gate00.evaluate(
            paused=paused,
            asset_configured=asset_configured,
            operator_granted=ledger.has_role(Role.OPERATOR, channel),
            campaign_state=ledger.campaign_state,
            round_state=current_round.state if current_round is not None else None,
        )
        self._raise_if_blocked(g0.block_reason, g0.details)

        g1 = self.gate01.evaluate(g0, request)
        self._raise_if_blocked(g1.block_reason, g1.details)

        quote = valuation.quote(request.amount, asset_decimals)
        g2 = self.gate02.evaluate(g1, quote)
        if g2.block_reason == "oracle_stale":
            logger.warning("%s: purchase rejected, %s", channel, g2.details)
        self._raise_if_blocked(g2.block_reason, g2.details)

        g3 = self.gate03.evaluate(g2, current_round, request.tier, ledger.sale_decimals)
        self._raise_if_blocked(g3.block_reason, g3.details)

        g4 = self.gate04.evaluate(
            g3,
            funding=g2.funding,
            limits=ledger.limits,
            committed=ledger.funding_of(request.payer),
            authorized=ledger.is_auth(request.payer),
            privileged=request.privileged,
        )
        self._raise_if_blocked(g4.block_reason, g4.details)

        referrer = ledger.get_referrer(request.payer, request.referrer)
        g5 = self.gate05.evaluate(
            g4,
            amount=request.amount,
            funding=g2.funding,
            tier_price=g3.tier_price,
            sale_decimals=ledger.sale_decimals,
            referrer=referrer,
            rates=ledger.get_rates(referrer) if referrer is not None else None,
        )
        self._raise_if_blocked(g5.block_reason, g5.details)

        logger.debug(
            "%s: admitted payer=%s amount=%s funding=%s units=%s round=%s referrer=%s",
            channel,
            request.payer,
            request.amount,
            g2.funding,
            g3.sold_units,
            g3.round_index,
            referrer,
        )
        return AdmissionDecision(
            request=request,
            funding=g2.funding,
            sold_units=g3.sold_units,
            round_index=g3.round_index,
            tier_price=g3.tier_price,
            referrer=referrer,
            first_fee=g5.first_fee,
            second_fee=g5.second_fee,
            net_amount=g5.net_amount,
        )

    @staticmethod
    def _raise_if_blocked(block_reason: str, details: str) -> None:
        if not block_reason:
            return
        raise BLOCK_ERRORS.get(block_reason, InvalidState)(f"{block_reason}: {details}")
