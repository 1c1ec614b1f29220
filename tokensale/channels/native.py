"""
NativeSaleChannel — продажа за нативную монету по цене оракула

Платёж передаётся как value; funding = value × price / 10^(native_dec + price_dec − 18).
Свежесть feed перепроверяется на каждой покупке (stale → OracleStale).
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from tokensale.core.access import Role
from tokensale.core.assets import FungibleAsset, safe_transfer
from tokensale.core.domain.events import StalenessThresholdUpdated, TokensPurchased
from tokensale.core.domain.round import Tier
from tokensale.core.errors import InvalidParameter
from tokensale.gatekeeper.valuation import OracleValuation
from tokensale.ledger.sale_ledger import SaleLedger
from tokensale.oracle.price_oracle import PriceOracleAdapter

from .base import SaleChannel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NativeChannelConfig:
    """Конфигурация нативного канала."""

    staleness_threshold_sec: int = 3600


def _wall_clock() -> int:
    return int(time.time())


class NativeSaleChannel(SaleChannel):
    """Канал продажи за нативную монету."""

    def __init__(
        self,
        address: str,
        admin: str,
        ledger: SaleLedger,
        native: FungibleAsset,
        oracle: PriceOracleAdapter,
        config: NativeChannelConfig | None = None,
        clock: Callable[[], int] | None = None,
    ):
        super().__init__(address, admin, ledger, native)
        self.config = config or NativeChannelConfig()
        if self.config.staleness_threshold_sec <= 0:
            raise InvalidParameter("staleness threshold must be positive")
        self._valuation = OracleValuation(oracle, self.config.staleness_threshold_sec, clock or _wall_clock)

    def buy(self, caller: str, tier: Tier, referrer: str | None = None, *, value: int) -> TokensPurchased:
        """Покупка за value нативной монеты caller."""
        request = self._request(caller, caller, self._native.address, value, tier, referrer, privileged=False)
        return self._purchase(request, self._native, self._valuation)

    def buy_for(
        self,
        caller: str,
        tier: Tier,
        payer: str,
        referrer: str | None = None,
        *,
        value: int,
    ) -> TokensPurchased:
        """Покупка on-ramp relayer'ом (caller платит, payer получает аллокацию)."""
        request = self._request(caller, payer, self._native.address, value, tier, referrer, privileged=True)
        return self._purchase(request, self._native, self._valuation)

    @property
    def staleness_threshold(self) -> int:
        return self._valuation.staleness_threshold_sec

    def set_price_staleness_threshold(self, caller: str, seconds: int) -> None:
        self._access.require(caller, Role.ADMIN)
        if seconds <= 0:
            raise InvalidParameter(f"staleness threshold must be positive, got {seconds}")
        self._valuation.staleness_threshold_sec = seconds
        self._emit(StalenessThresholdUpdated(emitter=self.address, seconds=seconds))
        logger.info("%s: price staleness threshold set to %ss", self.address, seconds)

    def get_total(self) -> int:
        """Всего нативной монеты принято каналом"""
        return self._total_of(self._native.address)

    def _collect(self, asset: FungibleAsset, funder: str, amount: int) -> None:
        safe_transfer(asset, funder, self.address, amount)

    def _record_asset(self, asset: FungibleAsset) -> str | None:
        return None
