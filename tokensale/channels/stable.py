"""
StableSaleChannel — продажа за stable-активы по фиксированному курсу

1 целый stable-актив = 1 funding-единица; оракул не используется.
Платёж списывается с funder через transfer_from (нужен allowance на канал).
"""

from collections.abc import Sequence

from tokensale.core.assets import FungibleAsset, is_null, safe_transfer_from
from tokensale.core.domain.events import TokensPurchased
from tokensale.core.domain.round import Tier
from tokensale.core.errors import InvalidParameter
from tokensale.gatekeeper.valuation import FixedRateValuation
from tokensale.ledger.sale_ledger import SaleLedger

from .base import SaleChannel


class StableSaleChannel(SaleChannel):
    """Канал продажи за набор stable-активов."""

    def __init__(
        self,
        address: str,
        admin: str,
        ledger: SaleLedger,
        native: FungibleAsset,
        assets: Sequence[FungibleAsset],
    ):
        super().__init__(address, admin, ledger, native)
        if any(is_null(asset.address) for asset in assets):
            raise InvalidParameter("stable asset address must not be null")
        self._assets = {asset.address: asset for asset in assets}
        self._valuation = FixedRateValuation()

    def buy(
        self,
        caller: str,
        asset: str,
        amount: int,
        tier: Tier,
        referrer: str | None = None,
    ) -> TokensPurchased:
        """Покупка за amount актива asset со счёта caller."""
        request = self._request(caller, caller, asset, amount, tier, referrer, privileged=False)
        return self._purchase(request, self._assets.get(asset), self._valuation)

    def buy_for(
        self,
        caller: str,
        asset: str,
        amount: int,
        tier: Tier,
        payer: str,
        referrer: str | None = None,
    ) -> TokensPurchased:
        """Покупка on-ramp relayer'ом со счёта caller в пользу payer."""
        request = self._request(caller, payer, asset, amount, tier, referrer, privileged=True)
        return self._purchase(request, self._assets.get(asset), self._valuation)

    @property
    def assets(self) -> tuple[str, ...]:
        return tuple(self._assets)

    def is_asset(self, asset: str) -> bool:
        return asset in self._assets

    def get_total(self, asset: str) -> int:
        return self._total_of(asset)

    def _collect(self, asset: FungibleAsset, funder: str, amount: int) -> None:
        safe_transfer_from(asset, self.address, funder, self.address, amount)
