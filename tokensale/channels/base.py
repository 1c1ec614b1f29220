"""
SaleChannel — общая часть каналов продажи

Канал:
1. Строит PurchaseRequest (buy: caller платит за себя; buy_for: on-ramp
   платит за payer и получает cap = Max)
2. Прогоняет AdmissionPipeline против ledger
3. Увеличивает running total актива и вызывает ledger.commit()
4. Внутри commit (после эффектов ledger) забирает amount в custody канала
   единственным переводом от funder, затем выплачивает first_fee в custody
   ledger и net в treasury

Любое исключение на шагах 3-4 откатывает ledger и канал целиком. При сбое
выплаты из custody внесённая в ledger комиссия возвращается и amount
возвращается funder.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from pydantic import ValidationError

from tokensale.core.access import Role
from tokensale.core.assets import FungibleAsset, require_balance, safe_transfer
from tokensale.core.component import SaleComponent
from tokensale.core.domain.events import ChannelPaused, ChannelUnpaused, TokensPurchased
from tokensale.core.domain.purchase import PurchaseRequest
from tokensale.core.domain.round import Tier
from tokensale.core.errors import InvalidParameter, InvalidState
from tokensale.gatekeeper.admission import AdmissionDecision, AdmissionPipeline
from tokensale.gatekeeper.valuation import PaymentValuation
from tokensale.ledger.sale_ledger import SaleLedger

logger = logging.getLogger(__name__)


@dataclass
class ChannelState:
    """Мутируемое состояние канала."""

    paused: bool = False
    totals: dict[str, int] = field(default_factory=dict)  # asset → оплачено


class SaleChannel(SaleComponent, ABC):
    """База канала продажи (pause, admission, settlement)."""

    def __init__(self, address: str, admin: str, ledger: SaleLedger, native: FungibleAsset):
        super().__init__(address, admin, native)
        self.ledger = ledger
        self._pipeline = AdmissionPipeline(ledger)
        self._state = ChannelState()

    # -------------------------------------------------------------------------
    # Pause
    # -------------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self._state.paused

    def pause(self, caller: str) -> None:
        """Остановить buy / buy_for (только ADMIN)."""
        self._access.require(caller, Role.ADMIN)
        if self._state.paused:
            raise InvalidState(f"{self.address} already paused")
        self._state.paused = True
        self._emit(ChannelPaused(emitter=self.address, account=caller))
        logger.info("%s: paused by %s", self.address, caller)

    def unpause(self, caller: str) -> None:
        self._access.require(caller, Role.ADMIN)
        if not self._state.paused:
            raise InvalidState(f"{self.address} is not paused")
        self._state.paused = False
        self._emit(ChannelUnpaused(emitter=self.address, account=caller))
        logger.info("%s: unpaused by %s", self.address, caller)

    # -------------------------------------------------------------------------
    # Purchase
    # -------------------------------------------------------------------------

    def _request(
        self,
        caller: str,
        payer: str | None,
        asset: str,
        amount: int,
        tier: Tier,
        referrer: str | None,
        privileged: bool,
    ) -> PurchaseRequest:
        if privileged:
            self._access.require(caller, Role.ONRAMP)
        try:
            return PurchaseRequest(
                payer=payer,
                funder=caller,
                asset=asset,
                amount=amount,
                tier=tier,
                referrer=referrer,
                privileged=privileged,
            )
        except ValidationError as exc:
            raise InvalidParameter(str(exc)) from exc

    def _purchase(
        self,
        request: PurchaseRequest,
        asset: FungibleAsset | None,
        valuation: PaymentValuation,
    ) -> TokensPurchased:
        """
        Допуск и settlement одной покупки.

        Args:
            request: запрос покупки
            asset: handle актива платежа (None если актив не сконфигурирован)
            valuation: стратегия нормализации канала

        Returns:
            Запись TokensPurchased
        """
        with self._non_reentrant():
            decision = self._pipeline.admit(
                request,
                channel=self.address,
                paused=self._state.paused,
                asset_configured=asset is not None,
                asset_decimals=asset.decimals() if asset is not None else 0,
                valuation=valuation,
            )

            with self._atomic():
                totals = self._state.totals
                self._write(totals, asset.address, totals.get(asset.address, 0) + request.amount)
                self.ledger.commit(
                    self.address,
                    user=request.payer,
                    asset=asset.address,
                    funding=decision.funding,
                    sold_units=decision.sold_units,
                    referrer=decision.referrer,
                    first_tier_fee=decision.first_fee,
                    second_tier_fee=decision.second_fee,
                    settlement=lambda: self._settle(asset, decision),
                )
                event = self._emit(
                    TokensPurchased(
                        emitter=self.address,
                        payer=request.payer,
                        asset=self._record_asset(asset),
                        referrer=decision.referrer,
                        amount=request.amount,
                        tier=request.tier,
                        sold_units=decision.sold_units,
                        round_index=decision.round_index,
                    )
                )

        logger.debug(
            "%s: %s bought %s units in round %s",
            self.address,
            request.payer,
            decision.sold_units,
            decision.round_index,
        )
        return event

    def _settle(self, asset: FungibleAsset, decision: AdmissionDecision) -> None:
        """
        Переводы покупки: amount → custody канала, first_fee → custody ledger,
        net → treasury.

        Raises:
            TransferFailed: у funder не хватает средств или перевод не выполнен
        """
        funder = decision.request.funder
        amount = decision.request.amount
        require_balance(asset, funder, amount)
        self._collect(asset, funder, amount)

        deposited = 0
        try:
            if decision.first_fee:
                safe_transfer(asset, self.address, self.ledger.address, decision.first_fee)
                deposited = decision.first_fee
            if decision.net_amount:
                safe_transfer(asset, self.address, self.ledger.treasury, decision.net_amount)
        except Exception:
            logger.warning("%s: payout failed, refunding %s %s to %s", self.address, amount, asset.address, funder)
            if deposited:
                self.ledger.return_deposit(self.address, asset, deposited)
            safe_transfer(asset, self.address, funder, amount)
            raise

    @abstractmethod
    def _collect(self, asset: FungibleAsset, funder: str, amount: int) -> None:
        """Перевести amount от funder в custody канала."""

    def _record_asset(self, asset: FungibleAsset) -> str | None:
        return asset.address

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def _total_of(self, asset: str) -> int:
        return self._state.totals.get(asset, 0)
