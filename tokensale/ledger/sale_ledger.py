"""
SaleLedger — единственный владелец состояния продажи

Хранит:
- Кампанию и последовательность раундов (цены тиров, supply, sold)
- Кумулятивный funding и балансы пользователей по раундам
- Allow-list авторизованных пользователей и лимиты Min / AuthLimit / Max
- Реестр рефереров, привязки user → referrer и начисленные реферальные балансы
- Treasury

Каналы пишут в ledger только через commit() (роль OPERATOR). Commit не
выполняет проверок допуска: это делает AdmissionPipeline канала.

Порядок эффектов commit (reentrancy):
    funding → total_sold / round.sold → balance → referral accrual → binding
    → запись LedgerCommit → settlement() канала (переводы)
Любое исключение в settlement откатывает все эффекты commit.
"""

import copy
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from pydantic import ValidationError

from tokensale.core.access import Role
from tokensale.core.assets import SALE_ASSET, FungibleAsset, is_null, require_balance, safe_transfer
from tokensale.core.component import SaleComponent
from tokensale.core.domain.events import (
    AuthUpdated,
    CampaignClosed,
    CampaignOpened,
    DefaultRatesUpdated,
    LedgerCommit,
    LimitUpdated,
    ReferralClaimed,
    ReferralDisabled,
    ReferralEnabled,
    ReferralRegistered,
    ReferralSetup,
    ReferrerBound,
    RoundAdded,
    RoundClosed,
    RoundOpened,
    RoundPriceUpdated,
    RoundSupplyUpdated,
    TreasuryUpdated,
)
from tokensale.core.domain.limits import Limits
from tokensale.core.domain.referral import (
    DEFAULT_FIRST_RATE,
    DEFAULT_SECOND_RATE,
    ReferralRates,
    ReferralRecord,
)
from tokensale.core.domain.round import CampaignState, Round, RoundState, Tier
from tokensale.core.errors import (
    CapacityExceeded,
    InvalidParameter,
    InvalidState,
    Unauthorized,
)
from tokensale.core.math.fixed_point import headroom

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class LedgerConfig:
    """Конфигурация SaleLedger."""

    sale_decimals: int = 18
    default_first_rate: int = DEFAULT_FIRST_RATE
    default_second_rate: int = DEFAULT_SECOND_RATE

    # Ключ bucket'а реферальных начислений в sale-единицах
    sale_asset: str = SALE_ASSET


# =============================================================================
# STATE
# =============================================================================


@dataclass
class LedgerState:
    """Мутируемое состояние ledger (в _atomic изменяется через _write / _assign)."""

    treasury: str
    default_rates: ReferralRates
    campaign: CampaignState = CampaignState.NONE
    rounds: list[Round] = field(default_factory=list)
    current_round: int | None = None  # Последний открытый раунд
    total_sold: int = 0
    limits: Limits = field(default_factory=Limits)
    funding: dict[str, int] = field(default_factory=dict)
    balances: dict[tuple[int, str], int] = field(default_factory=dict)  # (round, user)
    authorized: set[str] = field(default_factory=set)
    referrals: dict[str, ReferralRecord] = field(default_factory=dict)
    bindings: dict[str, str] = field(default_factory=dict)  # user → referrer
    ref_balances: dict[tuple[str, str], int] = field(default_factory=dict)  # (asset, referrer)


# =============================================================================
# LEDGER
# =============================================================================


class SaleLedger(SaleComponent):
    """Ledger продажи: lifecycle, лимиты, settlement и реферальный учёт."""

    def __init__(
        self,
        address: str,
        admin: str,
        treasury: str,
        native: FungibleAsset,
        config: LedgerConfig | None = None,
    ):
        super().__init__(address, admin, native)
        if is_null(treasury):
            raise InvalidParameter("treasury must not be null")
        self.config = config or LedgerConfig()
        self._state = LedgerState(
            treasury=treasury,
            default_rates=self._rates(self.config.default_first_rate, self.config.default_second_rate),
        )
        # (operator, asset, остаток) комиссии, внесённой в текущем settlement
        self._deposit: tuple[str, str, int] | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self, caller: str) -> None:
        """Открыть кампанию (NONE → OPENED, однократно)."""
        self._access.require(caller, Role.ADMIN)
        if self._state.campaign != CampaignState.NONE:
            raise InvalidState(f"campaign already {self._state.campaign.value}")
        self._state.campaign = CampaignState.OPENED
        self._emit(CampaignOpened(emitter=self.address))
        logger.info("%s: campaign opened", self.address)

    def close(self, caller: str) -> None:
        """Закрыть кампанию (OPENED → CLOSED, однократно)."""
        self._access.require(caller, Role.ADMIN)
        if self._state.campaign != CampaignState.OPENED:
            raise InvalidState(f"campaign is {self._state.campaign.value}, cannot close")
        self._state.campaign = CampaignState.CLOSED
        self._emit(CampaignClosed(emitter=self.address))
        logger.info("%s: campaign closed", self.address)

    def add_round(self, caller: str, short_price: int, long_price: int, supply: int) -> int:
        """
        Добавить раунд в конец последовательности.

        Returns:
            Индекс нового раунда

        Raises:
            InvalidState: кампания закрыта
            InvalidParameter: неположительные цены или supply
        """
        self._access.require(caller, Role.ADMIN)
        if self._state.campaign == CampaignState.CLOSED:
            raise InvalidState("cannot add rounds after the campaign is closed")
        index = len(self._state.rounds)
        try:
            new_round = Round(index=index, short_price=short_price, long_price=long_price, supply=supply)
        except ValidationError as exc:
            raise InvalidParameter(str(exc)) from exc

        self._state.rounds.append(new_round)
        self._emit(
            RoundAdded(
                emitter=self.address,
                index=index,
                short_price=short_price,
                long_price=long_price,
                supply=supply,
            )
        )
        logger.info("%s: round %s added (supply=%s)", self.address, index, supply)
        return index

    def update_round_price(self, caller: str, index: int, short_price: int, long_price: int) -> None:
        """Изменить цены тиров раунда, который ещё не открывался."""
        self._access.require(caller, Role.ADMIN)
        current = self._round(index)
        if current.state != RoundState.NONE:
            raise InvalidState(f"round {index} already {current.state.value}, prices are fixed")
        try:
            self._state.rounds[index] = current.with_prices(short_price, long_price)
        except ValidationError as exc:
            raise InvalidParameter(str(exc)) from exc
        self._emit(
            RoundPriceUpdated(emitter=self.address, index=index, short_price=short_price, long_price=long_price)
        )
        logger.info("%s: round %s prices updated", self.address, index)

    def update_round_supply(self, caller: str, index: int, supply: int) -> None:
        """Изменить supply незакрытого раунда (не ниже уже проданного)."""
        self._access.require(caller, Role.ADMIN)
        current = self._round(index)
        if current.state == RoundState.CLOSED:
            raise InvalidState(f"round {index} is closed")
        if supply < current.sold:
            raise InvalidParameter(f"supply {supply} below already sold {current.sold}")
        try:
            self._state.rounds[index] = current.with_supply(supply)
        except ValidationError as exc:
            raise InvalidParameter(str(exc)) from exc
        self._emit(RoundSupplyUpdated(emitter=self.address, index=index, supply=supply))
        logger.info("%s: round %s supply updated to %s", self.address, index, supply)

    def open_round(self, caller: str, index: int) -> None:
        """
        Открыть раунд; текущий открытый раунд предварительно закрывается.

        Raises:
            InvalidState: кампания не открыта или раунд уже стартовал
            InvalidParameter: раунд не определён
        """
        self._access.require(caller, Role.ADMIN)
        if self._state.campaign != CampaignState.OPENED:
            raise InvalidState(f"campaign is {self._state.campaign.value}, rounds cannot open")
        target = self._round(index)
        if target.state != RoundState.NONE:
            raise InvalidState(f"round {index} already {target.state.value}")

        with self._atomic():
            previous = self.current_round()
            if previous is not None and previous.state == RoundState.OPENED:
                self._close_round(previous)
            self._write(self._state.rounds, index, target.advance(RoundState.OPENED))
            self._assign(self._state, "current_round", index)
            self._emit(RoundOpened(emitter=self.address, index=index))
        logger.info("%s: round %s opened", self.address, index)

    def close_round(self, caller: str, index: int) -> None:
        """Закрыть текущий открытый раунд."""
        self._access.require(caller, Role.ADMIN)
        target = self._round(index)
        if self._state.current_round != index or target.state != RoundState.OPENED:
            raise InvalidState(f"round {index} is not the currently open round")
        self._close_round(target)

    def _close_round(self, target: Round) -> None:
        self._write(self._state.rounds, target.index, target.advance(RoundState.CLOSED))
        self._emit(RoundClosed(emitter=self.address, index=target.index))
        logger.info("%s: round %s closed", self.address, target.index)

    # =========================================================================
    # Admission config
    # =========================================================================

    def set_min(self, caller: str, value: int) -> None:
        self._set_limit(caller, "min", value)

    def set_auth_limit(self, caller: str, value: int) -> None:
        self._set_limit(caller, "auth_limit", value)

    def set_max(self, caller: str, value: int) -> None:
        self._set_limit(caller, "max", value)

    def _set_limit(self, caller: str, name: str, value: int) -> None:
        """
        Raises:
            InvalidParameter: новая тройка нарушает Min ≤ AuthLimit ≤ Max
        """
        self._access.require(caller, Role.ADMIN)
        self._state.limits = self._state.limits.updated(**{name: value})
        self._emit(LimitUpdated(emitter=self.address, limit=name, value=value))
        logger.info("%s: %s limit set to %s", self.address, name, value)

    def set_auth(self, caller: str, user: str, authorized: bool) -> None:
        """Установить флаг авторизации пользователя."""
        self.set_auth_batch(caller, [user], [authorized])

    def set_auth_batch(self, caller: str, users: Sequence[str], flags: Sequence[bool]) -> None:
        """
        Установить флаги авторизации попарно: users[i] ← flags[i].

        Raises:
            InvalidParameter: длины списков не совпадают или null-адрес
        """
        self._access.require(caller, Role.ADMIN)
        if len(users) != len(flags):
            raise InvalidParameter(f"{len(users)} users but {len(flags)} auth flags")
        if any(is_null(user) for user in users):
            raise InvalidParameter("cannot authorize the null address")
        for user, authorized in zip(users, flags):
            if authorized:
                self._state.authorized.add(user)
            else:
                self._state.authorized.discard(user)
            self._emit(AuthUpdated(emitter=self.address, user=user, authorized=bool(authorized)))
        logger.info("%s: auth flags updated for %s user(s)", self.address, len(users))

    def set_treasury(self, caller: str, treasury: str) -> None:
        self._access.require(caller, Role.ADMIN)
        if is_null(treasury):
            raise InvalidParameter("treasury must not be null")
        self._state.treasury = treasury
        self._emit(TreasuryUpdated(emitter=self.address, treasury=treasury))
        logger.info("%s: treasury set to %s", self.address, treasury)

    def set_default_ref_rates(self, caller: str, first_rate: int, second_rate: int) -> None:
        """Ставки по умолчанию (каждая ≤ 1000 per-mille)."""
        self._access.require(caller, Role.ADMIN)
        self._state.default_rates = self._rates(first_rate, second_rate)
        self._emit(DefaultRatesUpdated(emitter=self.address, first_rate=first_rate, second_rate=second_rate))
        logger.info("%s: default referral rates set to %s/%s", self.address, first_rate, second_rate)

    # =========================================================================
    # Referrals
    # =========================================================================

    def setup_referrals(
        self,
        caller: str,
        referrers: Sequence[str],
        first_rates: Sequence[int],
        second_rates: Sequence[int],
    ) -> None:
        """
        Зарегистрировать индивидуальные ставки рефереров.

        Новые записи создаются активными; у существующих сохраняется флаг enabled.

        Raises:
            InvalidState: кампания закрыта
            InvalidParameter: длины списков не совпадают, null-адрес или ставка > 1000
        """
        self._access.require(caller, Role.ADMIN, Role.OPERATOR)
        if self._state.campaign == CampaignState.CLOSED:
            raise InvalidState("cannot set up referrals after the campaign is closed")
        if not len(referrers) == len(first_rates) == len(second_rates):
            raise InvalidParameter("referrers and rate lists must have equal length")
        if any(is_null(referrer) for referrer in referrers):
            raise InvalidParameter("referrer must not be null")
        rates = [self._rates(first, second) for first, second in zip(first_rates, second_rates)]

        for referrer, referrer_rates in zip(referrers, rates):
            existing = self._state.referrals.get(referrer)
            self._state.referrals[referrer] = ReferralRecord(
                referrer=referrer,
                enabled=existing.enabled if existing is not None else True,
                custom=True,
                rates=referrer_rates,
            )
            self._emit(
                ReferralSetup(
                    emitter=self.address,
                    referrer=referrer,
                    first_rate=referrer_rates.first_rate,
                    second_rate=referrer_rates.second_rate,
                )
            )
        logger.info("%s: custom rates set up for %s referrer(s)", self.address, len(referrers))

    def enable_referral(self, caller: str, referrer: str) -> None:
        self._set_referral_enabled(caller, referrer, True)

    def disable_referral(self, caller: str, referrer: str) -> None:
        self._set_referral_enabled(caller, referrer, False)

    def _set_referral_enabled(self, caller: str, referrer: str, enabled: bool) -> None:
        self._access.require(caller, Role.ADMIN)
        record = self._state.referrals.get(referrer)
        if record is None:
            raise InvalidParameter(f"referrer {referrer} is not registered")
        self._state.referrals[referrer] = record.model_copy(update={"enabled": enabled})
        event_cls = ReferralEnabled if enabled else ReferralDisabled
        self._emit(event_cls(emitter=self.address, referrer=referrer))
        logger.info("%s: referrer %s %s", self.address, referrer, "enabled" if enabled else "disabled")

    def claim_ref(self, caller: str, assets: Iterable[FungibleAsset]) -> dict[str, int]:
        """
        Вывести начисленные реферальные балансы caller по списку активов.

        Каждый актив выплачивается отдельной единицей: баланс обнуляется до
        перевода, при сбое перевода восстанавливается только баланс этого актива.
        Уже выплаченные активы остаются выплаченными. Активы с нулевым балансом
        пропускаются.

        Returns:
            {asset_address: выплаченная сумма} по ненулевым балансам

        Raises:
            Unauthorized: caller не зарегистрирован или отключён
            ReentrantCall: повторный вход во время выполнения
            TransferFailed: custody ledger не покрывает баланс или перевод не выполнен
        """
        record = self._state.referrals.get(caller)
        if record is None or not record.enabled:
            raise Unauthorized(f"{caller} is not an enabled referrer")

        claimed: dict[str, int] = {}
        with self._non_reentrant():
            pending: dict[str, tuple[FungibleAsset, int]] = {}
            for asset in assets:
                amount = self._state.ref_balances.get((asset.address, caller), 0)
                if amount and asset.address not in pending:
                    pending[asset.address] = (asset, amount)
            for asset, amount in pending.values():
                require_balance(asset, self.address, amount)

            for asset, amount in pending.values():
                with self._atomic():
                    self._write(self._state.ref_balances, (asset.address, caller), 0)
                    self._emit(
                        ReferralClaimed(emitter=self.address, referrer=caller, asset=asset.address, amount=amount)
                    )
                    safe_transfer(asset, self.address, caller, amount)
                claimed[asset.address] = amount

        for asset_address, amount in claimed.items():
            logger.info("%s: referrer %s claimed %s of %s", self.address, caller, amount, asset_address)
        return claimed

    # =========================================================================
    # Settlement
    # =========================================================================

    def commit(
        self,
        caller: str,
        user: str,
        asset: str,
        funding: int,
        sold_units: int,
        referrer: str | None = None,
        first_tier_fee: int = 0,
        second_tier_fee: int = 0,
        settlement: Callable[[], None] | None = None,
    ) -> LedgerCommit:
        """
        Записать допущенную покупку (единственный writer балансов).

        Args:
            caller: канал с ролью OPERATOR
            user: пользователь, получающий аллокацию
            asset: адрес актива платежа (bucket first_tier_fee)
            funding: нормализованная сумма (18 decimals)
            sold_units: проданные sale-единицы
            referrer: резолвнутый реферер или None
            first_tier_fee: комиссия реферера в активе платежа
            second_tier_fee: комиссия реферера в sale-единицах
            settlement: переводы канала, выполняются после эффектов ledger

        Returns:
            Запись LedgerCommit

        Raises:
            Unauthorized: caller не OPERATOR
            InvalidState: текущий раунд не открыт
            CapacityExceeded: sold_units превышают остаток раунда
        """
        self._access.require(caller, Role.OPERATOR)
        if is_null(user):
            raise InvalidParameter("user must not be null")
        if min(funding, sold_units, first_tier_fee, second_tier_fee) < 0:
            raise InvalidParameter("commit amounts must be non-negative")
        current = self.current_round()
        if current is None or current.state != RoundState.OPENED:
            raise InvalidState("no round is currently open")
        if sold_units > current.remaining:
            raise CapacityExceeded(
                f"round {current.index}: {sold_units} units requested, {current.remaining} remaining"
            )
        referrer = None if is_null(referrer) else referrer

        with self._non_reentrant(), self._atomic():
            state = self._state
            self._write(state.funding, user, state.funding.get(user, 0) + funding)
            self._assign(state, "total_sold", state.total_sold + sold_units)
            self._write(state.rounds, current.index, current.with_sold(sold_units))
            balance_key = (current.index, user)
            self._write(state.balances, balance_key, state.balances.get(balance_key, 0) + sold_units)

            if referrer is not None:
                self._accrue_referral(user, referrer, asset, first_tier_fee, second_tier_fee)

            event = self._emit(
                LedgerCommit(
                    emitter=self.address,
                    operator=caller,
                    user=user,
                    asset=asset,
                    funding=funding,
                    sold_units=sold_units,
                    round_index=current.index,
                    referrer=referrer,
                    first_tier_fee=first_tier_fee if referrer else 0,
                    second_tier_fee=second_tier_fee if referrer else 0,
                )
            )
            logger.debug(
                "%s: commit user=%s funding=%s units=%s round=%s",
                self.address,
                user,
                funding,
                sold_units,
                current.index,
            )

            if settlement is not None:
                self._deposit = (caller, asset, first_tier_fee if referrer else 0)
                try:
                    settlement()
                finally:
                    self._deposit = None
        return event

    def return_deposit(self, caller: str, asset: FungibleAsset, amount: int) -> None:
        """
        Вернуть каналу комиссию, внесённую в custody в ходе текущего settlement.

        Доступно только каналу, выполняющему commit, пока settlement не завершён,
        и не более first_tier_fee этого commit.

        Raises:
            Unauthorized: caller не OPERATOR
            InvalidState: нет незавершённого settlement этого канала по asset
            InvalidParameter: amount больше внесённой комиссии
            TransferFailed: перевод не выполнен
        """
        self._access.require(caller, Role.OPERATOR)
        if self._deposit is None or self._deposit[:2] != (caller, asset.address):
            raise InvalidState(f"no settlement of {asset.address} in progress for {caller}")
        remaining = self._deposit[2]
        if not 0 <= amount <= remaining:
            raise InvalidParameter(f"cannot return {amount}, settlement deposited {remaining}")
        safe_transfer(asset, self.address, caller, amount)
        self._deposit = (caller, asset.address, remaining - amount)
        logger.warning("%s: returned %s %s to %s after failed settlement", self.address, amount, asset.address, caller)

    def _accrue_referral(self, user: str, referrer: str, asset: str, first_fee: int, second_fee: int) -> None:
        state = self._state
        if referrer not in state.referrals:
            rates = state.default_rates
            self._write(state.referrals, referrer, ReferralRecord(referrer=referrer, rates=rates))
            self._emit(
                ReferralRegistered(
                    emitter=self.address,
                    referrer=referrer,
                    first_rate=rates.first_rate,
                    second_rate=rates.second_rate,
                )
            )

        for bucket, fee in ((asset, first_fee), (self.config.sale_asset, second_fee)):
            if fee:
                key = (bucket, referrer)
                self._write(state.ref_balances, key, state.ref_balances.get(key, 0) + fee)

        if user not in state.bindings:
            self._write(state.bindings, user, referrer)
            self._emit(ReferrerBound(emitter=self.address, user=user, referrer=referrer))

    # =========================================================================
    # Recovery
    # =========================================================================

    def _before_recover(self, asset: FungibleAsset, amount: int) -> None:
        liability = self.referral_liability_of(asset.address)
        left = asset.balance_of(self.address) - amount
        if liability and left < liability:
            logger.warning(
                "%s: recovery of %s %s leaves %s against %s owed to referrers",
                self.address,
                amount,
                asset.address,
                left,
                liability,
            )

    # =========================================================================
    # Views
    # =========================================================================

    def snapshot(self) -> LedgerState:
        """Независимая копия текущего состояния"""
        return copy.deepcopy(self._state)

    @property
    def campaign_state(self) -> CampaignState:
        return self._state.campaign

    @property
    def is_active(self) -> bool:
        """Кампания открыта"""
        return self._state.campaign == CampaignState.OPENED

    @property
    def is_inactive(self) -> bool:
        """Кампания ещё не открыта или уже закрыта"""
        return not self.is_active

    @property
    def sale_decimals(self) -> int:
        return self.config.sale_decimals

    @property
    def treasury(self) -> str:
        return self._state.treasury

    @property
    def limits(self) -> Limits:
        return self._state.limits

    @property
    def total_sold(self) -> int:
        return self._state.total_sold

    @property
    def rounds_count(self) -> int:
        return len(self._state.rounds)

    def get_round(self, index: int) -> Round:
        return self._round(index)

    def current_round(self) -> Round | None:
        """Последний открытый раунд (может быть уже закрыт)"""
        if self._state.current_round is None:
            return None
        return self._state.rounds[self._state.current_round]

    def get_price(self, tier: Tier) -> int:
        """Цена тира текущего раунда; 0 если раунд не открыт"""
        current = self.current_round()
        if current is None or current.state != RoundState.OPENED:
            return 0
        return current.price_for(tier)

    def is_auth(self, user: str | None) -> bool:
        return user in self._state.authorized

    def funding_of(self, user: str | None) -> int:
        return self._state.funding.get(user, 0)

    def balance_of(self, round_index: int, user: str) -> int:
        return self._state.balances.get((round_index, user), 0)

    def limit_of(self, user: str) -> int:
        """Headroom пользователя под его cap (AuthLimit или Max)"""
        cap = self._state.limits.cap_for(self.is_auth(user))
        return headroom(cap, self.funding_of(user))

    def max_limit_of(self, user: str) -> int:
        """Headroom пользователя под Max (для buy_for)"""
        return headroom(self._state.limits.max, self.funding_of(user))

    def get_ref_rates(self) -> ReferralRates:
        """Текущие ставки по умолчанию"""
        return self._state.default_rates

    def get_referral(self, referrer: str) -> ReferralRecord | None:
        return self._state.referrals.get(referrer)

    def referrer_of(self, user: str) -> str | None:
        """Привязанный реферер (без учёта enabled)"""
        return self._state.bindings.get(user)

    def get_referrer(self, user: str | None, supplied: str | None) -> str | None:
        """
        Реферер, которому будет начислена комиссия за покупку user.

        - Привязка существует: привязанный реферер, если он активен, иначе None
          (перепривязка невозможна)
        - supplied null или совпадает с user: None
        - supplied не зарегистрирован: supplied (регистрируется в commit)
        - supplied зарегистрирован: supplied, если активен, иначе None
        """
        bound = self._state.bindings.get(user) if user is not None else None
        if bound is not None:
            return bound if self._state.referrals[bound].enabled else None
        if is_null(supplied) or supplied == user:
            return None
        record = self._state.referrals.get(supplied)
        if record is None or record.enabled:
            return supplied
        return None

    def get_rates(self, referrer: str) -> ReferralRates:
        """
        Ставки реферера.

        Custom-запись: поэлементный максимум (custom, default).
        Иначе: текущие ставки по умолчанию.
        """
        record = self._state.referrals.get(referrer)
        defaults = self._state.default_rates
        if record is not None and record.custom:
            return record.rates.merged_with(defaults)
        return defaults

    def ref_balance_of(self, asset: str, referrer: str) -> int:
        return self._state.ref_balances.get((asset, referrer), 0)

    def referral_liability_of(self, asset: str) -> int:
        """Сумма невыплаченных реферальных балансов в активе"""
        return sum(amount for (bucket, _), amount in self._state.ref_balances.items() if bucket == asset)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _round(self, index: int) -> Round:
        if not 0 <= index < len(self._state.rounds):
            raise InvalidParameter(f"round {index} is not defined")
        return self._state.rounds[index]

    @staticmethod
    def _rates(first_rate: int, second_rate: int) -> ReferralRates:
        try:
            return ReferralRates(first_rate=first_rate, second_rate=second_rate)
        except ValidationError as exc:
            raise InvalidParameter(str(exc)) from exc
