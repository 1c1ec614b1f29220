"""
Events — записи истории изменений состояния

Каждое изменение состояния ledger или канала порождает immutable запись.
Записей ledger достаточно для восстановления его состояния (см. ledger.replay).

Сериализация: event.model_dump(mode="json") → dict, совместимый с JSON Schema
контрактами из tokensale/core/contracts/schema.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from .round import Tier


# =============================================================================
# ENUMS
# =============================================================================


class EventKind(str, Enum):
    """Тип записи истории"""

    # Жизненный цикл кампании и раундов
    CAMPAIGN_OPENED = "campaign_opened"
    CAMPAIGN_CLOSED = "campaign_closed"
    ROUND_ADDED = "round_added"
    ROUND_PRICE_UPDATED = "round_price_updated"
    ROUND_SUPPLY_UPDATED = "round_supply_updated"
    ROUND_OPENED = "round_opened"
    ROUND_CLOSED = "round_closed"
    # Конфигурация допуска
    LIMIT_UPDATED = "limit_updated"
    AUTH_UPDATED = "auth_updated"
    TREASURY_UPDATED = "treasury_updated"
    DEFAULT_RATES_UPDATED = "default_rates_updated"
    # Реферальная программа
    REFERRAL_SETUP = "referral_setup"
    REFERRAL_REGISTERED = "referral_registered"
    REFERRAL_ENABLED = "referral_enabled"
    REFERRAL_DISABLED = "referral_disabled"
    REFERRER_BOUND = "referrer_bound"
    REFERRAL_CLAIMED = "referral_claimed"
    # Settlement
    LEDGER_COMMIT = "ledger_commit"
    TOKENS_PURCHASED = "tokens_purchased"
    # Администрирование
    ROLE_GRANTED = "role_granted"
    ROLE_REVOKED = "role_revoked"
    PAUSED = "paused"
    UNPAUSED = "unpaused"
    STALENESS_THRESHOLD_UPDATED = "staleness_threshold_updated"
    RECOVERED = "recovered"


# =============================================================================
# BASE
# =============================================================================


class SaleEvent(BaseModel):
    """Общий конверт записи: тип и адрес компонента-эмиттера."""

    kind: EventKind
    emitter: str = Field(..., min_length=1, description="Адрес компонента")

    model_config = {"frozen": True}


# =============================================================================
# LIFECYCLE
# =============================================================================


class CampaignOpened(SaleEvent):
    kind: Literal[EventKind.CAMPAIGN_OPENED] = EventKind.CAMPAIGN_OPENED


class CampaignClosed(SaleEvent):
    kind: Literal[EventKind.CAMPAIGN_CLOSED] = EventKind.CAMPAIGN_CLOSED


class RoundAdded(SaleEvent):
    kind: Literal[EventKind.ROUND_ADDED] = EventKind.ROUND_ADDED
    index: int = Field(..., ge=0)
    short_price: int = Field(..., gt=0)
    long_price: int = Field(..., gt=0)
    supply: int = Field(..., gt=0)


class RoundPriceUpdated(SaleEvent):
    kind: Literal[EventKind.ROUND_PRICE_UPDATED] = EventKind.ROUND_PRICE_UPDATED
    index: int = Field(..., ge=0)
    short_price: int = Field(..., gt=0)
    long_price: int = Field(..., gt=0)


class RoundSupplyUpdated(SaleEvent):
    kind: Literal[EventKind.ROUND_SUPPLY_UPDATED] = EventKind.ROUND_SUPPLY_UPDATED
    index: int = Field(..., ge=0)
    supply: int = Field(..., gt=0)


class RoundOpened(SaleEvent):
    kind: Literal[EventKind.ROUND_OPENED] = EventKind.ROUND_OPENED
    index: int = Field(..., ge=0)


class RoundClosed(SaleEvent):
    kind: Literal[EventKind.ROUND_CLOSED] = EventKind.ROUND_CLOSED
    index: int = Field(..., ge=0)


# =============================================================================
# ADMISSION CONFIG
# =============================================================================


class LimitUpdated(SaleEvent):
    kind: Literal[EventKind.LIMIT_UPDATED] = EventKind.LIMIT_UPDATED
    limit: Literal["min", "auth_limit", "max"]
    value: int = Field(..., ge=0)


class AuthUpdated(SaleEvent):
    kind: Literal[EventKind.AUTH_UPDATED] = EventKind.AUTH_UPDATED
    user: str
    authorized: bool


class TreasuryUpdated(SaleEvent):
    kind: Literal[EventKind.TREASURY_UPDATED] = EventKind.TREASURY_UPDATED
    treasury: str


class DefaultRatesUpdated(SaleEvent):
    kind: Literal[EventKind.DEFAULT_RATES_UPDATED] = EventKind.DEFAULT_RATES_UPDATED
    first_rate: int = Field(..., ge=0)
    second_rate: int = Field(..., ge=0)


# =============================================================================
# REFERRALS
# =============================================================================


class ReferralSetup(SaleEvent):
    """Индивидуальные ставки (setup_referrals)"""

    kind: Literal[EventKind.REFERRAL_SETUP] = EventKind.REFERRAL_SETUP
    referrer: str
    first_rate: int = Field(..., ge=0)
    second_rate: int = Field(..., ge=0)


class ReferralRegistered(SaleEvent):
    """Авто-регистрация реферера при первой покупке"""

    kind: Literal[EventKind.REFERRAL_REGISTERED] = EventKind.REFERRAL_REGISTERED
    referrer: str
    first_rate: int = Field(..., ge=0)
    second_rate: int = Field(..., ge=0)


class ReferralEnabled(SaleEvent):
    kind: Literal[EventKind.REFERRAL_ENABLED] = EventKind.REFERRAL_ENABLED
    referrer: str


class ReferralDisabled(SaleEvent):
    kind: Literal[EventKind.REFERRAL_DISABLED] = EventKind.REFERRAL_DISABLED
    referrer: str


class ReferrerBound(SaleEvent):
    kind: Literal[EventKind.REFERRER_BOUND] = EventKind.REFERRER_BOUND
    user: str
    referrer: str


class ReferralClaimed(SaleEvent):
    kind: Literal[EventKind.REFERRAL_CLAIMED] = EventKind.REFERRAL_CLAIMED
    referrer: str
    asset: str
    amount: int = Field(..., gt=0)


# =============================================================================
# SETTLEMENT
# =============================================================================


class LedgerCommit(SaleEvent):
    """Эффекты одного settlement в ledger"""

    kind: Literal[EventKind.LEDGER_COMMIT] = EventKind.LEDGER_COMMIT
    operator: str
    user: str
    asset: str
    funding: int = Field(..., ge=0, description="Нормализованная сумма (18 decimals)")
    sold_units: int = Field(..., ge=0)
    round_index: int = Field(..., ge=0)
    referrer: str | None = None
    first_tier_fee: int = Field(default=0, ge=0)
    second_tier_fee: int = Field(default=0, ge=0)


class TokensPurchased(SaleEvent):
    """Запись покупки канала"""

    kind: Literal[EventKind.TOKENS_PURCHASED] = EventKind.TOKENS_PURCHASED
    payer: str
    asset: str | None = Field(None, description="Адрес актива, None для нативной монеты")
    referrer: str | None = None
    amount: int = Field(..., gt=0)
    tier: Tier
    sold_units: int = Field(..., ge=0)
    round_index: int = Field(..., ge=0)


# =============================================================================
# ADMINISTRATION
# =============================================================================


class RoleGranted(SaleEvent):
    kind: Literal[EventKind.ROLE_GRANTED] = EventKind.ROLE_GRANTED
    role: str
    account: str
    sender: str


class RoleRevoked(SaleEvent):
    kind: Literal[EventKind.ROLE_REVOKED] = EventKind.ROLE_REVOKED
    role: str
    account: str
    sender: str


class ChannelPaused(SaleEvent):
    kind: Literal[EventKind.PAUSED] = EventKind.PAUSED
    account: str


class ChannelUnpaused(SaleEvent):
    kind: Literal[EventKind.UNPAUSED] = EventKind.UNPAUSED
    account: str


class StalenessThresholdUpdated(SaleEvent):
    kind: Literal[EventKind.STALENESS_THRESHOLD_UPDATED] = EventKind.STALENESS_THRESHOLD_UPDATED
    seconds: int = Field(..., gt=0)


class Recovered(SaleEvent):
    kind: Literal[EventKind.RECOVERED] = EventKind.RECOVERED
    asset: str
    to: str
    amount: int = Field(..., ge=0)
