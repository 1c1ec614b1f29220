"""
Domain models and value objects.

Contains the sale entities: Round, Limits, ReferralRecord, PurchaseRequest
and the event records emitted on every state change.
"""

from tokensale.core.domain.events import (
    AuthUpdated,
    CampaignClosed,
    CampaignOpened,
    ChannelPaused,
    ChannelUnpaused,
    DefaultRatesUpdated,
    EventKind,
    LedgerCommit,
    LimitUpdated,
    Recovered,
    ReferralClaimed,
    ReferralDisabled,
    ReferralEnabled,
    ReferralRegistered,
    ReferralSetup,
    ReferrerBound,
    RoleGranted,
    RoleRevoked,
    RoundAdded,
    RoundClosed,
    RoundOpened,
    RoundPriceUpdated,
    RoundSupplyUpdated,
    SaleEvent,
    StalenessThresholdUpdated,
    TokensPurchased,
    TreasuryUpdated,
)
from tokensale.core.domain.limits import Limits
from tokensale.core.domain.purchase import PurchaseRequest
from tokensale.core.domain.referral import (
    DEFAULT_FIRST_RATE,
    DEFAULT_SECOND_RATE,
    PER_MILLE,
    ReferralRates,
    ReferralRecord,
)
from tokensale.core.domain.round import CampaignState, Round, RoundState, Tier

__all__ = [
    # Round model
    "Round",
    "RoundState",
    "CampaignState",
    "Tier",
    # Limits
    "Limits",
    # Referral
    "PER_MILLE",
    "DEFAULT_FIRST_RATE",
    "DEFAULT_SECOND_RATE",
    "ReferralRates",
    "ReferralRecord",
    # Purchase
    "PurchaseRequest",
    # Events
    "EventKind",
    "SaleEvent",
    "CampaignOpened",
    "CampaignClosed",
    "RoundAdded",
    "RoundPriceUpdated",
    "RoundSupplyUpdated",
    "RoundOpened",
    "RoundClosed",
    "LimitUpdated",
    "AuthUpdated",
    "TreasuryUpdated",
    "DefaultRatesUpdated",
    "ReferralSetup",
    "ReferralRegistered",
    "ReferralEnabled",
    "ReferralDisabled",
    "ReferrerBound",
    "ReferralClaimed",
    "LedgerCommit",
    "TokensPurchased",
    "RoleGranted",
    "RoleRevoked",
    "ChannelPaused",
    "ChannelUnpaused",
    "StalenessThresholdUpdated",
    "Recovered",
]
