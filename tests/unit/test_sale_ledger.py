"""
Unit тесты для SaleLedger

Coverage:
- Lifecycle кампании и раундов
- Конфигурация допуска (лимиты, авторизация, treasury, ставки)
- Реферальный реестр: setup / enable / disable / резолвинг / ставки
- commit: эффекты, guards, атомарность
- claim_ref и recovery
- Views
"""

import logging

import pytest

from tokensale.core.access import Role
from tokensale.core.assets import NATIVE_ASSET, SALE_ASSET, ZERO_ADDRESS
from tokensale.core.domain import (
    CampaignState,
    EventKind,
    ReferralRates,
    RoundState,
    Tier,
)
from tokensale.core.errors import (
    CapacityExceeded,
    InvalidParameter,
    InvalidState,
    ReentrantCall,
    TransferFailed,
    Unauthorized,
)
from tokensale.ledger import LedgerConfig, SaleLedger
from tests.fakes import ADMIN, ALICE, BOB, LEDGER, REFERRER, TREASURY, USDC, WAD, InMemoryAsset

OPERATOR = "0xoperator"
SHORT = 35 * WAD // 100
LONG = 30 * WAD // 100


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def native():
    return InMemoryAsset(NATIVE_ASSET)


@pytest.fixture
def usdc():
    return InMemoryAsset(USDC, decimals=6)


@pytest.fixture
def ledger(native):
    """Ledger без кампании и раундов."""
    ledger = SaleLedger(LEDGER, ADMIN, TREASURY, native)
    ledger.grant_role(ADMIN, Role.OPERATOR, OPERATOR)
    return ledger


@pytest.fixture
def live_ledger(ledger):
    """Открытая кампания, раунд 0 открыт, лимиты Min=25 / AuthLimit=7500 / Max=100000."""
    ledger.set_max(ADMIN, 100_000 * WAD)
    ledger.set_auth_limit(ADMIN, 7_500 * WAD)
    ledger.set_min(ADMIN, 25 * WAD)
    ledger.open(ADMIN)
    ledger.add_round(ADMIN, SHORT, LONG, 10_000_000 * WAD)
    ledger.open_round(ADMIN, 0)
    return ledger


def _commit(ledger, user=ALICE, funding=25 * WAD, units=100 * WAD, referrer=None, first=0, second=0, **kwargs):
    return ledger.commit(OPERATOR, user, USDC, funding, units, referrer, first, second, **kwargs)


# =============================================================================
# CONSTRUCTION
# =============================================================================


def test_null_treasury_rejected(native):
    with pytest.raises(InvalidParameter):
        SaleLedger(LEDGER, ADMIN, ZERO_ADDRESS, native)


def test_default_rates_from_config(native):
    ledger = SaleLedger(LEDGER, ADMIN, TREASURY, native, LedgerConfig(default_first_rate=70, default_second_rate=30))

    assert ledger.get_ref_rates() == ReferralRates(first_rate=70, second_rate=30)


def test_default_rates_fifty_fifty(ledger):
    assert ledger.get_ref_rates() == ReferralRates(first_rate=50, second_rate=50)


# =============================================================================
# LIFECYCLE
# =============================================================================


class TestCampaignLifecycle:
    def test_open_close_once(self, ledger):
        assert ledger.is_inactive

        ledger.open(ADMIN)
        assert ledger.is_active
        with pytest.raises(InvalidState):
            ledger.open(ADMIN)

        ledger.close(ADMIN)
        assert ledger.campaign_state == CampaignState.CLOSED
        assert ledger.is_inactive
        with pytest.raises(InvalidState):
            ledger.close(ADMIN)

    def test_close_before_open_rejected(self, ledger):
        with pytest.raises(InvalidState):
            ledger.close(ADMIN)

    def test_lifecycle_requires_admin(self, ledger):
        with pytest.raises(Unauthorized):
            ledger.open(ALICE)
        with pytest.raises(Unauthorized):
            ledger.add_round(OPERATOR, SHORT, LONG, WAD)


class TestRounds:
    def test_add_round_returns_index(self, ledger):
        assert ledger.add_round(ADMIN, SHORT, LONG, WAD) == 0
        assert ledger.add_round(ADMIN, SHORT, LONG, WAD) == 1
        assert ledger.rounds_count == 2

    def test_add_round_before_open_allowed_after_close_rejected(self, ledger):
        ledger.add_round(ADMIN, SHORT, LONG, WAD)
        ledger.open(ADMIN)
        ledger.close(ADMIN)

        with pytest.raises(InvalidState):
            ledger.add_round(ADMIN, SHORT, LONG, WAD)

    @pytest.mark.parametrize("short,long,supply", [(0, LONG, WAD), (SHORT, LONG, 0)])
    def test_add_round_invalid_values(self, ledger, short, long, supply):
        with pytest.raises(InvalidParameter):
            ledger.add_round(ADMIN, short, long, supply)

    def test_open_round_requires_open_campaign(self, ledger):
        ledger.add_round(ADMIN, SHORT, LONG, WAD)

        with pytest.raises(InvalidState):
            ledger.open_round(ADMIN, 0)

    def test_open_undefined_round(self, ledger):
        ledger.open(ADMIN)

        with pytest.raises(InvalidParameter):
            ledger.open_round(ADMIN, 3)

    def test_open_round_closes_current(self, live_ledger):
        live_ledger.add_round(ADMIN, SHORT * 2, LONG * 2, WAD)

        live_ledger.open_round(ADMIN, 1)

        assert live_ledger.get_round(0).state == RoundState.CLOSED
        assert live_ledger.get_round(1).state == RoundState.OPENED
        assert live_ledger.current_round().index == 1
        assert live_ledger.get_price(Tier.SHORT) == SHORT * 2

    def test_started_round_cannot_reopen(self, live_ledger):
        with pytest.raises(InvalidState):
            live_ledger.open_round(ADMIN, 0)

    def test_close_round_only_current_open(self, live_ledger):
        live_ledger.add_round(ADMIN, SHORT, LONG, WAD)

        with pytest.raises(InvalidState):
            live_ledger.close_round(ADMIN, 1)

        live_ledger.close_round(ADMIN, 0)
        assert live_ledger.get_round(0).state == RoundState.CLOSED
        assert live_ledger.get_price(Tier.LONG) == 0

        with pytest.raises(InvalidState):
            live_ledger.close_round(ADMIN, 0)

    def test_update_price_only_before_start(self, live_ledger):
        live_ledger.add_round(ADMIN, SHORT, LONG, WAD)

        live_ledger.update_round_price(ADMIN, 1, 2 * WAD, WAD)
        assert live_ledger.get_round(1).short_price == 2 * WAD

        with pytest.raises(InvalidState):
            live_ledger.update_round_price(ADMIN, 0, 2 * WAD, WAD)

    def test_update_supply(self, live_ledger):
        _commit(live_ledger, units=500 * WAD)

        live_ledger.update_round_supply(ADMIN, 0, 600 * WAD)
        assert live_ledger.get_round(0).supply == 600 * WAD

        with pytest.raises(InvalidParameter):
            live_ledger.update_round_supply(ADMIN, 0, 499 * WAD)

    def test_update_supply_of_closed_round_rejected(self, live_ledger):
        live_ledger.close_round(ADMIN, 0)

        with pytest.raises(InvalidState):
            live_ledger.update_round_supply(ADMIN, 0, WAD)

    def test_get_price_zero_before_round_open(self, ledger):
        ledger.open(ADMIN)
        ledger.add_round(ADMIN, SHORT, LONG, WAD)

        assert ledger.get_price(Tier.SHORT) == 0


# =============================================================================
# ADMISSION CONFIG
# =============================================================================


class TestAdmissionConfig:
    def test_limits_violating_order_rejected_state_unchanged(self, live_ledger):
        before = live_ledger.limits

        with pytest.raises(InvalidParameter):
            live_ledger.set_min(ADMIN, 8_000 * WAD)
        with pytest.raises(InvalidParameter):
            live_ledger.set_max(ADMIN, 7_000 * WAD)

        assert live_ledger.limits == before

    def test_limit_update_emits_record(self, live_ledger):
        live_ledger.set_auth_limit(ADMIN, 5_000 * WAD)

        event = live_ledger.events[-1]
        assert event.kind == EventKind.LIMIT_UPDATED
        assert event.limit == "auth_limit"

    def test_auth_single_and_batch(self, ledger):
        ledger.set_auth(ADMIN, ALICE, True)
        ledger.set_auth_batch(ADMIN, [BOB, "0xcarol"], [True, True])
        ledger.set_auth_batch(ADMIN, [ALICE], [False])

        assert not ledger.is_auth(ALICE)
        assert ledger.is_auth(BOB)
        assert ledger.is_auth("0xcarol")

    def test_auth_batch_mixed_flags(self, ledger):
        ledger.set_auth_batch(ADMIN, [ALICE, BOB], [True, True])

        ledger.set_auth_batch(ADMIN, [ALICE, BOB], [False, True])

        assert not ledger.is_auth(ALICE)
        assert ledger.is_auth(BOB)
        updates = [e for e in ledger.events if e.kind == EventKind.AUTH_UPDATED][-2:]
        assert [(e.user, e.authorized) for e in updates] == [(ALICE, False), (BOB, True)]

    def test_auth_batch_length_mismatch_rejected(self, ledger):
        events_before = len(ledger.events)

        with pytest.raises(InvalidParameter):
            ledger.set_auth_batch(ADMIN, [ALICE, BOB], [True])

        assert not ledger.is_auth(ALICE)
        assert len(ledger.events) == events_before

    def test_auth_batch_with_null_rejected(self, ledger):
        with pytest.raises(InvalidParameter):
            ledger.set_auth_batch(ADMIN, [BOB, ZERO_ADDRESS], [True, True])

        assert not ledger.is_auth(BOB)

    def test_treasury(self, ledger):
        ledger.set_treasury(ADMIN, "0xnew-treasury")
        assert ledger.treasury == "0xnew-treasury"

        with pytest.raises(InvalidParameter):
            ledger.set_treasury(ADMIN, None)

    def test_default_rates_bounds(self, ledger):
        ledger.set_default_ref_rates(ADMIN, 1_000, 0)
        assert ledger.get_ref_rates() == ReferralRates(first_rate=1_000, second_rate=0)

        with pytest.raises(InvalidParameter):
            ledger.set_default_ref_rates(ADMIN, 1_001, 0)


# =============================================================================
# REFERRALS
# =============================================================================


class TestReferralRegistry:
    def test_setup_creates_custom_enabled_records(self, ledger):
        ledger.setup_referrals(ADMIN, [REFERRER, BOB], [100, 70], [50, 20])

        record = ledger.get_referral(REFERRER)
        assert record.enabled and record.custom
        assert record.rates == ReferralRates(first_rate=100, second_rate=50)

    def test_setup_allowed_for_operator(self, ledger):
        ledger.setup_referrals(OPERATOR, [REFERRER], [100], [50])

        assert ledger.get_referral(REFERRER) is not None

    def test_setup_rejects_length_mismatch_and_bad_rates(self, ledger):
        with pytest.raises(InvalidParameter):
            ledger.setup_referrals(ADMIN, [REFERRER, BOB], [100], [50, 50])
        with pytest.raises(InvalidParameter):
            ledger.setup_referrals(ADMIN, [REFERRER], [1_001], [50])

        assert ledger.get_referral(REFERRER) is None

    def test_setup_after_close_rejected(self, ledger):
        """Scenario E: закрытие кампании блокирует setup_referrals"""
        ledger.setup_referrals(ADMIN, [REFERRER], [100], [50])
        ledger.open(ADMIN)
        ledger.close(ADMIN)

        with pytest.raises(InvalidState):
            ledger.setup_referrals(ADMIN, [BOB, REFERRER], [10, 10], [10, 10])

        assert ledger.get_referral(BOB) is None
        assert ledger.get_referral(REFERRER).rates == ReferralRates(first_rate=100, second_rate=50)

    def test_setup_keeps_disabled_flag(self, ledger):
        ledger.setup_referrals(ADMIN, [REFERRER], [100], [50])
        ledger.disable_referral(ADMIN, REFERRER)

        ledger.setup_referrals(ADMIN, [REFERRER], [120], [60])

        assert ledger.get_referral(REFERRER).enabled is False

    def test_enable_disable_unknown_rejected(self, ledger):
        with pytest.raises(InvalidParameter):
            ledger.disable_referral(ADMIN, REFERRER)
        with pytest.raises(InvalidParameter):
            ledger.enable_referral(ADMIN, REFERRER)

    def test_custom_rates_merge_with_defaults(self, ledger):
        """custom (70,50) при дефолтах (100,50) → (100,50)"""
        ledger.setup_referrals(ADMIN, [REFERRER], [70], [50])
        ledger.set_default_ref_rates(ADMIN, 100, 50)

        assert ledger.get_rates(REFERRER) == ReferralRates(first_rate=100, second_rate=50)

    def test_custom_rate_not_undercut_by_lower_default(self, ledger):
        ledger.setup_referrals(ADMIN, [REFERRER], [100], [50])
        ledger.set_default_ref_rates(ADMIN, 10, 10)

        assert ledger.get_rates(REFERRER) == ReferralRates(first_rate=100, second_rate=50)

    def test_unregistered_referrer_gets_defaults(self, ledger):
        ledger.set_default_ref_rates(ADMIN, 80, 40)

        assert ledger.get_rates(REFERRER) == ReferralRates(first_rate=80, second_rate=40)


class TestReferralResolution:
    def test_null_or_self_supplied(self, ledger):
        assert ledger.get_referrer(ALICE, None) is None
        assert ledger.get_referrer(ALICE, ZERO_ADDRESS) is None
        assert ledger.get_referrer(ALICE, ALICE) is None

    def test_unknown_supplied_resolves_to_itself(self, ledger):
        assert ledger.get_referrer(ALICE, REFERRER) == REFERRER

    def test_disabled_supplied_resolves_to_none(self, ledger):
        ledger.setup_referrals(ADMIN, [REFERRER], [100], [50])
        ledger.disable_referral(ADMIN, REFERRER)

        assert ledger.get_referrer(ALICE, REFERRER) is None

    def test_binding_is_sticky(self, live_ledger):
        """Первая привязка R сохраняется при покупке с S"""
        _commit(live_ledger, referrer=REFERRER)

        assert live_ledger.referrer_of(ALICE) == REFERRER
        assert live_ledger.get_referrer(ALICE, BOB) == REFERRER

    def test_disabled_binding_not_replaced(self, live_ledger):
        _commit(live_ledger, referrer=REFERRER)
        live_ledger.disable_referral(ADMIN, REFERRER)

        assert live_ledger.get_referrer(ALICE, BOB) is None

        live_ledger.enable_referral(ADMIN, REFERRER)
        assert live_ledger.get_referrer(ALICE, BOB) == REFERRER


# =============================================================================
# COMMIT
# =============================================================================


class TestCommit:
    def test_effects(self, live_ledger):
        event = _commit(live_ledger, funding=25 * WAD, units=80 * WAD)

        assert live_ledger.funding_of(ALICE) == 25 * WAD
        assert live_ledger.total_sold == 80 * WAD
        assert live_ledger.get_round(0).sold == 80 * WAD
        assert live_ledger.balance_of(0, ALICE) == 80 * WAD
        assert event.kind == EventKind.LEDGER_COMMIT
        assert event.round_index == 0

    def test_referral_accrual_and_registration(self, live_ledger):
        _commit(live_ledger, referrer=REFERRER, first=1_250_000, second=4 * WAD)

        record = live_ledger.get_referral(REFERRER)
        assert record.enabled and not record.custom
        assert live_ledger.ref_balance_of(USDC, REFERRER) == 1_250_000
        assert live_ledger.ref_balance_of(SALE_ASSET, REFERRER) == 4 * WAD
        assert live_ledger.referral_liability_of(USDC) == 1_250_000

        kinds = [event.kind for event in live_ledger.events[-3:]]
        assert kinds == [EventKind.REFERRAL_REGISTERED, EventKind.REFERRER_BOUND, EventKind.LEDGER_COMMIT]

    def test_requires_operator(self, live_ledger):
        with pytest.raises(Unauthorized):
            live_ledger.commit(ADMIN, ALICE, USDC, WAD, WAD)

    def test_requires_open_round(self, ledger):
        ledger.open(ADMIN)
        ledger.add_round(ADMIN, SHORT, LONG, WAD)

        with pytest.raises(InvalidState):
            _commit(ledger)

    def test_capacity_guard(self, live_ledger):
        live_ledger.update_round_supply(ADMIN, 0, 100 * WAD)

        with pytest.raises(CapacityExceeded):
            _commit(live_ledger, units=100 * WAD + 1)

    def test_settlement_failure_rolls_back(self, live_ledger):
        """Исключение в settlement откатывает все эффекты commit"""
        before = live_ledger.snapshot()
        events_before = len(live_ledger.events)

        def failing_settlement():
            raise TransferFailed("payer has no funds")

        with pytest.raises(TransferFailed):
            _commit(live_ledger, referrer=REFERRER, first=10, second=10, settlement=failing_settlement)

        assert live_ledger.snapshot() == before
        assert len(live_ledger.events) == events_before
        assert live_ledger.get_referral(REFERRER) is None

    def test_reentrant_commit_rejected(self, live_ledger):
        def reenter():
            _commit(live_ledger)

        with pytest.raises(ReentrantCall):
            _commit(live_ledger, settlement=reenter)

        assert live_ledger.funding_of(ALICE) == 0

    def test_funding_monotonic(self, live_ledger):
        _commit(live_ledger, funding=25 * WAD)
        _commit(live_ledger, funding=25 * WAD)

        assert live_ledger.funding_of(ALICE) == 50 * WAD
        assert live_ledger.limit_of(ALICE) == 7_450 * WAD
        assert live_ledger.max_limit_of(ALICE) == 99_950 * WAD


# =============================================================================
# CLAIM
# =============================================================================


class TestClaim:
    @pytest.fixture
    def accrued(self, live_ledger, usdc):
        _commit(live_ledger, referrer=REFERRER, first=1_250_000, second=WAD)
        usdc.mint(LEDGER, 1_250_000)
        return live_ledger

    def test_claim_transfers_and_zeroes(self, accrued, usdc):
        claimed = accrued.claim_ref(REFERRER, [usdc])

        assert claimed == {USDC: 1_250_000}
        assert usdc.balance_of(REFERRER) == 1_250_000
        assert accrued.ref_balance_of(USDC, REFERRER) == 0

    def test_second_claim_is_noop(self, accrued, usdc):
        accrued.claim_ref(REFERRER, [usdc])

        assert accrued.claim_ref(REFERRER, [usdc]) == {}
        assert usdc.balance_of(REFERRER) == 1_250_000

    def test_zero_balance_assets_skipped(self, accrued, usdc, native):
        claimed = accrued.claim_ref(REFERRER, [native, usdc])

        assert claimed == {USDC: 1_250_000}

    def test_unregistered_claim_rejected(self, accrued, usdc):
        with pytest.raises(Unauthorized):
            accrued.claim_ref(BOB, [usdc])

    def test_disabled_claim_rejected(self, accrued, usdc):
        accrued.disable_referral(ADMIN, REFERRER)

        with pytest.raises(Unauthorized):
            accrued.claim_ref(REFERRER, [usdc])
        assert accrued.ref_balance_of(USDC, REFERRER) == 1_250_000

    def test_failed_transfer_restores_balance(self, accrued, usdc):
        usdc.fail_transfers = True

        with pytest.raises(TransferFailed):
            accrued.claim_ref(REFERRER, [usdc])

        assert accrued.ref_balance_of(USDC, REFERRER) == 1_250_000

    def test_failed_asset_keeps_paid_asset_settled(self, accrued, usdc, native):
        """Сбой перевода второго актива не восстанавливает долг по уже выплаченному"""
        accrued.commit(OPERATOR, ALICE, NATIVE_ASSET, 25 * WAD, 100 * WAD, REFERRER, 5_000, 0)
        native.mint(LEDGER, 5_000)
        native.fail_transfers = True

        with pytest.raises(TransferFailed):
            accrued.claim_ref(REFERRER, [usdc, native])

        assert usdc.balance_of(REFERRER) == 1_250_000
        assert accrued.ref_balance_of(USDC, REFERRER) == 0
        assert accrued.ref_balance_of(NATIVE_ASSET, REFERRER) == 5_000
        claims = [e for e in accrued.events if e.kind == EventKind.REFERRAL_CLAIMED]
        assert [e.asset for e in claims] == [USDC]

        native.fail_transfers = False
        assert accrued.claim_ref(REFERRER, [usdc, native]) == {NATIVE_ASSET: 5_000}
        assert usdc.balance_of(REFERRER) == 1_250_000
        assert native.balance_of(REFERRER) == 5_000

    def test_underfunded_custody_pays_nothing(self, accrued, usdc, native):
        accrued.commit(OPERATOR, ALICE, NATIVE_ASSET, 25 * WAD, 100 * WAD, REFERRER, 5_000, 0)

        with pytest.raises(TransferFailed):
            accrued.claim_ref(REFERRER, [usdc, native])

        assert usdc.balance_of(REFERRER) == 0
        assert accrued.ref_balance_of(USDC, REFERRER) == 1_250_000
        assert accrued.ref_balance_of(NATIVE_ASSET, REFERRER) == 5_000

    def test_duplicate_asset_paid_once(self, accrued, usdc):
        assert accrued.claim_ref(REFERRER, [usdc, usdc]) == {USDC: 1_250_000}
        assert usdc.balance_of(REFERRER) == 1_250_000

    def test_reentrant_double_claim_blocked(self, accrued, usdc):
        """Повторный claim из hook перевода отклоняется, баланс не удваивается"""

        def hook(sender, to, amount):
            if to == REFERRER:
                accrued.claim_ref(REFERRER, [usdc])

        usdc.on_transfer = hook

        with pytest.raises(ReentrantCall):
            accrued.claim_ref(REFERRER, [usdc])

        usdc.on_transfer = None
        assert usdc.balance_of(REFERRER) == 0
        assert accrued.ref_balance_of(USDC, REFERRER) == 1_250_000


class TestReturnDeposit:
    def test_outside_settlement_rejected(self, live_ledger, usdc):
        usdc.mint(LEDGER, 100)

        with pytest.raises(InvalidState):
            live_ledger.return_deposit(OPERATOR, usdc, 100)

        assert usdc.balance_of(LEDGER) == 100

    def test_bounded_by_commit_fee(self, live_ledger, usdc):
        usdc.mint(LEDGER, 1_000)

        def settlement():
            with pytest.raises(InvalidParameter):
                live_ledger.return_deposit(OPERATOR, usdc, 101)
            live_ledger.return_deposit(OPERATOR, usdc, 100)
            with pytest.raises(InvalidParameter):
                live_ledger.return_deposit(OPERATOR, usdc, 1)

        _commit(live_ledger, referrer=REFERRER, first=100, settlement=settlement)

        assert usdc.balance_of(OPERATOR) == 100
        assert usdc.balance_of(LEDGER) == 900

    def test_other_asset_rejected(self, live_ledger, native):
        native.mint(LEDGER, 100)

        def settlement():
            live_ledger.return_deposit(OPERATOR, native, 100)

        with pytest.raises(InvalidState):
            _commit(live_ledger, referrer=REFERRER, first=100, settlement=settlement)

        assert native.balance_of(LEDGER) == 100
        assert live_ledger.funding_of(ALICE) == 0


# =============================================================================
# RECOVERY
# =============================================================================


class TestRecovery:
    def test_recover_asset(self, ledger, usdc):
        usdc.mint(LEDGER, 500)

        ledger.recover_asset(ADMIN, usdc, 200)

        assert usdc.balance_of(ADMIN) == 200
        assert ledger.events[-1].kind == EventKind.RECOVERED

    def test_recover_native_sweeps_all(self, ledger, native):
        native.mint(LEDGER, 3 * WAD)

        assert ledger.recover_native(ADMIN) == 3 * WAD
        assert native.balance_of(ADMIN) == 3 * WAD
        assert native.balance_of(LEDGER) == 0

    def test_recover_requires_admin(self, ledger, usdc):
        with pytest.raises(Unauthorized):
            ledger.recover_asset(ALICE, usdc, 0)

    def test_recover_below_liabilities_warns(self, live_ledger, usdc, caplog):
        _commit(live_ledger, referrer=REFERRER, first=1_000)
        usdc.mint(LEDGER, 1_000)

        with caplog.at_level(logging.WARNING, logger="tokensale.ledger.sale_ledger"):
            live_ledger.recover_asset(ADMIN, usdc, 600)

        assert usdc.balance_of(ADMIN) == 600
        assert "owed to referrers" in caplog.text

    def test_recover_over_balance_fails_atomically(self, ledger, usdc):
        usdc.mint(LEDGER, 10)
        events_before = len(ledger.events)

        with pytest.raises(TransferFailed):
            ledger.recover_asset(ADMIN, usdc, 11)

        assert len(ledger.events) == events_before
