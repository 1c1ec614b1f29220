"""
Unit тесты для NativeSaleChannel

Coverage:
- Конверсия по цене оракула (0.01 при 2500 USD = 25 funding)
- Scenario D: устаревший feed, граница threshold
- set_price_staleness_threshold
- buy_for, реферальная комиссия в нативной монете
"""

import logging

import pytest

from tokensale.core.assets import NATIVE_ASSET
from tokensale.core.domain import EventKind, Tier
from tokensale.core.errors import InvalidParameter, OracleError, OracleStale, TransferFailed, Unauthorized
from tests.fakes import ADMIN, ALICE, LEDGER, NATIVE_CHANNEL, ONRAMP, REFERRER, TREASURY, WAD, SaleDeployment

SHORT = 35 * WAD // 100
CENT = WAD // 100  # 0.01 нативной монеты


@pytest.fixture
def sale():
    deployment = SaleDeployment()
    deployment.native.mint(ALICE, WAD)
    return deployment


@pytest.fixture
def channel(sale):
    return sale.native_channel


def test_purchase_priced_by_oracle(sale, channel):
    event = channel.buy(ALICE, Tier.SHORT, value=CENT)

    assert event.asset is None
    assert event.amount == CENT
    assert event.sold_units == 25 * WAD * WAD // SHORT
    assert sale.ledger.funding_of(ALICE) == 25 * WAD
    assert sale.native.balance_of(TREASURY) == CENT
    assert channel.get_total() == CENT


def test_commit_records_native_sentinel(sale, channel):
    channel.buy(ALICE, Tier.LONG, value=CENT)

    commit = sale.ledger.events[-1]
    assert commit.kind == EventKind.LEDGER_COMMIT
    assert commit.asset == NATIVE_ASSET


class TestStaleness:
    def test_stale_feed_rejected(self, sale, channel, caplog):
        """Scenario D: updated_at = now − 3600 при threshold 3600"""
        sale.feed.updated_at = sale.clock.now - 3600
        before = sale.ledger.snapshot()

        with caplog.at_level(logging.WARNING, logger="tokensale.gatekeeper.admission"):
            with pytest.raises(OracleStale):
                channel.buy(ALICE, Tier.LONG, value=CENT)

        assert sale.ledger.snapshot() == before
        assert sale.native.balance_of(ALICE) == WAD
        assert "stale" in caplog.text

    def test_fresh_just_below_threshold(self, sale, channel):
        sale.feed.updated_at = sale.clock.now - 3599

        channel.buy(ALICE, Tier.LONG, value=CENT)

        assert sale.ledger.funding_of(ALICE) == 25 * WAD

    def test_clock_advance_makes_feed_stale(self, sale, channel):
        channel.buy(ALICE, Tier.LONG, value=CENT)
        sale.clock.advance(3600)

        with pytest.raises(OracleStale):
            channel.buy(ALICE, Tier.LONG, value=CENT)

    def test_stale_is_oracle_error(self):
        assert issubclass(OracleStale, OracleError)

    def test_zero_price_rejected(self, sale, channel):
        sale.feed.price = 0

        with pytest.raises(OracleError):
            channel.buy(ALICE, Tier.LONG, value=CENT)


class TestStalenessThreshold:
    def test_default_threshold(self, channel):
        assert channel.staleness_threshold == 3600

    def test_set_threshold(self, sale, channel):
        sale.feed.updated_at = sale.clock.now - 5000

        channel.set_price_staleness_threshold(ADMIN, 7200)
        channel.buy(ALICE, Tier.LONG, value=CENT)

        assert channel.staleness_threshold == 7200
        assert channel.events[-2].kind == EventKind.STALENESS_THRESHOLD_UPDATED

    def test_set_threshold_validation(self, channel):
        with pytest.raises(InvalidParameter):
            channel.set_price_staleness_threshold(ADMIN, 0)
        with pytest.raises(Unauthorized):
            channel.set_price_staleness_threshold(ALICE, 60)


def test_referral_fee_in_native(sale, channel):
    event = channel.buy(ALICE, Tier.LONG, REFERRER, value=CENT)

    fee = CENT * 50 // 1000
    assert event.referrer == REFERRER
    assert sale.ledger.ref_balance_of(NATIVE_ASSET, REFERRER) == fee
    assert sale.native.balance_of(LEDGER) == fee
    assert sale.native.balance_of(TREASURY) == CENT - fee
    assert sale.native.balance_of(NATIVE_CHANNEL) == 0

    sale.ledger.claim_ref(REFERRER, [sale.native])
    assert sale.native.balance_of(REFERRER) == fee


def test_buy_for_onramp_pays(sale, channel):
    sale.native.mint(ONRAMP, WAD)

    event = channel.buy_for(ONRAMP, Tier.LONG, ALICE, value=CENT)

    assert event.payer == ALICE
    assert sale.native.balance_of(ONRAMP) == WAD - CENT
    assert sale.native.balance_of(ALICE) == WAD
    assert sale.ledger.funding_of(ALICE) == 25 * WAD


def test_value_above_balance_rejected(sale, channel):
    with pytest.raises(TransferFailed):
        channel.buy(ALICE, Tier.LONG, value=2 * WAD)

    assert sale.ledger.funding_of(ALICE) == 0


def test_zero_value_rejected(channel):
    with pytest.raises(InvalidParameter):
        channel.buy(ALICE, Tier.LONG, value=0)


def test_fee_payout_failure_refunds_value(sale, channel):
    """Сбой перевода комиссии в ledger: value возвращается плательщику целиком"""

    def hook(sender, to, amount):
        if to == LEDGER:
            raise TransferFailed("ledger rejects deposits")

    sale.native.on_transfer = hook

    with pytest.raises(TransferFailed):
        channel.buy(ALICE, Tier.LONG, REFERRER, value=CENT)

    sale.native.on_transfer = None
    assert sale.native.balance_of(ALICE) == WAD
    assert sale.native.balance_of(TREASURY) == 0
    assert sale.native.balance_of(NATIVE_CHANNEL) == 0
    assert sale.ledger.funding_of(ALICE) == 0
    assert channel.get_total() == 0
