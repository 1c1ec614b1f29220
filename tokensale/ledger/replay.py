"""
Replay — восстановление состояния ledger по истории записей

Каждое изменение состояния ledger сопровождается записью; последовательное
применение records() к начальной конфигурации даёт тот же LedgerState.

Записи без влияния на состояние ledger (роли, recovery, события каналов)
пропускаются.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from tokensale.core.domain.events import EventKind
from tokensale.core.domain.referral import ReferralRates, ReferralRecord
from tokensale.core.domain.round import CampaignState, Round, RoundState
from tokensale.ledger.sale_ledger import LedgerConfig, LedgerState


def replay_ledger(
    records: Iterable[Mapping[str, Any]],
    treasury: str,
    config: LedgerConfig | None = None,
) -> LedgerState:
    """
    Восстановить состояние ledger.

    Args:
        records: записи ledger в JSON-виде (SaleLedger.records())
        treasury: treasury, переданный при создании ledger
        config: конфигурация ledger (дефолтные ставки, bucket sale-актива)

    Returns:
        LedgerState после применения всех записей
    """
    config = config or LedgerConfig()
    state = LedgerState(
        treasury=treasury,
        default_rates=ReferralRates(
            first_rate=config.default_first_rate,
            second_rate=config.default_second_rate,
        ),
    )
    for record in records:
        _apply(state, record, config)
    return state


def _apply(state: LedgerState, record: Mapping[str, Any], config: LedgerConfig) -> None:
    kind = record["kind"]

    if kind == EventKind.CAMPAIGN_OPENED:
        state.campaign = CampaignState.OPENED
    elif kind == EventKind.CAMPAIGN_CLOSED:
        state.campaign = CampaignState.CLOSED

    # Rounds
    elif kind == EventKind.ROUND_ADDED:
        state.rounds.append(
            Round(
                index=record["index"],
                short_price=record["short_price"],
                long_price=record["long_price"],
                supply=record["supply"],
            )
        )
    elif kind == EventKind.ROUND_PRICE_UPDATED:
        index = record["index"]
        state.rounds[index] = state.rounds[index].with_prices(record["short_price"], record["long_price"])
    elif kind == EventKind.ROUND_SUPPLY_UPDATED:
        index = record["index"]
        state.rounds[index] = state.rounds[index].with_supply(record["supply"])
    elif kind == EventKind.ROUND_OPENED:
        index = record["index"]
        state.rounds[index] = state.rounds[index].advance(RoundState.OPENED)
        state.current_round = index
    elif kind == EventKind.ROUND_CLOSED:
        index = record["index"]
        state.rounds[index] = state.rounds[index].advance(RoundState.CLOSED)

    # Admission config
    elif kind == EventKind.LIMIT_UPDATED:
        state.limits = state.limits.updated(**{record["limit"]: record["value"]})
    elif kind == EventKind.AUTH_UPDATED:
        if record["authorized"]:
            state.authorized.add(record["user"])
        else:
            state.authorized.discard(record["user"])
    elif kind == EventKind.TREASURY_UPDATED:
        state.treasury = record["treasury"]
    elif kind == EventKind.DEFAULT_RATES_UPDATED:
        state.default_rates = ReferralRates(first_rate=record["first_rate"], second_rate=record["second_rate"])

    # Referrals
    elif kind in (EventKind.REFERRAL_SETUP, EventKind.REFERRAL_REGISTERED):
        referrer = record["referrer"]
        existing = state.referrals.get(referrer)
        state.referrals[referrer] = ReferralRecord(
            referrer=referrer,
            enabled=existing.enabled if existing is not None else True,
            custom=kind == EventKind.REFERRAL_SETUP,
            rates=ReferralRates(first_rate=record["first_rate"], second_rate=record["second_rate"]),
        )
    elif kind in (EventKind.REFERRAL_ENABLED, EventKind.REFERRAL_DISABLED):
        referrer = record["referrer"]
        state.referrals[referrer] = state.referrals[referrer].model_copy(
            update={"enabled": kind == EventKind.REFERRAL_ENABLED}
        )
    elif kind == EventKind.REFERRER_BOUND:
        state.bindings[record["user"]] = record["referrer"]
    elif kind == EventKind.REFERRAL_CLAIMED:
        state.ref_balances[(record["asset"], record["referrer"])] = 0

    # Settlement
    elif kind == EventKind.LEDGER_COMMIT:
        _apply_commit(state, record, config)


def _apply_commit(state: LedgerState, record: Mapping[str, Any], config: LedgerConfig) -> None:
    user, index, units = record["user"], record["round_index"], record["sold_units"]
    state.funding[user] = state.funding.get(user, 0) + record["funding"]
    state.total_sold += units
    state.rounds[index] = state.rounds[index].with_sold(units)
    state.balances[(index, user)] = state.balances.get((index, user), 0) + units

    referrer = record.get("referrer")
    if referrer is None:
        return
    for bucket, fee in ((record["asset"], record["first_tier_fee"]), (config.sale_asset, record["second_tier_fee"])):
        if fee:
            key = (bucket, referrer)
            state.ref_balances[key] = state.ref_balances.get(key, 0) + fee
