"""
Valuation — нормализация платежа в funding-единицы

Две стратегии, различающие каналы продажи:
- OracleValuation: нативная монета по цене оракула + staleness
- FixedRateValuation: stable-актив чистым масштабированием decimals (без оракула)
"""

from dataclasses import dataclass
from typing import Callable, Protocol

from tokensale.core.math.fixed_point import normalize, quote_to_funding
from tokensale.oracle.price_oracle import PriceOracleAdapter


@dataclass(frozen=True)
class FundingQuote:
    """Результат нормализации платежа."""

    funding: int  # Funding-единицы (18 decimals)
    stale: bool = False

    # Диагностика оракула (None для stable)
    oracle_price: int | None = None  # Нормализованная цена (18 decimals)
    updated_at: int | None = None
    age_sec: int | None = None


class PaymentValuation(Protocol):
    """Стратегия нормализации платежа."""

    def quote(self, amount: int, asset_decimals: int) -> FundingQuote: ...


class FixedRateValuation:
    """1 целый stable-актив = 1 funding-единица."""

    def quote(self, amount: int, asset_decimals: int) -> FundingQuote:
        return FundingQuote(funding=normalize(amount, asset_decimals))


class OracleValuation:
    """
    Оценка нативной монеты по цене оракула.

    Свежесть feed перепроверяется на каждой покупке; порог меняется
    каналом через staleness_threshold_sec.
    """

    def __init__(
        self,
        oracle: PriceOracleAdapter,
        staleness_threshold_sec: int,
        clock: Callable[[], int],
    ):
        self.oracle = oracle
        self.staleness_threshold_sec = staleness_threshold_sec
        self._clock = clock

    def quote(self, amount: int, asset_decimals: int) -> FundingQuote:
        """
        Raises:
            OracleError: Если feed вернул неположительную цену
        """
        price = self.oracle.latest()
        now = self._clock()
        return FundingQuote(
            funding=quote_to_funding(amount, asset_decimals, price.price, price.decimals),
            stale=price.is_stale(now, self.staleness_threshold_sec),
            oracle_price=price.normalized,
            updated_at=price.updated_at,
            age_sec=price.age(now),
        )
