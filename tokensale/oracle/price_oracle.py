"""
PriceOracleAdapter — узкий read-only интерфейс внешнего price feed

Feed отдаёт цену нативной монеты в USD и timestamp последнего обновления.
Адаптер нормализует цену в 18 decimals и проверяет свежесть.

Feed считается устаревшим, если now − updated_at ≥ threshold.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tokensale.core.errors import OracleError
from tokensale.core.math.fixed_point import FUNDING_DECIMALS, normalize


# =============================================================================
# PROTOCOL
# =============================================================================


@runtime_checkable
class PriceFeed(Protocol):
    """Внешний источник цены."""

    def decimals(self) -> int: ...

    def latest_price(self) -> tuple[int, int]:
        """(price, updated_at_timestamp_sec)"""
        ...


# =============================================================================
# QUOTE
# =============================================================================


@dataclass(frozen=True)
class PriceQuote:
    """Immutable снимок цены feed."""

    price: int
    decimals: int
    updated_at: int

    @property
    def normalized(self) -> int:
        """Цена в 18 decimals"""
        return normalize(self.price, self.decimals, FUNDING_DECIMALS)

    def age(self, now: int) -> int:
        """Возраст обновления в секундах"""
        return now - self.updated_at

    def is_stale(self, now: int, threshold_sec: int) -> bool:
        return self.age(now) >= threshold_sec


# =============================================================================
# ADAPTER
# =============================================================================


class PriceOracleAdapter:
    """Адаптер price feed: нормализованная цена + проверка staleness."""

    def __init__(self, feed: PriceFeed):
        self._feed = feed

    def latest(self) -> PriceQuote:
        """
        Текущий снимок feed.

        Raises:
            OracleError: Если feed вернул неположительную цену
        """
        price, updated_at = self._feed.latest_price()
        if price <= 0:
            raise OracleError(f"feed returned non-positive price {price}")
        return PriceQuote(price=price, decimals=self._feed.decimals(), updated_at=updated_at)

    def normalized_price(self) -> int:
        return self.latest().normalized

    def is_stale(self, now: int, threshold_sec: int) -> bool:
        """Проверка свежести текущего обновления feed"""
        return self.latest().is_stale(now, threshold_sec)
