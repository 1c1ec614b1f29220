"""
Round — Модель раунда продажи

Раунд — ограниченная по supply аллокация sale-актива по фиксированным ценам
двух тиров (short / long). Последовательность раундов append-only.

Immutable Pydantic модель: любое изменение раунда создаёт новый экземпляр.

ИНВАРИАНТЫ:
1. sold ≤ supply всегда
2. Переходы состояний только NONE → OPENED → CLOSED, повторного открытия нет
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Tier(str, Enum):
    """Ценовой тир покупки"""

    SHORT = "short"
    LONG = "long"


class RoundState(str, Enum):
    """Состояние раунда"""

    NONE = "none"  # Определён, ещё не стартовал
    OPENED = "opened"
    CLOSED = "closed"


class CampaignState(str, Enum):
    """
    Состояние кампании.

    Монотонно: NONE → OPENED → CLOSED. Управляет открытием раундов и покупками.
    """

    NONE = "none"
    OPENED = "opened"
    CLOSED = "closed"


_NEXT_STATE = {
    RoundState.NONE: RoundState.OPENED,
    RoundState.OPENED: RoundState.CLOSED,
}


# =============================================================================
# ROUND MODEL
# =============================================================================


class Round(BaseModel):
    """
    Модель раунда.

    Цены заданы в funding-единицах (18 decimals) за один целый sale-юнит.
    """

    index: int = Field(..., ge=0, description="Позиция раунда в последовательности")
    state: RoundState = Field(default=RoundState.NONE, description="Состояние раунда")
    short_price: int = Field(..., gt=0, description="Цена тира SHORT (18 decimals)")
    long_price: int = Field(..., gt=0, description="Цена тира LONG (18 decimals)")
    sold: int = Field(default=0, ge=0, description="Продано sale-единиц")
    supply: int = Field(..., gt=0, description="Supply раунда в sale-единицах")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_sold_within_supply(self) -> "Round":
        """Инвариант sold ≤ supply"""
        if self.sold > self.supply:
            raise ValueError(f"sold {self.sold} exceeds supply {self.supply}")
        return self

    @property
    def remaining(self) -> int:
        """Остаток supply"""
        return self.supply - self.sold

    def price_for(self, tier: Tier) -> int:
        """Цена выбранного тира"""
        return self.short_price if Tier(tier) == Tier.SHORT else self.long_price

    def advance(self, target: RoundState) -> "Round":
        """
        Переход состояния раунда.

        Raises:
            ValueError: Если переход не NONE → OPENED или OPENED → CLOSED
        """
        if _NEXT_STATE.get(self.state) != target:
            raise ValueError(f"round {self.index}: {self.state.value} -> {target.value} not allowed")
        return self.model_copy(update={"state": target})

    def with_sold(self, units: int) -> "Round":
        """Новый экземпляр с добавленными проданными единицами (через валидацию)"""
        return self._revalidate(sold=self.sold + units)

    def with_supply(self, supply: int) -> "Round":
        return self._revalidate(supply=supply)

    def with_prices(self, short_price: int, long_price: int) -> "Round":
        return self._revalidate(short_price=short_price, long_price=long_price)

    def _revalidate(self, **changes) -> "Round":
        # model_copy не запускает валидаторы
        return Round.model_validate({**self.model_dump(), **changes})
