"""
Referral — модели реферальной программы

Ставки заданы в промилле (per-mille): 1000 = 100%.
- first_rate: доля платежа, начисляемая реферу в активе платежа
- second_rate: доля платежа, начисляемая в sale-единицах по цене тира
"""

from typing import Final

from pydantic import BaseModel, Field

PER_MILLE: Final[int] = 1000

# Ставки по умолчанию для авто-регистрируемых реферов
DEFAULT_FIRST_RATE: Final[int] = 50
DEFAULT_SECOND_RATE: Final[int] = 50


class ReferralRates(BaseModel):
    """Пара ставок (per-mille)"""

    first_rate: int = Field(..., ge=0, le=PER_MILLE, description="Ставка первого уровня")
    second_rate: int = Field(..., ge=0, le=PER_MILLE, description="Ставка второго уровня")

    model_config = {"frozen": True}

    def merged_with(self, defaults: "ReferralRates") -> "ReferralRates":
        """Поэлементный максимум с текущими дефолтами"""
        return ReferralRates(
            first_rate=max(self.first_rate, defaults.first_rate),
            second_rate=max(self.second_rate, defaults.second_rate),
        )


class ReferralRecord(BaseModel):
    """
    Запись реферера.

    custom=True только для записей, созданных через setup_referrals;
    авто-регистрация при покупке следует текущим дефолтам.
    """

    referrer: str = Field(..., min_length=1, description="Адрес реферера")
    enabled: bool = Field(default=True, description="Реферер активен")
    custom: bool = Field(default=False, description="Индивидуальные ставки")
    rates: ReferralRates = Field(..., description="Зарегистрированные ставки")

    model_config = {"frozen": True}
