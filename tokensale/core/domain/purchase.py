"""
PurchaseRequest — входные данные покупки для admission pipeline

Общий для обоих каналов: канал определяет только актив платежа и способ
нормализации суммы.
"""

from pydantic import BaseModel, Field

from .round import Tier


class PurchaseRequest(BaseModel):
    """
    Запрос покупки.

    payer — пользователь, которому зачисляются sale-единицы.
    funder — аккаунт, с которого списывается платёж (caller; при buy_for это
    on-ramp relayer).
    """

    payer: str | None = Field(None, description="Пользователь, получающий аллокацию")
    funder: str = Field(..., min_length=1, description="Источник средств")
    asset: str = Field(..., min_length=1, description="Адрес актива платежа")
    amount: int = Field(..., ge=0, description="Сумма платежа в base units актива")
    tier: Tier = Field(..., description="Ценовой тир")
    referrer: str | None = Field(None, description="Предложенный реферер")
    privileged: bool = Field(default=False, description="buy_for вызов (cap = Max)")

    model_config = {"frozen": True}
