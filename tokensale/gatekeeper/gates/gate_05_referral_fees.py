"""GATE 5: Referral Fees

Расчёт двухуровневой реферальной комиссии. Gate никогда не блокирует
сам по себе, только пропускает блокировки предыдущих gates.

Формулы (per-mille, усечение к нулю):
    first_fee  = amount × first_rate / 1000                (актив платежа)
    second_fee = sold_units(funding × second_rate / 1000)  (sale-единицы по цене тира)
    net_amount = amount − first_fee                         (в treasury)

Без резолвнутого реферера обе комиссии равны 0.
"""

from dataclasses import dataclass

from tokensale.core.domain.referral import ReferralRates
from tokensale.core.math.fixed_point import per_mille, sold_units
from tokensale.gatekeeper.gates.gate_04_spend_limits import Gate04Result


@dataclass(frozen=True)
class Gate05Result:
    """Результат GATE 5."""

    entry_allowed: bool
    block_reason: str

    referrer: str | None
    first_rate: int
    second_rate: int
    first_fee: int  # Актив платежа
    second_fee: int  # Sale-единицы
    net_amount: int  # Актив платежа, в treasury

    # Детали
    details: str


class Gate05ReferralFees:
    """GATE 5: Referral Fees."""

    def __init__(self):
        """GATE 5 не требует зависимостей (stateless)."""
        pass

    def evaluate(
        self,
        gate04_result: Gate04Result,
        amount: int,
        funding: int,
        tier_price: int,
        sale_decimals: int,
        referrer: str | None,
        rates: ReferralRates | None,
    ) -> Gate05Result:
        """Оценка GATE 5.

        Args:
            gate04_result: результат GATE 4
            amount: платёж в base units актива
            funding: нормализованный платёж
            tier_price: цена тира текущего раунда
            sale_decimals: decimals sale-актива
            referrer: резолвнутый реферер (None если нет)
            rates: ставки реферера (None если нет реферера)

        Returns:
            Gate05Result с комиссиями
        """
        if referrer is None or rates is None:
            first_rate = second_rate = first_fee = second_fee = 0
        else:
            first_rate, second_rate = rates.first_rate, rates.second_rate
            first_fee = per_mille(amount, first_rate)
            second_fee = sold_units(per_mille(funding, second_rate), tier_price, sale_decimals)

        if not gate04_result.entry_allowed:
            return Gate05Result(
                entry_allowed=False,
                block_reason=f"gate04_blocked: {gate04_result.block_reason}",
                referrer=referrer,
                first_rate=first_rate,
                second_rate=second_rate,
                first_fee=first_fee,
                second_fee=second_fee,
                net_amount=amount - first_fee,
                details=f"GATE 4 blocked: {gate04_result.block_reason}",
            )

        return Gate05Result(
            entry_allowed=True,
            block_reason="",
            referrer=referrer,
            first_rate=first_rate,
            second_rate=second_rate,
            first_fee=first_fee,
            second_fee=second_fee,
            net_amount=amount - first_fee,
            details=(
                f"PASS: referrer={referrer or 'none'}, "
                f"first_fee={first_fee}, second_fee={second_fee}"
            ),
        )
