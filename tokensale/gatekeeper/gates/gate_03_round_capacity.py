"""GATE 3: Round Capacity

Вычисляет количество sale-единиц по цене tier текущего раунда:
    sold_units = floor(funding × 10^sale_decimals / tier_price)

Блокирует, если sold + sold_units > supply раунда.
"""

from dataclasses import dataclass

from tokensale.core.domain.round import Round, Tier
from tokensale.core.math.fixed_point import sold_units as to_sold_units
from tokensale.gatekeeper.gates.gate_02_valuation import Gate02Result


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""

    entry_allowed: bool
    block_reason: str

    round_index: int
    tier_price: int
    sold_units: int
    remaining: int

    # Детали
    details: str


class Gate03RoundCapacity:
    """GATE 3: Round Capacity."""

    def __init__(self):
        """GATE 3 не требует зависимостей (stateless)."""
        pass

    def evaluate(
        self,
        gate02_result: Gate02Result,
        current_round: Round,
        tier: Tier,
        sale_decimals: int,
    ) -> Gate03Result:
        """Оценка GATE 3.

        Args:
            gate02_result: результат GATE 2 (funding)
            current_round: текущий открытый раунд
            tier: выбранный ценовой tier
            sale_decimals: decimals sale-актива

        Returns:
            Gate03Result с количеством sale-единиц
        """
        tier_price = current_round.price_for(tier)
        units = to_sold_units(gate02_result.funding, tier_price, sale_decimals)
        remaining = current_round.remaining

        if not gate02_result.entry_allowed:
            return Gate03Result(
                entry_allowed=False,
                block_reason=f"gate02_blocked: {gate02_result.block_reason}",
                round_index=current_round.index,
                tier_price=tier_price,
                sold_units=units,
                remaining=remaining,
                details=f"GATE 2 blocked: {gate02_result.block_reason}",
            )

        if units > remaining:
            return Gate03Result(
                entry_allowed=False,
                block_reason="round_capacity_exceeded",
                round_index=current_round.index,
                tier_price=tier_price,
                sold_units=units,
                remaining=remaining,
                details=(
                    f"Round {current_round.index}: requested {units} units, "
                    f"only {remaining} remaining"
                ),
            )

        return Gate03Result(
            entry_allowed=True,
            block_reason="",
            round_index=current_round.index,
            tier_price=tier_price,
            sold_units=units,
            remaining=remaining,
            details=f"PASS: round={current_round.index}, tier={tier.value}, units={units}",
        )
