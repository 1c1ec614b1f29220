"""GATE 4: Spend Limits (Min / AuthLimit / Max)

Проверка нормализованного платежа против глобальных лимитов:
- funding < Min → блокировка
- funding > headroom → блокировка, где
    headroom = max(cap − cumulative_funding, 0)
    cap = Max                      для buy_for (privileged)
    cap = AuthLimit | Max          для buy (по флагу авторизации)
"""

from dataclasses import dataclass

from tokensale.core.domain.limits import Limits
from tokensale.core.math.fixed_point import headroom as headroom_of
from tokensale.gatekeeper.gates.gate_03_round_capacity import Gate03Result


@dataclass(frozen=True)
class Gate04Result:
    """Результат GATE 4."""

    entry_allowed: bool
    block_reason: str

    funding: int
    cap: int
    committed: int
    headroom: int

    # Детали
    details: str


class Gate04SpendLimits:
    """GATE 4: Spend Limits.

    Порядок проверок:
    1. GATE 3 блокировка → пропускаем причину
    2. funding < Min → блокировка
    3. funding > headroom → блокировка
    """

    def __init__(self):
        """GATE 4 не требует зависимостей (stateless)."""
        pass

    def evaluate(
        self,
        gate03_result: Gate03Result,
        funding: int,
        limits: Limits,
        committed: int,
        authorized: bool,
        privileged: bool = False,
    ) -> Gate04Result:
        """Оценка GATE 4.

        Args:
            gate03_result: результат GATE 3
            funding: нормализованный платёж
            limits: текущие лимиты ledger
            committed: кумулятивный funding пользователя
            authorized: флаг авторизации пользователя
            privileged: buy_for вызов (cap = Max)

        Returns:
            Gate04Result с решением о допуске
        """
        cap = limits.max if privileged else limits.cap_for(authorized)
        available = headroom_of(cap, committed)

        if not gate03_result.entry_allowed:
            reason = f"gate03_blocked: {gate03_result.block_reason}"
            details = f"GATE 3 blocked: {gate03_result.block_reason}"
        elif funding < limits.min:
            reason = "below_minimum"
            details = f"Funding {funding} below minimum {limits.min}"
        elif funding > available:
            reason = "above_maximum"
            details = f"Funding {funding} exceeds headroom {available} (cap={cap}, committed={committed})"
        else:
            return Gate04Result(
                entry_allowed=True,
                block_reason="",
                funding=funding,
                cap=cap,
                committed=committed,
                headroom=available,
                details=f"PASS: funding={funding}, headroom={available}",
            )

        return Gate04Result(
            entry_allowed=False,
            block_reason=reason,
            funding=funding,
            cap=cap,
            committed=committed,
            headroom=available,
            details=details,
        )
