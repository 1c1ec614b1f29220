"""GATE 1: Payment Sanity

Структурная проверка запроса покупки до любой оценки:
- payer не null
- payer != referrer (self-referral)
- amount > 0

Интеграция:
- Использует результат GATE 0 (должен быть PASS)
"""

from dataclasses import dataclass

from tokensale.core.assets import is_null
from tokensale.core.domain.purchase import PurchaseRequest
from tokensale.gatekeeper.gates.gate_00_sale_killswitch import Gate00Result


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    entry_allowed: bool
    block_reason: str

    payer_valid: bool
    referrer_valid: bool
    amount_valid: bool

    # Детали
    details: str


class Gate01PaymentSanity:
    """GATE 1: Payment Sanity.

    Порядок проверок:
    1. GATE 0 блокировка → пропускаем причину
    2. payer null → блокировка
    3. payer == referrer → блокировка
    4. amount == 0 → блокировка
    """

    def __init__(self):
        """GATE 1 не требует зависимостей (stateless)."""
        pass

    def evaluate(self, gate00_result: Gate00Result, request: PurchaseRequest) -> Gate01Result:
        """Оценка GATE 1.

        Args:
            gate00_result: результат GATE 0
            request: запрос покупки

        Returns:
            Gate01Result с решением о допуске
        """
        payer_valid = not is_null(request.payer)
        referrer_valid = is_null(request.referrer) or request.referrer != request.payer
        amount_valid = request.amount > 0

        if not gate00_result.entry_allowed:
            return Gate01Result(
                entry_allowed=False,
                block_reason=f"gate00_blocked: {gate00_result.block_reason}",
                payer_valid=payer_valid,
                referrer_valid=referrer_valid,
                amount_valid=amount_valid,
                details=f"GATE 0 blocked: {gate00_result.block_reason}",
            )

        if not payer_valid:
            reason, details = "payer_null", "Payer must not be the null address"
        elif not referrer_valid:
            reason, details = "self_referral", f"Payer {request.payer} cannot refer itself"
        elif not amount_valid:
            reason, details = "zero_amount", "Payment amount must be positive"
        else:
            return Gate01Result(
                entry_allowed=True,
                block_reason="",
                payer_valid=True,
                referrer_valid=True,
                amount_valid=True,
                details=f"PASS: payer={request.payer}, amount={request.amount}",
            )

        return Gate01Result(
            entry_allowed=False,
            block_reason=reason,
            payer_valid=payer_valid,
            referrer_valid=referrer_valid,
            amount_valid=amount_valid,
            details=details,
        )
