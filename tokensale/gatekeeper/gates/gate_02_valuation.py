"""GATE 2: Payment Valuation

Переводит платёж в funding-единицы (18 decimals):
- Stable-актив: масштабирование decimals
- Нативная монета: цена оракула; устаревший feed блокирует покупку

Сама нормализация выполняется стратегией канала (PaymentValuation),
gate принимает готовый FundingQuote и решает о допуске.
"""

from dataclasses import dataclass

from tokensale.gatekeeper.gates.gate_01_payment_sanity import Gate01Result
from tokensale.gatekeeper.valuation import FundingQuote


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    entry_allowed: bool
    block_reason: str

    funding: int
    oracle_price: int | None
    oracle_age_sec: int | None

    # Детали
    details: str


class Gate02Valuation:
    """GATE 2: Payment Valuation.

    Порядок проверок:
    1. GATE 1 блокировка → пропускаем причину
    2. Stale feed → блокировка
    """

    def __init__(self):
        """GATE 2 не требует зависимостей (stateless)."""
        pass

    def evaluate(self, gate01_result: Gate01Result, quote: FundingQuote) -> Gate02Result:
        """Оценка GATE 2.

        Args:
            gate01_result: результат GATE 1
            quote: нормализованный платёж

        Returns:
            Gate02Result с funding-единицами
        """
        if not gate01_result.entry_allowed:
            return Gate02Result(
                entry_allowed=False,
                block_reason=f"gate01_blocked: {gate01_result.block_reason}",
                funding=quote.funding,
                oracle_price=quote.oracle_price,
                oracle_age_sec=quote.age_sec,
                details=f"GATE 1 blocked: {gate01_result.block_reason}",
            )

        if quote.stale:
            return Gate02Result(
                entry_allowed=False,
                block_reason="oracle_stale",
                funding=quote.funding,
                oracle_price=quote.oracle_price,
                oracle_age_sec=quote.age_sec,
                details=f"Price feed stale: updated_at={quote.updated_at}, age={quote.age_sec}s",
            )

        source = "oracle" if quote.oracle_price is not None else "fixed"
        return Gate02Result(
            entry_allowed=True,
            block_reason="",
            funding=quote.funding,
            oracle_price=quote.oracle_price,
            oracle_age_sec=quote.age_sec,
            details=f"PASS: funding={quote.funding} ({source})",
        )
