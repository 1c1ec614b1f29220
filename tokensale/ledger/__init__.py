"""Ledger — владелец состояния продажи и восстановление по истории."""

from .replay import replay_ledger
from .sale_ledger import LedgerConfig, LedgerState, SaleLedger

__all__ = [
    "SaleLedger",
    "LedgerConfig",
    "LedgerState",
    "replay_ledger",
]
