"""
Contract Validation Module

Валидация записей истории ledger и каналов против JSON Schema контрактов.
"""

from .validators import (
    ContractValidator,
    LedgerCommitValidator,
    SaleEventValidator,
    SchemaLoader,
    TokensPurchasedValidator,
    validate_ledger_commit,
    validate_records,
    validate_sale_event,
    validate_tokens_purchased,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "SaleEventValidator",
    "TokensPurchasedValidator",
    "LedgerCommitValidator",
    # Functions
    "validate_sale_event",
    "validate_tokens_purchased",
    "validate_ledger_commit",
    "validate_records",
]
