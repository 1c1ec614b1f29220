"""Gatekeeper — допуск покупок через фиксированную цепочку gates.

Каналы продажи не проверяют покупки сами: они строят PurchaseRequest,
выбирают стратегию valuation и передают всё в AdmissionPipeline.
"""

from .admission import BLOCK_ERRORS, AdmissionDecision, AdmissionPipeline
from .valuation import FixedRateValuation, FundingQuote, OracleValuation, PaymentValuation

__all__ = [
    "AdmissionPipeline",
    "AdmissionDecision",
    "BLOCK_ERRORS",
    "FundingQuote",
    "PaymentValuation",
    "FixedRateValuation",
    "OracleValuation",
]
