"""Gates — индивидуальные гейты допуска покупки.

- GATE 0: Channel Pause / Asset Whitelist / Sale Lifecycle
- GATE 1: Payment Sanity
- GATE 2: Payment Valuation (oracle staleness)
- GATE 3: Round Capacity
- GATE 4: Spend Limits (Min / AuthLimit / Max)
- GATE 5: Referral Fees
"""

from .gate_00_sale_killswitch import Gate00Result, Gate00SaleKillswitch
from .gate_01_payment_sanity import Gate01PaymentSanity, Gate01Result
from .gate_02_valuation import Gate02Result, Gate02Valuation
from .gate_03_round_capacity import Gate03Result, Gate03RoundCapacity
from .gate_04_spend_limits import Gate04Result, Gate04SpendLimits
from .gate_05_referral_fees import Gate05ReferralFees, Gate05Result

__all__ = [
    "Gate00SaleKillswitch",
    "Gate00Result",
    "Gate01PaymentSanity",
    "Gate01Result",
    "Gate02Valuation",
    "Gate02Result",
    "Gate03RoundCapacity",
    "Gate03Result",
    "Gate04SpendLimits",
    "Gate04Result",
    "Gate05ReferralFees",
    "Gate05Result",
]
