"""
Core math modules для tokensale

Арифметика фиксированной точки: нормализация decimals, sale-единицы,
промилле, headroom. Только целые числа, truncation к нулю.
"""

from tokensale.core.math.fixed_point import (
    FUNDING_DECIMALS,
    PRICE_DECIMALS,
    headroom,
    normalize,
    per_mille,
    quote_to_funding,
    sold_units,
)

__all__ = [
    # Constants
    "FUNDING_DECIMALS",
    "PRICE_DECIMALS",
    # Functions
    "normalize",
    "quote_to_funding",
    "sold_units",
    "per_mille",
    "headroom",
]
