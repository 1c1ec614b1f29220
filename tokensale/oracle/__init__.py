"""Oracle — read-only адаптер внешнего price feed."""

from .price_oracle import PriceFeed, PriceOracleAdapter, PriceQuote

__all__ = [
    "PriceFeed",
    "PriceQuote",
    "PriceOracleAdapter",
]
