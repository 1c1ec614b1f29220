"""
FixedPoint — централизованная арифметика фиксированной точки

Единственный допустимый способ преобразований между:
- base units актива платежа (любые decimals)
- funding-единицами (18 decimals)
- sale-единицами (sale_decimals)

ЗАПРЕЩЕНО смешивать decimals без явного конвертера из этого модуля.

Округление: всегда truncation к нулю (целочисленное деление). Повторные мелкие
покупки могут недоначислять дробные sale-единицы.
"""

from typing import Final

from tokensale.core.domain.referral import PER_MILLE


# =============================================================================
# CONSTANTS
# =============================================================================

# Decimals нормализованной funding-единицы
FUNDING_DECIMALS: Final[int] = 18

# Decimals цен раундов
PRICE_DECIMALS: Final[int] = 18


# =============================================================================
# NORMALIZATION
# =============================================================================


def normalize(amount: int, from_decimals: int, to_decimals: int = FUNDING_DECIMALS) -> int:
    """
    Перевод суммы между шкалами decimals.

    Args:
        amount: Сумма в base units исходной шкалы (>= 0)
        from_decimals: Decimals исходной шкалы
        to_decimals: Decimals целевой шкалы (default: 18)

    Returns:
        Сумма в целевой шкале, усечённая к нулю

    Raises:
        ValueError: Если amount или decimals отрицательны

    Examples:
        >>> normalize(25_000_000, 6)
        25000000000000000000
        >>> normalize(1_999_999_999_999, 18, 6)
        1
    """
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if from_decimals < 0 or to_decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {from_decimals} -> {to_decimals}")

    if to_decimals >= from_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    return amount // 10 ** (from_decimals - to_decimals)


def quote_to_funding(amount: int, asset_decimals: int, price: int, price_decimals: int) -> int:
    """
    Конверсия суммы актива в funding-единицы по цене оракула.

    funding = amount × price / 10^(asset_decimals + price_decimals) × 10^18

    Args:
        amount: Сумма в base units актива
        asset_decimals: Decimals актива
        price: Цена одного целого актива в USD (price_decimals)
        price_decimals: Decimals цены

    Returns:
        Funding-единицы (18 decimals)
    """
    if price <= 0:
        raise ValueError(f"price must be positive, got {price}")
    return normalize(amount * price, asset_decimals + price_decimals)


# =============================================================================
# SALE ARITHMETIC
# =============================================================================


def sold_units(funding: int, tier_price: int, sale_decimals: int) -> int:
    """
    Количество sale-единиц за funding по цене тира.

    sold = funding × 10^sale_decimals / tier_price

    Raises:
        ValueError: Если цена тира не положительна
    """
    if tier_price <= 0:
        raise ValueError(f"tier_price must be positive, got {tier_price}")
    return funding * 10**sale_decimals // tier_price


def per_mille(amount: int, rate: int) -> int:
    """
    Доля суммы в промилле, усечённая к нулю.

    Raises:
        ValueError: Если ставка вне [0, 1000]
    """
    if not 0 <= rate <= PER_MILLE:
        raise ValueError(f"rate must be within [0, {PER_MILLE}], got {rate}")
    return amount * rate // PER_MILLE


def headroom(cap: int, committed: int) -> int:
    """Остаток лимита, никогда не отрицательный."""
    return max(cap - committed, 0)
