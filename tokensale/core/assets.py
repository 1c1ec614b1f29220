"""
Assets — узкий интерфейс fungible-актива

Реализации активов (mint/transfer семантика) внешние. Ledger и каналы
используют только transfer / transfer_from / balance_of / decimals.

Нативная монета моделируется тем же интерфейсом с адресом NATIVE_ASSET.
"""

from typing import Final, Protocol, runtime_checkable

from tokensale.core.errors import TransferFailed


# =============================================================================
# ADDRESS CONSTANTS
# =============================================================================

ZERO_ADDRESS: Final[str] = "0x0000000000000000000000000000000000000000"

# Условный адрес нативной монеты (ключ реферальных балансов в нативе)
NATIVE_ASSET: Final[str] = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

# Ключ корзины второго уровня реферальных наград (sale-asset единицы)
SALE_ASSET: Final[str] = "sale-asset"


def is_null(address: str | None) -> bool:
    """None, пустая строка и ZERO_ADDRESS считаются null-адресом."""
    return not address or address == ZERO_ADDRESS


# =============================================================================
# PROTOCOL
# =============================================================================


@runtime_checkable
class FungibleAsset(Protocol):
    """Внешний fungible-актив."""

    address: str

    def decimals(self) -> int: ...

    def balance_of(self, owner: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool: ...


# =============================================================================
# CHECKED TRANSFERS
# =============================================================================


def require_balance(asset: FungibleAsset, owner: str, amount: int) -> None:
    """
    Проверка, что у owner достаточно средств до начала переводов.

    Raises:
        TransferFailed: Если баланса не хватает
    """
    balance = asset.balance_of(owner)
    if balance < amount:
        raise TransferFailed(
            f"{owner} holds {balance} of {asset.address}, needs {amount}"
        )


def safe_transfer(asset: FungibleAsset, sender: str, to: str, amount: int) -> None:
    """
    transfer с проверкой результата.

    Raises:
        TransferFailed: Если актив вернул False
    """
    if not asset.transfer(sender, to, amount):
        raise TransferFailed(f"transfer of {amount} {asset.address} {sender} -> {to} failed")


def safe_transfer_from(
    asset: FungibleAsset, spender: str, owner: str, to: str, amount: int
) -> None:
    """
    transfer_from с проверкой результата.

    Raises:
        TransferFailed: Если актив вернул False
    """
    if not asset.transfer_from(spender, owner, to, amount):
        raise TransferFailed(
            f"transfer_from of {amount} {asset.address} {owner} -> {to} by {spender} failed"
        )
