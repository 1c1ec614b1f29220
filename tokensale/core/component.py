"""
SaleComponent — общая база ledger и каналов продажи

Исполнение строго последовательное: каждая внешняя операция выполняется
целиком как одна неделимая единица. Поскольку перевод актива может вызвать
код вызывающей стороны до завершения её обновления состояния:

1. Reentrancy: операции с внешними переводами держат non-reentrant lock
   и обновляют собственный учёт ДО перевода.
2. Atomic: записи состояния внутри scope _atomic() журналируются
   (_write / _assign); при любом исключении журнал и история откатываются.
3. Privilege: каждая мутирующая операция проверяет роль caller.
"""

import logging
from contextlib import contextmanager
from functools import partial
from typing import Any, Callable, Iterator, MutableMapping, MutableSequence

from tokensale.core.access import AccessControl, Role
from tokensale.core.assets import FungibleAsset, is_null, safe_transfer
from tokensale.core.domain.events import Recovered, RoleGranted, RoleRevoked, SaleEvent
from tokensale.core.errors import InvalidParameter, ReentrantCall

logger = logging.getLogger(__name__)


class SaleComponent:
    """
    База компонента с адресом, таблицей ролей, историей событий и guards.

    Подклассы хранят мутируемое состояние в self._state (dataclass) и внутри
    scope _atomic() изменяют его только через _write / _assign.
    """

    def __init__(self, address: str, admin: str, native: FungibleAsset):
        """
        Args:
            address: адрес компонента (держатель custody)
            admin: начальный держатель роли ADMIN
            native: handle нативной монеты (для recover_native и нативных переводов)
        """
        if is_null(address):
            raise InvalidParameter("component address must not be null")
        if is_null(admin):
            raise InvalidParameter("admin must not be null")

        self.address = address
        self._access = AccessControl(admin)
        self._native = native
        self._events: list[SaleEvent] = []
        self._entered = False
        self._state: Any = None
        self._journal: list[Callable[[], None]] | None = None

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    @property
    def events(self) -> tuple[SaleEvent, ...]:
        return tuple(self._events)

    def records(self) -> list[dict[str, Any]]:
        """История в JSON-совместимом виде"""
        return [event.model_dump(mode="json") for event in self._events]

    def _emit(self, event: SaleEvent) -> SaleEvent:
        self._events.append(event)
        return event

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    def has_role(self, role: Role, account: str | None) -> bool:
        return self._access.has_role(role, account)

    def grant_role(self, caller: str, role: Role, account: str) -> None:
        """Выдать роль (только ADMIN)."""
        self._access.require(caller, Role.ADMIN)
        if is_null(account):
            raise InvalidParameter("cannot grant a role to the null address")
        if self._access.grant(role, account):
            logger.info("%s: granted %s to %s", self.address, Role(role).value, account)
            self._emit(
                RoleGranted(emitter=self.address, role=Role(role).value, account=account, sender=caller)
            )

    def revoke_role(self, caller: str, role: Role, account: str) -> None:
        """Отозвать роль (только ADMIN)."""
        self._access.require(caller, Role.ADMIN)
        if self._access.revoke(role, account):
            logger.info("%s: revoked %s from %s", self.address, Role(role).value, account)
            self._emit(
                RoleRevoked(emitter=self.address, role=Role(role).value, account=account, sender=caller)
            )

    # -------------------------------------------------------------------------
    # Recovery
    # -------------------------------------------------------------------------

    def recover_asset(self, caller: str, asset: FungibleAsset, amount: int) -> None:
        """
        Вывести amount актива, находящегося на балансе компонента, на caller.

        Raises:
            Unauthorized: caller не ADMIN
            InvalidParameter: amount отрицательный
            TransferFailed: перевод не выполнен
        """
        self._access.require(caller, Role.ADMIN)
        if amount < 0:
            raise InvalidParameter(f"amount must be non-negative, got {amount}")
        with self._non_reentrant(), self._atomic():
            self._before_recover(asset, amount)
            self._emit(Recovered(emitter=self.address, asset=asset.address, to=caller, amount=amount))
            safe_transfer(asset, self.address, caller, amount)
        logger.info("%s: recovered %s of %s to %s", self.address, amount, asset.address, caller)

    def recover_native(self, caller: str) -> int:
        """Вывести весь нативный баланс компонента на caller."""
        self._access.require(caller, Role.ADMIN)
        amount = self._native.balance_of(self.address)
        self.recover_asset(caller, self._native, amount)
        return amount

    def _before_recover(self, asset: FungibleAsset, amount: int) -> None:
        """Hook перед выводом средств (ledger проверяет обязательства)."""

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    @contextmanager
    def _non_reentrant(self) -> Iterator[None]:
        """
        Non-reentrant lock на время операции.

        Raises:
            ReentrantCall: Если операция компонента уже выполняется
        """
        if self._entered:
            raise ReentrantCall(f"{self.address}: reentrant call rejected")
        self._entered = True
        try:
            yield
        finally:
            self._entered = False

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        """
        Scope с журналом отката.

        Внутри scope каждая запись через _write / _assign регистрирует обратную
        операцию. При любом исключении журнал применяется в обратном порядке
        до метки scope, события scope удаляются. Вложенные scope делят журнал.
        """
        outer = self._journal
        journal = outer if outer is not None else []
        self._journal = journal
        mark = len(journal)
        event_mark = len(self._events)
        try:
            yield
        except BaseException:
            while len(journal) > mark:
                journal.pop()()
            del self._events[event_mark:]
            raise
        finally:
            self._journal = outer

    def _write(self, container: MutableMapping | MutableSequence, key: Any, value: Any) -> None:
        """container[key] = value с регистрацией отката в открытом scope."""
        if self._journal is not None:
            try:
                previous = container[key]
            except KeyError:
                self._journal.append(partial(container.pop, key, None))
            else:
                self._journal.append(partial(container.__setitem__, key, previous))
        container[key] = value

    def _assign(self, target: Any, name: str, value: Any) -> None:
        """setattr(target, name, value) с регистрацией отката в открытом scope."""
        if self._journal is not None:
            self._journal.append(partial(setattr, target, name, getattr(target, name)))
        setattr(target, name, value)
