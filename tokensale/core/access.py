"""
Access — таблица ролей {role → holders}

Небольшой фиксированный набор ролей:
- ADMIN: жизненный цикл, лимиты, treasury, выдача ролей
- OPERATOR: держат только два канала продажи (право на ledger.commit)
- ONRAMP: relayer-адреса с правом buy_for на канале

Неявного доверия нет: канал должен явно получить OPERATOR на ledger.
"""

from enum import Enum

from tokensale.core.errors import Unauthorized


# =============================================================================
# ROLES
# =============================================================================


class Role(str, Enum):
    """Роль в таблице доступа"""

    ADMIN = "admin"
    OPERATOR = "operator"
    ONRAMP = "onramp"


# =============================================================================
# ACCESS CONTROL
# =============================================================================


class AccessControl:
    """Таблица ролей одного компонента."""

    def __init__(self, admin: str):
        self._holders: dict[Role, set[str]] = {role: set() for role in Role}
        self._holders[Role.ADMIN].add(admin)

    def has_role(self, role: Role, account: str | None) -> bool:
        return account is not None and account in self._holders[Role(role)]

    def holders(self, role: Role) -> frozenset[str]:
        return frozenset(self._holders[Role(role)])

    def require(self, caller: str | None, *roles: Role) -> None:
        """
        Проверка, что caller держит хотя бы одну из ролей.

        Raises:
            Unauthorized: Если ни одной роли нет
        """
        if not any(self.has_role(role, caller) for role in roles):
            names = "/".join(Role(role).value for role in roles)
            raise Unauthorized(f"{caller} lacks role {names}")

    def grant(self, role: Role, account: str) -> bool:
        """Выдать роль. Возвращает False, если роль уже была."""
        holders = self._holders[Role(role)]
        if account in holders:
            return False
        holders.add(account)
        return True

    def revoke(self, role: Role, account: str) -> bool:
        """Отозвать роль. Возвращает False, если роли не было."""
        holders = self._holders[Role(role)]
        if account not in holders:
            return False
        holders.remove(account)
        return True
