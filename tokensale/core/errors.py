"""
Errors — таксономия ошибок продажи

Все отказы синхронные и атомарные: ни одна ошибка не оставляет частично
изменённых балансов. Автоматического retry нет, повтор остаётся на вызывающей
стороне. Единственный намеренный no-op: пропуск нулевых реферальных балансов
при claim.
"""


class SaleError(Exception):
    """Базовое исключение для всех отказов ledger и каналов продажи."""


class InvalidParameter(SaleError, ValueError):
    """
    Некорректный параметр вызова.

    Несовпадение длин batch-списков, запрещённый null-адрес, ставка вне
    диапазона, нарушение порядка Min ≤ AuthLimit ≤ Max.
    """


class InvalidState(SaleError):
    """Кампания или раунд в неподходящем состоянии жизненного цикла."""


class ReentrantCall(InvalidState):
    """Повторный вход в операцию, которая ещё не завершилась."""


class CapacityExceeded(SaleError):
    """Остатка supply текущего раунда не хватает на покупку."""


class BelowMinimum(SaleError):
    """Нормализованная сумма ниже глобального Min."""


class AboveMaximum(SaleError):
    """Нормализованная сумма превышает доступный пользователю лимит."""


class OracleError(SaleError):
    """Оракул вернул непригодную цену."""


class OracleStale(OracleError):
    """Последнее обновление цены старше порога staleness."""


class Unauthorized(SaleError, PermissionError):
    """
    Отсутствует нужная роль.

    Также выбрасывается при claim от незарегистрированного или отключённого
    реферера.
    """


class TransferFailed(SaleError):
    """Перевод актива не выполнен."""


class Paused(SaleError):
    """Канал остановлен администратором."""
