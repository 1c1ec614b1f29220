"""
Limits — глобальные лимиты допуска

Min — минимальная покупка, AuthLimit — кумулятивный cap неавторизованного
пользователя, Max — кумулятивный cap авторизованного пользователя.
Все значения в funding-единицах (18 decimals).

ИНВАРИАНТ: Min ≤ AuthLimit ≤ Max после любого обновления.
"""

from pydantic import BaseModel, Field, ValidationError, model_validator

from tokensale.core.errors import InvalidParameter


class Limits(BaseModel):
    """Тройка лимитов допуска (immutable)."""

    min: int = Field(default=0, ge=0, description="Минимальная покупка")
    auth_limit: int = Field(default=0, ge=0, description="Cap неавторизованного пользователя")
    max: int = Field(default=0, ge=0, description="Cap авторизованного пользователя")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_ordering(self) -> "Limits":
        """Проверка Min ≤ AuthLimit ≤ Max"""
        if not self.min <= self.auth_limit <= self.max:
            raise ValueError(
                f"limits must satisfy min <= auth_limit <= max, "
                f"got {self.min} / {self.auth_limit} / {self.max}"
            )
        return self

    def updated(self, **changes: int) -> "Limits":
        """
        Новая тройка с изменёнными полями.

        Raises:
            InvalidParameter: Если новая тройка нарушает порядок или отрицательна
        """
        try:
            return Limits.model_validate({**self.model_dump(), **changes})
        except ValidationError as exc:
            raise InvalidParameter(str(exc)) from exc

    def cap_for(self, authorized: bool) -> int:
        """Cap, применимый к пользователю"""
        return self.max if authorized else self.auth_limit
