"""
JSON Schema Contract Validators

Валидация записей истории (SaleComponent.records()) против JSON Schema
контрактов, поставляемых вместе с пакетом.

Схемы:
- sale_event.json (общий конверт любой записи)
- tokens_purchased.json (покупка в канале)
- ledger_commit.json (settlement в ledger)
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'ledger_commit')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Базовый валидатор записи против одной схемы."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        return self.validator.iter_errors(data)


class SaleEventValidator(ContractValidator):
    def __init__(self):
        super().__init__("sale_event")


class TokensPurchasedValidator(ContractValidator):
    def __init__(self):
        super().__init__("tokens_purchased")


class LedgerCommitValidator(ContractValidator):
    def __init__(self):
        super().__init__("ledger_commit")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_sale_event(data: Dict[str, Any]) -> None:
    """
    Валидация конверта записи.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    SaleEventValidator().validate(data)


def validate_tokens_purchased(data: Dict[str, Any]) -> None:
    TokensPurchasedValidator().validate(data)


def validate_ledger_commit(data: Dict[str, Any]) -> None:
    LedgerCommitValidator().validate(data)


_KIND_VALIDATORS = {
    "tokens_purchased": validate_tokens_purchased,
    "ledger_commit": validate_ledger_commit,
}


def validate_records(records: Iterable[Dict[str, Any]]) -> None:
    """
    Валидация истории: конверт каждой записи и полная схема там, где она есть.

    Raises:
        ValidationError: На первой несоответствующей записи
    """
    envelope = SaleEventValidator()
    for record in records:
        envelope.validate(record)
        specific = _KIND_VALIDATORS.get(record["kind"])
        if specific is not None:
            specific(record)
