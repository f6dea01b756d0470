"""
Категории типов данных PostgreSQL.

Правилу присутствия важна только категория BOOLEAN, но нормализация
покрывает все распространённые типы, чтобы отчёты и отладочные логи
были осмысленными.
"""

from __future__ import annotations

from typing import Dict
from enum import Enum
import re


class TypeCategory(Enum):
    """Категории типов данных."""
    INTEGER = "integer"
    DECIMAL = "decimal"
    FLOAT = "float"
    TEXT = "text"
    CHARACTER = "character"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    INTERVAL = "interval"
    JSON = "json"
    XML = "xml"
    UUID = "uuid"
    ARRAY = "array"
    MONEY = "money"
    BYTEA = "bytea"
    UNKNOWN = "unknown"


_ARRAY_SUFFIX_RE = re.compile(r"\[\s*\]\s*$")


class TypeCategorizer:
    """
    Приводит строку типа (из DDL или из инспектора БД) к TypeCategory.
    """

    # Алиасы типов (синонимы) - применяются к БАЗОВОМУ типу (без [])
    TYPE_ALIASES: Dict[str, str] = {
        "INT": "INTEGER",
        "INT4": "INTEGER",
        "INT8": "BIGINT",
        "INT2": "SMALLINT",
        "BOOL": "BOOLEAN",
        "CHARACTER VARYING": "VARCHAR",
        "DOUBLE": "DOUBLE PRECISION",
        "FLOAT4": "REAL",
        "FLOAT8": "DOUBLE PRECISION",
        "FLOAT": "DOUBLE PRECISION",
        "SERIAL4": "SERIAL",
        "SERIAL8": "BIGSERIAL",
        "TIMESTAMP WITH TIME ZONE": "TIMESTAMPTZ",
        "TIMESTAMP WITHOUT TIME ZONE": "TIMESTAMP",
        "DATETIME": "TIMESTAMP",
    }

    TYPE_CATEGORIES: Dict[str, TypeCategory] = {
        "SMALLINT": TypeCategory.INTEGER,
        "INTEGER": TypeCategory.INTEGER,
        "BIGINT": TypeCategory.INTEGER,
        "SERIAL": TypeCategory.INTEGER,
        "BIGSERIAL": TypeCategory.INTEGER,

        "NUMERIC": TypeCategory.DECIMAL,
        "DECIMAL": TypeCategory.DECIMAL,

        "REAL": TypeCategory.FLOAT,
        "DOUBLE PRECISION": TypeCategory.FLOAT,

        "CHAR": TypeCategory.CHARACTER,
        "CHARACTER": TypeCategory.CHARACTER,
        "VARCHAR": TypeCategory.TEXT,
        "TEXT": TypeCategory.TEXT,
        "CITEXT": TypeCategory.TEXT,

        "BOOLEAN": TypeCategory.BOOLEAN,

        "DATE": TypeCategory.DATE,
        "TIME": TypeCategory.TIME,
        "TIMETZ": TypeCategory.TIME,
        "TIMESTAMP": TypeCategory.DATETIME,
        "TIMESTAMPTZ": TypeCategory.DATETIME,
        "INTERVAL": TypeCategory.INTERVAL,

        "JSON": TypeCategory.JSON,
        "JSONB": TypeCategory.JSON,
        "XML": TypeCategory.XML,

        "UUID": TypeCategory.UUID,

        "MONEY": TypeCategory.MONEY,
        "BYTEA": TypeCategory.BYTEA,
    }

    @classmethod
    def normalize_type(cls, type_str: str) -> str:
        """
        Нормализует строку типа данных.

        Поддерживает:
        - модификаторы (VARCHAR(255) -> VARCHAR)
        - массивы (integer[] -> INTEGER[])
        """
        if not type_str:
            return "UNKNOWN"

        s = " ".join(type_str.strip().upper().split())

        # убрать модификаторы в скобках
        s = s.split("(", 1)[0].strip()

        if _ARRAY_SUFFIX_RE.search(s):
            base = _ARRAY_SUFFIX_RE.sub("", s).strip()
            base = cls.TYPE_ALIASES.get(base, base)
            return f"{base}[]"

        return cls.TYPE_ALIASES.get(s, s)

    @classmethod
    def get_type_category(cls, type_str: str) -> TypeCategory:
        normalized = cls.normalize_type(type_str)
        if normalized.endswith("[]"):
            return TypeCategory.ARRAY
        return cls.TYPE_CATEGORIES.get(normalized, TypeCategory.UNKNOWN)
