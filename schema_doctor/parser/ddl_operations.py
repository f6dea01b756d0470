"""
Классы для представления DDL операций.

Каждая операция умеет применить себя к каталогу таблиц
(dict[(schema, table)] -> Table). Последовательное применение операций
дампа/миграций даёт итоговое состояние схемы.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from schema_doctor.core.models import Column, Table

logger = logging.getLogger(__name__)

TableCatalog = Dict[Tuple[str, str], Table]


class OperationType(Enum):
    """Типы DDL операций."""
    CREATE_TABLE = "create_table"
    DROP_TABLE = "drop_table"

    ADD_COLUMN = "add_column"
    DROP_COLUMN = "drop_column"
    ALTER_COLUMN = "alter_column"

    ADD_CONSTRAINT = "add_constraint"

    RENAME_TABLE = "rename_table"
    RENAME_COLUMN = "rename_column"


@dataclass
class DDLOperation:
    """
    Базовый класс операции.
    """
    operation_type: OperationType = field(init=False)

    schema: str = "public"
    table_name: str = ""
    raw_sql: str = ""

    @property
    def key(self) -> Tuple[str, str]:
        return (self.schema, self.table_name)

    def apply(self, tables: TableCatalog) -> None:
        raise NotImplementedError

    def _target(self, tables: TableCatalog) -> Optional[Table]:
        table = tables.get(self.key)
        if table is None:
            logger.warning("%s: таблица %s.%s не объявлена, операция пропущена",
                           self.operation_type.value, self.schema, self.table_name)
        return table

    def __str__(self) -> str:
        rs = (self.raw_sql or "").strip().replace("\n", " ")
        if len(rs) > 120:
            rs = rs[:117] + "..."
        return f"{self.operation_type.value}: {rs}"


# -------------------------
# CREATE/DROP TABLE
# -------------------------

@dataclass
class CreateTableOperation(DDLOperation):
    """CREATE TABLE schema.table (...)."""
    table: Optional[Table] = None
    if_not_exists: bool = False

    def __post_init__(self) -> None:
        self.operation_type = OperationType.CREATE_TABLE

    def apply(self, tables: TableCatalog) -> None:
        if self.table is None:
            return
        if self.if_not_exists and self.key in tables:
            return
        tables[self.key] = self.table


@dataclass
class DropTableOperation(DDLOperation):
    """DROP TABLE schema.table."""
    if_exists: bool = False

    def __post_init__(self) -> None:
        self.operation_type = OperationType.DROP_TABLE

    def apply(self, tables: TableCatalog) -> None:
        if self.key not in tables and not self.if_exists:
            logger.warning("DROP TABLE: таблица %s.%s не объявлена", self.schema, self.table_name)
        tables.pop(self.key, None)


# -------------------------
# ALTER TABLE
# -------------------------

@dataclass
class AddColumnOperation(DDLOperation):
    column: Optional[Column] = None

    def __post_init__(self) -> None:
        self.operation_type = OperationType.ADD_COLUMN

    def apply(self, tables: TableCatalog) -> None:
        table = self._target(tables)
        if table is None or self.column is None:
            return
        table.columns[self.column.name] = self.column
        if self.column.attributes.get("is_primary_key"):
            table.primary_key = [self.column.name]


@dataclass
class DropColumnOperation(DDLOperation):
    column_name: str = ""

    def __post_init__(self) -> None:
        self.operation_type = OperationType.DROP_COLUMN

    def apply(self, tables: TableCatalog) -> None:
        table = self._target(tables)
        if table is None:
            return
        table.columns.pop(self.column_name, None)
        if self.column_name in table.primary_key:
            table.primary_key = [c for c in table.primary_key if c != self.column_name]


@dataclass
class AlterColumnOperation(DDLOperation):
    """
    ALTER COLUMN c SET NOT NULL / DROP NOT NULL / TYPE t.
    None в полях = "не менялось".
    """
    column_name: str = ""
    not_null: Optional[bool] = None
    new_type: Optional[str] = None

    def __post_init__(self) -> None:
        self.operation_type = OperationType.ALTER_COLUMN

    def apply(self, tables: TableCatalog) -> None:
        table = self._target(tables)
        if table is None:
            return
        column = table.columns.get(self.column_name)
        if column is None:
            logger.warning("ALTER COLUMN: колонка %s.%s не объявлена", self.table_name, self.column_name)
            return
        if self.not_null is not None:
            column.is_nullable = not self.not_null
        if self.new_type:
            column.data_type = self.new_type
            column.attributes["data_type"] = self.new_type


@dataclass
class AddConstraintOperation(DDLOperation):
    """ADD [CONSTRAINT name] PRIMARY KEY (...) - остальные ограничения на NULL не влияют."""
    constraint_type: str = ""
    columns: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.operation_type = OperationType.ADD_CONSTRAINT

    def apply(self, tables: TableCatalog) -> None:
        table = self._target(tables)
        if table is None or self.constraint_type != "PRIMARY KEY":
            return
        table.primary_key = list(self.columns)
        for name in self.columns:
            if name in table.columns:
                table.columns[name].is_nullable = False


@dataclass
class RenameTableOperation(DDLOperation):
    new_name: str = ""

    def __post_init__(self) -> None:
        self.operation_type = OperationType.RENAME_TABLE

    def apply(self, tables: TableCatalog) -> None:
        table = self._target(tables)
        if table is None:
            return
        del tables[self.key]
        table.name = self.new_name
        for column in table.columns.values():
            column.attributes["table"] = self.new_name
        tables[(self.schema, self.new_name)] = table


@dataclass
class RenameColumnOperation(DDLOperation):
    old_name: str = ""
    new_name: str = ""

    def __post_init__(self) -> None:
        self.operation_type = OperationType.RENAME_COLUMN

    def apply(self, tables: TableCatalog) -> None:
        table = self._target(tables)
        if table is None or self.old_name not in table.columns:
            return
        # сохраняем порядок колонок
        table.columns = {
            (self.new_name if name == self.old_name else name): col
            for name, col in table.columns.items()
        }
        table.columns[self.new_name].name = self.new_name
        table.primary_key = [self.new_name if c == self.old_name else c for c in table.primary_key]
