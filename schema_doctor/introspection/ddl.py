# schema_doctor/introspection/ddl.py

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from schema_doctor.core.models import Column, Table
from schema_doctor.core.exceptions import IntrospectionError
from schema_doctor.parser import SQLParser
from schema_doctor.utils.naming import split_qualified_name

from .base import SchemaIntrospector

logger = logging.getLogger(__name__)


class DDLIntrospector(SchemaIntrospector):
    """
    Схема, восстановленная из DDL (дамп structure.sql или набор миграций).
    """

    def __init__(self, tables: Optional[Iterable[Table]] = None, name: str = ""):
        self.name = name
        self._tables: Dict[Tuple[str, str], Table] = {}
        for table in tables or []:
            self.add_table(table)

    @classmethod
    def from_sql(cls, sql_text: str, name: str = "", verbose: bool = False) -> "DDLIntrospector":
        parser = SQLParser(verbose=verbose)
        tables = parser.parse_to_tables(sql_text)
        logger.debug("DDL %s: разобрано таблиц: %d", name or "<inline>", len(tables))
        return cls(tables, name=name)

    # ==========
    # ТАБЛИЦЫ
    # ==========

    def add_table(self, table: Table) -> None:
        self._tables[(table.schema or "public", table.name)] = table

    def get_table(self, table_name: str) -> Optional[Table]:
        return self._tables.get(split_qualified_name(table_name))

    @property
    def tables(self) -> List[Table]:
        return list(self._tables.values())

    # ==========
    # SchemaIntrospector
    # ==========

    def table_exists(self, table_name: str) -> bool:
        return self.get_table(table_name) is not None

    def columns(self, table_name: str) -> List[Column]:
        table = self.get_table(table_name)
        if table is None:
            raise IntrospectionError(f"Таблица {table_name} не найдена в схеме", table_name=table_name)
        return list(table.columns.values())

    def describe(self) -> dict:
        return {
            "type": self.__class__.__name__,
            "name": self.name,
            "tables": len(self._tables),
            "columns": sum(len(t.columns) for t in self._tables.values()),
        }
