"""
Интроспекция живой БД через SQLAlchemy Inspector.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import Boolean

from schema_doctor.core.models import Column
from schema_doctor.core.exceptions import IntrospectionError

from .base import SchemaIntrospector

logger = logging.getLogger(__name__)


def _split(table_name: str) -> Tuple[Optional[str], str]:
    if "." in table_name:
        schema, name = table_name.split(".", 1)
        return schema, name
    return None, table_name


def _type_name(col_type: Any) -> str:
    if isinstance(col_type, Boolean):
        return "BOOLEAN"
    return type(col_type).__name__.upper()


class DatabaseIntrospector(SchemaIntrospector):
    """
    Принимает Engine или URL. Inspector создаётся лениво и кэширует
    отражённые метаданные на время одного прогона.
    """

    def __init__(self, engine: Union[Engine, str]):
        self._owns_engine = isinstance(engine, str)
        if isinstance(engine, str):
            try:
                engine = create_engine(engine)
            except SQLAlchemyError as e:
                raise IntrospectionError(f"Некорректный URL базы данных: {e}") from e
        self.engine: Engine = engine
        self._inspector = None

    @property
    def inspector(self):
        if self._inspector is None:
            try:
                self._inspector = inspect(self.engine)
            except SQLAlchemyError as e:
                raise IntrospectionError(f"Не удалось подключиться к БД: {e}") from e
        return self._inspector

    def table_exists(self, table_name: str) -> bool:
        schema, name = _split(table_name)
        try:
            return self.inspector.has_table(name, schema=schema)
        except SQLAlchemyError as e:
            raise IntrospectionError(f"Не удалось проверить таблицу {table_name}: {e}",
                                     table_name=table_name) from e

    def columns(self, table_name: str) -> List[Column]:
        schema, name = _split(table_name)
        try:
            reflected: List[Dict[str, Any]] = self.inspector.get_columns(name, schema=schema)
        except SQLAlchemyError as e:
            raise IntrospectionError(f"Не удалось получить колонки {table_name}: {e}",
                                     table_name=table_name) from e

        return [
            Column(
                name=col["name"],
                table=name,
                schema=schema or "public",
                data_type=_type_name(col["type"]),
                is_nullable=bool(col.get("nullable", True)),
                default_value=col.get("default"),
            )
            for col in reflected
        ]

    def close(self) -> None:
        if self._owns_engine:
            self.engine.dispose()

    def describe(self) -> dict:
        return {
            "type": self.__class__.__name__,
            "dialect": self.engine.dialect.name,
        }
