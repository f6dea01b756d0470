"""
Пакет introspection: источники сведений о схеме БД.

- SchemaIntrospector - контракт (table_exists / columns)
- DDLIntrospector - схема из DDL-скрипта
- DatabaseIntrospector - живая БД через SQLAlchemy
"""

from .base import SchemaIntrospector
from .ddl import DDLIntrospector
from .database import DatabaseIntrospector

__all__ = [
    "SchemaIntrospector",
    "DDLIntrospector",
    "DatabaseIntrospector",
]
