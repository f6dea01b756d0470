"""
Пакет utils: вспомогательные утилиты schema_doctor.

Состав пакета:
- naming: разбор квалифицированных имён объектов БД
- type_categories: категории типов данных PostgreSQL
"""

from .naming import (
    DEFAULT_SCHEMA,
    split_qualified_name,
)

from .type_categories import (
    TypeCategory,
    TypeCategorizer,
)

__all__ = [
    # naming
    "DEFAULT_SCHEMA",
    "split_qualified_name",

    # type categories
    "TypeCategory",
    "TypeCategorizer",
]
