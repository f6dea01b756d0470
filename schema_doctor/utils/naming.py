"""
utils/naming.py

Утилиты для работы с именами объектов БД.

Принцип:
- неquoted идентификаторы DDL приводятся к lower-case при парсинге;
- имена, пришедшие из описания моделей, сравниваются как есть.
"""

from __future__ import annotations

from typing import Tuple

DEFAULT_SCHEMA = "public"


def split_qualified_name(name: str) -> Tuple[str, str]:
    """
    Делит имя на (schema, object_name) без изменения регистра.
    Примеры:
      "public.users" -> ("public", "users")
      "Users" -> ("public", "Users")
    """
    if not name:
        return DEFAULT_SCHEMA, ""
    if "." in name:
        left, right = name.split(".", 1)
        return left or DEFAULT_SCHEMA, right
    return DEFAULT_SCHEMA, name
