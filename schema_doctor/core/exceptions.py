"""
Пользовательские исключения schema_doctor.
"""

from __future__ import annotations
from typing import Optional, Dict, Any


class SchemaDoctorError(Exception):
    """Базовое исключение schema_doctor."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: Optional[dict] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }


class ParsingError(SchemaDoctorError):
    """Ошибка парсинга SQL."""

    def __init__(self, message: str, sql_fragment: str = None, position: int = None):
        details: Dict[str, Any] = {}
        if sql_fragment:
            details["sql_fragment"] = sql_fragment
        if position is not None:
            details["position"] = position
        super().__init__(message, "PARSING_ERROR", details)


class IntrospectionError(SchemaDoctorError):
    """Не удалось получить сведения о таблице или её колонках."""

    def __init__(self, message: str, table_name: str = None):
        details: Dict[str, Any] = {}
        if table_name:
            details["table_name"] = table_name
        super().__init__(message, "INTROSPECTION_ERROR", details)


class CatalogError(SchemaDoctorError):
    """Некорректное описание моделей."""

    def __init__(self, message: str, model_name: str = None, field: str = None):
        details: Dict[str, Any] = {}
        if model_name:
            details["model_name"] = model_name
        if field:
            details["field"] = field
        super().__init__(message, "CATALOG_ERROR", details)


class ConfigurationError(SchemaDoctorError):
    """Ошибка конфигурации системы."""

    def __init__(self, message: str, config_key: str = None, config_value: str = None):
        details: Dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = config_value
        super().__init__(message, "CONFIGURATION_ERROR", details)


class SchemaFileNotFoundError(SchemaDoctorError):
    """Входной файл не найден или не читается."""

    def __init__(self, file_path: str, reason: str = None):
        message = f"Не удалось прочитать файл {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message, "FILESYSTEM_ERROR", {"file_path": file_path})


def handle_exception(exception: Exception) -> dict:
    if isinstance(exception, SchemaDoctorError):
        return exception.to_dict()
    return {
        "error": str(exception),
        "code": "UNKNOWN_ERROR",
        "details": {
            "exception_type": exception.__class__.__name__,
        },
    }
