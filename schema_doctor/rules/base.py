"""
Базовый класс для правил сверки схемы и моделей.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..core.orm import ModelDescriptor
from ..introspection.base import SchemaIntrospector

logger = logging.getLogger(__name__)


class FindingLevel(Enum):
    """Уровни критичности находок."""
    CRITICAL = "critical"  # Блокирует слияние
    HIGH = "high"          # Высокий риск, требует внимания
    MEDIUM = "medium"      # Средний риск, рекомендуется проверить
    LOW = "low"            # Низкий риск, информационное сообщение


class BaseRule(ABC):
    """
    Абстрактный базовый класс для всех правил.

    Правило получает список моделей и источник сведений о схеме и
    возвращает список находок (dict) через problem().
    """

    RULE_ID: str = ""
    RULE_NAME: str = ""
    RULE_DESCRIPTION: str = ""
    DEFAULT_LEVEL: FindingLevel = FindingLevel.MEDIUM

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = dict(config or {})
        self._init_config()

    def _init_config(self) -> None:
        defaults = {
            "enabled": True,
            "level": self.DEFAULT_LEVEL.value,
            "max_reports_per_rule": None,  # None - без ограничения
            "include_details": True,
            "ignore_models": [],
            "ignore_attributes": [],
        }
        for k, v in defaults.items():
            self.config.setdefault(k, v)

    @abstractmethod
    def apply(
        self,
        models: Sequence[ModelDescriptor],
        introspector: SchemaIntrospector,
    ) -> List[Dict[str, Any]]:
        """
        Применяет правило.
        Возвращает список находок (list[dict]).
        """
        raise NotImplementedError

    @abstractmethod
    def message(self, **details: Any) -> str:
        raise NotImplementedError

    def problem(self, **details: Any) -> Dict[str, Any]:
        """Оформляет одну находку правила."""
        return {
            "rule": self.RULE_ID,
            "rule_name": self.RULE_NAME,
            "level": self.level,
            "message": self.message(**details),
            "details": dict(details),
        }

    # ==========
    # ИСКЛЮЧЕНИЯ ИЗ ПРОВЕРКИ
    # ==========

    def is_model_ignored(self, model_name: str) -> bool:
        return model_name in (self.config.get("ignore_models") or [])

    def is_attribute_ignored(self, model_name: str, attribute: str) -> bool:
        return f"{model_name}.{attribute}" in (self.config.get("ignore_attributes") or [])

    def post_process_conflicts(self, conflicts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Унификация и постобработка: лимит max_reports_per_rule, level/rule/rule_name.
        Возвращает только реальные находки; сколько их было до усечения,
        видно по len(conflicts).
        """
        if not conflicts:
            return []

        include_details = bool(self.config.get("include_details", True))
        default_level = self.level
        max_reports = self.config.get("max_reports_per_rule")

        trimmed = list(conflicts)
        if max_reports is not None and len(conflicts) > int(max_reports):
            trimmed = trimmed[:int(max_reports)]
            logger.info("%s: обнаружено %d находок, в отчёт попадут первые %d",
                        self.RULE_ID, len(conflicts), max_reports)

        for c in trimmed:
            c.setdefault("rule", self.RULE_ID)
            c.setdefault("rule_name", self.RULE_NAME)
            c.setdefault("level", default_level)

            if not include_details:
                c.pop("details", None)

        return trimmed

    @property
    def level(self) -> str:
        return self.config.get("level", self.DEFAULT_LEVEL.value)

    def is_enabled(self) -> bool:
        return bool(self.config.get("enabled", True))

    def validate(self) -> bool:
        return bool(self.RULE_ID and self.RULE_NAME and self.RULE_DESCRIPTION)

    def __repr__(self) -> str:
        return f"<Rule {self.RULE_ID}: {self.__class__.__name__}>"
